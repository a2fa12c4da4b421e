"""
Parceiros - fornecedores e prestadores de obra, com os clientes atendidos.
"""
import pandas as pd
import streamlit as st

from eprojet.constants import TIPOS_PARCEIRO
from eprojet.estado import adicionar_parceiro, atualizar_parceiro, excluir_parceiro
from eprojet.i18n import t
from eprojet.models import Parceiro
from eprojet.ui.sessao import obter_dados, salvar


def render_parceiros():
    st.markdown(f'<div class="main-header"><h1>{t("partners.title")}</h1></div>', unsafe_allow_html=True)

    tab_lista, tab_cadastro = st.tabs([t("partners.tabs.list"), t("partners.tabs.edit")])
    with tab_lista:
        _render_lista()
    with tab_cadastro:
        _render_cadastro()


def _render_lista():
    dados = obter_dados()
    todos = t("common.all")
    filtro = st.selectbox(t("partners.filter"), [todos] + TIPOS_PARCEIRO, key="parceiros_filtro")

    parceiros = [p for p in dados.parceiros if filtro == todos or p.tipo == filtro]
    if not parceiros:
        st.info(t("partners.empty"))
        return

    nomes_clientes = {c.id: c.nome for c in dados.clientes}
    data = [
        {
            t("partners.fields.name"): p.nome,
            t("partners.fields.type"): p.tipo,
            t("partners.fields.contact"): p.contato or "",
            t("partners.fields.phone"): p.telefone or "",
            t("partners.fields.email"): p.email or "",
            t("partners.fields.clients"): ", ".join(nomes_clientes.get(i, "?") for i in p.cliente_ids),
        }
        for p in sorted(parceiros, key=lambda p: p.nome)
    ]
    st.dataframe(pd.DataFrame(data), use_container_width=True, hide_index=True)


def _render_cadastro():
    """Formulário único: novo parceiro ou edição do selecionado."""
    dados = obter_dados()
    novo_rotulo = t("partners.new")
    opcoes = {novo_rotulo: None}
    opcoes.update({f"{p.nome} ({p.tipo})": p for p in dados.parceiros})
    rotulo = st.selectbox(t("partners.select"), list(opcoes.keys()), key="parceiro_sel")
    atual = opcoes[rotulo]

    clientes = {c.nome: c.id for c in sorted(dados.clientes, key=lambda c: c.nome)}
    selecionados = [n for n, i in clientes.items() if atual and i in atual.cliente_ids]
    chave = atual.id if atual else "novo"

    with st.form(f"form_parceiro_{chave}"):
        col1, col2 = st.columns(2)
        with col1:
            nome = st.text_input(t("partners.fields.name"), value=atual.nome if atual else "")
            tipo = st.selectbox(
                t("partners.fields.type"),
                TIPOS_PARCEIRO,
                index=TIPOS_PARCEIRO.index(atual.tipo) if atual and atual.tipo in TIPOS_PARCEIRO else 0
            )
            contato = st.text_input(t("partners.fields.contact"), value=(atual.contato or "") if atual else "")
        with col2:
            telefone = st.text_input(t("partners.fields.phone"), value=(atual.telefone or "") if atual else "")
            email = st.text_input(t("partners.fields.email"), value=(atual.email or "") if atual else "")
            nomes = st.multiselect(t("partners.fields.clients"), list(clientes.keys()), default=selecionados)
        enviado = st.form_submit_button(t("common.save"), type="primary", use_container_width=True)

    if enviado:
        parceiro = Parceiro(
            id=atual.id if atual else 0,
            nome=nome,
            tipo=tipo,
            contato=contato,
            telefone=telefone,
            email=email,
            cliente_ids=tuple(clientes[n] for n in nomes),
        )
        try:
            if atual:
                novo = atualizar_parceiro(dados, parceiro)
            else:
                novo = adicionar_parceiro(dados, parceiro)
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.success(t("partners.saved"))
        st.rerun()

    if atual is not None:
        confirmar = st.checkbox(t("partners.confirm_delete"), key=f"parceiro_confirma_{atual.id}")
        if st.button(t("partners.delete"), disabled=not confirmar):
            salvar(excluir_parceiro(dados, atual.id))
            st.rerun()
