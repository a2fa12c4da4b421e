"""
Lembretes - tarefas por cliente com data, marcadas como concluídas ou excluídas.
"""
import streamlit as st
from datetime import date

from eprojet.datas import formatar_data
from eprojet.estado import adicionar_lembrete, alternar_lembrete, excluir_lembrete
from eprojet.i18n import t
from eprojet.regras_negocio import lembretes_pendentes, lembretes_concluidos
from eprojet.ui.sessao import obter_dados, salvar


def render_lembretes():
    st.markdown(f'<div class="main-header"><h1>{t("reminders.title")}</h1></div>', unsafe_allow_html=True)

    _render_formulario()
    st.markdown("---")

    dados = obter_dados()
    col_pendentes, col_concluidos = st.columns(2)
    with col_pendentes:
        st.subheader(t("reminders.pending"))
        pendentes = lembretes_pendentes(dados.lembretes, date.today())
        if not pendentes:
            st.info(t("reminders.no_pending"))
        for lembrete, dias in pendentes:
            _render_item(lembrete, situacao_lembrete(dias))
    with col_concluidos:
        st.subheader(t("reminders.done"))
        concluidos = lembretes_concluidos(dados.lembretes)
        if not concluidos:
            st.info(t("reminders.no_done"))
        for lembrete in concluidos:
            _render_item(lembrete, "")


def situacao_lembrete(dias: int) -> str:
    """Texto de prazo de um lembrete pendente."""
    if dias < 0:
        return t("reminders.status.late", dias=abs(dias))
    if dias == 0:
        return t("reminders.status.today")
    return t("reminders.status.upcoming", dias=dias)


def _render_formulario():
    dados = obter_dados()
    if not dados.clientes:
        st.info(t("reminders.no_clients"))
        return

    clientes = {c.nome: c.id for c in sorted(dados.clientes, key=lambda c: c.nome)}
    with st.form("form_lembrete", clear_on_submit=True):
        col1, col2, col3 = st.columns([2, 3, 2])
        with col1:
            nome_cliente = st.selectbox(t("columns.client"), list(clientes.keys()))
        with col2:
            descricao = st.text_input(t("columns.description"), placeholder=t("reminders.placeholder"))
        with col3:
            data_lembrete = st.date_input(t("columns.date"), value=date.today())
        enviado = st.form_submit_button(t("reminders.add"), use_container_width=True)

    if enviado:
        try:
            novo = adicionar_lembrete(dados, clientes[nome_cliente], descricao, data_lembrete)
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.rerun()


def _render_item(lembrete, situacao: str):
    col_check, col_texto, col_excluir = st.columns([1, 8, 1])
    with col_check:
        marcado = st.checkbox(
            " ", value=lembrete.concluido, key=f"lembrete_{lembrete.id}", label_visibility="collapsed"
        )
    with col_texto:
        st.markdown(
            f"**{lembrete.cliente}** - {lembrete.descricao}  \n"
            f"{formatar_data(lembrete.data)} {situacao}"
        )
    with col_excluir:
        excluir = st.button("🗑️", key=f"lembrete_excluir_{lembrete.id}")

    if marcado != lembrete.concluido:
        salvar(alternar_lembrete(obter_dados(), lembrete.id))
        st.rerun()
    if excluir:
        salvar(excluir_lembrete(obter_dados(), lembrete.id))
        st.rerun()
