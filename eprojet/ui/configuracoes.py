"""
Configurações - assinatura das mensagens, limiares de alerta, LLM local e
tabelas de preço.
"""
import pandas as pd
import streamlit as st

from eprojet.config import load_config, save_config, format_currency
from eprojet.constants import TABELAS_PRECO, UNIDADES_SERVICO
from eprojet.estado import salvar_item_tabela, excluir_item_tabela
from eprojet.i18n import t
from eprojet.llm_service import check_ollama_running
from eprojet.models import PrecoServico, FaixaPreco
from eprojet.ui.sessao import obter_dados, salvar


def render_configuracoes():
    st.markdown(f'<div class="main-header"><h1>{t("settings.title")}</h1></div>', unsafe_allow_html=True)

    config = load_config()

    with st.form("form_configuracoes"):
        st.subheader(t("settings.reminder.title"))
        assinatura = st.text_input(t("settings.reminder.signature"), value=config.get("assinatura", ""))

        st.subheader(t("settings.thresholds.title"))
        limiares = config.get("limiares", {})
        col1, col2, col3 = st.columns(3)
        with col1:
            dias_etapa = st.number_input(
                t("settings.thresholds.stage"), min_value=0, max_value=90,
                value=int(limiares.get("dias_alerta_etapa", 7))
            )
        with col2:
            dias_contrato = st.number_input(
                t("settings.thresholds.contract"), min_value=0, max_value=365,
                value=int(limiares.get("dias_alerta_contrato", 30))
            )
        with col3:
            dias_parcela = st.number_input(
                t("settings.thresholds.installment"), min_value=0, max_value=90,
                value=int(limiares.get("dias_alerta_parcela", 7))
            )

        st.subheader(t("settings.llm.title"))
        llm = config.get("llm", {})
        llm_ativo = st.toggle(t("settings.llm.enabled"), value=bool(llm.get("enabled", False)))
        modelo = st.text_input(t("settings.llm.model"), value=llm.get("model", "llama3"))

        enviado = st.form_submit_button(t("common.save"), type="primary")

    if enviado:
        config["assinatura"] = assinatura.strip()
        config["limiares"] = {
            "dias_alerta_etapa": int(dias_etapa),
            "dias_alerta_contrato": int(dias_contrato),
            "dias_alerta_parcela": int(dias_parcela),
        }
        config["llm"] = {**llm, "enabled": llm_ativo, "model": modelo.strip() or "llama3"}
        save_config(config)
        st.success(t("settings.saved"))

    if st.button(t("settings.llm.check")):
        if check_ollama_running():
            st.success(t("settings.llm.running"))
        else:
            st.error(t("settings.llm.not_running"))

    st.markdown("---")
    _render_tabelas_preco()


# ============================================================================
# TABELAS DE PREÇO
# ============================================================================

def _render_tabelas_preco():
    st.subheader(t("settings.pricing.title"))
    dados = obter_dados()

    tabela = st.selectbox(
        t("settings.pricing.table"),
        TABELAS_PRECO,
        format_func=lambda nome: t(f"settings.pricing.tables.{nome}"),
        key="config_tabela_preco"
    )
    itens = getattr(dados, tabela)
    faixas = tabela in ("faixas_medicao", "faixas_extras")

    if itens:
        data = [
            {
                t("settings.pricing.item"): i.faixa if faixas else i.nome,
                t("settings.pricing.price"): format_currency(i.preco) if i.preco is not None else "-",
                t("settings.pricing.unit"): "m²" if faixas else i.unidade,
            }
            for i in itens
        ]
        st.dataframe(pd.DataFrame(data), use_container_width=True, hide_index=True)
    else:
        st.info(t("settings.pricing.empty"))

    novo_rotulo = t("settings.pricing.new")
    opcoes = {} if tabela == "precos_servicos" else {novo_rotulo: None}
    opcoes.update({(i.faixa if faixas else i.nome): i for i in itens})
    if not opcoes:
        return
    rotulo = st.selectbox(t("settings.pricing.select"), list(opcoes.keys()), key=f"config_item_{tabela}")
    atual = opcoes[rotulo]

    with st.form(f"form_preco_{tabela}_{atual.id if atual else 'novo'}"):
        col1, col2 = st.columns(2)
        with col1:
            if faixas:
                texto = st.text_input(t("settings.pricing.range"), value=atual.faixa if atual else "")
            else:
                texto = st.text_input(
                    t("settings.pricing.item"),
                    value=atual.nome if atual else "",
                    disabled=tabela == "precos_servicos"
                )
        with col2:
            preco = st.number_input(
                t("settings.pricing.price"), min_value=0.0, step=10.0, format="%.2f",
                value=float(atual.preco) if atual and atual.preco is not None else 0.0
            )
        unidade = atual.unidade if atual and not faixas else "hora"
        if tabela == "precos_servicos":
            unidade = st.selectbox(
                t("settings.pricing.unit"), UNIDADES_SERVICO,
                index=UNIDADES_SERVICO.index(unidade) if unidade in UNIDADES_SERVICO else 0
            )
        enviado = st.form_submit_button(t("common.save"), type="primary")

    if enviado:
        item_id = atual.id if atual else 0
        if faixas:
            item = FaixaPreco(id=item_id, faixa=texto, preco=preco)
        else:
            # Preço zerado num tipo de serviço = valor definido por projeto
            valor = None if tabela == "precos_servicos" and preco == 0 else preco
            item = PrecoServico(id=item_id, nome=texto, unidade=unidade, preco=valor)
        try:
            novo = salvar_item_tabela(dados, tabela, item)
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.success(t("settings.pricing.saved"))
        st.rerun()

    if atual is not None and tabela != "precos_servicos":
        if st.button(t("settings.pricing.delete"), key=f"config_excluir_{tabela}_{atual.id}"):
            salvar(excluir_item_tabela(dados, tabela, atual.id))
            st.rerun()
