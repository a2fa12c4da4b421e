"""
Despesas do escritório - lançamento, baixa e totais do mês.
"""
import pandas as pd
import streamlit as st
from datetime import date

from eprojet.config import format_currency
from eprojet.constants import MESES_ABREV
from eprojet.datas import formatar_data
from eprojet.estado import adicionar_despesa, marcar_despesa_paga, excluir_despesa
from eprojet.i18n import t
from eprojet.models import CategoriaDespesa, StatusDespesa
from eprojet.regras_negocio import resumo_despesas
from eprojet.ui.sessao import obter_dados, salvar


def render_despesas():
    st.markdown(f'<div class="main-header"><h1>{t("expenses.title")}</h1></div>', unsafe_allow_html=True)

    hoje = date.today()
    col_mes, col_ano = st.columns(2)
    with col_mes:
        mes = st.selectbox(
            t("expenses.month"),
            options=list(range(1, 13)),
            index=hoje.month - 1,
            format_func=lambda m: MESES_ABREV[m - 1],
            key="despesas_mes"
        )
    with col_ano:
        ano = st.number_input(t("expenses.year"), min_value=2000, max_value=2100, value=hoje.year, step=1)

    dados = obter_dados()
    resumo = resumo_despesas(dados.despesas, int(ano), mes)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric(t("expenses.metrics.total"), format_currency(resumo["total"]))
    col2.metric(t("expenses.metrics.fixed"), format_currency(resumo["fixas"]))
    col3.metric(t("expenses.metrics.variable"), format_currency(resumo["variaveis"]))
    col4.metric(t("expenses.metrics.pending"), format_currency(resumo["pendentes"]))

    st.markdown("---")

    with st.expander(t("expenses.form.title")):
        _render_formulario()

    if not resumo["itens"]:
        st.info(t("expenses.empty"))
        return

    data = []
    for despesa in resumo["itens"]:
        data.append({
            "id": despesa.id,
            t("columns.description"): despesa.descricao,
            t("expenses.category"): despesa.categoria.value,
            t("columns.due_date"): formatar_data(despesa.vencimento),
            t("columns.value"): format_currency(despesa.valor),
            t("columns.status"): despesa.status.value,
        })
    df = pd.DataFrame(data)
    st.dataframe(df, use_container_width=True, hide_index=True, column_config={"id": None})

    _render_acoes(resumo["itens"])


def _render_formulario():
    with st.form("form_despesa", clear_on_submit=True):
        descricao = st.text_input(t("columns.description"))
        categoria = st.selectbox(
            t("expenses.category"),
            options=list(CategoriaDespesa),
            format_func=lambda c: c.value
        )
        valor = st.number_input(t("columns.value"), min_value=0.0, step=50.0, format="%.2f")
        vencimento = st.date_input(t("columns.due_date"), value=date.today())
        ja_paga = st.checkbox(t("expenses.form.already_paid"))
        enviado = st.form_submit_button(t("common.save"), use_container_width=True)

    if enviado:
        status = StatusDespesa.PAGO if ja_paga else StatusDespesa.PENDENTE
        try:
            novo = adicionar_despesa(obter_dados(), descricao, categoria, valor, vencimento, status)
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.success(t("expenses.form.success"))
        st.rerun()


def _render_acoes(despesas):
    """Baixa ou exclusão de uma despesa do mês."""
    opcoes = {f"{d.descricao} - {formatar_data(d.vencimento)} - {format_currency(d.valor)}": d for d in despesas}
    rotulo = st.selectbox(t("expenses.actions.select"), list(opcoes.keys()), key="despesas_acao_sel")
    despesa = opcoes[rotulo]

    col_pagar, col_excluir = st.columns(2)
    with col_pagar:
        if st.button(
            t("expenses.actions.mark_paid"),
            disabled=despesa.status == StatusDespesa.PAGO,
            use_container_width=True
        ):
            salvar(marcar_despesa_paga(obter_dados(), despesa.id, date.today()))
            st.rerun()
    with col_excluir:
        if st.button(t("expenses.actions.delete"), type="secondary", use_container_width=True):
            salvar(excluir_despesa(obter_dados(), despesa.id))
            st.rerun()
