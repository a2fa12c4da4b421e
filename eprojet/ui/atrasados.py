"""
Parcelas atrasadas - lista das pendências vencidas com atalho para cobrança.
"""
import pandas as pd
import streamlit as st
from datetime import date

from eprojet.config import format_currency
from eprojet.datas import formatar_data
from eprojet.i18n import t
from eprojet.regras_negocio import resumo_atrasos
from eprojet.ui.sessao import obter_dados


def render_atrasados():
    st.markdown(f'<div class="main-header"><h1>{t("late.title")}</h1></div>', unsafe_allow_html=True)

    dados = obter_dados()
    resumo = resumo_atrasos(dados.parcelas, date.today())

    col1, col2 = st.columns(2)
    col1.metric(t("late.total"), format_currency(resumo["total"]))
    col2.metric(t("late.count_label"), t("late.count", count=resumo["quantidade"]))

    if not resumo["itens"]:
        st.success(t("late.empty"))
        return

    data = []
    for parcela, dias in resumo["itens"]:
        data.append({
            t("columns.client"): parcela.cliente,
            t("columns.project"): parcela.projeto,
            t("columns.installment"): parcela.parcela,
            t("columns.due_date"): formatar_data(parcela.vencimento),
            t("columns.value"): format_currency(parcela.valor),
            t("columns.days_late"): dias,
        })

    df = pd.DataFrame(data)
    st.dataframe(df, use_container_width=True, hide_index=True)

    st.markdown("---")

    # Atalho para redigir a cobrança de uma das parcelas
    from eprojet.ui.cobranca import render_cobranca
    render_cobranca([p for p, _ in resumo["itens"]], chave="atrasados")
