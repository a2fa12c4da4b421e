"""
Projeções - recebimentos por mês, por cliente ou apenas os atrasados.
"""
import pandas as pd
import streamlit as st
from datetime import date

from eprojet.config import format_currency
from eprojet.constants import MESES_ABREV
from eprojet.datas import formatar_data
from eprojet.i18n import t
from eprojet.models import ModoVisao
from eprojet.regras_negocio import calcular_visao_financeira, anos_com_movimento
from eprojet.ui.sessao import obter_dados


def render_projecoes():
    """Renderiza a página de projeções financeiras."""
    st.markdown(f'<div class="main-header"><h1>{t("projections.title")}</h1></div>', unsafe_allow_html=True)

    dados = obter_dados()
    hoje = date.today()

    modos = {
        t("projections.modes.month"): ModoVisao.MES,
        t("projections.modes.client"): ModoVisao.CLIENTE,
        t("projections.modes.late"): ModoVisao.ATRASADOS,
    }
    rotulo_modo = st.radio(
        t("projections.mode_label"),
        options=list(modos.keys()),
        horizontal=True,
        key="projecoes_modo"
    )
    modo = modos[rotulo_modo]

    ano = mes = cliente = None
    if modo == ModoVisao.MES:
        col_mes, col_ano = st.columns(2)
        with col_mes:
            mes = st.selectbox(
                t("projections.month"),
                options=list(range(1, 13)),
                index=hoje.month - 1,
                format_func=lambda m: MESES_ABREV[m - 1],
                key="projecoes_mes"
            )
        with col_ano:
            anos = anos_com_movimento(dados.parcelas, dados.outros_pagamentos, hoje)
            ano = st.selectbox(
                t("projections.year"),
                options=anos,
                index=anos.index(hoje.year),
                key="projecoes_ano"
            )
    elif modo == ModoVisao.CLIENTE:
        clientes = sorted({p.cliente for p in dados.parcelas})
        if not clientes:
            st.info(t("projections.no_clients"))
            return
        cliente = st.selectbox(t("projections.client"), clientes, key="projecoes_cliente")

    visao = calcular_visao_financeira(
        dados.parcelas, dados.outros_pagamentos, hoje,
        modo=modo, ano=ano, mes=mes, cliente=cliente
    )

    # ============================================================================
    # MÉTRICAS
    # ============================================================================
    col1, col2, col3, col4 = st.columns(4)
    col1.metric(t("projections.metrics.expected"), format_currency(visao["previsto"]))
    col2.metric(t("projections.metrics.received"), format_currency(visao["recebido"]))
    col3.metric(t("projections.metrics.pending"), format_currency(visao["pendente"]))
    col4.metric(t("projections.metrics.late"), format_currency(visao["atrasado"]))

    st.markdown("---")

    if not visao["itens"]:
        st.info(t("projections.empty"))
        return

    _render_tabela_itens(visao["itens"])


def _render_tabela_itens(itens):
    """Tabela de parcelas e pagamentos avulsos da visão."""
    data = []
    for item in itens:
        data.append({
            t("columns.date"): formatar_data(item.data),
            t("columns.description"): item.descricao,
            t("columns.value"): format_currency(item.valor),
            t("columns.status"): item.status,
        })

    df = pd.DataFrame(data)
    st.dataframe(df, use_container_width=True, hide_index=True)
