"""
Análises - rentabilidade por tipo de serviço, recebimentos do ano e disciplinas.
"""
import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from datetime import date

from eprojet.config import format_currency
from eprojet.constants import BG_TRANSPARENT, CORES_CATEGORIAS, PRIMARY_COLOR
from eprojet.i18n import t
from eprojet.regras_negocio import calcular_rentabilidade
from eprojet.ui.sessao import obter_dados
from eprojet.ui.styles import kpi_card


def render_analises():
    """Renderiza a página de análises."""
    st.markdown(f'<div class="main-header"><h1>{t("analytics.title")}</h1></div>', unsafe_allow_html=True)

    dados = obter_dados()
    rentabilidade = calcular_rentabilidade(dados.contratos, dados.cronogramas, date.today())

    if not rentabilidade["categorias"]:
        st.info(t("analytics.empty"))
        return

    # ============================================================================
    # DESTAQUES
    # ============================================================================
    mais_rentavel = rentabilidade["mais_rentavel"]
    maior_receita = rentabilidade["maior_receita"]

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        kpi_card(st, t("analytics.cards.total_revenue"), format_currency(rentabilidade["receita_total"]))
    with col2:
        kpi_card(st, t("analytics.cards.average_ticket"), format_currency(rentabilidade["ticket_medio_geral"]))
    with col3:
        kpi_card(st, t("analytics.cards.most_profitable"), mais_rentavel.nome)
    with col4:
        kpi_card(st, t("analytics.cards.active_contracts"), str(rentabilidade["contratos_ativos"]))

    st.markdown("")
    st.info(t(
        "analytics.headline",
        mais_rentavel=mais_rentavel.nome,
        ticket=format_currency(mais_rentavel.ticket_medio),
        maior_receita=maior_receita.nome,
        receita=format_currency(maior_receita.receita),
    ))

    st.markdown("---")

    col_grafico, col_disciplinas = st.columns([2, 1])
    with col_grafico:
        st.subheader(t("analytics.chart.title"))
        st.plotly_chart(_criar_grafico_categorias(rentabilidade["categorias"]), use_container_width=True)

    with col_disciplinas:
        st.subheader(t("analytics.disciplines.title"))
        st.metric(t("analytics.disciplines.architecture"), rentabilidade["arquitetura"])
        st.metric(t("analytics.disciplines.interiors"), rentabilidade["interiores"])

    st.subheader(t("analytics.table.title"))
    data = []
    for categoria in rentabilidade["categorias"]:
        data.append({
            t("analytics.table.category"): categoria.nome,
            t("analytics.table.count"): categoria.quantidade,
            t("analytics.table.revenue"): format_currency(categoria.receita),
            t("analytics.table.ticket"): format_currency(categoria.ticket_medio),
            t("analytics.table.efficiency"): f"{categoria.eficiencia:.0f}%",
        })
    df = pd.DataFrame(data)
    st.dataframe(df, use_container_width=True, hide_index=True)


def _criar_grafico_categorias(categorias) -> go.Figure:
    """Barras de ticket médio por categoria."""
    nomes = [c.nome for c in categorias]
    cores = [CORES_CATEGORIAS[i % len(CORES_CATEGORIAS)] for i in range(len(categorias))]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=nomes,
        y=[c.ticket_medio for c in categorias],
        marker_color=cores,
        name=t("analytics.table.ticket"),
        hovertemplate="%{x}<br>%{y:,.2f}<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        x=nomes,
        y=[c.eficiencia for c in categorias],
        yaxis="y2",
        mode="lines+markers",
        line=dict(color=PRIMARY_COLOR, width=2),
        name=t("analytics.table.efficiency"),
    ))
    fig.update_layout(
        height=380,
        margin=dict(l=10, r=10, t=30, b=10),
        paper_bgcolor=BG_TRANSPARENT,
        plot_bgcolor=BG_TRANSPARENT,
        yaxis=dict(title=t("analytics.table.ticket")),
        yaxis2=dict(title="%", overlaying="y", side="right", range=[0, 105]),
        legend=dict(orientation="h", y=1.12),
    )
    return fig
