"""
Sidebar - recebimentos do ano e idioma.
"""
import plotly.graph_objects as go
import streamlit as st
from datetime import date

from eprojet.config import format_currency, load_config, save_config
from eprojet.constants import BG_TRANSPARENT, PRIMARY_COLOR
from eprojet.i18n import t, get_language, set_language, get_available_languages, get_language_name
from eprojet.regras_negocio import recebimentos_mensais
from eprojet.ui.sessao import obter_dados


def render_sidebar():
    """Renderiza o gráfico de recebimentos mensais e o seletor de idioma."""
    with st.sidebar:
        st.markdown(f"## {t('sidebar.title')}")
        st.markdown("---")

        dados = obter_dados()
        ano = date.today().year
        serie = recebimentos_mensais(dados.parcelas, dados.outros_pagamentos, ano)
        total = sum(m["valor"] for m in serie)

        st.markdown(f"**{t('sidebar.monthly_revenue', ano=ano)}**")
        st.metric(t("sidebar.total_year"), format_currency(total))

        fig = go.Figure(go.Bar(
            x=[m["mes"] for m in serie],
            y=[m["valor"] for m in serie],
            marker_color=PRIMARY_COLOR,
            hovertemplate="%{x}: %{y:,.2f}<extra></extra>",
        ))
        fig.update_layout(
            height=220,
            margin=dict(l=0, r=0, t=0, b=0),
            paper_bgcolor=BG_TRANSPARENT,
            plot_bgcolor=BG_TRANSPARENT,
            yaxis=dict(showgrid=False, showticklabels=False),
        )
        st.plotly_chart(fig, use_container_width=True)

        st.markdown("---")

        idiomas = get_available_languages()
        atual = get_language()
        idioma = st.selectbox(
            t("sidebar.language"),
            options=idiomas,
            index=idiomas.index(atual) if atual in idiomas else 0,
            format_func=get_language_name,
            key="sidebar_idioma"
        )
        if idioma != atual:
            config = load_config()
            config["language"] = idioma
            save_config(config)
            set_language(idioma)
            st.rerun()
