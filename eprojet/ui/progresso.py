"""
Progresso dos projetos - conclusão de etapas e visão agrupada (Gantt).
"""
import plotly.graph_objects as go
import streamlit as st
from datetime import date

from eprojet.constants import BG_TRANSPARENT, ERROR_COLOR, SUCCESS_COLOR, WARNING_COLOR, TEXT_SECONDARY
from eprojet.datas import formatar_data
from eprojet.estado import concluir_etapa
from eprojet.i18n import t
from eprojet.models import StatusContrato, StatusEtapa
from eprojet.planejamento import percentual_concluido
from eprojet.regras_negocio import classificar_atraso
from eprojet.ui.sessao import obter_dados, salvar, limiares


CORES_STATUS_ETAPA = {
    StatusEtapa.CONCLUIDA: SUCCESS_COLOR,
    StatusEtapa.EM_ANDAMENTO: WARNING_COLOR,
    StatusEtapa.PENDENTE: TEXT_SECONDARY,
}


def render_progresso():
    """Renderiza a página de progresso dos projetos."""
    st.markdown(f'<div class="main-header"><h1>{t("progress.title")}</h1></div>', unsafe_allow_html=True)

    dados = obter_dados()
    ativos = {c.id for c in dados.contratos if c.status == StatusContrato.ATIVO}
    cronogramas = [c for c in dados.cronogramas if c.contrato_id in ativos]

    if not cronogramas:
        st.info(t("progress.empty"))
        return

    progressos = [p for p in dados.progresso_projetos if p.contrato_id in ativos]
    if progressos:
        st.subheader(t("progress.gantt_title"))
        st.plotly_chart(_criar_grafico_gantt(progressos), use_container_width=True)
        st.markdown("---")

    hoje = date.today()
    opcoes = {f"{c.cliente} - {c.projeto}": c for c in cronogramas}
    rotulo = st.selectbox(t("progress.select_project"), list(opcoes.keys()), key="progresso_projeto")
    cronograma = opcoes[rotulo]

    situacao = classificar_atraso(cronograma.etapas, hoje, limiares()["etapa"])
    col1, col2 = st.columns(2)
    col1.metric(t("progress.situation"), situacao.value)
    col2.metric(t("progress.completed"), f"{percentual_concluido(cronograma):.0f}%")
    st.progress(percentual_concluido(cronograma) / 100)

    for etapa in cronograma.etapas:
        col_check, col_nome, col_prazo = st.columns([1, 4, 3])
        with col_check:
            marcada = st.checkbox(
                etapa.nome,
                value=etapa.concluida,
                key=f"etapa_{cronograma.id}_{etapa.id}",
                label_visibility="collapsed"
            )
        with col_nome:
            if etapa.concluida:
                st.markdown(f"~~{etapa.nome}~~ ({formatar_data(etapa.conclusao)})")
            elif etapa.prazo is not None and etapa.prazo < hoje:
                st.markdown(f'<span style="color: {ERROR_COLOR};">{etapa.nome}</span>', unsafe_allow_html=True)
            else:
                st.markdown(etapa.nome)
        with col_prazo:
            st.caption(f"{formatar_data(etapa.inicio)} → {formatar_data(etapa.prazo)}")

        if marcada != etapa.concluida:
            salvar(concluir_etapa(dados, cronograma.id, etapa.id, hoje if marcada else None, hoje))
            st.rerun()


def _criar_grafico_gantt(progressos) -> go.Figure:
    """Matriz projeto x grupo de etapas, colorida pelo status."""
    fig = go.Figure()
    projetos = [f"{p.cliente} - {p.projeto}" for p in progressos]

    for status, cor in CORES_STATUS_ETAPA.items():
        x, y = [], []
        for nome_projeto, progresso in zip(projetos, progressos):
            for etapa in progresso.etapas:
                if etapa.status == status:
                    x.append(etapa.nome)
                    y.append(nome_projeto)
        fig.add_trace(go.Scatter(
            x=x, y=y,
            mode="markers",
            marker=dict(symbol="square", size=28, color=cor),
            name=t(f"progress.status.{status.value}"),
        ))

    fig.update_layout(
        height=max(200, 60 * len(projetos)),
        margin=dict(l=10, r=10, t=10, b=10),
        paper_bgcolor=BG_TRANSPARENT,
        plot_bgcolor=BG_TRANSPARENT,
        legend=dict(orientation="h", y=-0.2),
        xaxis=dict(side="top"),
    )
    return fig
