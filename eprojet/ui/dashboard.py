"""
Painel principal - indicadores do mês, situação dos projetos, pontos de atenção
e lembretes pendentes.
"""
import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from datetime import date

from eprojet.config import format_currency
from eprojet.constants import CORES_SITUACAO, BG_TRANSPARENT, ERROR_COLOR, SUCCESS_COLOR, WARNING_COLOR
from eprojet.datas import formatar_data
from eprojet.estado import registrar_pagamento_parcela, adicionar_outro_pagamento
from eprojet.i18n import t
from eprojet.models import TipoPontoAtencao
from eprojet.regras_negocio import (
    resumo_mes_atual, distribuicao_status_projetos,
    calcular_pontos_atencao, pontos_atencao_financeiros, lembretes_pendentes
)
from eprojet.ui.lembretes import situacao_lembrete
from eprojet.ui.sessao import obter_dados, salvar, limiares
from eprojet.ui.styles import kpi_card


ICONES_PONTO = {
    TipoPontoAtencao.PAGAMENTO: "💰",
    TipoPontoAtencao.ETAPA: "🗂️",
    TipoPontoAtencao.CONTRATO: "📄",
}


def render_dashboard():
    """Renderiza o painel principal."""
    st.markdown(f'<div class="main-header"><h1>{t("dashboard.title")}</h1></div>', unsafe_allow_html=True)

    dados = obter_dados()
    hoje = date.today()
    dias = limiares()

    # ============================================================================
    # CARTÕES DO MÊS
    # ============================================================================
    resumo = resumo_mes_atual(dados.parcelas, dados.outros_pagamentos, hoje)
    col1, col2, col3 = st.columns(3)
    with col1:
        kpi_card(st, t("dashboard.cards.received"), format_currency(resumo["recebido_mes"]), SUCCESS_COLOR)
    with col2:
        kpi_card(st, t("dashboard.cards.to_receive"), format_currency(resumo["a_receber_mes"]), WARNING_COLOR)
    with col3:
        kpi_card(st, t("dashboard.cards.late"), format_currency(resumo["total_atrasado"]), ERROR_COLOR)

    st.markdown("---")

    col_grafico, col_pontos = st.columns([1, 2])

    with col_grafico:
        st.subheader(t("dashboard.status_chart.title"))
        contagem = distribuicao_status_projetos(dados.contratos, dados.cronogramas, hoje)
        if sum(contagem.values()) == 0:
            st.info(t("dashboard.status_chart.empty"))
        else:
            st.plotly_chart(_criar_grafico_status(contagem), use_container_width=True)

    with col_pontos:
        st.subheader(t("dashboard.attention.title"))
        pontos = calcular_pontos_atencao(
            dados.contratos, dados.parcelas, dados.cronogramas, hoje,
            dias_alerta_etapa=dias["etapa"],
            dias_alerta_contrato=dias["contrato"]
        )
        _render_pontos(pontos, t("dashboard.attention.empty"))

        st.subheader(t("dashboard.financial.title"))
        _render_pontos(
            pontos_atencao_financeiros(dados.parcelas, hoje, dias["parcela"]),
            t("dashboard.financial.empty")
        )

        st.subheader(t("dashboard.reminders.title"))
        _render_lembretes(lembretes_pendentes(dados.lembretes, hoje))

    st.markdown("---")

    col_pag, col_outro = st.columns(2)
    with col_pag:
        _render_registro_pagamento()
    with col_outro:
        _render_outro_pagamento()

    st.markdown("---")
    _render_parcelas_pendentes()


def _criar_grafico_status(contagem: dict) -> go.Figure:
    rotulos = [r for r, v in contagem.items() if v > 0]
    fig = go.Figure(data=[go.Pie(
        labels=rotulos,
        values=[contagem[r] for r in rotulos],
        hole=0.45,
        marker=dict(colors=[CORES_SITUACAO[r] for r in rotulos]),
        textinfo="value+percent",
    )])
    fig.update_layout(
        height=300,
        margin=dict(l=10, r=10, t=10, b=10),
        paper_bgcolor=BG_TRANSPARENT,
        plot_bgcolor=BG_TRANSPARENT,
        legend=dict(orientation="h", y=-0.1),
    )
    return fig


def _render_pontos(pontos, mensagem_vazia: str):
    if not pontos:
        st.success(mensagem_vazia)
        return

    for ponto in pontos:
        if ponto.dias_restantes < 0:
            classe = "ponto-atrasado"
        elif ponto.dias_restantes <= 3:
            classe = "ponto-urgente"
        else:
            classe = "ponto-ok"
        st.markdown(
            f'{ICONES_PONTO[ponto.tipo]} <span class="{classe}">{ponto.cliente}</span> '
            f'<span class="ponto-descricao">{ponto.descricao}</span>',
            unsafe_allow_html=True
        )


def _render_lembretes(pendentes, limite: int = 5):
    """Próximos lembretes pendentes (atrasados primeiro)."""
    if not pendentes:
        st.success(t("dashboard.reminders.empty"))
        return

    for lembrete, dias in pendentes[:limite]:
        classe = "ponto-atrasado" if dias < 0 else ("ponto-urgente" if dias <= 3 else "ponto-ok")
        st.markdown(
            f'📝 <span class="{classe}">{lembrete.cliente}</span> '
            f'<span class="ponto-descricao">{lembrete.descricao} ({situacao_lembrete(dias)})</span>',
            unsafe_allow_html=True
        )
    if len(pendentes) > limite:
        st.caption(t("dashboard.reminders.more", count=len(pendentes) - limite))


def _render_registro_pagamento():
    """Formulário de baixa de parcela, com valor recebido opcional."""
    st.subheader(t("dashboard.payment.title"))
    dados = obter_dados()
    pendentes = sorted((p for p in dados.parcelas if p.pendente), key=lambda p: p.vencimento)

    if not pendentes:
        st.info(t("dashboard.payment.none_pending"))
        return

    opcoes = {
        f"{p.cliente} - {p.projeto} ({p.parcela}) - {formatar_data(p.vencimento)} - {format_currency(p.valor)}": p
        for p in pendentes
    }

    with st.form("form_registro_pagamento", clear_on_submit=True):
        rotulo = st.selectbox(t("dashboard.payment.installment"), list(opcoes.keys()))
        data_pagamento = st.date_input(t("dashboard.payment.date"), value=date.today())
        informar_valor = st.checkbox(t("dashboard.payment.custom_value"))
        valor = st.number_input(t("dashboard.payment.value"), min_value=0.0, step=100.0, format="%.2f")
        enviado = st.form_submit_button(t("dashboard.payment.submit"), use_container_width=True)

    if enviado:
        parcela = opcoes[rotulo]
        try:
            novo = registrar_pagamento_parcela(
                dados, parcela.id, data_pagamento, valor if informar_valor else None
            )
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.success(t("dashboard.payment.success", parcela=parcela.parcela, cliente=parcela.cliente))
        st.rerun()


def _render_outro_pagamento():
    """Recebimento avulso, sem parcela associada."""
    st.subheader(t("dashboard.other_payment.title"))
    with st.form("form_outro_pagamento", clear_on_submit=True):
        descricao = st.text_input(t("dashboard.other_payment.description"))
        data_pagamento = st.date_input(t("dashboard.other_payment.date"), value=date.today())
        valor = st.number_input(t("dashboard.other_payment.value"), min_value=0.0, step=100.0, format="%.2f")
        enviado = st.form_submit_button(t("dashboard.other_payment.submit"), use_container_width=True)

    if enviado:
        try:
            novo = adicionar_outro_pagamento(obter_dados(), descricao, data_pagamento, valor)
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.success(t("dashboard.other_payment.success"))
        st.rerun()


def _render_parcelas_pendentes():
    st.subheader(t("dashboard.pending.title"))
    dados = obter_dados()
    clientes = sorted({p.cliente for p in dados.parcelas if p.pendente})
    todos = t("common.all")
    filtro = st.selectbox(t("dashboard.pending.filter"), [todos] + clientes, key="dashboard_filtro_cliente")

    pendentes = [
        p for p in dados.parcelas
        if p.pendente and (filtro == todos or p.cliente == filtro)
    ]
    if not pendentes:
        st.info(t("dashboard.pending.empty"))
        return

    pendentes.sort(key=lambda p: p.vencimento)
    data = [
        {
            t("columns.client"): p.cliente,
            t("columns.project"): p.projeto,
            t("columns.installment"): p.parcela,
            t("columns.due_date"): formatar_data(p.vencimento),
            t("columns.value"): format_currency(p.valor),
        }
        for p in pendentes
    ]
    df = pd.DataFrame(data)
    st.dataframe(df, use_container_width=True, hide_index=True)
