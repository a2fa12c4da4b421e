"""
Contratos - cadastro com precificação dos serviços, geração de parcelas e
cronograma, listagem e exclusão.
"""
from dataclasses import replace

import pandas as pd
import streamlit as st
from datetime import date

from eprojet.config import format_currency
from eprojet.datas import formatar_data, adicionar_meses
from eprojet.estado import adicionar_contrato, atualizar_contrato, excluir_contrato
from eprojet.i18n import t
from eprojet.constants import METODOS_CALCULO, METODO_METRAGEM, METODO_HORA
from eprojet.models import Contrato, ServicoContrato, StatusContrato, PrecoServico
from eprojet.planejamento import calcular_financeiro, percentual_concluido
from eprojet.precificacao import calcular_valor_servico, metodo_padrao
from eprojet.regras_negocio import indexar_cronogramas
from eprojet.ui.sessao import obter_dados, salvar


def render_contratos():
    """Renderiza a página de contratos."""
    st.markdown(f'<div class="main-header"><h1>{t("contracts.title")}</h1></div>', unsafe_allow_html=True)

    tab_lista, tab_novo = st.tabs([t("contracts.tabs.list"), t("contracts.tabs.new")])
    with tab_lista:
        _render_lista()
    with tab_novo:
        _render_formulario()


# ============================================================================
# NOVO CONTRATO
# ============================================================================

def _render_formulario():
    dados = obter_dados()
    catalogo = {s.nome: s for s in dados.precos_servicos + dados.valores_hora}

    col1, col2 = st.columns(2)
    with col1:
        cliente = st.text_input(t("contracts.form.client"), key="contrato_cliente")
        projeto = st.text_input(t("contracts.form.project"), key="contrato_projeto")
        tipo_servico = st.selectbox(
            t("contracts.form.service_type"),
            options=[s.nome for s in dados.precos_servicos] or [""],
            key="contrato_tipo"
        )
    with col2:
        data_contrato = st.date_input(t("contracts.form.date"), value=date.today(), key="contrato_data")
        duracao = st.number_input(
            t("contracts.form.duration"), min_value=1, max_value=60, value=6, step=1, key="contrato_duracao"
        )
        inicio_cronograma = st.date_input(
            t("contracts.form.schedule_start"), value=date.today(), key="contrato_inicio_cronograma"
        )

    nomes = st.multiselect(t("contracts.form.services"), list(catalogo.keys()), key="contrato_servicos")
    servicos = tuple(
        _render_servico(i, catalogo[nome], dados, int(duracao))
        for i, nome in enumerate(nomes, start=1)
    )
    soma_servicos = round(sum(s.valor for s in servicos), 2)

    # Sem key: o valor sugerido acompanha a soma dos serviços
    valor_total = st.number_input(
        t("contracts.form.total_value"), min_value=0.0, value=float(soma_servicos), step=500.0, format="%.2f"
    )

    st.markdown(f"**{t('contracts.form.payment_plan')}**")
    col3, col4, col5 = st.columns(3)
    with col3:
        pct_entrada = st.slider(t("contracts.form.down_payment_pct"), 0, 100, 30, step=5, key="contrato_pct")
        data_entrada = st.date_input(t("contracts.form.down_payment_date"), value=date.today(), key="contrato_data_entrada")
    with col4:
        num_parcelas = st.number_input(
            t("contracts.form.installments"), min_value=0, max_value=60, value=3, step=1, key="contrato_num_parcelas"
        )
        data_primeira = st.date_input(
            t("contracts.form.first_installment_date"),
            value=adicionar_meses(date.today(), 1),
            key="contrato_data_primeira"
        )

    entrada, valor_parcela = calcular_financeiro(valor_total, pct_entrada, int(num_parcelas))
    with col5:
        st.metric(t("contracts.form.down_payment"), format_currency(entrada))
        st.metric(t("contracts.form.installment_value"), format_currency(valor_parcela))

    if st.button(t("contracts.form.submit"), type="primary", use_container_width=True):
        contrato = Contrato(
            id=0,
            cliente=cliente.strip(),
            projeto=projeto.strip(),
            valor_total=valor_total,
            status=StatusContrato.ATIVO,
            data=data_contrato,
            duracao_meses=int(duracao),
            tipo_servico=tipo_servico,
            servicos=servicos,
            entrada=entrada,
            num_parcelas=int(num_parcelas),
            valor_parcela=valor_parcela,
            data_entrada=data_entrada,
            data_primeira_parcela=data_primeira,
        )
        try:
            novo = adicionar_contrato(dados, contrato, inicio_cronograma)
        except ValueError as e:
            st.error(str(e))
            return
        salvar(novo)
        st.success(t("contracts.form.success", projeto=contrato.projeto))
        st.rerun()


def _render_servico(indice: int, servico: PrecoServico, dados, duracao: int) -> ServicoContrato:
    """Linha de um serviço: método de cálculo, área/horas e valor."""
    col_metodo, col_qtd, col_valor = st.columns(3)
    with col_metodo:
        metodo = st.selectbox(
            f"{servico.nome} - {t('contracts.pricing.method')}",
            options=METODOS_CALCULO,
            index=METODOS_CALCULO.index(metodo_padrao(servico)),
            format_func=lambda m: t(f"contracts.pricing.methods.{m}"),
            key=f"servico_metodo_{indice}_{servico.nome}"
        )
    area = horas = 0.0
    with col_qtd:
        if metodo == METODO_METRAGEM:
            area = st.number_input(
                t("contracts.pricing.area"), min_value=0.0, step=10.0, key=f"servico_area_{indice}_{servico.nome}"
            )
        elif metodo == METODO_HORA:
            horas = st.number_input(
                t("contracts.pricing.hours"), min_value=0.0, step=1.0, key=f"servico_horas_{indice}_{servico.nome}"
            )

    calculado = calcular_valor_servico(
        servico, metodo, duracao, dados.valores_hora, dados.faixas_medicao, area=area, horas=horas
    )
    with col_valor:
        if calculado is None:
            valor = st.number_input(
                t("contracts.pricing.value"), min_value=0.0, step=100.0, format="%.2f",
                key=f"servico_valor_{indice}_{servico.nome}"
            )
        else:
            valor = calculado
            st.metric(t("contracts.pricing.value"), format_currency(valor))

    return ServicoContrato(
        id=indice,
        nome_servico=servico.nome,
        metodo_calculo=metodo,
        valor=float(valor),
        area=area or None,
        horas=horas or None,
    )


# ============================================================================
# LISTAGEM
# ============================================================================

def _render_lista():
    dados = obter_dados()
    if not dados.contratos:
        st.info(t("contracts.empty"))
        return

    indice = indexar_cronogramas(dados.cronogramas)
    data = []
    for contrato in dados.contratos:
        cronograma = indice.get(contrato.id)
        progresso = percentual_concluido(cronograma) if cronograma else 0.0
        data.append({
            t("columns.client"): contrato.cliente,
            t("columns.project"): contrato.projeto,
            t("contracts.columns.service_type"): contrato.tipo_servico,
            t("columns.date"): formatar_data(contrato.data),
            t("columns.value"): format_currency(contrato.valor_total),
            t("columns.status"): contrato.status.value,
            t("contracts.columns.progress"): progresso,
        })

    df = pd.DataFrame(data)
    st.dataframe(
        df,
        use_container_width=True,
        hide_index=True,
        column_config={
            t("contracts.columns.progress"): st.column_config.ProgressColumn(
                t("contracts.columns.progress"), format="%.0f%%", min_value=0, max_value=100
            )
        }
    )

    st.markdown("---")
    opcoes = {f"{c.cliente} - {c.projeto}": c for c in dados.contratos}
    rotulo = st.selectbox(t("contracts.actions.select"), list(opcoes.keys()), key="contrato_acao_sel")
    contrato = opcoes[rotulo]

    col_status, col_excluir = st.columns(2)
    with col_status:
        status = st.selectbox(
            t("contracts.actions.status"),
            options=list(StatusContrato),
            index=list(StatusContrato).index(contrato.status),
            format_func=lambda s: s.value,
            key=f"contrato_status_{contrato.id}"
        )
        if status != contrato.status:
            salvar(atualizar_contrato(dados, replace(contrato, status=status)))
            st.rerun()
    with col_excluir:
        confirmar = st.checkbox(t("contracts.actions.confirm_delete"), key=f"contrato_confirma_{contrato.id}")
        if st.button(t("contracts.actions.delete"), disabled=not confirmar, use_container_width=True):
            salvar(excluir_contrato(dados, contrato.id))
            st.success(t("contracts.actions.deleted"))
            st.rerun()
