"""
Planejamento de contratos.
Gera o cronograma financeiro (entrada + parcelas mensais) e o cronograma de
etapas em dias úteis, e deriva a visão de progresso (Gantt) de um cronograma.
"""
from dataclasses import replace
from datetime import date
from typing import List, Optional, Sequence, Tuple

from eprojet.models import (
    Contrato, Parcela, Cronograma, Etapa, EtapaProgresso, ProgressoProjeto,
    ItemTemplateEtapa, StatusEtapa
)
from eprojet.datas import adicionar_meses, adicionar_dias_uteis
from eprojet.constants import GRUPOS_GANTT, TEMPLATE_ETAPAS_PADRAO, ROTULO_ENTRADA


def template_etapas_padrao() -> Tuple[ItemTemplateEtapa, ...]:
    return tuple(
        ItemTemplateEtapa(id=i, nome=nome, duracao_dias_uteis=duracao, sequencia=i)
        for i, (nome, duracao) in enumerate(TEMPLATE_ETAPAS_PADRAO, start=1)
    )


# ============================================================================
# CRONOGRAMA FINANCEIRO
# ============================================================================

def calcular_financeiro(valor_total: float, pct_entrada: float, num_parcelas: int) -> Tuple[float, float]:
    """
    Divide o valor do contrato em entrada e parcelas iguais.

    Returns:
        (valor da entrada, valor de cada parcela)
    """
    entrada = round(valor_total * pct_entrada / 100, 2)
    restante = valor_total - entrada
    valor_parcela = round(restante / num_parcelas, 2) if num_parcelas > 0 else 0.0
    return entrada, valor_parcela


def gerar_parcelas(contrato: Contrato, primeiro_id: int) -> Tuple[Parcela, ...]:
    """
    Cria as parcelas de um contrato: a entrada (se houver) e `num_parcelas`
    parcelas mensais a partir da data da primeira parcela.
    """
    parcelas = []
    proximo_id = primeiro_id

    if contrato.entrada > 0:
        parcelas.append(Parcela(
            id=proximo_id,
            contrato_id=contrato.id,
            cliente=contrato.cliente,
            projeto=contrato.projeto,
            parcela=ROTULO_ENTRADA,
            vencimento=contrato.data_entrada or contrato.data,
            valor=contrato.entrada,
            valor_previsto=contrato.entrada,
        ))
        proximo_id += 1

    primeira = contrato.data_primeira_parcela or adicionar_meses(contrato.data, 1)
    for numero in range(1, contrato.num_parcelas + 1):
        parcelas.append(Parcela(
            id=proximo_id,
            contrato_id=contrato.id,
            cliente=contrato.cliente,
            projeto=contrato.projeto,
            parcela=f"{numero}/{contrato.num_parcelas}",
            vencimento=adicionar_meses(primeira, numero - 1),
            valor=contrato.valor_parcela,
            valor_previsto=contrato.valor_parcela,
        ))
        proximo_id += 1

    return tuple(parcelas)


# ============================================================================
# CRONOGRAMA DE ETAPAS
# ============================================================================

def recalcular_etapas(etapas: Sequence[Etapa], inicio: Optional[date]) -> Tuple[Etapa, ...]:
    """
    Recalcula início e prazo de cada etapa em dias úteis.

    A primeira etapa começa em `inicio`; cada etapa seguinte começa no dia útil
    após a conclusão (ou, se pendente, o prazo) da anterior. Uma etapa de N
    dias úteis termina N-1 dias úteis depois do início.
    """
    if inicio is None:
        return tuple(etapas)

    calculadas: List[Etapa] = []
    for indice, etapa in enumerate(etapas):
        if indice == 0:
            comeco = inicio
        else:
            anterior = calculadas[indice - 1]
            fim_anterior = anterior.conclusao or anterior.prazo
            comeco = adicionar_dias_uteis(fim_anterior, 1)

        duracao = max(0, etapa.duracao_dias_uteis - 1)
        calculadas.append(replace(etapa, inicio=comeco, prazo=adicionar_dias_uteis(comeco, duracao)))

    return tuple(calculadas)


def gerar_cronograma(
    contrato: Contrato,
    template: Sequence[ItemTemplateEtapa],
    inicio: date,
    cronograma_id: int
) -> Cronograma:
    """Monta o cronograma de um contrato a partir do modelo de etapas."""
    etapas = tuple(
        Etapa(id=i, nome=item.nome, duracao_dias_uteis=item.duracao_dias_uteis)
        for i, item in enumerate(sorted(template, key=lambda t: t.sequencia), start=1)
    )
    return Cronograma(
        id=cronograma_id,
        contrato_id=contrato.id,
        projeto=contrato.projeto,
        cliente=contrato.cliente,
        inicio=inicio,
        etapas=recalcular_etapas(etapas, inicio),
    )


def alterar_conclusao(
    cronograma: Cronograma,
    etapa_id: int,
    conclusao: Optional[date]
) -> Cronograma:
    """
    Marca (ou desmarca, com `conclusao=None`) uma etapa como concluída e
    recalcula as datas das etapas seguintes.

    Raises:
        ValueError: se a etapa não pertence ao cronograma.
    """
    if not any(e.id == etapa_id for e in cronograma.etapas):
        raise ValueError(f"Etapa {etapa_id} não encontrada no cronograma {cronograma.id}.")
    etapas = [
        replace(e, conclusao=conclusao) if e.id == etapa_id else e
        for e in cronograma.etapas
    ]
    return replace(cronograma, etapas=recalcular_etapas(etapas, cronograma.inicio))


# ============================================================================
# PROGRESSO (GANTT)
# ============================================================================

def sincronizar_progresso(cronograma: Cronograma, hoje: date) -> ProgressoProjeto:
    """
    Deriva o progresso agrupado de um cronograma.

    Para cada grupo do Gantt: todas as etapas concluídas -> CONCLUIDA; alguma
    concluída, ou a primeira etapa do grupo já começou -> EM_ANDAMENTO;
    senão (ou sem etapas correspondentes) -> PENDENTE.
    """
    grupos = []
    for nome_grupo, nomes in GRUPOS_GANTT.items():
        etapas = [e for e in cronograma.etapas if e.nome in nomes]
        if not etapas:
            grupos.append(EtapaProgresso(nome_grupo, StatusEtapa.PENDENTE))
            continue

        concluidas = sum(1 for e in etapas if e.concluida)
        if concluidas == len(etapas):
            status = StatusEtapa.CONCLUIDA
        elif concluidas > 0:
            status = StatusEtapa.EM_ANDAMENTO
        elif etapas[0].inicio is not None and etapas[0].inicio <= hoje:
            status = StatusEtapa.EM_ANDAMENTO
        else:
            status = StatusEtapa.PENDENTE
        grupos.append(EtapaProgresso(nome_grupo, status))

    return ProgressoProjeto(
        contrato_id=cronograma.contrato_id,
        projeto=cronograma.projeto,
        cliente=cronograma.cliente,
        etapas=tuple(grupos),
    )


def percentual_concluido(cronograma: Cronograma) -> float:
    """Percentual de etapas concluídas (0-100)."""
    if not cronograma.etapas:
        return 0.0
    return sum(1 for e in cronograma.etapas if e.concluida) / len(cronograma.etapas) * 100
