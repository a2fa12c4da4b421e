"""
Regras de negócio do painel.
Implementa: Classificador de Atraso, Pontos de Atenção, Rentabilidade por Categoria,
Visão de Recebimentos (mês / cliente / atrasados), Registro de Pagamento,
resumo de despesas e lembretes pendentes.

Todas as funções são puras: recebem as coleções do documento e a data de
referência ("hoje") e devolvem valores novos, sem alterar a entrada.
"""
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from eprojet.models import (
    Contrato, Parcela, OutroPagamento, Cronograma, Etapa, Despesa, Lembrete,
    StatusContrato, StatusParcela, StatusDespesa, CategoriaDespesa,
    SituacaoProjeto, TipoPontoAtencao, ModoVisao,
    PontoAtencao, RentabilidadeCategoria, ItemExtrato
)
from eprojet.datas import diff_dias, adicionar_meses, limites_mes, no_mes
from eprojet.config import format_currency
from eprojet.constants import (
    DIAS_ALERTA_ETAPA, DIAS_ALERTA_CONTRATO, DIAS_ALERTA_PARCELA,
    CATEGORIA_PADRAO, PALAVRAS_ARQUITETURA, PALAVRAS_INTERIORES, MESES_ABREV
)

# Símbolo fixo nas descrições geradas aqui (evita ler config.json em funções puras)
_SIMBOLO = "R$"


def _moeda(valor: float) -> str:
    return format_currency(valor, symbol=_SIMBOLO)


def indexar_cronogramas(cronogramas: Iterable[Cronograma]) -> Dict[int, Cronograma]:
    """Mapeia contrato_id -> primeiro cronograma encontrado para o contrato."""
    indice = {}
    for cronograma in cronogramas:
        indice.setdefault(cronograma.contrato_id, cronograma)
    return indice


# ============================================================================
# CLASSIFICADOR DE ATRASO
# ============================================================================

def projeto_atrasado(etapas: Sequence[Etapa], hoje: date) -> bool:
    """True se alguma etapa não concluída tem prazo anterior a hoje."""
    return any(
        not etapa.concluida and etapa.prazo is not None and etapa.prazo < hoje
        for etapa in etapas
    )


def classificar_atraso(
    etapas: Sequence[Etapa],
    hoje: date,
    dias_alerta: int = DIAS_ALERTA_ETAPA
) -> SituacaoProjeto:
    """
    Classifica um projeto pelas etapas do cronograma.

    - ATRASADO: alguma etapa pendente com prazo já vencido (interrompe a busca).
    - EM_RISCO: alguma etapa pendente vence em até `dias_alerta` dias; a busca
      continua porque um atraso posterior tem precedência.
    - NO_PRAZO: nenhuma das condições acima.

    Etapas sem prazo não disparam nenhuma condição.
    """
    situacao = SituacaoProjeto.NO_PRAZO
    for etapa in etapas:
        if etapa.concluida or etapa.prazo is None:
            continue
        diferenca = diff_dias(etapa.prazo, hoje)
        if diferenca < 0:
            return SituacaoProjeto.ATRASADO
        if diferenca <= dias_alerta:
            situacao = SituacaoProjeto.EM_RISCO
    return situacao


def classificar_projeto(
    contrato_id: int,
    cronogramas: Iterable[Cronograma],
    hoje: date,
    dias_alerta: int = DIAS_ALERTA_ETAPA
) -> SituacaoProjeto:
    """Classificação de um contrato; sem cronograma o projeto está no prazo."""
    cronograma = indexar_cronogramas(cronogramas).get(contrato_id)
    if cronograma is None:
        return SituacaoProjeto.NO_PRAZO
    return classificar_atraso(cronograma.etapas, hoje, dias_alerta)


def distribuicao_status_projetos(
    contratos: Iterable[Contrato],
    cronogramas: Iterable[Cronograma],
    hoje: date
) -> Dict[str, int]:
    """
    Contagem dos contratos ativos por situação, para o gráfico do painel.

    Um projeto não atrasado está "Em Andamento" se já começou (ou não tem data
    de início) ou se alguma etapa foi concluída.
    """
    contagem = {
        SituacaoProjeto.ATRASADO.value: 0,
        SituacaoProjeto.EM_ANDAMENTO.value: 0,
        SituacaoProjeto.NO_PRAZO.value: 0,
    }
    indice = indexar_cronogramas(cronogramas)

    for contrato in contratos:
        if contrato.status != StatusContrato.ATIVO:
            continue
        situacao = SituacaoProjeto.NO_PRAZO
        cronograma = indice.get(contrato.id)
        if cronograma is not None:
            if projeto_atrasado(cronograma.etapas, hoje):
                situacao = SituacaoProjeto.ATRASADO
            else:
                iniciado = cronograma.inicio is None or cronograma.inicio <= hoje
                alguma_concluida = any(e.concluida for e in cronograma.etapas)
                if iniciado or alguma_concluida:
                    situacao = SituacaoProjeto.EM_ANDAMENTO
        contagem[situacao.value] += 1

    return contagem


# ============================================================================
# PARCELAS EM ATRASO
# ============================================================================

def _em_atraso(parcela: Parcela, hoje: date) -> bool:
    return parcela.status == StatusParcela.PENDENTE and parcela.vencimento < hoje


def dias_em_atraso(parcela: Parcela, hoje: date) -> int:
    """Dias desde o vencimento (0 se ainda não venceu)."""
    return max(0, diff_dias(hoje, parcela.vencimento))


def parcelas_atrasadas(parcelas: Iterable[Parcela], hoje: date) -> List[Tuple[Parcela, int]]:
    """Parcelas pendentes vencidas com os dias de atraso, mais atrasadas primeiro."""
    atrasadas = [(p, dias_em_atraso(p, hoje)) for p in parcelas if _em_atraso(p, hoje)]
    return sorted(atrasadas, key=lambda item: item[1], reverse=True)


def total_atrasado(parcelas: Iterable[Parcela], hoje: date) -> float:
    """Soma dos valores de todas as parcelas pendentes com vencimento anterior a hoje."""
    return sum(p.valor for p in parcelas if _em_atraso(p, hoje))


def resumo_atrasos(parcelas: Iterable[Parcela], hoje: date) -> Dict:
    """Dados da página de parcelas atrasadas."""
    itens = parcelas_atrasadas(parcelas, hoje)
    return {
        "itens": itens,
        "total": sum(p.valor for p, _ in itens),
        "quantidade": len(itens),
    }


# ============================================================================
# PONTOS DE ATENÇÃO
# ============================================================================

def calcular_pontos_atencao(
    contratos: Sequence[Contrato],
    parcelas: Iterable[Parcela],
    cronogramas: Iterable[Cronograma],
    hoje: date,
    dias_alerta_etapa: int = DIAS_ALERTA_ETAPA,
    dias_alerta_contrato: int = DIAS_ALERTA_CONTRATO
) -> List[PontoAtencao]:
    """
    Lista única de pontos de atenção, do mais atrasado/urgente ao menos urgente.

    Fontes:
    1. Parcelas pendentes vencidas (dias_restantes negativo).
    2. Primeira etapa pendente de cada cronograma de contrato ativo, se vence
       entre hoje e hoje + dias_alerta_etapa.
    3. Contratos ativos cuja data + duração vence entre hoje e
       hoje + dias_alerta_contrato.
    """
    pontos = []

    for parcela in parcelas:
        if _em_atraso(parcela, hoje):
            dias = diff_dias(hoje, parcela.vencimento)
            pontos.append(PontoAtencao(
                cliente=parcela.cliente,
                descricao=f"Parcela {parcela.parcela} ({_moeda(parcela.valor)}) vencida há {dias} dia(s).",
                dias_restantes=-dias,
                tipo=TipoPontoAtencao.PAGAMENTO,
            ))

    ativos = {c.id: c for c in contratos if c.status == StatusContrato.ATIVO}

    for cronograma in cronogramas:
        if cronograma.contrato_id not in ativos:
            continue
        proxima = next((e for e in cronograma.etapas if not e.concluida), None)
        if proxima is None or proxima.prazo is None:
            continue
        dias = diff_dias(proxima.prazo, hoje)
        if 0 <= dias <= dias_alerta_etapa:
            pontos.append(PontoAtencao(
                cliente=cronograma.cliente,
                descricao=f'Etapa "{proxima.nome}" vence em {dias} dia(s).',
                dias_restantes=dias,
                tipo=TipoPontoAtencao.ETAPA,
            ))

    for contrato in ativos.values():
        expiracao = adicionar_meses(contrato.data, contrato.duracao_meses)
        dias = diff_dias(expiracao, hoje)
        if 0 <= dias <= dias_alerta_contrato:
            pontos.append(PontoAtencao(
                cliente=contrato.cliente,
                descricao=f'Contrato "{contrato.projeto}" vence em {dias} dia(s).',
                dias_restantes=dias,
                tipo=TipoPontoAtencao.CONTRATO,
            ))

    return sorted(pontos, key=lambda p: p.dias_restantes)


def pontos_atencao_financeiros(
    parcelas: Iterable[Parcela],
    hoje: date,
    dias_alerta: int = DIAS_ALERTA_PARCELA
) -> List[PontoAtencao]:
    """Parcelas pendentes vencidas ou a vencer nos próximos `dias_alerta` dias."""
    pontos = []
    for parcela in parcelas:
        if parcela.status != StatusParcela.PENDENTE:
            continue
        dias = diff_dias(parcela.vencimento, hoje)
        if dias < 0:
            descricao = f"Parcela {parcela.parcela} ({_moeda(parcela.valor)}) vencida."
        elif dias <= dias_alerta:
            descricao = f"Parcela {parcela.parcela} ({_moeda(parcela.valor)}) vence em {dias} dia(s)."
        else:
            continue
        pontos.append(PontoAtencao(parcela.cliente, descricao, dias, TipoPontoAtencao.PAGAMENTO))
    return sorted(pontos, key=lambda p: p.dias_restantes)


# ============================================================================
# RENTABILIDADE POR CATEGORIA
# ============================================================================

def normalizar_categoria(tipo_servico: Optional[str]) -> str:
    """Tipo de serviço em maiúsculas; vazio vira a categoria padrão."""
    nome = (tipo_servico or "").strip().upper()
    return nome or CATEGORIA_PADRAO


def calcular_rentabilidade(
    contratos: Sequence[Contrato],
    cronogramas: Iterable[Cronograma],
    hoje: date
) -> Dict:
    """
    Agrupa os contratos por categoria (tipo de serviço normalizado).

    Para cada categoria: quantidade, receita (soma do valor total), ticket médio
    e eficiência = % de contratos cujo cronograma não tem etapa atrasada.

    Returns:
        Dicionário com:
            'categorias': lista ordenada por ticket médio (desc)
            'mais_rentavel': categoria de maior ticket médio (ou None)
            'maior_receita': categoria de maior receita (ou None)
            'receita_total', 'ticket_medio_geral', 'contratos_ativos'
            'arquitetura', 'interiores': contratos por disciplina
    """
    indice = indexar_cronogramas(cronogramas)
    acumulado = {}

    for contrato in contratos:
        nome = normalizar_categoria(contrato.tipo_servico)
        dados = acumulado.setdefault(nome, {"quantidade": 0, "receita": 0.0, "atrasos": 0})
        dados["quantidade"] += 1
        dados["receita"] += contrato.valor_total or 0.0

        cronograma = indice.get(contrato.id)
        if cronograma is not None and projeto_atrasado(cronograma.etapas, hoje):
            dados["atrasos"] += 1

    categorias = []
    for nome, dados in acumulado.items():
        divisor = dados["quantidade"] or 1
        categorias.append(RentabilidadeCategoria(
            nome=nome,
            quantidade=dados["quantidade"],
            receita=dados["receita"],
            ticket_medio=dados["receita"] / divisor,
            eficiencia=(dados["quantidade"] - dados["atrasos"]) / divisor * 100,
        ))
    categorias.sort(key=lambda c: c.ticket_medio, reverse=True)

    receita_total = sum(c.valor_total for c in contratos)

    return {
        "categorias": categorias,
        "mais_rentavel": max(categorias, key=lambda c: c.ticket_medio) if categorias else None,
        "maior_receita": max(categorias, key=lambda c: c.receita) if categorias else None,
        "receita_total": receita_total,
        "ticket_medio_geral": receita_total / len(contratos) if contratos else 0.0,
        "contratos_ativos": sum(1 for c in contratos if c.status == StatusContrato.ATIVO),
        **contar_disciplinas(contratos),
    }


def contar_disciplinas(contratos: Iterable[Contrato]) -> Dict[str, int]:
    """Quantos contratos incluem serviço de arquitetura e quantos de interiores."""
    arquitetura = 0
    interiores = 0
    for contrato in contratos:
        nomes = [s.nome_servico.upper() for s in contrato.servicos]
        if any(p in n for n in nomes for p in PALAVRAS_ARQUITETURA):
            arquitetura += 1
        if any(p in n for n in nomes for p in PALAVRAS_INTERIORES):
            interiores += 1
    return {"arquitetura": arquitetura, "interiores": interiores}


# ============================================================================
# VISÃO DE RECEBIMENTOS
# ============================================================================

def _item_parcela(parcela: Parcela) -> ItemExtrato:
    return ItemExtrato(
        data=parcela.vencimento,
        descricao=f"{parcela.cliente} ({parcela.projeto}) - {parcela.parcela}",
        valor=parcela.valor,
        status=parcela.status.value,
        tipo="parcela",
        parcela_id=parcela.id,
    )


def _item_avulso(pagamento: OutroPagamento) -> ItemExtrato:
    return ItemExtrato(
        data=pagamento.data_pagamento,
        descricao=pagamento.descricao,
        valor=pagamento.valor,
        status="Recebido",
        tipo="avulso",
    )


def calcular_visao_financeira(
    parcelas: Sequence[Parcela],
    outros_pagamentos: Sequence[OutroPagamento],
    hoje: date,
    modo: ModoVisao = ModoVisao.MES,
    ano: Optional[int] = None,
    mes: Optional[int] = None,
    cliente: Optional[str] = None
) -> Dict:
    """
    Totais e extrato da tela de projeções.

    Modos:
    - MES: parcelas com vencimento no mês (previsto / pendente no mês); recebido
      soma parcelas e avulsos pagos no mês, independente do vencimento.
    - CLIENTE: todo o histórico do cliente, totais acumulados.
    - ATRASADOS: apenas parcelas pendentes vencidas; recebido é sempre zero.

    Returns:
        Dict com 'previsto', 'recebido', 'pendente', 'atrasado' e 'itens'
        (extrato ordenado por data).

    Raises:
        ValueError: se faltar o mês/ano (modo MES) ou o cliente (modo CLIENTE).
    """
    previsto = recebido = pendente = 0.0
    itens = []

    if modo == ModoVisao.MES:
        if ano is None or mes is None:
            raise ValueError("Modo mensal exige ano e mês.")
        inicio, fim = limites_mes(ano, mes)
        for parcela in parcelas:
            if inicio <= parcela.vencimento <= fim:
                itens.append(_item_parcela(parcela))
                previsto += parcela.valor
                if parcela.pendente:
                    pendente += parcela.valor
            if no_mes(parcela.data_pagamento, ano, mes):
                recebido += parcela.valor
        for pagamento in outros_pagamentos:
            if no_mes(pagamento.data_pagamento, ano, mes):
                itens.append(_item_avulso(pagamento))
                previsto += pagamento.valor
                recebido += pagamento.valor
        atrasado = total_atrasado(parcelas, hoje)

    elif modo == ModoVisao.CLIENTE:
        if not cliente:
            raise ValueError("Modo por cliente exige o nome do cliente.")
        do_cliente = [p for p in parcelas if p.cliente == cliente]
        for parcela in do_cliente:
            itens.append(_item_parcela(parcela))
            previsto += parcela.valor
            if parcela.pendente:
                pendente += parcela.valor
            else:
                recebido += parcela.valor
        atrasado = total_atrasado(do_cliente, hoje)

    else:
        for parcela in parcelas:
            if _em_atraso(parcela, hoje):
                itens.append(_item_parcela(parcela))
                previsto += parcela.valor
        pendente = atrasado = previsto

    itens.sort(key=lambda item: item.data)
    return {
        "previsto": previsto,
        "recebido": recebido,
        "pendente": pendente,
        "atrasado": atrasado,
        "itens": itens,
    }


def resumo_mes_atual(
    parcelas: Iterable[Parcela],
    outros_pagamentos: Iterable[OutroPagamento],
    hoje: date
) -> Dict[str, float]:
    """Cartões do painel: recebido no mês, a receber no mês e atraso total."""
    recebido = 0.0
    a_receber = 0.0
    atrasado = 0.0

    for parcela in parcelas:
        if no_mes(parcela.data_pagamento, hoje.year, hoje.month):
            recebido += parcela.valor
        if parcela.pendente:
            if no_mes(parcela.vencimento, hoje.year, hoje.month):
                a_receber += parcela.valor
            if parcela.vencimento < hoje:
                atrasado += parcela.valor

    for pagamento in outros_pagamentos:
        if no_mes(pagamento.data_pagamento, hoje.year, hoje.month):
            recebido += pagamento.valor

    return {"recebido_mes": recebido, "a_receber_mes": a_receber, "total_atrasado": atrasado}


def recebimentos_mensais(
    parcelas: Iterable[Parcela],
    outros_pagamentos: Iterable[OutroPagamento],
    ano: int
) -> List[Dict]:
    """Série de 12 meses com o total recebido (por data de pagamento) no ano."""
    totais = [0.0] * 12
    for parcela in parcelas:
        if parcela.data_pagamento is not None and parcela.data_pagamento.year == ano:
            totais[parcela.data_pagamento.month - 1] += parcela.valor
    for pagamento in outros_pagamentos:
        if pagamento.data_pagamento.year == ano:
            totais[pagamento.data_pagamento.month - 1] += pagamento.valor
    return [{"mes": MESES_ABREV[i], "valor": totais[i]} for i in range(12)]


def total_recebido_ano(
    parcelas: Iterable[Parcela],
    outros_pagamentos: Iterable[OutroPagamento],
    ano: int
) -> float:
    return sum(m["valor"] for m in recebimentos_mensais(parcelas, outros_pagamentos, ano))


def anos_com_movimento(
    parcelas: Iterable[Parcela],
    outros_pagamentos: Iterable[OutroPagamento],
    hoje: date
) -> List[int]:
    """Anos com vencimentos ou recebimentos (parcelas e avulsos), mais o ano atual."""
    anos = {hoje.year}
    for parcela in parcelas:
        anos.add(parcela.vencimento.year)
        if parcela.data_pagamento is not None:
            anos.add(parcela.data_pagamento.year)
    anos.update(p.data_pagamento.year for p in outros_pagamentos)
    return sorted(anos)


# ============================================================================
# REGISTRO DE PAGAMENTO
# ============================================================================

def registrar_pagamento(
    parcela: Parcela,
    data_pagamento: date,
    valor: Optional[float] = None
) -> Parcela:
    """
    Registra o pagamento de uma parcela.

    Status: PAGO_EM_DIA se data_pagamento <= vencimento, senão PAGO_COM_ATRASO.
    Se `valor` for informado, passa a ser o valor da parcela; o valor original
    do cronograma fica em `valor_previsto`.

    Uma parcela já paga não muda mais: repetir o mesmo registro devolve a
    parcela como está.

    Raises:
        ValueError: se o valor informado não for positivo ou se a parcela já
            foi paga com outra data ou outro valor.
    """
    if valor is not None and valor <= 0:
        raise ValueError("O valor pago deve ser maior que zero.")

    if not parcela.pendente:
        mesmo_valor = valor is None or valor == parcela.valor
        if parcela.data_pagamento == data_pagamento and mesmo_valor:
            return parcela
        raise ValueError(f"Parcela {parcela.parcela} de {parcela.cliente} já foi paga.")

    if data_pagamento <= parcela.vencimento:
        status = StatusParcela.PAGO_EM_DIA
    else:
        status = StatusParcela.PAGO_COM_ATRASO

    previsto = parcela.valor_previsto if parcela.valor_previsto is not None else parcela.valor
    return replace(
        parcela,
        status=status,
        data_pagamento=data_pagamento,
        valor=valor if valor is not None else parcela.valor,
        valor_previsto=previsto,
    )


# ============================================================================
# DESPESAS
# ============================================================================

def resumo_despesas(despesas: Iterable[Despesa], ano: int, mes: int) -> Dict:
    """Despesas com vencimento no mês e seus totais por categoria e situação."""
    do_mes = sorted(
        (d for d in despesas if no_mes(d.vencimento, ano, mes)),
        key=lambda d: d.vencimento
    )
    return {
        "itens": do_mes,
        "total": sum(d.valor for d in do_mes),
        "fixas": sum(d.valor for d in do_mes if d.categoria == CategoriaDespesa.FIXA),
        "variaveis": sum(d.valor for d in do_mes if d.categoria == CategoriaDespesa.VARIAVEL),
        "pagas": sum(d.valor for d in do_mes if d.status == StatusDespesa.PAGO),
        "pendentes": sum(d.valor for d in do_mes if d.status == StatusDespesa.PENDENTE),
    }


# ============================================================================
# LEMBRETES
# ============================================================================

def lembretes_pendentes(lembretes: Iterable[Lembrete], hoje: date) -> List[Tuple[Lembrete, int]]:
    """
    Lembretes não concluídos com os dias até a data (negativo = atrasado),
    do mais antigo para o mais distante.
    """
    pendentes = sorted((l for l in lembretes if not l.concluido), key=lambda l: l.data)
    return [(l, diff_dias(l.data, hoje)) for l in pendentes]


def lembretes_concluidos(lembretes: Iterable[Lembrete]) -> List[Lembrete]:
    return [l for l in lembretes if l.concluido]
