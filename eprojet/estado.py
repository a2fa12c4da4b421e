"""
Operações sobre o estado da aplicação.

Cada operação recebe o AppData atual e devolve um AppData novo; o documento
original nunca é alterado. A camada de interface substitui o estado inteiro e
o persiste (ver `eprojet.ui.sessao`).
"""
import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Union

from eprojet.models import (
    AppData, Contrato, OutroPagamento, Despesa, Cliente, Lembrete, Parceiro,
    PrecoServico, FaixaPreco, CategoriaDespesa, StatusDespesa
)
from eprojet.constants import TABELAS_PRECO, UNIDADE_HORA
from eprojet.planejamento import (
    gerar_parcelas, gerar_cronograma, alterar_conclusao, sincronizar_progresso
)
from eprojet.regras_negocio import registrar_pagamento
from eprojet.precificacao import limites_faixa

logger = logging.getLogger(__name__)


# ============================================================================
# VALIDAÇÃO
# ============================================================================

def exigir_texto(campo: str, valor: Optional[str]) -> str:
    """Campo obrigatório, não pode ficar em branco."""
    texto = (valor or "").strip()
    if not texto:
        raise ValueError(f"O campo '{campo}' é obrigatório.")
    return texto


def exigir_valor_positivo(campo: str, valor) -> float:
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        raise ValueError(f"O campo '{campo}' deve ser numérico.")
    if numero <= 0:
        raise ValueError(f"O campo '{campo}' deve ser maior que zero.")
    return numero


def proximo_id(registros: Iterable) -> int:
    return max((r.id for r in registros), default=0) + 1


# ============================================================================
# CONTRATOS
# ============================================================================

def adicionar_contrato(
    dados: AppData,
    contrato: Contrato,
    inicio_cronograma: Optional[date] = None,
    hoje: Optional[date] = None
) -> AppData:
    """
    Inclui um contrato e gera suas parcelas, cronograma de etapas e progresso.
    O cliente é cadastrado se ainda não existir.
    """
    exigir_texto("cliente", contrato.cliente)
    exigir_texto("projeto", contrato.projeto)
    exigir_valor_positivo("valor total", contrato.valor_total)

    contrato = replace(contrato, id=proximo_id(dados.contratos))
    parcelas = gerar_parcelas(contrato, proximo_id(dados.parcelas))
    cronograma = gerar_cronograma(
        contrato,
        dados.template_etapas,
        inicio_cronograma or contrato.data,
        proximo_id(dados.cronogramas),
    )
    progresso = sincronizar_progresso(cronograma, hoje or date.today())

    clientes = dados.clientes
    if not any(c.nome == contrato.cliente for c in clientes):
        clientes = clientes + (Cliente(id=proximo_id(clientes), nome=contrato.cliente),)

    logger.info(f"Contrato {contrato.id} incluído com {len(parcelas)} parcela(s)")
    return replace(
        dados,
        clientes=clientes,
        contratos=(contrato,) + dados.contratos,
        parcelas=dados.parcelas + parcelas,
        cronogramas=dados.cronogramas + (cronograma,),
        progresso_projetos=dados.progresso_projetos + (progresso,),
    )


def atualizar_contrato(dados: AppData, contrato: Contrato) -> AppData:
    if not any(c.id == contrato.id for c in dados.contratos):
        raise ValueError(f"Contrato {contrato.id} não encontrado.")
    return replace(
        dados,
        contratos=tuple(contrato if c.id == contrato.id else c for c in dados.contratos),
    )


def excluir_contrato(dados: AppData, contrato_id: int) -> AppData:
    """Remove o contrato com suas parcelas, cronogramas e progresso."""
    return replace(
        dados,
        contratos=tuple(c for c in dados.contratos if c.id != contrato_id),
        parcelas=tuple(p for p in dados.parcelas if p.contrato_id != contrato_id),
        cronogramas=tuple(c for c in dados.cronogramas if c.contrato_id != contrato_id),
        progresso_projetos=tuple(p for p in dados.progresso_projetos if p.contrato_id != contrato_id),
    )


# ============================================================================
# RECEBIMENTOS
# ============================================================================

def registrar_pagamento_parcela(
    dados: AppData,
    parcela_id: int,
    data_pagamento: date,
    valor: Optional[float] = None
) -> AppData:
    """
    Registra o pagamento de uma parcela (ver `regras_negocio.registrar_pagamento`).

    Raises:
        ValueError: parcela inexistente, valor inválido ou parcela já paga em outra data.
    """
    parcela = next((p for p in dados.parcelas if p.id == parcela_id), None)
    if parcela is None:
        raise ValueError(f"Parcela {parcela_id} não encontrada.")

    paga = registrar_pagamento(parcela, data_pagamento, valor)
    if paga is parcela:
        return dados
    if paga.valor_previsto is not None and paga.valor != paga.valor_previsto:
        logger.info(
            f"Parcela {parcela_id} paga com valor {paga.valor} diferente do previsto {paga.valor_previsto}"
        )
    return replace(
        dados,
        parcelas=tuple(paga if p.id == parcela_id else p for p in dados.parcelas),
    )


def adicionar_outro_pagamento(
    dados: AppData,
    descricao: str,
    data_pagamento: date,
    valor
) -> AppData:
    pagamento = OutroPagamento(
        id=proximo_id(dados.outros_pagamentos),
        descricao=exigir_texto("descrição", descricao),
        data_pagamento=data_pagamento,
        valor=exigir_valor_positivo("valor", valor),
    )
    return replace(dados, outros_pagamentos=dados.outros_pagamentos + (pagamento,))


# ============================================================================
# CRONOGRAMAS
# ============================================================================

def concluir_etapa(
    dados: AppData,
    cronograma_id: int,
    etapa_id: int,
    conclusao: Optional[date],
    hoje: Optional[date] = None
) -> AppData:
    """
    Marca/desmarca a conclusão de uma etapa, recalcula as datas seguintes e
    ressincroniza o progresso do contrato.
    """
    cronograma = next((c for c in dados.cronogramas if c.id == cronograma_id), None)
    if cronograma is None:
        raise ValueError(f"Cronograma {cronograma_id} não encontrado.")

    novo = alterar_conclusao(cronograma, etapa_id, conclusao)
    progresso = sincronizar_progresso(novo, hoje or date.today())

    outros_progressos = tuple(
        p for p in dados.progresso_projetos if p.contrato_id != novo.contrato_id
    )
    return replace(
        dados,
        cronogramas=tuple(novo if c.id == cronograma_id else c for c in dados.cronogramas),
        progresso_projetos=outros_progressos + (progresso,),
    )


# ============================================================================
# DESPESAS
# ============================================================================

def adicionar_despesa(
    dados: AppData,
    descricao: str,
    categoria: CategoriaDespesa,
    valor,
    vencimento: date,
    status: StatusDespesa = StatusDespesa.PENDENTE
) -> AppData:
    despesa = Despesa(
        id=proximo_id(dados.despesas),
        descricao=exigir_texto("descrição", descricao),
        categoria=categoria,
        valor=exigir_valor_positivo("valor", valor),
        vencimento=vencimento,
        status=status,
        data_pagamento=vencimento if status == StatusDespesa.PAGO else None,
    )
    return replace(dados, despesas=dados.despesas + (despesa,))


def marcar_despesa_paga(dados: AppData, despesa_id: int, data_pagamento: date) -> AppData:
    if not any(d.id == despesa_id for d in dados.despesas):
        raise ValueError(f"Despesa {despesa_id} não encontrada.")
    return replace(
        dados,
        despesas=tuple(
            replace(d, status=StatusDespesa.PAGO, data_pagamento=data_pagamento) if d.id == despesa_id else d
            for d in dados.despesas
        ),
    )


def excluir_despesa(dados: AppData, despesa_id: int) -> AppData:
    return replace(dados, despesas=tuple(d for d in dados.despesas if d.id != despesa_id))


# ============================================================================
# LEMBRETES
# ============================================================================

def adicionar_lembrete(dados: AppData, cliente_id: int, descricao: str, data: date) -> AppData:
    """Novo lembrete de um cliente cadastrado; entra no topo da lista."""
    cliente = next((c for c in dados.clientes if c.id == cliente_id), None)
    if cliente is None:
        raise ValueError(f"Cliente {cliente_id} não encontrado.")
    lembrete = Lembrete(
        id=proximo_id(dados.lembretes),
        cliente_id=cliente.id,
        cliente=cliente.nome,
        descricao=exigir_texto("descrição", descricao),
        data=data,
    )
    return replace(dados, lembretes=(lembrete,) + dados.lembretes)


def alternar_lembrete(dados: AppData, lembrete_id: int) -> AppData:
    """Marca o lembrete como concluído, ou o reabre se já estava concluído."""
    if not any(l.id == lembrete_id for l in dados.lembretes):
        raise ValueError(f"Lembrete {lembrete_id} não encontrado.")
    return replace(
        dados,
        lembretes=tuple(
            replace(l, concluido=not l.concluido) if l.id == lembrete_id else l
            for l in dados.lembretes
        ),
    )


def excluir_lembrete(dados: AppData, lembrete_id: int) -> AppData:
    return replace(dados, lembretes=tuple(l for l in dados.lembretes if l.id != lembrete_id))


# ============================================================================
# PARCEIROS
# ============================================================================

def _validar_parceiro(dados: AppData, parceiro: Parceiro) -> Parceiro:
    ids_clientes = {c.id for c in dados.clientes}
    return replace(
        parceiro,
        nome=exigir_texto("nome", parceiro.nome),
        tipo=exigir_texto("tipo", parceiro.tipo),
        contato=(parceiro.contato or "").strip() or None,
        telefone=(parceiro.telefone or "").strip() or None,
        email=(parceiro.email or "").strip() or None,
        cliente_ids=tuple(i for i in parceiro.cliente_ids if i in ids_clientes),
    )


def adicionar_parceiro(dados: AppData, parceiro: Parceiro) -> AppData:
    """Cadastra o parceiro com um id novo; clientes desconhecidos são descartados."""
    novo = replace(_validar_parceiro(dados, parceiro), id=proximo_id(dados.parceiros))
    logger.info(f"Parceiro {novo.id} ({novo.tipo}) cadastrado")
    return replace(dados, parceiros=dados.parceiros + (novo,))


def atualizar_parceiro(dados: AppData, parceiro: Parceiro) -> AppData:
    if not any(p.id == parceiro.id for p in dados.parceiros):
        raise ValueError(f"Parceiro {parceiro.id} não encontrado.")
    validado = _validar_parceiro(dados, parceiro)
    return replace(
        dados,
        parceiros=tuple(validado if p.id == parceiro.id else p for p in dados.parceiros),
    )


def excluir_parceiro(dados: AppData, parceiro_id: int) -> AppData:
    return replace(dados, parceiros=tuple(p for p in dados.parceiros if p.id != parceiro_id))


# ============================================================================
# TABELAS DE PREÇO
# ============================================================================

def _exigir_tabela(tabela: str):
    if tabela not in TABELAS_PRECO:
        raise ValueError(f"Tabela de preço desconhecida: {tabela}")


def _validar_item(tabela: str, item: Union[PrecoServico, FaixaPreco]):
    if tabela in ("faixas_medicao", "faixas_extras"):
        if limites_faixa(item.faixa) is None:
            raise ValueError(f"Faixa '{item.faixa}' deve informar a área, ex.: 0 a 50 m².")
        return replace(item, faixa=item.faixa.strip(), preco=exigir_valor_positivo("preço", item.preco))

    nome = exigir_texto("nome", item.nome)
    if tabela == "valores_hora":
        return replace(item, nome=nome, unidade=UNIDADE_HORA, preco=exigir_valor_positivo("preço", item.preco))
    # Preço de serviço é opcional (valor definido por projeto)
    preco = None if item.preco is None else exigir_valor_positivo("preço", item.preco)
    return replace(item, nome=nome, unidade=exigir_texto("unidade", item.unidade), preco=preco)


def salvar_item_tabela(dados: AppData, tabela: str, item: Union[PrecoServico, FaixaPreco]) -> AppData:
    """
    Inclui (id 0) ou altera um item de uma das tabelas de preço.

    Raises:
        ValueError: tabela desconhecida, item inválido ou id inexistente.
    """
    _exigir_tabela(tabela)
    itens = getattr(dados, tabela)
    item = _validar_item(tabela, item)

    if item.id == 0:
        itens = itens + (replace(item, id=proximo_id(itens)),)
    elif any(i.id == item.id for i in itens):
        itens = tuple(item if i.id == item.id else i for i in itens)
    else:
        raise ValueError(f"Item {item.id} não encontrado em '{tabela}'.")
    return replace(dados, **{tabela: itens})


def excluir_item_tabela(dados: AppData, tabela: str, item_id: int) -> AppData:
    """Remove um item; os tipos de serviço só podem ser editados."""
    _exigir_tabela(tabela)
    if tabela == "precos_servicos":
        raise ValueError("Tipos de serviço não podem ser excluídos.")
    return replace(dados, **{tabela: tuple(i for i in getattr(dados, tabela) if i.id != item_id)})
