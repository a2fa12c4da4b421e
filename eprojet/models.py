"""
Modelos de dados do painel de gestão do escritório.
Define enumerações e dataclasses para contratos, parcelas, cronogramas e despesas.

Todos os registros são imutáveis: alterações produzem uma nova instância
(ver `eprojet.estado`).
"""
from enum import Enum
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


class StatusContrato(Enum):
    """Situação comercial de um contrato."""
    ATIVO = "Ativo"
    CONCLUIDO = "Concluído"
    CANCELADO = "Cancelado"


class StatusParcela(Enum):
    """
    Situação de uma parcela.
    PENDENTE muda uma única vez para PAGO_EM_DIA ou PAGO_COM_ATRASO no registro.
    """
    PENDENTE = "Pendente"
    PAGO_EM_DIA = "Pago em dia"
    PAGO_COM_ATRASO = "Pago com atraso"


class StatusEtapa(Enum):
    """Situação de uma etapa agrupada no Gantt."""
    PENDENTE = "pending"
    EM_ANDAMENTO = "in_progress"
    CONCLUIDA = "completed"


class SituacaoProjeto(Enum):
    """Classificação de prazo de um projeto."""
    NO_PRAZO = "No Prazo"
    EM_RISCO = "Em Risco"
    EM_ANDAMENTO = "Em Andamento"
    ATRASADO = "Atrasado"


class CategoriaDespesa(Enum):
    FIXA = "Fixa"
    VARIAVEL = "Variável"


class StatusDespesa(Enum):
    PENDENTE = "Pendente"
    PAGO = "Pago"


class TipoPontoAtencao(Enum):
    PAGAMENTO = "payment"
    ETAPA = "stage"
    CONTRATO = "contract"


class ModoVisao(Enum):
    """Modos (mutuamente exclusivos) da visão de recebimentos."""
    MES = "mes"
    CLIENTE = "cliente"
    ATRASADOS = "atrasados"


# ============================================================================
# CADASTROS
# ============================================================================

@dataclass(frozen=True)
class Cliente:
    id: int
    nome: str


@dataclass(frozen=True)
class Parceiro:
    """Fornecedor ou parceiro de obra."""
    id: int
    nome: str
    tipo: str
    contato: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    cliente_ids: Tuple[int, ...] = ()  # Clientes atendidos em conjunto


@dataclass(frozen=True)
class Lembrete:
    id: int
    cliente_id: int
    cliente: str
    descricao: str
    data: date
    concluido: bool = False


@dataclass(frozen=True)
class PrecoServico:
    """Item da tabela de preços (por m², hora, unidade ou mês)."""
    id: int
    nome: str
    unidade: str
    preco: Optional[float] = None


@dataclass(frozen=True)
class FaixaPreco:
    id: int
    faixa: str
    preco: float


@dataclass(frozen=True)
class ItemTemplateEtapa:
    """Etapa do modelo de cronograma, com duração em dias úteis."""
    id: int
    nome: str
    duracao_dias_uteis: int
    sequencia: int


# ============================================================================
# CONTRATOS E RECEBIMENTOS
# ============================================================================

@dataclass(frozen=True)
class ServicoContrato:
    id: int
    nome_servico: str
    metodo_calculo: str = "manual"  # 'metragem', 'hora' ou 'manual'
    valor: float = 0.0
    area: Optional[float] = None  # m², quando calculado por metragem
    horas: Optional[float] = None


@dataclass(frozen=True)
class Contrato:
    """Representa um contrato assinado com um cliente."""
    id: int
    cliente: str
    projeto: str
    valor_total: float
    status: StatusContrato
    data: date
    duracao_meses: int
    tipo_servico: str = ""
    servicos: Tuple[ServicoContrato, ...] = ()
    entrada: float = 0.0
    num_parcelas: int = 0
    valor_parcela: float = 0.0
    data_entrada: Optional[date] = None
    data_primeira_parcela: Optional[date] = None


@dataclass(frozen=True)
class Parcela:
    """Uma parcela prevista de um contrato."""
    id: int
    contrato_id: int
    cliente: str
    projeto: str
    parcela: str  # Rótulo: "Entrada", "1/6", ...
    vencimento: date
    valor: float  # Valor recebido quando paga; valor previsto enquanto pendente
    status: StatusParcela = StatusParcela.PENDENTE
    data_pagamento: Optional[date] = None
    valor_previsto: Optional[float] = None  # Valor original do cronograma financeiro

    @property
    def pendente(self) -> bool:
        return self.status == StatusParcela.PENDENTE


@dataclass(frozen=True)
class OutroPagamento:
    """Recebimento avulso, sem vencimento."""
    id: int
    descricao: str
    data_pagamento: date
    valor: float


@dataclass(frozen=True)
class Despesa:
    id: int
    descricao: str
    categoria: CategoriaDespesa
    valor: float
    vencimento: date
    status: StatusDespesa = StatusDespesa.PENDENTE
    data_pagamento: Optional[date] = None


# ============================================================================
# CRONOGRAMAS
# ============================================================================

@dataclass(frozen=True)
class Etapa:
    """Fase do cronograma de entrega de um projeto."""
    id: int
    nome: str
    duracao_dias_uteis: int = 0
    inicio: Optional[date] = None
    prazo: Optional[date] = None
    conclusao: Optional[date] = None

    @property
    def concluida(self) -> bool:
        return self.conclusao is not None


@dataclass(frozen=True)
class Cronograma:
    id: int
    contrato_id: int
    projeto: str
    cliente: str
    inicio: Optional[date]
    etapas: Tuple[Etapa, ...] = ()


@dataclass(frozen=True)
class EtapaProgresso:
    nome: str
    status: StatusEtapa = StatusEtapa.PENDENTE


@dataclass(frozen=True)
class ProgressoProjeto:
    """Visão resumida (Gantt) derivada de um Cronograma."""
    contrato_id: int
    projeto: str
    cliente: str
    etapas: Tuple[EtapaProgresso, ...] = ()


# ============================================================================
# RESULTADOS DERIVADOS
# ============================================================================

@dataclass(frozen=True)
class PontoAtencao:
    cliente: str
    descricao: str
    dias_restantes: int
    tipo: TipoPontoAtencao


@dataclass(frozen=True)
class RentabilidadeCategoria:
    nome: str
    quantidade: int
    receita: float
    ticket_medio: float
    eficiencia: float  # % de contratos da categoria sem atraso


@dataclass(frozen=True)
class ItemExtrato:
    """Linha da tabela de recebimentos (parcela ou pagamento avulso)."""
    data: date
    descricao: str
    valor: float
    status: str
    tipo: str  # 'parcela' ou 'avulso'
    parcela_id: Optional[int] = None


# ============================================================================
# DOCUMENTO COMPLETO
# ============================================================================

@dataclass(frozen=True)
class AppData:
    """Documento único com todo o estado da aplicação."""
    clientes: Tuple[Cliente, ...] = ()
    contratos: Tuple[Contrato, ...] = ()
    lembretes: Tuple[Lembrete, ...] = ()
    parcelas: Tuple[Parcela, ...] = ()
    cronogramas: Tuple[Cronograma, ...] = ()
    precos_servicos: Tuple[PrecoServico, ...] = ()
    valores_hora: Tuple[PrecoServico, ...] = ()
    faixas_medicao: Tuple[FaixaPreco, ...] = ()
    faixas_extras: Tuple[FaixaPreco, ...] = ()
    progresso_projetos: Tuple[ProgressoProjeto, ...] = ()
    template_etapas: Tuple[ItemTemplateEtapa, ...] = ()
    outros_pagamentos: Tuple[OutroPagamento, ...] = ()
    parceiros: Tuple[Parceiro, ...] = ()
    despesas: Tuple[Despesa, ...] = ()
