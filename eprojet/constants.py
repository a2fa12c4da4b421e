"""
Constantes do sistema eProjet.
Centraliza valores mágicos e configurações para facilitar manutenção.
"""

# ============================================================================
# REGRAS DE NEGÓCIO
# ============================================================================

# Janela (dias) em que uma etapa pendente deixa o projeto "Em Risco"
DIAS_ALERTA_ETAPA = 7

# Janela (dias) de alerta para contratos ativos perto do vencimento
DIAS_ALERTA_CONTRATO = 30

# Janela (dias) de alerta para parcelas a vencer
DIAS_ALERTA_PARCELA = 7

# Categoria usada quando o contrato não informa o tipo de serviço
CATEGORIA_PADRAO = "OUTROS"

# Trechos (em maiúsculas) que identificam a disciplina de um serviço
PALAVRAS_ARQUITETURA = ("ARQUI",)
PALAVRAS_INTERIORES = ("INTERIOR", "DESIGN")

ROTULO_ENTRADA = "Entrada"

# ============================================================================
# ARMAZENAMENTO
# ============================================================================

# Chave fixa do documento dentro do arquivo de armazenamento
STORAGE_KEY = "E_PROJET_DATA_V1"

# Versão atual do esquema do documento salvo
SCHEMA_VERSION = 2

# ============================================================================
# CRONOGRAMA
# ============================================================================

# Modelo padrão de etapas: (nome, duração em dias úteis)
TEMPLATE_ETAPAS_PADRAO = [
    ("Reunião de Briefing", 1),
    ("Medição", 1),
    ("Apresentação do Layout Planta Baixa", 15),
    ("Revisão 01 (Planta Baixa)", 7),
    ("Revisão 02 (Planta Baixa)", 7),
    ("Revisão 03 (Planta Baixa)", 7),
    ("Apresentação de 3D", 15),
    ("Revisão 01 (3D)", 7),
    ("Revisão 02 (3D)", 7),
    ("Revisão 03 (3D)", 7),
    ("Executivo", 20),
    ("Entrega", 0),
]

# Grupos do Gantt e as etapas detalhadas que cada um agrega
GRUPOS_GANTT = {
    "Briefing": ["Reunião de Briefing", "Medição"],
    "Layout": [
        "Apresentação do Layout Planta Baixa",
        "Revisão 01 (Planta Baixa)",
        "Revisão 02 (Planta Baixa)",
        "Revisão 03 (Planta Baixa)",
    ],
    "3D": ["Apresentação de 3D", "Revisão 01 (3D)", "Revisão 02 (3D)", "Revisão 03 (3D)"],
    "Executivo": ["Executivo"],
    "Entrega": ["Entrega"],
}

# ============================================================================
# TABELA DE PREÇOS PADRÃO
# ============================================================================

PRECOS_SERVICOS_PADRAO = [
    ("Arquitetônico", "m²", None),
    ("Estrutural", "m²", 15.0),
    ("Projeto do Zero", "m²", 40.0),
    ("Design de Interiores", "m²", None),
    ("Medição e Planta Baixa", "un", None),
    ("Consultoria", "un", None),
    ("Gerenciamento de Obras", "mês", 1400.0),
]

VALORES_HORA_PADRAO = [
    ("Visita Técnica", "hora", 80.0),
]

FAIXAS_MEDICAO_PADRAO = [
    ("0 a 50 m²", 1000.0),
    ("51 a 100 m²", 1500.0),
]

# Serviços com regra própria de cálculo
SERVICO_MEDICAO = "Medição e Planta Baixa"
SERVICO_GERENCIAMENTO = "Gerenciamento de Obras"

METODO_METRAGEM = "metragem"
METODO_HORA = "hora"
METODO_MANUAL = "manual"
METODOS_CALCULO = [METODO_METRAGEM, METODO_HORA, METODO_MANUAL]

UNIDADE_M2 = "m²"
UNIDADE_HORA = "hora"
UNIDADE_MES = "mês"
UNIDADES_SERVICO = [UNIDADE_M2, UNIDADE_HORA, "un", UNIDADE_MES]

# Tabelas de preço editáveis nas configurações
TABELAS_PRECO = ("precos_servicos", "valores_hora", "faixas_medicao", "faixas_extras")

# ============================================================================
# PARCEIROS
# ============================================================================

TIPOS_PARCEIRO = [
    "Gesso",
    "Elétrica/Hidráulica",
    "Construtora",
    "Material de Construção",
    "Marcenaria",
    "Pintura",
    "Serralheria",
    "Vidraçaria",
    "Marmoraria",
    "Automação",
    "Paisagismo",
    "Outro",
]

# ============================================================================
# CORES UI
# ============================================================================

PRIMARY_COLOR = "#2563eb"
SUCCESS_COLOR = "#22c55e"
WARNING_COLOR = "#facc15"
ERROR_COLOR = "#ef4444"
TEXT_SECONDARY = "#64748b"
BG_TRANSPARENT = "rgba(0,0,0,0)"

CORES_SITUACAO = {
    "Atrasado": ERROR_COLOR,
    "Em Andamento": WARNING_COLOR,
    "No Prazo": SUCCESS_COLOR,
}

CORES_CATEGORIAS = ["#2563eb", "#10b981", "#f59e0b", "#f43f5e", "#8b5cf6", "#06b6d4", "#475569"]

# ============================================================================
# CONFIGURAÇÃO LLM
# ============================================================================

# Timeout (segundos) da redação de mensagens de cobrança
LLM_TIMEOUT_STANDARD = 30

TONS_MENSAGEM = ["Amigável", "Formal", "Urgente"]

WHATSAPP_URL = "https://wa.me/?text="

# ============================================================================
# FORMATOS
# ============================================================================

MESES_ABREV = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]

DATE_ISO_FORMAT = "%Y-%m-%d"
