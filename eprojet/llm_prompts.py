"""
Modelos de prompt e de mensagem para cobrança de parcelas.

VARIÁVEIS:
- {cliente}: Nome do cliente.
- {projeto}: Nome do projeto.
- {parcela}: Rótulo da parcela (ex. "2/6").
- {vencimento}: Data de vencimento formatada (DD/MM/AAAA).
- {valor}: Valor formatado (R$ 1.234,56).
- {tom}: Tom da mensagem (Amigável, Formal, Urgente).
- {situacao}: Frase indicando se a parcela está atrasada ou a vencer.
- {assinatura}: Quem assina a mensagem.
"""

# ============================================================================
# MENSAGEM PADRÃO (sem IA)
# ============================================================================

INTRO_ATRASADA = (
    "Olá {cliente}, tudo bem?\n\n"
    "Verificamos que a parcela abaixo, referente ao seu projeto \"{projeto}\", está em atraso."
)

INTRO_LEMBRETE = (
    "Olá {cliente}, tudo bem?\n\n"
    "Este é um lembrete amigável sobre a próxima parcela do seu projeto \"{projeto}\"."
)

MENSAGEM_PADRAO = """{intro}

Detalhes da Parcela:
- Parcela: {parcela}
- Vencimento: {vencimento}
- Valor: {valor}

Se o pagamento já foi efetuado, por favor, desconsidere esta mensagem.

Qualquer dúvida, estou à disposição!

Atenciosamente,
{assinatura}"""

# ============================================================================
# PROMPT DE REDAÇÃO COM IA
# ============================================================================

SITUACAO_ATRASADA = "A parcela está ATRASADA."
SITUACAO_A_VENCER = "Este é um lembrete de uma parcela que vai vencer."

PROMPT_COBRANCA = """Aja como um assistente para um arquiteto. Escreva uma mensagem de cobrança para um cliente.
**Instruções:**
- A mensagem deve ser profissional e clara.
- Adapte a mensagem para o tom: "{tom}".
- {situacao}
- Não invente informações. Use apenas os dados fornecidos.
- A mensagem final deve ser apenas o texto da mensagem, sem introduções como "Aqui está a mensagem:".

**Dados:**
- Nome do Cliente: {cliente}
- Nome do Projeto: {projeto}
- Número da Parcela: {parcela}
- Data de Vencimento: {vencimento}
- Valor da Parcela: {valor}
- Assinatura: {assinatura}"""
