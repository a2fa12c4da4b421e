"""
Lembrete de pagamento - redação da mensagem de cobrança e link para o WhatsApp.
"""
import streamlit as st
from datetime import date

from eprojet.config import load_config, format_currency
from eprojet.constants import TONS_MENSAGEM
from eprojet.datas import formatar_data
from eprojet.i18n import t
from eprojet.llm_service import (
    gerar_mensagem_padrao, gerar_mensagem_ia, gerar_link_whatsapp, get_llm_config
)


def render_cobranca(parcelas, chave: str = "cobranca"):
    """
    Bloco de redação do lembrete para uma das parcelas recebidas.

    Args:
        parcelas: Parcelas pendentes elegíveis para cobrança
        chave: Prefixo das chaves de widget (permite usar o bloco em mais de uma página)
    """
    st.subheader(t("reminder.title"))

    if not parcelas:
        st.info(t("reminder.empty"))
        return

    opcoes = {
        f"{p.cliente} - {p.parcela} - {formatar_data(p.vencimento)} - {format_currency(p.valor)}": p
        for p in parcelas
    }
    rotulo = st.selectbox(t("reminder.installment"), list(opcoes.keys()), key=f"{chave}_parcela")
    parcela = opcoes[rotulo]

    hoje = date.today()
    assinatura = load_config().get("assinatura", "")
    chave_texto = f"{chave}_mensagem_{parcela.id}"
    if chave_texto not in st.session_state:
        st.session_state[chave_texto] = gerar_mensagem_padrao(parcela, hoje, assinatura)

    llm_config = get_llm_config()
    if llm_config.get("enabled", False):
        col_tom, col_botao = st.columns([2, 1])
        with col_tom:
            tom = st.selectbox(t("reminder.tone"), TONS_MENSAGEM, key=f"{chave}_tom")
        with col_botao:
            st.markdown("")
            gerar = st.button(t("reminder.generate_ai"), key=f"{chave}_gerar", use_container_width=True)
        if gerar:
            with st.spinner(t("reminder.generating")):
                texto = gerar_mensagem_ia(parcela, hoje, tom, assinatura, llm_config)
            if texto:
                st.session_state[chave_texto] = texto
            else:
                st.warning(t("reminder.ai_failed"))
    else:
        st.caption(t("reminder.ai_disabled"))

    mensagem = st.text_area(t("reminder.message"), key=chave_texto, height=280)

    st.link_button(
        t("reminder.send_whatsapp"),
        gerar_link_whatsapp(mensagem),
        use_container_width=True
    )
