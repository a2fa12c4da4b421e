"""
Controlador do estado na sessão do Streamlit.
Mantém o AppData em st.session_state e o persiste inteiro a cada alteração.
"""
import logging

import streamlit as st

from eprojet.armazenamento import carregar_dados, salvar_dados
from eprojet.config import get_storage_path, load_config
from eprojet.constants import DIAS_ALERTA_ETAPA, DIAS_ALERTA_CONTRATO, DIAS_ALERTA_PARCELA
from eprojet.i18n import t
from eprojet.models import AppData

logger = logging.getLogger(__name__)

_CHAVE_DADOS = "app_data"


def obter_dados() -> AppData:
    """Documento atual; carregado do armazenamento na primeira chamada da sessão."""
    if _CHAVE_DADOS not in st.session_state:
        st.session_state[_CHAVE_DADOS] = carregar_dados(get_storage_path())
    return st.session_state[_CHAVE_DADOS]


def salvar(novo: AppData) -> None:
    """
    Substitui o documento da sessão e o grava.
    Se a gravação falhar o estado em memória é mantido e o usuário é avisado.
    """
    st.session_state[_CHAVE_DADOS] = novo
    if not salvar_dados(novo, get_storage_path()):
        st.warning(t("common.save_failed"))


def limiares() -> dict:
    """Janelas de alerta configuradas (dias)."""
    config = load_config().get("limiares", {})
    return {
        "etapa": int(config.get("dias_alerta_etapa", DIAS_ALERTA_ETAPA)),
        "contrato": int(config.get("dias_alerta_contrato", DIAS_ALERTA_CONTRATO)),
        "parcela": int(config.get("dias_alerta_parcela", DIAS_ALERTA_PARCELA)),
    }
