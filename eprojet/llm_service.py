"""
Redação de mensagens de cobrança.

Gera a mensagem padrão de uma parcela e, opcionalmente, reescreve-a com um LLM
local via Ollama. A chamada ao LLM é best-effort: qualquer falha mantém a
mensagem que já estava redigida.

Instalação do Ollama:
1. Baixe em https://ollama.com/download
2. Baixe um modelo: ollama pull llama3
3. O Ollama responde em http://localhost:11434
"""

import logging
from datetime import date
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from . import llm_prompts
from .config import load_config, format_currency
from .constants import LLM_TIMEOUT_STANDARD, WHATSAPP_URL
from .datas import formatar_data
from .models import Parcela

logger = logging.getLogger(__name__)

OLLAMA_API_URL = "http://localhost:11434/api/generate"
OLLAMA_TAGS_URL = "http://localhost:11434/api/tags"


def get_llm_config() -> Dict[str, Any]:
    """Bloco 'llm' do config.json."""
    return load_config().get("llm", {"enabled": False})


def is_llm_enabled() -> bool:
    return bool(get_llm_config().get("enabled", False))


def check_ollama_running() -> bool:
    """
    Verifica se o Ollama está acessível.

    Returns:
        True se responde, False caso contrário
    """
    try:
        response = requests.get(OLLAMA_TAGS_URL, timeout=2)
        return response.status_code == 200
    except requests.RequestException as e:
        logger.warning(f"Ollama not accessible: {e}")
        return False


def _parcela_atrasada(parcela: Parcela, hoje: date) -> bool:
    return parcela.pendente and parcela.vencimento < hoje


def _dados_parcela(parcela: Parcela, assinatura: str) -> Dict[str, str]:
    return {
        "cliente": parcela.cliente,
        "projeto": parcela.projeto,
        "parcela": parcela.parcela,
        "vencimento": formatar_data(parcela.vencimento),
        "valor": format_currency(parcela.valor, symbol="R$"),
        "assinatura": assinatura,
    }


def gerar_mensagem_padrao(parcela: Parcela, hoje: date, assinatura: str) -> str:
    """Mensagem de cobrança sem IA: aviso de atraso ou lembrete de vencimento."""
    dados = _dados_parcela(parcela, assinatura)
    modelo_intro = llm_prompts.INTRO_ATRASADA if _parcela_atrasada(parcela, hoje) else llm_prompts.INTRO_LEMBRETE
    return llm_prompts.MENSAGEM_PADRAO.format(intro=modelo_intro.format(**dados), **dados)


def montar_prompt_cobranca(parcela: Parcela, hoje: date, tom: str, assinatura: str) -> str:
    situacao = llm_prompts.SITUACAO_ATRASADA if _parcela_atrasada(parcela, hoje) else llm_prompts.SITUACAO_A_VENCER
    return llm_prompts.PROMPT_COBRANCA.format(
        tom=tom,
        situacao=situacao,
        **_dados_parcela(parcela, assinatura)
    )


def gerar_mensagem_ia(
    parcela: Parcela,
    hoje: date,
    tom: str,
    assinatura: str,
    llm_config: Optional[Dict[str, Any]] = None
) -> Optional[str]:
    """
    Pede ao LLM uma mensagem de cobrança no tom escolhido.

    Returns:
        Texto gerado, ou None se o LLM estiver desabilitado ou a chamada falhar.
    """
    if llm_config is None:
        llm_config = get_llm_config()
    if not llm_config.get("enabled", False):
        return None

    payload = {
        "model": llm_config.get("model", "llama3"),
        "prompt": montar_prompt_cobranca(parcela, hoje, tom, assinatura),
        "stream": False,
        "options": {"temperature": 0.7},
    }

    try:
        response = requests.post(
            llm_config.get("url", OLLAMA_API_URL),
            json=payload,
            timeout=llm_config.get("timeout", LLM_TIMEOUT_STANDARD)
        )
        response.raise_for_status()
        text = response.json().get("response", "").strip()
    except requests.RequestException as e:
        logger.error(f"Error generating message: {e}")
        return None
    except ValueError as e:
        logger.error(f"Invalid response from Ollama: {e}")
        return None

    return text or None


def gerar_link_whatsapp(mensagem: str) -> str:
    """Link wa.me com o texto já codificado para envio manual."""
    return WHATSAPP_URL + quote(mensagem, safe="")
