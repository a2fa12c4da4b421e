"""
Sistema de internacionalização (i18n) do eProjet.
Suporta múltiplos idiomas por meio de arquivos JSON de tradução.
"""
import json
import streamlit as st
from pathlib import Path

# Diretório de traduções
LOCALES_DIR = Path(__file__).parent.parent / "locales"
DEFAULT_LANGUAGE = "pt"
SUPPORTED_LANGUAGES = ["pt", "en"]


def load_translations(lang: str) -> dict:
    """
    Carrega o arquivo de tradução do idioma.

    Args:
        lang: Código do idioma (pt, en)

    Returns:
        Dicionário com as traduções
    """
    file_path = LOCALES_DIR / f"{lang}.json"
    if not file_path.exists():
        return {}

    return json.loads(file_path.read_text(encoding='utf-8'))


def get_language() -> str:
    """Idioma atual guardado no session_state."""
    if 'language' not in st.session_state:
        st.session_state.language = DEFAULT_LANGUAGE
    return st.session_state.language


def set_language(lang: str):
    """Define o idioma atual e limpa o cache de traduções."""
    if lang in SUPPORTED_LANGUAGES:
        st.session_state.language = lang
        for supported_lang in SUPPORTED_LANGUAGES:
            key = f'translations_{supported_lang}'
            if key in st.session_state:
                del st.session_state[key]


def resolver_chave(translations: dict, key: str, **kwargs) -> str:
    """
    Busca uma chave aninhada ("dashboard.cards.received") no dicionário.
    Retorna a própria chave se não encontrar.
    """
    value = translations
    for k in key.split('.'):
        if isinstance(value, dict):
            value = value.get(k)
            if value is None:
                return key
        else:
            return key

    if not isinstance(value, str):
        return key

    if kwargs:
        try:
            value = value.format(**kwargs)
        except (KeyError, ValueError):
            pass

    return value


def t(key: str, **kwargs) -> str:
    """
    Traduz uma chave para o idioma atual, com interpolação via kwargs.

    Examples:
        >>> t("common.save")
        "Salvar"
        >>> t("late.count", count=5)
        "5 parcelas"
    """
    lang = get_language()

    cache_key = f'translations_{lang}'
    if cache_key not in st.session_state:
        st.session_state[cache_key] = load_translations(lang)

    return resolver_chave(st.session_state[cache_key], key, **kwargs)


def get_available_languages() -> list:
    return SUPPORTED_LANGUAGES


def get_language_name(lang_code: str) -> str:
    names = {
        "pt": "Português",
        "en": "English"
    }
    return names.get(lang_code, lang_code.upper())
