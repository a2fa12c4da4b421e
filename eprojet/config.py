"""
Módulo de configuração persistente.
Lê e escreve configurações desde/para data/config.json.
"""
import copy
import json
from pathlib import Path
from typing import Any

# Caminho do arquivo de configuração
CONFIG_PATH = Path(__file__).parent.parent / "data" / "config.json"

# Configuração padrão (se o arquivo não existir)
DEFAULT_CONFIG = {
    "language": "pt",  # "pt" ou "en"
    "currency": "BRL",
    "storage_path": "data/eprojet_storage.json",
    "assinatura": "Erica Battelli",  # Assinatura das mensagens de cobrança
    "limiares": {
        "dias_alerta_etapa": 7,
        "dias_alerta_contrato": 30,
        "dias_alerta_parcela": 7
    },
    "llm": {
        "enabled": False,
        "model": "llama3",
        "url": "http://localhost:11434/api/generate"
    }
}


def load_config() -> dict:
    """
    Carrega a configuração do arquivo JSON.
    Se o arquivo não existir, cria um com os valores padrão.
    """
    if not CONFIG_PATH.exists():
        save_config(DEFAULT_CONFIG)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(CONFIG_PATH, 'r', encoding='utf-8') as f:
            config = json.load(f)
        # Merge com os padrões para garantir que todas as chaves existem
        merged = copy.deepcopy(DEFAULT_CONFIG)
        for key, value in config.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key].update(value)
            else:
                merged[key] = value
        return merged
    except (json.JSONDecodeError, IOError):
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: dict) -> None:
    """Salva a configuração no arquivo JSON."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_PATH, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=4, ensure_ascii=False)


def get_config_value(key_path: str, default: Any = None) -> Any:
    """
    Obtém um valor de configuração usando notação de pontos.
    Exemplo: get_config_value('limiares.dias_alerta_etapa')
    """
    config = load_config()
    value = config
    for key in key_path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def set_config_value(key_path: str, value: Any) -> None:
    """
    Define um valor de configuração usando notação de pontos.
    Exemplo: set_config_value('llm.enabled', True)
    """
    config = load_config()
    keys = key_path.split('.')
    current = config
    for key in keys[:-1]:
        if key not in current:
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value
    save_config(config)


def get_storage_path() -> Path:
    """Caminho absoluto do arquivo de armazenamento do documento."""
    path = Path(get_config_value('storage_path', DEFAULT_CONFIG['storage_path']))
    if not path.is_absolute():
        path = CONFIG_PATH.parent.parent / path
    return path


# Mapeamento de códigos de moeda para símbolos
CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def get_currency_symbol() -> str:
    """Obtém o símbolo da moeda configurada."""
    config = load_config()
    currency_code = config.get('currency', 'BRL')
    return CURRENCY_SYMBOLS.get(currency_code, currency_code)


def format_currency(amount: float, decimals: int = 2, symbol: str = None) -> str:
    """
    Formata um valor no padrão brasileiro com o símbolo da moeda.
    Exemplo: format_currency(1234.56) -> "R$ 1.234,56"
    """
    if symbol is None:
        symbol = get_currency_symbol()
    formatted = f"{amount:,.{decimals}f}"
    # Troca separadores: 1,234.56 -> 1.234,56
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{symbol} {formatted}"
