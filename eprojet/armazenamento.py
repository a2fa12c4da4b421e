"""
Armazenamento do documento da aplicação.

Todo o estado (AppData) é gravado como um único documento JSON sob uma chave
fixa dentro do arquivo de armazenamento, e regravado inteiro a cada alteração.

Na leitura:
- o documento passa pelas migrações até a versão atual do esquema;
- cada coleção ausente é preenchida com a coleção do documento padrão
  (campo a campo, sem descartar as coleções presentes);
- registros com dados malformados (datas, status) são ignorados e registrados
  no log.
"""
import copy
import json
import logging
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union, get_args, get_origin, get_type_hints

from eprojet.models import (
    AppData, PrecoServico, FaixaPreco
)
from eprojet.datas import parse_data
from eprojet.planejamento import template_etapas_padrao
from eprojet.constants import (
    STORAGE_KEY, SCHEMA_VERSION,
    PRECOS_SERVICOS_PADRAO, VALORES_HORA_PADRAO, FAIXAS_MEDICAO_PADRAO
)

logger = logging.getLogger(__name__)


# ============================================================================
# DOCUMENTO PADRÃO
# ============================================================================

def documento_padrao() -> AppData:
    """Documento inicial: coleções vazias, tabelas de preço e modelo de etapas."""
    return AppData(
        precos_servicos=tuple(
            PrecoServico(id=i, nome=nome, unidade=unidade, preco=preco)
            for i, (nome, unidade, preco) in enumerate(PRECOS_SERVICOS_PADRAO, start=1)
        ),
        valores_hora=tuple(
            PrecoServico(id=i, nome=nome, unidade=unidade, preco=preco)
            for i, (nome, unidade, preco) in enumerate(VALORES_HORA_PADRAO, start=1)
        ),
        faixas_medicao=tuple(
            FaixaPreco(id=i, faixa=faixa, preco=preco)
            for i, (faixa, preco) in enumerate(FAIXAS_MEDICAO_PADRAO, start=1)
        ),
        template_etapas=template_etapas_padrao(),
    )


# ============================================================================
# SERIALIZAÇÃO
# ============================================================================

def _para_json(valor: Any) -> Any:
    if is_dataclass(valor):
        return {f.name: _para_json(getattr(valor, f.name)) for f in fields(valor)}
    if isinstance(valor, Enum):
        return valor.value
    if isinstance(valor, date):
        return valor.isoformat()
    if isinstance(valor, (list, tuple)):
        return [_para_json(v) for v in valor]
    return valor


def serializar(dados: AppData) -> Dict[str, Any]:
    """Converte o AppData num dicionário JSON com a versão do esquema."""
    documento = _para_json(dados)
    documento["schema_version"] = SCHEMA_VERSION
    return documento


def _construir(tipo: Any, valor: Any, campo: str) -> Any:
    """Converte um valor JSON no tipo anotado do campo."""
    origem = get_origin(tipo)
    if origem is Union:
        if valor is None or valor == "":
            return None
        tipo_real = next(a for a in get_args(tipo) if a is not type(None))
        return _construir(tipo_real, valor, campo)
    if origem is tuple:
        tipo_item = get_args(tipo)[0]
        return tuple(_construir(tipo_item, v, campo) for v in (valor or ()))
    if tipo is date:
        return parse_data(valor, campo)
    if isinstance(tipo, type) and issubclass(tipo, Enum):
        return tipo(valor)
    if is_dataclass(tipo):
        return registro_de_dict(tipo, valor)
    if tipo is bool:
        if not isinstance(valor, bool):
            raise ValueError(f"'{campo}' deve ser true/false, recebido {valor!r}")
        return valor
    if tipo in (int, float, str):
        return tipo(valor)
    return valor


def registro_de_dict(cls: type, dados: Dict[str, Any]) -> Any:
    """
    Reconstrói uma dataclass a partir do dicionário salvo.

    Raises:
        TypeError / ValueError: campo obrigatório ausente ou valor inválido.
    """
    if not isinstance(dados, dict):
        raise TypeError(f"{cls.__name__}: esperado objeto, recebido {type(dados).__name__}")
    tipos = get_type_hints(cls)
    kwargs = {
        f.name: _construir(tipos[f.name], dados[f.name], f.name)
        for f in fields(cls)
        if f.name in dados
    }
    return cls(**kwargs)


def _colecao_de_json(nome: str, cls: type, registros: Any) -> tuple:
    """Converte uma coleção, ignorando (com aviso) registros malformados."""
    if not isinstance(registros, list):
        raise TypeError(f"Coleção '{nome}' não é uma lista")
    resultado = []
    for indice, registro in enumerate(registros):
        try:
            resultado.append(registro_de_dict(cls, registro))
        except (TypeError, ValueError, KeyError) as e:
            logger.warning(f"Registro {indice} de '{nome}' ignorado: {e}")
    return tuple(resultado)


# ============================================================================
# MIGRAÇÕES DE ESQUEMA
# ============================================================================

def _migrar_v1_para_v2(documento: Dict[str, Any]) -> Dict[str, Any]:
    """v2 guarda o valor original da parcela em 'valor_previsto'."""
    for parcela in documento.get("parcelas") or []:
        if isinstance(parcela, dict) and parcela.get("valor_previsto") is None:
            parcela["valor_previsto"] = parcela.get("valor")
    return documento


# versão de origem -> função que leva o documento à versão seguinte
MIGRACOES: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    1: _migrar_v1_para_v2,
}


def migrar(documento: Dict[str, Any]) -> Dict[str, Any]:
    """
    Aplica as migrações pendentes; documentos sem versão são v1.

    Raises:
        ValueError: versão que não é inteira ou sem migração conhecida.
    """
    versao = documento.get("schema_version", 1)
    if isinstance(versao, bool) or not isinstance(versao, int):
        raise ValueError(f"Versão de esquema inválida: {versao!r}")
    while versao < SCHEMA_VERSION:
        if versao not in MIGRACOES:
            raise ValueError(f"Sem migração para a versão de esquema {versao}")
        documento = MIGRACOES[versao](documento)
        versao += 1
    documento["schema_version"] = versao
    return documento


def desserializar(documento: Dict[str, Any], padrao: Optional[AppData] = None) -> AppData:
    """
    Reconstrói o AppData. Cada coleção ausente (ou ilegível) no documento é
    preenchida com a do documento padrão. Um documento que não pode ser
    migrado é descartado em favor do padrão.
    """
    if padrao is None:
        padrao = documento_padrao()
    try:
        documento = migrar(copy.deepcopy(documento))
    except ValueError as e:
        logger.error(f"Documento não pôde ser migrado, usando padrão: {e}")
        return padrao
    tipos = get_type_hints(AppData)

    colecoes = {}
    for f in fields(AppData):
        registros = documento.get(f.name)
        if registros is None:
            colecoes[f.name] = getattr(padrao, f.name)
            continue
        tipo_item = get_args(tipos[f.name])[0]
        try:
            colecoes[f.name] = _colecao_de_json(f.name, tipo_item, registros)
        except TypeError as e:
            logger.error(f"Coleção '{f.name}' ilegível, usando padrão: {e}")
            colecoes[f.name] = getattr(padrao, f.name)
    return AppData(**colecoes)


# ============================================================================
# LEITURA E GRAVAÇÃO
# ============================================================================

def carregar_dados(path: Path, padrao: Optional[AppData] = None) -> AppData:
    """
    Lê o documento do arquivo de armazenamento.
    Se o arquivo ou a chave não existirem, ou a leitura falhar, retorna o padrão.
    """
    if padrao is None:
        padrao = documento_padrao()
    if not path.exists():
        return padrao

    try:
        with open(path, 'r', encoding='utf-8') as f:
            armazenamento = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.error(f"Erro ao carregar dados de {path}: {e}")
        return padrao

    documento = armazenamento.get(STORAGE_KEY) if isinstance(armazenamento, dict) else None
    if not isinstance(documento, dict):
        return padrao
    return desserializar(documento, padrao)


def salvar_dados(dados: AppData, path: Path) -> bool:
    """
    Grava o documento inteiro sob a chave fixa, preservando outras chaves do arquivo.

    Returns:
        False se a gravação falhar (o estado em memória continua válido, mas a
        alteração não foi persistida).
    """
    armazenamento = {}
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                conteudo = json.load(f)
            if isinstance(conteudo, dict):
                armazenamento = conteudo
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Arquivo de armazenamento ilegível, será sobrescrito: {e}")

    armazenamento[STORAGE_KEY] = serializar(dados)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(armazenamento, f, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        logger.warning(f"Dados NÃO foram salvos em {path}: {e}")
        return False
    return True
