"""
Precificação de serviços do contrato a partir das tabelas de preço.

Cascata de cálculo de um serviço:
1. metragem: "Medição e Planta Baixa" usa a faixa de área; outros serviços
   cobrados por m² multiplicam a área pelo preço.
2. hora: preço do próprio serviço se for por hora, senão a primeira taxa
   da tabela de valores por hora.
3. serviços mensais sempre valem preço x duração do contrato.
"""
import re
from typing import Optional, Sequence, Tuple

from eprojet.models import PrecoServico, FaixaPreco
from eprojet.constants import (
    SERVICO_MEDICAO, SERVICO_GERENCIAMENTO,
    METODO_METRAGEM, METODO_HORA, METODO_MANUAL,
    UNIDADE_M2, UNIDADE_HORA, UNIDADE_MES
)

_NUMERO = re.compile(r"\d+(?:[.,]\d+)?")


def limites_faixa(faixa: str) -> Optional[Tuple[float, Optional[float]]]:
    """
    Lê os limites de uma faixa como "0 a 50 m²" ou "Acima de 100 m²".

    Returns:
        (mínimo, máximo) com máximo None para faixa aberta, ou None se o
        texto não tiver número.
    """
    numeros = [float(n.replace(",", ".")) for n in _NUMERO.findall(faixa or "")]
    if not numeros:
        return None
    return numeros[0], (numeros[1] if len(numeros) > 1 else None)


def faixa_para_area(faixas: Sequence[FaixaPreco], area: float) -> Optional[FaixaPreco]:
    """
    Faixa que contém a área, testando da mais barata para a mais cara.
    Sem faixa compatível vale a última da tabela; tabela vazia retorna None.
    """
    if not faixas:
        return None
    for faixa in sorted(faixas, key=lambda f: f.preco):
        limites = limites_faixa(faixa.faixa)
        if limites is None:
            continue
        minimo, maximo = limites
        if area >= minimo and (maximo is None or area <= maximo):
            return faixa
    return faixas[-1]


def metodo_padrao(servico: Optional[PrecoServico]) -> str:
    """Método de cálculo sugerido ao escolher o serviço."""
    if servico is None or servico.nome == SERVICO_GERENCIAMENTO:
        return METODO_MANUAL
    if servico.unidade == UNIDADE_HORA:
        return METODO_HORA
    if servico.unidade == UNIDADE_M2:
        return METODO_METRAGEM
    return METODO_MANUAL


def calcular_valor_servico(
    servico: Optional[PrecoServico],
    metodo: str,
    duracao_meses: int,
    valores_hora: Sequence[PrecoServico] = (),
    faixas_medicao: Sequence[FaixaPreco] = (),
    area: float = 0.0,
    horas: float = 0.0
) -> Optional[float]:
    """
    Valor calculado de um serviço do contrato.

    Returns:
        Valor arredondado em centavos, ou None quando nada pode ser calculado
        (método manual, área/horas zeradas ou serviço sem preço); nesse caso
        o valor é digitado no formulário.
    """
    valor = None

    if servico is not None and metodo == METODO_METRAGEM and area > 0:
        if servico.nome == SERVICO_MEDICAO:
            faixa = faixa_para_area(faixas_medicao, area)
            if faixa is not None:
                valor = faixa.preco
        elif servico.unidade == UNIDADE_M2 and servico.preco:
            valor = area * servico.preco

    elif metodo == METODO_HORA and horas > 0:
        taxa = None
        if servico is not None and servico.unidade == UNIDADE_HORA and servico.preco is not None:
            taxa = servico.preco
        elif valores_hora and valores_hora[0].preco is not None:
            taxa = valores_hora[0].preco
        if taxa is not None:
            valor = horas * taxa

    # Mensal prevalece sobre os demais métodos
    if servico is not None and servico.unidade == UNIDADE_MES and servico.preco:
        valor = servico.preco * duracao_meses

    return round(valor, 2) if valor is not None else None
