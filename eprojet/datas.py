"""
Utilidades de data.
Converte e valida as datas que entram no sistema (formulários e documento salvo)
e concentra os cálculos de calendário usados pelas regras de negócio.
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple


class DataInvalidaError(ValueError):
    """Data ausente ou malformada num campo obrigatório."""

    def __init__(self, campo: str, valor: Any):
        self.campo = campo
        self.valor = valor
        super().__init__(f"Campo '{campo}' com data inválida: {valor!r}")


def parse_data(valor: Any, campo: str = "data") -> date:
    """
    Converte um valor em `date`.

    Aceita `date`, `datetime` e textos ISO ('2024-01-10' ou
    '2024-01-10T00:00:00.000Z'; apenas a parte da data é considerada).

    Raises:
        DataInvalidaError: se o valor não representa uma data.
    """
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    if isinstance(valor, str):
        try:
            return date.fromisoformat(valor.strip()[:10])
        except ValueError:
            pass
    raise DataInvalidaError(campo, valor)


def parse_data_opcional(valor: Any, campo: str = "data") -> Optional[date]:
    """Como `parse_data`, mas `None` e texto vazio significam 'sem data'."""
    if valor is None or (isinstance(valor, str) and not valor.strip()):
        return None
    return parse_data(valor, campo)


def hoje() -> date:
    return date.today()


def diff_dias(alvo: date, referencia: date) -> int:
    """Dias inteiros de `referencia` até `alvo` (negativo se `alvo` já passou)."""
    return (alvo - referencia).days


def adicionar_meses(data: date, meses: int) -> date:
    """Soma meses de calendário, ajustando o dia ao último dia do mês de destino."""
    indice = data.month - 1 + meses
    ano = data.year + indice // 12
    mes = indice % 12 + 1
    dia = min(data.day, calendar.monthrange(ano, mes)[1])
    return date(ano, mes, dia)


def limites_mes(ano: int, mes: int) -> Tuple[date, date]:
    """Primeiro e último dia (inclusivos) de um mês."""
    ultimo = calendar.monthrange(ano, mes)[1]
    return date(ano, mes, 1), date(ano, mes, ultimo)


def no_mes(data: Optional[date], ano: int, mes: int) -> bool:
    return data is not None and data.year == ano and data.month == mes


def adicionar_dias_uteis(inicio: date, dias: int) -> date:
    """Avança `dias` dias úteis (segunda a sexta) a partir de `inicio`."""
    atual = inicio
    adicionados = 0
    while adicionados < dias:
        atual += timedelta(days=1)
        if atual.weekday() < 5:
            adicionados += 1
    return atual


def formatar_data(data: Optional[date]) -> str:
    """Formato brasileiro DD/MM/AAAA."""
    if data is None:
        return "--/--/----"
    return data.strftime("%d/%m/%Y")
