"""
Configuração dos testes - coloca a raiz do repositório no sys.path.

"Hoje" é sempre injetado; nenhum teste depende de date.today().
"""
import sys
from datetime import date
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from eprojet.models import AppData  # noqa: E402


HOJE = date(2024, 1, 20)


@pytest.fixture
def hoje():
    return HOJE


@pytest.fixture
def dados_vazios():
    return AppData()
