"""
Testes da redação de mensagens de cobrança.
O Ollama nunca é chamado de verdade: requests.post/get são substituídos.
"""
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from eprojet.llm_service import (
    gerar_mensagem_padrao, montar_prompt_cobranca, gerar_mensagem_ia,
    gerar_link_whatsapp, check_ollama_running
)
from fabricas import fazer_parcela

LLM_ATIVO = {"enabled": True, "model": "llama3", "url": "http://localhost:11434/api/generate", "timeout": 5}


@pytest.fixture
def parcela():
    return fazer_parcela(vencimento=date(2024, 1, 10), valor=1000.0)


def _resposta(texto):
    resposta = MagicMock()
    resposta.json.return_value = {"response": texto}
    resposta.raise_for_status.return_value = None
    return resposta


class TestMensagemPadrao:
    def test_parcela_atrasada(self, parcela):
        mensagem = gerar_mensagem_padrao(parcela, date(2024, 1, 20), "Erica")

        assert "está em atraso" in mensagem
        assert "Parcela: 1/3" in mensagem
        assert "Vencimento: 10/01/2024" in mensagem
        assert "Valor: R$ 1.000,00" in mensagem
        assert mensagem.endswith("Erica")

    def test_parcela_a_vencer(self, parcela):
        mensagem = gerar_mensagem_padrao(parcela, date(2024, 1, 5), "Erica")

        assert "lembrete amigável" in mensagem
        assert "em atraso" not in mensagem

    def test_prompt_inclui_tom_e_situacao(self, parcela):
        prompt = montar_prompt_cobranca(parcela, date(2024, 1, 20), "Formal", "Erica")

        assert '"Formal"' in prompt
        assert "ATRASADA" in prompt
        assert "Ana Souza" in prompt


class TestMensagemIA:
    def test_desabilitado_nao_chama_o_llm(self, parcela):
        with patch("eprojet.llm_service.requests.post") as post:
            resultado = gerar_mensagem_ia(parcela, date(2024, 1, 20), "Amigável", "Erica", {"enabled": False})

        assert resultado is None
        post.assert_not_called()

    def test_resposta_do_llm(self, parcela):
        with patch("eprojet.llm_service.requests.post", return_value=_resposta("  Olá Ana!  ")) as post:
            resultado = gerar_mensagem_ia(parcela, date(2024, 1, 20), "Urgente", "Erica", LLM_ATIVO)

        assert resultado == "Olá Ana!"
        args, kwargs = post.call_args
        assert args[0] == LLM_ATIVO["url"]
        assert kwargs["timeout"] == 5
        assert kwargs["json"]["model"] == "llama3"
        assert kwargs["json"]["stream"] is False
        assert '"Urgente"' in kwargs["json"]["prompt"]

    def test_falha_de_conexao_retorna_none(self, parcela):
        with patch("eprojet.llm_service.requests.post", side_effect=requests.ConnectionError("recusada")):
            assert gerar_mensagem_ia(parcela, date(2024, 1, 20), "Formal", "Erica", LLM_ATIVO) is None

    def test_erro_http_retorna_none(self, parcela):
        resposta = _resposta("x")
        resposta.raise_for_status.side_effect = requests.HTTPError("500")
        with patch("eprojet.llm_service.requests.post", return_value=resposta):
            assert gerar_mensagem_ia(parcela, date(2024, 1, 20), "Formal", "Erica", LLM_ATIVO) is None

    def test_json_invalido_retorna_none(self, parcela):
        resposta = _resposta("x")
        resposta.json.side_effect = ValueError("não é json")
        with patch("eprojet.llm_service.requests.post", return_value=resposta):
            assert gerar_mensagem_ia(parcela, date(2024, 1, 20), "Formal", "Erica", LLM_ATIVO) is None

    def test_resposta_vazia_retorna_none(self, parcela):
        with patch("eprojet.llm_service.requests.post", return_value=_resposta("   ")):
            assert gerar_mensagem_ia(parcela, date(2024, 1, 20), "Formal", "Erica", LLM_ATIVO) is None


class TestOllama:
    def test_ollama_respondendo(self):
        with patch("eprojet.llm_service.requests.get", return_value=MagicMock(status_code=200)):
            assert check_ollama_running() is True

    def test_ollama_fora_do_ar(self):
        with patch("eprojet.llm_service.requests.get", side_effect=requests.ConnectionError()):
            assert check_ollama_running() is False


def test_link_whatsapp_codifica_a_mensagem():
    link = gerar_link_whatsapp("Olá, tudo bem?\nR$ 1.000,00")
    assert link == "https://wa.me/?text=Ol%C3%A1%2C%20tudo%20bem%3F%0AR%24%201.000%2C00"
