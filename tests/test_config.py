"""Testes da configuração persistente e da formatação de moeda."""
import json

import pytest

from eprojet import config


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    caminho = tmp_path / "data" / "config.json"
    monkeypatch.setattr(config, "CONFIG_PATH", caminho)
    return caminho


class TestLoadConfig:
    def test_cria_arquivo_com_padroes(self, config_path):
        carregada = config.load_config()

        assert carregada == config.DEFAULT_CONFIG
        assert config_path.exists()
        assert json.loads(config_path.read_text(encoding="utf-8"))["currency"] == "BRL"

    def test_mescla_um_nivel(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(
            json.dumps({"limiares": {"dias_alerta_etapa": 3}, "assinatura": "Estúdio"}),
            encoding="utf-8"
        )

        carregada = config.load_config()

        assert carregada["limiares"]["dias_alerta_etapa"] == 3
        assert carregada["limiares"]["dias_alerta_contrato"] == 30
        assert carregada["assinatura"] == "Estúdio"
        assert carregada["llm"]["enabled"] is False

    def test_arquivo_corrompido_usa_padroes(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{nada", encoding="utf-8")

        assert config.load_config() == config.DEFAULT_CONFIG

    def test_padroes_nao_sao_alterados(self, config_path):
        carregada = config.load_config()
        carregada["limiares"]["dias_alerta_etapa"] = 99

        assert config.DEFAULT_CONFIG["limiares"]["dias_alerta_etapa"] == 7


class TestValoresPontuados:
    def test_get_e_set(self, config_path):
        config.set_config_value("llm.enabled", True)
        config.set_config_value("novo.grupo.chave", "x")

        assert config.get_config_value("llm.enabled") is True
        assert config.get_config_value("llm.model") == "llama3"
        assert config.get_config_value("novo.grupo.chave") == "x"
        assert config.get_config_value("nao.existe", "padrao") == "padrao"

    def test_caminho_de_armazenamento_relativo(self, config_path, tmp_path):
        assert config.get_storage_path() == tmp_path / "data" / "eprojet_storage.json"

    def test_caminho_de_armazenamento_absoluto(self, config_path, tmp_path):
        destino = tmp_path / "outro" / "dados.json"
        config.set_config_value("storage_path", str(destino))
        assert config.get_storage_path() == destino


class TestFormatCurrency:
    @pytest.mark.parametrize("valor,esperado", [
        (1234.56, "R$ 1.234,56"),
        (0, "R$ 0,00"),
        (1000000, "R$ 1.000.000,00"),
        (-1234.5, "R$ -1.234,50"),
    ])
    def test_padrao_brasileiro(self, valor, esperado):
        assert config.format_currency(valor, symbol="R$") == esperado

    def test_simbolo_da_moeda_configurada(self, config_path):
        config.set_config_value("currency", "EUR")
        assert config.format_currency(10) == "€ 10,00"
