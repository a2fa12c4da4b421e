"""
Testes das regras de negócio do painel: classificação de atraso, pontos de
atenção, rentabilidade, visão de recebimentos, registro de pagamento e despesas.
"""
from datetime import date

import pytest

from eprojet.models import (
    ServicoContrato, StatusContrato, StatusParcela, StatusDespesa, CategoriaDespesa,
    SituacaoProjeto, TipoPontoAtencao, ModoVisao
)
from eprojet.regras_negocio import (
    projeto_atrasado, classificar_atraso, classificar_projeto, distribuicao_status_projetos,
    dias_em_atraso, parcelas_atrasadas, total_atrasado, resumo_atrasos,
    calcular_pontos_atencao, pontos_atencao_financeiros,
    normalizar_categoria, calcular_rentabilidade, contar_disciplinas,
    calcular_visao_financeira, resumo_mes_atual, recebimentos_mensais, total_recebido_ano,
    anos_com_movimento, registrar_pagamento, resumo_despesas,
    lembretes_pendentes, lembretes_concluidos
)
from fabricas import (
    fazer_contrato, fazer_parcela, fazer_etapa, fazer_cronograma,
    fazer_outro_pagamento, fazer_despesa, fazer_lembrete
)


# =============================================================================
# CLASSIFICADOR DE ATRASO
# =============================================================================

class TestClassificarAtraso:
    """Classificação de um projeto pelas etapas do cronograma."""

    def test_etapa_pendente_vencida_e_atrasado(self, hoje):
        etapas = [fazer_etapa(prazo=date(2024, 1, 19))]
        assert classificar_atraso(etapas, hoje) == SituacaoProjeto.ATRASADO

    def test_atraso_prevalece_sobre_risco_em_etapa_posterior(self, hoje):
        etapas = [
            fazer_etapa(id=1, prazo=date(2024, 1, 22)),
            fazer_etapa(id=2, prazo=date(2024, 1, 18)),
        ]
        assert classificar_atraso(etapas, hoje) == SituacaoProjeto.ATRASADO

    def test_atraso_independe_das_demais_etapas(self, hoje):
        etapas = [
            fazer_etapa(id=1, prazo=date(2024, 1, 5), conclusao=date(2024, 1, 4)),
            fazer_etapa(id=2, prazo=date(2024, 3, 1)),
            fazer_etapa(id=3, prazo=date(2024, 1, 1)),
            fazer_etapa(id=4),
        ]
        assert classificar_atraso(etapas, hoje) == SituacaoProjeto.ATRASADO

    def test_etapa_concluida_com_prazo_vencido_nao_atrasa(self, hoje):
        etapas = [fazer_etapa(prazo=date(2024, 1, 10), conclusao=date(2024, 1, 12))]
        assert classificar_atraso(etapas, hoje) == SituacaoProjeto.NO_PRAZO

    @pytest.mark.parametrize("prazo", [date(2024, 1, 20), date(2024, 1, 24), date(2024, 1, 27)])
    def test_prazo_em_ate_sete_dias_e_risco(self, hoje, prazo):
        assert classificar_atraso([fazer_etapa(prazo=prazo)], hoje) == SituacaoProjeto.EM_RISCO

    def test_prazo_alem_de_sete_dias_no_prazo(self, hoje):
        assert classificar_atraso([fazer_etapa(prazo=date(2024, 1, 28))], hoje) == SituacaoProjeto.NO_PRAZO

    def test_etapa_sem_prazo_nao_dispara(self, hoje):
        assert classificar_atraso([fazer_etapa(prazo=None)], hoje) == SituacaoProjeto.NO_PRAZO

    def test_janela_de_alerta_configuravel(self, hoje):
        etapas = [fazer_etapa(prazo=date(2024, 1, 30))]
        assert classificar_atraso(etapas, hoje, dias_alerta=10) == SituacaoProjeto.EM_RISCO

    def test_contrato_sem_cronograma_esta_no_prazo(self, hoje):
        cronogramas = [fazer_cronograma(contrato_id=2, etapas=[fazer_etapa(prazo=date(2024, 1, 1))])]
        assert classificar_projeto(1, cronogramas, hoje) == SituacaoProjeto.NO_PRAZO
        assert classificar_projeto(2, cronogramas, hoje) == SituacaoProjeto.ATRASADO

    def test_predicado_de_atraso(self, hoje):
        assert projeto_atrasado([fazer_etapa(prazo=date(2024, 1, 19))], hoje)
        assert not projeto_atrasado([fazer_etapa(prazo=date(2024, 1, 20))], hoje)


class TestDistribuicaoStatus:
    def test_contagem_por_situacao(self, hoje):
        contratos = [
            fazer_contrato(id=1),
            fazer_contrato(id=2),
            fazer_contrato(id=3),
            fazer_contrato(id=4),
            fazer_contrato(id=5, status=StatusContrato.CONCLUIDO),
        ]
        cronogramas = [
            fazer_cronograma(id=1, contrato_id=1, etapas=[fazer_etapa(prazo=date(2024, 1, 15))]),
            fazer_cronograma(id=2, contrato_id=2, etapas=[fazer_etapa(prazo=date(2024, 2, 10))]),
            fazer_cronograma(
                id=4, contrato_id=4, inicio=date(2024, 2, 1),
                etapas=[fazer_etapa(prazo=date(2024, 2, 5))]
            ),
            fazer_cronograma(id=5, contrato_id=5, etapas=[fazer_etapa(prazo=date(2024, 1, 1))]),
        ]

        contagem = distribuicao_status_projetos(contratos, cronogramas, hoje)

        assert contagem == {"Atrasado": 1, "Em Andamento": 1, "No Prazo": 2}


# =============================================================================
# PARCELAS EM ATRASO
# =============================================================================

class TestParcelasAtrasadas:
    def test_dias_de_atraso(self, hoje):
        parcela = fazer_parcela(vencimento=date(2024, 1, 10))
        assert dias_em_atraso(parcela, hoje) == 10

    def test_soma_apenas_pendentes_vencidas(self, hoje):
        parcelas = [
            fazer_parcela(id=1, vencimento=date(2024, 1, 10), valor=1000.0),
            fazer_parcela(id=2, vencimento=date(2024, 1, 19), valor=250.5),
            fazer_parcela(id=3, vencimento=date(2024, 1, 20), valor=400.0),
            fazer_parcela(id=4, vencimento=date(2024, 2, 1), valor=900.0),
            fazer_parcela(
                id=5, vencimento=date(2024, 1, 1), valor=700.0,
                status=StatusParcela.PAGO_COM_ATRASO, data_pagamento=date(2024, 1, 5)
            ),
        ]
        esperado = sum(
            p.valor for p in parcelas
            if p.vencimento < hoje and p.status == StatusParcela.PENDENTE
        )

        assert total_atrasado(parcelas, hoje) == pytest.approx(esperado)
        assert total_atrasado(parcelas, hoje) == pytest.approx(1250.5)

    def test_mais_atrasadas_primeiro(self, hoje):
        parcelas = [
            fazer_parcela(id=1, vencimento=date(2024, 1, 15)),
            fazer_parcela(id=2, vencimento=date(2023, 12, 20)),
            fazer_parcela(id=3, vencimento=date(2024, 1, 10)),
        ]
        resultado = parcelas_atrasadas(parcelas, hoje)
        assert [(p.id, dias) for p, dias in resultado] == [(2, 31), (3, 10), (1, 5)]

    def test_resumo(self, hoje):
        parcelas = [
            fazer_parcela(id=1, vencimento=date(2024, 1, 15), valor=100.0),
            fazer_parcela(id=2, vencimento=date(2024, 1, 25), valor=200.0),
        ]
        resumo = resumo_atrasos(parcelas, hoje)
        assert resumo["quantidade"] == 1
        assert resumo["total"] == 100.0


# =============================================================================
# PONTOS DE ATENÇÃO
# =============================================================================

class TestPontosAtencao:
    """Lista única de pontos vindos de parcelas, etapas e contratos."""

    def test_tres_fontes_ordenadas_por_dias_restantes(self, hoje):
        contratos = [fazer_contrato(id=1, data=date(2023, 2, 15), duracao_meses=12)]
        parcelas = [fazer_parcela(vencimento=date(2024, 1, 10))]
        cronogramas = [fazer_cronograma(etapas=[fazer_etapa(prazo=date(2024, 1, 25))])]

        pontos = calcular_pontos_atencao(contratos, parcelas, cronogramas, hoje)

        assert [p.dias_restantes for p in pontos] == [-10, 5, 26]
        assert [p.tipo for p in pontos] == [
            TipoPontoAtencao.PAGAMENTO, TipoPontoAtencao.ETAPA, TipoPontoAtencao.CONTRATO
        ]

    def test_apenas_primeira_etapa_pendente(self, hoje):
        contratos = [fazer_contrato(data=date(2023, 1, 1), duracao_meses=36)]
        cronogramas = [fazer_cronograma(etapas=[
            fazer_etapa(id=1, prazo=date(2024, 1, 5), conclusao=date(2024, 1, 5)),
            fazer_etapa(id=2, prazo=date(2024, 1, 30)),
            fazer_etapa(id=3, prazo=date(2024, 1, 22)),
        ])]

        assert calcular_pontos_atencao(contratos, [], cronogramas, hoje) == []

    def test_contrato_inativo_nao_gera_pontos_de_etapa_nem_vencimento(self, hoje):
        contratos = [fazer_contrato(status=StatusContrato.CANCELADO, data=date(2023, 2, 15))]
        cronogramas = [fazer_cronograma(etapas=[fazer_etapa(prazo=date(2024, 1, 22))])]

        assert calcular_pontos_atencao(contratos, [], cronogramas, hoje) == []

    def test_parcela_paga_nao_gera_ponto(self, hoje):
        parcelas = [fazer_parcela(status=StatusParcela.PAGO_EM_DIA, data_pagamento=date(2024, 1, 9))]
        assert calcular_pontos_atencao([], parcelas, [], hoje) == []

    def test_limites_inclusivos(self, hoje):
        contratos = [
            fazer_contrato(id=1, data=date(2023, 2, 19), duracao_meses=12),  # vence em 30 dias
            fazer_contrato(id=2, data=date(2023, 2, 20), duracao_meses=12),  # 31 dias
        ]
        cronogramas = [
            fazer_cronograma(id=1, contrato_id=1, etapas=[fazer_etapa(prazo=date(2024, 1, 20))]),
            fazer_cronograma(id=2, contrato_id=2, etapas=[fazer_etapa(prazo=date(2024, 1, 28))]),
        ]

        pontos = calcular_pontos_atencao(contratos, [], cronogramas, hoje)

        assert [(p.tipo, p.dias_restantes) for p in pontos] == [
            (TipoPontoAtencao.ETAPA, 0),
            (TipoPontoAtencao.CONTRATO, 30),
        ]

    def test_pontos_financeiros_vencidas_e_a_vencer(self, hoje):
        parcelas = [
            fazer_parcela(id=1, vencimento=date(2024, 1, 25)),
            fazer_parcela(id=2, vencimento=date(2024, 1, 30)),
            fazer_parcela(id=3, vencimento=date(2024, 1, 10)),
        ]
        pontos = pontos_atencao_financeiros(parcelas, hoje)
        assert [p.dias_restantes for p in pontos] == [-10, 5]


# =============================================================================
# RENTABILIDADE
# =============================================================================

class TestRentabilidade:
    def test_exemplo_duas_categorias(self, hoje):
        contratos = [
            fazer_contrato(id=1, valor_total=12000.0, tipo_servico="Arquitetônico"),
            fazer_contrato(id=2, valor_total=8000.0, tipo_servico="Interiores"),
        ]

        resultado = calcular_rentabilidade(contratos, [], hoje)

        categorias = resultado["categorias"]
        assert [c.nome for c in categorias] == ["ARQUITETÔNICO", "INTERIORES"]
        assert [c.ticket_medio for c in categorias] == [12000.0, 8000.0]
        assert resultado["mais_rentavel"].nome == "ARQUITETÔNICO"
        assert resultado["receita_total"] == 20000.0
        assert resultado["ticket_medio_geral"] == 10000.0

    def test_eficiencia_conta_contratos_atrasados(self, hoje):
        contratos = [
            fazer_contrato(id=1, valor_total=5000.0, tipo_servico="Interiores"),
            fazer_contrato(id=2, valor_total=5000.0, tipo_servico="Interiores"),
        ]
        cronogramas = [fazer_cronograma(contrato_id=2, etapas=[fazer_etapa(prazo=date(2024, 1, 2))])]

        categoria = calcular_rentabilidade(contratos, cronogramas, hoje)["categorias"][0]

        assert categoria.quantidade == 2
        assert categoria.eficiencia == 50.0

    def test_maior_receita_separada_do_maior_ticket(self, hoje):
        contratos = [
            fazer_contrato(id=1, valor_total=20000.0, tipo_servico="Consultoria"),
            fazer_contrato(id=2, valor_total=9000.0, tipo_servico="Interiores"),
            fazer_contrato(id=3, valor_total=9000.0, tipo_servico="Interiores"),
            fazer_contrato(id=4, valor_total=9000.0, tipo_servico="Interiores"),
        ]
        resultado = calcular_rentabilidade(contratos, [], hoje)
        assert resultado["mais_rentavel"].nome == "CONSULTORIA"
        assert resultado["maior_receita"].nome == "INTERIORES"

    def test_categoria_normalizada(self):
        assert normalizar_categoria("  interiores ") == "INTERIORES"
        assert normalizar_categoria("") == "OUTROS"
        assert normalizar_categoria(None) == "OUTROS"

    def test_sem_contratos(self, hoje):
        resultado = calcular_rentabilidade([], [], hoje)
        assert resultado["categorias"] == []
        assert resultado["mais_rentavel"] is None
        assert resultado["ticket_medio_geral"] == 0.0

    def test_disciplinas(self):
        contratos = [
            fazer_contrato(id=1, servicos=(ServicoContrato(id=1, nome_servico="Projeto Arquitetônico"),)),
            fazer_contrato(id=2, servicos=(
                ServicoContrato(id=1, nome_servico="Design de Interiores"),
                ServicoContrato(id=2, nome_servico="Arquitetônico"),
            )),
            fazer_contrato(id=3, servicos=(ServicoContrato(id=1, nome_servico="Consultoria"),)),
        ]
        assert contar_disciplinas(contratos) == {"arquitetura": 2, "interiores": 1}


# =============================================================================
# VISÃO DE RECEBIMENTOS
# =============================================================================

@pytest.fixture
def carteira():
    parcelas = [
        fazer_parcela(id=1, vencimento=date(2024, 1, 10), valor=1000.0),
        fazer_parcela(id=2, vencimento=date(2024, 1, 25), valor=2000.0),
        fazer_parcela(
            id=3, vencimento=date(2024, 1, 5), valor=1500.0,
            status=StatusParcela.PAGO_EM_DIA, data_pagamento=date(2024, 1, 5)
        ),
        fazer_parcela(
            id=4, vencimento=date(2023, 12, 20), valor=800.0,
            status=StatusParcela.PAGO_COM_ATRASO, data_pagamento=date(2024, 1, 3)
        ),
        fazer_parcela(id=5, cliente="Bruno Lima", vencimento=date(2023, 12, 15), valor=700.0),
    ]
    outros = [
        fazer_outro_pagamento(id=1, data_pagamento=date(2024, 1, 15), valor=500.0),
        fazer_outro_pagamento(id=2, data_pagamento=date(2024, 2, 1), valor=300.0),
    ]
    return parcelas, outros


class TestVisaoFinanceira:
    def test_modo_mes(self, hoje, carteira):
        parcelas, outros = carteira

        visao = calcular_visao_financeira(parcelas, outros, hoje, ModoVisao.MES, ano=2024, mes=1)

        assert visao["previsto"] == 5000.0
        assert visao["pendente"] == 3000.0
        assert visao["recebido"] == 2800.0
        assert visao["atrasado"] == 1700.0
        assert [i.data for i in visao["itens"]] == [
            date(2024, 1, 5), date(2024, 1, 10), date(2024, 1, 15), date(2024, 1, 25)
        ]
        assert [i.tipo for i in visao["itens"]].count("avulso") == 1

    def test_modo_cliente_acumulado(self, hoje, carteira):
        parcelas, outros = carteira

        visao = calcular_visao_financeira(parcelas, outros, hoje, ModoVisao.CLIENTE, cliente="Ana Souza")

        assert visao["previsto"] == 5300.0
        assert visao["recebido"] == 2300.0
        assert visao["pendente"] == 3000.0
        assert visao["atrasado"] == 1000.0
        assert len(visao["itens"]) == 4

    def test_modo_atrasados_zera_recebido(self, hoje, carteira):
        parcelas, outros = carteira

        visao = calcular_visao_financeira(parcelas, outros, hoje, ModoVisao.ATRASADOS)

        assert visao["recebido"] == 0.0
        assert visao["atrasado"] == 1700.0
        assert [i.parcela_id for i in visao["itens"]] == [5, 1]

    def test_parametros_obrigatorios(self, hoje, carteira):
        parcelas, outros = carteira
        with pytest.raises(ValueError):
            calcular_visao_financeira(parcelas, outros, hoje, ModoVisao.MES)
        with pytest.raises(ValueError):
            calcular_visao_financeira(parcelas, outros, hoje, ModoVisao.CLIENTE)

    def test_resumo_mes_atual(self, hoje, carteira):
        parcelas, outros = carteira
        assert resumo_mes_atual(parcelas, outros, hoje) == {
            "recebido_mes": 2800.0,
            "a_receber_mes": 3000.0,
            "total_atrasado": 1700.0,
        }

    def test_recebimentos_mensais(self, carteira):
        parcelas, outros = carteira

        serie = recebimentos_mensais(parcelas, outros, 2024)

        assert len(serie) == 12
        assert serie[0] == {"mes": "Jan", "valor": 2800.0}
        assert serie[1] == {"mes": "Fev", "valor": 300.0}
        assert all(m["valor"] == 0.0 for m in serie[2:])
        assert total_recebido_ano(parcelas, outros, 2024) == 3100.0
        assert total_recebido_ano(parcelas, outros, 2023) == 0.0

    def test_anos_incluem_avulsos_e_pagamentos(self, hoje):
        parcelas = [
            fazer_parcela(id=1, vencimento=date(2023, 12, 10), status=StatusParcela.PAGO_COM_ATRASO,
                          data_pagamento=date(2025, 1, 3)),
        ]
        outros = [fazer_outro_pagamento(data_pagamento=date(2021, 7, 1))]

        assert anos_com_movimento(parcelas, outros, hoje) == [2021, 2023, 2024, 2025]
        assert anos_com_movimento([], [], hoje) == [2024]


# =============================================================================
# REGISTRO DE PAGAMENTO
# =============================================================================

class TestRegistrarPagamento:
    def test_pago_em_dia(self):
        parcela = fazer_parcela(vencimento=date(2024, 1, 10))
        paga = registrar_pagamento(parcela, date(2024, 1, 9))
        assert paga.status == StatusParcela.PAGO_EM_DIA
        assert paga.data_pagamento == date(2024, 1, 9)

    def test_pago_no_vencimento_e_em_dia(self):
        parcela = fazer_parcela(vencimento=date(2024, 1, 10))
        assert registrar_pagamento(parcela, date(2024, 1, 10)).status == StatusParcela.PAGO_EM_DIA

    def test_pago_com_atraso(self):
        parcela = fazer_parcela(vencimento=date(2024, 1, 10))
        assert registrar_pagamento(parcela, date(2024, 1, 12)).status == StatusParcela.PAGO_COM_ATRASO

    def test_registro_repetido_mantem_status(self):
        parcela = fazer_parcela(vencimento=date(2024, 1, 10))
        primeira = registrar_pagamento(parcela, date(2024, 1, 12))
        segunda = registrar_pagamento(primeira, date(2024, 1, 12))
        assert primeira.status == segunda.status == StatusParcela.PAGO_COM_ATRASO
        assert segunda.valor_previsto == 1000.0

    def test_parcela_paga_nao_muda_de_status(self):
        paga = registrar_pagamento(fazer_parcela(vencimento=date(2024, 1, 10)), date(2024, 1, 9))

        with pytest.raises(ValueError):
            registrar_pagamento(paga, date(2024, 1, 12))
        with pytest.raises(ValueError):
            registrar_pagamento(paga, date(2024, 1, 9), valor=500.0)
        assert paga.status == StatusParcela.PAGO_EM_DIA
        assert paga.data_pagamento == date(2024, 1, 9)

    def test_valor_informado_preserva_previsto(self):
        parcela = fazer_parcela(valor=1000.0)
        paga = registrar_pagamento(parcela, date(2024, 1, 9), valor=900.0)
        assert paga.valor == 900.0
        assert paga.valor_previsto == 1000.0

    def test_parcela_original_inalterada(self):
        parcela = fazer_parcela()
        registrar_pagamento(parcela, date(2024, 1, 9), valor=900.0)
        assert parcela.status == StatusParcela.PENDENTE
        assert parcela.valor == 1000.0

    @pytest.mark.parametrize("valor", [0, -10.0])
    def test_valor_nao_positivo(self, valor):
        with pytest.raises(ValueError):
            registrar_pagamento(fazer_parcela(), date(2024, 1, 9), valor=valor)


# =============================================================================
# DESPESAS
# =============================================================================

class TestResumoDespesas:
    def test_totais_do_mes(self):
        despesas = [
            fazer_despesa(id=3, vencimento=date(2024, 2, 5)),
            fazer_despesa(
                id=2, descricao="Plotagem", categoria=CategoriaDespesa.VARIAVEL, valor=300.0,
                vencimento=date(2024, 1, 12), status=StatusDespesa.PAGO, data_pagamento=date(2024, 1, 12)
            ),
            fazer_despesa(id=1),
        ]

        resumo = resumo_despesas(despesas, 2024, 1)

        assert [d.id for d in resumo["itens"]] == [1, 2]
        assert resumo["total"] == 2300.0
        assert resumo["fixas"] == 2000.0
        assert resumo["variaveis"] == 300.0
        assert resumo["pagas"] == 300.0
        assert resumo["pendentes"] == 2000.0


# =============================================================================
# LEMBRETES
# =============================================================================

class TestLembretes:
    def test_pendentes_por_data_com_dias(self, hoje):
        lembretes = [
            fazer_lembrete(id=1, data=date(2024, 1, 25)),
            fazer_lembrete(id=2, data=date(2024, 1, 18)),
            fazer_lembrete(id=3, data=date(2024, 1, 20)),
            fazer_lembrete(id=4, data=date(2024, 1, 1), concluido=True),
        ]

        pendentes = lembretes_pendentes(lembretes, hoje)

        assert [(l.id, dias) for l, dias in pendentes] == [(2, -2), (3, 0), (1, 5)]
        assert [l.id for l in lembretes_concluidos(lembretes)] == [4]
