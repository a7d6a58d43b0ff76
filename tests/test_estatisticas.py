from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo
import pytest
from conftest import AGORA, criar_pedido
from models import db, Usuario, Produto, Pedido
from estatisticas import calcular_estatisticas, janela_do_dia
from repositorios import PRODUTO_NAO_ENCONTRADO, VENDEDOR_NAO_ENCONTRADO


def por_id(linhas, chave):
    return {linha[chave]: linha for linha in linhas}


def test_dia_sem_pedidos(ctx, cadastro):
    stats = calcular_estatisticas(AGORA)
    assert stats == {
        'ordersToday': 0,
        'revenueToday': 0,
        'pendingPayments': 0,
        'pendingDeliveries': 0,
        'productStats': [],
        'vendorStats': [],
        'paymentStats': {'dinheiro': 0, 'pix': 0, 'aberto': 0},
    }


def test_dia_com_dois_pedidos(ctx, cadastro):
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20), (cadastro['Y'], 2, 10), (cadastro['Z'], 1, 5)],
                 forma='dinheiro', criado_em=AGORA - timedelta(hours=3))
    criar_pedido(cadastro['outro'], [(cadastro['W'], 1, 20), (cadastro['V'], 1, 10)],
                 forma='pix', criado_em=AGORA - timedelta(hours=1))

    stats = calcular_estatisticas(AGORA)
    assert stats['ordersToday'] == 2
    assert stats['revenueToday'] == pytest.approx(75.0)
    assert stats['paymentStats'] == {'dinheiro': 45.0, 'pix': 30.0, 'aberto': 0}

    produtos = por_id(stats['productStats'], 'productId')
    assert len(produtos) == 5
    assert produtos[cadastro['X']] == {'productId': cadastro['X'], 'productName': 'Canjiquinha', 'quantity': 1, 'revenue': 20.0}
    assert produtos[cadastro['Y']]['quantity'] == 2
    assert produtos[cadastro['Y']]['revenue'] == 20.0

    vendedores = por_id(stats['vendorStats'], 'vendorId')
    assert vendedores[cadastro['vendedor']] == {
        'vendorId': cadastro['vendedor'], 'vendorName': 'João Vendedor', 'orderCount': 1, 'revenue': 45.0,
    }
    assert vendedores[cadastro['outro']]['revenue'] == 30.0


def test_agrupa_mesmo_produto_e_vendedor(ctx, cadastro):
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 2, 20)], criado_em=AGORA)
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20), (cadastro['Y'], 1, 10)], forma='aberto', criado_em=AGORA)

    stats = calcular_estatisticas(AGORA)
    produtos = por_id(stats['productStats'], 'productId')
    assert produtos[cadastro['X']]['quantity'] == 3
    assert produtos[cadastro['X']]['revenue'] == 60.0
    assert stats['vendorStats'] == [{
        'vendorId': cadastro['vendedor'], 'vendorName': 'João Vendedor', 'orderCount': 2, 'revenue': 70.0,
    }]
    assert stats['paymentStats']['aberto'] == 30.0


def test_pedidos_de_ontem_so_contam_nos_pendentes(ctx, cadastro):
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=AGORA - timedelta(days=1))
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=AGORA - timedelta(days=2),
                 status_pagamento='realizado', status_entrega='realizada')
    criar_pedido(cadastro['vendedor'], [(cadastro['Y'], 1, 10)], criado_em=AGORA, status_entrega='realizada')

    stats = calcular_estatisticas(AGORA)
    assert stats['ordersToday'] == 1
    assert stats['revenueToday'] == 10.0
    assert stats['pendingPayments'] == 2
    assert stats['pendingDeliveries'] == 1
    assert [p['productId'] for p in stats['productStats']] == [cadastro['Y']]


def test_janela_vai_ate_a_proxima_meia_noite(ctx, cadastro):
    inicio_do_dia = datetime(2026, 10, 18)
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=inicio_do_dia)
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=inicio_do_dia + timedelta(days=1))
    criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=inicio_do_dia - timedelta(microseconds=1))

    assert calcular_estatisticas(AGORA)['ordersToday'] == 1


def test_vendedor_removido_nao_quebra_relatorio(ctx, cadastro):
    criar_pedido(cadastro['outro'], [(cadastro['W'], 1, 20)], forma='pix', criado_em=AGORA)
    db.session.delete(db.session.get(Usuario, cadastro['outro']))
    db.session.commit()

    stats = calcular_estatisticas(AGORA)
    assert stats['revenueToday'] == 20.0
    assert stats['vendorStats'] == [{
        'vendorId': cadastro['outro'], 'vendorName': VENDEDOR_NAO_ENCONTRADO, 'orderCount': 1, 'revenue': 20.0,
    }]


def test_produto_removido_nao_quebra_relatorio(ctx, cadastro):
    criar_pedido(cadastro['vendedor'], [(cadastro['V'], 3, 10)], criado_em=AGORA)
    db.session.delete(db.session.get(Produto, cadastro['V']))
    db.session.commit()

    stats = calcular_estatisticas(AGORA)
    assert stats['productStats'] == [{
        'productId': cadastro['V'], 'productName': PRODUTO_NAO_ENCONTRADO, 'quantity': 3, 'revenue': 30.0,
    }]


def test_forma_de_pagamento_desconhecida_fica_fora_do_detalhamento(ctx, cadastro):
    pedido = criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=AGORA)
    db.session.get(Pedido, pedido['id']).forma_pagamento = 'cartao'
    db.session.commit()

    stats = calcular_estatisticas(AGORA)
    assert stats['ordersToday'] == 1
    assert stats['revenueToday'] == 20.0
    assert stats['paymentStats'] == {'dinheiro': 0, 'pix': 0, 'aberto': 0}


def test_janela_no_fuso_configurado():
    fuso = ZoneInfo('America/Sao_Paulo')
    inicio, fim = janela_do_dia(datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc), fuso)
    assert inicio == datetime(2026, 10, 18, 3, 0)
    assert fim == datetime(2026, 10, 19, 3, 0)

    # 01:00 utc ainda e dia 17 em sao paulo
    inicio, _ = janela_do_dia(datetime(2026, 10, 18, 1, 0, tzinfo=timezone.utc), fuso)
    assert inicio == datetime(2026, 10, 17, 3, 0)


def test_janela_com_horario_de_verao():
    fuso = ZoneInfo('Europe/Lisbon')
    inicio, fim = janela_do_dia(datetime(2026, 10, 25, 12, 0, tzinfo=timezone.utc), fuso)
    assert inicio == datetime(2026, 10, 24, 23, 0)
    assert fim == datetime(2026, 10, 26, 0, 0)
    assert fim - inicio == timedelta(hours=25)


def test_estatisticas_respeitam_timezone_da_config(app, cadastro):
    app.config['TIMEZONE'] = 'America/Sao_Paulo'
    with app.app_context():
        # 23:30 do dia 17 em sao paulo
        criar_pedido(cadastro['vendedor'], [(cadastro['X'], 1, 20)], criado_em=datetime(2026, 10, 18, 2, 30))
        assert calcular_estatisticas(datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc))['ordersToday'] == 0
        assert calcular_estatisticas(datetime(2026, 10, 18, 2, 45, tzinfo=timezone.utc))['ordersToday'] == 1
