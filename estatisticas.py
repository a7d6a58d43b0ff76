"""Estatisticas do dia pro painel do admin.

"Hoje" vai da meia-noite local ate a proxima meia-noite, no fuso da config
TIMEZONE. Produto ou vendedor que nao existe mais nao derruba o relatorio:
entra com nome de placeholder e continua somando no id original.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo
from flask import current_app
from repositorios import CatalogoProdutos, CadastroUsuarios, RegistroPedidos, PRODUTO_NAO_ENCONTRADO, VENDEDOR_NAO_ENCONTRADO

ZERO = Decimal('0.00')


def fuso_configurado():
    return ZoneInfo(current_app.config.get('TIMEZONE', 'UTC'))


def janela_do_dia(em=None, fuso=None):
    """Devolve (inicio, fim) do dia de `em` como datetimes utc sem tzinfo."""
    fuso = fuso or fuso_configurado()
    if em is None:
        em = datetime.now(timezone.utc)
    elif em.tzinfo is None:
        em = em.replace(tzinfo=timezone.utc)
    local = em.astimezone(fuso)
    inicio_local = local.replace(hour=0, minute=0, second=0, microsecond=0)
    # soma no relogio local e deixa o zoneinfo acertar o horario de verao
    fim_local = (inicio_local.replace(tzinfo=None) + timedelta(days=1)).replace(tzinfo=fuso)
    inicio = inicio_local.astimezone(timezone.utc).replace(tzinfo=None)
    fim = fim_local.astimezone(timezone.utc).replace(tzinfo=None)
    return inicio, fim


def calcular_estatisticas(em=None, pedidos=None, catalogo=None, usuarios=None):
    catalogo = catalogo or CatalogoProdutos()
    usuarios = usuarios or CadastroUsuarios()
    pedidos = pedidos or RegistroPedidos(catalogo, usuarios)

    inicio, fim = janela_do_dia(em)
    pedidos_hoje = pedidos.listar_no_intervalo(inicio, fim)
    pagamentos_pendentes, entregas_pendentes = pedidos.contar_pendentes()

    por_produto = {}
    por_vendedor = {}
    por_forma = {'dinheiro': ZERO, 'pix': ZERO, 'aberto': ZERO}
    receita = ZERO

    for pedido in pedidos_hoje:
        total = Decimal(pedido.valor_total)
        receita += total

        if pedido.forma_pagamento in por_forma:
            por_forma[pedido.forma_pagamento] += total

        vendedor = por_vendedor.get(pedido.vendedor_id)
        if vendedor is None:
            usuario = usuarios.obter(pedido.vendedor_id)
            vendedor = por_vendedor[pedido.vendedor_id] = {
                'vendorId': pedido.vendedor_id,
                'vendorName': usuario.nome if usuario else VENDEDOR_NAO_ENCONTRADO,
                'orderCount': 0,
                'revenue': ZERO,
            }
        vendedor['orderCount'] += 1
        vendedor['revenue'] += total

        for item in pedido.itens:
            produto = por_produto.get(item.produto_id)
            if produto is None:
                cadastrado = catalogo.obter(item.produto_id)
                produto = por_produto[item.produto_id] = {
                    'productId': item.produto_id,
                    'productName': cadastrado.nome if cadastrado else PRODUTO_NAO_ENCONTRADO,
                    'quantity': 0,
                    'revenue': ZERO,
                }
            produto['quantity'] += item.quantidade
            produto['revenue'] += Decimal(item.preco_total)

    for linha in list(por_produto.values()) + list(por_vendedor.values()):
        linha['revenue'] = float(linha['revenue'])

    return {
        'ordersToday': len(pedidos_hoje),
        'revenueToday': float(receita),
        'pendingPayments': pagamentos_pendentes,
        'pendingDeliveries': entregas_pendentes,
        'productStats': list(por_produto.values()),
        'vendorStats': list(por_vendedor.values()),
        'paymentStats': {forma: float(valor) for forma, valor in por_forma.items()},
    }
