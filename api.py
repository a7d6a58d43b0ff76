import logging
from datetime import datetime, timezone
from flask import Blueprint, jsonify, request, render_template, make_response
from repositorios import CatalogoProdutos, CadastroUsuarios, RegistroPedidos
from estatisticas import calcular_estatisticas, fuso_configurado
from validacao import (validar_usuario, validar_produto, validar_cabecalho_pedido, validar_itens,
                       validar_status, validar_limite, exigir_objeto)
from erros import ErroValidacao, ErroNaoEncontrado

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')

catalogo = CatalogoProdutos()
usuarios = CadastroUsuarios()
pedidos = RegistroPedidos(catalogo, usuarios)

NOMES_PAGAMENTO = {'dinheiro': 'Dinheiro', 'pix': 'PIX', 'aberto': 'Em Aberto'}


def corpo_json():
    dados = request.get_json(silent=True)
    if dados is None:
        raise ErroValidacao('Body JSON obrigatório')
    return exigir_objeto(dados, 'body')


# usuarios
@api.route('/users', methods=['GET'])
def listar_usuarios():
    return jsonify([u.to_dict() for u in usuarios.listar()])


@api.route('/users', methods=['POST'])
def criar_usuario(): #cadastro
    usuario = usuarios.criar(validar_usuario(corpo_json()))
    return jsonify(usuario.to_dict()), 201


# produtos
@api.route('/products', methods=['GET'])
def listar_produtos(): #so os ativos
    return jsonify([p.to_dict() for p in catalogo.listar()])


@api.route('/products', methods=['POST'])
def criar_produto():
    produto = catalogo.criar(validar_produto(corpo_json()))
    return jsonify(produto.to_dict()), 201


@api.route('/products/<int:produto_id>', methods=['PATCH'])
def atualizar_produto(produto_id):
    dados = validar_produto(corpo_json(), parcial=True)
    return jsonify(catalogo.atualizar(produto_id, dados).to_dict())


# pedidos
@api.route('/orders', methods=['GET'])
def listar_pedidos():
    limite = validar_limite(request.args.get('limit'))
    return jsonify(pedidos.listar(limite))


@api.route('/orders/<int:pedido_id>', methods=['GET'])
def ver_pedido(pedido_id):
    pedido = pedidos.obter(pedido_id)
    if not pedido:
        raise ErroNaoEncontrado('Pedido não encontrado')
    return jsonify(pedido)


@api.route('/orders', methods=['POST'])
def criar_pedido(): #cabecalho + itens juntos
    dados = corpo_json()
    if 'order' not in dados or 'items' not in dados:
        raise ErroValidacao('Order e items são obrigatórios')
    cabecalho = validar_cabecalho_pedido(dados['order'])
    itens = validar_itens(dados['items'])
    return jsonify(pedidos.criar(cabecalho, itens)), 201


@api.route('/orders/<int:pedido_id>', methods=['PUT'])
def atualizar_pedido(pedido_id): #itens mandados substituem todos os antigos
    dados = corpo_json()
    patch = validar_cabecalho_pedido(dados['order'], parcial=True) if dados.get('order') is not None else {}
    itens = validar_itens(dados['items']) if dados.get('items') is not None else None
    return jsonify(pedidos.atualizar(pedido_id, patch, itens))


@api.route('/orders/<int:pedido_id>/status', methods=['PATCH'])
def atualizar_status_pedido(pedido_id):
    pagamento, entrega = validar_status(corpo_json())
    return jsonify(pedidos.atualizar_status(pedido_id, pagamento, entrega))


@api.route('/orders/<int:pedido_id>', methods=['DELETE'])
def excluir_pedido(pedido_id):
    pedidos.excluir(pedido_id)
    return jsonify({'message': 'Pedido deletado com sucesso'})


@api.route('/vendors/<int:vendedor_id>/orders', methods=['GET'])
def pedidos_do_vendedor(vendedor_id):
    limite = validar_limite(request.args.get('limit'))
    return jsonify(pedidos.listar_por_vendedor(vendedor_id, limite))


@api.route('/orders/<int:pedido_id>/ticket', methods=['POST'])
def recibo(pedido_id): #comprovante pra imprimir
    modelo = pedidos.buscar(pedido_id)
    if not modelo:
        raise ErroNaoEncontrado('Pedido não encontrado')
    pedido = pedidos.detalhar(modelo)
    fuso = fuso_configurado()
    criado_em = modelo.criado_em.replace(tzinfo=timezone.utc)
    html = render_template(
        'recibo.html',
        pedido=pedido,
        numero=f"{pedido['orderNumber']:03d}",
        data=criado_em.astimezone(fuso).strftime('%d/%m/%Y %H:%M'),
        forma_pagamento=NOMES_PAGAMENTO.get(pedido['paymentMethod'], pedido['paymentMethod']),
        ano=datetime.now(fuso).year,
    )
    resposta = make_response(html)
    resposta.headers['Content-Type'] = 'text/html; charset=utf-8'
    resposta.headers['Content-Disposition'] = f'inline; filename="pedido-{pedido["orderNumber"]}.html"'
    return resposta


# admin
@api.route('/stats', methods=['GET'])
def estatisticas():
    return jsonify(calcular_estatisticas(pedidos=pedidos, catalogo=catalogo, usuarios=usuarios))


@api.route('/health', methods=['GET'])
def health():
    stats = calcular_estatisticas(pedidos=pedidos, catalogo=catalogo, usuarios=usuarios)
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'data': {
            'users': len(usuarios.listar()),
            'products': len(catalogo.listar()),
            'orders': pedidos.contar(),
            'todayOrders': stats['ordersToday'],
            'todayRevenue': stats['revenueToday'],
        },
    })
