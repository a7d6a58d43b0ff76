from decimal import Decimal, InvalidOperation
from models import PERFIS, TIPOS_PRODUTO, TAMANHOS_PRODUTO, FORMAS_PAGAMENTO, STATUS_PAGAMENTO, STATUS_ENTREGA
from erros import ErroValidacao

# campo do json -> atributo do model
CAMPOS_PEDIDO = {
    'vendorId': 'vendedor_id',
    'customerName': 'cliente_nome',
    'customerPhone': 'cliente_telefone',
    'paymentMethod': 'forma_pagamento',
    'paymentStatus': 'status_pagamento',
    'deliveryStatus': 'status_entrega',
    'notes': 'observacoes',
}

CAMPOS_PRODUTO = {
    'name': 'nome',
    'type': 'tipo',
    'size': 'tamanho',
    'price': 'preco',
    'active': 'ativo',
}


def exigir_objeto(valor, nome):
    if not isinstance(valor, dict):
        raise ErroValidacao(f'{nome} deve ser um objeto')
    return valor


def texto(valor, campo, obrigatorio=True):
    if valor is None or (isinstance(valor, str) and not valor.strip()):
        if obrigatorio:
            raise ErroValidacao(f'Campo obrigatório: {campo}')
        return None
    if not isinstance(valor, str):
        raise ErroValidacao(f'Campo {campo} deve ser texto')
    return valor.strip()


def inteiro(valor, campo, minimo=None):
    if isinstance(valor, bool):
        raise ErroValidacao(f'Campo {campo} deve ser inteiro')
    try:
        numero = int(valor)
    except (TypeError, ValueError):
        raise ErroValidacao(f'Campo {campo} deve ser inteiro')
    if isinstance(valor, float) and valor != numero:
        raise ErroValidacao(f'Campo {campo} deve ser inteiro')
    if minimo is not None and numero < minimo:
        raise ErroValidacao(f'Campo {campo} deve ser no mínimo {minimo}')
    return numero


def dinheiro(valor, campo):
    if valor is None or isinstance(valor, bool):
        raise ErroValidacao(f'Campo obrigatório: {campo}')
    try:
        quantia = Decimal(str(valor))
    except InvalidOperation:
        raise ErroValidacao(f'Campo {campo} deve ser numérico')
    if not quantia.is_finite():
        raise ErroValidacao(f'Campo {campo} deve ser numérico')
    if quantia < 0:
        raise ErroValidacao(f'Campo {campo} não pode ser negativo')
    return quantia.quantize(Decimal('0.01'))


def escolha(valor, campo, opcoes):
    if valor not in opcoes:
        raise ErroValidacao(f'Campo {campo} inválido. Use: {", ".join(opcoes)}')
    return valor


def booleano(valor, campo):
    if not isinstance(valor, bool):
        raise ErroValidacao(f'Campo {campo} deve ser booleano')
    return valor


def validar_login(dados):
    dados = exigir_objeto(dados, 'body')
    username = dados.get('username')
    password = dados.get('password')
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ErroValidacao('Campos obrigatórios: username, password')
    return username, password


def validar_usuario(dados):
    dados = exigir_objeto(dados, 'body')
    if not dados.get('username') or not dados.get('name') or not dados.get('password'):
        raise ErroValidacao('Campos obrigatórios: username, name, password')
    return {
        'login': texto(dados['username'], 'username'),
        'nome': texto(dados['name'], 'name'),
        'senha': texto(dados['password'], 'password'),
        'perfil': escolha(dados.get('role', 'vendor'), 'role', PERFIS),
    }


def validar_produto(dados, parcial=False):
    dados = exigir_objeto(dados, 'body')
    desconhecidos = set(dados) - set(CAMPOS_PRODUTO)
    if desconhecidos:
        raise ErroValidacao(f'Campos desconhecidos: {", ".join(sorted(desconhecidos))}')
    if not parcial:
        for campo in ('name', 'type', 'price'):
            if dados.get(campo) is None:
                raise ErroValidacao(f'Campo obrigatório: {campo}')

    produto = {}
    if 'name' in dados:
        produto['nome'] = texto(dados['name'], 'name')
    if 'type' in dados:
        produto['tipo'] = escolha(dados['type'], 'type', TIPOS_PRODUTO)
    if 'size' in dados or not parcial:
        produto['tamanho'] = escolha(dados.get('size', 'unico'), 'size', TAMANHOS_PRODUTO)
    if 'price' in dados:
        produto['preco'] = dinheiro(dados['price'], 'price')
    if 'active' in dados:
        produto['ativo'] = booleano(dados['active'], 'active')
    return produto


def validar_cabecalho_pedido(dados, parcial=False):
    """Converte o cabecalho do pedido vindo do cliente.

    Com parcial=True so os campos presentes voltam no dict, pro update
    manter o resto como esta. totalAmount e orderNumber sao ignorados,
    o servidor calcula os dois.
    """
    dados = exigir_objeto(dados, 'order')
    if not parcial:
        for campo in ('vendorId', 'paymentMethod'):
            if dados.get(campo) is None:
                raise ErroValidacao(f'Campo obrigatório: {campo}')

    cabecalho = {}
    for campo, atributo in CAMPOS_PEDIDO.items():
        if campo not in dados:
            continue
        valor = dados[campo]
        if campo == 'vendorId':
            valor = inteiro(valor, campo, minimo=1)
        elif campo == 'paymentMethod':
            valor = escolha(valor, campo, FORMAS_PAGAMENTO)
        elif campo == 'paymentStatus':
            valor = escolha(valor, campo, STATUS_PAGAMENTO)
        elif campo == 'deliveryStatus':
            valor = escolha(valor, campo, STATUS_ENTREGA)
        else:
            valor = texto(valor, campo, obrigatorio=False)
        cabecalho[atributo] = valor
    return cabecalho


def validar_itens(itens):
    if not isinstance(itens, list) or not itens:
        raise ErroValidacao('Pedido deve conter pelo menos um item')
    validados = []
    for posicao, item in enumerate(itens, start=1):
        item = exigir_objeto(item, f'item {posicao}')
        if item.get('productId') is None or item.get('quantity') is None:
            raise ErroValidacao(f'Item {posicao}: campos obrigatórios productId, quantity')
        validados.append({
            'produto_id': inteiro(item['productId'], 'productId', minimo=1),
            'quantidade': inteiro(item['quantity'], 'quantity', minimo=1),
            # sem unitPrice usa o preco atual do produto
            'preco_unitario': dinheiro(item['unitPrice'], 'unitPrice') if item.get('unitPrice') is not None else None,
        })
    return validados


def validar_status(dados):
    dados = exigir_objeto(dados, 'body')
    pagamento = dados.get('paymentStatus')
    entrega = dados.get('deliveryStatus')
    if pagamento is None and entrega is None:
        raise ErroValidacao('Informe paymentStatus ou deliveryStatus')
    if pagamento is not None:
        escolha(pagamento, 'paymentStatus', STATUS_PAGAMENTO)
    if entrega is not None:
        escolha(entrega, 'deliveryStatus', STATUS_ENTREGA)
    return pagamento, entrega


def validar_limite(valor):
    if valor is None or valor == '':
        return None
    return inteiro(valor, 'limit', minimo=1)
