from datetime import datetime
from decimal import Decimal
import pytest
from app import create_app
from models import db, Usuario, Produto, Pedido
from repositorios import RegistroPedidos

AGORA = datetime(2026, 10, 18, 15, 0, 0)


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SECRET_KEY': 'teste',
        'TIMEZONE': 'UTC',
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def cadastro(app):
    """Usuarios e produtos basicos; devolve os ids por apelido."""
    with app.app_context():
        admin = Usuario(login='admin', nome='Administrador', senha='gafac123', perfil='admin')
        vendedor = Usuario(login='vendedor1', nome='João Vendedor', senha='vend123', perfil='vendor')
        outro = Usuario(login='vendedor2', nome='Maria Vendedora', senha='vend456', perfil='vendor')
        produtos = {
            'X': Produto(nome='Canjiquinha', tipo='tipica', tamanho='marmitex', preco=Decimal('20.00')),
            'Y': Produto(nome='Caldo de Feijão', tipo='caldo', tamanho='pequeno', preco=Decimal('10.00')),
            'Z': Produto(nome='Vaca atolada', tipo='tipica', tamanho='cumbuquinha', preco=Decimal('15.00')),
            'W': Produto(nome='Pizza Margherita', tipo='pizza', tamanho='grande', preco=Decimal('20.00')),
            'V': Produto(nome='Tapioca', tipo='tipica', tamanho='unico', preco=Decimal('10.00')),
            'inativo': Produto(nome='Pastel', tipo='tipica', tamanho='unico', preco=Decimal('8.00'), ativo=False),
        }
        db.session.add_all([admin, vendedor, outro, *produtos.values()])
        db.session.commit()
        ids = {chave: p.id for chave, p in produtos.items()}
        ids.update(admin=admin.id, vendedor=vendedor.id, outro=outro.id)
        return ids


def criar_pedido(vendedor_id, itens, forma='dinheiro', criado_em=None, **extras):
    """Cria pelo registro; `itens` e lista de (produto_id, quantidade, preco_unitario)."""
    cabecalho = {'vendedor_id': vendedor_id, 'forma_pagamento': forma}
    cabecalho.update(extras)
    linhas = [{'produto_id': p, 'quantidade': q, 'preco_unitario': Decimal(str(u)) if u is not None else None}
              for p, q, u in itens]
    pedido = RegistroPedidos().criar(cabecalho, linhas)
    if criado_em is not None:
        db.session.get(Pedido, pedido['id']).criado_em = criado_em
        db.session.commit()
    return pedido
