from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from datetime import datetime, timezone

db = SQLAlchemy()

PERFIS = ('admin', 'vendor')
TIPOS_PRODUTO = ('caldo', 'pizza', 'tipica')
TAMANHOS_PRODUTO = ('pequeno', 'grande', 'unico', 'marmitex', 'cumbuquinha')
FORMAS_PAGAMENTO = ('dinheiro', 'pix', 'aberto')
STATUS_PAGAMENTO = ('realizado', 'pendente')
STATUS_ENTREGA = ('realizada', 'pendente')


def agora_utc():
    # banco guarda tudo em utc sem tzinfo
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_utc(valor):
    if valor is None:
        return None
    return valor.isoformat() + 'Z'


class Usuario(UserMixin, db.Model):
    __tablename__ = 'usuario'
    id = db.Column(db.Integer, primary_key=True)
    login = db.Column(db.String(80), unique=True, nullable=False)
    nome = db.Column(db.String(120), nullable=False)
    senha = db.Column(db.String(200), nullable=False)
    perfil = db.Column(db.String(20), nullable=False, default='vendor')
    ativo = db.Column(db.Boolean, nullable=False, default=True)
    criado_em = db.Column(db.DateTime, default=agora_utc)

    @property
    def is_active(self):
        return self.ativo

    def to_dict(self): #nunca manda a senha
        return {
            'id': self.id,
            'username': self.login,
            'name': self.nome,
            'role': self.perfil,
        }


class Produto(db.Model):
    __tablename__ = 'produto'
    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(120), nullable=False)
    tipo = db.Column(db.String(20), nullable=False)
    tamanho = db.Column(db.String(20), nullable=False, default='unico')
    preco = db.Column(db.Numeric(10, 2), nullable=False)
    ativo = db.Column(db.Boolean, nullable=False, default=True)
    criado_em = db.Column(db.DateTime, default=agora_utc)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.nome,
            'type': self.tipo,
            'size': self.tamanho,
            'price': float(self.preco),
            'active': self.ativo,
            'createdAt': iso_utc(self.criado_em),
        }


class Pedido(db.Model):
    __tablename__ = 'pedido'
    id = db.Column(db.Integer, primary_key=True)
    numero = db.Column(db.Integer, unique=True, nullable=False)
    # sem foreign key: vendedor removido vira placeholder nas telas
    vendedor_id = db.Column(db.Integer, nullable=False, index=True)
    cliente_nome = db.Column(db.String(120))
    cliente_telefone = db.Column(db.String(40))
    forma_pagamento = db.Column(db.String(20), nullable=False)
    status_pagamento = db.Column(db.String(20), nullable=False, default='pendente')
    status_entrega = db.Column(db.String(20), nullable=False, default='pendente')
    valor_total = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    observacoes = db.Column(db.Text)
    criado_em = db.Column(db.DateTime, nullable=False, default=agora_utc, index=True)
    itens = db.relationship('ItemPedido', backref='pedido', cascade='all, delete-orphan', order_by='ItemPedido.id')

    def to_dict(self):
        return {
            'id': self.id,
            'orderNumber': self.numero,
            'vendorId': self.vendedor_id,
            'customerName': self.cliente_nome,
            'customerPhone': self.cliente_telefone,
            'paymentMethod': self.forma_pagamento,
            'paymentStatus': self.status_pagamento,
            'deliveryStatus': self.status_entrega,
            'totalAmount': float(self.valor_total),
            'notes': self.observacoes,
            'createdAt': iso_utc(self.criado_em),
        }


class Sequencia(db.Model): #contador de numero de pedido, nunca volta
    __tablename__ = 'sequencia'
    nome = db.Column(db.String(40), primary_key=True)
    valor = db.Column(db.Integer, nullable=False, default=0)


class ItemPedido(db.Model):
    __tablename__ = 'item_pedido'
    id = db.Column(db.Integer, primary_key=True)
    pedido_id = db.Column(db.Integer, db.ForeignKey('pedido.id'), nullable=False, index=True)
    produto_id = db.Column(db.Integer, nullable=False)
    quantidade = db.Column(db.Integer, nullable=False)
    preco_unitario = db.Column(db.Numeric(10, 2), nullable=False)
    preco_total = db.Column(db.Numeric(10, 2), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'orderId': self.pedido_id,
            'productId': self.produto_id,
            'quantity': self.quantidade,
            'unitPrice': float(self.preco_unitario),
            'totalPrice': float(self.preco_total),
        }
