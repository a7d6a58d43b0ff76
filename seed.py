import logging
from decimal import Decimal
from models import db, Usuario, Produto

logger = logging.getLogger(__name__)

USUARIOS_INICIAIS = [
    {'login': 'admin', 'senha': 'gafac123', 'perfil': 'admin', 'nome': 'Administrador'},
    {'login': 'vendedor1', 'senha': 'vend123', 'perfil': 'vendor', 'nome': 'João Vendedor'},
]

PRODUTOS_INICIAIS = [
    ('Canjiquinha', 'tipica', 'marmitex', '20.00'),
    ('Canjiquinha', 'tipica', 'cumbuquinha', '10.00'),
    ('Feijão amigo', 'tipica', 'marmitex', '20.00'),
    ('Feijão amigo', 'tipica', 'cumbuquinha', '10.00'),
    ('Vaca atolada', 'tipica', 'marmitex', '25.00'),
    ('Vaca atolada', 'tipica', 'cumbuquinha', '15.00'),
    ('Caldo de Feijão', 'caldo', 'pequeno', '8.50'),
    ('Caldo de Feijão', 'caldo', 'grande', '12.00'),
    ('Pizza Margherita', 'pizza', 'pequeno', '25.00'),
    ('Pizza Margherita', 'pizza', 'grande', '35.00'),
]


def semear_banco(): #so roda com o banco vazio
    if Usuario.query.first():
        logger.info('Dados já existem, pulando seed')
        return False
    for dados in USUARIOS_INICIAIS:
        db.session.add(Usuario(**dados))
    for nome, tipo, tamanho, preco in PRODUTOS_INICIAIS:
        db.session.add(Produto(nome=nome, tipo=tipo, tamanho=tamanho, preco=Decimal(preco)))
    db.session.commit()
    logger.info('Dados iniciais inseridos: %s usuários, %s produtos', len(USUARIOS_INICIAIS), len(PRODUTOS_INICIAIS))
    return True
