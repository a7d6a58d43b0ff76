import logging
from decimal import Decimal
from flask import current_app
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from models import db, Usuario, Produto, Pedido, ItemPedido, Sequencia
from erros import ErroValidacao, ErroNaoEncontrado

logger = logging.getLogger(__name__)

PRODUTO_NAO_ENCONTRADO = 'Produto não encontrado'
VENDEDOR_NAO_ENCONTRADO = 'Vendedor não encontrado'

CENTAVO = Decimal('0.01')


class CatalogoProdutos:

    def listar(self, somente_ativos=True):
        consulta = Produto.query
        if somente_ativos:
            consulta = consulta.filter_by(ativo=True)
        return consulta.order_by(Produto.nome, Produto.id).all()

    def obter(self, produto_id):
        return db.session.get(Produto, produto_id)

    def criar(self, dados):
        produto = Produto(**dados)
        db.session.add(produto)
        db.session.commit()
        logger.info('Produto criado: %s (%s)', produto.nome, produto.id)
        return produto

    def atualizar(self, produto_id, dados): #desativar e so mandar ativo=False
        produto = self.obter(produto_id)
        if not produto:
            raise ErroNaoEncontrado('Produto não encontrado')
        for atributo, valor in dados.items():
            setattr(produto, atributo, valor)
        db.session.commit()
        return produto


class CadastroUsuarios:

    def listar(self):
        return Usuario.query.order_by(Usuario.id).all()

    def obter(self, usuario_id):
        return db.session.get(Usuario, usuario_id)

    def obter_por_login(self, login):
        return Usuario.query.filter_by(login=login).first()

    def criar(self, dados):
        if self.obter_por_login(dados['login']):
            raise ErroValidacao('Usuário já existe')
        usuario = Usuario(**dados)
        db.session.add(usuario)
        db.session.commit()
        logger.info('Usuário criado: %s (%s)', usuario.login, usuario.perfil)
        return usuario


class RegistroPedidos:
    """Pedidos e seus itens.

    Os metodos publicos devolvem o pedido ja detalhado (itens com produto e
    dados do vendedor), do jeito que a api responde.
    """

    def __init__(self, catalogo=None, usuarios=None):
        self.catalogo = catalogo or CatalogoProdutos()
        self.usuarios = usuarios or CadastroUsuarios()

    def criar(self, cabecalho, itens):
        tentativas = current_app.config.get('ORDER_NUMBER_RETRIES', 3)
        for tentativa in range(1, tentativas + 1):
            self._checar_vendedor(cabecalho.get('vendedor_id'))
            pedido = Pedido(**cabecalho)
            pedido.itens = self._montar_itens(itens)
            pedido.valor_total = self._somar(pedido.itens)
            numero = None
            try:
                # o contador pode nascer aqui mesmo, entao fica dentro do try
                numero = pedido.numero = self._proximo_numero()
                db.session.add(pedido)
                db.session.commit()
            except IntegrityError:
                # outro request gravou o mesmo numero (ou o contador) antes do commit
                db.session.rollback()
                if tentativa == tentativas:
                    raise
                logger.warning('Conflito no número de pedido %s, tentando de novo (%s/%s)', numero, tentativa, tentativas)
                continue
            logger.info('Pedido #%03d criado: %s itens, total %s', pedido.numero, len(pedido.itens), pedido.valor_total)
            return self.detalhar(pedido)

    def buscar(self, pedido_id): #o model cru, sem detalhar
        return db.session.get(Pedido, pedido_id)

    def obter(self, pedido_id):
        pedido = self.buscar(pedido_id)
        if not pedido:
            return None
        return self.detalhar(pedido)

    def obter_item(self, item_id):
        return db.session.get(ItemPedido, item_id)

    def listar(self, limite=None):
        consulta = Pedido.query.order_by(Pedido.criado_em.desc(), Pedido.numero.desc())
        if limite:
            consulta = consulta.limit(limite)
        return [self.detalhar(p) for p in consulta.all()]

    def listar_por_vendedor(self, vendedor_id, limite=None):
        consulta = Pedido.query.filter_by(vendedor_id=vendedor_id).order_by(Pedido.criado_em.desc(), Pedido.numero.desc())
        if limite:
            consulta = consulta.limit(limite)
        return [self.detalhar(p) for p in consulta.all()]

    def listar_no_intervalo(self, inicio, fim):
        return Pedido.query.filter(Pedido.criado_em >= inicio, Pedido.criado_em < fim).order_by(Pedido.numero).all()

    def contar_pendentes(self):
        pagamentos = Pedido.query.filter_by(status_pagamento='pendente').count()
        entregas = Pedido.query.filter_by(status_entrega='pendente').count()
        return pagamentos, entregas

    def contar(self):
        return Pedido.query.count()

    def atualizar(self, pedido_id, patch, itens=None):
        pedido = self._buscar(pedido_id)
        if 'vendedor_id' in patch:
            self._checar_vendedor(patch['vendedor_id'])
        # valida tudo antes de mexer no pedido
        novos_itens = self._montar_itens(itens) if itens is not None else None
        for atributo, valor in patch.items():
            setattr(pedido, atributo, valor)
        if novos_itens is not None:
            # troca a lista inteira, delete-orphan apaga os antigos
            pedido.itens = novos_itens
            pedido.valor_total = self._somar(novos_itens)
        db.session.commit()
        logger.info('Pedido #%03d atualizado', pedido.numero)
        return self.detalhar(pedido)

    def atualizar_status(self, pedido_id, status_pagamento=None, status_entrega=None):
        pedido = self._buscar(pedido_id)
        if status_pagamento:
            pedido.status_pagamento = status_pagamento
        if status_entrega:
            pedido.status_entrega = status_entrega
        db.session.commit()
        return self.detalhar(pedido)

    def excluir(self, pedido_id):
        pedido = self._buscar(pedido_id)
        numero = pedido.numero
        db.session.delete(pedido)
        db.session.commit()
        logger.info('Pedido #%03d excluído', numero)

    def detalhar(self, pedido):
        dados = pedido.to_dict()
        itens = []
        for item in pedido.itens:
            produto = self.catalogo.obter(item.produto_id)
            linha = item.to_dict()
            linha['product'] = produto.to_dict() if produto else {'name': PRODUTO_NAO_ENCONTRADO, 'price': 0}
            linha['productName'] = produto.nome if produto else PRODUTO_NAO_ENCONTRADO
            itens.append(linha)
        dados['items'] = itens
        vendedor = self.usuarios.obter(pedido.vendedor_id)
        dados['vendor'] = {
            'id': pedido.vendedor_id,
            'name': vendedor.nome if vendedor else VENDEDOR_NAO_ENCONTRADO,
        }
        return dados

    def _buscar(self, pedido_id):
        pedido = db.session.get(Pedido, pedido_id)
        if not pedido:
            raise ErroNaoEncontrado('Pedido não encontrado')
        return pedido

    def _checar_vendedor(self, vendedor_id):
        if vendedor_id is None or not self.usuarios.obter(vendedor_id):
            raise ErroValidacao(f'Vendedor não encontrado: {vendedor_id}')

    def _montar_itens(self, itens):
        if not itens:
            raise ErroValidacao('Pedido deve conter pelo menos um item')
        linhas = []
        for item in itens:
            produto = self.catalogo.obter(item['produto_id'])
            if not produto:
                raise ErroValidacao(f'Produto não encontrado: {item["produto_id"]}')
            if not produto.ativo:
                raise ErroValidacao(f'Produto indisponível: {produto.nome}')
            unitario = item.get('preco_unitario')
            if unitario is None:
                unitario = Decimal(produto.preco)
            unitario = Decimal(unitario).quantize(CENTAVO)
            linhas.append(ItemPedido(
                produto_id=produto.id,
                quantidade=item['quantidade'],
                preco_unitario=unitario,
                preco_total=(unitario * item['quantidade']).quantize(CENTAVO),
            ))
        return linhas

    def _somar(self, itens):
        return sum((Decimal(i.preco_total) for i in itens), Decimal('0.00'))

    def _proximo_numero(self):
        # incrementa o contador no banco; o lock da linha vai ate o commit
        atualizadas = db.session.execute(
            update(Sequencia).where(Sequencia.nome == 'pedido').values(valor=Sequencia.valor + 1)
        ).rowcount
        if not atualizadas:
            db.session.add(Sequencia(nome='pedido', valor=1))
            db.session.flush()
        numero = db.session.execute(select(Sequencia.valor).where(Sequencia.nome == 'pedido')).scalar_one()
        max_numero = db.session.query(func.max(Pedido.numero)).scalar() or 0
        if numero <= max_numero:
            numero = max_numero + 1
            db.session.execute(update(Sequencia).where(Sequencia.nome == 'pedido').values(valor=numero))
        return numero
