from models import Usuario, Produto
from seed import semear_banco, USUARIOS_INICIAIS, PRODUTOS_INICIAIS


def test_semear_banco_vazio_uma_vez(ctx):
    assert semear_banco() is True
    assert Usuario.query.count() == len(USUARIOS_INICIAIS)
    assert Produto.query.count() == len(PRODUTOS_INICIAIS)
    assert semear_banco() is False
    assert Usuario.query.count() == len(USUARIOS_INICIAIS)


def test_comando_init_db(app):
    resultado = app.test_cli_runner().invoke(args=['init-db'])
    assert resultado.exit_code == 0
    with app.app_context():
        assert Usuario.query.filter_by(login='admin').first().perfil == 'admin'


def test_admin_padrao_consegue_logar(app, client):
    app.test_cli_runner().invoke(args=['init-db'])
    resposta = client.post('/api/auth/login', json={'username': 'admin', 'password': 'gafac123'})
    assert resposta.status_code == 200
