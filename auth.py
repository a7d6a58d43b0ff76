import logging
from flask import Blueprint, jsonify, request
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from models import db, Usuario
from repositorios import CadastroUsuarios
from validacao import validar_login
from erros import ErroAutenticacao

logger = logging.getLogger(__name__)

auth = Blueprint('auth', __name__, url_prefix='/api/auth')
login_manager = LoginManager()

usuarios = CadastroUsuarios()


@login_manager.user_loader
def carregar_usuario(usuario_id): #flask login pro user do banco
    return db.session.get(Usuario, int(usuario_id))


@login_manager.unauthorized_handler
def nao_autorizado(): #api nao redireciona pra tela de login
    raise ErroAutenticacao('Login necessário')


@auth.route('/login', methods=['POST'])
def login(): #confere login e senha e abre a sessao
    login_digitado, senha_digitada = validar_login(request.get_json(silent=True))
    usuario = usuarios.obter_por_login(login_digitado)
    if not usuario or not usuario.ativo or usuario.senha != senha_digitada:
        logger.warning('Falha de login para %s', login_digitado)
        raise ErroAutenticacao('Credenciais inválidas')
    login_user(usuario)
    logger.info('Login: %s', usuario.login)
    return jsonify({'user': usuario.to_dict()})


@auth.route('/logout', methods=['POST'])
def logout(): #sair
    logout_user()
    return jsonify({'message': 'Logout realizado'})


@auth.route('/me')
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})
