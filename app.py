import logging
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from models import db
from auth import auth, login_manager
from api import api
from erros import ErroAplicacao
from seed import semear_banco

logger = logging.getLogger(__name__)


def configurar_logging(nivel):
    logging.basicConfig(
        level=getattr(logging, str(nivel).upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def registrar_erros(app): #tudo vira json com "message"

    @app.errorhandler(ErroAplicacao)
    def erro_aplicacao(erro):
        db.session.rollback()
        return jsonify(erro.to_dict()), erro.status_code

    @app.errorhandler(HTTPException)
    def erro_http(erro):
        return jsonify({'message': erro.description}), erro.code

    @app.errorhandler(Exception)
    def erro_interno(erro):
        db.session.rollback()
        logger.exception('Erro não tratado: %s', erro)
        return jsonify({'message': 'Erro interno do servidor'}), 500


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_object('config')
    if config:
        app.config.update(config)
    app.json.sort_keys = False #mantem a ordem dos campos do to_dict

    configurar_logging(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    login_manager.init_app(app)
    CORS(app) #qualquer origem
    app.register_blueprint(auth)
    app.register_blueprint(api)
    registrar_erros(app)

    @app.cli.command('init-db')
    def init_db(): #cria as tabelas e os dados iniciais
        db.create_all()
        semear_banco()

    return app


if __name__ == '__main__': #roda o flask server la
    app = create_app()
    with app.app_context():
        db.create_all()
        if app.config.get('SEED_DATABASE'):
            semear_banco()
    app.run(debug=True)
