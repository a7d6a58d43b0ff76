import os

SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///gafac.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False
SECRET_KEY = os.environ.get('SECRET_KEY', 'troque-esta-chave')

# fuso usado pra definir o "hoje" das estatisticas
TIMEZONE = os.environ.get('TIMEZONE', 'UTC')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# tentativas de gerar numero de pedido quando outro request pegou o mesmo
ORDER_NUMBER_RETRIES = int(os.environ.get('ORDER_NUMBER_RETRIES', '3'))

SEED_DATABASE = os.environ.get('SEED_DATABASE', '1') not in ('0', 'false', 'False', '')
