class ErroAplicacao(Exception):
    status_code = 500

    def __init__(self, mensagem):
        super().__init__(mensagem)
        self.mensagem = mensagem

    def to_dict(self):
        return {'message': self.mensagem}


class ErroValidacao(ErroAplicacao): #dados faltando ou invalidos
    status_code = 400


class ErroNaoEncontrado(ErroAplicacao): #id que nao existe
    status_code = 404


class ErroAutenticacao(ErroAplicacao): #login ou senha errados
    status_code = 401
