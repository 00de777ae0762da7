# src/atlas_config/core/errors.py
"""
Exceções canônicas do Atlas Config.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento de fontes, a escrita no store e o binding de configuração
em dataclasses.

As exceções aqui definidas representam **falhas explícitas de contrato**,
e não erros genéricos de execução.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros de formatter propagam inalterados até quem chamou `load`
    - Leituras (`get_*`, `has`) nunca levantam exceção

Invariantes:
    - Todas as exceções do pacote herdam de `ConfigError`
    - Erros de I/O e de parse preservam a causa original (`raise ... from`)

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não decide se um arquivo ausente é fatal (decisão de quem chama)

Este módulo existe para garantir clareza,
consistência e previsibilidade no tratamento de erros de configuração.
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados ao Atlas Config.

    Todas as exceções levantadas durante carregamento, escrita e binding
    devem herdar desta classe, permitindo captura genérica com um único
    `except ConfigError`.
    """


class InvalidKeyError(ConfigError, ValueError):
    """
    Exceção levantada quando uma chave vazia ou malformada é usada em escrita.

    Exemplos de chaves inválidas (com opções padrão):
        - ""            (chave vazia)
        - ".database"   (separador no início)
        - "database."   (separador no fim)
        - "a..b"        (segmento vazio)

    Limites explícitos:
        - Não é levantada por leituras; `get_*` apenas retorna `exists=False`
    """


class KeyNotFoundError(ConfigError, KeyError):
    """
    Exceção levantada quando `unmarshal(key, ...)` não encontra nenhuma
    entrada para a chave informada nem para seus descendentes.
    """

    def __str__(self) -> str:
        # KeyError usa repr() dos argumentos; mantém a mensagem legível
        return str(self.args[0]) if self.args else ""


class TypeMismatchError(ConfigError, TypeError):
    """
    Exceção levantada quando um valor não pode ser convertido para o tipo
    declarado em um campo durante o `unmarshal`.

    A mensagem e os atributos identificam a chave de origem e o campo
    de destino, permitindo diagnóstico direto.

    Atributos:
        key (str): chave de configuração de origem
        field (str): nome do campo do dataclass de destino
        detail (str): descrição da falha de conversão
    """

    def __init__(self, key: str, field: str, detail: str = "") -> None:
        self.key = key
        self.field = field
        self.detail = detail
        message = f"Tipo incompatível na chave '{key}' para o campo '{field}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidTargetError(ConfigError, TypeError):
    """
    Exceção levantada quando o alvo do `unmarshal` não é uma instância
    de dataclass (ex.: None, uma classe, um dict).
    """


class ParseFailedError(ConfigError):
    """
    Exceção levantada quando o documento de uma fonte é sintaticamente inválido.

    Decisões arquiteturais:
        - JSON/YAML inválido é erro
        - JSON/YAML válido cuja raiz não é objeto NÃO é erro (vira mapa vazio)

    Atributos:
        source (str): identificador da fonte (geralmente o caminho do arquivo)
        detail (str): mensagem do decoder subjacente
    """

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Falha ao interpretar configuração em {source}: {detail}")


class IOFailureError(ConfigError, OSError):
    """
    Exceção levantada quando uma fonte de configuração não pode ser lida.

    Cobre arquivos ilegíveis (permissão, diretório no lugar de arquivo,
    conteúdo não decodificável em UTF-8).
    """


class ConfigFileNotFoundError(IOFailureError, FileNotFoundError):
    """
    Exceção levantada quando o arquivo de configuração não existe.

    É distinta de `IOFailureError` genérica para que quem chama possa
    tratar "arquivo ausente" como opcional sem silenciar outros erros.
    """


class ConfigPathError(IOFailureError):
    """
    Exceção levantada quando um formatter de arquivo recebe caminho vazio.
    """
