# src/atlas_transform/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Atlas Transform.

Este módulo define a hierarquia de exceções usada durante o carregamento,
o merge e a interpretação de arquivos de configuração de lançamento.

As exceções aqui definidas representam **violações estruturais explícitas**
de arquivos de configuração. Violações dos invariantes do builder (módulo
ausente, nenhum schema, ...) não pertencem a esta hierarquia: são
`ConfigurationError` (`core.exceptions`), levantadas por `build()`.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de execução de regra

Limites explícitos:
    - Não executa transformações
    - Não realiza fallback ou recovery
"""


class ConfigError(Exception):
    """
    Exceção base para erros de arquivos de configuração do Atlas Transform.

    Permite captura genérica de falhas de load/merge/interpretação e
    distinção clara entre falhas estruturais e falhas de execução.
    """


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de configuração base (defaults) não foi encontrado.

    O arquivo de defaults é obrigatório; sem ele não existe configuração
    efetiva válida. Não há tentativa de inferir ou criar defaults.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    O formato do arquivo de configuração não é suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    O formato é decidido pela extensão; o conteúdo nunca é inspecionado
    para inferir formato.
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz da configuração não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"engine": {"rules": {}}}
        - override: {"engine": "DEBUG"}

    Nenhum merge parcial é produzido em caso de conflito.
    """


class InvalidLaunchConfigError(ConfigError):
    """
    A configuração de lançamento tem formato inválido.

    Exemplos:
        - `module` ausente ou não-string
        - `schemas` não é um mapa nome → caminho
        - papel desconhecido em `graphs`
        - `engine` não é um dicionário

    Esta exceção trata apenas do formato do arquivo. Os invariantes
    semânticos (ao menos um schema, uma entrada, uma saída) continuam
    sendo verificados por `TransformationBuilder.build()`.
    """
