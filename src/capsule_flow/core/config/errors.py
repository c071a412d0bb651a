# src/capsule_flow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Capsule Flow.

Todas as falhas de leitura, validação estrutural e resolução de
configuração (e de documentos YAML/JSON em geral) herdam de `ConfigError`.

Invariantes:
    - Nenhuma exceção aqui representa falha de execução de Node
    - Erros estruturais são fatais: não existe fallback silencioso
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração.

    Permite capturar de forma genérica qualquer falha de carregamento
    ou merge, separando-as das falhas de execução de um Flow.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo obrigatório (defaults ou documento) não encontrado no caminho informado.

    Limites explícitos:
        - Não tenta inferir ou criar o arquivo automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do documento não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"engine": {"fail_fast": false}}
        - override: {"engine": "strict"}

    Nenhum merge parcial é produzido em caso de conflito.
    """
