"""
Atlas Transform — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros serializáveis do Atlas Transform.
Erros são considerados artefatos de domínio e fazem parte do contrato operacional
do sistema, devendo ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Exceções tipadas (`core.exceptions`) são convertidas para `AtlasErrorPayload`
antes de serem gravadas no Manifest ou anexadas a um `ExecutionError`.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import (
    AtlasException,
    CodecError,
    ConfigurationError,
    ExecutionError,
    GraphLoadError,
    ModuleLoadError,
    ReadOnlyGraphError,
    SchemaLoadError,
    SchemaMissingNamespaceError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AtlasErrorPayload:
    """
    Payload canônico de erro do Atlas Transform.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        # o chamador deve garantir que details seja serializável
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

SCHEMA_LOAD_ERROR = "SCHEMA_LOAD_ERROR"
SCHEMA_MISSING_NAMESPACE = "SCHEMA_MISSING_NAMESPACE"

GRAPH_LOAD_ERROR = "GRAPH_LOAD_ERROR"
MODULE_LOAD_ERROR = "MODULE_LOAD_ERROR"

ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
READ_ONLY_GRAPH = "READ_ONLY_GRAPH"

CODEC_ERROR = "CODEC_ERROR"

# Ordem importa: subclasses antes das bases
_CODES = (
    (SchemaMissingNamespaceError, SCHEMA_MISSING_NAMESPACE),
    (SchemaLoadError, SCHEMA_LOAD_ERROR),
    (ReadOnlyGraphError, READ_ONLY_GRAPH),
    (ExecutionError, ENGINE_EXECUTION_ERROR),
    (ConfigurationError, CONFIGURATION_ERROR),
    (GraphLoadError, GRAPH_LOAD_ERROR),
    (ModuleLoadError, MODULE_LOAD_ERROR),
    (CodecError, CODEC_ERROR),
)


def error_code_for(exc: BaseException) -> str:
    """Retorna o código estável associado à exceção (fallback: nome da classe)."""
    for cls, code in _CODES:
        if isinstance(exc, cls):
            return code
    return exc.__class__.__name__


def payload_from_exception(exc: BaseException) -> AtlasErrorPayload:
    """Converte exceções em AtlasErrorPayload (serializável, acionável).

    Regras:
    - AtlasException: já vem com message/details/hint.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(exc, AtlasException):
        return AtlasErrorPayload(
            type=error_code_for(exc),
            message=exc.message or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    # Fallback genérico
    return AtlasErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details={
            "exception_class": exc.__class__.__name__,
        },
        hint="Verifique os eventos da run e o módulo de transformação",
    )
