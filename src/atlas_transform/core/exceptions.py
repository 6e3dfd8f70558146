"""
Atlas Transform — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do Atlas Transform.

Objetivo:
- Permitir que Builder, Registry, Codec, Launcher e Engine levantem
  exceções semânticas tipadas
- Facilitar o mapeamento determinístico para AtlasErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Política de propagação:
- ConfigurationError aborta antes de qualquer interação com o engine
- Erros de schema/grafo/módulo abortam antes do início da execução
- ExecutionError aborta a run inteira, sem resultado parcial
- CodecError é local a uma única chamada de encode/decode

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class AtlasException(Exception):
    """Base class para exceções internas do Atlas Transform.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Configuração (Builder)
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ConfigurationError(AtlasException):
    """Invariante do builder violado; `details["violation"]` traz o código."""


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class SchemaLoadError(AtlasException):
    """Arquivo de schema ausente, ilegível, inválido ou conflitante."""


@dataclass(eq=False)
class SchemaMissingNamespaceError(SchemaLoadError):
    """A primeira definição de topo não é um schema com namespace."""


# ---------------------------------------------------------------------------
# Grafos / módulo / execução
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class GraphLoadError(AtlasException):
    """Grafo ausente, ilegível ou malformado no momento do bind."""


@dataclass(eq=False)
class ModuleLoadError(AtlasException):
    """Arquivo de módulo ausente ou diretório de resolução inválido."""


@dataclass(eq=False)
class ExecutionError(AtlasException):
    """Falha reportada pelo engine durante a execução (opaca e fatal)."""


@dataclass(eq=False)
class ReadOnlyGraphError(ExecutionError):
    """Tentativa de modificar um grafo ligado ao papel INPUT."""


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class CodecError(AtlasException):
    """Texto malformado ou referência inconsistente em encode/decode."""
