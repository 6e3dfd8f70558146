"""Montagem (builder), configuração imutável e launcher de transformações."""

from .builder import (
    ConfigViolation,
    InMemoryGraph,
    NamedGraph,
    Role,
    SchemaBinding,
    TransformationBuilder,
    TransformationConfig,
    ViolationCode,
)
from .launcher import ExecutionResult, TransformationLauncher

__all__ = [
    "ConfigViolation",
    "ExecutionResult",
    "InMemoryGraph",
    "NamedGraph",
    "Role",
    "SchemaBinding",
    "TransformationBuilder",
    "TransformationConfig",
    "TransformationLauncher",
    "ViolationCode",
]
