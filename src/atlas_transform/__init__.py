# src/atlas_transform/__init__.py
"""
Atlas Transform — launcher de transformações declarativas grafo-para-grafo.

Dado um conjunto de schemas tipados, grafos de objetos nomeados ligados a
papéis (INPUT, OUTPUT, IN_OUT) e um módulo de transformação, o Atlas
Transform monta tudo num workspace de execução, executa o módulo e devolve
os grafos produzidos ou atualizados.

Arquitetura em alto nível:
    - core.schema       → catálogo de namespaces e resolução memoizada de schemas
    - core.graph        → modelo de nós, codec textual e recursos nomeados
    - core.launch       → builder, configuração imutável e launcher
    - core.engine       → contrato do engine e engine de regras de referência
    - core.config       → arquivos de configuração (load, merge, hashing)
    - core.traceability → Manifest da run e Event Log

Limites explícitos:
    - Não define uma linguagem de transformação
    - Não oferece linha de comando
"""

__version__ = "0.1.0"

from .core.config.launch import builder_from_config, load_launch_config
from .core.engine.rule_engine import RuleEngine
from .core.engine.types import RuleResult, RuleStatus
from .core.engine.workspace import ExecutionWorkspace
from .core.exceptions import (
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
from .core.graph.codec import GraphCodec
from .core.graph.node import Node, graphs_isomorphic
from .core.graph.resource import GraphHandle
from .core.launch.builder import (
    InMemoryGraph,
    Role,
    TransformationBuilder,
    TransformationConfig,
)
from .core.launch.launcher import ExecutionResult, TransformationLauncher
from .core.schema.catalog import NamespaceCatalog, default_catalog
from .core.schema.registry import SchemaRegistry, default_registry

__all__ = [
    "__version__",
    "AtlasException",
    "CodecError",
    "ConfigurationError",
    "ExecutionError",
    "ExecutionResult",
    "ExecutionWorkspace",
    "GraphCodec",
    "GraphHandle",
    "GraphLoadError",
    "InMemoryGraph",
    "ModuleLoadError",
    "NamespaceCatalog",
    "Node",
    "ReadOnlyGraphError",
    "Role",
    "RuleEngine",
    "RuleResult",
    "RuleStatus",
    "SchemaLoadError",
    "SchemaMissingNamespaceError",
    "SchemaRegistry",
    "TransformationBuilder",
    "TransformationConfig",
    "TransformationLauncher",
    "builder_from_config",
    "default_catalog",
    "default_registry",
    "graphs_isomorphic",
    "load_launch_config",
]
