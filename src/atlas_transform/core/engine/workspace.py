# src/atlas_transform/core/engine/workspace.py
"""
Workspace de execução de uma transformação.

Este módulo define o `ExecutionWorkspace`, a estrutura canônica criada pelo
`TransformationLauncher` a cada chamada de `run` e entregue ao engine.

O workspace atua como o único meio permitido de:
    - acesso aos schemas registrados (nome → namespace)
    - acesso aos grafos registrados por papel (INPUT, OUTPUT, IN_OUT)
    - criação de nós tipados a partir dos schemas resolvidos
    - armazenamento de artefatos intermediários entre regras
    - registro de logs estruturados e warnings de execução

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio workspace)
    - Comunicação explícita e rastreável
    - O catálogo de namespaces é a única peça compartilhada entre runs

Invariantes:
    - Um nome de grafo é registrado em exatamente um papel
    - Grafos INPUT são sempre registrados como somente leitura
    - Logs sempre incluem `run_id` e `rule_id`
    - Warnings são agrupados por `rule_id`

Limites explícitos:
    - Não executa regras
    - Não carrega arquivos (ver `core.launch.launcher`)
    - Não persiste dados automaticamente
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from atlas_transform.core.graph.node import Node
from atlas_transform.core.graph.resource import GraphHandle
from atlas_transform.core.schema.catalog import NamespaceCatalog

if TYPE_CHECKING:  # pragma: no cover
    from atlas_transform.core.traceability.manifest import RunManifest
    from .types import RuleResult


@dataclass
class ExecutionWorkspace:
    """
    Contexto de execução compartilhado de uma transformação.

    O workspace consolida:
        - identidade da execução (run_id, created_at)
        - catálogo de namespaces usado para resolver tipos
        - opções do engine (seção `engine` da configuração)
        - schemas e grafos registrados pelo launcher
        - Manifest da run (quando presente) e resultados por regra
        - logs estruturados e warnings

    Decisões arquiteturais:
        - Regras interagem com os grafos apenas via workspace
        - O launcher registra, o engine consome
        - Logs e warnings são estruturados e rastreáveis
    """

    run_id: str
    created_at: datetime
    catalog: NamespaceCatalog
    options: Dict[str, Any] = field(default_factory=dict)
    module: Optional[str] = None
    manifest: Optional["RunManifest"] = None

    schemas: Dict[str, str] = field(default_factory=dict, init=False)
    inputs: Dict[str, GraphHandle] = field(default_factory=dict, init=False)
    outputs: Dict[str, GraphHandle] = field(default_factory=dict, init=False)
    in_outs: Dict[str, GraphHandle] = field(default_factory=dict, init=False)
    results: Dict[str, "RuleResult"] = field(default_factory=dict, init=False)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def create(
        cls,
        *,
        catalog: NamespaceCatalog,
        options: Optional[Mapping[str, Any]] = None,
    ) -> "ExecutionWorkspace":
        """Cria um workspace novo com run_id único e timestamp UTC."""
        return cls(
            run_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            catalog=catalog,
            options=dict(options or {}),
        )

    # -----------------------------
    # Schemas
    # -----------------------------
    def register_schema(self, name: str, namespace: str) -> None:
        self.schemas[name] = namespace

    def namespace(self, schema_name: str) -> str:
        if schema_name not in self.schemas:
            raise KeyError(schema_name)
        return self.schemas[schema_name]

    def new_node(self, schema_name: str, type_name: str, **attributes: Any) -> Node:
        """Cria um nó do tipo `type_name` declarado no schema `schema_name`.

        Raises:
            KeyError: schema não registrado ou tipo não declarado.
        """
        definition = self.catalog.get(self.namespace(schema_name))
        return Node(type_id=definition.type_id(type_name), attributes=dict(attributes))

    # -----------------------------
    # Grafos
    # -----------------------------
    def _ensure_unbound(self, name: str) -> None:
        if name in self.inputs or name in self.outputs or name in self.in_outs:
            raise ValueError(f"graph name already registered: {name}")

    def register_input(self, handle: GraphHandle) -> None:
        self._ensure_unbound(handle.name)
        handle.read_only = True
        self.inputs[handle.name] = handle

    def register_output(self, handle: GraphHandle) -> None:
        self._ensure_unbound(handle.name)
        self.outputs[handle.name] = handle

    def register_in_out(self, handle: GraphHandle) -> None:
        self._ensure_unbound(handle.name)
        self.in_outs[handle.name] = handle

    def graph(self, name: str) -> GraphHandle:
        for bucket in (self.inputs, self.outputs, self.in_outs):
            if name in bucket:
                return bucket[name]
        raise KeyError(name)

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise KeyError(key)
        return self._artifacts[key]

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, rule_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "rule_id": rule_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, rule_id: str, message: str) -> None:
        if rule_id not in self.warnings:
            self.warnings[rule_id] = []
        self.warnings[rule_id].append(message)
