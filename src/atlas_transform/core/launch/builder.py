# src/atlas_transform/core/launch/builder.py
"""
Builder e configuração imutável de uma transformação.

Este módulo define o `TransformationBuilder`, que acumula schemas, grafos
por papel e o módulo de transformação, e a `TransformationConfig`, o valor
congelado produzido por `build()` e consumido por `TransformationLauncher.run`.

Componentes principais:
    - Role               → papel de um grafo (INPUT, OUTPUT, IN_OUT)
    - SchemaBinding      → nome → arquivo de schema (ou membro de arquivo zip)
    - InMemoryGraph      → grafo fornecido em memória, capturado como texto
    - NamedGraph         → nome + papel + origem (caminho ou InMemoryGraph)
    - ConfigViolation    → invariante violado, com código estável
    - TransformationConfig / TransformationBuilder

Invariantes verificados (nesta ordem):
    1. MODULE_MISSING       → módulo definido
    2. NO_SCHEMA            → ao menos um schema
    3. NO_INPUT             → ao menos um grafo INPUT
    4. NO_OUTPUT            → ao menos um grafo OUTPUT ou IN_OUT
    5. GRAPH_ROLE_CONFLICT  → nenhum nome ligado a dois papéis

Decisões arquiteturais:
    - `validate()` devolve todas as violações; `build()` falha na primeira
    - Nada é lido do disco no builder: schemas, grafos e módulo só são
      tocados pelo launcher
    - Grafos em memória são serializados pelo codec no momento do bind;
      mutações posteriores nos nós de origem não afetam a configuração
    - Religar um nome dentro do mesmo papel substitui a ligação anterior
    - O builder não é resetado após `build()`

Limites explícitos:
    - Não resolve namespaces
    - Não valida a existência de arquivos
"""

from __future__ import annotations

import hashlib
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from atlas_transform.core.config.hashing import compute_config_hash
from atlas_transform.core.config.merge import deep_merge
from atlas_transform.core.exceptions import ConfigurationError
from atlas_transform.core.graph.codec import GraphCodec
from atlas_transform.core.graph.node import Node

if TYPE_CHECKING:  # pragma: no cover
    from atlas_transform.core.schema.catalog import NamespaceCatalog
    from .launcher import ExecutionResult, TransformationLauncher


class Role(str, Enum):
    """Papel de um grafo numa transformação."""

    INPUT = "input"
    OUTPUT = "output"
    IN_OUT = "in_out"


@dataclass(frozen=True)
class SchemaBinding:
    name: str
    path: Path
    member: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "path": str(self.path)}
        if self.member is not None:
            d["member"] = self.member
        return d


@dataclass(frozen=True)
class InMemoryGraph:
    """Grafo fornecido em memória, congelado como texto canônico do codec."""

    text: str

    @classmethod
    def from_roots(cls, roots: Sequence[Node]) -> "InMemoryGraph":
        return cls(text=GraphCodec().encode(roots))

    @classmethod
    def empty(cls) -> "InMemoryGraph":
        return cls.from_roots([])

    def roots(self, catalog: Optional["NamespaceCatalog"] = None) -> List[Node]:
        """Reconstrói nós novos a cada chamada."""
        return GraphCodec(catalog=catalog).decode(self.text)

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.text.encode("utf-8")).hexdigest()


GraphSource = Union[str, Path, InMemoryGraph, Sequence[Node]]


@dataclass(frozen=True)
class NamedGraph:
    name: str
    role: Role
    source: Union[Path, InMemoryGraph]

    @property
    def in_memory(self) -> bool:
        return isinstance(self.source, InMemoryGraph)

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.source, InMemoryGraph):
            source: Any = {"in_memory": self.source.digest}
        else:
            source = str(self.source)
        return {"name": self.name, "role": self.role.value, "source": source}


class ViolationCode(str, Enum):
    MODULE_MISSING = "MODULE_MISSING"
    NO_SCHEMA = "NO_SCHEMA"
    NO_INPUT = "NO_INPUT"
    NO_OUTPUT = "NO_OUTPUT"
    GRAPH_ROLE_CONFLICT = "GRAPH_ROLE_CONFLICT"


@dataclass(frozen=True)
class ConfigViolation:
    code: ViolationCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransformationConfig:
    """
    Configuração imutável e validada de uma transformação.

    Campos:
        - module: caminho do arquivo de módulo
        - schemas: nome → SchemaBinding (somente leitura)
        - graphs: papel → tupla de NamedGraph (somente leitura, todos os
          papéis presentes)
        - engine_options: opções repassadas ao workspace do engine

    Só pode ser obtida via `TransformationBuilder.build()`, que garante os
    invariantes de montagem.
    """

    module: Path
    schemas: Mapping[str, SchemaBinding]
    graphs: Mapping[Role, Tuple[NamedGraph, ...]]
    engine_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def graphs_for(self, role: Union[Role, str]) -> Tuple[NamedGraph, ...]:
        return self.graphs.get(Role(role), ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": str(self.module),
            "schemas": {name: b.to_dict() for name, b in self.schemas.items()},
            "graphs": {
                role.value: [g.to_dict() for g in self.graphs_for(role)] for role in Role
            },
            "engine": deepcopy(dict(self.engine_options)),
        }

    def config_hash(self) -> str:
        return compute_config_hash(self.to_dict())

    def run(self, launcher: Optional["TransformationLauncher"] = None) -> "ExecutionResult":
        """Executa esta configuração (launcher padrão se nenhum for dado)."""
        from .launcher import TransformationLauncher

        return (launcher or TransformationLauncher()).run(self)


class TransformationBuilder:
    """
    Acumulador fluente de uma `TransformationConfig`.

    Exemplo:
        config = (
            TransformationBuilder()
            .with_schema("Simple", "schemas/Simple.yaml")
            .with_schema("Composed", "schemas/Composed.yaml")
            .with_input("IN", "graphs/composed.yaml")
            .with_output("OUT", "out/simple.yaml")
            .with_module("transformations/Composed2Simple.py")
            .build()
        )
    """

    def __init__(self) -> None:
        self._module: Optional[Path] = None
        self._schemas: Dict[str, SchemaBinding] = {}
        self._graphs: Dict[Role, Dict[str, NamedGraph]] = {role: {} for role in Role}
        self._engine_options: Dict[str, Any] = {}

    # -----------------------------
    # Acumulação
    # -----------------------------
    @staticmethod
    def _check_name(kind: str, name: Any) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{kind} name must be a non-empty string")

    def with_schema(self, name: str, path: Union[str, Path]) -> "TransformationBuilder":
        self._check_name("schema", name)
        self._schemas[name] = SchemaBinding(name=name, path=Path(path))
        return self

    def with_schema_from_archive(
        self, name: str, archive: Union[str, Path], member: str
    ) -> "TransformationBuilder":
        """Liga um schema armazenado como `member` dentro de um arquivo zip."""
        self._check_name("schema", name)
        if not isinstance(member, str) or not member.strip():
            raise ValueError("archive member must be a non-empty string")
        self._schemas[name] = SchemaBinding(name=name, path=Path(archive), member=member)
        return self

    def with_graph(self, role: Union[Role, str], name: str, source: GraphSource) -> "TransformationBuilder":
        """Liga `name` ao papel `role`.

        `source` pode ser um caminho, um `InMemoryGraph` ou uma sequência de
        nós raiz (serializada imediatamente).
        """
        role = Role(role)
        self._check_name("graph", name)
        if isinstance(source, (str, Path)):
            resolved: Union[Path, InMemoryGraph] = Path(source)
        elif isinstance(source, InMemoryGraph):
            resolved = source
        elif isinstance(source, Sequence) and all(isinstance(n, Node) for n in source):
            resolved = InMemoryGraph.from_roots(list(source))
        else:
            raise ValueError(
                f"graph '{name}' source must be a path, an InMemoryGraph or a sequence of root "
                f"nodes, got {type(source).__name__}"
            )
        self._graphs[role][name] = NamedGraph(name=name, role=role, source=resolved)
        return self

    def with_input(self, name: str, source: GraphSource) -> "TransformationBuilder":
        return self.with_graph(Role.INPUT, name, source)

    def with_output(self, name: str, location: Optional[Union[str, Path]] = None) -> "TransformationBuilder":
        """Sem `location`, a saída vive apenas em memória (arquivo temporário)."""
        return self.with_graph(Role.OUTPUT, name, location if location is not None else InMemoryGraph.empty())

    def with_in_out(self, name: str, source: GraphSource) -> "TransformationBuilder":
        return self.with_graph(Role.IN_OUT, name, source)

    def with_module(self, path: Union[str, Path]) -> "TransformationBuilder":
        self._module = Path(path)
        return self

    def with_engine_options(self, options: Mapping[str, Any]) -> "TransformationBuilder":
        """Mescla `options` (deep-merge) nas opções do engine já acumuladas."""
        self._engine_options = deep_merge(self._engine_options, dict(options))
        return self

    # -----------------------------
    # Validação / build
    # -----------------------------
    def validate(self) -> List[ConfigViolation]:
        violations: List[ConfigViolation] = []

        if self._module is None:
            violations.append(ConfigViolation(ViolationCode.MODULE_MISSING, "transformation module is not set"))
        if not self._schemas:
            violations.append(ConfigViolation(ViolationCode.NO_SCHEMA, "at least one schema is required"))
        if not self._graphs[Role.INPUT]:
            violations.append(ConfigViolation(ViolationCode.NO_INPUT, "at least one input graph is required"))
        if not self._graphs[Role.OUTPUT] and not self._graphs[Role.IN_OUT]:
            violations.append(
                ConfigViolation(ViolationCode.NO_OUTPUT, "at least one output or in-out graph is required")
            )

        roles_by_name: Dict[str, List[str]] = {}
        for role in Role:
            for name in self._graphs[role]:
                roles_by_name.setdefault(name, []).append(role.value)
        for name in sorted(roles_by_name):
            roles = roles_by_name[name]
            if len(roles) > 1:
                violations.append(
                    ConfigViolation(
                        ViolationCode.GRAPH_ROLE_CONFLICT,
                        f"graph '{name}' is bound to more than one role: {roles}",
                        {"graph": name, "roles": roles},
                    )
                )
        return violations

    def build(self) -> TransformationConfig:
        """Congela o estado atual.

        Raises:
            ConfigurationError: identificando a primeira violação.
        """
        violations = self.validate()
        if violations:
            first = violations[0]
            raise ConfigurationError(
                first.message,
                details={"violation": first.code.value, **first.details},
                hint=f"{len(violations)} violation(s): " + ", ".join(v.code.value for v in violations),
            )

        assert self._module is not None
        return TransformationConfig(
            module=self._module,
            schemas=MappingProxyType(dict(self._schemas)),
            graphs=MappingProxyType(
                {role: tuple(self._graphs[role].values()) for role in Role}
            ),
            engine_options=MappingProxyType(deepcopy(self._engine_options)),
        )
