# src/atlas_transform/core/launch/launcher.py
"""
Launcher de transformações do Atlas Transform.

O `TransformationLauncher` consome uma `TransformationConfig` já validada e
conduz uma execução completa:

    1. cria um `ExecutionWorkspace` novo (run_id, catálogo, Event Log)
    2. resolve cada schema no `SchemaRegistry` e registra nome → namespace
    3. liga os grafos por papel:
        - INPUT  → abre o recurso existente, somente leitura
        - OUTPUT → cria um recurso vazio no destino (sobrescrevendo)
        - IN_OUT → abre o recurso existente, leitura e escrita
    4. identifica o módulo (nome do arquivo sem extensão) e o diretório de
       resolução (diretório que o contém) e chama `engine.load`
    5. chama `engine.execute` uma única vez (bloqueante, sem timeout)
    6. devolve um `ExecutionResult` com exatamente os grafos OUTPUT e IN_OUT

Decisões arquiteturais:
    - Todas as falhas são fatais e não há retry
    - Grafos em memória são gravados em arquivos temporários de nome único,
      registrados num `ExitStack` e removidos em todos os caminhos de saída
    - O Manifest da run é criado aqui e anexado ao workspace; em caso de
      falha de execução ele segue em `ExecutionError.details["manifest"]`
    - Nenhum grafo é persistido automaticamente ao final; o chamador decide
      entre `GraphHandle.save()` e `GraphHandle.encode()`

Limites explícitos:
    - Não valida a configuração (ver `TransformationBuilder.build`)
    - Não define a linguagem de transformação (ver `core.engine`)
    - Não impõe deadline: quem precisar de timeout deve rodar o launcher
      em um processo separado e encerrá-lo
"""

from __future__ import annotations

import os
import tempfile
from contextlib import ExitStack
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import atlas_transform
from atlas_transform.core.engine.protocol import TransformationEngine
from atlas_transform.core.engine.rule_engine import RuleEngine
from atlas_transform.core.engine.workspace import ExecutionWorkspace
from atlas_transform.core.errors import payload_from_exception
from atlas_transform.core.exceptions import ExecutionError, ModuleLoadError
from atlas_transform.core.graph.resource import GraphHandle
from atlas_transform.core.schema.registry import SchemaRegistry, default_registry
from atlas_transform.core.traceability.manifest import (
    RunManifest,
    add_event,
    create_manifest,
    record_schema,
    record_timing,
)

from .builder import NamedGraph, Role, TransformationConfig

LAUNCHER_ID = "launcher"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionResult(Mapping[str, GraphHandle]):
    """
    Mapa somente leitura nome → `GraphHandle` dos grafos OUTPUT e IN_OUT.

    Grafos INPUT nunca aparecem no resultado. O Manifest e o run_id da
    execução ficam disponíveis como atributos.
    """

    def __init__(self, graphs: Mapping[str, GraphHandle], *, run_id: str, manifest: RunManifest):
        self._graphs: Dict[str, GraphHandle] = dict(graphs)
        self.run_id = run_id
        self.manifest = manifest

    def __getitem__(self, name: str) -> GraphHandle:
        return self._graphs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._graphs)

    def __len__(self) -> int:
        return len(self._graphs)

    def __repr__(self) -> str:
        return f"ExecutionResult(run_id={self.run_id!r}, graphs={sorted(self._graphs)})"


class TransformationLauncher:
    """Conduz uma execução completa de uma `TransformationConfig`."""

    def __init__(
        self,
        engine: Optional[TransformationEngine] = None,
        *,
        registry: Optional[SchemaRegistry] = None,
        temp_dir: Optional[Path] = None,
    ):
        self.engine: TransformationEngine = engine if engine is not None else RuleEngine()
        self.registry = registry if registry is not None else default_registry()
        self.temp_dir = temp_dir

    # -----------------------------
    # Etapas
    # -----------------------------
    def _register_schemas(self, workspace: ExecutionWorkspace, config: TransformationConfig) -> None:
        for name, binding in config.schemas.items():
            namespace = self.registry.resolve(str(binding.path), binding.member)
            workspace.register_schema(name, namespace)
            if workspace.manifest is not None:
                record_schema(workspace.manifest, name=name, namespace=namespace)
            workspace.log(
                rule_id=LAUNCHER_ID,
                level="info",
                message="schema registered",
                schema=name,
                namespace=namespace,
            )

    def _materialize(self, graph: NamedGraph, stack: ExitStack) -> Path:
        """Devolve o caminho do grafo, gravando grafos em memória num temporário."""
        if not graph.in_memory:
            return Path(graph.source)  # type: ignore[arg-type]

        fd, name = tempfile.mkstemp(
            prefix=f"atlas-{graph.role.value}-",
            suffix=".graph.yaml",
            dir=str(self.temp_dir) if self.temp_dir is not None else None,
        )
        path = Path(name)
        stack.callback(path.unlink, missing_ok=True)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(graph.source.text)  # type: ignore[union-attr]
        return path

    def _bind_graphs(self, workspace: ExecutionWorkspace, config: TransformationConfig, stack: ExitStack) -> None:
        catalog = self.registry.catalog

        for graph in config.graphs_for(Role.INPUT):
            location = self._materialize(graph, stack)
            workspace.register_input(
                GraphHandle.open(name=graph.name, location=location, catalog=catalog, read_only=True)
            )
            self._log_bound(workspace, graph, location)

        for graph in config.graphs_for(Role.OUTPUT):
            location = self._materialize(graph, stack)
            workspace.register_output(GraphHandle.create(name=graph.name, location=location))
            self._log_bound(workspace, graph, location)

        for graph in config.graphs_for(Role.IN_OUT):
            location = self._materialize(graph, stack)
            workspace.register_in_out(
                GraphHandle.open(name=graph.name, location=location, catalog=catalog, read_only=False)
            )
            self._log_bound(workspace, graph, location)

    @staticmethod
    def _log_bound(workspace: ExecutionWorkspace, graph: NamedGraph, location: Path) -> None:
        workspace.log(
            rule_id=LAUNCHER_ID,
            level="info",
            message="graph bound",
            graph=graph.name,
            role=graph.role.value,
            location=str(location),
            in_memory=graph.in_memory,
        )

    @staticmethod
    def _module_location(module: Path) -> Tuple[Path, str]:
        directory = module.resolve().parent
        if not directory.is_dir():
            raise ModuleLoadError(
                f"module directory does not exist: {directory}",
                details={"module": str(module), "directory": str(directory)},
            )
        return directory, module.stem

    def _load(self, workspace: ExecutionWorkspace, config: TransformationConfig) -> None:
        directory, module = self._module_location(config.module)
        try:
            self.engine.load(workspace, directory=directory, module=module)
        except ModuleLoadError:
            raise
        except Exception as e:
            raise ModuleLoadError(
                f"engine failed to load module '{module}': {e}",
                details={"module": module, "directory": str(directory), "exception_class": e.__class__.__name__},
            ) from e
        workspace.log(rule_id=LAUNCHER_ID, level="info", message="module loaded", module=module)

    def _execute(self, workspace: ExecutionWorkspace) -> None:
        manifest = workspace.manifest
        assert manifest is not None
        workspace.log(rule_id=LAUNCHER_ID, level="info", message="execution started")
        try:
            self.engine.execute(workspace)
        except ExecutionError as e:
            add_event(manifest, event_type="run_failed", ts=_now(), payload={"error": payload_from_exception(e).to_dict()})
            e.details.setdefault("manifest", manifest.to_dict())
            raise
        except Exception as e:
            error = payload_from_exception(e).to_dict()
            add_event(manifest, event_type="run_failed", ts=_now(), payload={"error": error})
            raise ExecutionError(
                f"transformation failed: {error['message']}",
                details={"error": error, "manifest": manifest.to_dict()},
                hint=error.get("hint"),
            ) from e
        workspace.log(rule_id=LAUNCHER_ID, level="info", message="execution finished")

    # -----------------------------
    # API
    # -----------------------------
    def run(self, config: TransformationConfig) -> ExecutionResult:
        """
        Executa `config` e devolve os grafos OUTPUT e IN_OUT.

        Raises:
            SchemaLoadError: schema ausente, malformado ou sem namespace.
            GraphLoadError: origem INPUT/IN_OUT ausente ou corrompida, ou
                destino OUTPUT não gravável.
            ModuleLoadError: módulo ou diretório de resolução inválido.
            ExecutionError: qualquer falha reportada durante a execução.
        """
        workspace = ExecutionWorkspace.create(
            catalog=self.registry.catalog,
            options=dict(config.engine_options),
        )
        started = workspace.created_at
        manifest = create_manifest(
            run_id=workspace.run_id,
            started_at=started,
            atlas_version=atlas_transform.__version__,
            config_hash=config.config_hash(),
            module=str(config.module),
            graphs={role.value: [g.name for g in config.graphs_for(role)] for role in Role},
        )
        workspace.manifest = manifest
        add_event(manifest, event_type="run_started", ts=started)

        with ExitStack() as stack:
            self._register_schemas(workspace, config)
            self._bind_graphs(workspace, config, stack)
            self._load(workspace, config)
            loaded = _now()
            record_timing(manifest, phase="loading", start=started, end=loaded)

            self._execute(workspace)
            finished = _now()
            record_timing(manifest, phase="execution", start=loaded, end=finished)
            add_event(manifest, event_type="run_finished", ts=finished)

        produced: Dict[str, Any] = {}
        produced.update(workspace.outputs)
        produced.update(workspace.in_outs)
        return ExecutionResult(produced, run_id=workspace.run_id, manifest=manifest)
