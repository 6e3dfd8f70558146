# src/atlas_transform/core/engine/rule_engine.py
"""
Engine de regras de referência do Atlas Transform.

O `RuleEngine` implementa o contrato `TransformationEngine` para módulos
escritos como arquivos Python que declaram uma lista de regras. Ele não
define uma linguagem de transformação; apenas torna o contrato do launcher
executável e testável.

Formato do módulo:
    `<directory>/<module>.py` expondo:
        - `RULES`: sequência de regras, ou
        - `rules()`: callable que retorna essa sequência

Decisões arquiteturais:
    - Carregamento via `importlib.util.spec_from_file_location`, sob um nome
      único por run; o módulo não permanece em `sys.modules`
    - Ordem de execução determinística (`core.engine.planner`)
    - Toda falha de regra é fatal: a execução para na primeira falha e
      nenhum resultado parcial é devolvido
    - Regras podem ser puladas por opção (`rules.<id>.enabled: false`)

Rastreabilidade:
    - Se o workspace carrega um Manifest, cada regra registra
      `rule_started` / `rule_finished` / `rule_failed`
    - Falhas são convertidas em `AtlasErrorPayload` e anexadas ao
      `ExecutionError` em `details["error"]`
"""

from __future__ import annotations

import importlib.util
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from atlas_transform.core.errors import payload_from_exception
from atlas_transform.core.exceptions import ExecutionError, ModuleLoadError
from atlas_transform.core.traceability.manifest import rule_failed, rule_finished, rule_started

from .planner import plan_execution
from .registry import RuleRegistry
from .rule import Rule
from .types import RuleResult, RuleStatus
from .workspace import ExecutionWorkspace


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RuleEngine:
    """Engine canônico de referência (loader + planner + executor)."""

    def __init__(self) -> None:
        self._plans: Dict[str, List[Rule]] = {}

    # ------------------------------------------------------------------
    # Carregamento
    # ------------------------------------------------------------------
    def _import_module(self, path: Path, *, run_id: str) -> Any:
        unique_name = f"_atlas_transform_module_{run_id}_{path.stem}"
        spec = importlib.util.spec_from_file_location(unique_name, path)
        if spec is None or spec.loader is None:
            raise ModuleLoadError(f"cannot import module file: {path}", details={"path": str(path)})
        mod = importlib.util.module_from_spec(spec)
        sys.modules[unique_name] = mod
        try:
            spec.loader.exec_module(mod)
        except Exception as e:
            raise ModuleLoadError(
                f"module raised while importing: {path.name}",
                details={"path": str(path), "exception_class": e.__class__.__name__, "error": str(e)},
                hint="Corrija o módulo de transformação",
            ) from e
        finally:
            sys.modules.pop(unique_name, None)
        return mod

    def _declared_rules(self, mod: Any, *, path: Path) -> List[Rule]:
        if hasattr(mod, "RULES"):
            declared = mod.RULES
        elif callable(getattr(mod, "rules", None)):
            declared = mod.rules()
        else:
            raise ModuleLoadError(
                f"module declares no rules: {path.name}",
                details={"path": str(path)},
                hint="Declare RULES ou rules() no módulo",
            )
        if isinstance(declared, (str, bytes)) or not hasattr(declared, "__iter__"):
            raise ModuleLoadError(
                f"module rules must be a sequence: {path.name}",
                details={"path": str(path), "received": type(declared).__name__},
            )
        return list(declared)

    def load(self, workspace: ExecutionWorkspace, *, directory: Path, module: str) -> None:
        """Carrega `<directory>/<module>.py` e planeja suas regras.

        Raises:
            ModuleLoadError: arquivo ausente, erro de import, regras inválidas,
                dependência desconhecida ou ciclo.
        """
        path = Path(directory) / f"{module}.py"
        if not path.is_file():
            raise ModuleLoadError(
                f"module file not found: {path}",
                details={"directory": str(directory), "module": module},
            )

        mod = self._import_module(path, run_id=workspace.run_id)
        registry = RuleRegistry()
        try:
            for rule in self._declared_rules(mod, path=path):
                registry.add(rule)
            plan = plan_execution(registry.list())
        except ValueError as e:
            raise ModuleLoadError(
                f"invalid rules in module '{module}': {e}",
                details={"module": module, "exception_class": e.__class__.__name__},
            ) from e

        self._plans[workspace.run_id] = plan
        workspace.module = module
        workspace.log(
            rule_id="engine",
            level="info",
            message="module loaded",
            module=module,
            rules=[r.id for r in plan],
        )

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    def _is_enabled(self, workspace: ExecutionWorkspace, rule_id: str) -> bool:
        rules_cfg = (workspace.options or {}).get("rules", {}) or {}
        rule_cfg = rules_cfg.get(rule_id, {}) or {}
        return bool(rule_cfg.get("enabled", True))

    def _merge_warnings(self, workspace: ExecutionWorkspace, result: RuleResult) -> RuleResult:
        merged: List[str] = []
        for msg in list(result.warnings) + list(workspace.warnings.get(result.rule_id, [])):
            if msg not in merged:
                merged.append(msg)
        return replace(result, warnings=merged)

    def _fail(self, workspace: ExecutionWorkspace, rule_id: str, exc: BaseException) -> ExecutionError:
        error = payload_from_exception(exc).to_dict()
        if workspace.manifest is not None:
            rule_failed(workspace.manifest, rule_id=rule_id, ts=_now(), error=error)
        workspace.log(rule_id=rule_id, level="error", message=error["message"], error_type=error["type"])
        return ExecutionError(
            f"rule '{rule_id}' failed: {error['message']}",
            details={"rule_id": rule_id, "error": error},
            hint=error.get("hint"),
        )

    def execute(self, workspace: ExecutionWorkspace) -> None:
        """Executa as regras planejadas em ordem; a primeira falha é fatal.

        Raises:
            ExecutionError: regra falhou, retornou tipo inválido ou status FAILED.
        """
        plan = self._plans.pop(workspace.run_id, None)
        if plan is None:
            raise ExecutionError(
                "no module loaded for this workspace",
                details={"run_id": workspace.run_id},
                hint="Chame load() antes de execute()",
            )

        for rule in plan:
            rid = rule.id
            manifest = workspace.manifest

            if not self._is_enabled(workspace, rid):
                skipped = RuleResult(rule_id=rid, status=RuleStatus.SKIPPED, summary="skipped by config")
                workspace.results[rid] = skipped
                if manifest is not None:
                    rule_finished(manifest, rule_id=rid, ts=_now(), result=skipped.to_dict())
                workspace.log(rule_id=rid, level="info", message="rule skipped by config")
                continue

            if manifest is not None:
                rule_started(manifest, rule_id=rid, ts=_now())
            try:
                result = rule.run(workspace)
                if not isinstance(result, RuleResult):
                    raise TypeError(f"Rule.run(ctx) must return RuleResult, got {type(result).__name__}")
            except Exception as e:
                raise self._fail(workspace, rid, e) from e

            if result.status == RuleStatus.FAILED:
                raise self._fail(workspace, rid, RuntimeError(result.summary or "rule reported failure"))

            result = self._merge_warnings(workspace, replace(result, rule_id=rid))
            workspace.results[rid] = result
            if manifest is not None:
                rule_finished(manifest, rule_id=rid, ts=_now(), result=result.to_dict())
            workspace.log(rule_id=rid, level="info", message="rule finished", status=result.status.value)
