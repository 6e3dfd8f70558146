"""
Manifest de run — rastreabilidade de execuções de transformação.

Este módulo define a estrutura e as operações canônicas do Manifest,
o registro forense de uma chamada a `TransformationLauncher.run`.

O Manifest consolida, de forma determinística e auditável:
    - metadados da execução (run_id, started_at, versão, módulo)
    - entradas semânticas (hash da configuração, namespaces dos schemas,
      grafos por papel)
    - estado incremental de cada regra executada
    - Event Log ordenado de eventos explícitos
    - tempos de carregamento e de execução (loading_ms, execution_ms)

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de execução
    - O Manifest é serializável e reconstruível (round-trip JSON)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico (chaves ordenadas)

Limites explícitos:
    - Não executa regras
    - Não decide políticas de execução
    - Não persiste automaticamente
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _utc(dt: datetime) -> datetime:
    """Normaliza timestamps para timezone-aware em UTC (naive é assumido UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    return max(0, int((_utc(end) - _utc(start)).total_seconds() * 1000))


@dataclass
class RunManifest:
    """
    Registro forense de uma run de transformação.

    Campos principais:
        - run: metadados da execução
        - inputs: hash da configuração, schemas e grafos
        - rules: estado incremental por rule_id
        - events: Event Log ordenado

    Invariantes:
        - `rules` é sempre um dicionário indexado por rule_id
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    rules: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Cópia serializável, independente do estado interno."""
        return json.loads(json.dumps({
            "run": self.run,
            "inputs": self.inputs,
            "rules": self.rules,
            "events": self.events,
        }))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunManifest":
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            rules={k: dict(v) for k, v in (data.get("rules", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    atlas_version: str,
    config_hash: str,
    module: str,
    graphs: Dict[str, List[str]],
) -> RunManifest:
    """
    Cria o Manifest inicial de uma run.

    ⚠️ Importante: esta função **não emite eventos implicitamente**.
    O Event Log inicia vazio e só é preenchido por chamadas explícitas.

    Args:
        run_id: identificador único da execução.
        started_at: timestamp de início.
        atlas_version: versão do Atlas Transform.
        config_hash: hash canônico da configuração efetiva.
        module: caminho do módulo de transformação.
        graphs: nomes de grafos por papel (input/output/in_out).
    """
    return RunManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "atlas_version": atlas_version,
            "module": module,
        },
        inputs={
            "config_hash": config_hash,
            "schemas": {},
            "graphs": {role: list(names) for role, names in graphs.items()},
        },
    )


def add_event(
    manifest: RunManifest,
    *,
    event_type: str,
    ts: datetime,
    rule_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona um evento explícito ao Event Log, preservando a ordem de chamada."""
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if rule_id is not None:
        ev["rule_id"] = rule_id
    if payload is not None:
        ev["payload"] = payload
    manifest.events.append(ev)


def record_schema(manifest: RunManifest, *, name: str, namespace: str) -> None:
    manifest.inputs.setdefault("schemas", {})[name] = namespace


def record_timing(manifest: RunManifest, *, phase: str, start: datetime, end: datetime) -> int:
    """Registra a duração de uma fase (`loading`, `execution`) em `run.<fase>_ms`."""
    ms = _ms_between(start, end)
    manifest.run[f"{phase}_ms"] = ms
    return ms


def rule_started(manifest: RunManifest, *, rule_id: str, ts: datetime) -> None:
    manifest.rules.setdefault(rule_id, {}).update(
        {"rule_id": rule_id, "status": "running", "started_at": _iso(ts)}
    )
    add_event(manifest, event_type="rule_started", ts=ts, rule_id=rule_id)


def rule_finished(manifest: RunManifest, *, rule_id: str, ts: datetime, result: Dict[str, Any]) -> None:
    """
    Registra a conclusão de uma regra (status final, duração e métricas).

    Regras nunca iniciadas (ex.: puladas por opção) recebem duração zero.
    """
    r = manifest.rules.setdefault(rule_id, {"rule_id": rule_id})
    started = r.get("started_at")
    started_dt = datetime.fromisoformat(started) if started else ts
    status = result.get("status", "success")
    r.update(
        {
            "status": status,
            "finished_at": _iso(ts),
            "duration_ms": _ms_between(started_dt, ts),
            "summary": result.get("summary"),
            "metrics": result.get("metrics", {}) or {},
            "warnings": result.get("warnings", []) or [],
        }
    )
    add_event(
        manifest,
        event_type="rule_finished",
        ts=ts,
        rule_id=rule_id,
        payload={"status": status, "duration_ms": r["duration_ms"]},
    )


def rule_failed(manifest: RunManifest, *, rule_id: str, ts: datetime, error: Dict[str, Any]) -> None:
    r = manifest.rules.setdefault(rule_id, {"rule_id": rule_id})
    r.update({"status": "failed", "finished_at": _iso(ts), "error": error})
    add_event(manifest, event_type="rule_failed", ts=ts, rule_id=rule_id, payload={"error": error})


def save_manifest(manifest: RunManifest, path: Path) -> None:
    """Persiste o Manifest em JSON determinístico (chaves ordenadas, indent=2)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_manifest(path: Path) -> RunManifest:
    return RunManifest.from_dict(json.loads(path.read_text(encoding="utf-8")))
