# src/atlas_transform/core/traceability/__init__.py
"""
Pacote de rastreabilidade do Atlas Transform — Manifest de run.

API pública exposta:
    - RunManifest      → estrutura canônica do Manifest
    - create_manifest  → criação explícita do Manifest
    - add_event        → registro explícito de eventos no Event Log
    - rule_started     → marca início de execução de uma regra
    - rule_finished    → registra conclusão de uma regra
    - rule_failed      → registra falha de uma regra
    - record_schema    → registra nome → namespace resolvido
    - record_timing    → registra duração de uma fase da run
    - save_manifest    → persistência do Manifest em JSON
    - load_manifest    → restauração determinística do Manifest

Invariantes:
    - O Manifest inicia com `rules` e `events` vazios
    - Eventos nunca são reordenados automaticamente
"""

from .manifest import (
    RunManifest,
    add_event,
    create_manifest,
    load_manifest,
    record_schema,
    record_timing,
    rule_failed,
    rule_finished,
    rule_started,
    save_manifest,
)

__all__ = [
    "RunManifest",
    "create_manifest",
    "add_event",
    "rule_started",
    "rule_finished",
    "rule_failed",
    "record_schema",
    "record_timing",
    "save_manifest",
    "load_manifest",
]
