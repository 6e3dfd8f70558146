# tests/core/traceability/test_manifest_round_trip.py
"""
Testes de persistência do Manifest (save_manifest / load_manifest).

Os testes asseguram que o Manifest salvo em JSON determinístico é
restaurado com o mesmo conteúdo e que o arquivo não depende da ordem de
inserção das chaves.
"""

import json
from datetime import datetime, timezone

import pytest

try:
    from atlas_transform.core.traceability.manifest import (
        add_event,
        create_manifest,
        load_manifest,
        rule_started,
        save_manifest,
    )
except Exception as e:  # noqa: BLE001
    add_event = None
    create_manifest = None
    load_manifest = None
    rule_started = None
    save_manifest = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing manifest persistence API. Import error: {_IMPORT_ERR}")


def test_save_and_load_round_trip(tmp_path):
    _require_imports()
    ts = datetime(2026, 1, 16, tzinfo=timezone.utc)
    m = create_manifest(
        run_id="r", started_at=ts, atlas_version="0.1.0", config_hash="h", module="m", graphs={"input": ["IN"]}
    )
    add_event(m, event_type="run_started", ts=ts)
    rule_started(m, rule_id="a", ts=ts)
    path = tmp_path / "nested" / "manifest.json"

    save_manifest(m, path)
    restored = load_manifest(path)

    assert restored.to_dict() == m.to_dict()
    raw = path.read_text(encoding="utf-8")
    assert json.loads(raw) == m.to_dict()
    assert raw.index('"events"') < raw.index('"inputs"') < raw.index('"rules"') < raw.index('"run"')


def test_to_dict_is_a_detached_copy():
    _require_imports()
    m = create_manifest(
        run_id="r",
        started_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        atlas_version="0.1.0",
        config_hash="h",
        module="m",
        graphs={},
    )
    snapshot = m.to_dict()
    snapshot["run"]["run_id"] = "changed"

    assert m.run["run_id"] == "r"
