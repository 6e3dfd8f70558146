# tests/core/engine/test_rule_registry.py
"""
Testes do RuleRegistry e do contrato de regra (Rule Protocol).

Os testes asseguram que:
- `rule.id` duplicado é rejeitado no registro
- a ordem de declaração é preservada
- regras sem `run` callable são rejeitadas
- a conformidade ao protocolo é verificável por duck typing
"""

import pytest

try:
    from atlas_transform.core.engine.registry import DuplicateRuleIdError, RuleRegistry
    from atlas_transform.core.engine.rule import Rule
except Exception as e:  # noqa: BLE001
    DuplicateRuleIdError = None
    RuleRegistry = None
    Rule = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing rule registry modules. Import error: {_IMPORT_ERR}")


def test_registry_preserves_order_and_rejects_duplicates(DummyRule):
    _require_imports()
    reg = RuleRegistry()
    reg.add(DummyRule("b"))
    reg.add(DummyRule("a"))

    with pytest.raises(DuplicateRuleIdError):
        reg.add(DummyRule("a"))
    assert [r.id for r in reg.list()] == ["b", "a"]
    assert len(reg) == 2
    assert reg.get("a").id == "a"


def test_registry_rejects_rule_without_run():
    _require_imports()

    class NotARule:
        id = "x"
        depends_on = []
        run = "not callable"

    with pytest.raises(ValueError):
        RuleRegistry().add(NotARule())


def test_dummy_rule_conforms_to_protocol(DummyRule):
    _require_imports()
    assert isinstance(DummyRule("a"), Rule)
