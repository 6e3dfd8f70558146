# src/atlas_transform/core/engine/__init__.py
"""
Engine do Atlas Transform.

Este pacote contém o contrato entre launcher e engine e o engine de regras
de referência usado por testes e pelo cenário ponta-a-ponta.

Componentes principais:
    - protocol    → `TransformationEngine` (load / execute)
    - workspace   → `ExecutionWorkspace`, o contexto de uma run
    - rule        → contrato de regra de um módulo
    - registry    → validação estrutural e unicidade de `rule.id`
    - planner     → ordenação topológica determinística
    - rule_engine → `RuleEngine`, loader + planner + executor

Invariantes:
    - Regras só executam após suas dependências
    - Cada regra executa no máximo uma vez por run
    - A primeira falha interrompe a execução

Limites explícitos:
    - Não define uma linguagem de transformação
    - Não persiste grafos automaticamente
"""

from .protocol import TransformationEngine
from .rule_engine import RuleEngine
from .types import RuleResult, RuleStatus
from .workspace import ExecutionWorkspace

__all__ = ["ExecutionWorkspace", "RuleEngine", "RuleResult", "RuleStatus", "TransformationEngine"]
