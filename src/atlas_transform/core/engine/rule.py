"""
Contrato canônico de regra de um módulo de transformação.

Uma regra é a menor unidade executável de um módulo carregado pelo
`RuleEngine`. Cada regra declara identidade e dependências e interage com
os grafos exclusivamente via `ExecutionWorkspace`.

Princípios fundamentais:
    - Regras não conhecem o engine nem o planner
    - Regras não controlam a ordem de execução
    - Conformidade é garantida por duck typing (@runtime_checkable)

Invariantes:
    - Cada regra possui um `id` único no módulo
    - `run` é chamado no máximo uma vez por execução
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol, runtime_checkable

from .types import RuleResult

if TYPE_CHECKING:  # pragma: no cover
    from .workspace import ExecutionWorkspace


@runtime_checkable
class Rule(Protocol):
    """
    Interface mínima de uma regra.

    Atributos obrigatórios:
        - id: identificador único e estável da regra
        - depends_on: ids das regras que devem executar antes
    """

    id: str
    depends_on: List[str]

    def run(self, ctx: "ExecutionWorkspace") -> RuleResult:
        """Executa a regra uma única vez usando exclusivamente o workspace."""
        ...
