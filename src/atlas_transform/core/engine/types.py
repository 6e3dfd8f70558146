"""
Tipos canônicos de execução de regras do Atlas Transform.

Este módulo define as estruturas que padronizam a comunicação entre regras
de um módulo de transformação, o `RuleEngine` e o Manifest da run.

Componentes principais:
    - RuleStatus → enum de estados finais (SUCCESS, SKIPPED, FAILED)
    - RuleResult → estrutura imutável de resultado de uma regra

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Valores são projetados para persistência em Manifest
    - Nenhuma lógica de execução vive neste módulo

Limites explícitos:
    - Não executa regras
    - Não planeja a ordem de execução
    - Não define a linguagem de transformação
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class RuleStatus(str, Enum):
    """
    Estados finais possíveis da execução de uma regra.

    Os valores são strings para facilitar:
        - serialização em JSON
        - persistência em Manifest

    Estados definidos:
        - SUCCESS: execução concluída com sucesso
        - SKIPPED: execução pulada por decisão explícita (opções do engine)
        - FAILED: execução interrompida por erro

    Estados intermediários (ex.: running) não pertencem a este enum.
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RuleResult:
    """
    Resultado imutável da execução de uma regra.

    Campos:
        - rule_id: identificador único da regra no módulo
        - status: estado final da execução
        - summary: resumo textual
        - metrics: métricas produzidas (ex.: nós criados)
        - warnings: avisos não fatais
        - payload: dados adicionais livres (ex.: erro serializado)
    """

    rule_id: str
    status: RuleStatus
    summary: str
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "status": self.status.value,
            "summary": self.summary,
            "metrics": dict(self.metrics),
            "warnings": list(self.warnings),
            "payload": dict(self.payload),
        }
