"""
Contrato do engine de transformação.

O launcher conhece o engine apenas por este protocolo: registra schemas e
grafos no workspace, pede ao engine que carregue um módulo identificado por
nome e diretório base e, por fim, executa.

Invariantes:
    - `load` é chamado exatamente uma vez por run, antes de `execute`
    - `execute` é uma chamada bloqueante única, sem cancelamento nem timeout
    - Falhas de carregamento são `ModuleLoadError`; falhas de execução são
      `ExecutionError`
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from .workspace import ExecutionWorkspace


@runtime_checkable
class TransformationEngine(Protocol):
    def load(self, workspace: ExecutionWorkspace, *, directory: Path, module: str) -> None:
        """Resolve `module` relativo a `directory` e prepara a execução."""
        ...

    def execute(self, workspace: ExecutionWorkspace) -> None:
        """Executa o módulo carregado contra os grafos do workspace."""
        ...
