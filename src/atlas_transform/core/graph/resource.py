"""
Recursos de grafo nomeados (GraphHandle).

Um `GraphHandle` associa um nome de variável (ex.: IN, OUT) a uma localização
em disco e à lista de raízes carregada em memória. É a unidade registrada no
workspace de execução e devolvida ao chamador no `ExecutionResult`.

Semântica por papel:
    - INPUT  → `open(..., read_only=True)`: raízes não podem ser alteradas
    - OUTPUT → `create(...)`: documento vazio gravado no destino, sobrescrevendo
      qualquer conteúdo anterior
    - IN_OUT → `open(..., read_only=False)`: carregado e alterado in-place

Limites explícitos:
    - Não persiste automaticamente: `save()` é sempre explícito
    - Não impede mutação de atributos de nós individuais de um INPUT;
      a proteção atua no nível das raízes
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

from atlas_transform.core.exceptions import CodecError, GraphLoadError, ReadOnlyGraphError
from .codec import GraphCodec
from .node import Node

if TYPE_CHECKING:  # pragma: no cover
    from atlas_transform.core.schema.catalog import NamespaceCatalog


class GraphHandle:
    """Grafo nomeado ligado a uma localização."""

    def __init__(
        self,
        *,
        name: str,
        location: Path,
        roots: Optional[Iterable[Node]] = None,
        read_only: bool = False,
    ):
        self.name = name
        self.location = Path(location)
        self.read_only = read_only
        self._roots: List[Node] = list(roots or [])

    def __repr__(self) -> str:
        mode = "ro" if self.read_only else "rw"
        return f"GraphHandle(name={self.name!r}, location={str(self.location)!r}, roots={len(self._roots)}, {mode})"

    # -----------------------------
    # Abertura / criação
    # -----------------------------
    @classmethod
    def open(
        cls,
        *,
        name: str,
        location: Path,
        catalog: Optional["NamespaceCatalog"] = None,
        read_only: bool = False,
    ) -> "GraphHandle":
        """Carrega um grafo existente.

        Raises:
            GraphLoadError: arquivo ausente, ilegível ou malformado.
        """
        path = Path(location)
        if not path.is_file():
            raise GraphLoadError(f"graph file not found: {path}", details={"graph": name, "path": str(path)})
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise GraphLoadError(
                f"failed to read graph file: {path}",
                details={"graph": name, "path": str(path), "exception_class": e.__class__.__name__},
            ) from e
        try:
            roots = GraphCodec(catalog=catalog).decode(text)
        except CodecError as e:
            raise GraphLoadError(
                f"graph '{name}' is malformed: {e.message}",
                details={"graph": name, "path": str(path), "codec": dict(e.details)},
            ) from e
        return cls(name=name, location=path, roots=roots, read_only=read_only)

    @classmethod
    def create(cls, *, name: str, location: Path) -> "GraphHandle":
        """Cria um grafo vazio no destino, sobrescrevendo conteúdo pré-existente.

        Raises:
            GraphLoadError: se o destino não puder ser escrito.
        """
        handle = cls(name=name, location=Path(location))
        try:
            handle.save()
        except OSError as e:
            raise GraphLoadError(
                f"failed to create graph file: {location}",
                details={"graph": name, "path": str(location), "exception_class": e.__class__.__name__},
            ) from e
        return handle

    # -----------------------------
    # Raízes
    # -----------------------------
    @property
    def roots(self) -> Tuple[Node, ...]:
        return tuple(self._roots)

    def __iter__(self) -> Iterator[Node]:
        return iter(tuple(self._roots))

    def __len__(self) -> int:
        return len(self._roots)

    def _ensure_writable(self, action: str) -> None:
        if self.read_only:
            raise ReadOnlyGraphError(
                f"graph '{self.name}' is read-only (input); cannot {action}",
                details={"graph": self.name, "action": action},
            )

    def add_root(self, node: Node) -> Node:
        self._ensure_writable("add a root")
        self._roots.append(node)
        return node

    def remove_root(self, node: Node) -> None:
        self._ensure_writable("remove a root")
        self._roots = [r for r in self._roots if r is not node]

    def clear(self) -> None:
        self._ensure_writable("clear roots")
        self._roots = []

    # -----------------------------
    # Texto / persistência
    # -----------------------------
    def encode(self) -> str:
        return GraphCodec().encode(self._roots)

    def save(self, path: Optional[Path] = None) -> Path:
        """Persiste o grafo (por padrão, na própria localização)."""
        target = Path(path) if path is not None else self.location
        text = self.encode()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        return target
