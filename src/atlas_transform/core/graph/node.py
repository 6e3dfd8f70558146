"""
Modelo canônico de nós de grafo de objetos.

Um grafo de objetos é uma lista ordenada de nós raiz. Cada nó é uma
estrutura marcada `{type_id, attributes, children, references}`:

    - type_id: identificador qualificado pelo schema (`<namespace>#<Tipo>`)
    - attributes: mapa de escalares ou listas de escalares
    - children: filhos por contenção (ordem preservada)
    - references: arestas não proprietárias para outros nós do grafo

Invariantes:
    - A contenção forma uma árvore por raiz
    - Referências podem introduzir ciclos (inclusive auto-referência)
    - Nós usam igualdade por identidade; comparação estrutural é feita por
      `graphs_isomorphic`

Limites explícitos:
    - Não valida tipos contra schemas (ver `core.schema.catalog`)
    - Não serializa (ver `core.graph.codec`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence, Tuple


TYPE_SEPARATOR = "#"


def make_type_id(namespace: str, type_name: str) -> str:
    return f"{namespace}{TYPE_SEPARATOR}{type_name}"


def split_type_id(type_id: str) -> Tuple[str, str]:
    """Separa `<namespace>#<Tipo>` em (namespace, tipo).

    Raises:
        ValueError: se o identificador não for qualificado.
    """
    namespace, sep, name = str(type_id).rpartition(TYPE_SEPARATOR)
    if not sep or not namespace or not name:
        raise ValueError(f"type id must be '<namespace>{TYPE_SEPARATOR}<type>': {type_id!r}")
    return namespace, name


@dataclass(eq=False)
class Node:
    """Nó de um grafo de objetos tipado."""

    type_id: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list, repr=False)
    references: List["Node"] = field(default_factory=list, repr=False)

    @property
    def namespace(self) -> str:
        return split_type_id(self.type_id)[0]

    @property
    def type_name(self) -> str:
        return split_type_id(self.type_id)[1]

    def add_child(self, node: "Node") -> "Node":
        self.children.append(node)
        return node

    def add_reference(self, node: "Node") -> "Node":
        self.references.append(node)
        return node

    def iter_tree(self) -> Iterator["Node"]:
        """Percorre a subárvore de contenção em pré-ordem (iterativo)."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def root_path(index: int) -> str:
    return f"/{index}"


def child_path(parent: str, index: int) -> str:
    return f"{parent}/{index}"


def iter_graph(roots: Sequence[Node]) -> Iterator[Tuple[str, Node]]:
    """
    Percorre todas as raízes em pré-ordem, emitindo (caminho, nó).

    O caminho de contenção (`/<raiz>/<filho>/...`) é o identificador estável
    de um nó dentro de um documento. A travessia usa pilha explícita, sem
    recursão, e segue apenas arestas de contenção (referências são ignoradas,
    portanto ciclos de referência não afetam a terminação).
    """
    stack: List[Tuple[str, Node]] = [
        (root_path(i), r) for i, r in reversed(list(enumerate(roots)))
    ]
    while stack:
        path, node = stack.pop()
        yield path, node
        for i in range(len(node.children) - 1, -1, -1):
            stack.append((child_path(path, i), node.children[i]))


def graphs_isomorphic(left: Sequence[Node], right: Sequence[Node]) -> bool:
    """
    Verifica se dois grafos são isomorfos.

    Critérios:
        - mesma quantidade de nós
        - mesmos tipos e valores de atributos por posição de contenção
        - mesma forma de contenção (quantidade e ordem de filhos)
        - mesma topologia de referências (alvos na mesma posição)

    A identidade dos nós é irrelevante; a bijeção é a ordem de pré-ordem.
    """
    lhs = list(iter_graph(left))
    rhs = list(iter_graph(right))
    if len(left) != len(right) or len(lhs) != len(rhs):
        return False

    lpos = {id(n): i for i, (_, n) in enumerate(lhs)}
    rpos = {id(n): i for i, (_, n) in enumerate(rhs)}

    for (lp, ln), (rp, rn) in zip(lhs, rhs):
        if lp != rp:
            return False
        if ln.type_id != rn.type_id or ln.attributes != rn.attributes:
            return False
        if len(ln.children) != len(rn.children):
            return False
        lrefs = [lpos.get(id(t)) for t in ln.references]
        rrefs = [rpos.get(id(t)) for t in rn.references]
        if lrefs != rrefs or None in lrefs:
            return False
    return True
