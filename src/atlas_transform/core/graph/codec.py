# src/atlas_transform/core/graph/codec.py
"""
Codec textual de grafos de objetos (Graph Document v1).

Este módulo converte uma sequência ordenada de nós raiz (grafo tipado,
possivelmente cíclico) para texto YAML e reconstrói o grafo a partir do texto.

Formato (v1):

    graph_version: '1.0'
    nodes:
    - path: /0
      type: urn:composed#Composite
      attributes:
        name: c1
    - path: /0/0
      type: urn:composed#Part
      references:
      - /0

Decisões arquiteturais:
    - O documento é uma tabela plana de nós em pré-ordem; a contenção é
      dada pelo caminho (`/<raiz>/<filho>/...`) e não pelo aninhamento.
      A profundidade do YAML é constante, independente da profundidade
      do grafo
    - Referências são codificadas como caminhos de contenção
    - Na leitura, um nó pode declarar `id` (que não pode começar com `/`);
      referências podem usar esse id. A forma canônica descarta ids e
      reescreve referências como caminhos
    - Na leitura, a ordem das entradas é livre: a tabela é reordenada por
      caminho e os índices de irmãos devem ser contíguos a partir de 0
    - Chaves de nó em ordem fixa: path, type, attributes, references
    - Atributos ordenados por nome; seções vazias são omitidas
    - Travessias usam pilha explícita (sem recursão sobre o grafo) e
      referências são resolvidas numa segunda passada, o que torna ciclos
      e auto-referências triviais

Invariantes:
    - encode é determinístico (mesmo grafo → mesmo texto)
    - decode(encode(g)) é isomorfo a g
    - encode(decode(t)) é a forma canônica de t

Limites explícitos:
    - Não persiste arquivos (ver `core.graph.resource`)
    - Não registra schemas (ver `core.schema`)
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml

from atlas_transform.core.exceptions import CodecError
from .node import Node, child_path, iter_graph, root_path, split_type_id

if TYPE_CHECKING:  # pragma: no cover
    from atlas_transform.core.schema.catalog import NamespaceCatalog


GRAPH_VERSION = "1.0"

_NODE_KEYS = {"path", "id", "type", "attributes", "references"}
_SCALAR_TYPES = (str, int, float, bool)
_PATH_RE = re.compile(r"^(/[0-9]+)+$")

_Key = Tuple[int, ...]


class _GraphDumper(yaml.SafeDumper):
    """Dumper sem âncoras/aliases: o texto deve ser estável e autocontido."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _attribute_value(value: Any, *, path: str, key: str) -> Any:
    if isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, (list, tuple)):
        items = list(value)
        for item in items:
            if not isinstance(item, _SCALAR_TYPES):
                raise CodecError(
                    f"attribute '{key}' at {path} holds an unsupported list item",
                    details={"path": path, "attribute": key, "item_type": type(item).__name__},
                )
        return items
    raise CodecError(
        f"attribute '{key}' at {path} must be a scalar or a list of scalars",
        details={"path": path, "attribute": key, "value_type": type(value).__name__},
    )


def _type_id(value: Any, *, path: str) -> str:
    if not isinstance(value, str):
        raise CodecError(f"node at {path} must declare a string 'type'", details={"path": path})
    try:
        split_type_id(value)
    except ValueError as e:
        raise CodecError(str(e), details={"path": path, "type": value}) from e
    return value


def _path_key(value: Any, *, where: str) -> _Key:
    """Converte `/0/1/2` em `(0, 1, 2)`."""
    if not isinstance(value, str) or not _PATH_RE.match(value):
        raise CodecError(
            f"{where} must be a containment path like '/0/1'",
            details={"where": where, "path": value},
        )
    return tuple(int(part) for part in value[1:].split("/"))


def _path_str(key: _Key) -> str:
    return "/" + "/".join(str(i) for i in key)


class GraphCodec:
    """
    Encoder/decoder canônico de grafos de objetos.

    Args:
        catalog: catálogo de namespaces opcional; quando presente, `decode`
            valida tipos e atributos de cada nó contra os schemas registrados.
    """

    def __init__(self, *, catalog: Optional["NamespaceCatalog"] = None):
        self.catalog = catalog

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------
    def encode(self, roots: Iterable[Node]) -> str:
        """Serializa as raízes e tudo o que é alcançável por contenção.

        Raises:
            CodecError: valor de atributo não suportado, nó contido duas vezes
                ou referência a nó fora do grafo codificado.
        """
        root_list = list(roots)
        paths: Dict[int, str] = {}
        table: List[Dict[str, Any]] = []
        with_refs: List[Tuple[Dict[str, Any], Node, str]] = []

        stack: List[Tuple[str, Node]] = [
            (root_path(i), r) for i, r in reversed(list(enumerate(root_list)))
        ]
        while stack:
            path, node = stack.pop()
            if id(node) in paths:
                raise CodecError(
                    f"node at {path} is already contained at {paths[id(node)]}",
                    details={"path": path, "first_path": paths[id(node)]},
                )
            paths[id(node)] = path

            entry: Dict[str, Any] = {"path": path, "type": _type_id(node.type_id, path=path)}
            if node.attributes:
                entry["attributes"] = {
                    key: _attribute_value(node.attributes[key], path=path, key=key)
                    for key in sorted(node.attributes)
                }
            table.append(entry)

            for i in range(len(node.children) - 1, -1, -1):
                stack.append((child_path(path, i), node.children[i]))
            if node.references:
                with_refs.append((entry, node, path))

        for entry, node, path in with_refs:
            refs: List[str] = []
            for target in node.references:
                target_path = paths.get(id(target))
                if target_path is None:
                    raise CodecError(
                        f"node at {path} references a node outside the encoded graph",
                        details={"path": path, "target_type": getattr(target, "type_id", None)},
                    )
                refs.append(target_path)
            entry["references"] = refs

        document = {"graph_version": GRAPH_VERSION, "nodes": table}
        return yaml.dump(
            document,
            Dumper=_GraphDumper,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------
    def decode(self, text: str) -> List[Node]:
        """Reconstrói as raízes a partir do texto.

        Raises:
            CodecError: texto malformado, versão não suportada, caminho
                inválido/duplicado/sem pai, índices de irmãos não contíguos,
                id inválido ou duplicado, referência sem nó correspondente ou
                (com catálogo) nó inválido segundo o schema.
        """
        if text is None or not str(text).strip():
            raise CodecError("graph document is empty")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CodecError(f"graph document is not valid YAML: {e}") from e

        if not isinstance(data, dict):
            raise CodecError("graph document root must be a mapping")
        version = data.get("graph_version")
        if str(version) != GRAPH_VERSION:
            raise CodecError(
                f"unsupported graph_version: {version!r}",
                details={"expected": GRAPH_VERSION, "received": version},
            )
        raw_nodes = data.get("nodes")
        if raw_nodes is None:
            raw_nodes = []
        if not isinstance(raw_nodes, list):
            raise CodecError("'nodes' must be a list")

        by_path: Dict[_Key, Node] = {}
        by_id: Dict[str, Node] = {}
        entries: List[Tuple[_Key, Node, Any]] = []

        for i, raw in enumerate(raw_nodes):
            where = f"nodes[{i}]"
            if not isinstance(raw, dict):
                raise CodecError(f"{where} must be a mapping", details={"where": where})
            key = _path_key(raw.get("path"), where=f"{where}.path")
            path = _path_str(key)
            if key in by_path:
                raise CodecError(f"duplicate node path: {path}", details={"path": path})
            node = self._decode_node(raw, path=path)
            by_path[key] = node
            entries.append((key, node, raw.get("references")))

            declared = raw.get("id")
            if declared is not None:
                if not isinstance(declared, str) or not declared.strip():
                    raise CodecError(f"node id at {path} must be a non-empty string", details={"path": path})
                if declared.startswith("/"):
                    raise CodecError(
                        f"node id at {path} must not start with '/': {declared}",
                        details={"path": path, "id": declared},
                    )
                if declared in by_id:
                    raise CodecError(f"duplicate node id: {declared}", details={"path": path, "id": declared})
                by_id[declared] = node

        # tuplas ordenadas lexicograficamente = pré-ordem (pai antes dos filhos)
        entries.sort(key=lambda e: e[0])
        roots: List[Node] = []
        for key, node, _ in entries:
            if len(key) == 1:
                siblings = roots
            else:
                parent = by_path.get(key[:-1])
                if parent is None:
                    raise CodecError(
                        f"node {_path_str(key)} has no parent in the document",
                        details={"path": _path_str(key)},
                    )
                siblings = parent.children
            if key[-1] != len(siblings):
                raise CodecError(
                    f"node {_path_str(key)} breaks sibling order (expected index {len(siblings)})",
                    details={"path": _path_str(key), "expected_index": len(siblings)},
                )
            siblings.append(node)

        for key, node, refs in entries:
            if not refs:
                continue
            path = _path_str(key)
            if not isinstance(refs, list):
                raise CodecError(f"'references' at {path} must be a list", details={"path": path})
            for ref in refs:
                if not isinstance(ref, str):
                    raise CodecError(f"reference at {path} must be a string", details={"path": path})
                if ref.startswith("/"):
                    target = by_path.get(_path_key(ref, where=f"reference at {path}"))
                else:
                    target = by_id.get(ref)
                if target is None:
                    raise CodecError(
                        f"unresolved reference {ref!r} at {path}",
                        details={"path": path, "reference": ref},
                    )
                node.references.append(target)

        if self.catalog is not None:
            self._check_against_catalog(roots)
        return roots

    def canonicalize(self, text: str) -> str:
        """Retorna a forma canônica de um documento bem formado."""
        return self.encode(self.decode(text))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _decode_node(self, raw: Dict[Any, Any], *, path: str) -> Node:
        unknown = sorted(str(k) for k in set(raw) - _NODE_KEYS)
        if unknown:
            raise CodecError(f"node at {path} has unknown keys: {unknown}", details={"path": path})

        attributes = raw.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise CodecError(f"'attributes' at {path} must be a mapping", details={"path": path})
        values: Dict[str, Any] = {}
        for key in sorted(attributes, key=str):
            if not isinstance(key, str):
                raise CodecError(f"attribute names at {path} must be strings", details={"path": path})
            values[key] = _attribute_value(attributes[key], path=path, key=key)

        return Node(type_id=_type_id(raw.get("type"), path=path), attributes=values)

    def _check_against_catalog(self, roots: Sequence[Node]) -> None:
        for path, node in iter_graph(roots):
            problems = self.catalog.check_node(node)
            if problems:
                raise CodecError(
                    f"node at {path} does not conform to its schema: {problems[0]}",
                    details={"path": path, "type": node.type_id, "problems": problems},
                )


def encode(roots: Iterable[Node]) -> str:
    """Atalho para `GraphCodec().encode`."""
    return GraphCodec().encode(roots)


def decode(text: str, *, catalog: Optional["NamespaceCatalog"] = None) -> List[Node]:
    """Atalho para `GraphCodec(catalog=...).decode`."""
    return GraphCodec(catalog=catalog).decode(text)
