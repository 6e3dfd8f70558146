"""Grafos de objetos: nós tipados, codec textual e recursos nomeados."""

from .codec import GRAPH_VERSION, GraphCodec, decode, encode
from .node import Node, graphs_isomorphic, iter_graph, make_type_id, split_type_id
from .resource import GraphHandle

__all__ = [
    "GRAPH_VERSION",
    "GraphCodec",
    "GraphHandle",
    "Node",
    "decode",
    "encode",
    "graphs_isomorphic",
    "iter_graph",
    "make_type_id",
    "split_type_id",
]
