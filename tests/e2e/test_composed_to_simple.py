# tests/e2e/test_composed_to_simple.py
"""
Teste end-to-end: transformação Composed → Simple.

Cenário:
    - schemas S1 (`urn:simple`) e S2 (`urn:composed`)
    - IN: grafo S2 com um Composite e duas Parts
    - OUT: grafo S1 produzido pelo módulo `Composed2Simple`
    - resultado esperado: um único nó `Simple` com `count: 2`

O cenário é executado por três caminhos equivalentes:
    - builder fluente com caminhos em disco
    - launch config YAML (com override local)
    - grafos em memória, sem nenhum arquivo de grafo do chamador

Limites explícitos:
    - Não testar detalhes internos do engine (ver tests/core/engine)
"""

from pathlib import Path

import pytest
import yaml

try:
    from atlas_transform import GraphCodec, graphs_isomorphic, load_launch_config
    from atlas_transform.core.graph.node import Node
except Exception as e:  # noqa: BLE001
    GraphCodec = None
    graphs_isomorphic = None
    load_launch_config = None
    Node = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Atlas Transform public API is not importable: {_IMPORT_ERR}")


def _expected():
    return [Node(type_id="urn:simple#Simple", attributes={"count": 2})]


def _write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def test_composed_to_simple_from_builder(launcher, count_parts_builder, tmp_path):
    _require_imports()
    result = count_parts_builder.build().run(launcher)

    text = result["OUT"].encode()
    assert graphs_isomorphic(GraphCodec().decode(text), _expected())

    saved = result["OUT"].save()
    assert saved == tmp_path / "out" / "simple.yaml"
    assert GraphCodec().canonicalize(saved.read_text(encoding="utf-8")) == text


def test_composed_to_simple_from_launch_config(
    launcher, simple_schema_path, composed_schema_path, composed_graph_path, transformations_dir, tmp_path
):
    """
    Verifica que um launch config YAML produz o mesmo resultado e que o
    override local é mesclado sobre ele.
    """
    _require_imports()
    launch = _write_yaml(
        tmp_path / "launch.yaml",
        {
            "module": str(transformations_dir / "Composed2Simple.py"),
            "schemas": {
                "Simple": str(simple_schema_path),
                "Composed": str(composed_schema_path),
            },
            "graphs": {
                "input": {"IN": str(composed_graph_path)},
                "output": {"OUT": "out/from-config.yaml"},
            },
        },
    )
    local = _write_yaml(
        tmp_path / "launch.local.yaml",
        {"engine": {"rules": {"composed2simple.count_parts": {"enabled": True}}}},
    )

    config = load_launch_config(launch, local_path=local).build()
    result = launcher.run(config)

    assert config.engine_options == {"rules": {"composed2simple.count_parts": {"enabled": True}}}
    assert result["OUT"].location == tmp_path / "out" / "from-config.yaml"
    assert graphs_isomorphic(result["OUT"].roots, _expected())


def test_composed_to_simple_in_memory(launcher, count_parts_builder, composed_graph_path, tmp_path):
    _require_imports()
    nodes = GraphCodec().decode(composed_graph_path.read_text(encoding="utf-8"))
    config = count_parts_builder.with_input("IN", nodes).with_output("OUT").build()

    result = launcher.run(config)

    assert graphs_isomorphic(GraphCodec().decode(result["OUT"].encode()), _expected())
    assert not (tmp_path / "out").exists()
    assert list((tmp_path / "tmp").iterdir()) == []
