# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Transform.

Este módulo define fixtures reutilizáveis que fornecem:
- caminhos para os arquivos de fixture (schemas, grafos, módulos)
- catálogo de namespaces e registry isolados por teste
- launcher ligado ao registry isolado
- um builder já preenchido com o cenário "count parts"
- uma regra dummy para testes estruturais do engine

Decisões arquiteturais:
    - Cada teste recebe um `NamespaceCatalog` novo; o catálogo padrão do
      processo não é tocado pelos testes unitários
    - Arquivos de fixture são somente leitura: saídas são sempre gravadas
      em `tmp_path`
    - Imports do core são realizados de forma lazy para melhorar a clareza
      de erros durante falhas

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa
"""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def simple_schema_path() -> Path:
    """Schema S1 (`urn:simple`): tipo `Simple` com atributo obrigatório `count: int`."""
    return FIXTURES_DIR / "schemas" / "Simple.yaml"


@pytest.fixture
def composed_schema_path() -> Path:
    """Schema S2 (`urn:composed`): `Composite` contendo `Part`."""
    return FIXTURES_DIR / "schemas" / "Composed.yaml"


@pytest.fixture
def composed_graph_path() -> Path:
    """Grafo com um Composite e duas Parts (a segunda referencia a primeira)."""
    return FIXTURES_DIR / "graphs" / "composed.yaml"


@pytest.fixture
def transformations_dir() -> Path:
    return FIXTURES_DIR / "transformations"


@pytest.fixture
def catalog():
    from atlas_transform.core.schema.catalog import NamespaceCatalog

    return NamespaceCatalog()


@pytest.fixture
def registry(catalog):
    from atlas_transform.core.schema.registry import SchemaRegistry

    return SchemaRegistry(catalog)


@pytest.fixture
def launcher(registry, tmp_path):
    """
    Launcher isolado: registry próprio e temporários em `tmp_path/tmp`.

    Direcionar os temporários para um diretório conhecido permite verificar
    que nenhum arquivo de grafo em memória sobrevive à run.
    """
    from atlas_transform.core.launch.launcher import TransformationLauncher

    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    return TransformationLauncher(registry=registry, temp_dir=temp_dir)


@pytest.fixture
def count_parts_builder(simple_schema_path, composed_schema_path, composed_graph_path, transformations_dir, tmp_path):
    """Builder do cenário ponta-a-ponta Composed → Simple (OUT em `tmp_path`)."""
    from atlas_transform.core.launch.builder import TransformationBuilder

    return (
        TransformationBuilder()
        .with_schema("Simple", simple_schema_path)
        .with_schema("Composed", composed_schema_path)
        .with_input("IN", composed_graph_path)
        .with_output("OUT", tmp_path / "out" / "simple.yaml")
        .with_module(transformations_dir / "Composed2Simple.py")
    )


@pytest.fixture
def workspace(catalog):
    """Workspace isolado, sem schemas nem grafos registrados."""
    from atlas_transform.core.engine.workspace import ExecutionWorkspace

    return ExecutionWorkspace.create(catalog=catalog)


@pytest.fixture
def DummyRule():
    """
    Fixture factory que fornece uma implementação mínima e duck-typed de uma regra.

    A classe retornada expõe `id` e `depends_on`, registra um artefato no
    workspace e devolve sempre um `RuleResult` com status SUCCESS.
    """
    from atlas_transform.core.engine.types import RuleResult, RuleStatus

    class _DummyRule:
        def __init__(self, rule_id: str = "dummy.rule", depends_on=None):
            self.id = rule_id
            self.depends_on = depends_on or []

        def run(self, ctx):
            ctx.set_artifact(f"{self.id}.ok", True)
            return RuleResult(rule_id=self.id, status=RuleStatus.SUCCESS, summary="dummy ok")

    return _DummyRule
