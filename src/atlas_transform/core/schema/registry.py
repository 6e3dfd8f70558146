"""
Registro de schemas com resolução de namespace memoizada.

Este módulo define o `SchemaRegistry`, responsável por resolver um arquivo de
schema para seu identificador de namespace estável e registrá-lo no
`NamespaceCatalog` consultado durante a leitura de grafos.

Responsabilidades do módulo:
    - Carregar o documento de schema (YAML/JSON, opcionalmente dentro de zip)
    - Extrair o namespace da primeira definição de topo
    - Registrar namespace + definição no catálogo
    - Memoizar por caminho absoluto (e membro do zip)

Decisões arquiteturais:
    - resolve-and-register é uma única seção crítica sob o lock do catálogo
    - Uma segunda resolução do mesmo caminho devolve o namespace em cache,
      sem reler o arquivo e sem registrar novamente
    - A suposição "primeiro elemento é o schema" é mantida e documentada
      (ver `core.schema.loader`), não generalizada

Invariantes:
    - O mesmo caminho sempre resolve para o mesmo namespace
    - O catálogo recebe cada namespace no máximo uma vez

Limites explícitos:
    - Não invalida cache quando o arquivo muda em disco
    - Não lê grafos nem executa módulos
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from .catalog import NamespaceCatalog, default_catalog
from .loader import first_schema_definition, load_schema_document
from .model import SchemaDefinition

_CacheKey = Tuple[str, Optional[str]]


class SchemaRegistry:
    """Resolve arquivos de schema para namespaces, com memoização por caminho."""

    def __init__(self, catalog: Optional[NamespaceCatalog] = None):
        self.catalog: NamespaceCatalog = catalog if catalog is not None else default_catalog()
        self._resolved: Dict[_CacheKey, str] = {}

    @staticmethod
    def _key(path: str, member: Optional[str]) -> _CacheKey:
        return str(Path(path).resolve()), member

    def resolve(self, path: str, member: Optional[str] = None) -> str:
        """
        Resolve o namespace do schema em `path` e o registra no catálogo.

        Args:
            path: caminho do arquivo de schema (ou do zip que o contém).
            member: membro do zip que contém o schema, quando aplicável.

        Returns:
            str: identificador de namespace do schema.

        Raises:
            SchemaLoadError: arquivo ilegível/inválido ou namespace conflitante.
            SchemaMissingNamespaceError: primeira definição não é um schema
                com namespace.
        """
        key = self._key(path, member)
        with self.catalog.lock:
            cached = self._resolved.get(key)
            if cached is not None:
                return cached

            source = key[0] if member is None else f"{key[0]}!/{member}"
            document = load_schema_document(path=key[0], member=member)
            definition = first_schema_definition(document, source=source)
            self.catalog.register(definition)
            self._resolved[key] = definition.namespace
            return definition.namespace

    def is_resolved(self, path: str, member: Optional[str] = None) -> bool:
        with self.catalog.lock:
            return self._key(path, member) in self._resolved

    def definition(self, namespace: str) -> SchemaDefinition:
        return self.catalog.get(namespace)


_shared: Optional[SchemaRegistry] = None
_shared_lock = threading.Lock()


def default_registry() -> SchemaRegistry:
    """Registry compartilhado do processo, ligado a `default_catalog()`."""
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = SchemaRegistry(default_catalog())
        return _shared
