"""
Catálogo de namespaces de schemas.

Este módulo define o `NamespaceCatalog`, o registro de namespaces
consultado durante a leitura de grafos para resolver tipos membros e
validar valores de atributos contra o schema resolvido.

Decisões arquiteturais:
    - O catálogo é um objeto explícito, passado por referência aos
      colaboradores (registry, codec, launcher)
    - Existe uma instância compartilhada por processo (`default_catalog`),
      criada no primeiro uso e nunca destruída explicitamente
    - Mutações ocorrem sob um lock exclusivo (`RLock`); o registry usa o
      mesmo lock para tornar resolve-and-register uma seção crítica única

Invariantes:
    - Cada namespace aparece no máximo uma vez
    - Registrar novamente a mesma definição é um no-op
    - Registrar uma definição diferente para um namespace existente é erro

Limites explícitos:
    - Não lê arquivos (ver `core.schema.loader`)
    - Não memoiza caminhos (ver `core.schema.registry`)
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from atlas_transform.core.exceptions import SchemaLoadError
from atlas_transform.core.graph.node import split_type_id
from .model import SchemaDefinition, TypeDefinition, check_type_shape


class NamespaceCatalog:
    """Registro de namespaces → definições de schema, protegido por lock."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._schemas: Dict[str, SchemaDefinition] = {}

    def register(self, definition: SchemaDefinition) -> bool:
        """Registra a definição; retorna True se o namespace era novo.

        Raises:
            SchemaLoadError: se o namespace já existe com outra definição.
        """
        with self.lock:
            existing = self._schemas.get(definition.namespace)
            if existing is None:
                self._schemas[definition.namespace] = definition
                return True
            if existing != definition:
                raise SchemaLoadError(
                    f"namespace already registered with a different definition: {definition.namespace}",
                    details={
                        "namespace": definition.namespace,
                        "registered_from": existing.source,
                        "conflicting_source": definition.source,
                    },
                )
            return False

    def get(self, namespace: str) -> SchemaDefinition:
        with self.lock:
            if namespace not in self._schemas:
                raise KeyError(namespace)
            return self._schemas[namespace]

    def namespaces(self) -> List[str]:
        with self.lock:
            return sorted(self._schemas)

    def __contains__(self, namespace: object) -> bool:
        with self.lock:
            return namespace in self._schemas

    def __len__(self) -> int:
        with self.lock:
            return len(self._schemas)

    def resolve_type(self, type_id: str) -> Optional[TypeDefinition]:
        try:
            namespace, name = split_type_id(type_id)
        except ValueError:
            return None
        with self.lock:
            schema = self._schemas.get(namespace)
        if schema is None:
            return None
        return schema.types.get(name)

    def check_node(self, node: Any) -> List[str]:
        """Lista violações do nó contra o schema resolvido (vazia = válido)."""
        try:
            namespace, name = split_type_id(node.type_id)
        except ValueError as e:
            return [str(e)]
        with self.lock:
            schema = self._schemas.get(namespace)
        if schema is None:
            return [f"namespace is not registered: {namespace}"]
        tdef = schema.types.get(name)
        if tdef is None:
            return [f"type '{name}' is not declared in {namespace}"]
        return check_type_shape(schema, tdef, node)


_default: Optional[NamespaceCatalog] = None
_default_lock = threading.Lock()


def default_catalog() -> NamespaceCatalog:
    """Retorna o catálogo compartilhado do processo (criado no primeiro uso)."""
    global _default
    with _default_lock:
        if _default is None:
            _default = NamespaceCatalog()
        return _default
