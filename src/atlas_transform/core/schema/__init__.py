"""Schemas: modelo, loader, catálogo de namespaces e registry memoizado."""

from .catalog import NamespaceCatalog, default_catalog
from .loader import first_schema_definition, load_schema_document
from .model import AttributeSpec, SchemaDefinition, TypeDefinition, validate_schema_definition
from .registry import SchemaRegistry, default_registry

__all__ = [
    "AttributeSpec",
    "NamespaceCatalog",
    "SchemaDefinition",
    "SchemaRegistry",
    "TypeDefinition",
    "default_catalog",
    "default_registry",
    "first_schema_definition",
    "load_schema_document",
    "validate_schema_definition",
]
