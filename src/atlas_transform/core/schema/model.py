"""
Schema canônico — Schema Definition v1.

Representação interna explícita de um schema (vocabulário tipado) e
validação estrutural da definição carregada de YAML/JSON.

Esta implementação evita dependências externas (ex.: Pydantic) para manter
o core leve, seguindo o mesmo padrão `_expect` do restante do core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from atlas_transform.core.exceptions import SchemaLoadError
from atlas_transform.core.graph.node import TYPE_SEPARATOR, make_type_id

SCHEMA_KIND = "schema"

_ALLOWED_ATTRIBUTE_TYPES = {"string", "int", "float", "bool"}


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _expect(cond: bool, msg: str, *, source: str) -> None:
    if not cond:
        raise SchemaLoadError(msg, details={"source": source})


def _matches(type_name: str, value: Any) -> bool:
    # bool é subclasse de int: precisa ser excluído explicitamente
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "bool":
        return isinstance(value, bool)
    if type_name == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "float":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return False


@dataclass(frozen=True)
class AttributeSpec:
    """Atributo declarado de um tipo."""

    name: str
    type: str
    many: bool = False
    required: bool = False

    def check(self, value: Any) -> Optional[str]:
        if self.many:
            if not isinstance(value, list):
                return f"attribute '{self.name}' must be a list of {self.type}"
            bad = [v for v in value if not _matches(self.type, v)]
            if bad:
                return f"attribute '{self.name}' has items that are not {self.type}"
            return None
        if not _matches(self.type, value):
            return f"attribute '{self.name}' must be {self.type}"
        return None


@dataclass(frozen=True)
class TypeDefinition:
    """Tipo declarado em um schema: atributos e formas de contenção/referência."""

    name: str
    attributes: Dict[str, AttributeSpec] = field(default_factory=dict)
    children: Optional[Tuple[str, ...]] = None
    references: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class SchemaDefinition:
    """Representação interna de um schema com namespace."""

    name: str
    namespace: str
    types: Dict[str, TypeDefinition]
    source: str = field(default="", compare=False)

    def type_id(self, type_name: str) -> str:
        if type_name not in self.types:
            raise KeyError(f"type '{type_name}' is not declared in {self.namespace}")
        return make_type_id(self.namespace, type_name)

    def qualify(self, name: str) -> str:
        """Qualifica nomes curtos no namespace deste schema."""
        return name if TYPE_SEPARATOR in name else make_type_id(self.namespace, name)


def _type_list(raw: Any, *, where: str, source: str) -> Optional[Tuple[str, ...]]:
    if raw is None:
        return None
    _expect(isinstance(raw, list), f"{where} must be a list of type names", source=source)
    for item in raw:
        _expect(_is_non_empty_str(item), f"{where} entries must be non-empty strings", source=source)
    return tuple(raw)


def validate_schema_definition(data: Any, *, source: str = "") -> SchemaDefinition:
    """Valida e materializa uma definição de schema (elemento `kind: schema`).

    Raises:
        SchemaLoadError: se a definição não for estruturalmente válida.
    """
    _expect(isinstance(data, dict), "schema definition must be a mapping", source=source)
    name = data.get("name")
    namespace = data.get("namespace")
    _expect(_is_non_empty_str(namespace), "schema namespace is required", source=source)
    _expect(TYPE_SEPARATOR not in namespace, f"schema namespace must not contain '{TYPE_SEPARATOR}'", source=source)

    types_raw = data.get("types") or {}
    _expect(isinstance(types_raw, dict), "types must be a mapping", source=source)

    types: Dict[str, TypeDefinition] = {}
    for type_name, spec in types_raw.items():
        _expect(_is_non_empty_str(type_name), "type names must be non-empty strings", source=source)
        spec = spec or {}
        _expect(isinstance(spec, dict), f"types.{type_name} must be a mapping", source=source)

        attrs_raw = spec.get("attributes") or {}
        _expect(isinstance(attrs_raw, dict), f"types.{type_name}.attributes must be a mapping", source=source)
        attributes: Dict[str, AttributeSpec] = {}
        for attr_name, attr in attrs_raw.items():
            where = f"types.{type_name}.attributes.{attr_name}"
            _expect(isinstance(attr, dict), f"{where} must be a mapping", source=source)
            atype = attr.get("type")
            _expect(
                atype in _ALLOWED_ATTRIBUTE_TYPES,
                f"{where}.type must be one of {sorted(_ALLOWED_ATTRIBUTE_TYPES)}",
                source=source,
            )
            many = attr.get("many", False)
            required = attr.get("required", False)
            _expect(isinstance(many, bool), f"{where}.many must be boolean", source=source)
            _expect(isinstance(required, bool), f"{where}.required must be boolean", source=source)
            attributes[str(attr_name)] = AttributeSpec(
                name=str(attr_name), type=atype, many=many, required=required
            )

        types[type_name] = TypeDefinition(
            name=type_name,
            attributes=attributes,
            children=_type_list(spec.get("children"), where=f"types.{type_name}.children", source=source),
            references=_type_list(spec.get("references"), where=f"types.{type_name}.references", source=source),
        )

    return SchemaDefinition(
        name=str(name) if _is_non_empty_str(name) else namespace,
        namespace=namespace,
        types=types,
        source=source,
    )


def check_type_shape(schema: SchemaDefinition, tdef: TypeDefinition, node: Any) -> List[str]:
    """Lista violações de um nó contra seu tipo (atributos, filhos, referências)."""
    problems: List[str] = []
    for key, value in node.attributes.items():
        spec = tdef.attributes.get(key)
        if spec is None:
            problems.append(f"attribute '{key}' is not declared by {schema.namespace}#{tdef.name}")
            continue
        problem = spec.check(value)
        if problem:
            problems.append(problem)
    for spec in tdef.attributes.values():
        if spec.required and spec.name not in node.attributes:
            problems.append(f"attribute '{spec.name}' is required")

    if tdef.children is not None:
        allowed = {schema.qualify(n) for n in tdef.children}
        for child in node.children:
            if child.type_id not in allowed:
                problems.append(f"child of type {child.type_id} is not allowed")
    if tdef.references is not None:
        allowed = {schema.qualify(n) for n in tdef.references}
        for target in node.references:
            if target.type_id not in allowed:
                problems.append(f"reference to type {target.type_id} is not allowed")
    return problems
