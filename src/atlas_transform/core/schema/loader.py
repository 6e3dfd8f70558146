"""Loader canônico de documentos de schema (YAML/JSON).

Notas:
- YAML é preferencial, JSON é alternativo.
- O formato é inferido pela extensão do arquivo (ou do membro do arquivo zip).
- Apenas a PRIMEIRA definição de topo é considerada: ela deve ser o elemento
  de schema com namespace. Arquivos com múltiplos pacotes não são
  generalizados aqui; as definições seguintes são ignoradas.
"""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from atlas_transform.core.exceptions import SchemaLoadError, SchemaMissingNamespaceError
from .model import SCHEMA_KIND, SchemaDefinition, validate_schema_definition

_YAML_SUFFIXES = {".yml", ".yaml"}
_JSON_SUFFIXES = {".json"}


def _read_text(path: Path, member: Optional[str]) -> str:
    if not path.exists():
        raise SchemaLoadError(f"schema file not found: {path}", details={"path": str(path)})
    try:
        if member is None:
            return path.read_text(encoding="utf-8")
        with zipfile.ZipFile(path) as archive:
            return archive.read(member).decode("utf-8")
    except KeyError as e:
        raise SchemaLoadError(
            f"schema member not found in archive: {member}",
            details={"path": str(path), "member": member},
        ) from e
    except (OSError, UnicodeDecodeError, zipfile.BadZipFile) as e:
        raise SchemaLoadError(
            f"failed to read schema file: {path}",
            details={"path": str(path), "member": member, "exception_class": e.__class__.__name__},
        ) from e


def load_schema_document(*, path: str, member: Optional[str] = None) -> Dict[str, Any]:
    """Carrega um documento de schema a partir de YAML/JSON.

    Args:
        path: caminho para o arquivo de schema (ou para o arquivo zip).
        member: nome do membro dentro do zip, quando aplicável.

    Raises:
        SchemaLoadError: arquivo ausente, ilegível, formato não suportado ou
            falha de parsing.
    """
    p = Path(path)
    suffix = Path(member).suffix.lower() if member else p.suffix.lower()
    if suffix not in _YAML_SUFFIXES | _JSON_SUFFIXES:
        raise SchemaLoadError(
            f"unsupported schema format: {suffix}",
            details={"path": str(p), "member": member},
        )

    raw = _read_text(p, member)
    try:
        data = json.loads(raw) if suffix in _JSON_SUFFIXES else yaml.safe_load(raw)
    except (ValueError, yaml.YAMLError) as e:
        raise SchemaLoadError(
            f"failed to parse schema file: {p}",
            details={"path": str(p), "member": member, "reason": str(e)},
        ) from e

    if data is None:
        # YAML vazio -> None
        raise SchemaLoadError("schema file is empty", details={"path": str(p), "member": member})
    if not isinstance(data, dict):
        raise SchemaLoadError("schema root must be a mapping/dict", details={"path": str(p), "member": member})
    return data


def first_schema_definition(document: Dict[str, Any], *, source: str = "") -> SchemaDefinition:
    """Extrai a primeira definição de topo, exigindo que seja um schema com namespace.

    Raises:
        SchemaMissingNamespaceError: sem definições, ou a primeira não é
            `kind: schema` com `namespace`.
        SchemaLoadError: a definição de schema é estruturalmente inválida.
    """
    definitions = document.get("definitions")
    if not isinstance(definitions, list) or not definitions:
        raise SchemaMissingNamespaceError(
            "schema document declares no top-level definitions",
            details={"source": source},
        )

    first = definitions[0]
    if not isinstance(first, dict) or first.get("kind") != SCHEMA_KIND or not first.get("namespace"):
        raise SchemaMissingNamespaceError(
            "first top-level definition is not a namespace-bearing schema",
            details={
                "source": source,
                "kind": first.get("kind") if isinstance(first, dict) else type(first).__name__,
            },
            hint="Declare o schema (kind: schema, namespace: ...) como primeira definição",
        )
    return validate_schema_definition(first, source=source)
