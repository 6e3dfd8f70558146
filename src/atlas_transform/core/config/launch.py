# src/atlas_transform/core/config/launch.py
"""
Interpretação de arquivos de configuração de lançamento.

Um launch config descreve, de forma declarativa, o que seria montado
programaticamente com o `TransformationBuilder`:

    module: transformations/Composed2Simple.py
    schemas:
      Simple: schemas/Simple.yaml
      Packed: {archive: schemas.zip, member: Packed.yaml}
    graphs:
      input:  {IN: graphs/composed.yaml}
      output: {OUT: graphs/simple.yaml}
      in_out: {}
    engine:
      rules:
        some.rule: {enabled: false}

Decisões arquiteturais:
    - Caminhos relativos são resolvidos contra `base_dir` (por padrão, o
      diretório do arquivo de configuração)
    - Este módulo valida apenas a forma; os invariantes de montagem (ao
      menos um schema, uma entrada e uma saída) são do builder
    - Seções ausentes são aceitas; o builder reporta o que faltar

Limites explícitos:
    - Não resolve schemas nem abre grafos
    - Não executa transformações
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from atlas_transform.core.launch.builder import Role, TransformationBuilder

from .errors import InvalidLaunchConfigError
from .loader import load_config

_TOP_LEVEL_KEYS = {"module", "schemas", "graphs", "engine"}


def _expect(cond: bool, msg: str) -> None:
    if not cond:
        raise InvalidLaunchConfigError(msg)


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _resolve(base_dir: Optional[Path], raw: str) -> Path:
    p = Path(raw)
    if base_dir is not None and not p.is_absolute():
        return base_dir / p
    return p


def builder_from_config(
    config: Mapping[str, Any],
    *,
    base_dir: Optional[Union[str, Path]] = None,
) -> TransformationBuilder:
    """
    Monta um `TransformationBuilder` a partir de um launch config já carregado.

    Args:
        config: dicionário com as seções module/schemas/graphs/engine.
        base_dir: base para caminhos relativos (None = caminhos como estão).

    Returns:
        TransformationBuilder: builder acumulado, ainda não validado.

    Raises:
        InvalidLaunchConfigError: se alguma seção tiver formato inválido.
    """
    _expect(isinstance(config, Mapping), "launch config must be a mapping")
    unknown = sorted(set(config) - _TOP_LEVEL_KEYS)
    _expect(not unknown, f"unknown launch config keys: {unknown}")

    base = Path(base_dir) if base_dir is not None else None
    builder = TransformationBuilder()

    module = config.get("module")
    if module is not None:
        _expect(_is_non_empty_str(module), "module must be a non-empty string")
        builder.with_module(_resolve(base, module))

    schemas = config.get("schemas") or {}
    _expect(isinstance(schemas, Mapping), "schemas must be a mapping of name -> path")
    for name, entry in schemas.items():
        _expect(_is_non_empty_str(name), "schema names must be non-empty strings")
        if isinstance(entry, Mapping):
            archive, member = entry.get("archive"), entry.get("member")
            _expect(
                _is_non_empty_str(archive) and _is_non_empty_str(member),
                f"schemas.{name} must declare 'archive' and 'member'",
            )
            builder.with_schema_from_archive(name, _resolve(base, archive), member)
        else:
            _expect(_is_non_empty_str(entry), f"schemas.{name} must be a path")
            builder.with_schema(name, _resolve(base, entry))

    graphs = config.get("graphs") or {}
    _expect(isinstance(graphs, Mapping), "graphs must be a mapping of role -> graphs")
    valid_roles = {r.value for r in Role}
    for role_key, bindings in graphs.items():
        _expect(role_key in valid_roles, f"unknown graph role: {role_key!r} (expected one of {sorted(valid_roles)})")
        bindings = bindings or {}
        _expect(isinstance(bindings, Mapping), f"graphs.{role_key} must be a mapping of name -> path")
        for name, location in bindings.items():
            _expect(_is_non_empty_str(name), f"graph names in graphs.{role_key} must be non-empty strings")
            _expect(_is_non_empty_str(location), f"graphs.{role_key}.{name} must be a path")
            builder.with_graph(Role(role_key), name, _resolve(base, location))

    engine = config.get("engine")
    if engine is not None:
        _expect(isinstance(engine, Mapping), "engine must be a mapping")
        builder.with_engine_options(dict(engine))

    return builder


def load_launch_config(
    path: Union[str, Path],
    *,
    local_path: Optional[Union[str, Path]] = None,
) -> TransformationBuilder:
    """Carrega `path` (+ override local opcional) e monta o builder.

    Caminhos relativos são resolvidos contra o diretório de `path`.
    """
    config: Dict[str, Any] = load_config(defaults_path=path, local_path=local_path)
    return builder_from_config(config, base_dir=Path(path).parent)
