# src/atlas_transform/core/config/loader.py
"""
Loader de arquivos de configuração de lançamento.

Um lançamento é descrito por um arquivo base (obrigatório) e, opcionalmente,
por um arquivo local de overrides mesclado por cima dele. O resultado é o
dicionário consumido por `core.config.launch.builder_from_config`.

Invariantes:
    - O formato é decidido pela extensão (.yaml/.yml/.json), nunca pelo conteúdo
    - Arquivo vazio equivale a `{}`
    - O resultado é sempre um `dict` novo; overrides nunca mutam a base

Limites explícitos:
    - Não interpreta as seções module/schemas/graphs/engine
    - Não resolve caminhos relativos
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidLaunchConfigError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def _read(path: Path) -> Dict[str, Any]:
    """
    Lê e parseia um arquivo de configuração.

    Raises:
        DefaultsNotFoundError: arquivo inexistente.
        UnsupportedConfigFormatError: extensão fora de `_PARSERS`.
        InvalidLaunchConfigError: conteúdo não parseável.
        InvalidConfigRootTypeError: raiz diferente de mapping.
    """
    if not path.is_file():
        raise DefaultsNotFoundError(f"config file not found: {path}")

    parse = _PARSERS.get(path.suffix.lower())
    if parse is None:
        raise UnsupportedConfigFormatError(
            f"unsupported config format '{path.suffix}' (expected one of {sorted(_PARSERS)})"
        )

    try:
        data = parse(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InvalidLaunchConfigError(f"config file is not parseable: {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"config root must be a mapping, got {type(data).__name__}: {path}"
        )
    return data


def load_config(
    *,
    defaults_path: Union[str, Path],
    local_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Carrega o arquivo base e aplica o override local, se existir.

    Um `local_path` informado mas inexistente é ignorado: o override local é
    por natureza opcional (ex.: `launch.local.yaml` fora do controle de versão).

    Raises:
        ConfigTypeConflictError: conflito estrutural durante o merge.
        (além das exceções de `_read`)
    """
    effective = _read(Path(defaults_path))
    if local_path is None or not Path(local_path).is_file():
        return effective
    return deep_merge(effective, _read(Path(local_path)))
