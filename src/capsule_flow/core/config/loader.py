# src/capsule_flow/core/config/loader.py
"""
Leitura de documentos YAML/JSON e resolução da configuração do engine.

`read_document` é compartilhado pela configuração e pelos documentos de
Flow. `load_config` sobrepõe um arquivo local opcional aos defaults; o
resultado alimenta `resolve_engine_config` (ver
`FlowExecutor.from_config_files`).

Limites explícitos:
    - Não valida semântica das políticas do engine (ver `engine_config`)
    - Não persiste configuração
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


PathLike = Union[str, Path]

_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def read_document(path: PathLike) -> Dict[str, Any]:
    """
    Lê um documento YAML ou JSON cuja raiz deve ser um mapa.

    Um arquivo vazio (ou só com `null`) vale como `{}`.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for .yaml, .yml ou .json.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    path = Path(path)
    parse = _PARSERS.get(path.suffix.lower())
    if parse is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix or '(sem extensão)'} em {path}"
        )
    if not path.is_file():
        raise DefaultsNotFoundError(f"Arquivo não encontrado: {path}")

    text = path.read_text(encoding="utf-8")
    data = parse(text) if text.strip() else None
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"{path.name}: a raiz deve ser um mapa, recebido {type(data).__name__}"
        )
    return data


def load_config(*, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Defaults obrigatórios, sobrepostos pelo arquivo local quando ele existe.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se algum formato não for suportado.
        InvalidConfigRootTypeError: Se algum documento não for um mapa.
        ConfigTypeConflictError: Se o local trocar o tipo de um default.
    """
    effective = read_document(defaults_path)

    if local_path is not None and Path(local_path).is_file():
        effective = deep_merge(effective, read_document(local_path))

    return effective
