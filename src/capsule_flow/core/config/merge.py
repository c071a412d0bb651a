# src/capsule_flow/core/config/merge.py
"""
Deep-merge de configuração do engine.

Sobreposição de um documento de overrides sobre os defaults:
    - dict sobre dict → merge recursivo por chave
    - valor com o mesmo tipo do default → substitui (listas por inteiro)
    - default `None` → aceita qualquer valor (chave declarada sem valor)
    - qualquer outro par → ConfigTypeConflictError, com o caminho da chave
      (ex.: `engine.fail_fast`)

Nenhum dos documentos de entrada é mutado.
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


KeyPath = Tuple[str, ...]


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Aplica `override` sobre `base` e retorna um novo dicionário.

    Raises:
        ConfigTypeConflictError: Se um override trocar o tipo de um default.
    """
    return _merge_section(base, override, ())


def _merge_section(base: Dict[str, Any], override: Dict[str, Any], path: KeyPath) -> Dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, incoming in override.items():
        where = path + (str(key),)
        if key in merged:
            merged[key] = _overlay(merged[key], incoming, where)
        else:
            merged[key] = deepcopy(incoming)
    return merged


def _overlay(current: Any, incoming: Any, where: KeyPath) -> Any:
    if isinstance(current, dict) and isinstance(incoming, dict):
        return _merge_section(current, incoming, where)

    if current is None or type(current) is type(incoming):
        return deepcopy(incoming)

    raise ConfigTypeConflictError(
        f"Conflito de tipo em '{'.'.join(where)}': "
        f"esperado {type(current).__name__}, recebido {type(incoming).__name__}"
    )
