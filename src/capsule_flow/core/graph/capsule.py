# src/capsule_flow/core/graph/capsule.py
"""
Contrato canônico de uma Capsule e sua implementação declarativa padrão.

Uma Capsule é uma unidade de processamento com portas tipadas de entrada
e saída e, opcionalmente, uma função assíncrona `execute(inputs, config)`.

O engine trata Capsules apenas por conformidade estrutural (duck typing):
qualquer objeto com `id`, `name`, `inputs`, `outputs` e, se houver,
`execute` pode ser instanciado como Node. Novas Capsules são adicionadas
satisfazendo este contrato, nunca estendendo o engine.

Limites explícitos:
    - Não mantém registro global de Capsules
    - Não executa Capsules (responsabilidade do executor)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

from .types import CapsuleCategory, PortType, PortTypeLike


ExecuteFn = Callable[
    [Dict[str, Any], Dict[str, Any]],
    Union[Awaitable[Optional[Mapping[str, Any]]], Optional[Mapping[str, Any]]],
]


@dataclass(frozen=True)
class Port:
    """
    Slot tipado de entrada ou saída de uma Capsule.

    Campos:
        - id: identificador único dentro da Capsule
        - name: nome legível
        - type: PortType (ou id cru) aceito/produzido pela porta
        - required: relevante apenas para portas de entrada
        - description: texto livre

    Uma porta é criada junto com a Capsule e nunca é alterada depois.
    """
    id: str
    name: str
    type: PortTypeLike = PortType.ANY
    required: bool = False
    description: str = ""


@runtime_checkable
class Capsule(Protocol):
    """
    Contrato mínimo que toda Capsule deve satisfazer.

    Atributos obrigatórios:
        - id: identificador estável da Capsule
        - name: nome legível (usado em mensagens de validação)
        - inputs: portas de entrada
        - outputs: portas de saída

    `execute` é opcional: uma Capsule sem função de processamento é tratada
    pelo executor como no-op. Por isso ele não faz parte do protocolo
    verificado em runtime.
    """
    id: str
    name: str
    inputs: Sequence[Port]
    outputs: Sequence[Port]


@dataclass(frozen=True)
class CapsuleSpec:
    """
    Implementação declarativa padrão do contrato `Capsule`.

    Imutável depois de criada. `config` guarda valores padrão sugeridos ao
    editor; o executor usa apenas a config do Node.
    """
    id: str
    name: str
    inputs: List[Port] = field(default_factory=list)
    outputs: List[Port] = field(default_factory=list)
    execute: Optional[ExecuteFn] = None
    category: CapsuleCategory = CapsuleCategory.PROCESSING
    version: Optional[str] = None
    description: str = ""
    icon: str = ""
    config: Dict[str, Any] = field(default_factory=dict)

    def input_port(self, port_id: str) -> Optional[Port]:
        return find_port(self.inputs, port_id)

    def output_port(self, port_id: str) -> Optional[Port]:
        return find_port(self.outputs, port_id)


def find_port(ports: Sequence[Port], port_id: str) -> Optional[Port]:
    for port in ports:
        if port.id == port_id:
            return port
    return None


_WHITESPACE_RE = re.compile(r"\s+")


def capsule_id_from_name(name: str) -> str:
    """Deriva o id de uma Capsule a partir do nome (`"Send Email"` → `"send-email"`)."""
    return _WHITESPACE_RE.sub("-", name.strip().lower())


def define_capsule(
    *,
    name: str,
    inputs: Sequence[Port] = (),
    outputs: Sequence[Port] = (),
    execute: Optional[ExecuteFn] = None,
    id: Optional[str] = None,
    category: CapsuleCategory = CapsuleCategory.PROCESSING,
    version: Optional[str] = None,
    description: str = "",
    icon: str = "",
    config: Optional[Dict[str, Any]] = None,
) -> CapsuleSpec:
    """
    Cria uma `CapsuleSpec`, derivando o `id` do nome quando omitido.

    Raises:
        ValueError: Se o nome (ou o id derivado) for vazio.
    """
    capsule_id = id or capsule_id_from_name(name)
    if not capsule_id:
        raise ValueError("capsule name must be a non-empty string")

    return CapsuleSpec(
        id=capsule_id,
        name=name,
        inputs=list(inputs),
        outputs=list(outputs),
        execute=execute,
        category=category,
        version=version,
        description=description,
        icon=icon,
        config=dict(config or {}),
    )
