# src/capsule_flow/core/graph/catalog.py
"""
Catálogo de Capsules mantido pelo chamador.

O engine não conhece Capsules por nome: ele recebe Nodes que já carregam
sua Capsule. O `CapsuleCatalog` existe para quem precisa resolver Capsules
por `id`, como o carregador de documentos de Flow.

Decisões arquiteturais:
    - O catálogo é sempre uma instância explícita, nunca um singleton
    - A ordem de registro é preservada
    - Duplicidade de `id` é erro estrutural

Limites explícitos:
    - Não é consultado pelo validator, scheduler ou executor
    - Não descobre Capsules automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .capsule import Capsule


class DuplicateCapsuleIdError(ValueError):
    """Levantada ao registrar duas Capsules com o mesmo `id`."""


class UnknownCapsuleError(KeyError):
    """Levantada ao resolver um `id` de Capsule não registrado."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


@dataclass
class CapsuleCatalog:
    """Registro explícito de Capsules indexado por `capsule.id`."""

    _capsules: Dict[str, Capsule] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def of(cls, capsules: Iterable[Capsule]) -> "CapsuleCatalog":
        catalog = cls()
        for capsule in capsules:
            catalog.add(capsule)
        return catalog

    def add(self, capsule: Capsule) -> None:
        capsule_id = getattr(capsule, "id", None)
        if not isinstance(capsule_id, str) or not capsule_id.strip():
            raise ValueError("capsule.id must be a non-empty string")

        if capsule_id in self._capsules:
            raise DuplicateCapsuleIdError(f"Duplicate capsule id: {capsule_id}")

        self._capsules[capsule_id] = capsule
        self._order.append(capsule_id)

    def get(self, capsule_id: str) -> Capsule:
        if capsule_id not in self._capsules:
            raise UnknownCapsuleError(f"Unknown capsule: {capsule_id}")
        return self._capsules[capsule_id]

    def __contains__(self, capsule_id: object) -> bool:
        return capsule_id in self._capsules

    def list(self) -> List[Capsule]:
        return [self._capsules[cid] for cid in self._order]
