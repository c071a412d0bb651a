# src/capsule_flow/core/graph/types.py
"""
Tipos canônicos de portas e categorias de Capsules.

Este módulo define o vocabulário fechado de tipos de dados que podem
trafegar por uma Connection, além da classificação semântica de Capsules.

Componentes principais:
    - PortType        → enum fechado de tipos de porta (mais o curinga `any`)
    - PORT_TYPE_INFO  → metadados de apresentação (nome e cor) por tipo
    - CapsuleCategory → enum de categorias informativas de Capsules

Invariantes:
    - Os valores textuais dos enums são estáveis e canônicos
    - `any` é o único tipo curinga
    - Nenhuma regra de compatibilidade vive neste módulo

Limites explícitos:
    - Não valida conexões (ver core.engine.compatibility)
    - Não executa Capsules
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Union


class PortType(str, Enum):
    """
    Tipos de dados que podem atravessar uma Connection.

    Os valores são strings para facilitar a serialização do Flow e a
    comparação direta com ids crus vindos do editor (`"object"`, `"any"`).

    Tipos definidos:
        - AUTH, USER, DATA, STRING, NUMBER, OBJECT, ARRAY,
          FILE, EVENT, MESSAGE, JOB, EMAIL
        - ANY: curinga, compatível com qualquer outro tipo
    """
    AUTH = "auth"
    USER = "user"
    DATA = "data"
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"
    FILE = "file"
    EVENT = "event"
    MESSAGE = "message"
    JOB = "job"
    EMAIL = "email"
    ANY = "any"


PortTypeLike = Union[PortType, str]


# Metadados usados pelo editor para colorir conexões.
PORT_TYPE_INFO: Dict[str, Dict[str, str]] = {
    PortType.AUTH.value: {"name": "Auth", "color": "#9c27b0"},
    PortType.USER.value: {"name": "User", "color": "#2196f3"},
    PortType.DATA.value: {"name": "Data", "color": "#4caf50"},
    PortType.STRING.value: {"name": "String", "color": "#ff9800"},
    PortType.NUMBER.value: {"name": "Number", "color": "#f44336"},
    PortType.OBJECT.value: {"name": "Object", "color": "#00bcd4"},
    PortType.ARRAY.value: {"name": "Array", "color": "#8bc34a"},
    PortType.FILE.value: {"name": "File", "color": "#795548"},
    PortType.EVENT.value: {"name": "Event", "color": "#e91e63"},
    PortType.MESSAGE.value: {"name": "Message", "color": "#3f51b5"},
    PortType.JOB.value: {"name": "Job", "color": "#607d8b"},
    PortType.EMAIL.value: {"name": "Email", "color": "#009688"},
    PortType.ANY.value: {"name": "Any", "color": "#9e9e9e"},
}


def port_type_id(port_type: PortTypeLike) -> str:
    """Normaliza um PortType (ou id cru) para o id textual canônico."""
    if isinstance(port_type, PortType):
        return port_type.value
    return str(port_type)


def port_type_name(port_type: PortTypeLike) -> str:
    tid = port_type_id(port_type)
    info = PORT_TYPE_INFO.get(tid)
    if info is None:
        return tid
    return info["name"]


class CapsuleCategory(str, Enum):
    """
    Categorias semânticas de Capsules.

    Puramente informativas: o engine não usa a categoria para decidir
    ordem, validação ou execução.
    """
    AUTH = "auth"
    DATA = "data"
    AI = "ai"
    COMMUNICATION = "communication"
    STORAGE = "storage"
    PROCESSING = "processing"
    MONITORING = "monitoring"
    INTEGRATION = "integration"
