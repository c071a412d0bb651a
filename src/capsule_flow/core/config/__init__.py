from .engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig, resolve_engine_config
from .loader import load_config, read_document
from .merge import deep_merge

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "resolve_engine_config",
    "load_config",
    "read_document",
    "deep_merge",
]
