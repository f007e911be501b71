from regevo.config.helpers import build_engine, build_evaluator, build_generator
from regevo.config.settings import Settings, load_settings

__all__ = [
    "Settings",
    "build_engine",
    "build_evaluator",
    "build_generator",
    "load_settings",
]
