#!filepath: crflearn/__init__.py

from .utils.logger import Logging, logs
from .config.app_config import AppConfig

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging",
    "AppConfig",
    "__version__",
]
