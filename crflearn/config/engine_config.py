#!filepath: crflearn/config/engine_config.py
from pydantic import BaseModel


class EngineConfig(BaseModel):
    """
    Which trainer implementation backs the learn command.
    ``name`` is a key of the engine registry.
    """

    name: str = "crfsuite"
    # report each training iteration on stdout
    progress: bool = True
