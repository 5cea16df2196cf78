# crflearn/engines/registry.py
from typing import Callable, Dict

from crflearn.data.dictionary import Dictionary
from crflearn.engines.base import TrainEngine
from crflearn.engines.crfsuite_engine import CRFSuiteTrainEngine
from crflearn.utils.errors import ResourceCreationError

# name -> factory(feature_type, algorithm)
_ENGINE_REGISTRY: Dict[str, Callable[[str, str], TrainEngine]] = {
    "crfsuite": lambda feature_type, algorithm: CRFSuiteTrainEngine(feature_type, algorithm),
}


def register_engine(name: str):
    def _wrap(factory: Callable[[str, str], TrainEngine]):
        _ENGINE_REGISTRY[name] = factory
        return factory
    return _wrap


def resolve_train_engine(
        *, name: str, feature_type: str, algorithm: str
) -> TrainEngine:
    if name not in _ENGINE_REGISTRY:
        available = ", ".join(sorted(_ENGINE_REGISTRY))
        raise ResourceCreationError(
            f"No TrainEngine named '{name}'. Available: {available}"
        )

    return _ENGINE_REGISTRY[name](feature_type, algorithm)


class InstanceFactory:
    """
    Creates the resources of one learn run.

    The learn command owns whatever this returns and releases it.
    """

    def __init__(self, engine: str = "crfsuite"):
        self.engine = engine

    def create_dictionary(self) -> Dictionary:
        try:
            return Dictionary()
        except MemoryError as e:
            raise ResourceCreationError("Failed to create a dictionary instance.") from e

    def create_trainer(self, feature_type: str, algorithm: str) -> TrainEngine:
        return resolve_train_engine(
            name=self.engine, feature_type=feature_type, algorithm=algorithm
        )
