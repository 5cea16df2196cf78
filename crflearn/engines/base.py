# crflearn/engines/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from crflearn.data.corpus import Instance
from crflearn.data.dictionary import Dictionary
from crflearn.observability.progress import ProgressSink


class ParamStore(ABC):
    """
    The trainer's key-value parameter surface.

    Short-lived: obtained through ``TrainEngine.parameters()`` for one
    operation and closed when that ``with`` block exits.
    """

    @abstractmethod
    def set(self, name: str, value: Optional[str]) -> None:
        """
        ``value=None`` sets the engine-defined implicit value.
        Raises ConfigurationError for a name the engine rejects.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, name: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def names(self) -> List[str]:
        raise NotImplementedError

    def close(self) -> None:
        pass


class TrainEngine(ABC):
    """
    Abstract TrainEngine

    Lifecycle:
    - created once by the InstanceFactory
    - parameters applied, message sink registered, train() called once
    - release() exactly once (idempotent)
    """

    def __init__(self, feature_type: str, algorithm: str):
        self.feature_type = feature_type
        self.algorithm = algorithm
        self.sink: Optional[ProgressSink] = None
        self.released = False

    @contextmanager
    def parameters(self) -> Iterator[ParamStore]:
        self._check_alive()
        store = self._open_params()
        try:
            yield store
        finally:
            store.close()

    def set_message_sink(self, sink: Optional[ProgressSink]) -> None:
        self.sink = sink

    def emit(self, event) -> None:
        if self.sink is not None:
            self.sink(event)

    @abstractmethod
    def _open_params(self) -> ParamStore:
        raise NotImplementedError

    @abstractmethod
    def train(
        self,
        instances: Sequence[Instance],
        attrs: Dictionary,
        labels: Dictionary,
        model_path: str,
        holdout: int = -1,
    ) -> None:
        """
        Blocking. Writes the model to ``model_path``.
        Raises TrainingError on failure.
        """
        raise NotImplementedError

    def release(self) -> None:
        if self.released:
            return
        self._release()
        self.released = True

    def _release(self) -> None:
        pass

    def _check_alive(self) -> None:
        if self.released:
            raise RuntimeError(f"{self.__class__.__name__} already released")
