# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import pytest
from loguru import logger

from crflearn.data.dictionary import Dictionary
from crflearn.engines.base import ParamStore, TrainEngine
from crflearn.engines.registry import InstanceFactory
from crflearn.observability.progress import IterationCompleted, LogLine
from crflearn.utils.errors import (
    ConfigurationError,
    ResourceCreationError,
    TrainingError,
)


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


# ============================================================
# Fakes: record every create / release into one shared event list
# ============================================================
class TrackedDictionary(Dictionary):
    def __init__(self, name: str, events: List[str]):
        super().__init__()
        self.name = name
        self.events = events
        self.release_count = 0

    def release(self) -> None:
        self.release_count += 1
        self.events.append(f"release:{self.name}")
        super().release()


class FakeParamStore(ParamStore):
    def __init__(self, engine: "FakeEngine"):
        self.engine = engine
        self.engine.events.append("params:open")

    def set(self, name: str, value: Optional[str]) -> None:
        if name in self.engine.reject:
            raise ConfigurationError(f"Parameter not found: {name}", name=name)
        self.engine.params[name] = value
        self.engine.param_log.append((name, value))

    def get(self, name: str) -> str:
        return self.engine.params[name]

    def names(self) -> List[str]:
        return list(self.engine.params)

    def close(self) -> None:
        self.engine.events.append("params:close")


class FakeEngine(TrainEngine):
    def __init__(self, feature_type, algorithm, events, *, reject=(), fail_train=False):
        super().__init__(feature_type, algorithm)
        self.events = events
        self.reject = set(reject)
        self.fail_train = fail_train
        self.params: Dict[str, Optional[str]] = {}
        self.param_log: list = []
        self.train_calls: list = []
        self.release_count = 0

    def _open_params(self) -> ParamStore:
        return FakeParamStore(self)

    def train(self, instances, attrs, labels, model_path, holdout=-1):
        self.events.append("train")
        self.train_calls.append(
            dict(
                instances=list(instances),
                attrs=attrs,
                labels=labels,
                model_path=model_path,
                holdout=holdout,
                params=dict(self.params),
            )
        )
        self.emit(LogLine(log="Feature generation\n"))
        self.emit(IterationCompleted(num=1, loss=12.5, log="***** Iteration #1 *****\n"))
        if self.fail_train:
            raise TrainingError("L-BFGS failed to converge")

    def _release(self) -> None:
        self.release_count += 1
        self.events.append("release:trainer")


class FakeFactory(InstanceFactory):
    """
    fail_at: "dictionary-1" | "dictionary-2" | "trainer" | None
    """

    def __init__(self, *, fail_at=None, reject=(), fail_train=False):
        super().__init__(engine="fake")
        self.events: List[str] = []
        self.fail_at = fail_at
        self.reject = reject
        self.fail_train = fail_train
        self.dictionaries: List[TrackedDictionary] = []
        self.trainer: Optional[FakeEngine] = None

    def create_dictionary(self) -> Dictionary:
        name = f"dictionary-{len(self.dictionaries) + 1}"
        if self.fail_at == name:
            raise ResourceCreationError("Failed to create a dictionary instance.")
        d = TrackedDictionary(name, self.events)
        self.dictionaries.append(d)
        self.events.append(f"create:{name}")
        return d

    def create_trainer(self, feature_type, algorithm) -> TrainEngine:
        if self.fail_at == "trainer":
            raise ResourceCreationError("Failed to create a trainer instance.")
        self.trainer = FakeEngine(
            feature_type,
            algorithm,
            self.events,
            reject=self.reject,
            fail_train=self.fail_train,
        )
        self.events.append("create:trainer")
        return self.trainer


@pytest.fixture
def fake_factory():
    return FakeFactory()


# ============================================================
# Data files
# ============================================================
def make_instances(n: int, length: int = 2, prefix: str = "w") -> str:
    """n instances of ``length`` items, separated by empty lines."""
    blocks = []
    for i in range(n):
        lines = []
        for j in range(length):
            label = "B" if j == 0 else "I"
            lines.append(f"{label}\t{prefix}={i}_{j}\tpos:0.5")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


@pytest.fixture
def write_data(tmp_path: Path):
    def _write(name: str, n: int, length: int = 2) -> Path:
        path = tmp_path / name
        path.write_text(make_instances(n, length, prefix=path.stem), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_factory():
    return FakeFactory
