# crflearn/engines/crfsuite_engine.py
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

import pycrfsuite

from crflearn import logs
from crflearn.data.corpus import Instance, Item
from crflearn.data.dictionary import Dictionary
from crflearn.engines.base import ParamStore, TrainEngine
from crflearn.observability.progress import (
    FeatureGenerated,
    HoldoutEvaluated,
    IterationCompleted,
    LogLine,
    OptimizationFinished,
    TrainFinished,
    TrainStarted,
)
from crflearn.utils.errors import (
    ConfigurationError,
    ResourceCreationError,
    TrainingError,
)

# "dyad" is the historical name of the first-order linear-chain CRF
GRAPHICAL_MODELS = {
    "dyad": "crf1d",
    "crf1d": "crf1d",
}

# value used for a parameter given without "=VALUE"
IMPLICIT_VALUE = "1"

_NUM_FEATURES = re.compile(r"Number of features:\s*(\d+)")
_SECONDS = re.compile(r"Seconds required:\s*([0-9.]+)")


def item_features(item: Item, attrs: Dictionary) -> Dict[str, float]:
    """Attribute name -> weight for one item; repeated attributes add up."""
    features: Dict[str, float] = {}
    for a in item.contents:
        name = attrs.to_string(a.aid)
        features[name] = features.get(name, 0.0) + a.value
    return features


class _EventTrainer(pycrfsuite.Trainer):
    """
    pycrfsuite.Trainer whose log hooks become typed progress events.

    verbose must stay on: the hooks only fire in verbose mode, and every
    hook is overridden so nothing reaches stdout directly.
    """

    def __init__(self, engine: "CRFSuiteTrainEngine"):
        super().__init__(verbose=True)
        self.engine = engine

    def on_start(self, log):
        self.engine.emit(TrainStarted(algorithm=self.engine.algorithm, log=log))

    def on_featgen_progress(self, log, percent):
        self.engine.emit(LogLine(log=log))

    def on_featgen_end(self, log):
        num = _NUM_FEATURES.search(log)
        sec = _SECONDS.search(log)
        self.engine.emit(
            FeatureGenerated(
                num_features=int(num.group(1)) if num else None,
                seconds=float(sec.group(1)) if sec else None,
                log=log,
            )
        )

    def on_prepared(self, log):
        self.engine.emit(LogLine(log=log))

    def on_prepare_error(self, log):
        self.engine.emit(LogLine(log=log))

    def on_iteration(self, log, info):
        num = int(info.get("num", 0))
        self.engine.emit(
            IterationCompleted(
                num=num,
                loss=info.get("loss"),
                feature_norm=info.get("feature_norm"),
                error_norm=info.get("error_norm"),
                active_features=info.get("active_features"),
                seconds=info.get("time"),
                log=log,
            )
        )
        marker = log.find("Performance by label")
        if marker >= 0:
            self.engine.emit(HoldoutEvaluated(iteration=num, log=log[marker:]))

    def on_optimization_end(self, log):
        self.engine.emit(OptimizationFinished(log=log))

    def on_end(self, log):
        self.engine.emit(TrainFinished(log=log))


class CRFSuiteParamStore(ParamStore):
    def __init__(self, trainer: _EventTrainer):
        self.trainer = trainer

    def set(self, name: str, value: Optional[str]) -> None:
        if value is None:
            value = IMPLICIT_VALUE
        try:
            self.trainer.set(name, value)
        except ValueError as e:
            raise ConfigurationError(
                f"Failed to set parameter {name}={value}: {e}", name=name
            ) from e

    def get(self, name: str) -> str:
        try:
            value = self.trainer.get(name)
        except ValueError as e:
            raise ConfigurationError(f"Unknown parameter: {name}", name=name) from e
        # newer python-crfsuite returns typed values
        if isinstance(value, bool):
            return IMPLICIT_VALUE if value else "0"
        return str(value)

    def names(self) -> List[str]:
        return list(self.trainer.params())


class CRFSuiteTrainEngine(TrainEngine):
    """
    TrainEngine backed by python-crfsuite.

    Contract:
    - feature_type selects the graphical model ("dyad" == "crf1d")
    - algorithm is any CRFsuite training algorithm (lbfgs, l2sgd, ap, pa, arow)
    """

    def __init__(self, feature_type: str, algorithm: str):
        super().__init__(feature_type, algorithm)

        graphical_model = GRAPHICAL_MODELS.get(feature_type)
        if graphical_model is None:
            available = ", ".join(GRAPHICAL_MODELS)
            raise ResourceCreationError(
                f"Unknown feature type '{feature_type}'. Available: {available}"
            )

        self._trainer: Optional[_EventTrainer] = _EventTrainer(self)
        try:
            self._trainer.select(algorithm, graphical_model)
        except ValueError as e:
            self._trainer = None
            raise ResourceCreationError(
                f"Unknown training algorithm '{algorithm}' for {graphical_model}"
            ) from e

    def _open_params(self) -> ParamStore:
        return CRFSuiteParamStore(self._trainer)

    def train(
        self,
        instances: Sequence[Instance],
        attrs: Dictionary,
        labels: Dictionary,
        model_path: str,
        holdout: int = -1,
    ) -> None:
        self._check_alive()
        trainer = self._trainer

        weighted = 0
        for inst in instances:
            xseq = [item_features(item, attrs) for item in inst.items]
            yseq = [labels.to_string(lid) for lid in inst.labels]
            trainer.append(xseq, yseq, inst.group)
            if inst.weight != 1.0:
                weighted += 1

        if weighted:
            logs.warning(
                f"[CRFSuiteTrainEngine] instance weights ignored for {weighted} instances"
            )

        logs.info(
            f"[CRFSuiteTrainEngine] train model={model_path} "
            f"instances={len(instances)} holdout={holdout}"
        )
        try:
            trainer.train(model_path, holdout)
        except Exception as e:
            raise TrainingError(f"Training failed: {e}") from e
        finally:
            trainer.clear()

    def _release(self) -> None:
        if self._trainer is not None:
            self._trainer.clear()
            self._trainer = None
