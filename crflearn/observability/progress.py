#!filepath: crflearn/observability/progress.py
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from crflearn import logs


# -------------------------
# Events (typed, immutable)
# -------------------------
class ProgressEvent:
    log: str = ""


@dataclass(frozen=True)
class TrainStarted(ProgressEvent):
    algorithm: str
    log: str = ""


@dataclass(frozen=True)
class FeatureGenerated(ProgressEvent):
    num_features: Optional[int] = None
    seconds: Optional[float] = None
    log: str = ""


@dataclass(frozen=True)
class IterationCompleted(ProgressEvent):
    num: int
    loss: Optional[float] = None
    feature_norm: Optional[float] = None
    error_norm: Optional[float] = None
    active_features: Optional[int] = None
    seconds: Optional[float] = None
    log: str = ""


@dataclass(frozen=True)
class HoldoutEvaluated(ProgressEvent):
    iteration: int
    log: str = ""


@dataclass(frozen=True)
class OptimizationFinished(ProgressEvent):
    log: str = ""


@dataclass(frozen=True)
class TrainFinished(ProgressEvent):
    log: str = ""


@dataclass(frozen=True)
class LogLine(ProgressEvent):
    log: str = ""


# a sink is anything that accepts one event
ProgressSink = Callable[[ProgressEvent], None]


class ProgressReporter:
    """
    Forwards trainer progress to the user-visible stream.

    - IterationCompleted -> one summary line
    - every other event  -> its text, unchanged
    - flushes after each write (training may run for hours)
    """

    def __init__(self, stream: Optional[TextIO] = None, enabled: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.enabled = enabled
        self.iterations = 0

    def __call__(self, event: ProgressEvent) -> None:
        logs.debug(f"[Progress] {event!r}")
        if isinstance(event, IterationCompleted):
            self.iterations = event.num

        if not self.enabled:
            return

        text = self.format(event)
        if text:
            self.stream.write(text)
            self.stream.flush()

    def format(self, event: ProgressEvent) -> str:
        if isinstance(event, IterationCompleted) and event.loss is not None:
            parts = [f"Iteration #{event.num}: loss={event.loss:.6f}"]
            if event.feature_norm is not None:
                parts.append(f"feature_norm={event.feature_norm:.6f}")
            if event.active_features is not None:
                parts.append(f"active_features={event.active_features}")
            if event.seconds is not None:
                parts.append(f"time={event.seconds:.3f}s")
            return " ".join(parts) + "\n"
        return event.log


class ReadProgress:
    """
    Text progress bar for reading one data set:

        0....1....2....3....4....5....6....7....8....9....10

    Only used when the size of the input is known.
    """

    WIDTH = 50

    def __init__(self, stream: TextIO, total: int):
        self.stream = stream
        self.total = max(int(total), 1)
        self.printed = 0
        self.stream.write("0")

    def update(self, current: int) -> None:
        target = min(self.WIDTH, current * self.WIDTH // self.total)
        while self.printed < target:
            self.printed += 1
            self._tick()
        self.stream.flush()

    def done(self) -> None:
        self.update(self.total)
        self.stream.write("\n")
        self.stream.flush()

    def _tick(self) -> None:
        if self.printed % 5 == 0:
            self.stream.write(str(self.printed // 5))
        else:
            self.stream.write(".")
