# crflearn/params.py
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from crflearn import logs
from crflearn.engines.base import TrainEngine


def split_param(raw: str) -> Tuple[str, Optional[str]]:
    """
    ``NAME=VALUE`` -> (NAME, VALUE), split on the first '=' only.
    ``NAME``       -> (NAME, None)   (engine-defined implicit value)
    """
    name, sep, value = raw.partition("=")
    return name, (value if sep else None)


def apply_params(engine: TrainEngine, raw_params: Iterable[str]) -> int:
    """
    Apply raw parameters to the engine in command-line order.

    Each parameter gets its own parameter-store scope. The first
    rejected name raises ConfigurationError (from the store).
    Returns the number of parameters applied.
    """
    n = 0
    for raw in raw_params:
        name, value = split_param(raw)
        with engine.parameters() as store:
            store.set(name, value)
        logs.debug(f"[params] {name}={value if value is not None else '<implicit>'}")
        n += 1
    return n
