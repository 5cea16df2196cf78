#!filepath: crflearn/utils/logger.py
from __future__ import annotations

import os
import sys
from functools import wraps
from time import perf_counter
from typing import Callable, Optional

from loguru import logger


class Logging:
    """
    Process-wide logger facade over loguru
    ---------------------------------------
    - dated log files with rotation / retention
    - optional console sink (stderr)
    - function-level ``catch`` decorator
    ---------------------------------------

    Constructing a ``Logging`` never touches the filesystem.
    Sinks are installed by ``configure`` (called once by the CLI).
    """

    def __init__(self):
        self.configured = False
        self.log_dir: Optional[str] = None
        self.level = "INFO"

    def configure(self, cfg) -> None:
        """
        Install sinks from a ``LogConfig``. Safe to call again: the
        previous sinks are removed first.
        """
        logger.remove()

        self.level = cfg.level
        self.log_dir = cfg.dir

        if cfg.dir:
            os.makedirs(cfg.dir, exist_ok=True)
            logger.add(
                sink=f"{cfg.dir}/{{time:YYYY-MM-DD}}.log",
                rotation=cfg.rotation,
                retention=cfg.retention,
                level=cfg.level,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
                backtrace=True,
                diagnose=False,
            )

        if cfg.console_level:
            logger.add(
                sink=sys.stderr,
                level=cfg.console_level,
                format="<level>{level: <8}</level> | {message}",
            )

        self.configured = True
        logger.debug("-----------Logger initialized-----------")

    # ---------- basic interface ----------
    def debug(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.opt(depth=1).error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.opt(depth=1, exception=True).error(msg, *args, **kwargs)

    # ---------- decorator ----------
    def catch(
        self,
        msg: str = "Exception occurred",
        log_time: bool = True,
        reraise_quietly: tuple = (),
    ) -> Callable:
        """
        Log failures (and optionally wall time) of the wrapped function.

        The exception is always re-raised. Types listed in
        ``reraise_quietly`` are expected failures: they are logged as a
        one-line error without traceback.
        """

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start = perf_counter()

                try:
                    result = func(*args, **kwargs)
                except reraise_quietly as e:
                    logger.error(f"[ERROR] {func.__name__}: {msg}: {e}")
                    raise
                except Exception:
                    logger.exception(f"[ERROR] {func.__name__}: {msg}")
                    raise

                if log_time:
                    cost = perf_counter() - start
                    logger.info(f"[TIME] {func.__name__} took {cost:.4f}s")

                return result

            return wrapper

        return decorator


# global default; the CLI calls logs.configure(cfg.log)
logs = Logging()
