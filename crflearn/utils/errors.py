# crflearn/utils/errors.py
from __future__ import annotations


class LearnError(RuntimeError):
    """
    Base class of every failure the learn command reports to the user.

    Raised at the failing step, never recovered locally:
    the orchestrator prints one ``ERROR:`` line, releases what was
    created and exits with status 1.
    """


class UsageError(LearnError):
    """
    Malformed command-line flags.
    Raised before any resource exists. Should NOT print traceback.
    """


class ResourceCreationError(LearnError):
    """Dictionary or trainer instance could not be created."""


class ConfigurationError(LearnError):
    """
    The trainer's parameter store rejected a parameter.
    """

    def __init__(self, message: str, *, name: str | None = None):
        super().__init__(message)
        self.name = name


class InputFileError(LearnError):
    """
    A data set could not be opened or read.
    No partial corpus is ever trained on.
    """

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message)
        self.path = path


class TrainingError(LearnError):
    """The trainer's train call failed."""
