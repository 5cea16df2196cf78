# crflearn/learn.py
"""
The learn command: sequence the fallible setup steps of one training run
and release everything that was created, whatever step failed.

    INIT -> OPTIONS_PARSED -> (HELP_REQUESTED | RESOURCES_CREATED)
         -> PARAMS_APPLIED -> DATA_LOADED -> TRAINING -> DONE

FAILED is reachable from every non-terminal state. Resources are pushed
on one ExitStack as they are created, so a failure releases exactly the
ones that exist, in reverse creation order (trainer, labels, attributes),
followed by the corpus.
"""
from __future__ import annotations

import sys
from contextlib import ExitStack
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Sequence, TextIO

from crflearn import logs
from crflearn.data.aggregator import DataAggregator, IngestStats
from crflearn.data.corpus import Corpus
from crflearn.engines.registry import InstanceFactory
from crflearn.observability.progress import ProgressReporter
from crflearn.options import LearnOptions, parse_learn_options, usage
from crflearn.params import apply_params
from crflearn.utils.errors import LearnError, ResourceCreationError


class LearnState(str, Enum):
    INIT = "init"
    OPTIONS_PARSED = "options_parsed"
    HELP_REQUESTED = "help_requested"
    RESOURCES_CREATED = "resources_created"
    PARAMS_APPLIED = "params_applied"
    DATA_LOADED = "data_loaded"
    TRAINING = "training"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = (LearnState.HELP_REQUESTED, LearnState.DONE, LearnState.FAILED)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class LearnCommand:
    """
    LearnCommand (one instance == one run)

    Contract:
    - run(args) returns the exit code: 0 for DONE / HELP_REQUESTED, 1 for FAILED
    - every LearnError prints one ``ERROR:`` line on stderr
    - other exceptions propagate, after cleanup
    """

    def __init__(
        self,
        factory: Optional[InstanceFactory] = None,
        *,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        program: str = "crflearn",
        show_progress: bool = True,
    ):
        self.factory = factory if factory is not None else InstanceFactory()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.program = program
        self.show_progress = show_progress

        self.state = LearnState.INIT
        self.options: Optional[LearnOptions] = None
        self.stats: Optional[IngestStats] = None

    # --------------------------------------------------
    def run(self, args: Sequence[str]) -> int:
        try:
            return self._run(list(args))
        except LearnError as e:
            self._transition(LearnState.FAILED)
            self.stderr.write(f"ERROR: {e}\n")
            self.stderr.flush()
            logs.error(f"[learn] {e.__class__.__name__}: {e}")
            return 1
        except Exception:
            self._transition(LearnState.FAILED)
            logs.exception("[learn] unexpected failure")
            raise

    def _run(self, args: list) -> int:
        options, arg_used = parse_learn_options(args)
        self.options = options
        self._transition(LearnState.OPTIONS_PARSED)

        if options.help:
            self._write(usage(self.program, "learn"))
            self._transition(LearnState.HELP_REQUESTED)
            return 0

        corpus = Corpus()
        with ExitStack() as stack:
            stack.callback(corpus.clear)

            attrs = self._acquire(stack, self.factory.create_dictionary, "dictionary")
            labels = self._acquire(stack, self.factory.create_dictionary, "dictionary")
            trainer = self._acquire(
                stack,
                lambda: self.factory.create_trainer(options.feature_type, options.algorithm),
                "trainer",
            )
            self._transition(LearnState.RESOURCES_CREATED)

            apply_params(trainer, options.params)
            self._transition(LearnState.PARAMS_APPLIED)

            self._write(f"Start time of the training: {utc_timestamp()}\n\n")

            self._write("Reading the data set(s)\n")
            aggregator = DataAggregator(
                corpus,
                attrs,
                labels,
                stdin=self.stdin,
                out=self.stdout,
                show_progress=self.show_progress,
            )
            self.stats = aggregator.ingest_all(args[arg_used:])
            self._report(self.stats)
            self._transition(LearnState.DATA_LOADED)

            trainer.set_message_sink(
                ProgressReporter(self.stdout, enabled=self.show_progress)
            )

            holdout = f"group {options.holdout}" if options.has_holdout else "none"
            logs.info(
                f"[learn] train {options.feature_type}/{options.algorithm} "
                f"model={options.model} holdout={holdout}"
            )
            self._transition(LearnState.TRAINING)
            trainer.train(
                corpus.instances,
                attrs,
                labels,
                options.model,
                options.holdout,
            )

            self._write(f"End time of the training: {utc_timestamp()}\n\n")
            self._transition(LearnState.DONE)
            return 0

    # --------------------------------------------------
    def _acquire(self, stack: ExitStack, create: Callable, what: str):
        try:
            resource = create()
        except MemoryError as e:
            raise ResourceCreationError(f"Failed to create a {what} instance.") from e
        if resource is None:
            raise ResourceCreationError(f"Failed to create a {what} instance.")

        stack.callback(resource.release)
        logs.debug(f"[learn] created {what}: {resource.__class__.__name__}")
        return resource

    def _report(self, stats: IngestStats) -> None:
        self._write(
            f"Number of instances: {stats.num_instances}\n"
            f"Total number of items: {stats.num_items}\n"
            f"Number of attributes: {stats.num_attributes}\n"
            f"Number of labels: {stats.num_labels}\n"
            f"Seconds required: {stats.seconds:.3f}\n"
            "\n"
        )

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def _transition(self, state: LearnState) -> None:
        if self.state in TERMINAL_STATES:
            return
        logs.info(f"[learn] {self.state.value} -> {state.value}")
        self.state = state
