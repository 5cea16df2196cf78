# crflearn/options.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import click

from crflearn.utils.errors import UsageError

DEFAULT_MODEL = "crfsuite.model"
DEFAULT_ALGORITHM = "lbfgs"
DEFAULT_FEATURE_TYPE = "dyad"
NO_HOLDOUT = -1


@dataclass(frozen=True)
class LearnOptions:
    """
    LearnOptions (FROZEN)

    Semantics:
    - built once by parse_learn_options, never mutated
    - holdout is 0-based; -1 means no held-out evaluation
    - params keeps the raw NAME[=VALUE] strings in command-line order
    """

    model: str = DEFAULT_MODEL
    algorithm: str = DEFAULT_ALGORITHM
    feature_type: str = DEFAULT_FEATURE_TYPE
    holdout: int = NO_HOLDOUT
    help: bool = False
    params: Tuple[str, ...] = ()

    def __post_init__(self):
        for field, flag in (
            ("model", "--model"),
            ("algorithm", "--algorithm"),
            ("feature_type", "--feature"),
        ):
            if not getattr(self, field):
                raise UsageError(f"Option '{flag}' must not be empty.")

    @property
    def has_holdout(self) -> bool:
        return self.holdout != NO_HOLDOUT


# --------------------------------------------------
# Flag declarations (parsed by click, never executed as a CLI)
# --------------------------------------------------
@click.command(
    "learn",
    add_help_option=False,
    context_settings={"allow_interspersed_args": False},
)
@click.option("-m", "--model", default=DEFAULT_MODEL, metavar="MODEL")
@click.option("-t", "--test", type=click.IntRange(min=1), default=None, metavar="TEST")
@click.option("-a", "--algorithm", default=DEFAULT_ALGORITHM, metavar="NAME")
@click.option("-f", "--feature", default=DEFAULT_FEATURE_TYPE, metavar="TYPE")
@click.option("-p", "--param", multiple=True, metavar="NAME=VALUE")
@click.option("-h", "--help", "show_help", is_flag=True, default=False)
@click.argument("data", nargs=-1)
def _learn_options(model, test, algorithm, feature, param, show_help, data) -> LearnOptions:
    # data is located by index in parse_learn_options
    return LearnOptions(
        model=model,
        algorithm=algorithm,
        feature_type=feature,
        holdout=test - 1 if test is not None else NO_HOLDOUT,
        help=show_help,
        params=tuple(param),
    )


def parse_learn_options(args: Sequence[str]) -> Tuple[LearnOptions, int]:
    """
    Parse the arguments of the learn command.

    Returns the options and the index in ``args`` of the first data
    argument. Option parsing stops at the first positional argument
    (or after ``--``); a lone ``-`` is positional.

    Raises UsageError for unknown flags, missing values or a --test
    value that is not a positive integer.
    """
    args = list(args)

    try:
        # click consumes the list it parses
        ctx = _learn_options.make_context("learn", list(args))
        data = tuple(ctx.params.get("data") or ())
        options = _learn_options.invoke(ctx)
    except click.ClickException as e:
        raise UsageError(e.format_message()) from e

    return options, len(args) - len(data)


def usage(program: str, command: str = "learn") -> str:
    return "\n".join(
        [
            f"USAGE: {program} {command} [OPTIONS] [DATA]",
            "Obtain a model from a training set of instances given by a file (DATA).",
            "If argument DATA is omitted or '-', this utility reads a data from STDIN.",
            "",
            "OPTIONS:",
            "    -m, --model=MODEL   Store the obtained model in a file (MODEL)",
            "    -t, --test=TEST     Report the performance of the model on a data (TEST)",
            "    -a, --algorithm=NAME    Use the training algorithm NAME (default: lbfgs)",
            "    -f, --feature=TYPE  Use the graphical model TYPE (default: dyad)",
            "    -p, --param=NAME=VALUE  Set the parameter NAME to VALUE",
            "    -h, --help          Show the usage of this command and exit",
            "",
        ]
    )
