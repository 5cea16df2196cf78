#!filepath: crflearn/cli.py
from typing import Optional

import typer
from rich import print

from crflearn import AppConfig, __version__, logs
from crflearn.engines.registry import InstanceFactory
from crflearn.learn import LearnCommand

app = typer.Typer(help="CRF model training CLI", add_completion=False)


@app.callback()
def bootstrap(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", help="YAML config file"),
):
    """
    Load configuration and install log sinks (once per process).
    """
    try:
        cfg = AppConfig.load(config)
    except FileNotFoundError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    logs.configure(cfg.log)
    ctx.obj = cfg


@app.command()
def version():
    print(f"v{__version__}")


@app.command(
    add_help_option=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def learn(ctx: typer.Context):
    """
    Obtain a model from a training set of instances (see: learn -h)
    """
    cfg: AppConfig = ctx.obj
    command = LearnCommand(
        InstanceFactory(engine=cfg.engine.name),
        program=ctx.find_root().info_name or "crflearn",
        show_progress=cfg.engine.progress,
    )
    raise typer.Exit(command.run(ctx.args))


if __name__ == "__main__":
    app()

# python -m crflearn learn -m out.model train.txt
