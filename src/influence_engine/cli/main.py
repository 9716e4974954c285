"""Typer CLI application."""
from __future__ import annotations

import logging
from typing import Optional

import typer

app = typer.Typer(
    name="influence-engine",
    help="Behavioral profiling and adaptive influence engine",
    no_args_is_help=True,
)

_state: dict[str, Optional[str]] = {"config": None}


@app.callback()
def main(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state["config"] = config


def _engine():
    from influence_engine.app import InfluenceEngine

    return InfluenceEngine(config_path=_state["config"])


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8080, "--port", "-p", help="Port to listen on"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from influence_engine.api import create_app

    uvicorn.run(create_app(_engine()), host=host, port=port)


@app.command()
def analyze(uid: str) -> None:
    """Recompute and store a user's profile."""
    from influence_engine.cli.display import Display

    engine = _engine()
    try:
        Display().show_profile(engine.analyze(uid))
    finally:
        engine.close()


@app.command()
def profile(uid: str) -> None:
    """Show the stored profile."""
    from influence_engine.cli.display import Display

    display = Display()
    engine = _engine()
    try:
        stored = engine.get_profile(uid)
        if stored is None:
            display.show_error(f"No profile for {uid}")
            raise typer.Exit(code=1)
        display.show_profile(stored)
    finally:
        engine.close()


@app.command()
def strategy(
    uid: str,
    context: str = typer.Option("", "--context", help="Interaction context text"),
) -> None:
    """Pick an influence strategy for a user."""
    from influence_engine.cli.display import Display

    engine = _engine()
    try:
        Display().show_strategy(engine.influence_strategy(uid, context))
    finally:
        engine.close()


@app.command()
def insights(uid: str) -> None:
    """Show player type, strengths and weaknesses."""
    from influence_engine.cli.display import Display
    from influence_engine.errors import ProfileNotFound

    display = Display()
    engine = _engine()
    try:
        display.show_insights(engine.insights(uid))
    except ProfileNotFound as exc:
        display.show_error(str(exc))
        raise typer.Exit(code=1)
    finally:
        engine.close()


@app.command()
def analytics(uid: str) -> None:
    """Show influence acceptance and learned mechanism weights."""
    from influence_engine.cli.display import Display

    engine = _engine()
    try:
        Display().show_analytics(engine.influence_analytics(uid), engine.tracker.weights())
    finally:
        engine.close()


@app.command()
def assign(uid: str, experiment: str) -> None:
    """Assign (or look up) a user's experiment bucket."""
    from influence_engine.cli.display import Display

    engine = _engine()
    try:
        Display().show_info(engine.assign_experiment(uid, experiment).value)
    finally:
        engine.close()


if __name__ == "__main__":
    app()
