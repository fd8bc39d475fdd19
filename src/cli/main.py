"""
Typer CLI for the Ebisu recall model.

Commands:
    ebisu predict   - Expected recall probability after some elapsed time
    ebisu update    - Posterior model after a quiz result
    ebisu halflife  - Elapsed time at which recall decays to a percentile
    ebisu rescale   - Model with its half-life scaled by a factor

Every command takes the model as --time/-t, --alpha/-a and --beta/-b
(beta defaults to alpha).

Usage:
    ebisu --help
    ebisu predict -t 24 -a 3 -e 12 --exact
    ebisu update -t 24 -a 3 -k 1 -n 1 -e 30
    ebisu halflife -t 24 -a 3 -b 4 --percentile 0.8
    ebisu rescale -t 24 -a 3 --scale 5
"""

from __future__ import annotations

import sys
from typing import Optional

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.style import Style
from rich.table import Table

from config import get_settings
from src.recall import (
    EbisuError,
    EbisuModel,
    PercentileOptions,
    model_to_percentile_decay,
    predict_recall,
    rescale_halflife,
    update_recall,
)

THEME = {
    "primary": "#00D4FF",
    "secondary": "#7B68EE",
    "accent": "#FFD700",
    "success": "#00FF88",
    "error": "#FF4444",
    "dim": "#666666",
}

console = Console()

app = typer.Typer(
    help="Ebisu recall model: predict, update and query memory half-lives",
    no_args_is_help=True,
)


# =============================================================================
# Helpers
# =============================================================================

def _build_model(time: float, alpha: Optional[float], beta: Optional[float]) -> EbisuModel:
    settings = get_settings()
    return EbisuModel(
        time=time,
        alpha=alpha if alpha is not None else settings.default_alpha,
        beta=beta,
    )


def _fail(error: EbisuError) -> None:
    console.print(Panel(
        f"[bold red]{type(error).__name__}[/bold red]\n{escape(str(error))}",
        border_style=Style(color=THEME["error"]),
    ))
    raise typer.Exit(1)


def _model_table(title: str, models: list[tuple[str, EbisuModel]]) -> Table:
    table = Table(
        title=f"[bold cyan]{title}[/bold cyan]",
        box=box.HEAVY,
        border_style=Style(color=THEME["primary"]),
    )
    table.add_column("Model", style=Style(color=THEME["dim"]))
    table.add_column("Time", justify="right")
    table.add_column("Alpha", justify="right")
    table.add_column("Beta", justify="right")
    for label, model in models:
        table.add_row(label, f"{model.time:.6g}", f"{model.alpha:.6g}", f"{model.beta:.6g}")
    return table


TIME_OPTION = typer.Option(..., "--time", "-t", help="Elapsed time the Beta prior describes")
ALPHA_OPTION = typer.Option(None, "--alpha", "-a", help="Beta-distribution alpha (default from settings)")
BETA_OPTION = typer.Option(None, "--beta", "-b", help="Beta-distribution beta (defaults to alpha)")


# =============================================================================
# Commands
# =============================================================================

@app.command("predict")
def predict(
    time: float = TIME_OPTION,
    alpha: Optional[float] = ALPHA_OPTION,
    beta: Optional[float] = BETA_OPTION,
    elapsed: float = typer.Option(..., "--elapsed", "-e", help="Time since the last review"),
    exact: bool = typer.Option(
        True,
        "--exact/--log",
        help="Print a probability, or its natural log",
    ),
):
    """
    Expected recall probability after ELAPSED time.

    Examples:
        ebisu predict -t 24 -a 3 -e 12
        ebisu predict -t 24 -a 3 -e 12 --log
    """
    try:
        model = _build_model(time, alpha, beta)
        recall = predict_recall(model, elapsed, exact=exact)
    except EbisuError as e:
        _fail(e)

    label = "Recall probability" if exact else "Log recall probability"
    console.print(f"[cyan]{label}[/cyan] at {elapsed:g}: [bold]{recall:.6f}[/bold]")


@app.command("update")
def update(
    time: float = TIME_OPTION,
    alpha: Optional[float] = ALPHA_OPTION,
    beta: Optional[float] = BETA_OPTION,
    successes: int = typer.Option(..., "--successes", "-k", help="Correct answers in this session"),
    total: int = typer.Option(1, "--total", "-n", help="Quiz attempts in this session"),
    elapsed: float = typer.Option(..., "--elapsed", "-e", help="Time since the last review"),
):
    """
    Update the model with a quiz result.

    Examples:
        ebisu update -t 24 -a 3 -k 1 -e 30       # passed one quiz
        ebisu update -t 24 -a 3 -k 1 -n 3 -e 30  # 1 of 3 correct
    """
    try:
        prior = _build_model(time, alpha, beta)
        posterior = update_recall(prior, successes, total, elapsed)
        halflife = model_to_percentile_decay(posterior, **_search_overrides())
    except EbisuError as e:
        _fail(e)

    console.print(_model_table(
        f"Quiz: {successes}/{total} at {elapsed:g}",
        [("prior", prior), ("posterior", posterior)],
    ))
    console.print(f"[cyan]Posterior half-life:[/cyan] [bold]{halflife:.6g}[/bold]")


@app.command("halflife")
def halflife(
    time: float = TIME_OPTION,
    alpha: Optional[float] = ALPHA_OPTION,
    beta: Optional[float] = BETA_OPTION,
    percentile: Optional[float] = typer.Option(
        None, "--percentile", "-p", help="Recall probability to solve for (default 0.5)"
    ),
    coarse: bool = typer.Option(False, "--coarse", help="Fast order-of-magnitude estimate"),
    tolerance: Optional[float] = typer.Option(None, "--tolerance", help="Search tolerance"),
):
    """
    Elapsed time at which recall decays to PERCENTILE.

    Examples:
        ebisu halflife -t 24 -a 3
        ebisu halflife -t 24 -a 3 -p 0.9 --coarse
    """
    overrides: dict = {"coarse": coarse}
    if percentile is not None:
        overrides["percentile"] = percentile
    if tolerance is not None:
        overrides["tolerance"] = tolerance

    try:
        model = _build_model(time, alpha, beta)
        options = PercentileOptions.from_settings(**overrides)
        decay = model_to_percentile_decay(model, **options.model_dump())
    except EbisuError as e:
        _fail(e)

    kind = "estimate" if coarse else "solution"
    console.print(
        f"[cyan]Recall reaches {options.percentile:g}[/cyan] at "
        f"[bold]{decay:.6g}[/bold] ({kind})"
    )


@app.command("rescale")
def rescale(
    time: float = TIME_OPTION,
    alpha: Optional[float] = ALPHA_OPTION,
    beta: Optional[float] = BETA_OPTION,
    scale: float = typer.Option(..., "--scale", "-s", help="Factor applied to the half-life"),
):
    """
    Scale the model's half-life.

    Examples:
        ebisu rescale -t 24 -a 3 -s 5     # review five times less often
        ebisu rescale -t 24 -a 3 -s 0.1   # review much more often
    """
    try:
        model = _build_model(time, alpha, beta)
        rescaled = rescale_halflife(model, scale)
    except EbisuError as e:
        _fail(e)

    console.print(_model_table(f"Half-life x {scale:g}", [("old", model), ("new", rescaled)]))


def _search_overrides() -> dict:
    options = PercentileOptions.from_settings()
    return {"tolerance": options.tolerance, "max_iterations": options.max_iterations}


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging() -> None:
    """Route loguru output to stderr (and optionally a file) at the configured level."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
