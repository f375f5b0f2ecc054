"""CLI for activitypy."""

import logging
import pathlib
from enum import Enum

import typer

from activitypy.core import config, exceptions

logger = config.get_logger()
app = typer.Typer(
    help="Replay recorded motion sensor data through the activity pipeline.",
)


class OutputFileType(str, Enum):
    """Valid output file types for saving data."""

    csv = ".csv"
    parquet = ".parquet"


def version_check(version: bool) -> None:
    """Print the current version of activitypy and exit."""
    if version:
        typer.echo(f"Activitypy version: {config.get_version()}")
        raise typer.Exit()


@app.command()
def main(
    input: pathlib.Path = typer.Argument(
        ..., help="Path to a recording or a directory of recordings.", exists=True
    ),
    model: pathlib.Path = typer.Option(
        ...,
        "-m",
        "--model",
        help="Path to a joblib-persisted classifier exposing predict_proba.",
        exists=True,
        dir_okay=False,
    ),
    output: pathlib.Path = typer.Option(
        None,
        "-o",
        "--output",
        help="Path where data will be saved. Supports .csv and .parquet formats.",
    ),
    output_filetype: OutputFileType = typer.Option(
        ".csv",
        "-O",
        "--output-filetype",
        help="Format for save files when processing directories. ",
    ),
    window_size: int = typer.Option(
        config.DEFAULT_WINDOW_SIZE,
        "-w",
        "--window-size",
        help="Number of samples per channel window. Must be at least 1.",
        min=1,
    ),
    verbosity: bool = typer.Option(
        False,
        "-v",
        "--verbosity",
        help="Determines the level of verbosity. Use -v for DEBUG. "
        "Defaults to INFO if not included.",
    ),
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        help="Print the current version of activitypy and exit.",
        is_eager=True,
        callback=version_check,
    ),
) -> None:
    """Run the activitypy orchestrator with command line arguments."""
    from activitypy.core import orchestrator

    log_level = logging.INFO
    if verbosity:
        log_level = logging.DEBUG
    logger.setLevel(log_level)

    logger.debug("Running activitypy. arguments given: %s", locals())
    try:
        results = orchestrator.run(
            input=input,
            model=model,
            output=output,
            window_size=window_size,
            verbosity=log_level,
            output_filetype=output_filetype.value,
        )
    except (exceptions.EmptyDirectoryError, exceptions.ModelLoadError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if isinstance(results, dict):
        for name, file_results in results.items():
            typer.echo(f"{name}: {file_results.final_state.label}")
    else:
        typer.echo(results.final_state.label)


if __name__ == "__main__":
    app()
