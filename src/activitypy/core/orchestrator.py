"""Replay recorded sensor streams through the activity pipeline."""

import itertools
import logging
import pathlib
from typing import Dict, Literal, Optional, Union

from rich import progress

from activitypy.core import config, exceptions, models, pipeline
from activitypy.io.readers import readers
from activitypy.io.writers import writers
from activitypy.processing import classifiers

logger = config.get_logger()

VALID_FILE_TYPES = (".csv", ".parquet")


def run(
    input: Union[pathlib.Path, str],
    model: Union[pathlib.Path, str, classifiers.AbstractClassifier],
    output: Optional[Union[pathlib.Path, str]] = None,
    window_size: int = config.DEFAULT_WINDOW_SIZE,
    verbosity: int = logging.WARNING,
    output_filetype: Literal[".csv", ".parquet"] = ".csv",
) -> Union[writers.PipelineResults, Dict[str, writers.PipelineResults]]:
    """Replays a single recording, or every recording in a directory.

    When the input path points to a file, the name of the save file will be taken
    from the given output path (if any). When the input path points to a directory
    the output path must be a valid directory as well, and output file names are
    derived from the recording names.

    Args:
        input: Path to the recording or directory of recordings. Currently, this
            supports .csv and .parquet.
        model: The classifier, or the path of a joblib-persisted estimator.
        output: Path data will be saved to. If processing a single file the path
            should end in the save file name in either .csv or .parquet formats.
        window_size: Number of samples per channel window. Must be >= 1.
        verbosity: The logging level for the logger.
        output_filetype: Specifies the data format for the save files. Only used when
            processing directories.

    Returns:
        The published states as a PipelineResults object or as a dictionary of
        PipelineResults objects keyed by recording path.

    Raises:
        ValueError: If window_size is smaller than 1.
        ModelLoadError: If the model cannot be loaded.
    """
    logger.setLevel(verbosity)

    if window_size < 1:
        message = "Window size must be at least 1."
        logger.error(message)
        raise ValueError(message)

    input = pathlib.Path(input)
    output = pathlib.Path(output) if output is not None else None

    if isinstance(model, classifiers.AbstractClassifier):
        classifier = model
        model_name = type(model).__name__
    else:
        classifier = classifiers.load_classifier(model)
        model_name = str(model)

    if input.is_file():
        return _run_file(
            input=input,
            classifier=classifier,
            model_name=model_name,
            output=output,
            window_size=window_size,
        )

    return _run_directory(
        input=input,
        classifier=classifier,
        model_name=model_name,
        output=output,
        window_size=window_size,
        output_filetype=output_filetype,
    )


def _run_directory(
    input: pathlib.Path,
    classifier: classifiers.AbstractClassifier,
    model_name: str,
    output: Optional[pathlib.Path] = None,
    window_size: int = config.DEFAULT_WINDOW_SIZE,
    output_filetype: Literal[".csv", ".parquet"] = ".csv",
) -> Dict[str, writers.PipelineResults]:
    """Replays every recording of a directory with a fresh pipeline per file.

    Files that fail to replay are logged and skipped.

    Args:
        input: Path to the directory of recordings.
        classifier: The classifier shared by all replays.
        model_name: Name of the model, stored in the processing parameters.
        output: Path to directory data will be saved to.
        window_size: Number of samples per channel window.
        output_filetype: Specifies the data format for the save files.

    Returns:
        Dictionary of PipelineResults objects keyed by recording path.

    Raises:
        ValueError: If the output given is not a directory.
        ValueError: If the output_filetype is not a valid type.
        EmptyDirectoryError: If the input directory contained no recordings.
    """
    if output is not None:
        if output.is_file():
            raise ValueError(
                "Output is a file, but must be a directory when input is a directory."
            )
        if output_filetype not in VALID_FILE_TYPES:
            raise ValueError(
                "Invalid output_filetype: "
                f"{output_filetype}. Valid options are: {VALID_FILE_TYPES}."
            )

    file_names = sorted(
        itertools.chain(input.glob("*.csv"), input.glob("*.parquet"))
    )
    if not file_names:
        raise exceptions.EmptyDirectoryError(
            f"Directory {input} contains no .csv or .parquet files."
        )

    results_dict = {}
    with progress.Progress(
        progress.SpinnerColumn(),
        progress.TextColumn("[progress.description]{task.description}"),
        progress.BarColumn(),
        progress.TaskProgressColumn(),
        console=None,
    ) as progress_bar:
        task = progress_bar.add_task(
            f"[cyan]Replaying recordings in {input.name}...", total=len(file_names)
        )

        for file in file_names:
            output_file_path = (
                output / pathlib.Path(file.stem).with_suffix(output_filetype)
                if output
                else None
            )
            logger.debug(
                "Processing directory: %s, current file: %s, save path: %s",
                input,
                file,
                output_file_path,
            )
            try:
                results_dict[str(file)] = _run_file(
                    input=file,
                    classifier=classifier,
                    model_name=model_name,
                    output=output_file_path,
                    window_size=window_size,
                )
            except Exception as e:
                logger.error("Did not run file: %s, Error: %s", file, e)
            progress_bar.update(task, advance=1)
    logger.info("Processing for directory %s completed successfully.", input)
    return results_dict


def _run_file(
    input: pathlib.Path,
    classifier: classifiers.AbstractClassifier,
    model_name: str,
    output: Optional[pathlib.Path] = None,
    window_size: int = config.DEFAULT_WINDOW_SIZE,
) -> writers.PipelineResults:
    """Replays one recording through a new pipeline and collects every published state.

    Args:
        input: Path to the recording.
        classifier: The classifier to use.
        model_name: Name of the model, stored in the processing parameters.
        output: Path to save data to. The path should end in the save file name in
            either .csv or .parquet formats.
        window_size: Number of samples per channel window.

    Returns:
        The published states as a PipelineResults object.
    """
    if output is not None:
        writers.PipelineResults.validate_output(output=output)

    readings = readers.read_recording(input)

    results = writers.PipelineResults(
        processing_params={
            "window_size": window_size,
            "model": model_name,
            "input_file": str(input),
        }
    )
    published: list[models.ActivityState] = []

    with pipeline.ActivityPipeline(classifier, window_size=window_size) as activity:
        activity.subscribe(published.append)
        for reading in readings:
            activity.ingest(reading)
            for state in published:
                results.append(reading.timestamp, state)
            published.clear()

    if not results.states:
        logger.warning(
            "Recording %s never filled a window of %d samples.", input, window_size
        )

    if output is not None:
        try:
            results.save_results(output=output)
        except (PermissionError, FileExistsError) as exc_info:
            logger.error(
                "Could not save output due to: %s. Call save_results on the output "
                "object with a correct filename to save these results.",
                exc_info,
            )
    logger.info("Processing for %s completed successfully.", input.stem)
    return results
