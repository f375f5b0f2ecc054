"""Module containing the output classes for writing data to files."""

import datetime
import json
import pathlib
from typing import Any, Dict, List, Optional

import polars as pl
import pydantic

from activitypy.core import config, exceptions, models

VALID_FILE_TYPES = (".csv", ".parquet")

logger = config.get_logger()


class PipelineResults(pydantic.BaseModel):
    """Dataclass containing the states published during orchestrator.run().

    Entry i of `time` is the timestamp of the reading that triggered the i-th
    published state.
    """

    time: List[Optional[float]] = pydantic.Field(default_factory=list)
    states: List[models.ActivityState] = pydantic.Field(default_factory=list)
    processing_params: Optional[Dict[str, Any]] = None

    @pydantic.model_validator(mode="after")
    def validate_lengths(self) -> "PipelineResults":
        """Validate that every state has a timestamp entry.

        Raises:
            ValueError: If time and states differ in length.
        """
        if len(self.time) != len(self.states):
            raise ValueError("time and states must have the same length")
        return self

    def append(self, time: Optional[float], state: models.ActivityState) -> None:
        """Record a published state."""
        self.time.append(time)
        self.states.append(state)

    @property
    def final_state(self) -> models.ActivityState:
        """The last published state, or the unknown state if nothing was published."""
        if not self.states:
            return models.ActivityState()
        return self.states[-1]

    def to_data_frame(self) -> pl.DataFrame:
        """Tabulate the results, one probability column per activity code."""
        codes = list(models.ACTIVITY_LABELS)
        for state in self.states:
            codes.extend(code for code in state.probabilities if code not in codes)

        labels = [state.label for state in self.states]
        return pl.DataFrame(
            {
                "time": pl.Series(self.time, dtype=pl.Float64),
                "label": pl.Series(labels, dtype=pl.Utf8),
            }
            | {
                code: pl.Series(
                    [state.probabilities.get(code) for state in self.states],
                    dtype=pl.Float64,
                )
                for code in codes
            }
        )

    def save_results(self, output: pathlib.Path) -> None:
        """Convert to polars and save the dataframe as a csv or parquet file.

        Args:
            output: The path and file name of the data to be saved. as either a csv or
                parquet files.

        """
        logger.debug("Saving results.")
        self.validate_output(output=output)
        output.parent.mkdir(parents=True, exist_ok=True)

        results_dataframe = self.to_data_frame()
        if output.suffix == ".csv":
            results_dataframe.write_csv(output, separator=",")
        elif output.suffix == ".parquet":
            results_dataframe.write_parquet(output)

        logger.info("Results saved in: %s", output)

        if self.processing_params:
            self.save_config_as_json(output)

    def save_config_as_json(self, output_path: pathlib.Path) -> None:
        """Save processing parameters as a JSON configuration file.

        Args:
            output_path: Path where the data file was saved. The JSON file will use
                the same name but with .json extension.
        """
        if not self.processing_params:
            logger.warning("No processing parameters to save as JSON")
            return

        config_data = {
            "processing_time": datetime.datetime.now().isoformat(timespec="seconds"),
            "activitypy_version": config.get_version(),
            "processing_parameters": self.processing_params,
        }

        config_path = output_path.with_suffix(".json")

        with open(config_path, "w") as f:
            json.dump(config_data, f, indent=4)

        logger.debug("Configuration saved in: %s", config_path)

    @classmethod
    def validate_output(cls, output: pathlib.Path) -> None:
        """Validates that the output path is a valid format.

        Args:
            output: the name of the file to be saved, and the directory it will
                be saved in. Must be a .csv or .parquet file.

        Raises:
            InvalidFileTypeError:If the output file path ends with any extension other
                    than csv or parquet.
        """
        if output.suffix not in VALID_FILE_TYPES:
            raise exceptions.InvalidFileTypeError(
                f"The extension: {output.suffix} is not supported."
                "Please save the file as .csv or .parquet",
            )
