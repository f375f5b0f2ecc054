"""Test the pipeline results writer."""

import json
import math
import pathlib

import polars as pl
import pydantic
import pytest

from activitypy.core import exceptions, models
from activitypy.io.writers import writers


@pytest.fixture
def dummy_results() -> writers.PipelineResults:
    """Makes a results object for the purpose of testing."""
    results = writers.PipelineResults(processing_params={"window_size": 150})
    results.append(
        0.0,
        models.ActivityState(label="Walking", probabilities={"wlk": 0.9, "sit": 0.1}),
    )
    results.append(0.02, models.ActivityState(label="Unknown", probabilities={}))
    return results


@pytest.mark.parametrize(
    "file_name", [pathlib.Path("test_output.csv"), pathlib.Path("test_output.parquet")]
)
def test_save_results(
    dummy_results: writers.PipelineResults,
    file_name: pathlib.Path,
    tmp_path: pathlib.Path,
) -> None:
    """Test saving."""
    dummy_results.save_results(tmp_path / file_name)

    assert (tmp_path / file_name).exists()
    assert (tmp_path / file_name).with_suffix(".json").exists()


def test_save_results_content(
    dummy_results: writers.PipelineResults, tmp_path: pathlib.Path
) -> None:
    """Test the saved table and configuration."""
    output = tmp_path / "nested" / "results.csv"

    dummy_results.save_results(output)
    saved = pl.read_csv(output)
    config_data = json.loads(output.with_suffix(".json").read_text())

    assert saved.columns == ["time", "label", "dws", "ups", "sit", "std", "wlk", "jog"]
    assert saved["label"].to_list() == ["Walking", "Unknown"]
    assert saved["wlk"].to_list() == [0.9, None]
    assert config_data["processing_parameters"] == {"window_size": 150}


def test_to_data_frame_extra_codes() -> None:
    """Test that codes outside the known activities get their own column."""
    results = writers.PipelineResults()
    results.append(None, models.ActivityState(probabilities={"swim": 0.5}))

    data_frame = results.to_data_frame()

    assert data_frame.columns[-1] == "swim"
    assert math.isclose(data_frame["swim"][0], 0.5)


def test_final_state() -> None:
    """Test the final state of empty and filled results."""
    results = writers.PipelineResults()

    assert results.final_state == models.ActivityState()

    results.append(1.0, models.ActivityState(label="Sitting"))

    assert results.final_state.label == "Sitting"


def test_mismatched_lengths() -> None:
    """Test error when time and states differ in length."""
    with pytest.raises(pydantic.ValidationError):
        writers.PipelineResults(time=[0.0, 1.0], states=[models.ActivityState()])


def test_validate_output_invalid_file_type(tmp_path: pathlib.Path) -> None:
    """Test when a bad extention is given."""
    with pytest.raises(exceptions.InvalidFileTypeError):
        writers.PipelineResults.validate_output(tmp_path / "bad_file.oops")
