"""Function to read recorded sensor readings from a file."""

import pathlib
from typing import List, Union

import polars as pl

from activitypy.core import config, exceptions, models

logger = config.get_logger()

VALID_FILE_TYPES = (".csv", ".parquet")

REQUIRED_COLUMNS = ("time", "sensor", "x", "y", "z")

SENSOR_ALIASES = {
    "acceleration": models.SensorKind.acceleration,
    "accelerometer": models.SensorKind.acceleration,
    "rotation_rate": models.SensorKind.rotation_rate,
    "gyroscope": models.SensorKind.rotation_rate,
}


def read_recording(file_name: Union[pathlib.Path, str]) -> List[models.SensorReading]:
    """Read a recorded sensor stream.

    The file holds one reading per row with the columns 'time' (seconds), 'sensor'
    ('acceleration'/'accelerometer' or 'rotation_rate'/'gyroscope'), 'x', 'y' and
    'z'. Readings of both sensors may be interleaved in any order; they are
    returned sorted by time, keeping file order for identical timestamps.

    Args:
        file_name: The .csv or .parquet file to read.

    Returns:
        The readings in replay order.

    Raises:
        InvalidFileTypeError: If the file extension is not supported.
        ValueError: If required columns are missing, values are empty or a sensor
            name is unknown.
    """
    file_name = pathlib.Path(file_name)
    if file_name.suffix not in VALID_FILE_TYPES:
        raise exceptions.InvalidFileTypeError(
            f"File type {file_name.suffix} is not supported. "
            f"Valid options are: {VALID_FILE_TYPES}."
        )

    if file_name.suffix == ".csv":
        data = pl.read_csv(file_name)
    else:
        data = pl.read_parquet(file_name)

    missing = [column for column in REQUIRED_COLUMNS if column not in data.columns]
    if missing:
        raise ValueError(f"Recording {file_name} is missing columns: {missing}")

    data = (
        data.select(
            pl.col("time").cast(pl.Float64),
            pl.col("sensor").cast(pl.Utf8).str.strip_chars().str.to_lowercase(),
            pl.col("x").cast(pl.Float64),
            pl.col("y").cast(pl.Float64),
            pl.col("z").cast(pl.Float64),
        )
        .with_row_index("row")
        .sort(["time", "row"])
    )

    if data.null_count().sum_horizontal().item():
        raise ValueError(f"Recording {file_name} contains empty values.")

    unknown = set(data["sensor"].unique().to_list()) - set(SENSOR_ALIASES)
    if unknown:
        raise ValueError(f"Unknown sensor names in {file_name}: {sorted(unknown)}")

    readings = [
        models.SensorReading(
            kind=SENSOR_ALIASES[row["sensor"]],
            x=row["x"],
            y=row["y"],
            z=row["z"],
            timestamp=row["time"],
        )
        for row in data.iter_rows(named=True)
    ]
    logger.debug("Read %d readings from %s", len(readings), file_name)
    return readings
