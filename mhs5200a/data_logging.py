from datetime import datetime

import pandas as pd

from .sampler import Sample


def _write_row_to_csv(csv_filepath: str, row: dict) -> None:
    """
        Appends a row of data to a csv file. Adds a header line if it's a new file.

        Args:
            csv_filepath: path to the csv file to append to
            row: dict representing the row
    """
    row_df = pd.DataFrame([row])

    with open(csv_filepath, "a") as csv_file:
        is_file_empty = csv_file.tell() == 0
        row_df.to_csv(csv_file, index=False, header=is_file_empty, mode="a")


def log_sample_to_csv(csv_filepath: str, sample: Sample) -> dict:
    """
        Sample sink: write one counter sample as a row (plus headers with the first row) of the
        output csv, timestamped with the time it was logged.

        Args:
            csv_filepath: path to the output csv file
            sample: a Sample from the counter sampler

        Returns the dict of row data
    """
    row = {
        "timestamp": datetime.now(),
        "quantity": sample.quantity,
        "value": sample.value,
        "unit": sample.unit,
    }

    _write_row_to_csv(csv_filepath, row)

    return row


def log_channel_status_to_csv(csv_filepath: str, channel: int, status: pd.Series) -> None:
    """ Write a channel's settings, as read back at acquisition start, to a csv with one row per channel """
    _write_row_to_csv(
        csv_filepath, {"timestamp": datetime.now(), "channel": channel, **dict(status)}
    )
