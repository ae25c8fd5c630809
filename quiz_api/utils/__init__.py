"""Utility modules."""
from quiz_api.utils.json_utils import (
    json_dump,
    json_load,
    read_json_file,
    write_json_file,
)
from quiz_api.utils.time_utils import epoch_ms, epoch_ms_to_iso

__all__ = [
    "json_dump",
    "json_load",
    "read_json_file",
    "write_json_file",
    "epoch_ms",
    "epoch_ms_to_iso",
]
