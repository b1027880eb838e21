from .errors import (
    FieldArrayError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    SnapshotError,
    SnapshotIOError,
    MalformedSnapshotError,
)
from .helpers import BitarrayPlane, Plane, PlaneCodec, MAX_FIELD_WIDTH
from .fieldarray import FieldArray, MAX_INDEX
from .snapshot import (
    dumps,
    loads,
    read_snapshot,
    read_snapshot_from_path,
    write_snapshot,
    write_snapshot_to_path,
)

__all__ = [
    "FieldArray",
    "Plane",
    "BitarrayPlane",
    "PlaneCodec",
    "MAX_FIELD_WIDTH",
    "MAX_INDEX",
    "FieldArrayError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "SnapshotError",
    "SnapshotIOError",
    "MalformedSnapshotError",
    "dumps",
    "loads",
    "read_snapshot",
    "read_snapshot_from_path",
    "write_snapshot",
    "write_snapshot_to_path",
]
