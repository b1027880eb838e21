"""Binary snapshots of a :class:`FieldArray`.

Building a large array from its source data is the slow part; a snapshot
lets later runs reload it instead.  Layout (little-endian)::

    header     8s magic | H version | B field_width | Q domain_size | I plane_count
    per plane  Q bit_length | Q byte_length | byte_length bytes
    trailer    I crc32 of everything above

Planes are written most significant first, each trimmed to its logical
length.
"""

from __future__ import annotations

import io
import struct
import zlib
from pathlib import Path
from typing import BinaryIO, Optional, Type

from .errors import MalformedSnapshotError, SnapshotIOError
from .fieldarray import MAX_INDEX, FieldArray
from .helpers.codec import MAX_FIELD_WIDTH
from .helpers.plane import BitarrayPlane, Plane
from .logger import get_fieldarray_logger

logger = get_fieldarray_logger()

SNAPSHOT_MAGIC = b"BFARRAY\x00"
SNAPSHOT_VERSION = 1

HEADER_STRUCT = struct.Struct("<8sHBQI")
PLANE_STRUCT = struct.Struct("<QQ")
TRAILER_STRUCT = struct.Struct("<I")


# ---------------------------------------------------------------------------
# writing
# ---------------------------------------------------------------------------
def _write(sink: BinaryIO, data: bytes, crc: int) -> int:
    try:
        sink.write(data)
    except (OSError, ValueError) as exc:
        raise SnapshotIOError(f"snapshot sink rejected write: {exc}") from exc
    return zlib.crc32(data, crc)


def write_snapshot(array: FieldArray, sink: BinaryIO) -> None:
    """Serialize ``array`` to the binary ``sink``."""
    if sink is None:
        raise SnapshotIOError("snapshot sink is None")
    header = HEADER_STRUCT.pack(
        SNAPSHOT_MAGIC,
        SNAPSHOT_VERSION,
        array.field_width,
        array.domain_size,
        len(array.planes),
    )
    crc = _write(sink, header, 0)
    total = len(header)
    for plane in array.planes:
        payload = plane.to_bytes()
        entry = PLANE_STRUCT.pack(plane.length(), len(payload))
        crc = _write(sink, entry, crc)
        crc = _write(sink, payload, crc)
        total += len(entry) + len(payload)
    _write(sink, TRAILER_STRUCT.pack(crc), 0)
    total += TRAILER_STRUCT.size
    logger.debug(f"[snapshot.write_snapshot] field_width={array.field_width}, bytes={total}")


def write_snapshot_to_path(array: FieldArray, path) -> None:
    """Write ``array`` to the file at ``path``, replacing any existing file."""
    if path is None:
        raise SnapshotIOError("snapshot path is None")
    try:
        with open(Path(path), "wb") as fh:
            write_snapshot(array, fh)
    except SnapshotIOError:
        raise
    except OSError as exc:
        raise SnapshotIOError(f"cannot write snapshot to {path}: {exc}") from exc


def dumps(array: FieldArray) -> bytes:
    buf = io.BytesIO()
    write_snapshot(array, buf)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# reading
# ---------------------------------------------------------------------------
def _malformed(message: str) -> MalformedSnapshotError:
    logger.warning(f"[snapshot.read_snapshot] malformed snapshot: {message}")
    return MalformedSnapshotError(message)


def _read(source: BinaryIO, n: int) -> bytes:
    chunks = []
    remaining = n
    while remaining > 0:
        try:
            chunk = source.read(remaining)
        except (OSError, ValueError) as exc:
            raise SnapshotIOError(f"snapshot source failed: {exc}") from exc
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _read_exact(source: BinaryIO, n: int, what: str) -> bytes:
    data = _read(source, n)
    if len(data) != n:
        raise _malformed(f"truncated {what}: expected {n} bytes, got {len(data)}")
    return data


def read_snapshot(source: BinaryIO, *, plane_factory: Type[Plane] = BitarrayPlane) -> Optional[FieldArray]:
    """Rebuild a :class:`FieldArray` from ``source``.

    Returns ``None`` when ``source`` is already exhausted.  Anything that is
    not a complete, consistent snapshot raises :class:`MalformedSnapshotError`.
    """
    if source is None:
        raise SnapshotIOError("snapshot source is None")
    header = _read(source, HEADER_STRUCT.size)
    if not header:
        logger.debug("[snapshot.read_snapshot] source exhausted, no snapshot present")
        return None
    if len(header) != HEADER_STRUCT.size:
        raise _malformed(f"truncated header: got {len(header)} of {HEADER_STRUCT.size} bytes")

    magic, version, field_width, domain_size, plane_count = HEADER_STRUCT.unpack(header)
    if magic != SNAPSHOT_MAGIC:
        raise _malformed(f"bad magic {magic!r}")
    if version != SNAPSHOT_VERSION:
        raise _malformed(f"unsupported snapshot version {version}")
    if not 1 <= field_width <= MAX_FIELD_WIDTH:
        raise _malformed(f"field width {field_width} out of range")
    if domain_size != 1 << field_width:
        raise _malformed(f"domain size {domain_size} does not match field width {field_width}")
    if plane_count != field_width:
        raise _malformed(f"plane count {plane_count} does not match field width {field_width}")

    crc = zlib.crc32(header)
    planes = []
    for i in range(plane_count):
        entry = _read_exact(source, PLANE_STRUCT.size, f"plane {i} header")
        crc = zlib.crc32(entry, crc)
        bit_length, byte_length = PLANE_STRUCT.unpack(entry)
        if bit_length > MAX_INDEX + 1 or byte_length != (bit_length + 7) // 8:
            raise _malformed(f"plane {i}: {byte_length} bytes for {bit_length} bits")
        payload = _read_exact(source, byte_length, f"plane {i} payload")
        crc = zlib.crc32(payload, crc)
        planes.append(plane_factory.from_bytes(payload, bit_length))

    (expected,) = TRAILER_STRUCT.unpack(_read_exact(source, TRAILER_STRUCT.size, "trailer"))
    if expected != crc:
        raise _malformed(f"checksum mismatch: stored {expected:#010x}, computed {crc:#010x}")

    logger.debug(f"[snapshot.read_snapshot] field_width={field_width}, planes={plane_count}")
    return FieldArray._from_planes(field_width, planes, plane_factory)


def read_snapshot_from_path(path, *, plane_factory: Type[Plane] = BitarrayPlane) -> Optional[FieldArray]:
    if path is None:
        raise SnapshotIOError("snapshot path is None")
    try:
        with open(Path(path), "rb") as fh:
            return read_snapshot(fh, plane_factory=plane_factory)
    except (SnapshotIOError, MalformedSnapshotError):
        raise
    except OSError as exc:
        raise SnapshotIOError(f"cannot read snapshot from {path}: {exc}") from exc


def loads(data: bytes) -> FieldArray:
    array = read_snapshot(io.BytesIO(data))
    if array is None:
        raise MalformedSnapshotError("empty snapshot")
    return array
