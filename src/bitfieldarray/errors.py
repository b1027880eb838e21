"""Exceptions raised by :mod:`bitfieldarray`.

Every class also derives from the builtin it refines, so callers that only
know about ``IndexError``/``ValueError``/``OSError`` keep working.
"""


class FieldArrayError(Exception):
    """Base class for all field array failures."""


class IndexOutOfRangeError(FieldArrayError, IndexError):
    """Negative slot index, index past ``MAX_INDEX`` or ``to < from``."""


class InvalidArgumentError(FieldArrayError, ValueError):
    """Value outside ``[0, domain_size)`` or an unusable field width."""


class SnapshotError(FieldArrayError):
    pass


class SnapshotIOError(SnapshotError, OSError):
    """The sink or source could not be written to / read from."""


class MalformedSnapshotError(SnapshotError, ValueError):
    """The bytes do not decode to a valid snapshot."""
