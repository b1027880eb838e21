from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ..errors import InvalidArgumentError

MAX_FIELD_WIDTH = 31


class PlaneCodec:
    """Split slot values into one bit per plane and join them back.

    Plane ``0`` carries the most significant bit and plane ``k - 1`` the
    least significant one::

        k = 4, value = 6  ->  (False, True, True, False)

    The scalar pair :meth:`decompose`/:meth:`recompose` serves single-slot
    access; :meth:`decompose_array`/:meth:`recompose_array` do the same for
    whole runs of slots as ``(k, n)`` numpy bit matrices.
    """

    __slots__ = ("field_width", "domain_size", "_weights")

    def __init__(self, field_width: int):
        if isinstance(field_width, bool) or not isinstance(field_width, int):
            raise InvalidArgumentError(f"field width must be an int, got {field_width!r}")
        if field_width <= 0:
            raise InvalidArgumentError(f"field width must be positive: field_width={field_width}")
        if field_width > MAX_FIELD_WIDTH:
            raise InvalidArgumentError(
                f"field width {field_width} exceeds the supported maximum of {MAX_FIELD_WIDTH}"
            )
        self.field_width = field_width
        self.domain_size = 1 << field_width
        self._weights = tuple(1 << (field_width - 1 - i) for i in range(field_width))

    def is_valid(self, value: int) -> bool:
        return 0 <= value < self.domain_size

    def check_value(self, value: int) -> int:
        if not self.is_valid(value):
            raise InvalidArgumentError(
                f"value {value} outside [0, {self.domain_size}) for field width {self.field_width}"
            )
        return value

    def decompose(self, value: int) -> Tuple[bool, ...]:
        return tuple(bool(value & w) for w in self._weights)

    def recompose(self, bits: Sequence[bool]) -> int:
        value = 0
        for bit, w in zip(bits, self._weights):
            if bit:
                value += w
        return value

    # ------------------------------------------------------------------
    # bulk forms
    # ------------------------------------------------------------------
    def check_values(self, values) -> np.ndarray:
        """Return ``values`` as an int64 array, rejecting anything off-domain."""
        arr = np.asarray(values)
        if arr.ndim != 1:
            raise InvalidArgumentError(f"expected a 1-d sequence of values, got shape {arr.shape}")
        if arr.size == 0:
            return arr.astype(np.int64)
        if arr.dtype == np.bool_ or not np.issubdtype(arr.dtype, np.integer):
            raise InvalidArgumentError(f"values must be integers, got dtype {arr.dtype}")
        lo, hi = int(arr.min()), int(arr.max())
        if lo < 0 or hi >= self.domain_size:
            bad = lo if lo < 0 else hi
            raise InvalidArgumentError(
                f"value {bad} outside [0, {self.domain_size}) for field width {self.field_width}"
            )
        return arr.astype(np.int64)

    def decompose_array(self, values) -> np.ndarray:
        """``(k, n)`` uint8 matrix; row ``i`` holds plane ``i``'s bits."""
        arr = self.check_values(values)
        shifts = np.arange(self.field_width - 1, -1, -1, dtype=np.int64)
        return ((arr[None, :] >> shifts[:, None]) & 1).astype(np.uint8)

    def recompose_array(self, bits: np.ndarray) -> np.ndarray:
        bits = np.asarray(bits, dtype=np.uint32)
        if bits.ndim != 2 or bits.shape[0] != self.field_width:
            raise InvalidArgumentError(
                f"expected a ({self.field_width}, n) bit matrix, got shape {bits.shape}"
            )
        weights = np.asarray(self._weights, dtype=np.uint32)
        return (bits * weights[:, None]).sum(axis=0, dtype=np.uint32)

    def __repr__(self):
        return f"PlaneCodec(field_width={self.field_width})"
