"""Fixed-width field array stored as parallel bit planes.

Each slot holds an unsigned ``field_width``-bit value.  Rather than packing
slots side by side, bit ``i`` of every slot lives in plane ``i`` (plane 0 is
the most significant bit)::

    slot     0    1    2    3
    value    0    6   15    5      field_width = 4
    plane 0  0    0    1    0
    plane 1  0    1    1    1
    plane 2  0    1    1    0
    plane 3  0    0    1    1

This suits dense integer key spaces mapped to a small code (a category or a
flag set): ten million ids with a 2-bit category cost about 2.5 MB and no
hashing on lookup.

Ranged *writes* (:meth:`FieldArray.set_range`, :meth:`FieldArray.clear_range`)
take an inclusive ``to_index`` while ranged *reads*
(:meth:`FieldArray.get_range`, slicing) take an exclusive one.
"""

from __future__ import annotations

import operator
from typing import Iterator, Optional, Tuple, Type, Union

import numpy as np

from .errors import IndexOutOfRangeError, InvalidArgumentError
from .helpers import scan
from .helpers.codec import PlaneCodec
from .helpers.plane import BitarrayPlane, Plane
from .logger import get_fieldarray_logger

logger = get_fieldarray_logger()

MAX_INDEX = 2 ** 31 - 1


def _check_index(index) -> int:
    index = operator.index(index)
    if index < 0 or index > MAX_INDEX:
        raise IndexOutOfRangeError(f"index:{index}")
    return index


def _check_range(from_index, to_index) -> Tuple[int, int]:
    from_index = operator.index(from_index)
    to_index = operator.index(to_index)
    if from_index < 0 or to_index < 0 or to_index < from_index:
        raise IndexOutOfRangeError(f"[fromIndex,toIndex]=[{from_index},{to_index}]")
    return from_index, to_index


class FieldArray:
    def __init__(self, field_width: int = 1, *, plane_factory: Type[Plane] = BitarrayPlane):
        self._codec = PlaneCodec(field_width)
        self._plane_factory = plane_factory
        self._planes = tuple(plane_factory() for _ in range(field_width))

    @classmethod
    def _from_planes(cls, field_width, planes, plane_factory=BitarrayPlane) -> "FieldArray":
        planes = tuple(planes)
        if len(planes) != field_width:
            raise InvalidArgumentError(f"plane count {len(planes)} does not match field width {field_width}")
        fa = cls(field_width, plane_factory=plane_factory)
        fa._planes = planes
        return fa

    # ------------------------------------------------------------------
    # properties
    # ------------------------------------------------------------------
    @property
    def field_width(self) -> int:
        return self._codec.field_width

    @property
    def domain_size(self) -> int:
        """Exclusive upper bound of slot values, ``2 ** field_width``."""
        return self._codec.domain_size

    @property
    def max_value(self) -> int:
        return self._codec.domain_size - 1

    @property
    def planes(self) -> Tuple[Plane, ...]:
        """Planes ordered most significant first.  Mutating them bypasses validation."""
        return self._planes

    @property
    def codec(self) -> PlaneCodec:
        return self._codec

    # ------------------------------------------------------------------
    # indexed access
    # ------------------------------------------------------------------
    def _write(self, index: int, bits) -> None:
        for plane, bit in zip(self._planes, bits):
            if bit:
                plane.set(index)
            else:
                plane.clear(index)

    def set(self, index: int, value: int) -> None:
        """Store ``value`` at slot ``index``."""
        index = _check_index(index)
        value = self._codec.check_value(operator.index(value))
        self._write(index, self._codec.decompose(value))

    def set_range(self, from_index: int, to_index: int, value: int) -> None:
        """Store ``value`` in every slot of ``[from_index, to_index]`` (inclusive)."""
        from_index, to_index = _check_range(from_index, to_index)
        _check_index(to_index)
        value = self._codec.check_value(operator.index(value))
        bits = self._codec.decompose(value)
        logger.debug(f"[FieldArray.set_range] from={from_index}, to={to_index}, value={value}")
        for i in range(from_index, to_index + 1):
            self._write(i, bits)

    def set_many(self, value: int, *indices) -> None:
        """Store ``value`` at each index; accepts ``set_many(v, 1, 5)`` or ``set_many(v, [1, 5])``.

        Every index is validated before the first write.  Once writing has
        started there is no rollback.
        """
        if len(indices) == 1 and not isinstance(indices[0], int) and hasattr(indices[0], "__iter__"):
            indices = indices[0]
        value = self._codec.check_value(operator.index(value))
        checked = [_check_index(i) for i in indices]
        bits = self._codec.decompose(value)
        for i in checked:
            self._write(i, bits)

    def clear(self, index: int) -> None:
        self.set(index, 0)

    def clear_range(self, from_index: int, to_index: int) -> None:
        """Zero every slot of ``[from_index, to_index]`` (inclusive)."""
        self.set_range(from_index, to_index, 0)

    def clear_many(self, *indices) -> None:
        self.set_many(0, *indices)

    def get(self, index: int) -> int:
        index = _check_index(index)
        return self._codec.recompose([p.get(index) for p in self._planes])

    def get_range(self, from_index: int, to_index: int) -> "FieldArray":
        """Independent copy of slots ``[from_index, to_index)`` re-based to index 0."""
        from_index, to_index = _check_range(from_index, to_index)
        planes = [p.get_range(from_index, to_index) for p in self._planes]
        return self._from_planes(self.field_width, planes, self._plane_factory)

    def copy(self) -> "FieldArray":
        return self._from_planes(self.field_width, [p.copy() for p in self._planes], self._plane_factory)

    # ------------------------------------------------------------------
    # scans
    # ------------------------------------------------------------------
    def cardinality(self) -> int:
        """Largest set-bit count of any single plane.

        A coarse stand-in for the number of nonzero slots: exact for width 1,
        otherwise it never exceeds the true count, since slots whose bits sit
        on different planes are not combined.
        """
        return max(p.cardinality() for p in self._planes)

    def length(self) -> int:
        """Largest logical length of any plane, i.e. highest nonzero slot + 1."""
        return max(p.length() for p in self._planes)

    def size(self) -> int:
        """Total allocated bits across planes; a capacity hint, not a slot count."""
        return sum(p.capacity() for p in self._planes)

    def next_set_bit(self, from_index: int) -> int:
        """First nonzero slot at or after ``from_index``, or -1."""
        return scan.next_set(self._planes, _check_index(from_index))

    def next_clear_bit(self, from_index: int) -> int:
        """First zero slot at or after ``from_index`` and below :meth:`length`, or -1."""
        return scan.next_clear(self._planes, _check_index(from_index), self.length())

    def previous_set_bit(self, from_index: int) -> int:
        """Nearest nonzero slot at or before ``from_index``, or -1."""
        return scan.previous_set(self._planes, _check_index(from_index))

    def previous_clear_bit(self, from_index: int) -> int:
        """Nearest zero slot at or before ``from_index``, or -1."""
        return scan.previous_clear(self._planes, _check_index(from_index))

    def iter_set(self) -> Iterator[int]:
        i = scan.next_set(self._planes, 0)
        while i >= 0:
            yield i
            i = scan.next_set(self._planes, i + 1)

    def items(self) -> Iterator[Tuple[int, int]]:
        """``(index, value)`` for every nonzero slot, ascending."""
        for i in self.iter_set():
            yield i, self.get(i)

    # ------------------------------------------------------------------
    # numpy bridge
    # ------------------------------------------------------------------
    def to_numpy(self, from_index: int = 0, to_index: Optional[int] = None) -> np.ndarray:
        """Decode slots ``[from_index, to_index)`` into a uint32 array.

        ``to_index`` defaults to :meth:`length`.
        """
        if to_index is None:
            to_index = max(self.length(), operator.index(from_index))
        from_index, to_index = _check_range(from_index, to_index)
        n = to_index - from_index
        bits = np.empty((self.field_width, n), dtype=np.uint8)
        for row, plane in enumerate(self._planes):
            bits[row] = np.frombuffer(plane.unpack(from_index, to_index), dtype=np.uint8)
        return self._codec.recompose_array(bits)

    def set_values(self, start: int, values) -> None:
        """Store ``values[j]`` at slot ``start + j``; all values are checked first."""
        start = _check_index(start)
        bits = self._codec.decompose_array(values)
        n = bits.shape[1]
        if n == 0:
            return
        _check_index(start + n - 1)
        logger.debug(f"[FieldArray.set_values] start={start}, count={n}")
        for plane, row in zip(self._planes, bits):
            plane.pack(start, row.tobytes())

    @classmethod
    def from_numpy(cls, values, field_width: int = 1, *, start: int = 0,
                   plane_factory: Type[Plane] = BitarrayPlane) -> "FieldArray":
        fa = cls(field_width, plane_factory=plane_factory)
        fa.set_values(start, values)
        return fa

    # ------------------------------------------------------------------
    # snapshots
    # ------------------------------------------------------------------
    def write_snapshot(self, sink) -> None:
        from .snapshot import write_snapshot
        write_snapshot(self, sink)

    def write_snapshot_to_path(self, path) -> None:
        from .snapshot import write_snapshot_to_path
        write_snapshot_to_path(self, path)

    @classmethod
    def from_snapshot(cls, source, *, plane_factory: Type[Plane] = BitarrayPlane) -> Optional["FieldArray"]:
        from .snapshot import read_snapshot
        return read_snapshot(source, plane_factory=plane_factory)

    # ------------------------------------------------------------------
    # python protocol
    # ------------------------------------------------------------------
    def _slice_bounds(self, key: slice) -> Tuple[int, int]:
        if key.step not in (None, 1):
            raise ValueError("FieldArray slices do not support a step")
        start = 0 if key.start is None else key.start
        stop = max(self.length(), start) if key.stop is None else key.stop
        return start, stop

    def __getitem__(self, key: Union[int, slice]):
        if isinstance(key, slice):
            return self.get_range(*self._slice_bounds(key))
        return self.get(key)

    def __setitem__(self, key: int, value: int) -> None:
        """``fa[i] = v`` or ``fa[a:b] = v`` (``b`` exclusive).

        An open stop means :meth:`length`, so ``fa[0:] = v`` on an empty
        array writes nothing.  Give the stop explicitly to extend the array.
        """
        if isinstance(key, slice):
            start, stop = _check_range(*self._slice_bounds(key))
            if stop == start:
                self._codec.check_value(operator.index(value))
                return
            self.set_range(start, stop - 1, value)
            return
        self.set(key, value)

    def __delitem__(self, key: int) -> None:
        self[key] = 0

    def __len__(self):
        return self.length()

    def __eq__(self, other):
        """Same width and bitwise-equal planes.

        Arrays built on different plane implementations never compare equal,
        even with the same slot values, since their plane hashes differ.
        Compare ``to_numpy()`` output to check values across implementations.
        """
        if not isinstance(other, FieldArray):
            return NotImplemented
        if self._plane_factory is not other._plane_factory:
            return False
        if self.field_width != other.field_width or len(self._planes) != len(other._planes):
            return False
        return all(a == b for a, b in zip(self._planes, other._planes))

    def __hash__(self):
        total = sum(hash(p) for p in self._planes) & 0xFFFF_FFFF_FFFF_FFFF
        return ((total >> 32) ^ total) & 0xFFFF_FFFF

    def __repr__(self):
        return f"FieldArray(field_width={self.field_width}, length={self.length()})"
