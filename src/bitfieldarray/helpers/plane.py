"""Bit planes.

A plane holds one bit of significance for every slot of a field array.  The
field array only talks to planes through the :class:`Plane` protocol, so the
codec and the scan logic never depend on how the bits are stored.

:class:`BitarrayPlane` is the default implementation.  It keeps a
little-endian :class:`bitarray.bitarray` whose length is the *allocated
capacity* of the plane; the *logical length* is one past the highest set bit.
Capacity grows in 64-bit words and at least doubles on every growth step, so
a long run of ascending ``set`` calls stays amortised O(1).
"""

from __future__ import annotations

from typing import Protocol, Type, TypeVar

from bitarray import bitarray, frozenbitarray
from bitarray.util import zeros

WORD_BITS = 64

P = TypeVar("P", bound="Plane")


class Plane(Protocol):
    def get(self, index: int) -> bool: ...

    def set(self, index: int) -> None: ...

    def clear(self, index: int) -> None: ...

    def get_range(self: P, from_index: int, to_index: int) -> P: ...

    def cardinality(self) -> int: ...

    def length(self) -> int: ...

    def capacity(self) -> int: ...

    def next_set(self, from_index: int) -> int: ...

    def next_clear(self, from_index: int) -> int: ...

    def previous_set(self, from_index: int) -> int: ...

    def previous_clear(self, from_index: int) -> int: ...

    def unpack(self, from_index: int, to_index: int) -> bytes: ...

    def pack(self, from_index: int, data: bytes) -> None: ...

    def to_bytes(self) -> bytes: ...

    @classmethod
    def from_bytes(cls: Type[P], data: bytes, nbits: int) -> P: ...

    def copy(self: P) -> P: ...


def _round_up(nbits: int) -> int:
    return -(-nbits // WORD_BITS) * WORD_BITS


class BitarrayPlane:
    """Growable plane backed by :class:`bitarray.bitarray`."""

    __slots__ = ("_bits",)

    def __init__(self, nbits: int = 0):
        self._bits = zeros(_round_up(nbits), endian="little")

    # ------------------------------------------------------------------
    def _ensure(self, nbits: int) -> None:
        cap = len(self._bits)
        if nbits <= cap:
            return
        new_cap = max(2 * cap, _round_up(nbits))
        self._bits.extend(zeros(new_cap - cap, endian="little"))

    @classmethod
    def _wrap(cls, bits: bitarray) -> "BitarrayPlane":
        plane = cls()
        plane._bits = bits
        return plane

    # ------------------------------------------------------------------
    def get(self, index: int) -> bool:
        return index < len(self._bits) and bool(self._bits[index])

    def set(self, index: int) -> None:
        self._ensure(index + 1)
        self._bits[index] = 1

    def clear(self, index: int) -> None:
        if index < len(self._bits):
            self._bits[index] = 0

    def get_range(self, from_index: int, to_index: int) -> "BitarrayPlane":
        """Copy bits ``[from_index, to_index)`` into a new plane starting at 0."""
        stop = min(to_index, len(self._bits))
        if from_index >= stop:
            return type(self)()
        return self._wrap(self._bits[from_index:stop])

    def cardinality(self) -> int:
        return self._bits.count(1)

    def length(self) -> int:
        return self._bits.find(1, right=True) + 1

    def capacity(self) -> int:
        return len(self._bits)

    # ------------------------------------------------------------------
    def next_set(self, from_index: int) -> int:
        if from_index >= len(self._bits):
            return -1
        return self._bits.find(1, from_index)

    def next_clear(self, from_index: int) -> int:
        cap = len(self._bits)
        if from_index >= cap:
            return from_index
        found = self._bits.find(0, from_index)
        return cap if found < 0 else found

    def previous_set(self, from_index: int) -> int:
        stop = min(from_index + 1, len(self._bits))
        if stop <= 0:
            return -1
        return self._bits.find(1, 0, stop, right=True)

    def previous_clear(self, from_index: int) -> int:
        if from_index >= len(self._bits):
            return from_index
        return self._bits.find(0, 0, from_index + 1, right=True)

    # ------------------------------------------------------------------
    def unpack(self, from_index: int, to_index: int) -> bytes:
        """One byte (0 or 1) per bit of ``[from_index, to_index)``."""
        stop = min(to_index, len(self._bits))
        raw = self._bits[from_index:stop].unpack() if from_index < stop else b""
        return raw + bytes((to_index - from_index) - len(raw))

    def pack(self, from_index: int, data: bytes) -> None:
        """Write one bit per byte of ``data`` starting at ``from_index``."""
        if not data:
            return
        chunk = bitarray(endian="little")
        chunk.pack(data)
        self._ensure(from_index + len(chunk))
        self._bits[from_index:from_index + len(chunk)] = chunk

    def to_bytes(self) -> bytes:
        return self._bits[:self.length()].tobytes()

    @classmethod
    def from_bytes(cls, data: bytes, nbits: int) -> "BitarrayPlane":
        if nbits < 0 or len(data) * 8 < nbits:
            raise ValueError(f"{len(data)} bytes cannot hold {nbits} bits")
        bits = bitarray(endian="little")
        bits.frombytes(bytes(data))
        del bits[nbits:]
        bits.extend(zeros(_round_up(nbits) - nbits, endian="little"))
        return cls._wrap(bits)

    def copy(self) -> "BitarrayPlane":
        return self._wrap(self._bits.copy())

    # ------------------------------------------------------------------
    def __eq__(self, other):
        if not isinstance(other, BitarrayPlane):
            return NotImplemented
        n = self.length()
        return n == other.length() and self._bits[:n] == other._bits[:n]

    def __hash__(self):
        return hash(frozenbitarray(self._bits[:self.length()]))

    def __repr__(self):
        n = self.length()
        return f"BitarrayPlane({self._bits[:n].to01()!r}, capacity={len(self._bits)})"
