from .codec import PlaneCodec, MAX_FIELD_WIDTH
from .plane import Plane, BitarrayPlane
from . import scan

__all__ = [
    "PlaneCodec",
    "MAX_FIELD_WIDTH",
    "Plane",
    "BitarrayPlane",
    "scan",
]
