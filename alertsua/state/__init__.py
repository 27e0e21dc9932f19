"""Domain state: status codec, region store and its shared handle."""

from .locking import ReadWriteLock, SharedRegionStore
from .region_store import ListItem, Locale, Region, RegionCountError, RegionStore
from .status_codec import (
    REGION_COUNT,
    AlertStatus,
    AlertStatusString,
    DecodeError,
    WrongLengthError,
    decode,
    encode,
)

__all__ = [
    "REGION_COUNT", "AlertStatus", "AlertStatusString", "DecodeError",
    "WrongLengthError", "decode", "encode",
    "ListItem", "Locale", "Region", "RegionCountError", "RegionStore",
    "ReadWriteLock", "SharedRegionStore",
]
