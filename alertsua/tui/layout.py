"""Screen areas assigned to the components."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

DIAGNOSTICS_HEIGHT = 7


class Placement(Enum):
    MAP = "map"               # left 75 %
    LIST = "list"             # right 25 %, above diagnostics
    DIAGNOSTICS = "diagnostics"


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def inner_width(self) -> int:
        """Width inside a one-cell panel border."""
        return max(0, self.width - 2)

    @property
    def inner_height(self) -> int:
        return max(0, self.height - 2)


def split_areas(width: int, height: int) -> Dict[Placement, Rect]:
    """Split the screen: map on the left, list over diagnostics on the right."""
    left = (width * 3) // 4
    right = width - left
    diag = min(DIAGNOSTICS_HEIGHT, height // 2)
    return {
        Placement.MAP: Rect(0, 0, left, height),
        Placement.LIST: Rect(left, 0, right, height - diag),
        Placement.DIAGNOSTICS: Rect(left, height - diag, right, diag),
    }
