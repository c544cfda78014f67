"""Bounded ground track history and per-point color assignment."""

from collections import deque
from typing import Iterator, List, Optional, Sequence

import config
from iss_tracking import IssPosition


class TrackHistory:
    """The most recent ISS positions, oldest first. Oldest entries are evicted past capacity."""

    def __init__(self, capacity: int = config.MAX_POSITIONS):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._positions: deque = deque(maxlen=capacity)

    def append(self, position: IssPosition) -> None:
        self._positions.append(position)

    def positions(self) -> List[IssPosition]:
        return list(self._positions)

    @property
    def latest(self) -> Optional[IssPosition]:
        return self._positions[-1] if self._positions else None

    def clear(self) -> None:
        self._positions.clear()

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[IssPosition]:
        return iter(list(self._positions))


def color_index(ordinal: int, path_length: int, num_colors: int) -> int:
    """Bucket a path ordinal into one of num_colors evenly sized runs."""
    if num_colors < 1:
        raise ValueError("at least one color is required")
    if path_length < 1:
        raise ValueError("path_length must be positive")
    if not 0 <= ordinal < path_length:
        raise ValueError(f"ordinal {ordinal} outside path of length {path_length}")
    return num_colors * ordinal // path_length


class PositionColors:
    """
    Evenly distributes colors along a path of the given length.

    With red, green, blue and a path length of 6 the ordinals get
    0:red, 1:red, 2:green, 3:green, 4:blue, 5:blue.
    """

    def __init__(self, colors: Sequence, path_length: int):
        if not colors:
            raise ValueError("at least one color is required")
        self.colors = list(colors)
        self.path_length = path_length

    def get_color(self, ordinal: int):
        return self.colors[color_index(ordinal, self.path_length, len(self.colors))]

    def __call__(self, ordinal: int):
        return self.get_color(ordinal)

    def all(self) -> list:
        return [self.get_color(i) for i in range(self.path_length)]
