"""
Access road picking

Click collection for drawing an access road. The state is an explicit
value passed into and returned from every input event; two captured
points complete an access path and return the picker to Idle.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from loguru import logger
from shapely.geometry import LineString

from ..geometry.utils import Coord

POINTS_PER_ACCESS = 2


@dataclass(frozen=True)
class Idle:
    """Not collecting points"""


@dataclass(frozen=True)
class CollectingPoints:
    """Points captured so far, in click order"""
    points: Tuple[Coord, ...] = ()


PickingState = Union[Idle, CollectingPoints]


def start() -> CollectingPoints:
    """Enter click-collection mode with an empty buffer"""
    return CollectingPoints()


def handle_click(state: PickingState, point: Coord) -> Tuple[PickingState, Optional[LineString]]:
    """
    Feed one click into the picker

    A click while Idle starts a new collection. The second point of a
    collection completes the access path.

    Returns:
        (new_state, access_path or None)
    """
    if isinstance(state, Idle):
        state = start()

    points = state.points + ((float(point[0]), float(point[1])),)
    if len(points) < POINTS_PER_ACCESS:
        return CollectingPoints(points), None

    if points[0] == points[1]:
        logger.warning("Access path endpoints coincide; discarding the second click")
        return CollectingPoints(points[:1]), None

    logger.info(f"Access path captured from {points[0]} to {points[1]}")
    return Idle(), LineString(points)


def cancel(state: PickingState) -> Idle:
    if isinstance(state, CollectingPoints) and state.points:
        logger.debug(f"Picking cancelled with {len(state.points)} point(s) captured")
    return Idle()
