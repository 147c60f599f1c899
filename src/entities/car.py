"""
The vehicle model: motion state, rolling history and body reconstruction.

A car's front moves along `path[0]`, either crossing it (linear interpolation
over a time interval) or queued (stationary). The steps its front already
left are kept in `last_steps`, most recent first, for as long as its body
may still overlap them. This is what allows rebuilding the exact polyline
occupied by the body when it straddles one or more step boundaries.
"""
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Iterable, Optional, Union

import config
from core.errors import HistoryExhaustedError, InconsistentOffsetError, InvalidQueryError
from core.intervals import DistanceInterval, TimeInterval
from core.polyline import PolyLine
from models.traversable import Traversable


class VehicleType(Enum):
    """Kinds of vehicles, with their default body length (m) and max speed (m/s)."""
    CAR = ("car", 4.5, None)
    BIKE = ("bike", 1.8, 4.5)
    BUS = ("bus", 12.5, 11.0)

    def __init__(self, label: str, default_length: float, default_max_speed: Optional[float]):
        self.label = label
        self.default_length = default_length
        self.default_max_speed = default_max_speed

    @classmethod
    def from_label(cls, label: str) -> "VehicleType":
        for vehicle_type in cls:
            if vehicle_type.label == label.lower():
                return vehicle_type
        raise ValueError(f"Unknown vehicle type '{label}'")


@dataclass(frozen=True)
class CarID:
    name: str
    vehicle_type: VehicleType = VehicleType.CAR

    def __str__(self):
        return f"{self.vehicle_type.label} {self.name}"


@dataclass(frozen=True)
class Crossing:
    """The front moves linearly over `dist_int` during `time_int`."""
    time_int: TimeInterval
    dist_int: DistanceInterval

    def front_at(self, now: float) -> float:
        return self.dist_int.lerp(self.time_int.percent(now))


class Queued:
    """The front is stopped, blocked by a leader or by an intersection."""

    def __repr__(self):
        return "Queued"

    def __eq__(self, other):
        return isinstance(other, Queued)

    def __hash__(self):
        return hash(Queued)


CarState = Union[Crossing, Queued]


class DrawCarStatus(Enum):
    MOVING = "Moving"
    STUCK = "Stuck"


@dataclass(frozen=True)
class DrawCarInput:
    """Everything the renderer needs to draw one car for one frame."""
    id: CarID
    on: Traversable
    body: PolyLine
    status: DrawCarStatus
    vehicle_type: VehicleType


def trim_history(history: Iterable[Traversable], body_length: float,
                 length_of: Callable[[Traversable], float]) -> Deque[Traversable]:
    """
    Drops the steps of a history that a body of `body_length` can no longer reach.

    Steps are kept from the front until their accumulated length reaches
    `body_length`; the step that crosses the threshold is kept whole. The
    result is always a prefix of the input, and trimming it again changes
    nothing.
    """
    keep = deque()
    total = 0.0
    for step in history:
        total += length_of(step)
        keep.append(step)
        if total >= body_length:
            break
    return keep


def reconstruct_body(car_id, front: float, current: Traversable, history: Iterable[Traversable],
                     body_length: float) -> PolyLine:
    """
    Rebuilds the polyline covered by a body whose front is `front` meters along `current`.

    When the whole body fits on `current` it is a single slice. Otherwise the
    part on `current` is extended backwards with the tail of each history
    step, most recent first, until the body length is covered.

    Raises:
        InvalidQueryError: If `front` is negative.
        InconsistentOffsetError: If the body should fit on `current` but `front` is past its end.
        HistoryExhaustedError: If the history is too short to hold the rest of the body.
    """
    if front < 0:
        raise InvalidQueryError(f"{car_id} has a negative front offset {front}")

    if front >= body_length:
        body = current.slice(front - body_length, front)
        if body is None:
            raise InconsistentOffsetError(
                f"{car_id} has its front at {front} on {current}, whose length is {current.length}"
            )
        return body

    piece = current.slice(0.0, front)
    result = piece.points if piece else []
    leftover = body_length - front
    steps = iter(history)
    while leftover > 0:
        step = next(steps, None)
        if step is None:
            raise HistoryExhaustedError(car_id, leftover)
        length = step.length
        piece = step.slice(max(length - leftover, 0.0), length)
        result = PolyLine.append(piece.points if piece else [], result)
        # The whole step is subtracted, even when only its tail was used.
        leftover -= length

    return PolyLine(result)


class Car:
    """
    A single vehicle following a fixed sequence of traversables.

    Attributes:
        id: Stable identifier, also carrying the vehicle type.
        vehicle_len: Length of the body, in meters.
        max_speed: Optional cap on the crossing speed, in m/s.
        path: Steps still ahead; the front is on path[0].
        end_dist: The offset along path[0] the front is heading to.
        state: Crossing or Queued.
        last_steps: Steps the front already left, most recently left first.
    """

    def __init__(self, car_id: CarID, vehicle_len: float, path: Iterable[Traversable],
                 max_speed: Optional[float] = None):
        if vehicle_len <= 0:
            raise ValueError(f"{car_id} needs a positive length, got {vehicle_len}")
        if max_speed is not None and max_speed <= 0:
            raise ValueError(f"{car_id} needs a positive max speed, got {max_speed}")

        self.id = car_id
        self.vehicle_len = float(vehicle_len)
        self.max_speed = max_speed
        self.path: Deque[Traversable] = deque(path)
        self.end_dist = 0.0
        self.state: CarState = Queued()
        self.last_steps: Deque[Traversable] = deque()

    @property
    def current_step(self) -> Traversable:
        return self.path[0]

    def next_step(self) -> Optional[Traversable]:
        """Returns the step after the current one, or None on the last step."""
        if len(self.path) > 1:
            return self.path[1]
        return None

    def crossing_speed(self, step: Traversable) -> float:
        if self.max_speed is None:
            return step.speed_limit
        return min(step.speed_limit, self.max_speed)

    def start_crossing(self, now: float, start_dist: float = 0.0):
        """
        Sets the car crossing its current step from `start_dist` to the end of it.
        """
        step = self.current_step
        self.end_dist = step.length
        if self.end_dist - start_dist <= config.EPSILON:
            # Already at the end, nothing to cross.
            self.state = Queued()
            return
        duration = (self.end_dist - start_dist) / self.crossing_speed(step)
        self.state = Crossing(
            TimeInterval(now, now + duration),
            DistanceInterval(start_dist, self.end_dist)
        )

    def trim_last_steps(self):
        self.last_steps = trim_history(self.last_steps, self.vehicle_len, lambda step: step.length)

    def exit_current_step(self) -> Traversable:
        """
        Moves the front onto the next step of the path.

        The step being left becomes the most recent entry of the history,
        which is then trimmed.

        Returns:
            The step that was left.
        """
        if len(self.path) < 2:
            raise InvalidQueryError(f"{self.id} has no step after {self.current_step}")
        left = self.path.popleft()
        self.last_steps.appendleft(left)
        self.trim_last_steps()
        return left

    def get_draw_car(self, front: float) -> DrawCarInput:
        """
        Packages the body of the car, given its front offset along the current step.
        """
        body = reconstruct_body(self.id, front, self.current_step, self.last_steps, self.vehicle_len)

        # A car queued behind a slow crossing one is drawn as stuck too.
        if isinstance(self.state, Queued):
            status = DrawCarStatus.STUCK
        else:
            status = DrawCarStatus.MOVING

        return DrawCarInput(
            id=self.id,
            on=self.current_step,
            body=body,
            status=status,
            vehicle_type=self.id.vehicle_type,
        )

    def __repr__(self):
        return f"Car({self.id}, on={self.current_step if self.path else None}, state={self.state})"
