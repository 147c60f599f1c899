from dataclasses import dataclass

from core.errors import InvalidQueryError


@dataclass(frozen=True)
class TimeInterval:
    """
    A span of simulated time, in seconds.

    start <= end is up to the caller; it is only checked when interpolating.
    """
    start: float
    end: float

    def percent(self, t: float) -> float:
        """
        Returns how far `t` is through the interval, from 0.0 at `start` to 1.0 at `end`.

        Raises:
            InvalidQueryError: If the interval is empty or `t` falls outside of it.
        """
        if self.end <= self.start:
            raise InvalidQueryError(f"Cannot interpolate over empty {self}")
        x = (t - self.start) / (self.end - self.start)
        if not 0.0 <= x <= 1.0:
            raise InvalidQueryError(f"Time {t} is outside of {self} (percent={x})")
        return x


@dataclass(frozen=True)
class DistanceInterval:
    """A span of distance along a single traversable, in meters."""
    start: float
    end: float

    def lerp(self, x: float) -> float:
        """
        Returns the distance reached after covering fraction `x` of the interval.

        Raises:
            InvalidQueryError: If `x` is outside [0, 1].
        """
        if not 0.0 <= x <= 1.0:
            raise InvalidQueryError(f"Fraction {x} is outside [0, 1] for {self}")
        return self.start + x * (self.end - self.start)
