from typing import Optional, Tuple

import config
from core.polyline import PolyLine, distance, interpolate_points, offset_line, quadratic_bezier


class Traversable:
    """
    Base class for every stretch of the network a car's front can be on.

    A traversable is a directed piece of geometry with a speed limit. Lanes
    connect two nodes; turns connect the end of one lane to the start of the
    next one through a node. Cars only reference traversables, the road graph
    owns them.
    """

    def __init__(self, traversable_id: str, geometry: PolyLine, speed_limit: float):
        """
        Args:
            traversable_id (str): A unique, human-readable identifier.
            geometry (PolyLine): The center line followed by the cars.
            speed_limit (float): The maximum speed on this traversable, in m/s.
        """
        if speed_limit <= 0:
            raise ValueError(f"{traversable_id} needs a positive speed limit, got {speed_limit}")
        self.id = traversable_id
        self.geometry = geometry
        self.speed_limit = float(speed_limit)

    @property
    def length(self) -> float:
        return self.geometry.length

    def slice(self, start: float, end: float) -> Optional[PolyLine]:
        """
        Returns the geometry between two distances from the start of the traversable.

        Returns:
            The sliced PolyLine, or None for a zero-length or out-of-range request.
        """
        return self.geometry.slice(start, end)

    def get_infos(self) -> list:
        """Returns a list of strings describing the traversable."""
        return [
            f"Length:     {self.length:.1f} m",
            f"Limit:      {self.speed_limit:.1f} m/s",
        ]

    def __repr__(self):
        return self.id


class Lane(Traversable):
    """
    A one-way road between two nodes.

    The geometry is pulled back from both node centers by the intersection
    radius and, for two-way roads, shifted to the side so that both
    directions stay apart.
    """

    def __init__(self, src: str, dst: str, src_pos: Tuple[float, float], dst_pos: Tuple[float, float],
                 speed_limit: float = config.DEFAULT_SPEED_LIMIT, offset: float = 0.0):
        center_len = distance(src_pos, dst_pos)
        if center_len <= config.EPSILON:
            raise ValueError(f"Nodes {src} and {dst} are at the same position")

        start, end = src_pos, dst_pos
        if offset:
            start, end = offset_line(start, end, offset)

        radius = min(config.INTERSECTION_RADIUS, center_len / 4)
        trimmed_start = interpolate_points(start, end, radius / center_len)
        trimmed_end = interpolate_points(start, end, 1 - radius / center_len)

        super().__init__(f"lane {src}->{dst}", PolyLine([trimmed_start, trimmed_end]), speed_limit)
        self.src = src
        self.dst = dst

    def get_infos(self) -> list:
        return [f"Type:       Lane {self.src} -> {self.dst}"] + super().get_infos()

    @staticmethod
    def evaluate_weight(src: str, dst: str, data: dict) -> float:
        """
        Free-flow travel time of the lane, used as the A* weight.
        """
        lane = data['object']
        return lane.length / lane.speed_limit


class Turn(Traversable):
    """
    The movement through a node from the end of one lane to the start of another.
    """

    def __init__(self, src_lane: Lane, dst_lane: Lane, node_pos: Tuple[float, float]):
        if src_lane.dst != dst_lane.src:
            raise ValueError(f"Cannot turn from {src_lane} to {dst_lane}: they do not meet")

        points = quadratic_bezier(
            src_lane.geometry.last_pt(),
            node_pos,
            dst_lane.geometry.first_pt(),
            config.TURN_RESOLUTION
        )
        speed_limit = min(src_lane.speed_limit, dst_lane.speed_limit)

        super().__init__(f"turn {src_lane.id} => {dst_lane.id}", PolyLine(points), speed_limit)
        self.src_lane = src_lane
        self.dst_lane = dst_lane
        self.node = src_lane.dst

    def get_infos(self) -> list:
        return [f"Type:       Turn at {self.node}"] + super().get_infos()
