from typing import List, Optional, Tuple

import config
from entities.car import Car, Crossing, Queued
from models.traversable import Traversable


class Queue:
    """
    The cars whose front is on one traversable, leader first.

    Positions are never stored: each car's front offset is derived from its
    state, then capped so that it stays FOLLOWING_DISTANCE behind the back of
    the car ahead. Since a leader never moves backwards, neither does the cap.
    """

    def __init__(self, traversable: Traversable):
        self.traversable = traversable
        self.cars: List[Car] = []

    def __len__(self):
        return len(self.cars)

    def _bound_after(self, car: Car, front: float) -> float:
        return front - car.vehicle_len - config.FOLLOWING_DISTANCE

    def get_car_positions(self, now: float) -> List[Tuple[Car, float]]:
        """
        Returns every car with the offset of its front at time `now`.
        """
        positions = []
        bound = self.traversable.length
        for car in self.cars:
            if isinstance(car.state, Crossing):
                front = min(car.state.front_at(now), bound)
            else:
                front = min(car.end_dist, bound)
            # Admission tolerates a leader back a hair behind the start.
            front = max(front, 0.0)
            positions.append((car, front))
            bound = self._bound_after(car, front)
        return positions

    def update(self, now: float):
        """
        Moves cars between Crossing and Queued at time `now`.

        A crossing car becomes queued when its interval is over or when it
        catches up with its leader; a queued car starts crossing again once
        its leader has moved on.
        """
        bound = self.traversable.length
        for car in self.cars:
            if isinstance(car.state, Crossing):
                time_int, dist_int = car.state.time_int, car.state.dist_int
                wanted = dist_int.end if now >= time_int.end else car.state.front_at(now)
                if wanted > bound + config.EPSILON:
                    car.end_dist = max(bound, 0.0)
                    car.state = Queued()
                    front = car.end_dist
                elif now >= time_int.end:
                    car.state = Queued()
                    front = car.end_dist
                else:
                    front = wanted
            else:
                front = max(min(car.end_dist, bound), 0.0)
                if bound > car.end_dist + config.EPSILON:
                    car.start_crossing(now, car.end_dist)
            bound = self._bound_after(car, front)

    def room_for(self, now: float, needed: float = 0.0) -> bool:
        """
        Checks if a car can enter with its front `needed` meters along the traversable.
        """
        if not self.cars:
            return self.traversable.length + config.EPSILON >= needed
        last, front = self.get_car_positions(now)[-1]
        return self._bound_after(last, front) + config.EPSILON >= needed

    def insert_vehicle(self, car: Car):
        self.cars.append(car)

    def peek_last_vehicle(self) -> Optional[Car]:
        """
        Returns the leader if it is waiting at the very end of the traversable.
        """
        if not self.cars:
            return None
        leader = self.cars[0]
        if isinstance(leader.state, Queued) and leader.end_dist >= self.traversable.length - config.EPSILON:
            return leader
        return None

    def pop_last_vehicle(self) -> Optional[Car]:
        leader = self.peek_last_vehicle()
        if leader:
            self.cars.pop(0)
        return leader

    def get_occupation_ratio(self) -> float:
        """Fraction of the traversable's length reserved by the cars on it."""
        used = sum(car.vehicle_len + config.FOLLOWING_DISTANCE for car in self.cars)
        return min(1.0, used / self.traversable.length)

    def get_infos(self) -> list:
        """Returns a list of strings with statistics about the queue."""
        queued = sum(1 for car in self.cars if isinstance(car.state, Queued))
        return self.traversable.get_infos() + [
            f"Vehicles:   {len(self.cars)} ({queued} queued)",
            f"Occupation: {self.get_occupation_ratio() * 100:.1f}%",
        ]
