import random
import uuid
from typing import Optional

from core.graph import RoadGraph
from entities.car import Car, CarID, VehicleType


class VehicleSpawner:
    """
    Creates new cars at a specific node in the graph.

    At each simulation step the spawner rolls against its spawn ratio; on
    success it builds a car of its vehicle type, heading to a random
    reachable node. Placing the car on the road is left to the simulation,
    which may refuse it when the first lane is blocked.
    """

    def __init__(self, spawn_ratio: float, node: str, vehicle_type: VehicleType = VehicleType.CAR,
                 vehicle_len: Optional[float] = None):
        """
        Args:
            spawn_ratio (float): The probability (0.0 to 1.0) of spawning a car at each step.
            node (str): The ID of the node where cars start.
            vehicle_type (VehicleType): The kind of vehicle produced.
            vehicle_len (float): Body length, defaults to the vehicle type's length.
        """
        if not 0.0 <= spawn_ratio <= 1.0:
            raise ValueError(f"Spawn ratio must be between 0 and 1, got {spawn_ratio}")
        self.spawn_ratio = spawn_ratio
        self.node = node
        self.vehicle_type = vehicle_type
        self.vehicle_len = vehicle_len or vehicle_type.default_length

    def update(self, graph: RoadGraph) -> Optional[Car]:
        """
        Attempts to create a new car.

        Returns:
            A new Car ready to be added to the simulation, or None.
        """
        if random.random() >= self.spawn_ratio:
            return None

        possible_destinations = [n for n in graph.graph.nodes if n != self.node]
        if not possible_destinations:
            return None
        destination = random.choice(possible_destinations)

        try:
            path = graph.get_path(self.node, destination)
        except RuntimeError:
            # The destination cannot be reached from this spawner.
            return None

        car_id = CarID(f"auto_{str(uuid.uuid4())[:5]}", self.vehicle_type)
        return Car(car_id, self.vehicle_len, path, max_speed=self.vehicle_type.default_max_speed)
