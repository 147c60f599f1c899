from typing import List

from models.intersections.base_intersection import BaseIntersection


class TrafficLightIntersection(BaseIntersection):
    """
    Round-robin traffic light.

    Each incoming road gets the green light in turn for `duration` simulated
    seconds; every other road sees red meanwhile.
    """

    def __init__(self, node_id: str, incoming_nodes: List[str], duration: float = 20.0):
        """
        Args:
            node_id (str): The ID of the controlled node.
            incoming_nodes (List[str]): Nodes with a lane leading into this one, in phase order.
            duration (float): Length of each green phase, in seconds.
        """
        super().__init__(node_id)
        if duration <= 0:
            raise ValueError(f"Traffic light at {node_id} needs a positive duration, got {duration}")
        self.incoming_nodes = list(incoming_nodes)
        self.duration = float(duration)

        self.current_green_idx = 0
        self.elapsed = 0.0  # Time spent in the current phase.

    def update(self, dt: float):
        if not self.incoming_nodes:
            return

        self.elapsed += dt
        # A long step can skip whole phases.
        while self.elapsed >= self.duration:
            self.elapsed -= self.duration
            self.current_green_idx = (self.current_green_idx + 1) % len(self.incoming_nodes)

    def _green_node(self):
        return self.incoming_nodes[self.current_green_idx]

    def can_pass(self, src_node: str) -> bool:
        if not self.incoming_nodes:
            return True
        return src_node == self._green_node()

    def get_state(self, src_node: str) -> str:
        return "GREEN" if self.can_pass(src_node) else "RED"
