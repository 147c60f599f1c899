class BaseIntersection:
    """
    Base class for the control logic attached to a node.

    The engine asks the intersection whether the car at the head of an
    incoming lane may start its turn. This default controller never stops
    anyone, like an uncontrolled junction.
    """

    def __init__(self, node_id: str):
        """
        Args:
            node_id (str): The ID of the graph node this intersection controls.
        """
        self.node_id = node_id

    def update(self, dt: float):
        """
        Advances the controller by `dt` simulated seconds.
        """
        pass

    def can_pass(self, src_node: str) -> bool:
        """
        Determines if a car arriving from `src_node` may enter the intersection.
        """
        return True

    def get_state(self, src_node: str) -> str:
        """
        Returns the signal shown to traffic arriving from `src_node` ("GREEN" or "RED").
        """
        return "GREEN"
