"""
Exceptions raised by the vehicle model.

Every class here signals a defect in the caller or in the scenario, never a
transient condition: they are not meant to be caught and retried inside a
run. Fix the calling code or the map file instead.
"""


class SimulationDefect(RuntimeError):
    """Base class for caller and configuration defects."""


class InvalidQueryError(SimulationDefect, ValueError):
    """
    A query was made with arguments outside its domain, e.g. a negative
    front offset or an interpolation fraction outside [0, 1].
    """


class HistoryExhaustedError(SimulationDefect):
    """
    A body could not be reconstructed because the car's history ran out
    before covering its whole length.
    """

    def __init__(self, car_id, missing: float):
        self.car_id = car_id
        self.missing = missing
        super().__init__(
            f"{car_id} spawned too close to short stuff: "
            f"{missing:.2f}m of body not covered by history"
        )


class InconsistentOffsetError(SimulationDefect):
    """The front offset of a car does not fit on its current step."""


class ScenarioError(SimulationDefect):
    """A vehicle or spawner cannot be placed where the scenario asks."""
