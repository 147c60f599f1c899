from time import time
from typing import Dict, List

import config
from cli import debug_log
from core.errors import ScenarioError
from core.graph import RoadGraph
from entities.car import Car, DrawCarInput
from models.queue import Queue
from models.traversable import Lane, Traversable


class Simulation:
    """
    Manages the main simulation loop and the state of every car.

    Each internal step advances simulated time by `time_step` seconds and is
    the only place where cars are mutated. The render pass (`get_draw_cars`)
    only reads, and runs between whole steps, so it never sees a car halfway
    through moving to its next step.
    """

    def __init__(self, graph: RoadGraph, tps: float, time_step: float = config.TIME_STEP, visualizer=None):
        self.graph = graph
        self.cars: List[Car] = []
        self.spawners = []
        self.queues: Dict[str, Queue] = {}
        self.tps = tps
        self.tick_duration = 1.0 / tps
        self.time_step = time_step
        self.time = 0.0  # Simulated seconds.
        self.t = 0  # Internal steps done.
        self.finished = 0
        self.running = False
        self.visualizer = visualizer

        # Decouples the fixed simulation rate from the frame rate.
        self.simulation_accumulator = 0.0
        self.last_frame_time = time()

    def get_queue(self, step: Traversable) -> Queue:
        queue = self.queues.get(step.id)
        if queue is None:
            queue = Queue(step)
            self.queues[step.id] = queue
        return queue

    def add_vehicle(self, car: Car) -> bool:
        """
        Places a new car at the start of its path, with its whole body on the first step.

        Returns:
            False if the start of the first step is occupied.

        Raises:
            ScenarioError: If the car has no path, or its first step is shorter than its body.
        """
        if not car.path:
            raise ScenarioError(f"{car.id} has an empty path")
        first = car.current_step
        if first.length < car.vehicle_len:
            raise ScenarioError(
                f"{car.id} is {car.vehicle_len}m long but spawns on {first}, "
                f"which is only {first.length:.2f}m long"
            )

        queue = self.get_queue(first)
        if not queue.room_for(self.time, car.vehicle_len):
            return False

        car.start_crossing(self.time, car.vehicle_len)
        queue.insert_vehicle(car)
        self.cars.append(car)
        return True

    def add_spawner(self, spawner):
        self.spawners.append(spawner)

    def remove_vehicle_safely(self, car: Car):
        try:
            self.cars.remove(car)
        except ValueError:
            pass

    def tick(self):
        """
        Runs as many internal steps as the elapsed wall-clock time requires,
        then refreshes the visualizer at its own frame rate.
        """
        current_time = time()
        frame_time = current_time - self.last_frame_time
        self.last_frame_time = current_time

        # Avoid the spiral of death after a long pause.
        if frame_time > 0.25:
            frame_time = 0.25

        self.simulation_accumulator += frame_time

        simulation_steps = 0
        max_steps = 5

        while self.simulation_accumulator >= self.tick_duration and simulation_steps < max_steps:
            self.internal_step()
            self.simulation_accumulator -= self.tick_duration
            simulation_steps += 1

        if self.visualizer:
            self.visualizer.update(self)
            if not self.visualizer.handle_events():
                self.running = False

    def internal_step(self):
        """
        One fixed-length simulation step.
        """
        self.time += self.time_step
        self.t += 1

        # 1. Update traffic lights
        self.graph.update_intersections(self.time_step)

        # 2. Crossing and queued transitions
        for queue in list(self.queues.values()):
            queue.update(self.time)

        # 3. Move the heads of queues onto their next step
        for queue in list(self.queues.values()):
            self._try_advance_head(queue)

        # 4. Update spawners
        for spawner in self.spawners:
            new_car = spawner.update(self.graph)
            if new_car is None:
                continue
            if self.add_vehicle(new_car):
                debug_log(f"Spawned {new_car.id} at {spawner.node}")
            else:
                debug_log(f"Spawner at {spawner.node} is blocked, dropping {new_car.id}", "warning")

    def _try_advance_head(self, queue: Queue):
        car = queue.peek_last_vehicle()
        if car is None:
            return

        current = car.current_step
        next_step = car.next_step()

        if next_step is None:
            queue.pop_last_vehicle()
            self.remove_vehicle_safely(car)
            self.finished += 1
            debug_log(f"{car.id} reached the end of its path at t={self.time:.1f}s")
            return

        if isinstance(current, Lane):
            intersection = self.graph.get_intersection(current.dst)
            if intersection and not intersection.can_pass(current.src):
                return

        next_queue = self.get_queue(next_step)
        if not next_queue.room_for(self.time):
            return

        queue.pop_last_vehicle()
        car.exit_current_step()
        car.start_crossing(self.time)
        next_queue.insert_vehicle(car)
        debug_log(f"{car.id} entered {next_step}, keeping {len(car.last_steps)} step(s) of history")

    def get_draw_cars(self) -> List[DrawCarInput]:
        """
        Builds the drawable body of every car at the current time.
        """
        draw_cars = []
        for queue in self.queues.values():
            for car, front in queue.get_car_positions(self.time):
                draw_cars.append(car.get_draw_car(front))
        return draw_cars
