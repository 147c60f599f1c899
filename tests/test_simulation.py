import random
from pathlib import Path

import pytest

import config
from cli import debug_log, parse_arguments
from core.errors import ScenarioError
from core.fs.parser import import_map
from core.graph import RoadGraph
from core.simulation import Simulation
from entities.car import Car, CarID, DrawCarStatus, Queued, VehicleType
from entities.vehicle_spawner import VehicleSpawner
from models.intersections.traffic_light_intersection import TrafficLightIntersection


@pytest.fixture
def sim(corridor):
    return Simulation(corridor, tps=30)


def make_car(graph, name="c1", vehicle_type=VehicleType.CAR, src="A", dst="C"):
    return Car(CarID(name, vehicle_type), vehicle_type.default_length, graph.get_path(src, dst),
               max_speed=vehicle_type.default_max_speed)


def red_light_at_b(graph):
    # Green goes to D first and stays there for the whole test.
    graph.add_node("D", 100, 100)
    graph.add_lane("D", "B")
    graph.add_intersection(TrafficLightIntersection("B", ["D", "A"], duration=1000.0))


def test_new_car_is_placed_whole_on_its_first_lane(sim, corridor):
    car = make_car(corridor)
    assert sim.add_vehicle(car)

    draw, = sim.get_draw_cars()
    assert draw.body.length == pytest.approx(4.5)
    assert draw.body.first_pt() == pytest.approx((3.0, 0.0))
    assert draw.body.last_pt() == pytest.approx((7.5, 0.0))
    assert draw.status == DrawCarStatus.MOVING
    assert draw.on is corridor.get_lane("A", "B")


def test_first_lane_shorter_than_the_vehicle():
    graph = RoadGraph()
    graph.add_node("A", 0, 0)
    graph.add_node("B", 8, 0)
    graph.add_lane("A", "B")
    simulation = Simulation(graph, tps=30)

    with pytest.raises(ScenarioError):
        simulation.add_vehicle(make_car(graph, "7", VehicleType.BUS, "A", "B"))


def test_empty_path_is_rejected(sim):
    with pytest.raises(ScenarioError):
        sim.add_vehicle(Car(CarID("c1"), 4.5, []))


def test_occupied_start_refuses_the_car(sim, corridor):
    assert sim.add_vehicle(make_car(corridor, "c1"))
    second = make_car(corridor, "c2")

    assert not sim.add_vehicle(second)
    assert len(sim.cars) == 1

    for _ in range(20):
        sim.internal_step()
    assert sim.add_vehicle(second)


def test_car_drives_to_the_end_with_a_whole_body(sim, corridor):
    car = make_car(corridor)
    sim.add_vehicle(car)
    visited = set()

    for _ in range(1000):
        sim.internal_step()
        for draw in sim.get_draw_cars():
            assert draw.body.length == pytest.approx(car.vehicle_len)
            visited.add(draw.on.id)
        if sim.finished:
            break

    assert sim.finished == 1
    assert sim.cars == []
    assert visited == {"lane A->B", "turn lane A->B => lane B->C", "lane B->C"}


def test_bus_body_spans_the_turn(sim, corridor):
    bus = make_car(corridor, "7", VehicleType.BUS)
    sim.add_vehicle(bus)

    for _ in range(1000):
        sim.internal_step()
        if bus.current_step.id == "turn lane A->B => lane B->C":
            break

    draw, = sim.get_draw_cars()
    assert draw.body.length == pytest.approx(12.5)
    # The turn is 6m long, so the back of the bus is still on the lane.
    assert list(bus.last_steps) == [corridor.get_lane("A", "B")]


def test_red_light_stops_car_at_lane_end(sim, corridor):
    red_light_at_b(corridor)
    car = make_car(corridor)
    sim.add_vehicle(car)

    for _ in range(300):
        sim.internal_step()

    assert sim.finished == 0
    assert car.state == Queued()
    assert car.end_dist == pytest.approx(94.0)
    draw, = sim.get_draw_cars()
    assert draw.status == DrawCarStatus.STUCK
    assert draw.body.last_pt() == pytest.approx((97.0, 0.0))


def test_follower_queues_behind_its_leader(sim, corridor):
    red_light_at_b(corridor)
    leader = make_car(corridor, "c1")
    follower = make_car(corridor, "c2")
    sim.add_vehicle(leader)
    for _ in range(100):
        sim.internal_step()
        if sim.add_vehicle(follower):
            break

    for _ in range(300):
        sim.internal_step()

    queue = sim.get_queue(corridor.get_lane("A", "B"))
    (first, first_front), (second, second_front) = queue.get_car_positions(sim.time)
    assert first is leader and second is follower
    assert first_front == pytest.approx(94.0)
    assert second_front == pytest.approx(94.0 - 4.5 - config.FOLLOWING_DISTANCE)
    assert follower.state == Queued()


def test_light_turning_green_releases_the_car(sim, corridor):
    corridor.add_node("D", 100, 100)
    corridor.add_lane("D", "B")
    corridor.add_intersection(TrafficLightIntersection("B", ["D", "A"], duration=5.0))
    sim.add_vehicle(make_car(corridor))

    for _ in range(1000):
        sim.internal_step()
        if sim.finished:
            break

    assert sim.finished == 1


def test_spawner_builds_cars_from_its_node(corridor, monkeypatch):
    monkeypatch.setattr(random, "random", lambda: 0.0)
    spawner = VehicleSpawner(0.5, "A", VehicleType.BIKE)

    car = spawner.update(corridor)

    assert car.id.vehicle_type is VehicleType.BIKE
    assert car.vehicle_len == VehicleType.BIKE.default_length
    assert car.max_speed == VehicleType.BIKE.default_max_speed
    assert car.current_step is corridor.get_lane("A", "B")


def test_spawner_roll_can_fail(corridor, monkeypatch):
    monkeypatch.setattr(random, "random", lambda: 0.9)
    assert VehicleSpawner(0.5, "A").update(corridor) is None


def test_zero_ratio_never_spawns(corridor, monkeypatch):
    monkeypatch.setattr(random, "random", lambda: 0.0)
    assert VehicleSpawner(0.0, "A").update(corridor) is None


def test_spawner_without_way_out(corridor):
    assert VehicleSpawner(1.0, "C").update(corridor) is None


def test_spawner_ratio_is_validated():
    with pytest.raises(ValueError):
        VehicleSpawner(1.5, "A")


def test_blocked_spawner_drops_its_car(sim):
    sim.add_spawner(VehicleSpawner(1.0, "A"))

    sim.internal_step()
    assert len(sim.cars) == 1

    sim.internal_step()
    assert len(sim.cars) == 1


def test_cli_rejects_non_positive_tps():
    with pytest.raises(SystemExit):
        parse_arguments(["--map", "corridor.map", "--tps", "0"])


def test_cli_debug_flag_enables_logging(capsys):
    args = parse_arguments(["--map", "corridor.map", "--debug", "--ticks", "10"])

    assert args.ticks == 10
    assert config.DEBUG
    debug_log("hello")
    assert "[DEBUG] hello" in capsys.readouterr().out


def test_debug_log_is_silent_by_default(capsys):
    debug_log("hello")
    assert capsys.readouterr().out == ""


def test_run_from_file_without_visualizer(tmp_path, monkeypatch, capsys):
    from main import run_simulation_from_file

    map_file = tmp_path / "line.map"
    map_file.write_text("GRAPH:\nNODE A (0, 0)\nNODE B (60, 0)\nUEDGE A B\nVEHICLES:\nCAR c1 (A, B)\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Simulation, "tick", Simulation.internal_step)

    run_simulation_from_file(str(map_file), tps=30, show_viz=False, max_ticks=50)

    assert (tmp_path / "data" / "results" / "line.png").exists()
    assert "Simulation finished after 50 steps" in capsys.readouterr().out


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_busy_network_keeps_every_body_whole(seed):
    random.seed(seed)
    map_file = Path(__file__).resolve().parent.parent / "data" / "maps" / "corridor.map"
    graph, cars, spawners = import_map(str(map_file))
    simulation = Simulation(graph, tps=30)
    simulation.spawners = spawners + [
        VehicleSpawner(0.1, "A", VehicleType.BUS),
        VehicleSpawner(0.3, "B", VehicleType.BIKE),
        VehicleSpawner(0.3, "D"),
    ]
    for car in cars:
        simulation.add_vehicle(car)

    for _ in range(3000):
        simulation.internal_step()
        for queue in simulation.queues.values():
            for car, front in queue.get_car_positions(simulation.time):
                assert front >= 0.0
                assert front + sum(step.length for step in car.last_steps) >= car.vehicle_len - config.EPSILON
                assert car.get_draw_car(front).body.length == pytest.approx(car.vehicle_len)

    assert simulation.finished > 0
    assert len(simulation.get_draw_cars()) == len(simulation.cars)
