import pytest

from core.errors import HistoryExhaustedError, InconsistentOffsetError, InvalidQueryError
from entities.car import (
    Car,
    CarID,
    Crossing,
    DrawCarStatus,
    Queued,
    VehicleType,
    reconstruct_body,
    trim_history,
)


def lengths(x):
    return x


def coords(points):
    return [c for point in points for c in point]


class TestTrimHistory:
    def test_keeps_shortest_covering_prefix(self):
        assert list(trim_history([3, 4, 10, 2], 5, lengths)) == [3, 4]

    def test_step_crossing_threshold_is_kept_whole(self):
        assert list(trim_history([2, 50, 1], 5, lengths)) == [2, 50]

    def test_exact_cover_stops_there(self):
        assert list(trim_history([2, 3, 7], 5, lengths)) == [2, 3]

    def test_short_history_is_kept_whole(self):
        assert list(trim_history([1, 1], 5, lengths)) == [1, 1]

    def test_empty_history(self):
        assert list(trim_history([], 5, lengths)) == []

    def test_trimming_twice_changes_nothing(self):
        once = trim_history([1, 2, 3, 4, 5], 4, lengths)
        assert list(trim_history(once, 4, lengths)) == list(once)


class TestReconstructBody:
    def test_body_straddling_one_boundary(self, make_step):
        previous = make_step("previous", 8, 10)
        current = make_step("current", 10, 20)

        body = reconstruct_body(CarID("c1"), 3.0, current, [previous], 5.0)

        assert coords(body.points) == pytest.approx(coords([(8.0, 0.0), (10.0, 0.0), (13.0, 0.0)]))
        assert body.length == pytest.approx(5.0)

    def test_body_fits_on_current_step(self, make_step):
        current = make_step("current", 0, 10)
        body = reconstruct_body(CarID("c1"), 7.0, current, [], 4.5)
        assert coords(body.points) == pytest.approx(coords([(2.5, 0.0), (7.0, 0.0)]))

    def test_front_equal_to_length_uses_single_slice(self, make_step):
        current = make_step("current", 0, 10)
        body = reconstruct_body(CarID("c1"), 5.0, current, [], 5.0)
        assert coords(body.points) == pytest.approx(coords([(0.0, 0.0), (5.0, 0.0)]))

    def test_front_at_end_of_step(self, make_step):
        current = make_step("current", 0, 10)
        body = reconstruct_body(CarID("c1"), 10.0, current, [], 5.0)
        assert coords(body.points) == pytest.approx(coords([(5.0, 0.0), (10.0, 0.0)]))

    def test_front_at_start_takes_body_from_history(self, make_step):
        previous = make_step("previous", 0, 10)
        current = make_step("current", 10, 20)
        body = reconstruct_body(CarID("c1"), 0.0, current, [previous], 4.0)
        assert coords(body.points) == pytest.approx(coords([(6.0, 0.0), (10.0, 0.0)]))

    def test_body_spanning_several_steps(self, make_step):
        current = make_step("current", 10, 20)
        turn = make_step("turn", 7, 10)
        lane = make_step("lane", 0, 7)

        body = reconstruct_body(CarID("bus"), 1.0, current, [turn, lane], 8.0)

        assert coords(body.points) == pytest.approx(coords([(3.0, 0.0), (7.0, 0.0), (10.0, 0.0), (11.0, 0.0)]))
        assert body.length == pytest.approx(8.0)

    def test_extra_history_is_ignored(self, make_step):
        current = make_step("current", 10, 20)
        previous = make_step("previous", 0, 10)
        older = make_step("older", -30, 0)
        body = reconstruct_body(CarID("c1"), 2.0, current, [previous, older], 5.0)
        assert body.first_pt() == pytest.approx((7.0, 0.0))

    def test_missing_history_names_the_car(self, make_step):
        car_id = CarID("c1")
        current = make_step("current", 10, 20)

        with pytest.raises(HistoryExhaustedError) as excinfo:
            reconstruct_body(car_id, 3.0, current, [], 5.0)

        assert excinfo.value.car_id == car_id
        assert excinfo.value.missing == pytest.approx(2.0)
        assert "spawned too close to short stuff" in str(excinfo.value)

    def test_front_at_start_without_history(self, make_step):
        with pytest.raises(HistoryExhaustedError) as excinfo:
            reconstruct_body(CarID("c1"), 0.0, make_step("current", 10, 20), [], 5.0)
        assert excinfo.value.missing == pytest.approx(5.0)

    def test_history_too_short(self, make_step):
        current = make_step("current", 10, 20)
        previous = make_step("previous", 9, 10)
        with pytest.raises(HistoryExhaustedError):
            reconstruct_body(CarID("c1"), 2.0, current, [previous], 5.0)

    def test_negative_front(self, make_step):
        with pytest.raises(InvalidQueryError):
            reconstruct_body(CarID("c1"), -0.5, make_step("current", 0, 10), [], 4.5)

    def test_front_past_end_of_step(self, make_step):
        with pytest.raises(InconsistentOffsetError):
            reconstruct_body(CarID("c1"), 10.5, make_step("current", 0, 10), [], 4.5)


class TestCar:
    def test_rejects_bad_dimensions(self, make_step):
        with pytest.raises(ValueError):
            Car(CarID("c1"), 0, [make_step("a", 0, 10)])
        with pytest.raises(ValueError):
            Car(CarID("c1"), 4.5, [make_step("a", 0, 10)], max_speed=-1)

    def test_new_car_is_queued_without_history(self, make_step):
        car = Car(CarID("c1"), 4.5, [make_step("a", 0, 10)])
        assert car.state == Queued()
        assert len(car.last_steps) == 0
        assert car.next_step() is None

    def test_start_crossing_uses_slowest_limit(self, make_step):
        step = make_step("a", 0, 10, speed=10.0)
        car = Car(CarID("b1", VehicleType.BIKE), 1.8, [step], max_speed=5.0)

        car.start_crossing(2.0, 4.5)

        assert isinstance(car.state, Crossing)
        assert car.end_dist == 10.0
        assert car.state.dist_int.start == 4.5
        assert car.state.time_int.end == pytest.approx(3.1)
        assert car.state.front_at(2.0) == 4.5

    def test_start_crossing_at_the_end_stays_queued(self, make_step):
        car = Car(CarID("c1"), 10.0, [make_step("a", 0, 10)])
        car.start_crossing(0.0, 10.0)
        assert car.state == Queued()
        assert car.end_dist == 10.0

    def test_exit_current_step_updates_history(self, make_step):
        a, b, c = make_step("a", 0, 10), make_step("b", 10, 12), make_step("c", 12, 30)
        car = Car(CarID("c1"), 4.5, [a, b, c])

        assert car.exit_current_step() is a
        assert car.current_step is b
        assert list(car.last_steps) == [a]

        car.exit_current_step()
        assert car.current_step is c
        # b alone is too short for the body, a still matters.
        assert list(car.last_steps) == [b, a]

    def test_history_forgets_unreachable_steps(self, make_step):
        a, b, c = make_step("a", 0, 10), make_step("b", 10, 20), make_step("c", 20, 30)
        car = Car(CarID("c1"), 4.5, [a, b, c])
        car.exit_current_step()
        car.exit_current_step()
        assert list(car.last_steps) == [b]

    def test_cannot_exit_last_step(self, make_step):
        car = Car(CarID("c1"), 4.5, [make_step("a", 0, 10)])
        with pytest.raises(InvalidQueryError):
            car.exit_current_step()

    def test_draw_status_follows_state(self, make_step):
        car = Car(CarID("7", VehicleType.BUS), 12.5, [make_step("a", 0, 50)])

        car.start_crossing(0.0, 12.5)
        moving = car.get_draw_car(20.0)
        assert moving.status == DrawCarStatus.MOVING
        assert moving.vehicle_type == VehicleType.BUS
        assert moving.on.id == "a"
        assert moving.body.length == pytest.approx(12.5)

        car.state = Queued()
        assert car.get_draw_car(20.0).status == DrawCarStatus.STUCK

    def test_draw_car_across_a_step_boundary(self, make_step):
        a, b = make_step("a", 0, 10), make_step("b", 10, 20)
        car = Car(CarID("c1"), 5.0, [a, b])
        car.exit_current_step()

        draw = car.get_draw_car(3.0)

        assert coords(draw.body.points) == pytest.approx(coords([(8.0, 0.0), (10.0, 0.0), (13.0, 0.0)]))


def test_car_id_display():
    assert str(CarID("c1")) == "car c1"
    assert str(CarID("7", VehicleType.BUS)) == "bus 7"


def test_vehicle_type_from_label():
    assert VehicleType.from_label("BIKE") is VehicleType.BIKE
    with pytest.raises(ValueError):
        VehicleType.from_label("truck")
