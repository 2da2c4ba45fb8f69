"""Tests for VehicleController: steering, drive, braking and parking brake."""

import dataclasses

import numpy as np
import pytest

from offroadsim.config.tuning import SteerConflict
from offroadsim.core.vector import Vector3
from offroadsim.errors import VehicleNotReadyError
from offroadsim.simulation.scenario import build_scenario
from offroadsim.vehicle.controller import DriveState, VehicleController
from offroadsim.vehicle.model import VehicleModel

DT = 1.0 / 60.0


class TestPreconditions:
    """Tests for ticking without a constructed vehicle."""

    def test_no_vehicle(self, config) -> None:
        with pytest.raises(VehicleNotReadyError):
            VehicleController(config).tick(DT)

    def test_unbuilt_vehicle(self, config) -> None:
        controller = VehicleController(config, vehicle=VehicleModel(config))
        with pytest.raises(VehicleNotReadyError):
            controller.tick(DT)


class TestSteering:
    """Tests for smoothed steering."""

    def test_converges_without_overshoot(self, controller, vehicle) -> None:
        """Steering rises monotonically toward max_steer and never passes it."""
        controller.controls.steer_left = True
        max_steer = controller.config.max_steer
        history = []
        for _ in range(60):
            controller.tick(DT)
            history.append(controller.steering)

        assert all(b >= a for a, b in zip(history, history[1:]))
        assert max(history) <= max_steer
        assert history[-1] == pytest.approx(max_steer, abs=1e-3)
        assert vehicle.steering_angle(0) == controller.steering
        assert vehicle.steering_angle(1) == controller.steering
        assert vehicle.steering_angle(2) == 0.0

    def test_first_tick_fraction(self, controller) -> None:
        """One 60 Hz tick closes steer_smoothing of the gap."""
        controller.controls.steer_right = True
        controller.tick(DT)
        expected = -controller.config.max_steer * controller.config.steer_smoothing
        assert controller.steering == pytest.approx(expected)

    def test_long_frame_lands_on_target(self, controller) -> None:
        """A frame long enough to close the gap stops exactly at the target."""
        controller.controls.steer_left = True
        controller.tick(1.0)
        assert controller.steering == controller.config.max_steer

    def test_release_returns_to_center(self, controller) -> None:
        controller.controls.steer_left = True
        for _ in range(30):
            controller.tick(DT)
        controller.controls.steer_left = False
        for _ in range(120):
            controller.tick(DT)
        assert abs(controller.steering) < 1e-3

    @pytest.mark.parametrize("policy, sign", [
        (SteerConflict.RIGHT_WINS, -1.0),
        (SteerConflict.LEFT_WINS, 1.0),
        (SteerConflict.CANCEL, 0.0),
    ])
    def test_conflict_policy(self, config, vehicle, policy, sign) -> None:
        """Left and right held together resolve by the configured policy."""
        tuned = dataclasses.replace(config, steer_conflict=policy)
        controller = VehicleController(tuned, vehicle=vehicle)
        controller.controls.steer_left = True
        controller.controls.steer_right = True
        assert controller.target_steering() == sign * tuned.max_steer


class TestDriveCommands:
    """Tests for engine, brake and brake light commands from a single tick."""

    def test_accelerate(self, controller, vehicle, config) -> None:
        controller.controls.accelerate = True
        assert controller.tick(DT) is DriveState.DRIVING
        assert vehicle.engine_force(2) == config.max_engine_force
        assert vehicle.engine_force(3) == config.max_engine_force
        assert vehicle.engine_force(0) == 0.0
        assert all(vehicle.brake_force(i) == 0.0 for i in range(4))
        assert not controller.brake_lights.is_on

    def test_reverse_from_rest(self, controller, vehicle, config) -> None:
        controller.controls.reverse = True
        assert controller.tick(DT) is DriveState.REVERSING
        assert vehicle.engine_force(2) == -config.max_engine_force * config.reverse_force_ratio
        assert not controller.controls.is_braking

    def test_reverse_while_rolling_forward_brakes(self, controller, vehicle, config) -> None:
        """Reverse above the speed threshold brakes instead of driving backwards."""
        vehicle.chassis.velocity = Vector3(0.0, 0.0, 5.0)
        controller.controls.reverse = True

        assert controller.tick(DT) is DriveState.BRAKING
        assert vehicle.engine_force(2) == 0.0
        assert all(vehicle.brake_force(i) == config.max_brake_force for i in range(4))
        assert controller.controls.is_braking
        assert controller.brake_lights.is_on

    def test_idle_clears_commands(self, controller, vehicle) -> None:
        controller.controls.accelerate = True
        controller.tick(DT)
        controller.controls.accelerate = False
        assert controller.tick(DT) is DriveState.IDLE
        assert vehicle.engine_force(2) == 0.0


class TestParkingBrake:
    """Tests for the parking brake override."""

    def test_overrides_held_inputs(self, controller, vehicle, config) -> None:
        controller.controls.steer_left = True
        controller.tick(DT)
        steering = controller.steering

        controller.controls.accelerate = True
        controller.controls.toggle_parking_brake()
        for _ in range(10):
            assert controller.tick(DT) is DriveState.PARKING_BRAKED

        assert vehicle.engine_force(2) == 0.0
        assert vehicle.engine_force(3) == 0.0
        assert all(vehicle.brake_force(i) == config.parking_brake_force for i in range(4))
        assert controller.brake_lights.is_on
        assert controller.steering == steering

    def test_release_resumes_driving(self, controller, vehicle, config) -> None:
        controller.controls.accelerate = True
        controller.controls.toggle_parking_brake()
        controller.tick(DT)
        controller.controls.toggle_parking_brake()
        assert controller.tick(DT) is DriveState.DRIVING
        assert vehicle.engine_force(2) == config.max_engine_force
        assert vehicle.brake_force(0) == 0.0

    def test_reset_keeps_control_state(self, controller) -> None:
        controller.controls.accelerate = True
        controller.controls.steer_left = True
        controller.tick(DT)

        controller.reset()

        assert controller.steering == 0.0
        assert controller.state is DriveState.IDLE
        assert controller.controls.accelerate
        assert controller.controls.steer_left


class TestDrivingScenarios:
    """Closed-loop drives through the full simulation loop on flat ground."""

    def test_accelerate_displacement_increases(self, flat_loop, drive) -> None:
        """Holding accelerate for 2 s moves the vehicle forward every tick."""
        drive(flat_loop, 1.0)
        flat_loop.telemetry.clear()
        drive(flat_loop, 2.0, accelerate=True)

        z = flat_loop.telemetry.as_arrays()["z"]
        assert np.all(np.diff(z) > -1e-9)
        assert z[-1] - z[0] > 3.0

    def test_reverse_covers_about_half(self, config, drive) -> None:
        """Reverse drive force is half of forward, so is the distance."""
        forward = build_scenario(config, terrain="flat", with_visuals=False)
        backward = build_scenario(config, terrain="flat", with_visuals=False)
        for loop in (forward, backward):
            drive(loop, 1.0)

        z0 = forward.vehicle.chassis.position.z
        drive(forward, 2.0, accelerate=True)
        drive(backward, 2.0, reverse=True)

        forward_distance = forward.vehicle.chassis.position.z - z0
        backward_distance = z0 - backward.vehicle.chassis.position.z
        assert backward_distance > 0.0
        assert 0.35 < backward_distance / forward_distance < 0.65

    def test_brake_then_reverse(self, flat_loop, drive) -> None:
        """Reverse while moving forward brakes to a stop, then reverses."""
        drive(flat_loop, 1.0)
        drive(flat_loop, 2.0, accelerate=True)
        assert flat_loop.vehicle.forward_speed > 4.0

        flat_loop.telemetry.clear()
        drive(flat_loop, 5.0, reverse=True)

        samples = flat_loop.telemetry.samples
        braking = [s for s in samples if s.state == DriveState.BRAKING.value]
        assert braking
        assert all(s.engine_force == 0.0 for s in braking)
        speeds = [s.forward_speed for s in braking]
        assert all(b <= a + 1e-2 for a, b in zip(speeds, speeds[1:]))

        assert samples[-1].state == DriveState.REVERSING.value
        assert flat_loop.vehicle.forward_speed < -0.5

    def test_parking_brake_stops_with_accelerate_held(self, flat_loop, drive) -> None:
        drive(flat_loop, 1.0)
        drive(flat_loop, 2.0, accelerate=True)
        flat_loop.toggle_parking_brake()
        drive(flat_loop, 3.0, accelerate=True)

        assert flat_loop.controller.state is DriveState.PARKING_BRAKED
        assert abs(flat_loop.vehicle.forward_speed) < 0.05
        assert flat_loop.vehicle.engine_force(2) == 0.0

    def test_mud_limits_traction(self, config, drive) -> None:
        """The same throttle covers far less ground inside the mud zone."""
        ground = build_scenario(config, terrain="flat", with_visuals=False)
        in_mud = build_scenario(
            dataclasses.replace(config, initial_position=Vector3(15.0, 1.0, 10.0)),
            terrain="flat", with_visuals=False,
        )
        for loop in (ground, in_mud):
            drive(loop, 1.0)
        assert in_mud.vehicle.friction_slip == config.mud_friction

        starts = [loop.vehicle.chassis.position.z for loop in (ground, in_mud)]
        for loop in (ground, in_mud):
            drive(loop, 2.0, accelerate=True)

        ground_distance = ground.vehicle.chassis.position.z - starts[0]
        mud_distance = in_mud.vehicle.chassis.position.z - starts[1]
        assert mud_distance < 0.25 * ground_distance
