"""Tests for the simulation loop, visual sync, scenarios and telemetry."""

import dataclasses
import logging

import pytest

from offroadsim.camera.follow import FollowCamera
from offroadsim.camera.orbit import FixedHeightDistanceConstraint, OrbitCamera
from offroadsim.core.vector import Quaternion, Transform, Vector3
from offroadsim.core.world import World
from offroadsim.errors import AssetLoadError, MissingNodeError
from offroadsim.simulation.loop import DriveMode, SimulationLoop
from offroadsim.simulation.scenario import (
    build_scenario, get_drive_script, run_script,
)
from offroadsim.simulation.sync import VisualRig, build_vehicle_visual
from offroadsim.simulation.telemetry import TelemetryRecorder
from offroadsim.terrain.friction_zones import TerrainFrictionZones
from offroadsim.terrain.heightfield import FlatTerrain, HeightfieldTerrain
from offroadsim.vehicle.controller import DriveState, VehicleController
from offroadsim.vehicle.controls import ControlAction
from offroadsim.vehicle.model import VehicleModel
from offroadsim.vehicle.wheel import WheelPosition

DT = 1.0 / 60.0


class TestSimulationLoop:
    """Tests for SimulationLoop.tick() and UI operations."""

    def test_frame_dt_clamped(self, flat_loop) -> None:
        """A stalled frame advances physics by at most max_frame_dt."""
        assert flat_loop.tick(0.5)
        assert flat_loop.world.time == pytest.approx(1.0 / 30.0)

    def test_non_positive_frame_skipped(self, flat_loop) -> None:
        assert flat_loop.tick(0.0) is False
        assert flat_loop.world.time == 0.0
        assert flat_loop.frame == 0

    def test_tick_aborts_without_vehicle(self, config, caplog) -> None:
        """A tick before the vehicle exists is logged and skipped."""
        world = World(terrain=FlatTerrain())
        vehicle = VehicleModel(config)
        controller = VehicleController(config, vehicle=vehicle)
        camera = FollowCamera(Transform(Vector3(), Quaternion.identity()))
        loop = SimulationLoop(world, vehicle, controller, TerrainFrictionZones(config),
                              {DriveMode.FOLLOW: camera})

        with caplog.at_level(logging.ERROR, logger="offroadsim.simulation.loop"):
            assert loop.tick(DT) is False
        assert loop.aborted_ticks == 1
        assert world.time == 0.0
        assert any(r.levelno == logging.ERROR for r in caplog.records)

        # Later ticks succeed once the vehicle is built
        vehicle.build(world)
        assert loop.tick(DT) is True

    def test_tick_keeps_wheel_transforms_fresh(self, flat_loop) -> None:
        flat_loop.tick(DT)
        tf = flat_loop.vehicle.wheel_transform(WheelPosition.REAR_LEFT.value)
        node = flat_loop.rig.wheels[WheelPosition.REAR_LEFT]
        assert node.transform.position == tf.position

    def test_camera_tracks_vehicle(self, flat_loop, drive) -> None:
        drive(flat_loop, 3.0, accelerate=True)
        camera = flat_loop.camera
        chassis = flat_loop.vehicle.chassis.position
        assert camera.position.z < chassis.z
        assert camera.look_at.z > 0.5

    def test_reset_keeps_held_keys(self, flat_loop, drive, config) -> None:
        """Keys still held after reset apply on the next tick."""
        drive(flat_loop, 1.5, accelerate=True)
        assert flat_loop.vehicle.chassis.position.z > 0.5

        flat_loop.reset()
        position = flat_loop.vehicle.chassis.position
        assert (position.x, position.y, position.z) == (0.0, 1.0, 0.0)
        assert flat_loop.controls.accelerate

        flat_loop.tick(DT)
        assert flat_loop.vehicle.engine_force(2) == config.max_engine_force

    def test_reset_action_from_keyboard(self, flat_loop, drive) -> None:
        drive(flat_loop, 1.0, accelerate=True)
        flat_loop.handle_action(ControlAction.RESET)
        assert flat_loop.vehicle.chassis.velocity.magnitude() == 0.0

    def test_drive_mode_toggle(self, flat_loop) -> None:
        assert flat_loop.mode is DriveMode.FOLLOW
        assert flat_loop.toggle_drive_mode() is DriveMode.ORBIT
        assert isinstance(flat_loop.camera, OrbitCamera)
        flat_loop.handle_action(ControlAction.DRIVE_MODE)
        assert flat_loop.mode is DriveMode.FOLLOW

    def test_quit_action(self, flat_loop) -> None:
        flat_loop.handle_action(ControlAction.QUIT)
        assert not flat_loop.running

    def test_parking_brake_toggle(self, flat_loop) -> None:
        assert flat_loop.toggle_parking_brake() is True
        flat_loop.tick(DT)
        assert flat_loop.controller.state is DriveState.PARKING_BRAKED
        assert flat_loop.toggle_parking_brake() is False

    def test_missing_initial_camera_rejected(self, config, vehicle, flat_world) -> None:
        controller = VehicleController(config, vehicle=vehicle)
        with pytest.raises(ValueError):
            SimulationLoop(flat_world, vehicle, controller, TerrainFrictionZones(config), {})

    def test_friction_written_once_per_zone_entry(self, config, drive, monkeypatch) -> None:
        tuned = dataclasses.replace(config, initial_position=Vector3(15.0, 1.0, 15.0))
        loop = build_scenario(tuned, terrain="flat", with_visuals=False)
        calls = []
        original = loop.vehicle.set_friction_slip

        def spy(friction):
            calls.append(friction)
            original(friction)

        monkeypatch.setattr(loop.vehicle, "set_friction_slip", spy)
        drive(loop, 1.0)
        assert calls == [config.mud_friction]


class TestVisualRig:
    """Tests for binding and syncing scene nodes."""

    def test_missing_wheel_node_fails_bind(self, config) -> None:
        visual = build_vehicle_visual(config)
        del visual.nodes["wheel_rr"]
        with pytest.raises(MissingNodeError) as exc_info:
            VisualRig.bind(visual)
        assert exc_info.value.node_name == "wheel_rr"
        assert "wheel_fl" in exc_info.value.available

    def test_missing_chassis_fails_bind(self, config) -> None:
        visual = build_vehicle_visual(config)
        with pytest.raises(MissingNodeError):
            VisualRig.bind(visual, chassis_node="body")

    def test_missing_brake_light_degrades(self, config, vehicle, caplog) -> None:
        """An absent light is reported once and skipped while syncing."""
        visual = build_vehicle_visual(config)
        del visual.nodes["brake_light_left"]
        with caplog.at_level(logging.WARNING, logger="offroadsim.simulation.sync"):
            rig = VisualRig.bind(visual)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert rig.brake_lights[0] is None

        controller = VehicleController(config, vehicle=vehicle)
        controller.controls.toggle_parking_brake()
        controller.tick(DT)
        vehicle.update_wheel_transforms()
        rig.sync(vehicle, controller.brake_lights)
        rig.sync(vehicle, controller.brake_lights)

        assert rig.brake_lights[1].intensity == 1.0
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1

    def test_custom_wheel_mapping(self, config) -> None:
        visual = build_vehicle_visual(config)
        mapping = {
            WheelPosition.FRONT_LEFT: "wheel_fr",
            WheelPosition.FRONT_RIGHT: "wheel_fl",
            WheelPosition.REAR_LEFT: "wheel_rl",
            WheelPosition.REAR_RIGHT: "wheel_rr",
        }
        rig = VisualRig.bind(visual, wheel_nodes=mapping)
        assert rig.wheels[WheelPosition.FRONT_LEFT].name == "wheel_fr"

    def test_brake_lights_ride_on_chassis(self, config, vehicle) -> None:
        rig = VisualRig.bind(build_vehicle_visual(config))
        controller = VehicleController(config, vehicle=vehicle)
        controller.tick(DT)
        vehicle.update_wheel_transforms()
        rig.sync(vehicle, controller.brake_lights)

        light = rig.brake_lights[0]
        assert light.intensity == 0.0
        assert light.transform.position.z == pytest.approx(-config.chassis_half_extents.z)


class TestScenario:
    """Tests for scenario assembly and scripts."""

    def test_base_scenario(self, config) -> None:
        loop = build_scenario(config)
        assert isinstance(loop.world.terrain, HeightfieldTerrain)
        mud = loop.friction_zones.zones[0]
        assert (mud.min_x, mud.max_x, mud.min_z, mud.max_z) == (5.0, 25.0, 5.0, 25.0)
        assert set(loop.cameras) == {DriveMode.FOLLOW, DriveMode.ORBIT}
        assert loop.rig is not None

    def test_height_constraint(self, config) -> None:
        loop = build_scenario(config, terrain="flat", constraint="height")
        assert isinstance(loop.cameras[DriveMode.ORBIT].constraint, FixedHeightDistanceConstraint)

    def test_unknown_terrain(self, config) -> None:
        with pytest.raises(AssetLoadError):
            build_scenario(config, terrain="lava")

    def test_unknown_script(self) -> None:
        with pytest.raises(ValueError):
            get_drive_script("moonwalk")

    def test_parking_script_engages_brake(self, config) -> None:
        loop = build_scenario(config, terrain="flat", with_visuals=False, record=True)
        script = get_drive_script("parking")
        ticks = run_script(loop, script)
        assert ticks == loop.frame
        assert loop.controls.parking_brake_engaged
        assert loop.telemetry.samples[-1].state == DriveState.PARKING_BRAKED.value


class TestTelemetryRecorder:
    """Tests for TelemetryRecorder."""

    def test_records_each_tick(self, flat_loop, drive) -> None:
        drive(flat_loop, 1.0)
        assert len(flat_loop.telemetry) == 60
        data = flat_loop.telemetry.as_arrays()
        assert data["time"][-1] == pytest.approx(1.0)
        assert set(data) >= {"x", "z", "forward_speed", "friction"}

    def test_max_samples(self, flat_loop, drive) -> None:
        flat_loop.telemetry = TelemetryRecorder(max_samples=10)
        drive(flat_loop, 0.5)
        assert len(flat_loop.telemetry) == 10

    def test_distance_travelled(self, flat_loop, drive) -> None:
        drive(flat_loop, 1.0)
        flat_loop.telemetry.clear()
        assert flat_loop.telemetry.distance_travelled() == 0.0
        drive(flat_loop, 2.0, accelerate=True)
        z = flat_loop.telemetry.as_arrays()["z"]
        assert flat_loop.telemetry.distance_travelled() == pytest.approx(z[-1] - z[0], rel=0.05)
