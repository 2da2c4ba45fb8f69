"""Shared fixtures for the simulation tests."""

import pytest

from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.core.world import World
from offroadsim.simulation.scenario import build_scenario
from offroadsim.terrain.heightfield import FlatTerrain
from offroadsim.vehicle.controller import VehicleController
from offroadsim.vehicle.controls import ControlState
from offroadsim.vehicle.model import VehicleModel

FRAME_DT = 1.0 / 60.0


@pytest.fixture
def config() -> VehicleTuningConfig:
    return VehicleTuningConfig.offroad()


@pytest.fixture
def flat_world() -> World:
    return World(terrain=FlatTerrain())


@pytest.fixture
def vehicle(config, flat_world) -> VehicleModel:
    return VehicleModel(config).build(flat_world)


@pytest.fixture
def controller(config, vehicle) -> VehicleController:
    return VehicleController(config, ControlState(), vehicle)


@pytest.fixture
def flat_loop(config):
    """Base scenario on flat ground with telemetry, not yet ticked."""
    return build_scenario(config, terrain="flat", record=True)


@pytest.fixture
def drive():
    """Hold the given inputs for `seconds` of 60 Hz frames."""

    def _drive(loop, seconds, **inputs):
        controls = loop.controls
        controls.accelerate = inputs.get("accelerate", False)
        controls.reverse = inputs.get("reverse", False)
        controls.steer_left = inputs.get("steer_left", False)
        controls.steer_right = inputs.get("steer_right", False)
        return loop.run_for(seconds, FRAME_DT)

    return _drive
