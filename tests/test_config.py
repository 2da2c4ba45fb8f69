"""Tests for vehicle tuning and presets."""

import dataclasses

import pytest

from offroadsim.config.tuning import SteerConflict, VehicleTuningConfig
from offroadsim.config.vehicle_presets import VEHICLE_PRESETS, get_tuning_config


class TestVehicleTuningConfig:
    """Tests for VehicleTuningConfig."""

    def test_defaults(self) -> None:
        config = VehicleTuningConfig()
        assert config.max_steer == 0.5
        assert config.max_engine_force == 250.0
        assert config.reverse_force == 125.0
        assert config.default_friction == 0.7
        assert config.mud_friction == 0.05
        assert config.steer_conflict is SteerConflict.RIGHT_WINS

    def test_parking_brake_must_dominate(self) -> None:
        """The parking lock force is at least ten times the service brake."""
        with pytest.raises(ValueError):
            VehicleTuningConfig(max_brake_force=200.0, parking_brake_force=1000.0)

    @pytest.mark.parametrize("overrides", [
        {"max_steer": 0.0},
        {"steer_smoothing": 1.5},
        {"reverse_force_ratio": -0.1},
        {"mud_friction": 0.0},
        {"chassis_mass": -1.0},
    ])
    def test_invalid_values(self, overrides) -> None:
        with pytest.raises(ValueError):
            VehicleTuningConfig(**overrides)

    def test_frozen(self) -> None:
        config = VehicleTuningConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_steer = 1.0


class TestPresets:
    """Tests for the preset registry."""

    @pytest.mark.parametrize("name", sorted(VEHICLE_PRESETS))
    def test_presets_construct(self, name) -> None:
        config = get_tuning_config(name)
        assert isinstance(config, VehicleTuningConfig)
        assert config.parking_brake_force >= 10 * config.max_brake_force

    def test_unknown_preset_lists_available(self) -> None:
        with pytest.raises(ValueError, match="offroad"):
            get_tuning_config("hovercraft")
