"""Configuration: vehicle tuning and presets."""

from offroadsim.config.tuning import SteerConflict, SuspensionTuning, VehicleTuningConfig
from offroadsim.config.vehicle_presets import VEHICLE_PRESETS, get_tuning_config

__all__ = [
    "SteerConflict",
    "SuspensionTuning",
    "VehicleTuningConfig",
    "VEHICLE_PRESETS",
    "get_tuning_config",
]
