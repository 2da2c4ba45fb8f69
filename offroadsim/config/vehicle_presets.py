"""Pre-configured vehicle tuning sets."""

from offroadsim.config.tuning import VehicleTuningConfig


VEHICLE_PRESETS = {
    "offroad": {
        "name": "Offroad Buggy",
        "description": "Balanced rear-wheel drive buggy for dirt and mud",
        "config": VehicleTuningConfig.offroad,
    },
    "rally": {
        "name": "Rally Car",
        "description": "Light and grippy, quick steering response",
        "config": VehicleTuningConfig.rally,
    },
    "heavy": {
        "name": "Heavy Truck",
        "description": "Soft suspension, big wheels, slow to turn",
        "config": VehicleTuningConfig.heavy,
    },
}


def get_tuning_config(preset_name: str) -> VehicleTuningConfig:
    """Get a vehicle tuning by preset name.

    Args:
        preset_name: Name of the preset

    Returns:
        VehicleTuningConfig instance

    Raises:
        ValueError: If preset name is not found
    """
    if preset_name not in VEHICLE_PRESETS:
        available = ", ".join(VEHICLE_PRESETS.keys())
        raise ValueError(f"Unknown vehicle preset '{preset_name}'. Available: {available}")

    return VEHICLE_PRESETS[preset_name]["config"]()
