"""Vehicle dynamics and control."""

from offroadsim.vehicle.wheel import WheelPosition, WheelSpec, WheelState
from offroadsim.vehicle.raycast_vehicle import RaycastVehicle
from offroadsim.vehicle.model import VehicleModel
from offroadsim.vehicle.controls import ControlAction, ControlState, KeyboardInput
from offroadsim.vehicle.controller import BrakeLightState, DriveState, VehicleController

__all__ = [
    "WheelPosition",
    "WheelSpec",
    "WheelState",
    "RaycastVehicle",
    "VehicleModel",
    "ControlAction",
    "ControlState",
    "KeyboardInput",
    "BrakeLightState",
    "DriveState",
    "VehicleController",
]
