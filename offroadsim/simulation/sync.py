"""Copies physics state into renderable scene nodes.

Wheel nodes are resolved once, at bind time, from an explicit
WheelPosition -> node name mapping; a missing wheel node fails the bind.
Brake light nodes are optional: a missing one is reported once and then
skipped every frame while the rest of the rig keeps syncing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.core.vector import Quaternion, Transform, Vector3
from offroadsim.errors import MissingNodeError
from offroadsim.vehicle.controller import BrakeLightState
from offroadsim.vehicle.model import VehicleModel
from offroadsim.vehicle.wheel import WheelPosition

logger = logging.getLogger(__name__)


DEFAULT_WHEEL_NODES: Dict[WheelPosition, str] = {
    WheelPosition.FRONT_LEFT: "wheel_fl",
    WheelPosition.FRONT_RIGHT: "wheel_fr",
    WheelPosition.REAR_LEFT: "wheel_rl",
    WheelPosition.REAR_RIGHT: "wheel_rr",
}

DEFAULT_BRAKE_LIGHT_NODES = ("brake_light_left", "brake_light_right")


@dataclass
class SceneNode:
    """Renderable element: a box with a world transform.

    local_offset positions the node relative to the chassis for nodes that
    ride on it (lights).
    """
    name: str
    half_extents: Vector3
    transform: Transform = field(
        default_factory=lambda: Transform(Vector3(), Quaternion.identity())
    )
    local_offset: Vector3 = field(default_factory=Vector3)
    intensity: float = 0.0


@dataclass
class VehicleVisual:
    """Named nodes making up the drawable vehicle."""
    nodes: Dict[str, SceneNode] = field(default_factory=dict)

    def add(self, node: SceneNode) -> SceneNode:
        self.nodes[node.name] = node
        return node

    def get(self, name: str) -> Optional[SceneNode]:
        return self.nodes.get(name)


def build_vehicle_visual(config: VehicleTuningConfig) -> VehicleVisual:
    """Procedural boxy car: body, four wheels, two rear brake lights."""
    visual = VehicleVisual()
    half = config.chassis_half_extents
    visual.add(SceneNode("chassis", half.copy()))

    wheel_half = Vector3(0.15, config.wheel_radius, config.wheel_radius)
    for name in DEFAULT_WHEEL_NODES.values():
        visual.add(SceneNode(name, wheel_half.copy()))

    light_half = Vector3(0.2, 0.08, 0.05)
    visual.add(SceneNode("brake_light_left", light_half.copy(),
                         local_offset=Vector3(half.x * 0.7, 0.0, -half.z)))
    visual.add(SceneNode("brake_light_right", light_half.copy(),
                         local_offset=Vector3(-half.x * 0.7, 0.0, -half.z)))
    return visual


class VisualRig:
    """Validated binding between a VehicleModel and its scene nodes."""

    def __init__(self, chassis: SceneNode, wheels: Dict[WheelPosition, SceneNode],
                 brake_lights: List[Optional[SceneNode]]):
        self.chassis = chassis
        self.wheels = wheels
        self.brake_lights = brake_lights

    @classmethod
    def bind(cls, visual: VehicleVisual, chassis_node: str = "chassis",
             wheel_nodes: Optional[Mapping[WheelPosition, str]] = None,
             brake_light_nodes: Sequence[str] = DEFAULT_BRAKE_LIGHT_NODES) -> VisualRig:
        """Resolve node names once.

        Raises:
            MissingNodeError: If the chassis or any wheel node is absent
        """
        wheel_nodes = dict(wheel_nodes or DEFAULT_WHEEL_NODES)
        missing_slots = [w for w in WheelPosition if w not in wheel_nodes]
        if missing_slots:
            raise ValueError(f"Wheel node mapping lacks {[w.name for w in missing_slots]}")

        available = sorted(visual.nodes)

        chassis = visual.get(chassis_node)
        if chassis is None:
            raise MissingNodeError(chassis_node, available)

        wheels = {}
        for position, name in wheel_nodes.items():
            node = visual.get(name)
            if node is None:
                raise MissingNodeError(name, available)
            wheels[position] = node

        lights = []
        for name in brake_light_nodes:
            node = visual.get(name)
            if node is None:
                logger.warning("Brake light node '%s' not found; it will not be drawn", name)
            lights.append(node)

        return cls(chassis, wheels, lights)

    def sync(self, vehicle: VehicleModel, brake_lights: BrakeLightState) -> None:
        """Copy chassis, wheel and light state onto the nodes.

        Wheel transforms must already be fresh (update_wheel_transforms()).
        """
        chassis_tf = vehicle.chassis_transform()
        self.chassis.transform = chassis_tf

        for position, node in self.wheels.items():
            node.transform = vehicle.wheel_transform(position.value)

        levels = (brake_lights.left, brake_lights.right)
        for node, level in zip(self.brake_lights, levels):
            if node is None:
                continue
            node.intensity = level
            node.transform = Transform(
                chassis_tf.position + chassis_tf.orientation.rotate(node.local_offset),
                chassis_tf.orientation.copy(),
            )
