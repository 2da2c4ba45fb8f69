"""Core physics engine components."""

from offroadsim.core.vector import Quaternion, Transform, Vector3
from offroadsim.core.rigid_body import RigidBody, box_inertia
from offroadsim.core.world import World

__all__ = [
    "Vector3",
    "Quaternion",
    "Transform",
    "RigidBody",
    "box_inertia",
    "World",
]
