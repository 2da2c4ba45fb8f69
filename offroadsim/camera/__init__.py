"""Chase cameras that track the vehicle."""

from offroadsim.camera.base import ChaseCamera, look_at_matrix, smoothing_factor
from offroadsim.camera.follow import FollowCamera
from offroadsim.camera.orbit import (
    CameraConstraint, FixedHeightDistanceConstraint, FixedRadiusConstraint, OrbitCamera
)

__all__ = [
    "ChaseCamera",
    "look_at_matrix",
    "smoothing_factor",
    "FollowCamera",
    "OrbitCamera",
    "CameraConstraint",
    "FixedRadiusConstraint",
    "FixedHeightDistanceConstraint",
]
