"""Direct-follow chase camera."""

from __future__ import annotations
from typing import Optional

from offroadsim.camera.base import ChaseCamera, smoothing_factor
from offroadsim.core.vector import Transform, Vector3


class FollowCamera(ChaseCamera):
    """Sits behind and above the vehicle and lerps toward that spot.

    Desired eye = vehicle + backward * distance + up * height, desired
    look-at = vehicle + look_at_offset. Both approach their desired values
    with factor 1 - exp(-smoothness * 60 * dt).
    """

    def __init__(self, initial: Transform, distance: float = 10.0, height: float = 5.0,
                 look_at_offset: Optional[Vector3] = None, smoothness: float = 0.05):
        """Initialize camera at its resting spot for the vehicle's initial transform.

        Args:
            initial: Vehicle transform at construction
            distance: Distance behind the vehicle (m)
            height: Height above the vehicle (m)
            look_at_offset: Offset from the vehicle origin to look at
            smoothness: Lower is smoother and slower
        """
        if smoothness <= 0:
            raise ValueError(f"smoothness must be positive, got {smoothness}")

        self.distance = distance
        self.height = height
        self.look_at_offset = look_at_offset or Vector3(0.0, 1.0, 0.0)
        self.smoothness = smoothness

        super().__init__(self.desired_position(initial), self.desired_look_at(initial))

    def desired_position(self, target: Transform) -> Vector3:
        backward = -target.forward()
        return target.position + backward * self.distance + Vector3.up() * self.height

    def desired_look_at(self, target: Transform) -> Vector3:
        return target.position + self.look_at_offset

    def update(self, dt: float, target: Transform) -> None:
        alpha = smoothing_factor(self.smoothness, dt)
        self._position = self._position.lerp(self.desired_position(target), alpha)
        self._look_at = self._look_at.lerp(self.desired_look_at(target), alpha)
