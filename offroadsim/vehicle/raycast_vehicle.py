"""Raycast-suspension wheeled vehicle.

Each wheel is a ray cast from its chassis connection point along the
suspension direction. A ground hit produces:

1. A spring/damper suspension force along the contact normal
2. A longitudinal force: engine force plus a brake force that opposes the
   rolling velocity at the contact point
3. A lateral force that cancels side-slip

The tire force (2 + 3) is clamped to the friction circle
friction_slip * suspension_force, so low-friction ground limits both
traction and cornering.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, List

from offroadsim.core.rigid_body import RigidBody
from offroadsim.core.vector import Quaternion, Transform, Vector3, clamp
from offroadsim.errors import StaleWheelTransformError
from offroadsim.vehicle.wheel import WheelSpec, WheelState

if TYPE_CHECKING:
    from offroadsim.terrain.heightfield import Terrain


class RaycastVehicle:
    """Chassis rigid body plus raycast wheels, stepped by the World."""

    # Fraction of side-slip removed per sub-step. Below 1 to keep the yaw
    # coupling between wheels from overshooting.
    lateral_relaxation: float = 0.5

    # Spin decay for airborne wheels (per sub-step)
    free_spin_decay: float = 0.99

    def __init__(self, chassis: RigidBody, wheels: List[WheelSpec]):
        """Initialize vehicle.

        Args:
            chassis: Chassis rigid body, already added to the world
            wheels: Wheel specs in index order
        """
        self.chassis = chassis
        self.wheels = wheels
        self.states = [WheelState() for _ in wheels]
        for spec, state in zip(wheels, self.states):
            state.suspension_length = spec.suspension_rest_length

        self._transforms_valid = False

    @property
    def num_wheels(self) -> int:
        return len(self.wheels)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.wheels):
            raise IndexError(f"Wheel index {index} out of range 0..{len(self.wheels) - 1}")

    def set_steering_value(self, value: float, index: int) -> None:
        self._check_index(index)
        self.states[index].steering = value

    def apply_engine_force(self, force: float, index: int) -> None:
        self._check_index(index)
        self.states[index].engine_force = force

    def set_brake(self, brake: float, index: int) -> None:
        self._check_index(index)
        self.states[index].brake = brake

    def update(self, dt: float, terrain: Terrain) -> None:
        """Accumulate suspension and tire forces on the chassis for one sub-step.

        Args:
            dt: Sub-step length (seconds)
            terrain: Ground to raycast against
        """
        self._transforms_valid = False
        body = self.chassis
        mass_share = body.mass / len(self.wheels)

        for spec, state in zip(self.wheels, self.states):
            self._update_suspension(spec, state, terrain)

            if not state.in_contact:
                state.delta_rotation *= self.free_spin_decay
                state.rotation += state.delta_rotation
                continue

            normal = state.contact_normal
            body.apply_force(normal * state.suspension_force, state.contact_point)

            # Wheel frame on the contact plane
            axle = self._world_axle(spec, state)
            side = (axle - normal * axle.dot(normal)).normalized()
            forward = side.cross(normal)

            contact_velocity = body.get_velocity_at_point(state.contact_point)
            v_forward = contact_velocity.dot(forward)
            v_side = contact_velocity.dot(side)

            f_side = -v_side * mass_share / dt * self.lateral_relaxation
            f_forward = state.engine_force
            if state.brake > 0.0:
                f_stop = -v_forward * mass_share / dt
                f_forward += clamp(f_stop, -state.brake, state.brake)

            # Friction circle
            max_friction = spec.friction_slip * state.suspension_force
            total = math.hypot(f_forward, f_side)
            if total > max_friction:
                scale = max_friction / total if total > 0 else 0.0
                f_forward *= scale
                f_side *= scale

            body.apply_force(forward * f_forward, state.contact_point)

            # Roll influence lifts the side force application point toward the CoM
            rel = state.contact_point - body.position
            lift = normal * (rel.dot(normal) * (1.0 - spec.roll_influence))
            body.apply_force(side * f_side, state.contact_point - lift)

            state.delta_rotation = v_forward * dt / spec.radius
            state.rotation += state.delta_rotation

    def _update_suspension(self, spec: WheelSpec, state: WheelState, terrain: Terrain) -> None:
        body = self.chassis
        origin = body.local_to_world(spec.connection_point)
        direction = body.local_to_world_direction(spec.direction).normalized()
        ray_length = spec.suspension_rest_length + spec.max_suspension_travel + spec.radius

        hit = terrain.raycast(origin, direction, ray_length)
        if hit is None:
            state.in_contact = False
            state.suspension_length = spec.suspension_rest_length + spec.max_suspension_travel
            state.suspension_force = 0.0
            return

        state.in_contact = True
        state.contact_point = hit.point
        state.contact_normal = hit.normal

        min_length = spec.suspension_rest_length - spec.max_suspension_travel
        max_length = spec.suspension_rest_length + spec.max_suspension_travel
        state.suspension_length = clamp(hit.distance - spec.radius, min_length, max_length)

        denominator = hit.normal.dot(direction)
        if denominator >= -0.1:
            inv_contact_dot = 10.0
        else:
            inv_contact_dot = -1.0 / denominator

        projected_velocity = hit.normal.dot(body.get_velocity_at_point(hit.point))
        relative_velocity = projected_velocity * inv_contact_dot

        compression = spec.suspension_rest_length - state.suspension_length
        force = spec.suspension_stiffness * compression * inv_contact_dot
        damping = spec.damping_compression if relative_velocity < 0 else spec.damping_relaxation
        force -= damping * relative_velocity

        state.suspension_force = clamp(force * body.mass, 0.0, spec.max_suspension_force)

    def _steer_rotation(self, spec: WheelSpec, state: WheelState) -> Quaternion:
        # Positive steering turns toward the driver's left (+X)
        return Quaternion.from_axis_angle(-spec.direction, state.steering)

    def _world_axle(self, spec: WheelSpec, state: WheelState) -> Vector3:
        local_axle = self._steer_rotation(spec, state).rotate(spec.axle)
        return self.chassis.local_to_world_direction(local_axle)

    def update_wheel_transforms(self) -> None:
        """Recompute every wheel's world transform from the current chassis pose."""
        body = self.chassis
        for spec, state in zip(self.wheels, self.states):
            hub_local = spec.connection_point + spec.direction.normalized() * state.suspension_length
            steer = self._steer_rotation(spec, state)
            spin = Quaternion.from_axis_angle(spec.axle, state.rotation)
            state.transform = Transform(
                position=body.local_to_world(hub_local),
                orientation=(body.orientation * steer * spin).normalized(),
            )
        self._transforms_valid = True

    @property
    def transforms_valid(self) -> bool:
        return self._transforms_valid

    def get_wheel_transform(self, index: int) -> Transform:
        """World transform of a wheel.

        Raises:
            StaleWheelTransformError: If the world stepped since the last
                update_wheel_transforms() call
        """
        self._check_index(index)
        if not self._transforms_valid:
            raise StaleWheelTransformError(
                "update_wheel_transforms() must run after each world step "
                "before wheel transforms are read"
            )
        return self.states[index].transform.copy()

    def invalidate_transforms(self) -> None:
        self._transforms_valid = False
