"""Tests for rigid bodies and the physics world."""

import pytest

from offroadsim.core.rigid_body import RigidBody, box_inertia
from offroadsim.core.vector import Quaternion, Vector3
from offroadsim.core.world import World
from offroadsim.terrain.heightfield import FlatTerrain


class TestRigidBody:
    """Tests for RigidBody."""

    def test_rejects_non_positive_mass(self) -> None:
        """Mass must be positive."""
        with pytest.raises(ValueError):
            RigidBody(mass=0.0)

    def test_box_inertia(self) -> None:
        """Unit cube of mass 12 has inertia 2 about each axis."""
        inertia = box_inertia(12.0, Vector3(0.5, 0.5, 0.5))
        assert inertia.x == pytest.approx(2.0)
        assert inertia.y == pytest.approx(2.0)
        assert inertia.z == pytest.approx(2.0)

    def test_off_center_force_creates_torque(self) -> None:
        """A force applied away from the centre of mass accumulates torque."""
        body = RigidBody()
        body.apply_force(Vector3(0, 0, 10), Vector3(1, 0, 0))
        torque = body.get_accumulated_torque()
        assert torque.y == pytest.approx(-10.0)

    def test_local_world_round_trip(self) -> None:
        """world_to_local inverts local_to_world."""
        body = RigidBody(position=Vector3(1, 2, 3), orientation=Quaternion.from_yaw(0.8))
        local = Vector3(0.5, -0.2, 1.5)
        back = body.world_to_local(body.local_to_world(local))
        assert back.x == pytest.approx(local.x)
        assert back.y == pytest.approx(local.y)
        assert back.z == pytest.approx(local.z)

    def test_forward_speed_sign(self) -> None:
        """Moving along local -Z reads as negative forward speed."""
        body = RigidBody(velocity=Vector3(0, 0, -3))
        assert body.get_forward_speed() == pytest.approx(-3.0)

    def test_integrate_clears_accumulators(self) -> None:
        """Forces apply for one step only."""
        body = RigidBody(mass=2.0, linear_damping=0.0)
        body.apply_force(Vector3(4, 0, 0))
        body.integrate(0.5)
        assert body.velocity.x == pytest.approx(1.0)
        assert body.get_accumulated_force().magnitude() == 0.0

    def test_reset_to_zeroes_motion(self) -> None:
        """reset_to teleports and stops the body."""
        body = RigidBody(velocity=Vector3(5, 0, 0), angular_velocity=Vector3(0, 2, 0))
        body.reset_to(Vector3(0, 1, 0), Quaternion.identity())
        assert body.velocity.magnitude() == 0.0
        assert body.angular_velocity.magnitude() == 0.0
        assert body.position.y == 1.0


class TestWorld:
    """Tests for World stepping."""

    def test_rejects_non_positive_dt(self) -> None:
        """A zero or negative step is a caller error."""
        world = World(terrain=FlatTerrain())
        with pytest.raises(ValueError):
            world.step(0.0)

    def test_substep_count(self) -> None:
        """A 1/30 s frame is split into four 1/120 s sub-steps."""
        world = World(terrain=FlatTerrain())
        assert world.step(1.0 / 30.0) == 4
        assert world.time == pytest.approx(1.0 / 30.0)

    def test_substep_cap(self) -> None:
        """Very long frames are capped at the maximum sub-step count."""
        world = World(terrain=FlatTerrain())
        assert world.step(1.0) == 20

    def test_free_fall(self) -> None:
        """A body with no support accelerates at g."""
        world = World(terrain=FlatTerrain())
        body = RigidBody(position=Vector3(0, 10, 0))
        world.add_body(body)
        for _ in range(10):
            world.step(0.01)
        assert body.velocity.y == pytest.approx(-0.982, rel=1e-2)

    def test_add_vehicle_registers_chassis(self, vehicle, flat_world) -> None:
        """Registering a vehicle also adds its chassis body."""
        assert vehicle.chassis in flat_world.bodies
        assert len(flat_world.vehicles) == 1
        flat_world.remove_vehicle(vehicle.raycast_vehicle)
        assert flat_world.bodies == []
        assert flat_world.vehicles == []
