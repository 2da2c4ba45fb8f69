"""Simulation world managing physics updates."""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from offroadsim.core.rigid_body import RigidBody
from offroadsim.core.vector import Vector3

if TYPE_CHECKING:
    from offroadsim.terrain.heightfield import Terrain
    from offroadsim.vehicle.raycast_vehicle import RaycastVehicle


@dataclass
class World:
    """Rigid-body simulation world.

    Owns gravity, the ground surface, dynamic bodies and raycast vehicles.
    Each step() call is split into equal sub-steps no longer than
    max_substep so a long frame never means one long integration step.
    """

    terrain: Terrain
    gravity: Vector3 = field(default_factory=lambda: Vector3(0.0, -9.82, 0.0))
    max_substep: float = 1.0 / 120.0
    time: float = 0.0

    # Managed objects
    bodies: List[RigidBody] = field(default_factory=list)
    vehicles: List[RaycastVehicle] = field(default_factory=list)

    _max_substeps: int = 20  # Prevent spiral of death

    def add_body(self, body: RigidBody) -> None:
        """Add a dynamic body to the simulation."""
        self.bodies.append(body)

    def add_vehicle(self, vehicle: RaycastVehicle) -> None:
        """Register a raycast vehicle; its chassis is added as a body."""
        if vehicle.chassis not in self.bodies:
            self.add_body(vehicle.chassis)
        self.vehicles.append(vehicle)

    def remove_vehicle(self, vehicle: RaycastVehicle) -> None:
        """Remove a vehicle and its chassis from the simulation."""
        if vehicle in self.vehicles:
            self.vehicles.remove(vehicle)
        if vehicle.chassis in self.bodies:
            self.bodies.remove(vehicle.chassis)

    def step(self, dt: float) -> int:
        """Advance the simulation by dt seconds.

        Args:
            dt: Time to advance (seconds)

        Returns:
            Number of sub-steps taken
        """
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")

        substeps = min(self._max_substeps, max(1, math.ceil(dt / self.max_substep - 1e-9)))
        sub_dt = dt / substeps

        for _ in range(substeps):
            for body in self.bodies:
                body.apply_force(self.gravity * body.mass)
            for vehicle in self.vehicles:
                vehicle.update(sub_dt, self.terrain)
            for body in self.bodies:
                body.integrate(sub_dt)

        self.time += dt
        return substeps

    def reset(self) -> None:
        """Reset the simulation clock."""
        self.time = 0.0
