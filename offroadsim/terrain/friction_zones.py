"""Spatial traction zones (mud patches) on the terrain.

Each zone is an axis-aligned rectangle on the ground plane with its own
friction-slip coefficient. The vehicle is tested by its chassis centre only;
a vehicle straddling a boundary takes the value at its centre.

Overlapping zones resolve to the lowest coefficient among all zones that
contain the point, so zone order never matters.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional

from offroadsim.config.tuning import VehicleTuningConfig

if TYPE_CHECKING:
    from offroadsim.vehicle.model import VehicleModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrictionZone:
    """Axis-aligned rectangle on the X/Z plane with a friction coefficient."""
    min_x: float
    max_x: float
    min_z: float
    max_z: float
    friction: float
    name: str = "zone"

    def __post_init__(self):
        if self.min_x > self.max_x or self.min_z > self.max_z:
            raise ValueError(
                f"Zone '{self.name}' has inverted bounds: "
                f"x[{self.min_x}, {self.max_x}] z[{self.min_z}, {self.max_z}]"
            )
        if self.friction <= 0:
            raise ValueError(f"Zone '{self.name}' friction must be positive, got {self.friction}")

    @classmethod
    def square(cls, center_x: float, center_z: float, size: float,
               friction: float, name: str = "zone") -> FrictionZone:
        """Square zone of edge length `size` centred on (center_x, center_z)."""
        half = size / 2
        return cls(center_x - half, center_x + half, center_z - half, center_z + half,
                   friction, name)

    def contains(self, x: float, z: float) -> bool:
        """Inclusive point-in-rectangle test."""
        return self.min_x <= x <= self.max_x and self.min_z <= z <= self.max_z


class TerrainFrictionZones:
    """Maps a ground position to a friction-slip coefficient.

    Also owns the edge-triggered write of that coefficient to the vehicle's
    wheels: wheels are only touched when the value actually changes.
    """

    def __init__(self, config: VehicleTuningConfig,
                 zones: Optional[Iterable[FrictionZone]] = None):
        """Initialize zones.

        Args:
            config: Tuning providing the default (outside any zone) friction
            zones: Static zones, defined once at terrain creation
        """
        self.config = config
        self.zones: List[FrictionZone] = list(zones or [])

    @classmethod
    def with_mud(cls, config: VehicleTuningConfig, center_x: float = 15.0,
                 center_z: float = 15.0, size: float = 20.0) -> TerrainFrictionZones:
        """Base scenario: a single square mud patch using the tuning's mud friction."""
        mud = FrictionZone.square(center_x, center_z, size, config.mud_friction, name="mud")
        return cls(config, [mud])

    @property
    def default_friction(self) -> float:
        return self.config.default_friction

    def zone_at(self, x: float, z: float) -> Optional[FrictionZone]:
        """Return the governing zone at (x, z), or None outside all zones."""
        governing = None
        for zone in self.zones:
            if zone.contains(x, z):
                if governing is None or zone.friction < governing.friction:
                    governing = zone
        return governing

    def friction_at(self, x: float, z: float) -> float:
        """Friction-slip coefficient at a ground position."""
        zone = self.zone_at(x, z)
        if zone is None:
            return self.config.default_friction
        return zone.friction

    def apply(self, vehicle: VehicleModel) -> bool:
        """Re-evaluate friction at the chassis centre and write it on change.

        Args:
            vehicle: Constructed vehicle model

        Returns:
            True if the wheels were rewritten this call
        """
        position = vehicle.chassis.position
        friction = self.friction_at(position.x, position.z)

        if friction == vehicle.friction_slip:
            return False

        zone = self.zone_at(position.x, position.z)
        logger.debug(
            "Friction %.3f -> %.3f at (%.2f, %.2f) [%s]",
            vehicle.friction_slip, friction, position.x, position.z,
            zone.name if zone else "ground",
        )
        vehicle.set_friction_slip(friction)
        return True
