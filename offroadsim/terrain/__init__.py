"""Terrain surfaces and traction zones."""

from offroadsim.terrain.heightfield import (
    FlatTerrain, HeightfieldTerrain, RaycastHit, Terrain
)
from offroadsim.terrain.friction_zones import FrictionZone, TerrainFrictionZones

__all__ = [
    "Terrain",
    "FlatTerrain",
    "HeightfieldTerrain",
    "RaycastHit",
    "FrictionZone",
    "TerrainFrictionZones",
]
