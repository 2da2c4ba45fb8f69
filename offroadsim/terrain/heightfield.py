"""Static ground surfaces the wheels raycast against."""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from offroadsim.core.vector import Vector3


@dataclass
class RaycastHit:
    """Ground contact found by a wheel ray."""
    point: Vector3
    normal: Vector3
    distance: float


class Terrain:
    """Base ground surface described by a height function over X/Z."""

    # Ray marching resolution (m)
    march_step: float = 0.05
    bisection_iterations: int = 12

    def height_at(self, x: float, z: float) -> float:
        raise NotImplementedError

    def normal_at(self, x: float, z: float) -> Vector3:
        """Surface normal from central differences of the height function."""
        eps = 0.05
        dhdx = (self.height_at(x + eps, z) - self.height_at(x - eps, z)) / (2 * eps)
        dhdz = (self.height_at(x, z + eps) - self.height_at(x, z - eps)) / (2 * eps)
        return Vector3(-dhdx, 1.0, -dhdz).normalized()

    def raycast(self, origin: Vector3, direction: Vector3,
                max_distance: float) -> Optional[RaycastHit]:
        """Find the first ground intersection along a ray.

        Marches the ray in fixed steps, then bisects the bracketing
        interval. Returns None if the ray stays above ground.
        """
        direction = direction.normalized()

        def clearance(t: float) -> float:
            p = origin + direction * t
            return p.y - self.height_at(p.x, p.z)

        if clearance(0.0) <= 0.0:
            return self._hit(origin, direction, 0.0)

        steps = max(1, int(math.ceil(max_distance / self.march_step)))
        t_prev = 0.0
        for i in range(1, steps + 1):
            t = min(max_distance, i * self.march_step)
            if clearance(t) <= 0.0:
                lo, hi = t_prev, t
                for _ in range(self.bisection_iterations):
                    mid = 0.5 * (lo + hi)
                    if clearance(mid) > 0.0:
                        lo = mid
                    else:
                        hi = mid
                return self._hit(origin, direction, hi)
            t_prev = t

        return None

    def _hit(self, origin: Vector3, direction: Vector3, t: float) -> RaycastHit:
        point = origin + direction * t
        point.y = self.height_at(point.x, point.z)
        return RaycastHit(point=point, normal=self.normal_at(point.x, point.z), distance=t)


class FlatTerrain(Terrain):
    """Infinite horizontal plane."""

    def __init__(self, height: float = 0.0):
        self.height = height

    def height_at(self, x: float, z: float) -> float:
        return self.height

    def normal_at(self, x: float, z: float) -> Vector3:
        return Vector3.up()

    def raycast(self, origin: Vector3, direction: Vector3,
                max_distance: float) -> Optional[RaycastHit]:
        direction = direction.normalized()
        above = origin.y - self.height
        if above <= 0.0:
            return self._hit(origin, direction, 0.0)
        if direction.y >= -1e-9:
            return None
        t = above / -direction.y
        if t > max_distance:
            return None
        return self._hit(origin, direction, t)


class HeightfieldTerrain(Terrain):
    """Square heightfield centred on the origin.

    heights[i, j] is the height at x = -size/2 + i * spacing,
    z = -size/2 + j * spacing. Heights are bilinearly interpolated and
    clamped to the border outside the grid.
    """

    def __init__(self, heights: np.ndarray, size: float):
        heights = np.asarray(heights, dtype=float)
        if heights.ndim != 2 or heights.shape[0] < 2 or heights.shape[0] != heights.shape[1]:
            raise ValueError(f"heights must be a square grid of at least 2x2, got {heights.shape}")
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")
        if not np.all(np.isfinite(heights)):
            raise ValueError("heights contain non-finite values")

        self.heights = heights
        self.size = size
        self.resolution = heights.shape[0]
        self.spacing = size / (self.resolution - 1)

    @classmethod
    def generate(cls, size: float = 100.0, resolution: int = 51, amplitude: float = 1.2,
                 seed: int = 0, flat_radius: float = 8.0) -> HeightfieldTerrain:
        """Procedural rolling hills, flattened around the spawn point.

        Args:
            size: Edge length in meters
            resolution: Samples per edge
            amplitude: Peak hill height (m)
            seed: Random seed for wave phases and directions
            flat_radius: Radius around the origin blended down to zero height
        """
        if resolution < 2:
            raise ValueError(f"resolution must be at least 2, got {resolution}")

        rng = np.random.default_rng(seed)
        coords = np.linspace(-size / 2, size / 2, resolution)
        xs, zs = np.meshgrid(coords, coords, indexing="ij")

        heights = np.zeros_like(xs)
        n_waves = 4
        for _ in range(n_waves):
            angle = rng.uniform(0.0, 2 * math.pi)
            wavelength = rng.uniform(15.0, 40.0)
            phase = rng.uniform(0.0, 2 * math.pi)
            k = 2 * math.pi / wavelength
            heights += np.sin(k * (xs * math.cos(angle) + zs * math.sin(angle)) + phase)
        heights *= amplitude / n_waves

        # Smoothstep the spawn area flat
        if flat_radius > 0:
            r = np.sqrt(xs * xs + zs * zs)
            t = np.clip((r - flat_radius) / flat_radius, 0.0, 1.0)
            heights *= t * t * (3 - 2 * t)

        return cls(heights, size)

    def height_at(self, x: float, z: float) -> float:
        half = self.size / 2
        fx = (min(max(x, -half), half) + half) / self.spacing
        fz = (min(max(z, -half), half) + half) / self.spacing
        i = min(int(fx), self.resolution - 2)
        j = min(int(fz), self.resolution - 2)
        tx = fx - i
        tz = fz - j

        h = self.heights
        h0 = h[i, j] * (1 - tx) + h[i + 1, j] * tx
        h1 = h[i, j + 1] * (1 - tx) + h[i + 1, j + 1] * tx
        return float(h0 * (1 - tz) + h1 * tz)
