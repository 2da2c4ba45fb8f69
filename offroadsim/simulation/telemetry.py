"""Per-tick telemetry capture for plotting and summaries."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np


@dataclass
class TelemetrySample:
    """One tick of recorded vehicle state."""
    time: float
    x: float
    y: float
    z: float
    forward_speed: float
    steering: float
    engine_force: float
    brake_force: float
    friction: float
    state: str


@dataclass
class TelemetryRecorder:
    """Collects samples, optionally keeping only the most recent ones."""
    max_samples: int = 0  # 0 keeps everything
    samples: List[TelemetrySample] = field(default_factory=list)

    def record(self, sample: TelemetrySample) -> None:
        self.samples.append(sample)
        if self.max_samples and len(self.samples) > self.max_samples:
            del self.samples[0]

    def clear(self) -> None:
        self.samples.clear()

    def __len__(self) -> int:
        return len(self.samples)

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Numeric channels as numpy arrays keyed by field name."""
        channels = ("time", "x", "y", "z", "forward_speed", "steering",
                    "engine_force", "brake_force", "friction")
        return {
            name: np.array([getattr(s, name) for s in self.samples], dtype=float)
            for name in channels
        }

    def distance_travelled(self) -> float:
        """Path length in the ground plane."""
        if len(self.samples) < 2:
            return 0.0
        data = self.as_arrays()
        return float(np.sum(np.hypot(np.diff(data["x"]), np.diff(data["z"]))))
