"""Exception types raised by the simulation.

Precondition violations abort the current tick, missing required visuals and
asset failures abort startup. Bad arguments use the builtin ValueError and
IndexError.
"""


class OffroadSimError(Exception):
    """Base class for simulation errors."""


class VehicleNotReadyError(OffroadSimError):
    """A vehicle or camera was used before construction completed."""


class StaleWheelTransformError(OffroadSimError):
    """Wheel transforms were read before update_wheel_transforms() ran."""


class MissingNodeError(OffroadSimError):
    """A required visual node is absent from the loaded model."""

    def __init__(self, node_name: str, available=()):
        self.node_name = node_name
        self.available = tuple(available)
        listing = ", ".join(self.available) or "none"
        super().__init__(f"Required node '{node_name}' not found. Available: {listing}")


class AssetLoadError(OffroadSimError):
    """Terrain or vehicle model could not be built."""
