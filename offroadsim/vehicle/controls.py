"""Discrete driver input.

ControlState is mutated only by key edge events between frames and read
once per tick by the VehicleController.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set

logger = logging.getLogger(__name__)


class ControlAction(Enum):
    """Actions a key can be bound to."""
    ACCELERATE = "accelerate"
    REVERSE = "reverse"
    STEER_LEFT = "steer_left"
    STEER_RIGHT = "steer_right"
    PARKING_BRAKE = "parking_brake"
    RESET = "reset"
    DRIVE_MODE = "drive_mode"
    QUIT = "quit"


# Held while the key is down
HOLD_ACTIONS = {
    ControlAction.ACCELERATE: "accelerate",
    ControlAction.REVERSE: "reverse",
    ControlAction.STEER_LEFT: "steer_left",
    ControlAction.STEER_RIGHT: "steer_right",
}

# Fired once on key down, handled by the host loop
HOST_ACTIONS = (ControlAction.RESET, ControlAction.DRIVE_MODE, ControlAction.QUIT)


# Key names as reported by pygame.key.name()
DEFAULT_BINDINGS: Dict[str, ControlAction] = {
    "w": ControlAction.ACCELERATE,
    "up": ControlAction.ACCELERATE,
    "s": ControlAction.REVERSE,
    "down": ControlAction.REVERSE,
    "a": ControlAction.STEER_LEFT,
    "left": ControlAction.STEER_LEFT,
    "d": ControlAction.STEER_RIGHT,
    "right": ControlAction.STEER_RIGHT,
    "space": ControlAction.PARKING_BRAKE,
    "r": ControlAction.RESET,
    "c": ControlAction.DRIVE_MODE,
    "escape": ControlAction.QUIT,
}


@dataclass
class ControlState:
    """Driver intent plus the derived braking flag."""
    accelerate: bool = False
    reverse: bool = False
    steer_left: bool = False
    steer_right: bool = False
    parking_brake_engaged: bool = False
    is_braking: bool = False  # written by the controller each tick

    def toggle_parking_brake(self) -> bool:
        """Flip the parking brake; returns the new engagement."""
        self.parking_brake_engaged = not self.parking_brake_engaged
        return self.parking_brake_engaged

    def release_all(self) -> None:
        """Clear held movement inputs (parking brake untouched)."""
        self.accelerate = False
        self.reverse = False
        self.steer_left = False
        self.steer_right = False


class KeyboardInput:
    """Translates key edges into ControlState changes and host actions.

    Several keys may map to the same action (letters and arrows); an action
    stays active while any of its keys is held. OS key auto-repeat is
    ignored so a held toggle key flips only once.
    """

    def __init__(self, controls: ControlState,
                 bindings: Optional[Dict[str, ControlAction]] = None):
        self.controls = controls
        self.bindings = dict(bindings or DEFAULT_BINDINGS)
        self._held: Set[str] = set()

    def key_event(self, key_name: str, is_down: bool) -> Optional[ControlAction]:
        """Apply one key edge.

        Args:
            key_name: Key name, e.g. "w" or "up"
            is_down: True on press, False on release

        Returns:
            The host action to perform (reset, drive mode, quit), or None
        """
        key_name = key_name.lower()
        action = self.bindings.get(key_name)
        if action is None:
            return None

        if is_down:
            if key_name in self._held:
                return None
            self._held.add(key_name)
        else:
            self._held.discard(key_name)

        if action in HOLD_ACTIONS:
            held = any(self.bindings.get(k) is action for k in self._held)
            setattr(self.controls, HOLD_ACTIONS[action], held)
            return None

        if not is_down:
            return None

        if action is ControlAction.PARKING_BRAKE:
            engaged = self.controls.toggle_parking_brake()
            logger.debug("Parking brake %s", "engaged" if engaged else "released")
            return None

        return action
