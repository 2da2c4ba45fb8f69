"""Pygame-based real-time 3D wireframe renderer.

Draws the scene through the loop's active chase camera:
- Terrain grid following the ground height
- Friction zone outlines (mud)
- Boundary fence around heightfield terrain
- Chassis and wheel boxes, brake lights
- HUD with speed, drive state, friction and FPS
- Keyboard and mouse input routed to the simulation loop
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from offroadsim.camera.orbit import OrbitCamera
from offroadsim.core.vector import Vector3
from offroadsim.terrain.heightfield import HeightfieldTerrain

if TYPE_CHECKING:
    from offroadsim.simulation.loop import SimulationLoop
    from offroadsim.simulation.sync import SceneNode
    from offroadsim.terrain.friction_zones import TerrainFrictionZones
    from offroadsim.terrain.heightfield import Terrain
    from offroadsim.vehicle.controls import KeyboardInput


# Box corner signs and the 12 edges joining them
_BOX_CORNERS = [(sx, sy, sz) for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)]
_BOX_EDGES = [
    (a, b) for a in range(8) for b in range(a + 1, 8)
    if sum(1 for i in range(3) if _BOX_CORNERS[a][i] != _BOX_CORNERS[b][i]) == 1
]


@dataclass
class RenderConfig:
    """Renderer configuration."""
    width: int = 1280
    height: int = 720
    fov_degrees: float = 60.0
    near_plane: float = 0.1
    background_color: Tuple[int, int, int] = (30, 30, 35)
    grid_color: Tuple[int, int, int] = (60, 75, 60)
    mud_color: Tuple[int, int, int] = (130, 95, 50)
    fence_color: Tuple[int, int, int] = (139, 69, 19)
    chassis_color: Tuple[int, int, int] = (200, 200, 210)
    wheel_color: Tuple[int, int, int] = (110, 110, 120)
    brake_light_color: Tuple[int, int, int] = (255, 40, 40)
    brake_light_off_color: Tuple[int, int, int] = (90, 30, 30)
    text_color: Tuple[int, int, int] = (220, 220, 220)

    grid_spacing: float = 4.0      # Meters between terrain grid lines
    grid_extent: float = 100.0     # Used when the terrain has no size
    fence_height: float = 1.5
    fence_post_spacing: float = 4.0
    show_hud: bool = True
    orbit_sensitivity: float = 0.005  # Radians per pixel of mouse drag
    zoom_step: float = 0.9


class PygameRenderer:
    """Real-time perspective wireframe renderer using Pygame."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """Initialize renderer.

        Args:
            config: Render configuration. Uses defaults if None.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError(
                "Pygame is required for visualization. "
                "Install it with: pip install pygame"
            )

        self.config = config or RenderConfig()
        self._initialized = False

        self._screen = None
        self._clock = None
        self._font = None
        self._small_font = None

        self._focal = (self.config.height / 2) / math.tan(math.radians(self.config.fov_degrees) / 2)
        self._terrain_lines: List[List[Vector3]] = []
        self._terrain_id: Optional[int] = None
        self._dragging = False

    def init(self) -> None:
        """Initialize Pygame and create window."""
        pygame.init()
        pygame.display.set_caption("OffroadSim")

        self._screen = pygame.display.set_mode((self.config.width, self.config.height))
        self._clock = pygame.time.Clock()
        self._font = pygame.font.Font(None, 24)
        self._small_font = pygame.font.Font(None, 18)

        self._initialized = True

    def quit(self) -> None:
        """Clean up Pygame."""
        if self._initialized:
            pygame.quit()
            self._initialized = False

    def handle_input(self, loop: SimulationLoop, keyboard: KeyboardInput) -> None:
        """Route pending window events to the keyboard mapping and the loop.

        Args:
            loop: Simulation loop receiving host actions and camera input
            keyboard: Key edge translator writing the loop's ControlState
        """
        if not self._initialized:
            return

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                loop.running = False
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                is_down = event.type == pygame.KEYDOWN
                name = pygame.key.name(event.key)
                if name == "h" and is_down:
                    self.config.show_hud = not self.config.show_hud
                    continue
                loop.handle_action(keyboard.key_event(name, is_down))
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._dragging = True
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._dragging = False
            elif event.type == pygame.MOUSEMOTION and self._dragging:
                camera = loop.camera
                if isinstance(camera, OrbitCamera):
                    dx, dy = event.rel
                    sens = self.config.orbit_sensitivity
                    camera.rotate(-dx * sens, -dy * sens)
            elif event.type == pygame.MOUSEWHEEL:
                camera = loop.camera
                if isinstance(camera, OrbitCamera):
                    camera.zoom_by(self.config.zoom_step ** event.y)

    def frame_time(self, fps: int = 60) -> float:
        """Wait for the next frame; returns elapsed real time (s)."""
        if self._clock is None:
            return 1.0 / fps
        return self._clock.tick(fps) / 1000.0

    def get_fps(self) -> float:
        """Get current FPS."""
        return self._clock.get_fps() if self._clock else 0.0

    # -- projection ---------------------------------------------------

    def _project(self, view: np.ndarray, point: Vector3) -> Optional[Tuple[int, int]]:
        """World point to screen pixel; None if behind the near plane."""
        p = view @ np.array([point.x, point.y, point.z, 1.0])
        depth = -p[2]
        if depth < self.config.near_plane:
            return None
        sx = self.config.width / 2 + self._focal * p[0] / depth
        sy = self.config.height / 2 - self._focal * p[1] / depth
        return int(sx), int(sy)

    def _draw_polyline(self, view: np.ndarray, points: List[Vector3],
                       color: Tuple[int, int, int], closed: bool = False, width: int = 1) -> None:
        if closed:
            points = points + points[:1]
        projected = [self._project(view, p) for p in points]
        for a, b in zip(projected, projected[1:]):
            if a is not None and b is not None:
                pygame.draw.line(self._screen, color, a, b, width)

    # -- scene --------------------------------------------------------

    def _build_terrain_lines(self, terrain: Terrain) -> None:
        cfg = self.config
        extent = terrain.size if isinstance(terrain, HeightfieldTerrain) else cfg.grid_extent
        half = extent / 2
        coords = np.arange(-half, half + 1e-6, cfg.grid_spacing)

        lines = []
        for c in coords:
            lines.append([Vector3(c, terrain.height_at(c, z), z) for z in coords])
            lines.append([Vector3(x, terrain.height_at(x, c), c) for x in coords])
        self._terrain_lines = lines
        self._terrain_id = id(terrain)

    def _draw_terrain(self, view: np.ndarray, terrain: Terrain) -> None:
        if self._terrain_id != id(terrain):
            self._build_terrain_lines(terrain)
        for line in self._terrain_lines:
            self._draw_polyline(view, line, self.config.grid_color)

    def _draw_zones(self, view: np.ndarray, terrain: Terrain, zones: TerrainFrictionZones) -> None:
        for zone in zones.zones:
            corners = [(zone.min_x, zone.min_z), (zone.max_x, zone.min_z),
                       (zone.max_x, zone.max_z), (zone.min_x, zone.max_z)]
            outline = []
            for (x0, z0), (x1, z1) in zip(corners, corners[1:] + corners[:1]):
                for i in range(8):
                    t = i / 8
                    x = x0 + (x1 - x0) * t
                    z = z0 + (z1 - z0) * t
                    outline.append(Vector3(x, terrain.height_at(x, z) + 0.05, z))
            self._draw_polyline(view, outline, self.config.mud_color, closed=True, width=2)

    def _draw_fence(self, view: np.ndarray, terrain: Terrain) -> None:
        """Boundary fence around the terrain edge (visual only, no collision)."""
        if not isinstance(terrain, HeightfieldTerrain):
            return
        cfg = self.config
        half = terrain.size / 2
        edge = np.arange(-half, half + 1e-6, cfg.fence_post_spacing)
        perimeter = ([(x, -half) for x in edge] + [(half, z) for z in edge[1:]]
                     + [(x, half) for x in edge[::-1][1:]] + [(-half, z) for z in edge[::-1][1:-1]])

        rail = []
        for x, z in perimeter:
            ground = terrain.height_at(x, z)
            top = Vector3(x, ground + cfg.fence_height, z)
            rail.append(top)
            self._draw_polyline(view, [Vector3(x, ground, z), top], cfg.fence_color)
        self._draw_polyline(view, rail, cfg.fence_color, closed=True, width=2)

    def _box_corners(self, node: SceneNode) -> List[Vector3]:
        tf = node.transform
        half = node.half_extents
        return [
            tf.position + tf.orientation.rotate(Vector3(sx * half.x, sy * half.y, sz * half.z))
            for sx, sy, sz in _BOX_CORNERS
        ]

    def _draw_box(self, view: np.ndarray, node: SceneNode,
                  color: Tuple[int, int, int], width: int = 1) -> None:
        corners = [self._project(view, c) for c in self._box_corners(node)]
        for a, b in _BOX_EDGES:
            if corners[a] is not None and corners[b] is not None:
                pygame.draw.line(self._screen, color, corners[a], corners[b], width)

    def _draw_vehicle(self, view: np.ndarray, loop: SimulationLoop) -> None:
        rig = loop.rig
        if rig is None:
            return

        cfg = self.config
        self._draw_box(view, rig.chassis, cfg.chassis_color, 2)
        for node in rig.wheels.values():
            self._draw_box(view, node, cfg.wheel_color)

        for node in rig.brake_lights:
            if node is None:
                continue
            color = cfg.brake_light_color if node.intensity > 0 else cfg.brake_light_off_color
            points = [self._project(view, c) for c in self._box_corners(node)]
            visible = [p for p in points if p is not None]
            if len(visible) >= 3:
                pygame.draw.polygon(self._screen, color, visible)

    def _draw_hud(self, loop: SimulationLoop) -> None:
        if not self.config.show_hud:
            return

        vehicle = loop.vehicle
        controller = loop.controller
        zone = loop.friction_zones.zone_at(vehicle.chassis.position.x, vehicle.chassis.position.z)

        lines = [
            f"Speed: {vehicle.forward_speed * 3.6:.1f} km/h",
            f"State: {controller.state.value}",
            f"Steering: {math.degrees(controller.steering):.1f}°",
            f"Engine: {controller.engine_force:.0f} N",
            f"Brake: {controller.brake_force:.0f} N",
            f"Friction: {vehicle.friction_slip:.2f} ({zone.name if zone else 'ground'})",
            f"Parking brake: {'on' if loop.controls.parking_brake_engaged else 'off'}",
            f"Camera: {loop.mode.value}",
            f"FPS: {self.get_fps():.0f}",
        ]

        y = 10
        for line in lines:
            text = self._font.render(line, True, self.config.text_color)
            self._screen.blit(text, (10, y))
            y += 22

        help_lines = [
            "Controls:",
            "W/↑ - Accelerate",
            "S/↓ - Reverse / brake",
            "A/←, D/→ - Steer",
            "Space - Parking brake",
            "R - Reset",
            "C - Camera mode",
            "Mouse - Orbit / zoom",
            "H - Toggle HUD",
            "Esc - Quit",
        ]

        y = 10
        for line in help_lines:
            text = self._small_font.render(line, True, (150, 150, 160))
            self._screen.blit(text, (self.config.width - 170, y))
            y += 18

    def render(self, loop: SimulationLoop) -> None:
        """Render current frame through the loop's active camera.

        Args:
            loop: Simulation loop to draw
        """
        if not self._initialized:
            self.init()

        view = loop.camera.view_matrix()
        terrain = loop.world.terrain

        self._screen.fill(self.config.background_color)
        self._draw_terrain(view, terrain)
        self._draw_zones(view, terrain, loop.friction_zones)
        self._draw_fence(view, terrain)
        self._draw_vehicle(view, loop)
        self._draw_hud(loop)

        pygame.display.flip()
