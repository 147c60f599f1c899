"""
Camera system for panning and zooming in the visualization.
"""

from typing import Tuple
from ui.styles import Animation


class Camera:
    """
    Maps world coordinates (meters) to screen pixels.

    (x, y) is the world point shown at the center of the viewport and zoom
    is in pixels per meter.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.x = 0.0
        self.y = 0.0
        self.zoom = 1.0
        self.min_zoom = 0.05
        self.max_zoom = 50.0

        self.is_panning = False
        self._pan_anchor = None

    def start_pan(self, mouse_pos: Tuple[int, int]):
        self.is_panning = True
        self._pan_anchor = (mouse_pos, (self.x, self.y))

    def update_pan(self, mouse_pos: Tuple[int, int]):
        if not self.is_panning:
            return
        (mx, my), (cx, cy) = self._pan_anchor
        self.x = cx - (mouse_pos[0] - mx) / self.zoom
        self.y = cy - (mouse_pos[1] - my) / self.zoom

    def end_pan(self):
        self.is_panning = False

    def zoom_at(self, mouse_pos: Tuple[int, int], delta: float):
        """
        Zooms in (delta > 0) or out (delta < 0), keeping the point under the mouse in place.
        """
        before = self.screen_to_world(mouse_pos)
        self.zoom = max(self.min_zoom, min(self.max_zoom, self.zoom * (1.0 + delta * Animation.ZOOM_SPEED)))
        after = self.screen_to_world(mouse_pos)
        self.x += before[0] - after[0]
        self.y += before[1] - after[1]

    def world_to_screen(self, world_pos: Tuple[float, float]) -> Tuple[int, int]:
        wx, wy = world_pos
        return (int((wx - self.x) * self.zoom + self.width / 2),
                int((wy - self.y) * self.zoom + self.height / 2))

    def screen_to_world(self, screen_pos: Tuple[int, int]) -> Tuple[float, float]:
        sx, sy = screen_pos
        return ((sx - self.width / 2) / self.zoom + self.x,
                (sy - self.height / 2) / self.zoom + self.y)

    def fit_bounds(self, min_x: float, max_x: float, min_y: float, max_y: float, margin: float = 60):
        """Centers the view on a bounding box and zooms so that it fits the viewport."""
        self.x = (min_x + max_x) / 2
        self.y = (min_y + max_y) / 2

        # A straight corridor has no extent on one axis.
        range_x, range_y = max(max_x - min_x, 1.0), max(max_y - min_y, 1.0)
        self.zoom = min((self.width - 2 * margin) / range_x, (self.height - 2 * margin) / range_y)
        self.zoom = max(self.min_zoom, min(self.max_zoom, self.zoom))
