"""
Rendering system for drawing lanes, turns, nodes, vehicle bodies and UI elements.
"""

from typing import Callable, Tuple

import pygame

from core.polyline import PolyLine, offset_line
from entities.car import DrawCarInput
from ui.styles import Colors, Fonts, Sizes


def lerp_color(color1: Tuple[int, int, int], color2: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    """
    Linear interpolation between two RGB colors.

    :param t: Interpolation factor (0 to 1)
    """
    return tuple(int(a + t * (b - a)) for a, b in zip(color1, color2))


def traffic_color(occupation: float) -> Tuple[int, int, int]:
    """Green when empty, yellow half full, red when full."""
    if occupation < 0.5:
        return lerp_color(Colors.TRAFFIC_LOW, Colors.TRAFFIC_MEDIUM, occupation / 0.5)
    return lerp_color(Colors.TRAFFIC_MEDIUM, Colors.TRAFFIC_HIGH, (occupation - 0.5) / 0.5)


class Renderer:
    """
    Draws the simulation on a pygame surface. Every method takes world
    geometry and a `to_screen` conversion function from the camera.
    """

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        pygame.font.init()
        self.font_medium = pygame.font.SysFont("Arial", Fonts.MEDIUM, bold=True)
        self.font_tiny = pygame.font.SysFont("Arial", Fonts.TINY)

    def clear(self):
        self.screen.fill(Colors.BG)

    def _draw_polyline(self, polyline: PolyLine, to_screen: Callable, color, width_m: float, zoom: float):
        width = max(Sizes.MIN_LINE_PX, int(width_m * zoom))
        points = [to_screen(pt) for pt in polyline.points]
        pygame.draw.lines(self.screen, color, False, points, width)

    def draw_lane(self, lane, occupation: float, to_screen: Callable, zoom: float):
        self._draw_polyline(lane.geometry, to_screen, traffic_color(occupation), Sizes.LANE_WIDTH, zoom)

    def draw_turn(self, turn, to_screen: Callable, zoom: float):
        self._draw_polyline(turn.geometry, to_screen, Colors.TURN, Sizes.TURN_WIDTH, zoom)

    def draw_node(self, pos: Tuple[float, float], to_screen: Callable, zoom: float):
        radius = max(2, int(Sizes.NODE_RADIUS * zoom))
        center = to_screen(pos)
        pygame.draw.circle(self.screen, Colors.NODE, center, radius)
        pygame.draw.circle(self.screen, Colors.NODE_OUTLINE, center, radius, 1)

    def draw_traffic_lights(self, graph, to_screen: Callable, zoom: float):
        """
        Draws one light at the end of each lane entering a controlled node.
        """
        radius = max(2, int(Sizes.LIGHT_RADIUS * zoom))
        for node_id, intersection in graph.intersections.items():
            for src in graph.get_incoming_nodes(node_id):
                lane = graph.get_lane(src, node_id)
                color = Colors.LIGHT_GREEN if intersection.get_state(src) == "GREEN" else Colors.LIGHT_RED
                center = to_screen(lane.geometry.last_pt())
                pygame.draw.circle(self.screen, Colors.LIGHT_CASE, center, radius + 1)
                pygame.draw.circle(self.screen, color, center, radius)

    def draw_car(self, draw_car: DrawCarInput, to_screen: Callable, zoom: float):
        """
        Draws a body as a thick polyline with a marker on its front.
        """
        color = Colors.for_car(draw_car.status, draw_car.vehicle_type)
        self._draw_polyline(draw_car.body, to_screen, color, Sizes.VEHICLE_WIDTH, zoom)

        # Front bumper, across the last segment of the body.
        points = draw_car.body.points
        half = Sizes.VEHICLE_WIDTH / 2
        _, b = offset_line(points[-2], points[-1], half)
        _, d = offset_line(points[-2], points[-1], -half)
        pygame.draw.line(self.screen, Colors.TEXT, to_screen(b), to_screen(d), max(1, int(0.3 * zoom)))

    def draw_hud(self, sim_time: float, active: int, finished: int):
        lines = [
            f"t = {sim_time:.1f}s",
            f"Vehicles: {active} active, {finished} arrived",
        ]
        surf = self.font_medium.render(lines[0], True, Colors.TEXT)
        self.screen.blit(surf, (20, 20))
        surf = self.font_tiny.render(lines[1], True, Colors.TEXT_DIM)
        self.screen.blit(surf, (20, 48))

    def draw_controls_help(self, height: int):
        help_text = ["L-Click + Drag: Pan", "Wheel: Zoom", "R: Reset View", "Esc: Quit"]
        y = height - 20 - 15 * len(help_text)
        for line in help_text:
            surf = self.font_tiny.render(line, True, Colors.TEXT_DIM)
            self.screen.blit(surf, (20, y))
            y += 15

