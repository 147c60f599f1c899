"""
Main visualizer class for the traffic simulation.
Handles the window, user input and camera controls, and draws one frame per update.
"""
import ctypes

import pygame

from ui.camera import Camera
from ui.renderer import Renderer
from ui.styles import Animation, Sizes

# Attempt to set high DPI awareness for sharper rendering on Windows.
try:
    ctypes.windll.user32.SetProcessDPIAware()
except AttributeError:
    pass


class Visualizer:
    """
    Pygame window showing the road network and the body of every vehicle.
    """

    def __init__(self, graph, width: int = 1400, height: int = 900):
        pygame.init()
        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("Traffic Simulation")

        self.graph = graph
        self.camera = Camera(width, height)
        self.renderer = Renderer(self.screen)
        self.clock = pygame.time.Clock()

        self._fit_camera_to_content()

    def _fit_camera_to_content(self):
        """Adjusts the camera's zoom and position to fit every lane."""
        points = [pt for lane in self.graph.get_lanes() for pt in lane.geometry.points]
        if not points:
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        self.camera.fit_bounds(min(xs), max(xs), min(ys), max(ys), margin=Sizes.MARGIN)

    def update(self, simulation):
        """
        Draws the current state of the simulation.
        """
        to_screen = self.camera.world_to_screen
        zoom = self.camera.zoom
        self.renderer.clear()

        for lane in self.graph.get_lanes():
            queue = simulation.queues.get(lane.id)
            occupation = queue.get_occupation_ratio() if queue else 0.0
            self.renderer.draw_lane(lane, occupation, to_screen, zoom)

        for turn in self.graph.turns.values():
            self.renderer.draw_turn(turn, to_screen, zoom)

        for node_id in self.graph.graph.nodes:
            self.renderer.draw_node(self.graph.get_node_pos(node_id), to_screen, zoom)

        for draw_car in simulation.get_draw_cars():
            self.renderer.draw_car(draw_car, to_screen, zoom)

        self.renderer.draw_traffic_lights(self.graph, to_screen, zoom)
        self.renderer.draw_hud(simulation.time, len(simulation.cars), simulation.finished)
        self.renderer.draw_controls_help(self.height)

        pygame.display.flip()
        self.clock.tick(Animation.TARGET_FPS)

    def handle_events(self) -> bool:
        """
        Processes all user input from the Pygame event queue.
        Returns False if the simulation should exit.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            elif event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
                self.renderer.screen = self.screen
                self.camera.width, self.camera.height = self.width, self.height
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key == pygame.K_r:
                    self._fit_camera_to_content()
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button in (1, 2):
                    self.camera.start_pan(event.pos)
                elif event.button == 4:
                    self.camera.zoom_at(event.pos, 1)
                elif event.button == 5:
                    self.camera.zoom_at(event.pos, -1)
            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2):
                    self.camera.end_pan()
            elif event.type == pygame.MOUSEMOTION:
                if self.camera.is_panning:
                    self.camera.update_pan(event.pos)
        return True

    @staticmethod
    def close():
        """Shuts down Pygame."""
        pygame.quit()
