import math
from typing import Dict, List, Optional, Tuple

import matplotlib
import matplotlib.pyplot as plt
import networkx as nx

import config
from models.intersections.base_intersection import BaseIntersection
from models.traversable import Lane, Traversable, Turn

# The map snapshot is written to a file, never shown.
matplotlib.use("Agg")


class RoadGraph:
    """
    Represents the road network as a directed graph.

    This class wraps a NetworkX DiGraph whose edges carry Lane objects. Turns
    between consecutive lanes are built on demand and cached, so that every
    car taking the same movement through a node shares the same Turn.
    """

    def __init__(self):
        self.graph = nx.DiGraph()
        self.intersections: Dict[str, BaseIntersection] = {}
        self.turns: Dict[Tuple[str, str], Turn] = {}

    def add_node(self, node_id: str, x: float, y: float):
        """Adds a node to the graph with specified coordinates."""
        self.graph.add_node(node_id, x=float(x), y=float(y))

    def get_node_pos(self, node_id: str) -> Tuple[float, float]:
        data = self.graph.nodes[node_id]
        return data['x'], data['y']

    def add_lane(self, src: str, dst: str, speed_limit: float = config.DEFAULT_SPEED_LIMIT,
                 offset: float = 0.0) -> Lane:
        """
        Adds a one-way lane between two existing nodes.

        Raises:
            RuntimeError: If one of the nodes does not exist.
        """
        for node_id in (src, dst):
            if not self.graph.has_node(node_id):
                raise RuntimeError(f"Cannot add a lane to unknown node '{node_id}'")
        lane = Lane(src, dst, self.get_node_pos(src), self.get_node_pos(dst), speed_limit, offset)
        self.graph.add_edge(src, dst, object=lane)
        return lane

    def add_lane_back_and_forth(self, a: str, b: str, speed_limit: float = config.DEFAULT_SPEED_LIMIT):
        """Adds one lane in each direction, each shifted to its own side of the road."""
        forth = self.add_lane(a, b, speed_limit, -config.LANE_OFFSET)
        back = self.add_lane(b, a, speed_limit, -config.LANE_OFFSET)
        return forth, back

    def get_lane(self, a: str, b: str) -> Lane:
        """
        Retrieves the lane going from `a` to `b`.

        Raises:
            RuntimeError: If no lane is found between the specified nodes.
        """
        edge_data = self.graph.get_edge_data(a, b)
        if edge_data is None:
            raise RuntimeError(f"No lane found from {a} to {b}")
        return edge_data["object"]

    def get_lanes(self) -> List[Lane]:
        return [data['object'] for _, _, data in self.graph.edges(data=True)]

    def get_turn(self, src_lane: Lane, dst_lane: Lane) -> Turn:
        """Returns the turn from one lane to the next, creating it on first use."""
        key = (src_lane.id, dst_lane.id)
        turn = self.turns.get(key)
        if turn is None:
            turn = Turn(src_lane, dst_lane, self.get_node_pos(src_lane.dst))
            self.turns[key] = turn
        return turn

    def get_node_path(self, src: str, dst: str) -> List[str]:
        """
        Calculates the fastest node sequence between two nodes using the A* algorithm.

        Raises:
            RuntimeError: If no path is found.
        """
        limits = [lane.speed_limit for lane in self.get_lanes()]
        top_speed = max(limits) if limits else config.DEFAULT_SPEED_LIMIT

        def euclidean_heuristic(u, v):
            # Straight-line time at the top speed never overestimates.
            x1, y1 = self.get_node_pos(u)
            x2, y2 = self.get_node_pos(v)
            return math.hypot(x1 - x2, y1 - y2) / top_speed

        try:
            return nx.astar_path(
                self.graph,
                src,
                dst,
                heuristic=euclidean_heuristic,
                weight=Lane.evaluate_weight
            )
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            raise RuntimeError(f"No path found between '{src}' and '{dst}' using A*")

    def get_path(self, src: str, dst: str) -> List[Traversable]:
        """
        Calculates the steps a car follows from `src` to `dst`: lanes alternating with turns.

        Raises:
            RuntimeError: If no path is found, or `src` and `dst` are the same node.
        """
        nodes = self.get_node_path(src, dst)
        if len(nodes) < 2:
            raise RuntimeError(f"No path with at least one lane between '{src}' and '{dst}'")

        lanes = [self.get_lane(a, b) for a, b in zip(nodes, nodes[1:])]
        steps: List[Traversable] = [lanes[0]]
        for prev_lane, next_lane in zip(lanes, lanes[1:]):
            steps.append(self.get_turn(prev_lane, next_lane))
            steps.append(next_lane)
        return steps

    def add_intersection(self, intersection: BaseIntersection):
        """Attaches intersection logic to an existing node."""
        if not self.graph.has_node(intersection.node_id):
            raise RuntimeError(f"Cannot control unknown node '{intersection.node_id}'")
        self.intersections[intersection.node_id] = intersection

    def get_intersection(self, node_id: str) -> Optional[BaseIntersection]:
        """Retrieves the intersection logic object for a given node ID."""
        return self.intersections.get(node_id)

    def get_incoming_nodes(self, node_id: str) -> List[str]:
        """Utility to get all nodes that have a lane leading to this node."""
        return list(self.graph.predecessors(node_id))

    def update_intersections(self, dt: float):
        """Called by the simulation at each step to update all intersection states."""
        for intersect in self.intersections.values():
            intersect.update(dt)

    def show_map(self, file_name: str, results_dir: str = "data/results"):
        """
        Draws every lane geometry and node, and saves the figure to a PNG file.
        """
        fig, ax = plt.subplots(figsize=(10, 8))

        for lane in self.get_lanes():
            xs, ys = zip(*lane.geometry.points)
            ax.plot(xs, ys, color='slategray', linewidth=2)
            (mx, my), angle = lane.geometry.dist_along(lane.length / 2)
            ax.annotate(
                "",
                xy=(mx + math.cos(angle), my + math.sin(angle)),
                xytext=(mx, my),
                arrowprops=dict(arrowstyle="->", color='slategray')
            )

        for node_id, data in self.graph.nodes(data=True):
            ax.scatter(data['x'], data['y'], s=300, color='skyblue', zorder=3)
            ax.annotate(node_id, (data['x'], data['y']), ha='center', va='center',
                        fontsize=10, fontweight='bold', zorder=4)

        ax.set_title("Map Visualization (Lane Geometry)")
        ax.set_aspect('equal')
        # Screen coordinates grow downwards, like in the visualizer.
        ax.invert_yaxis()
        fig.savefig(f"{results_dir}/{file_name}.png")
        plt.close(fig)
