from typing import List, Tuple

import config
from core.errors import ScenarioError
from core.fs.tokenizer import VEHICLE_KEYWORDS, Token, TokenType, Tokenizer
from core.graph import RoadGraph
from entities.car import Car, CarID, VehicleType
from entities.vehicle_spawner import VehicleSpawner
from models.intersections.traffic_light_intersection import TrafficLightIntersection

SECTIONS = (TokenType.VEHICLES, TokenType.SPAWNERS, TokenType.INTERSECTIONS)


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def current_token(self) -> Token:
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def advance(self):
        self.pos += 1

    def expect(self, *token_types: TokenType) -> Token:
        token = self.current_token()
        if token.type not in token_types:
            expected = " or ".join(t.value for t in token_types)
            raise SyntaxError(f"Expected {expected}, found {token.type.value} at line {token.line}")
        self.advance()
        return token

    def skip_newlines(self):
        while self.current_token().type == TokenType.NEWLINE:
            self.advance()

    def parse_params(self) -> dict:
        """Parses trailing `key=value` pairs; values are numbers or bare words."""
        params = {}
        while self.current_token().type == TokenType.IDENTIFIER:
            key = self.expect(TokenType.IDENTIFIER).value
            self.expect(TokenType.EQUALS)
            value = self.expect(TokenType.NUMBER, TokenType.IDENTIFIER, *VEHICLE_KEYWORDS).value
            params[key] = value
        return params

    def parse_graph(self) -> dict:
        self.skip_newlines()
        self.expect(TokenType.GRAPH)
        self.expect(TokenType.COLON)
        self.skip_newlines()

        nodes = {}
        edges = []

        while self.current_token().type in (TokenType.NODE, TokenType.UEDGE, TokenType.BEDGE):
            if self.current_token().type == TokenType.NODE:
                node_id, x, y = self.parse_node()
                nodes[node_id] = (x, y)
            else:
                edges.append(self.parse_edge())
            self.skip_newlines()

        return {"nodes": nodes, "edges": edges}

    def parse_node(self) -> Tuple[str, float, float]:
        self.expect(TokenType.NODE)
        node_id = self.expect(TokenType.IDENTIFIER).value
        self.expect(TokenType.LPAREN)
        x = self.expect(TokenType.NUMBER).value
        self.expect(TokenType.COMMA)
        y = self.expect(TokenType.NUMBER).value
        self.expect(TokenType.RPAREN)
        return node_id, x, y

    def parse_edge(self) -> Tuple[TokenType, str, str, dict, int]:
        token = self.expect(TokenType.UEDGE, TokenType.BEDGE)
        from_node = self.expect(TokenType.IDENTIFIER).value
        to_node = self.expect(TokenType.IDENTIFIER).value
        return token.type, from_node, to_node, self.parse_params(), token.line

    def parse_sections(self) -> dict:
        """Parses the optional sections following the graph, in any order."""
        sections = {"vehicles": [], "spawners": [], "intersections": []}
        self.skip_newlines()

        while self.current_token().type in SECTIONS:
            section = self.current_token().type
            self.advance()
            self.expect(TokenType.COLON)
            self.skip_newlines()

            if section == TokenType.VEHICLES:
                while self.current_token().type in VEHICLE_KEYWORDS:
                    sections["vehicles"].append(self.parse_vehicle())
                    self.skip_newlines()
            elif section == TokenType.SPAWNERS:
                while self.current_token().type == TokenType.SPAWNER:
                    sections["spawners"].append(self.parse_spawner())
                    self.skip_newlines()
            else:
                while self.current_token().type == TokenType.TRAFFIC_LIGHT:
                    sections["intersections"].append(self.parse_traffic_light())
                    self.skip_newlines()

        self.expect(TokenType.EOF)
        return sections

    def parse_vehicle(self) -> dict:
        # Format: CAR c1 (A, C) length=4.5 max_speed=12
        kind = self.expect(*VEHICLE_KEYWORDS)
        vehicle_id = self.expect(TokenType.IDENTIFIER, TokenType.NUMBER).value

        self.expect(TokenType.LPAREN)
        start_node = self.expect(TokenType.IDENTIFIER).value
        self.expect(TokenType.COMMA)
        end_node = self.expect(TokenType.IDENTIFIER).value
        self.expect(TokenType.RPAREN)

        return {
            "id": str(vehicle_id),
            "type": VehicleType.from_label(kind.value),
            "start": start_node,
            "end": end_node,
            "params": self.parse_params(),
            "line": kind.line,
        }

    def parse_spawner(self) -> dict:
        # Format: SPAWNER A ratio=0.5 type=bike
        token = self.expect(TokenType.SPAWNER)
        node_id = self.expect(TokenType.IDENTIFIER).value
        return {"node": node_id, "params": self.parse_params(), "line": token.line}

    def parse_traffic_light(self) -> dict:
        # Format: TRAFFIC_LIGHT B duration=20
        token = self.expect(TokenType.TRAFFIC_LIGHT)
        node_id = self.expect(TokenType.IDENTIFIER).value
        return {"node": node_id, "params": self.parse_params(), "line": token.line}


def parse_map(content: str):
    """
    Parses the text of a .map file and builds the objects it describes.

    Returns:
        A (graph, cars, spawners) tuple.
    """
    tokens = Tokenizer(content).tokenize()

    parser = Parser(tokens)
    graph_data = parser.parse_graph()
    sections = parser.parse_sections()

    graph = build_graph(graph_data)
    build_intersections(sections["intersections"], graph)
    cars = build_vehicles(sections["vehicles"], graph)
    spawners = build_spawners(sections["spawners"], graph)

    return graph, cars, spawners


def import_map(file_path: str):
    with open(file_path, "r") as f:
        content = f.read()
    return parse_map(content)


def build_graph(graph_data: dict) -> RoadGraph:
    graph = RoadGraph()

    for node_id, (x, y) in graph_data["nodes"].items():
        graph.add_node(node_id, x, y)

    for edge_type, from_node, to_node, params, line in graph_data["edges"]:
        for node_id in (from_node, to_node):
            if node_id not in graph_data["nodes"]:
                raise SyntaxError(f"Edge at line {line} uses undeclared node '{node_id}'")

        speed_limit = float(params.get("speed", config.DEFAULT_SPEED_LIMIT))

        if edge_type == TokenType.UEDGE:
            graph.add_lane(from_node, to_node, speed_limit)
        else:
            graph.add_lane_back_and_forth(from_node, to_node, speed_limit)

    return graph


def build_intersections(intersections_data: List[dict], graph: RoadGraph):
    for data in intersections_data:
        node_id = data["node"]
        if not graph.graph.has_node(node_id):
            raise SyntaxError(f"Traffic light at line {data['line']} is on undeclared node '{node_id}'")
        duration = float(data["params"].get("duration", 20.0))
        graph.add_intersection(TrafficLightIntersection(node_id, graph.get_incoming_nodes(node_id), duration))


def build_vehicles(vehicles_data: List[dict], graph: RoadGraph) -> List[Car]:
    cars = []
    for data in vehicles_data:
        try:
            path = graph.get_path(data["start"], data["end"])
        except RuntimeError:
            print(f"Warning: cannot find a path from {data['start']} to {data['end']} "
                  f"for the vehicle {data['id']}")
            continue

        vehicle_type = data["type"]
        params = data["params"]
        length = float(params.get("length", vehicle_type.default_length))
        max_speed = params.get("max_speed", vehicle_type.default_max_speed)
        if max_speed is not None:
            max_speed = float(max_speed)

        cars.append(Car(CarID(data["id"], vehicle_type), length, path, max_speed=max_speed))
    return cars


def build_spawners(spawners_data: List[dict], graph: RoadGraph) -> List[VehicleSpawner]:
    spawners = []
    for data in spawners_data:
        node_id = data["node"]
        if not graph.graph.has_node(node_id):
            print(f"Warning: Spawner defined on non-existent node '{node_id}'")
            continue

        params = data["params"]
        ratio = float(params.get("ratio", 0.05))
        vehicle_type = VehicleType.from_label(str(params.get("type", "car")))
        length = float(params.get("length", vehicle_type.default_length))

        # Every car from this spawner must fit whole on its first lane.
        for _, dst in graph.graph.out_edges(node_id):
            lane = graph.get_lane(node_id, dst)
            if lane.length < length:
                raise ScenarioError(
                    f"Spawner at line {data['line']} makes {length}m vehicles, "
                    f"but {lane} is only {lane.length:.2f}m long"
                )

        spawners.append(VehicleSpawner(ratio, node_id, vehicle_type, length))
    return spawners
