"""
Visual configuration and color schemes for the traffic simulation visualizer.
"""
from entities.car import DrawCarStatus, VehicleType


class Colors:
    """Color palette for the visualizer"""

    BG = (15, 23, 42)  # Dark blue-gray

    # Roads, shaded by occupation (green -> yellow -> red)
    TRAFFIC_LOW = (34, 197, 94)
    TRAFFIC_MEDIUM = (234, 179, 8)
    TRAFFIC_HIGH = (239, 68, 68)
    TURN = (71, 85, 105)

    NODE = (80, 80, 80)
    NODE_OUTLINE = (37, 99, 235)

    LIGHT_GREEN = (50, 255, 100)
    LIGHT_RED = (255, 50, 50)
    LIGHT_CASE = (40, 40, 40)

    # Vehicle bodies, by type when moving
    VEHICLE = {
        VehicleType.CAR: (96, 165, 250),
        VehicleType.BIKE: (168, 85, 247),
        VehicleType.BUS: (250, 204, 21),
    }
    # Any stuck vehicle
    VEHICLE_STUCK = (239, 68, 68)

    TEXT = (241, 245, 249)
    TEXT_DIM = (148, 163, 184)

    @classmethod
    def for_car(cls, status: DrawCarStatus, vehicle_type: VehicleType):
        if status == DrawCarStatus.STUCK:
            return cls.VEHICLE_STUCK
        return cls.VEHICLE[vehicle_type]


class Sizes:
    """Size constants, in meters unless stated otherwise"""

    LANE_WIDTH = 2.5
    TURN_WIDTH = 1.5
    VEHICLE_WIDTH = 1.8
    NODE_RADIUS = 3.0
    LIGHT_RADIUS = 0.8

    # Screen pixels
    MIN_LINE_PX = 1
    MARGIN = 60


class Fonts:
    """Font configuration"""

    MEDIUM = 20
    TINY = 14


class Animation:
    """Animation and timing constants"""

    ZOOM_SPEED = 0.1
    TARGET_FPS = 60
