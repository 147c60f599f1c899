"""
Global configuration settings for the simulation.

This file contains global variables that can be accessed and modified by
different parts of the application. For example, the DEBUG flag is set
here and can be controlled via command-line arguments in cli.py.

Units: distances are in meters, durations in simulated seconds and speeds
in meters per second.
"""

# When True, enables detailed logging and other debugging features.
# This value is typically set at runtime by the argument parser.
DEBUG = False

# Simulated seconds advanced by every internal step.
TIME_STEP = 0.1

# Gap kept between the back of a car and the front of its follower.
FOLLOWING_DISTANCE = 1.0

# Lanes stop short of the node center by this much, leaving room for turns.
INTERSECTION_RADIUS = 3.0

# Perpendicular shift applied to each lane of a two-way road.
LANE_OFFSET = 1.5

# Used when an edge does not declare a speed.
DEFAULT_SPEED_LIMIT = 13.9

# Points sampled along a turn curve.
TURN_RESOLUTION = 8

# Tolerance for distance comparisons.
EPSILON = 1e-6
