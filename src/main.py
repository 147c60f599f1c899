"""
Main entry point for the traffic simulation application.

This script handles command-line argument parsing, map file loading,
and the initialization of the main simulation loop.
"""
import os
from os import path

from cli import parse_arguments, debug_log
from core.fs.parser import import_map
from core.simulation import Simulation


def init_required_files_and_folders():
    """
    Ensures that necessary directories for storing results exist.
    """
    target_path = path.join("data", "results")
    os.makedirs(target_path, exist_ok=True)


def run_simulation_from_file(file_path: str, tps: float, show_viz: bool, max_ticks: int = None):
    """
    Loads a map file and runs the traffic simulation.

    Every vehicle listed in the map is placed before the loop starts, so a
    vehicle that cannot fit on its first lane stops the run right away with a
    ScenarioError instead of failing mid-simulation.

    Args:
        file_path (str): The path to the .map file.
        tps (float): The number of simulation steps to run per second.
        show_viz (bool): If True, the graphical visualizer will be enabled.
        max_ticks (int): Stop after this many steps; run until interrupted if None.
    """
    init_required_files_and_folders()

    print(f"Loading configuration from '{file_path}'...\n")
    graph, cars, spawners = import_map(file_path)

    print(f"Graph loaded: {len(graph.graph.nodes)} nodes, {len(graph.graph.edges)} lanes")
    print(f"Initial vehicles: {len(cars)}")
    print(f"Spawners: {len(spawners)}")

    print("\nGenerating graph map image...")
    file_name = path.basename(file_path).split('.')[0]
    graph.show_map(file_name)
    print(f"Map image saved to data/results/{file_name}.png")

    viz = None
    if show_viz:
        # Imported here so headless runs never initialize pygame.
        from ui.visualizer import Visualizer
        print("\nInitializing visualizer...")
        viz = Visualizer(graph)

    simulation = Simulation(graph, tps, visualizer=viz)
    simulation.spawners = spawners

    print("\n----- Initial Vehicles -----")
    for car in cars:
        if simulation.add_vehicle(car):
            debug_log(f"{car.id} added with path: {list(car.path)}")
        else:
            print(f"Warning: start of {car.current_step} is occupied, {car.id} was not added")

    print(f"\nLaunching simulation at {tps} TPS... (Press Ctrl+C to stop)")
    simulation.running = True
    try:
        while simulation.running:
            simulation.tick()
            if max_ticks is not None and simulation.t >= max_ticks:
                simulation.running = False
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user.")
    finally:
        if viz:
            viz.close()
        print(f"\nSimulation finished after {simulation.t} steps ({simulation.time:.1f}s simulated), "
              f"{simulation.finished} vehicles arrived, {len(simulation.cars)} still on the road.")


if __name__ == "__main__":
    args = parse_arguments()

    debug_log(f"Map file: {args.map}")
    debug_log(f"TPS: {args.tps}")
    debug_log(f"Visualizer enabled: {args.visualizer}")

    run_simulation_from_file(
        file_path=args.map,
        tps=args.tps,
        show_viz=args.visualizer,
        max_ticks=args.ticks
    )
