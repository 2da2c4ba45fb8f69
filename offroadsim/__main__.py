"""CLI entry point for OffroadSim.

Run with: python -m offroadsim [command]

Commands:
    drive     - Interactive pygame driving window
    run       - Headless scripted drive with a printed summary
    plot      - Headless scripted drive, then telemetry plots
    info      - Show available presets and scripts
"""

import sys
import argparse
import dataclasses
import logging

logger = logging.getLogger("offroadsim")


def _load_config(args):
    """Preset plus CLI overrides; None on error (already reported)."""
    from offroadsim.config.tuning import SteerConflict
    from offroadsim.config.vehicle_presets import get_tuning_config

    try:
        config = get_tuning_config(args.vehicle)
        if args.steer_conflict:
            config = dataclasses.replace(config, steer_conflict=SteerConflict(args.steer_conflict))
    except ValueError as e:
        print(f"Error: {e}")
        return None
    return config


def _build(args, record=False, with_visuals=True):
    from offroadsim.errors import AssetLoadError
    from offroadsim.simulation.scenario import build_scenario

    config = _load_config(args)
    if config is None:
        return None
    try:
        return build_scenario(config, terrain=args.terrain, seed=args.seed,
                              constraint=args.camera, with_visuals=with_visuals, record=record)
    except AssetLoadError as e:
        logger.error("Scenario could not be built: %s", e)
        print(f"Error: {e}")
        return None


def run_drive(args):
    """Run the interactive driving window."""
    try:
        from offroadsim.visualization import PygameRenderer, RenderConfig
        renderer = PygameRenderer(RenderConfig(width=args.width, height=args.height))
    except ImportError:
        print("Error: Pygame is required for the drive command.")
        print("Install it with: pip install pygame")
        return 1

    from offroadsim.vehicle.controls import KeyboardInput

    print("OffroadSim Drive")
    print("=" * 40)
    print(f"Vehicle: {args.vehicle}")
    print()
    print("Controls:")
    print("  W/↑     - Accelerate")
    print("  S/↓     - Reverse (brakes while rolling forward)")
    print("  A/D     - Steer")
    print("  Space   - Parking brake")
    print("  R       - Reset")
    print("  C       - Follow / orbit camera")
    print("  Mouse   - Orbit and zoom (orbit camera)")
    print("  Esc     - Quit")
    print()

    loop = _build(args)
    if loop is None:
        return 1

    keyboard = KeyboardInput(loop.controls)
    renderer.init()

    print("Starting simulation...")
    try:
        while loop.running:
            renderer.handle_input(loop, keyboard)
            if not loop.running:
                break
            dt = renderer.frame_time(args.fps)
            loop.tick(dt, render=renderer.render)
    except KeyboardInterrupt:
        pass
    finally:
        renderer.quit()

    print("Simulation ended.")
    return 0


def _run_script(args):
    from offroadsim.simulation.scenario import get_drive_script, run_script

    try:
        script = get_drive_script(args.script)
    except ValueError as e:
        print(f"Error: {e}")
        return None, None

    loop = _build(args, record=True, with_visuals=False)
    if loop is None:
        return None, None

    run_script(loop, script, frame_dt=1.0 / args.fps)
    return loop, script


def run_headless(args):
    """Run a scripted drive and print a summary."""
    loop, script = _run_script(args)
    if loop is None:
        return 1

    recorder = loop.telemetry
    data = recorder.as_arrays()
    position = loop.vehicle.chassis.position

    print(f"Script: {script.name} - {script.description}")
    print("=" * 40)
    print(f"  Simulated time:   {loop.world.time:.2f} s ({loop.frame} ticks)")
    print(f"  Final position:   ({position.x:.2f}, {position.y:.2f}, {position.z:.2f})")
    print(f"  Final speed:      {loop.vehicle.forward_speed * 3.6:.1f} km/h")
    if len(recorder):
        print(f"  Top speed:        {data['forward_speed'].max() * 3.6:.1f} km/h")
        print(f"  Distance:         {recorder.distance_travelled():.2f} m")
        print(f"  Min friction:     {data['friction'].min():.2f}")
    print(f"  Final state:      {loop.controller.state.value}")
    if loop.aborted_ticks:
        print(f"  Aborted ticks:    {loop.aborted_ticks}")
    return 0


def plot_run(args):
    """Run a scripted drive and plot its telemetry."""
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("Error: Matplotlib is required for plotting.")
        print("Install it with: pip install matplotlib")
        return 1

    from offroadsim.visualization.plotter import TelemetryPlotter

    loop, script = _run_script(args)
    if loop is None:
        return 1

    print(f"Plotting telemetry for: {script.name}")

    fig = TelemetryPlotter.plot_telemetry(loop.telemetry)
    track = TelemetryPlotter.plot_trajectory(loop.telemetry, loop.friction_zones)

    if args.output:
        fig.savefig(args.output, dpi=150)
        stem, dot, ext = args.output.rpartition(".")
        track_path = f"{stem}_track.{ext}" if dot else f"{args.output}_track"
        track.savefig(track_path, dpi=150)
        print(f"Saved to: {args.output}, {track_path}")
    else:
        plt.show()

    return 0


def show_info(args):
    """Show available presets and information."""
    from offroadsim import __version__
    from offroadsim.config.vehicle_presets import VEHICLE_PRESETS
    from offroadsim.simulation.scenario import DRIVE_SCRIPTS

    print(f"OffroadSim v{__version__}")
    print("=" * 40)
    print()

    print("Vehicle Presets:")
    print("-" * 30)
    for name, info in VEHICLE_PRESETS.items():
        print(f"  {name:15} - {info['description']}")
    print()

    print("Drive Scripts:")
    print("-" * 30)
    for name, script in DRIVE_SCRIPTS.items():
        print(f"  {name:15} - {script.description} ({script.duration:.0f}s)")
    print()

    return 0


def _add_scenario_arguments(parser):
    parser.add_argument(
        "-v", "--vehicle",
        default="offroad",
        help="Vehicle preset to use (default: offroad)"
    )
    parser.add_argument(
        "--terrain",
        default="hills",
        choices=["hills", "flat"],
        help="Terrain type (default: hills)"
    )
    parser.add_argument(
        "--seed",
        type=int, default=0,
        help="Terrain generation seed (default: 0)"
    )
    parser.add_argument(
        "--camera",
        default="radius",
        choices=["radius", "height"],
        help="Orbit camera constraint (default: radius)"
    )
    parser.add_argument(
        "--steer-conflict",
        choices=["right_wins", "left_wins", "cancel"],
        help="Left+right steering resolution (default: preset's)"
    )
    parser.add_argument(
        "--fps",
        type=int, default=60,
        help="Frame rate (default: 60)"
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="OffroadSim - Offroad vehicle sandbox with chase cameras",
        prog="offroadsim"
    )
    parser.add_argument(
        "--version", action="version",
        version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Drive command
    drive_parser = subparsers.add_parser("drive", help="Drive interactively")
    _add_scenario_arguments(drive_parser)
    drive_parser.add_argument("--width", type=int, default=1280, help="Window width")
    drive_parser.add_argument("--height", type=int, default=720, help="Window height")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run a scripted drive headless")
    _add_scenario_arguments(run_parser)
    run_parser.add_argument(
        "-s", "--script",
        default="mud",
        help="Drive script to run (default: mud)"
    )

    # Plot command
    plot_parser = subparsers.add_parser("plot", help="Plot telemetry of a scripted drive")
    _add_scenario_arguments(plot_parser)
    plot_parser.add_argument(
        "-s", "--script",
        default="slalom",
        help="Drive script to run (default: slalom)"
    )
    plot_parser.add_argument(
        "-o", "--output",
        help="Save plot to file instead of displaying"
    )

    # Info command
    subparsers.add_parser("info", help="Show available presets")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "drive":
        return run_drive(args)
    elif args.command == "run":
        return run_headless(args)
    elif args.command == "plot":
        return plot_run(args)
    elif args.command == "info":
        return show_info(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
