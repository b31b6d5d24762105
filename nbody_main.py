"""
Headless Orrery Driver
======================

Runs the Barnes-Hut gravity core for a fixed number of ticks and prints a
status line as it goes. This stands in for the interactive frame loop: each
tick hands one wall-clock frame time to the simulation manager, which scales
it to simulated time.

Usage:
    python nbody_main.py                                  # Solar system, 1 day per tick, 1 year
    python nbody_main.py --preset cluster --bodies 2000   # Random star cluster
    python nbody_main.py --theta 0.0                      # Exact pairwise forces
    python nbody_main.py --list-presets
"""

import argparse
import time

from config import physics as config
from orrery import SimulationManager, Stepper
from tools.presets import PRESETS, build_preset, print_preset_menu


def format_duration(seconds: float) -> str:
    """Human-readable simulated time."""
    days = seconds / 86400.0
    if days >= 365.25:
        return f"{days / 365.25:.2f} years"
    if days >= 1.0:
        return f"{days:.1f} days"
    return f"{seconds:.1f} s"


def print_bodies(manager: SimulationManager, limit: int = 10):
    for snapshot in manager.snapshots()[:limit]:
        p = snapshot.position
        print(f"  {snapshot.id:<12} {snapshot.kind:<11} at ({p.x:.3e}, {p.y:.3e}, {p.z:.3e})")
    if manager.body_count > limit:
        print(f"  ... and {manager.body_count - limit} more")


def run(preset: str, ticks: int, dt: float, time_scale: float, theta: float,
        bodies: int = None, seed: int = None, report_every: int = 30) -> SimulationManager:
    """Build the preset and advance it ``ticks`` times; returns the manager."""
    stepper = Stepper(theta=theta)
    manager = SimulationManager(build_preset(preset, n=bodies, seed=seed),
                                stepper=stepper, time_scale=time_scale)

    print(f"[Orrery] Preset '{preset}': {manager.body_count} bodies, θ={stepper.theta}")
    print(f"[Orrery] {ticks} ticks of {dt}s at {manager.effective_time_scale:.1f}x")

    start = time.perf_counter()
    for tick in range(1, ticks + 1):
        manager.update(dt)
        if report_every and (tick % report_every == 0 or tick == ticks):
            elapsed = time.perf_counter() - start
            print(f"[Orrery] Tick {tick:,}/{ticks:,} | t = {format_duration(manager.simulated_time)} | "
                  f"tree nodes: {stepper.last_node_count:,} | {tick / max(elapsed, 1e-9):.1f} ticks/s")

    print("[Orrery] Final state:")
    print_bodies(manager)
    return manager


def parse_args(argv=None):
    sim_cfg = config.SIMULATION
    parser = argparse.ArgumentParser(description="Headless Barnes-Hut orrery")
    parser.add_argument("--preset", "-p", default=sim_cfg["preset"], choices=sorted(PRESETS),
                        help="Body preset to simulate")
    parser.add_argument("--ticks", "-n", type=int, default=sim_cfg["ticks"], help="Number of ticks to run")
    parser.add_argument("--dt", type=float, default=sim_cfg["dt"], help="Wall-clock seconds per tick")
    parser.add_argument("--time-scale", type=float, default=sim_cfg["time_scale"],
                        help="Simulated seconds per wall-clock second")
    parser.add_argument("--theta", "-t", type=float, default=config.PHYSICS["theta"],
                        help="Barnes-Hut opening angle (0 = exact)")
    parser.add_argument("--bodies", "-b", type=int, help="Body count for generated presets")
    parser.add_argument("--seed", type=int, default=sim_cfg["seed"], help="Random seed for generated presets")
    parser.add_argument("--report-every", type=int, default=30, help="Ticks between status lines (0 = quiet)")
    parser.add_argument("--list-presets", action="store_true", help="List presets and exit")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.list_presets:
        print_preset_menu()
        return
    if args.ticks < 0:
        raise SystemExit("[Orrery] --ticks must be non-negative")
    if args.dt < 0:
        raise SystemExit("[Orrery] --dt must be non-negative")

    run(args.preset, args.ticks, args.dt, args.time_scale, args.theta,
        bodies=args.bodies, seed=args.seed, report_every=args.report_every)


if __name__ == "__main__":
    main()
