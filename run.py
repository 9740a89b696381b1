"""
Main entry point for the goalie decision demo
"""
from argparse import ArgumentParser
import logging
import time

from goalie.defense_arbiter import DefenseArbiter
from goalie.simulation import ScenarioConfig, ScenarioWorld
from goalie.states import TargetGeometry
from goalie.trace import DecisionLogger, NullSink


def get_args():
    parser = ArgumentParser(description="Robotic goalie decision demo")

    parser.add_argument(
        "--ticks",
        type=int,
        default=100,
        help="Number of control cycles to run"
    )

    parser.add_argument(
        "--dt",
        type=float,
        default=0.1,
        help="Control cycle length (seconds)"
    )

    parser.add_argument(
        "--noise",
        type=float,
        default=0.0,
        help="Standard deviation of ball position noise (meters)"
    )

    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for sensor noise")
    parser.add_argument("--realtime", action="store_true", default=False,
                        help="Sleep dt between ticks like the robot's control loop")
    parser.add_argument("--log", action="store_true", default=False,
                        help="Save the decision trace to JSON")
    parser.add_argument("--log-dir", type=str, default="logs",
                        help="Directory for decision logs")
    parser.add_argument("--verbose", action="store_true", default=False,
                        help="Show per-tick debug messages")
    args = parser.parse_args()
    return args


def main():
    args = get_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s %(message)s"
    )

    print("="*70)
    print("ROBOTIC GOALIE DECISION DEMO")
    print("="*70)
    print(f"Configuration:")
    print(f"  Ticks: {args.ticks}")
    print(f"  Cycle: {args.dt}s")
    print(f"  Ball noise: {args.noise}m")

    scenario = ScenarioConfig(noise_std=args.noise)
    geometry = TargetGeometry(goal_center=scenario.goal_center, teammates=(scenario.teammate,))
    decision_logger = DecisionLogger(log_dir=args.log_dir)
    arbiter = DefenseArbiter(geometry=geometry, sink=decision_logger if args.log else NullSink())
    world = ScenarioWorld(arbiter=arbiter, config=scenario, seed=args.seed)

    try:
        for _ in range(args.ticks):
            action, state = world.step(args.dt)
            print(f"[t={world.t:6.2f}s] {state.value:<15} {action}")
            if args.realtime:
                time.sleep(args.dt)
    except KeyboardInterrupt:
        print("\nStopping...")

    game = world.game
    print("\n" + "="*70)
    print("RUN COMPLETE")
    print("="*70)
    print(f"  Ticks: {game.ticks}")
    print(f"  Plays completed: {game.plays_completed}")
    print(f"  Shots: {game.shots}, Passes: {game.passes}")

    if args.log:
        decision_logger.print_summary()
        decision_logger.save_log()


if __name__ == "__main__":
    main()
