"""CLI for generating simulated Cox model data frames."""

import argparse
import dataclasses
import sys
from pathlib import Path

from ..data.scenarios import PREDEFINED_SCENARIOS, SimulationScenario, get_scenario
from ..simulation.logging import SimulationLogger
from ..simulation.runner import SimulationRunner


def main() -> int:
    """Main entry point for generate_data CLI.

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="python -m coxsim.cli.generate_data",
        description="Generate simulated duration data for the Cox model.",
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--scenario",
        type=str,
        choices=list(PREDEFINED_SCENARIOS.keys()),
        help="Predefined scenario name",
    )
    group.add_argument(
        "--config",
        type=Path,
        help="Path to custom scenario config file",
    )

    parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Output directory",
    )

    parser.add_argument(
        "--n-samples",
        type=int,
        help="Override observation count",
    )

    parser.add_argument(
        "--max-time",
        type=int,
        help="Override the latest time point",
    )

    parser.add_argument(
        "--num-data-frames",
        type=int,
        help="Override the number of replications",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )

    args = parser.parse_args()

    # Load scenario
    if args.scenario:
        scenario = get_scenario(args.scenario)
    else:
        if not args.config.exists():
            print(f"ERROR: Config file not found: {args.config}", file=sys.stderr)
            return 1
        scenario = SimulationScenario.from_json(args.config)

    overrides = {
        "n_samples": args.n_samples,
        "max_time": args.max_time,
        "num_data_frames": args.num_data_frames,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        scenario = dataclasses.replace(scenario, **overrides)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    # Generate data
    print(
        f"Generating {scenario.num_data_frames} {scenario.name} data frame(s) "
        f"with {scenario.n_samples} observations and T={scenario.max_time}..."
    )
    runner = SimulationRunner(scenario, seed=args.seed)
    with SimulationLogger(output_dir) as logger:
        results = runner.run(logger=logger)

    for i, result in enumerate(results, start=1):
        data_path = output_dir / f"{scenario.name}_{i}.csv"
        result.to_csv(data_path)
        result.baseline.to_frame().to_csv(
            output_dir / f"{scenario.name}_{i}_baseline.csv", index=False
        )
        print(f"Data saved to: {data_path}")
        print(f"  Rows: {len(result.data)}")
        print(f"  Censored: {result.censored_fraction:.1%}")
        print(f"  Marginal effect: {result.marg_effect:.3f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
