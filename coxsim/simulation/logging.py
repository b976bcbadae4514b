"""Run logging for simulations: run info JSON and per-replication CSV."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

from .results import SimulationResult


class SimulationLogger:
    """CSV and JSON logger for a simulation run.

    Writes ``run_info.json`` once and appends one row per replication to
    ``replications.csv``.

    Args:
        output_dir: Directory for log files.
        append: If True, append to an existing replications file.
    """

    FIELDNAMES = [
        "replication",
        "n_rows",
        "n_observations",
        "censored_fraction",
        "admin_censored",
        "marg_effect",
        "timestamp",
    ]

    def __init__(self, output_dir: Union[str, Path], append: bool = False):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.csv_path = self.output_dir / "replications.csv"
        mode = "a" if append and self.csv_path.exists() else "w"
        self.file = open(self.csv_path, mode, newline="")
        self.writer = csv.DictWriter(self.file, fieldnames=self.FIELDNAMES)

        # Write header if new file
        if mode == "w":
            self.writer.writeheader()

    def log_replication(self, replication: int, result: SimulationResult) -> None:
        """Write a summary row for one replication.

        Args:
            replication: Replication number (1-based).
            result: Replication result.
        """
        row = {
            "replication": replication,
            "n_rows": len(result.data),
            "n_observations": result.n_observations,
            "censored_fraction": result.censored_fraction,
            "admin_censored": result.n_admin_censored,
            "marg_effect": result.marg_effect,
            "timestamp": datetime.now().isoformat(),
        }
        self.writer.writerow(row)
        self.file.flush()

    def log_run_info(self, info: Dict[str, Any]) -> None:
        """Log run information to JSON file.

        Args:
            info: Dictionary of run information.
        """
        info_path = self.output_dir / "run_info.json"
        with open(info_path, "w") as f:
            json.dump(info, f, indent=2, default=str)

    def close(self) -> None:
        """Close the CSV file."""
        self.file.close()

    def __enter__(self) -> "SimulationLogger":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
