"""
Run one rental market scenario and write a receipt for it

Simulates a scenario for a number of months with a fixed seed, saves the
monthly market series (rents, vacancy, unhoused tenants, moves, trend
estimates) as CSV, and prints a receipt with the seed, parameters,
library versions and the CSV's SHA-256. Re-running with the receipt's
scenario, seed and months reproduces the file byte for byte, apart from
its timestamped name.

Usage:
    python scripts/run.py
    python scripts/run.py --scenario housing-shortage --seed 42 --steps 120
    python scripts/run.py --scenario neglect --seed 99 --steps 240 --out results/ --json
    python scripts/run.py --log-level WARNING --log-file-level DEBUG
"""

import sys
import argparse
import csv
import hashlib
import json
import logging
import platform
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import mesa

sys.path.insert(0, str(Path(__file__).parent.parent))
from rentmarket.model import RentalMarketModel
from rentmarket.constants import SCENARIOS
from rentmarket.logging_config import setup_logging

logger = logging.getLogger(__name__)


def write_history_csv(history: Dict[str, List[Any]], path: Path) -> str:
    """Write one row per collected month and return the file's SHA-256."""
    columns = list(history.keys())
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(columns)
        for row in zip(*(history[col] for col in columns)):
            writer.writerow([f"{v:.6f}" if isinstance(v, float) else v for v in row])
    return hashlib.sha256(path.read_bytes()).hexdigest()


def run(scenario_id: str, seed: int, steps: int, out_dir: str) -> dict:
    """Simulate `steps` months of a scenario, export its series, return the receipt."""
    scenario = SCENARIOS[scenario_id]
    params = scenario["params"]

    model = RentalMarketModel(**params, seed=seed)
    started = time.time()
    model.run(steps)
    elapsed = time.time() - started
    logger.info("Ran %d months of %s in %.2fs", steps, scenario_id, elapsed)

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    csv_path = out / f"{scenario_id}_seed{seed}_m{steps}_{stamp}.csv"
    digest = write_history_csv(model.get_history(), csv_path)

    stats = model.get_state()["stats"]
    return {
        "scenario_id": scenario_id,
        "scenario_title": scenario["title"],
        "seed": seed,
        "steps": steps,
        "params": params,
        "mesa_version": mesa.__version__,
        "python": platform.python_version(),
        "platform": platform.system(),
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "elapsed_s": round(elapsed, 3),
        "output_csv": str(csv_path),
        "sha256": digest,
        "final": {
            "month": model.current_month,
            "mean_rent": stats["mean_rent"],
            "vacancy_rate": stats["vacancy_rate"],
            "occupancy_rate": stats["occupancy_rate"],
            "unhoused": stats["unhoused_count"],
            "failed_estimates": stats["failed_estimates"],
        },
    }


def print_receipt(r: dict):
    final = r["final"]
    rule = "-" * 60

    print()
    print(rule)
    print(f"  {r['scenario_title']}  (seed {r['seed']}, {r['steps']} months)")
    print(rule)
    print(f"  mesa {r['mesa_version']} / python {r['python']} on {r['platform']}, {r['elapsed_s']}s")
    print()
    print("  Parameters")
    for k, v in r["params"].items():
        print(f"    {k:<22} {v}")
    print()
    print(f"  Market at month {final['month']}")
    print(f"    mean rent          {final['mean_rent']:.2f}")
    print(f"    empty units        {final['vacancy_rate']:.1%}")
    print(f"    slots filled       {final['occupancy_rate']:.1%}")
    print(f"    unhoused tenants   {final['unhoused']}")
    print(f"    failed trend fits  {final['failed_estimates']}")
    print()
    print(f"  {r['output_csv']}")
    print(f"  sha256 {r['sha256']}")
    print(rule)
    print(f"  reproduce: python scripts/run.py --scenario {r['scenario_id']} "
          f"--seed {r['seed']} --steps {r['steps']}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Run one scenario and print a reproducibility receipt")
    parser.add_argument("--scenario", type=str, default="baseline",
                        choices=list(SCENARIOS.keys()),
                        help="Scenario to run")
    parser.add_argument("--seed",  type=int, default=42,   help="Random seed")
    parser.add_argument("--steps", type=int, default=120,  help="Number of months")
    parser.add_argument("--out",   type=str, default="results/", help="Output directory")
    parser.add_argument("--json",  action="store_true", help="Also write receipt as JSON")
    parser.add_argument("--log-level", type=str, default="INFO", help="Console and log file level")
    parser.add_argument("--log-file-level", type=str, default=None,
                        help="Log file level, if different (DEBUG records every move and rent change)")
    args = parser.parse_args()

    setup_logging(args.log_level, file_level=args.log_file_level)

    print(f"Running {SCENARIOS[args.scenario]['title']}, seed={args.seed}, {args.steps} months ...")
    receipt = run(args.scenario, args.seed, args.steps, args.out)
    print_receipt(receipt)

    if args.json:
        json_path = Path(args.out) / f"receipt_{args.scenario}_seed{args.seed}.json"
        with open(json_path, "w") as f:
            json.dump(receipt, f, indent=2)
        print(f"  Receipt JSON → {json_path}")


if __name__ == "__main__":
    main()
