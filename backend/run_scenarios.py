"""
EthicSupply scenario runner — runs one scenario over a supplier dataset, writes
the CSV / ZIP artifact and prints the per-table rank statistics.

    python run_scenarios.py --scenario s1 --min-margin 12
    python run_scenarios.py --scenario s3 --seed 7 --k 3 --output ./output
    python run_scenarios.py --scenario s2 --generate 200
"""

import argparse
import json
import os
import sys

from loguru import logger

from ethicscore.datastore import load_workspace
from ethicscore.engine.service import ScenarioService
from ethicscore.exceptions import EngineError
from ethicscore.models.settings import ScoringSettings


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run an EthicSupply scenario")
    parser.add_argument("--scenario", required=True, help="s1, s2, s3 or s4")
    parser.add_argument("--min-margin", type=float, help="S1 minimum profit margin (percent)")
    parser.add_argument("--seed", type=int, help="Random seed (S3 missingness, synthetic data)")
    parser.add_argument("--k", type=int, help="S3 KNN neighbours")
    parser.add_argument("--params", default="{}", help="Extra scenario parameters as JSON")
    parser.add_argument("--settings", help="Scoring settings JSON file")
    parser.add_argument("--bands", help="Bands JSON file")
    parser.add_argument("--dataset", help="Supplier dataset (.json or .csv)")
    parser.add_argument("--generate", type=int, metavar="N", help="Use N synthetic suppliers instead of a dataset")
    parser.add_argument("--output", default="./output", help="Output directory")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def _scenario_params(args) -> dict:
    params = json.loads(args.params)
    if args.min_margin is not None:
        params["min_margin_pct"] = args.min_margin
    if args.k is not None:
        params["k"] = args.k
    if args.seed is not None and args.scenario.lower() == "s3":
        params["seed"] = args.seed
    return params


def _fmt(value) -> str:
    return "n/a" if value is None else f"{value:.4f}"


def main(argv=None) -> int:
    args = _parse_args(argv)
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    try:
        params = _scenario_params(args)
        settings = ScoringSettings()
        if args.settings:
            with open(args.settings, encoding="utf-8") as f:
                settings = ScoringSettings.from_payload(json.load(f))

        workspace = load_workspace(args.bands, args.dataset, args.seed, synthetic_suppliers=args.generate)
        service = ScenarioService(
            workspace.engine, workspace.suppliers, settings, dataset=workspace.dataset, seed=args.seed
        )
        results, artifact = service.execute(args.scenario, params, f"{args.scenario.lower()}_results")
    except json.JSONDecodeError as e:
        print(f"Invalid JSON: {e}", file=sys.stderr)
        return 2
    except EngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    os.makedirs(args.output, exist_ok=True)
    path = os.path.join(args.output, artifact.filename)
    with open(path, "wb") as f:
        f.write(artifact.content)

    print("=" * 65)
    print(f"  {args.scenario.upper()} — {workspace.dataset.supplier_count} suppliers, "
          f"dataset {workspace.dataset.version}, bands {workspace.dataset.bands_version}")
    print("=" * 65)
    for result in results:
        print(f"\n  {result.variant}  ({len(result.rows)} ranked)")
        for name, value in result.statistics.items():
            print(f"    {name:<38} {_fmt(value)}")
    print(f"\n  Wrote {len(artifact.tables)} table(s) → {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
