"""Command line entry point: evaluate a model on a saved point file."""

from __future__ import annotations

import argparse
import logging
import sys

from pointbench.core.config import WorkbenchConfig, load_config
from pointbench.core.workbench import Workbench
from pointbench.data.convert import to_delimited_string
from pointbench.model.experiment import ALGORITHMS, ModelStatus, available_algorithms

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pointbench",
        description="Evaluate outlier-detection models on labelled 2-D points",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="YAML configuration file")
    common.add_argument("-v", "--verbose", action="store_true", help="log at DEBUG level")
    sub = p.add_subparsers(dest="command", required=True)

    ev = sub.add_parser("evaluate", parents=[common], help="train a model on a CSV/MAT file and report results")
    ev.add_argument("file", help="points file (.csv or .mat)")
    ev.add_argument("--algorithm", choices=available_algorithms(), help="algorithm to train")
    ev.add_argument("--threshold", type=float, help="decision threshold (average_distance only)")
    ev.add_argument("--timeout", type=float, default=300.0, help="seconds to wait for each step")

    sub.add_parser("algorithms", parents=[common], help="list available algorithms")
    return p


def _print_status(bench: Workbench) -> None:
    for entry in bench.status.entries():
        print(entry, file=sys.stderr)


def run_evaluate(bench: Workbench, args: argparse.Namespace) -> int:
    algorithm = args.algorithm or bench.config.algorithm or "average_distance"

    bench.start_load(lambda: args.file)
    bench.wait(args.timeout)
    if bench.data_path is None:
        _print_status(bench)
        return 1

    bench.select_algorithm(algorithm)
    bench.start_training()
    bench.wait(args.timeout)
    if bench.model_status() is not ModelStatus.CURRENT:
        _print_status(bench)
        return 1

    if args.threshold is not None:
        try:
            bench.set_threshold(args.threshold)
        except RuntimeError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1

    model = bench.inference_model()
    print(f"Algorithm: {ALGORITHMS[algorithm].display_name}")
    print(f"Points: {len(bench.store)}")
    if model.predict_config is not None:
        print(f"Threshold: {model.predict_config.threshold:.4f}")
    print(f"Scores: {to_delimited_string(f'{s:.4f}' for s in model.scores())}")
    print(f"Predictions: {to_delimited_string(bench.predictions())}")
    print(f"Classifications: {to_delimited_string(bench.classifications())}")
    print(bench.evaluation())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else WorkbenchConfig()
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "algorithms":
        for name in available_algorithms():
            print(f"{name}\t{ALGORITHMS[name].display_name}")
        return 0

    bench = Workbench(config)
    try:
        return run_evaluate(bench, args)
    except TimeoutError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
