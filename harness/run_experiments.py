from __future__ import annotations
import argparse
import csv
import logging
import signal
import sys
import time
import tracemalloc
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from solvers import dpll
from utils.cnf_parser import CNFFormula, parse_dimacs
from utils.exceptions import DimacsError
from utils.logging_utils import configure_logging
from utils.verify import brute_force_sat, verify_assignment
from harness.datasets import ensure_dataset, generate_dataset

logger = logging.getLogger(__name__)

FIELDNAMES = [
    "solver",
    "benchmark_file",
    "problem_type",
    "num_vars",
    "num_clauses",
    "status",
    "cpu_time",
    "elapsed_time",
    "peak_memory",
    "decisions",
    "unit_propagations",
    "conflicts",
    "max_depth",
    "verified",
]

Runner = Callable[[CNFFormula], Dict[str, object]]


def collect_files(paths: Iterable[str]) -> List[Path]:
    files: List[Path] = []
    for raw in paths:
        target = Path(raw)
        if target.is_file() and target.suffix == ".cnf":
            files.append(target)
        elif target.is_dir():
            for path in sorted(target.rglob("*.cnf")):
                files.append(path)
    return files


def infer_problem_type(path: Path) -> str:
    name = path.name.lower()
    if name.startswith("uuf"):
        return "random_ksat_unsat"
    if name.startswith("uf"):
        return "random_ksat"
    parts = [part.lower() for part in path.parts]
    if "random_sat" in parts:
        return "random_ksat"
    return "unknown"


def run_brute_force(formula: CNFFormula) -> Dict[str, object]:
    model = brute_force_sat(formula.clauses, formula.num_vars)
    return {"status": "SAT" if model is not None else "UNSAT", "assignment": model or []}


def build_runners(args: argparse.Namespace) -> Dict[str, Runner]:
    config = dpll.SolverConfig(max_decisions=args.max_decisions)
    return {
        "dpll": lambda formula: dpll.result_record(formula, dpll.solve(formula, config)),
        "brute_force": run_brute_force,
    }


@contextmanager
def solver_timeout(seconds: Optional[float]):
    if seconds is None or seconds <= 0:
        yield
        return

    def handler(signum, frame):
        raise TimeoutError()

    previous = signal.signal(signal.SIGALRM, handler)
    signal.setitimer(signal.ITIMER_REAL, seconds)
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous)


def run_one(solver_name: str, runner: Runner, cnf_path: Path, formula: CNFFormula, timeout: Optional[float]) -> Dict[str, object]:
    tracemalloc.start()
    start_wall = time.perf_counter()
    start_cpu = time.process_time()
    timed_out = False
    try:
        with solver_timeout(timeout):
            result = runner(formula)
    except TimeoutError:
        timed_out = True
        result = {}
    except (RecursionError, MemoryError) as exc:
        logger.error("%s failed on %s: %s", solver_name, cnf_path, type(exc).__name__)
        result = {"status": "ERROR"}
    finally:
        elapsed = time.perf_counter() - start_wall
        cpu_used = time.process_time() - start_cpu
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    status = "TIMEOUT" if timed_out else result.get("status", "UNKNOWN")
    verified = None
    if status == "SAT":
        verified = verify_assignment(formula.clauses, result.get("assignment") or [])
        if not verified:
            logger.error("%s returned a model that does not satisfy %s", solver_name, cnf_path)
            status = "ERROR"
    logger.info("%s %s: %s in %.3fs", solver_name, cnf_path.name, status, elapsed)
    return {
        "solver": solver_name,
        "benchmark_file": str(cnf_path),
        "problem_type": infer_problem_type(cnf_path),
        "num_vars": formula.num_vars,
        "num_clauses": formula.num_clauses,
        "status": status,
        "cpu_time": cpu_used,
        "elapsed_time": elapsed,
        "peak_memory": peak,
        "decisions": result.get("decisions"),
        "unit_propagations": result.get("unit_propagations"),
        "conflicts": result.get("conflicts"),
        "max_depth": result.get("max_depth"),
        "verified": verified,
    }


def run_benchmarks(files: List[Path], runners: Dict[str, Runner], output: Path, timeout: Optional[float]) -> List[Dict[str, object]]:
    output.parent.mkdir(parents=True, exist_ok=True)
    records: List[Dict[str, object]] = []
    with output.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=FIELDNAMES)
        writer.writeheader()
        for cnf_path in files:
            try:
                formula = parse_dimacs(cnf_path)
            except DimacsError as exc:
                logger.warning("skipping %s: %s", cnf_path, exc)
                continue
            for solver_name, runner in runners.items():
                record = run_one(solver_name, runner, cnf_path, formula, timeout)
                writer.writerow(record)
                handle.flush()
                records.append(record)
    return records


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--benchmarks", nargs="+", required=True)
    parser.add_argument("--output", default="results/results.csv")
    parser.add_argument("--solvers", nargs="+", default=["dpll"])
    parser.add_argument("--max-decisions", type=dpll.non_negative_int, default=None)
    parser.add_argument("--solver-timeout", type=float, default=60.0)
    parser.add_argument("--generate", action="store_true", help="generate a random 3-SAT set into the first benchmark dir")
    parser.add_argument("--sizes", nargs="+", type=int, default=[10, 20, 30, 40])
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--download-url", type=str, default="")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args()
    configure_logging(args.verbose)
    first = Path(args.benchmarks[0])
    if args.download_url.strip():
        ensure_dataset(first.name, args.download_url.strip(), first.parent)
    if args.generate:
        generate_dataset(first, args.sizes, seed=args.seed)
    runners = build_runners(args)
    selected = {name: runners[name] for name in args.solvers if name in runners}
    for name in args.solvers:
        if name not in runners:
            logger.warning("unknown solver %s", name)
    files = collect_files(args.benchmarks)
    run_benchmarks(files, selected, Path(args.output), args.solver_timeout)


if __name__ == "__main__":
    main()
