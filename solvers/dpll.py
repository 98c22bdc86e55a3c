from __future__ import annotations
import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from solvers.formula import (
    Assignment,
    Formula,
    SolverStats,
    has_empty_clause,
    materialize,
    simplify,
    unit_propagate,
    validate_formula,
)
from solvers.heuristic import pick_variable
from utils.cnf_parser import CNFFormula, load, parse_dimacs
from utils.exceptions import DimacsError, InvalidFormulaError, SearchBudgetExceeded
from utils.logging_utils import configure_logging

logger = logging.getLogger(__name__)

RECURSION_MARGIN = 1000
EXIT_SAT = 0
EXIT_UNSAT = 1
EXIT_ERROR = 2
EXIT_UNKNOWN = 3


@dataclass
class SolverConfig:
    max_decisions: Optional[int] = None


@dataclass
class SolveResult:
    status: str
    model: Optional[List[int]] = None
    stats: SolverStats = field(default_factory=SolverStats)

    @property
    def satisfiable(self) -> bool:
        return self.status == "SAT"


# DPLL
# Unit Propagation
# Branch on the most frequent variable, positive polarity first
# Chronological backtracking, each branch works on its own copy

def dpll(clauses: Formula, assignment: Assignment, stats: SolverStats, config: SolverConfig, depth: int = 0) -> Optional[Assignment]:
    stats.max_depth = max(stats.max_depth, depth)
    current = unit_propagate(clauses, assignment, stats)
    if not current:
        return assignment
    if has_empty_clause(current):
        stats.conflicts += 1
        return None
    var = pick_variable(current)
    for literal in (var, -var):
        if config.max_decisions is not None and stats.decisions >= config.max_decisions:
            raise SearchBudgetExceeded(decisions=stats.decisions)
        stats.decisions += 1
        logger.debug("depth %d: decide %d", depth, literal)
        trial_assignment = assignment.copy()
        trial_assignment[var] = literal > 0
        result = dpll(simplify(current, literal), trial_assignment, stats, config, depth + 1)
        if result is not None:
            return result
        logger.debug("depth %d: backtrack from %d", depth, literal)
    return None


def ensure_recursion_limit(num_vars: int) -> None:
    needed = num_vars + RECURSION_MARGIN
    if sys.getrecursionlimit() < needed:
        sys.setrecursionlimit(needed)


def solve(formula: CNFFormula, config: Optional[SolverConfig] = None) -> SolveResult:
    config = config or SolverConfig()
    validate_formula(formula)
    ensure_recursion_limit(formula.num_vars)
    stats = SolverStats()
    try:
        assignment = dpll([clause[:] for clause in formula.clauses], {}, stats, config)
    except SearchBudgetExceeded as exc:
        logger.info("unknown: %s", exc)
        return SolveResult("UNKNOWN", None, stats)
    if assignment is None:
        logger.info("unsat after %d decisions, %d conflicts", stats.decisions, stats.conflicts)
        return SolveResult("UNSAT", None, stats)
    logger.info("sat after %d decisions, %d conflicts", stats.decisions, stats.conflicts)
    return SolveResult("SAT", materialize(assignment, formula.num_vars), stats)


def check_sat(clauses: Sequence[Sequence[int]], num_vars: Optional[int] = None) -> Optional[List[int]]:
    """Solve a plain clause list, returning the signed model or None when unsat."""
    clause_lists = [list(clause) for clause in clauses]
    if num_vars is None:
        num_vars = max((abs(lit) for clause in clause_lists for lit in clause), default=0)
    formula = CNFFormula(num_vars=num_vars, num_clauses=len(clause_lists), clauses=clause_lists)
    return solve(formula).model


def result_record(formula: CNFFormula, result: SolveResult) -> Dict[str, object]:
    return {
        "solver": "dpll",
        "status": result.status,
        "decisions": result.stats.decisions,
        "unit_propagations": result.stats.unit_propagations,
        "conflicts": result.stats.conflicts,
        "max_depth": result.stats.max_depth,
        "assignment": result.model or [],
        "num_vars": formula.num_vars,
        "num_clauses": formula.num_clauses,
    }


def run_solver(path: Path, config: Optional[SolverConfig] = None) -> Dict[str, object]:
    formula = parse_dimacs(path)
    return result_record(formula, solve(formula, config))


def format_model(model: Sequence[int]) -> str:
    return " ".join(str(lit) for lit in model)


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decide satisfiability of a DIMACS CNF formula with DPLL.")
    parser.add_argument("cnf", nargs="?", default="-", help="DIMACS file, '-' or absent for stdin")
    parser.add_argument("--json", action="store_true", help="print a JSON record with search statistics")
    parser.add_argument("--max-decisions", type=non_negative_int, default=None)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    config = SolverConfig(max_decisions=args.max_decisions)
    start = time.perf_counter()
    try:
        if args.cnf == "-":
            formula = load(getattr(sys.stdin, "buffer", sys.stdin))
        else:
            formula = parse_dimacs(args.cnf)
        result = solve(formula, config)
    except (DimacsError, InvalidFormulaError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    if args.json:
        record = result_record(formula, result)
        record["wall_time"] = time.perf_counter() - start
        print(json.dumps(record))
    elif result.status == "SAT":
        print("sat")
        print(format_model(result.model))
    else:
        print(result.status.lower())
    if result.status == "SAT":
        return EXIT_SAT
    if result.status == "UNSAT":
        return EXIT_UNSAT
    return EXIT_UNKNOWN


if __name__ == "__main__":
    sys.exit(main())
