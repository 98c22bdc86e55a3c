from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional
from utils.cnf_parser import CNFFormula
from utils.exceptions import InvalidFormulaError
Clause = List[int]
Formula = List[Clause]
Assignment = Dict[int, bool]


@dataclass
class SolverStats:
    decisions: int = 0
    unit_propagations: int = 0
    conflicts: int = 0
    max_depth: int = 0


def validate_formula(formula: CNFFormula) -> None:
    if formula.num_vars < 0:
        raise InvalidFormulaError(f"negative variable count {formula.num_vars}")
    for clause in formula.clauses:
        for lit in clause:
            if not isinstance(lit, int) or isinstance(lit, bool):
                raise InvalidFormulaError("non-integer literal", clause)
            if lit == 0 or abs(lit) > formula.num_vars:
                raise InvalidFormulaError(f"literal out of range [1, {formula.num_vars}]", clause)


def simplify(clauses: Formula, literal: int) -> Formula:
    """Return a new formula with ``literal`` taken as true.

    Clauses containing ``literal`` are dropped and ``-literal`` is removed
    from the rest. Clauses that become empty are kept.
    """
    updated: Formula = []
    for clause in clauses:
        if literal in clause:
            continue
        if -literal in clause:
            updated.append([lit for lit in clause if lit != -literal])
        else:
            updated.append(list(clause))
    return updated


def has_empty_clause(clauses: Formula) -> bool:
    return any(not clause for clause in clauses)


def find_unit_literal(clauses: Formula) -> Optional[int]:
    for clause in clauses:
        if len(clause) == 1:
            return clause[0]
    return None


def unit_propagate(clauses: Formula, assignment: Assignment, stats: SolverStats) -> Formula:
    """Resolve unit clauses until none remain or an empty clause shows up.

    Every forced literal is recorded in ``assignment``. The input formula is
    left untouched.
    """
    current = clauses
    while not has_empty_clause(current):
        unit_literal = find_unit_literal(current)
        if unit_literal is None:
            break
        stats.unit_propagations += 1
        assignment[abs(unit_literal)] = unit_literal > 0
        current = simplify(current, unit_literal)
    return current


def materialize(assignment: Assignment, num_vars: int) -> List[int]:
    # don't-care variables default to true
    return [var if assignment.get(var, True) else -var for var in range(1, num_vars + 1)]
