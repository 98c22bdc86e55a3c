from __future__ import annotations
import itertools
from typing import Dict, List, Optional, Sequence, Union
Clause = List[int]
Model = Union[Dict[int, bool], Sequence[int]]


def as_assignment(model: Model) -> Dict[int, bool]:
    if isinstance(model, dict):
        return model
    return {abs(lit): lit > 0 for lit in model}


def clause_satisfied(clause: Clause, assignment: Dict[int, bool]) -> bool:
    for lit in clause:
        var = abs(lit)
        val = assignment.get(var)
        if val is None:
            continue
        if (lit > 0 and val) or (lit < 0 and not val):
            return True
    return False


def verify_assignment(clauses: Sequence[Clause], model: Model) -> bool:
    assignment = as_assignment(model)
    return all(clause_satisfied(clause, assignment) for clause in clauses)


def brute_force_sat(clauses: Sequence[Clause], num_vars: int) -> Optional[List[int]]:
    """Try all 2^num_vars assignments; only meant for small formulas."""
    for values in itertools.product((True, False), repeat=num_vars):
        assignment = {var: values[var - 1] for var in range(1, num_vars + 1)}
        if verify_assignment(clauses, assignment):
            return [var if assignment[var] else -var for var in range(1, num_vars + 1)]
    return None
