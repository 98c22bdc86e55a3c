from __future__ import annotations
from collections import Counter
from solvers.formula import Formula
from utils.exceptions import HeuristicError


def variable_frequencies(clauses: Formula) -> Counter:
    counts: Counter = Counter()
    for clause in clauses:
        for lit in clause:
            counts[abs(lit)] += 1
    return counts


def pick_variable(clauses: Formula) -> int:
    """Most frequently occurring variable; ties go to the lowest index."""
    counts = variable_frequencies(clauses)
    if not counts:
        raise HeuristicError("cannot branch on a formula without literals")
    return max(counts, key=lambda var: (counts[var], -var))
