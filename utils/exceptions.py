"""
Exception classes for the DPLL solver and its DIMACS front end.

Unsatisfiability is a result, not an error, so it has no exception here.
"""
from __future__ import annotations
from typing import List, Optional


class SATBaseException(Exception):
    """Base exception class for all solver related exceptions."""
    pass


class DimacsError(SATBaseException):
    """Raised when DIMACS CNF input cannot be turned into a formula."""
    default_message = "invalid DIMACS input"

    def __init__(self, message: Optional[str] = None, line_number: Optional[int] = None):
        self.line_number = line_number
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"{self.message} (line {self.line_number})"
        return self.message


class NoHeaderError(DimacsError):
    default_message = "no header"


class BadHeaderError(DimacsError):
    default_message = "bad header"


class BadClauseError(DimacsError):
    default_message = "bad clause"


class VariableCountError(DimacsError):
    default_message = "unexpected number of variables"


class ClauseCountError(DimacsError):
    default_message = "unexpected number of clauses"


class InvalidFormulaError(SATBaseException):
    """
    Raised when a formula handed to the solver references a variable outside
    [1, num_vars] or contains the literal 0.
    """
    def __init__(self, message: str = "Invalid formula", clause: Optional[List[int]] = None):
        self.clause = clause
        self.message = message
        if clause is not None:
            self.message = f"{message}: {clause}"
        super().__init__(self.message)


class HeuristicError(SATBaseException):
    """Raised when a branching variable is requested from a formula without literals."""
    pass


class SearchBudgetExceeded(SATBaseException):
    """
    Raised when the search makes more decisions than its configured budget.

    Attributes:
        decisions: Number of decisions made when the budget ran out
    """
    def __init__(self, message: str = "Search budget exceeded", decisions: Optional[int] = None):
        self.decisions = decisions
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.decisions is not None:
            return f"{self.message} (decisions={self.decisions})"
        return self.message
