from __future__ import annotations
import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, TextIO, Tuple, Union

from utils.exceptions import (
    BadClauseError,
    BadHeaderError,
    ClauseCountError,
    NoHeaderError,
    VariableCountError,
)


@dataclass
class CNFFormula:
    num_vars: int
    num_clauses: int
    clauses: List[List[int]]


def parse_header(tokens: List[str], line_number: int) -> Tuple[int, int]:
    # p cnf <vars> <clauses>
    if len(tokens) != 4 or tokens[1] != "cnf":
        raise BadHeaderError(line_number=line_number)
    try:
        num_vars = int(tokens[2])
        num_clauses = int(tokens[3])
    except ValueError:
        raise BadHeaderError(line_number=line_number) from None
    if num_vars < 0 or num_clauses < 0:
        raise BadHeaderError(line_number=line_number)
    return num_vars, num_clauses


def decode_lines(lines: Iterable[Union[str, bytes]]) -> Iterator[Tuple[int, str]]:
    line_number = 0
    iterator = iter(lines)
    while True:
        try:
            raw = next(iterator)
        except StopIteration:
            return
        except UnicodeDecodeError:
            raise BadClauseError("input is not valid UTF-8", line_number + 1) from None
        line_number += 1
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError:
                raise BadClauseError("input is not valid UTF-8", line_number) from None
        yield line_number, raw


def parse_lines(lines: Iterable[Union[str, bytes]]) -> CNFFormula:
    header: Optional[Tuple[int, int]] = None
    clauses: List[List[int]] = []
    clause: List[int] = []
    line_number = 0
    for line_number, raw in decode_lines(lines):
        line = raw.strip()
        if line.startswith("c"):
            continue
        tokens = line.split()
        if not tokens:
            continue
        if header is None:
            if tokens[0] != "p":
                raise NoHeaderError(line_number=line_number)
            header = parse_header(tokens, line_number)
            continue
        if tokens[0].startswith("%"):
            break
        for token in tokens:
            try:
                value = int(token)
            except ValueError:
                raise BadClauseError(f"bad clause token {token!r}", line_number) from None
            if value == 0:
                clauses.append(list(dict.fromkeys(clause)))
                clause = []
                continue
            if abs(value) > header[0]:
                raise VariableCountError(line_number=line_number)
            clause.append(value)
    if header is None:
        raise NoHeaderError()
    if clause:
        raise BadClauseError("unterminated clause", line_number)
    num_vars, num_clauses = header
    if len(clauses) != num_clauses:
        raise ClauseCountError(f"expected {num_clauses} clauses, found {len(clauses)}")
    return CNFFormula(num_vars=num_vars, num_clauses=num_clauses, clauses=clauses)


def load(stream: Union[TextIO, BinaryIO]) -> CNFFormula:
    return parse_lines(stream)


def parse_dimacs(path: str | Path) -> CNFFormula:
    target = Path(path)
    with target.open("rb") as handle:
        return parse_lines(handle)


def parse_from_string(data: str) -> CNFFormula:
    return parse_lines(data.splitlines())


def format_dimacs(num_vars: int, clauses: List[List[int]]) -> str:
    buffer = io.StringIO()
    buffer.write(f"p cnf {num_vars} {len(clauses)}\n")
    for clause in clauses:
        buffer.write(" ".join(str(lit) for lit in clause) + " 0\n")
    return buffer.getvalue()


def write_dimacs(path: Path, clauses: List[List[int]], num_vars: Optional[int] = None) -> None:
    if num_vars is None:
        num_vars = max((abs(lit) for clause in clauses for lit in clause), default=0)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(format_dimacs(num_vars, clauses))
