import argparse
import csv
import random
import signal
import time
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from analysis.generate_plots import generate_plots
from harness.datasets import ensure_dataset, generate_dataset, generate_random_ksat
from harness.run_experiments import (
    build_runners,
    collect_files,
    infer_problem_type,
    run_benchmarks,
    run_one,
)
from utils.cnf_parser import CNFFormula, parse_dimacs


def test_generate_random_ksat_shape():
    clauses = generate_random_ksat(6, 20, 3, random.Random(7))
    assert len(clauses) == 20
    for clause in clauses:
        assert len(clause) == 3
        assert len({abs(lit) for lit in clause}) == 3
        assert all(1 <= abs(lit) <= 6 for lit in clause)


def test_generate_random_ksat_rejects_wide_clauses():
    with pytest.raises(ValueError):
        generate_random_ksat(2, 1, 3, random.Random(0))


def test_generate_dataset_is_reproducible(tmp_path):
    first = generate_dataset(tmp_path / "a", [5, 6], count=2, seed=3)
    second = generate_dataset(tmp_path / "b", [5, 6], count=2, seed=3)
    assert len(first) == 4
    assert [p.read_text() for p in first] == [p.read_text() for p in second]
    formula = parse_dimacs(first[0])
    assert formula.num_vars == 5
    assert formula.num_clauses == round(5 * 4.26)


def test_ensure_dataset_skips_populated_dir(tmp_path):
    target = tmp_path / "random_sat"
    generate_dataset(target, [4], count=1, seed=0)
    ensure_dataset("random_sat", "http://invalid.example/never-fetched.zip", tmp_path)
    assert len(list(target.glob("*.cnf"))) == 1


def test_collect_files(tmp_path):
    generate_dataset(tmp_path / "set", [4], count=2, seed=0)
    (tmp_path / "set" / "notes.txt").write_text("x")
    files = collect_files([str(tmp_path / "set"), str(tmp_path / "missing")])
    assert [p.name for p in files] == ["uf3_4v_01.cnf", "uf3_4v_02.cnf"]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("uf3_20v_01.cnf", "random_ksat"),
        ("uuf50-01.cnf", "random_ksat_unsat"),
        ("php_6_5.cnf", "unknown"),
    ],
)
def test_infer_problem_type(name, expected):
    assert infer_problem_type(Path("bench") / name) == expected


def test_run_benchmarks_agrees_with_brute_force(tmp_path):
    files = generate_dataset(tmp_path / "random_sat", [6, 8], count=3, seed=11)
    runners = build_runners(argparse.Namespace(max_decisions=None))
    output = tmp_path / "results" / "results.csv"
    records = run_benchmarks(files, runners, output, None)
    assert len(records) == 12
    with output.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 12
    by_file = {}
    for row in rows:
        by_file.setdefault(row["benchmark_file"], {})[row["solver"]] = row["status"]
        if row["status"] == "SAT":
            assert row["verified"] == "True"
    for statuses in by_file.values():
        assert statuses["dpll"] == statuses["brute_force"]
        assert statuses["dpll"] in ("SAT", "UNSAT")


def test_bad_model_is_flagged():
    formula = CNFFormula(num_vars=1, num_clauses=1, clauses=[[1]])
    record = run_one("broken", lambda f: {"status": "SAT", "assignment": [-1]}, Path("x.cnf"), formula, None)
    assert record["status"] == "ERROR"
    assert record["verified"] is False


@pytest.mark.skipif(not hasattr(signal, "SIGALRM"), reason="needs SIGALRM")
def test_timeout_is_not_unsat():
    formula = CNFFormula(num_vars=1, num_clauses=1, clauses=[[1]])

    def slow(f):
        time.sleep(2)
        return {"status": "SAT", "assignment": [1]}

    record = run_one("slow", slow, Path("x.cnf"), formula, 0.05)
    assert record["status"] == "TIMEOUT"
    assert record["verified"] is None


def test_generate_plots(tmp_path):
    files = generate_dataset(tmp_path / "random_sat", [5, 6], count=2, seed=5)
    runners = build_runners(argparse.Namespace(max_decisions=None))
    output = tmp_path / "results.csv"
    run_benchmarks(files, runners, output, None)
    written = generate_plots(pd.read_csv(output), tmp_path / "plots")
    assert len(written) == 5
    assert all(path.exists() for path in written)


def test_undecodable_file_is_skipped(tmp_path):
    bad = tmp_path / "bad.cnf"
    bad.write_bytes(b"p cnf 1 1\n1 0\nc \xff\xfe\n")
    good = generate_dataset(tmp_path / "set", [4], count=1, seed=2)[0]
    runners = build_runners(argparse.Namespace(max_decisions=None))
    records = run_benchmarks([bad, good], runners, tmp_path / "results.csv", None)
    assert {record["benchmark_file"] for record in records} == {str(good)}


@pytest.mark.parametrize("error", [RecursionError, MemoryError])
def test_runner_crash_becomes_error_record(error):
    formula = CNFFormula(num_vars=1, num_clauses=1, clauses=[[1]])

    def crash(f):
        raise error()

    record = run_one("crash", crash, Path("x.cnf"), formula, None)
    assert record["status"] == "ERROR"
    assert record["verified"] is None
