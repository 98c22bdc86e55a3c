from __future__ import annotations
import argparse
import logging
import random
import shutil
import sys
import tempfile
import urllib.request
import zipfile
from pathlib import Path
from typing import List, Optional, Sequence
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))
from utils.cnf_parser import write_dimacs
from utils.logging_utils import configure_logging
BENCH_DIR = ROOT / "benchmarks"

logger = logging.getLogger(__name__)


def generate_random_ksat(num_vars: int, num_clauses: int, k: int, rng: random.Random) -> List[List[int]]:
    if k > num_vars:
        raise ValueError(f"clause length {k} exceeds variable count {num_vars}")
    clauses: List[List[int]] = []
    for _ in range(num_clauses):
        chosen = rng.sample(range(1, num_vars + 1), k)
        clauses.append([var if rng.random() < 0.5 else -var for var in chosen])
    return clauses


def generate_dataset(target: Path, sizes: Sequence[int], ratio: float = 4.26, count: int = 5, k: int = 3, seed: Optional[int] = None) -> List[Path]:
    rng = random.Random(seed)
    written: List[Path] = []
    for num_vars in sizes:
        num_clauses = max(1, round(num_vars * ratio))
        for i in range(count):
            path = target / f"uf{k}_{num_vars}v_{i + 1:02d}.cnf"
            write_dimacs(path, generate_random_ksat(num_vars, num_clauses, k, rng), num_vars)
            written.append(path)
    logger.info("wrote %d instances to %s", len(written), target)
    return written


def _download_zip(url: str, dest_dir: Path) -> None:
    dest_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory() as td:
        tmp_zip = Path(td) / "dataset.zip"
        urllib.request.urlretrieve(url, tmp_zip)
        with zipfile.ZipFile(tmp_zip, "r") as zf:
            zf.extractall(dest_dir)


def ensure_dataset(dataset: str, url: Optional[str], bench_dir: Path = BENCH_DIR) -> None:
    target = bench_dir / dataset
    if target.exists() and any(target.rglob("*.cnf")):
        return
    if not url:
        logger.warning("no .cnf files in %s and no download url given", target)
        return
    logger.info("downloading %s into %s", url, target)
    tmp_dir = Path(tempfile.mkdtemp())
    try:
        _download_zip(url, tmp_dir)
        target.mkdir(parents=True, exist_ok=True)
        for path in tmp_dir.rglob("*.cnf"):
            shutil.move(str(path), str(target / path.name))
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random k-SAT benchmarks.")
    parser.add_argument("--output", default=str(BENCH_DIR / "random_sat"))
    parser.add_argument("--sizes", nargs="+", type=int, default=[10, 20, 30, 40])
    parser.add_argument("--ratio", type=float, default=4.26)
    parser.add_argument("--count", type=int, default=5)
    parser.add_argument("-k", type=int, default=3)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args()
    configure_logging(args.verbose)
    generate_dataset(Path(args.output), args.sizes, args.ratio, args.count, args.k, args.seed)


if __name__ == "__main__":
    main()
