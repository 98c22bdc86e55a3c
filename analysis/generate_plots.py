from __future__ import annotations
import argparse
from pathlib import Path
from typing import List
import matplotlib.pyplot as plt
import pandas as pd

def ensure_output(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)

def line_plot(df: pd.DataFrame, metric: str, output: Path, ylabel: str) -> None:
    fig, ax = plt.subplots()
    for solver, group in df.groupby("solver"):
        series = group.groupby("num_vars")[metric].mean().sort_index()
        ax.plot(series.index, series.values, marker="o", label=solver)
    ax.set_xlabel("num_vars")
    ax.set_ylabel(ylabel)
    ax.legend()
    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)

def status_plot(df: pd.DataFrame, output: Path) -> None:
    fig, ax = plt.subplots()
    counts = df.pivot_table(index="num_vars", columns="status", values="benchmark_file", aggfunc="count", fill_value=0)
    counts.plot(kind="bar", stacked=True, ax=ax)
    ax.set_xlabel("num_vars")
    ax.set_ylabel("instances")
    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)

def generate_plots(df: pd.DataFrame, output_dir: Path) -> List[Path]:
    ensure_output(output_dir)
    written = [output_dir / "cpu_time_vs_vars.png", output_dir / "peak_memory_vs_vars.png"]
    line_plot(df, "cpu_time", written[0], "cpu_time")
    line_plot(df, "peak_memory", written[1], "peak_memory")
    df_dpll = df[df["solver"] == "dpll"]
    if not df_dpll.empty:
        line_plot(df_dpll, "decisions", output_dir / "dpll_decisions.png", "decisions")
        line_plot(df_dpll, "conflicts", output_dir / "dpll_conflicts.png", "conflicts")
        status_plot(df_dpll, output_dir / "dpll_status.png")
        written.extend(output_dir / name for name in ("dpll_decisions.png", "dpll_conflicts.png", "dpll_status.png"))
    return written

def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--input", required=True)
    parser.add_argument("--output", default="results/plots")
    args = parser.parse_args()
    df = pd.read_csv(args.input)
    generate_plots(df, Path(args.output))

if __name__ == "__main__":
    main()
