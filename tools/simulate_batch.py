# tools/simulate_batch.py

import argparse
import json
from pathlib import Path

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from simulator.errors import ExecutionError
from simulator.parser import parse_file

EMPTY_SEED = "-"

# === Utility Loaders ===
def load_seed_sets(seeds_file):
    """One seed set per non-blank line; seeds are whitespace separated and '-' stands for an empty tape."""
    seed_sets = []
    with open(seeds_file, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            seed_sets.append(["" if seed == EMPTY_SEED else seed for seed in line.split()])
    return seed_sets

def simulate_one(machine, seeds, max_steps=0):
    entry = {"seeds": seeds, "halted": False, "steps": 0, "state": None, "tapes": [], "error": None}
    machine.reset()
    try:
        machine.reset(seeds)
        machine.run(max_steps=max_steps)
    except ExecutionError as e:
        entry["error"] = {"kind": e.kind, "message": e.message}

    snapshot = machine.snapshot()
    entry.update(
        halted=snapshot["done"],
        steps=snapshot["steps"],
        state=snapshot["state"],
        tapes=snapshot["tapes"]
    )
    return entry

# === Main Simulation Runner ===
def simulate_batch(definition, seeds_file, output, max_steps=0):
    machine = parse_file(definition)
    seed_sets = load_seed_sets(seeds_file)

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)

    results = []
    with Progress(
            SpinnerColumn(),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            TextColumn("{task.completed}/{task.total} Seed sets"),
            TimeElapsedColumn()
    ) as progress:

        task = progress.add_task("[cyan]Simulating...", total=len(seed_sets))

        for seeds in seed_sets:
            results.append(simulate_one(machine, seeds, max_steps=max_steps))
            progress.update(task, advance=1)

    # === BULK WRITE once per batch ===
    with open(output, "a", encoding="utf-8") as results_fh:
        for entry in results:
            results_fh.write(json.dumps(entry) + "\n")

    return results


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Run one machine definition against every seed set in a file.")
    parser.add_argument("--definition", required=True, help="Path to a machine definition file")
    parser.add_argument("--seeds", required=True, help="Path to a seed file (one seed set per line)")
    parser.add_argument("--output", default="results/results.jsonl", help="Output JSONL file (appended to)")
    parser.add_argument("--max_steps", type=int, default=100000, help="Maximum steps before a run is cut off (0 = unlimited)")
    args = parser.parse_args()

    results = simulate_batch(args.definition, args.seeds, args.output, max_steps=args.max_steps)
    halted = sum(1 for entry in results if entry["halted"])
    print(f"[INFO] {halted:,} of {len(results):,} runs reached a final state. Results saved to {args.output}")

if __name__ == "__main__":
    main()
