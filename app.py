# app.py

import argparse
from datetime import datetime

from rich.console import Console
from rich.markup import escape

from config.config_loader import default_config, load_config, validate_config
from logger.logger import RunLogger
from simulator.display import animate, print_final
from simulator.errors import ExecutionError, ParseError
from simulator.parser import parse_file

console = Console()

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_PARSE_ERROR = 2
EXIT_EXECUTION_ERROR = 3
EXIT_STEP_LIMIT = 4

# === Utilities ===
def load_runtime_config(args):
    config = load_config(args.config) if args.config else default_config()

    if args.delay is not None:
        config["delay_seconds"] = args.delay
    if args.max_steps is not None:
        config["max_steps"] = args.max_steps
    if args.no_animate:
        config["animate"] = False
    if args.log:
        config["log_runs"] = True

    validate_config(config)
    return config

def report_error(error):
    if isinstance(error, ParseError):
        console.print(f"[red]{error.kind}[/red] at line {error.line}: {escape(error.message)}")
    else:
        console.print(f"[red]{error.kind}[/red] in state {escape(str(error.state))}: {escape(error.message)}")

def write_run_log(config, definition, seeds, machine, trace, outcome):
    run_logger = RunLogger(config["output_directory"], config["log_file_prefix"])
    run_logger.log_batch(trace)

    summary = {
        "definition": definition,
        "seeds": seeds,
        "outcome": outcome,
        "steps": machine.steps,
        "state": machine.current_state,
        "timestamp": datetime.now().isoformat()
    }
    run_logger.log_summary([summary])
    if outcome == "halted":
        run_logger.log_halted([machine.snapshot()])
    else:
        run_logger.log_failed([dict(machine.snapshot(), outcome=outcome)])

# === Runner ===
def run_definition(definition, seeds, config):
    """Parse, seed and run one machine. Returns the process exit code."""
    try:
        machine = parse_file(definition)
    except ParseError as e:
        report_error(e)
        return EXIT_PARSE_ERROR

    trace = []
    record = (lambda m: trace.append(m.snapshot())) if config["log_runs"] else None
    outcome = "halted"
    exit_code = EXIT_OK

    try:
        machine.reset(seeds)
        if config["log_runs"]:
            trace.append(machine.snapshot())
        if config["animate"]:
            animate(machine, delay=config["delay_seconds"], max_steps=config["max_steps"], console=console, on_step=record)
        else:
            machine.run(max_steps=config["max_steps"], on_step=record)
            print_final(machine, console)
    except ExecutionError as e:
        if not config["animate"]:
            print_final(machine, console)
        report_error(e)
        outcome = e.kind
        exit_code = EXIT_EXECUTION_ERROR
    else:
        if not machine.done():
            console.print(f"[yellow]Stopped after {machine.steps:,} steps without reaching a final state.[/yellow]")
            outcome = "step_limit"
            exit_code = EXIT_STEP_LIMIT
        else:
            console.print(f"[green]Halted in state {escape(machine.current_state)} after {machine.steps:,} steps.[/green]")

    if config["log_runs"]:
        write_run_log(config, definition, seeds, machine, trace, outcome)
    return exit_code

# === CLI ===
def build_parser():
    parser = argparse.ArgumentParser(description="Multi-tape Turing machine simulator")
    parser.add_argument("definition", help="Path to a machine definition file")
    parser.add_argument("seeds", nargs="*", help="Initial tape contents, one per declared tape in order")
    parser.add_argument("--config", help="Path to a runtime_config.json (defaults are used otherwise)")
    parser.add_argument("--delay", type=float, help="Seconds to wait between animation frames")
    parser.add_argument("--max_steps", "--max-steps", type=int, help="Stop after this many steps (0 = unlimited)")
    parser.add_argument("--no_animate", "--no-animate", action="store_true", help="Run without animation and print the final tapes")
    parser.add_argument("--log", action="store_true", help="Write JSONL run logs to the configured output directory")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_runtime_config(args)
    except (FileNotFoundError, ValueError, TypeError) as e:
        # json.JSONDecodeError is a ValueError
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_USAGE

    try:
        return run_definition(args.definition, args.seeds, config)
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_USAGE

if __name__ == "__main__":
    raise SystemExit(main())
