import argparse

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simulator.errors import ParseError
from simulator.parser import parse_file

def describe(machine):
    """Summarize a parsed machine as plain data."""
    return {
        "alphabet": list(machine.alphabet),
        "tapes": [tape.name for tape in machine.tapes],
        "states": [
            {"name": state.name, "initial": state.is_initial, "final": state.is_final}
            for state in machine.states.values()
        ],
        "initial_state": machine.initial_state,
        "transitions": [
            {
                "state": key.state,
                "reads": list(key.symbols),
                "next_state": value.state,
                "writes": list(value.writes),
                "moves": [move.value for move in value.moves],
            }
            for key, value in machine.transitions.items()
        ],
        "overridden": [{"line": line, "state": key.state, "reads": list(key.symbols)} for line, key in machine.overridden],
    }

def pretty_print_definition(machine, console=None):
    """Print the declarations and a transition table for a parsed machine."""
    console = console or Console()
    info = describe(machine)

    console.print("\n[bold]=== Definition ===[/bold]")
    console.print(f"  Alphabet: {escape(' '.join(info['alphabet'])) or '(none)'}")
    console.print(f"  Tapes: {escape(' '.join(info['tapes']))}")
    flagged = []
    for state in info["states"]:
        flags = [name for name in ("initial", "final") if state[name]]
        flagged.append(f"{state['name']}({' '.join(flags)})" if flags else state["name"])
    console.print(f"  States: {escape(' '.join(flagged))}")

    table = Table(title="Transition Table", show_header=True, header_style="bold magenta")
    table.add_column("State")
    table.add_column("Read")
    table.add_column("Next State")
    table.add_column("Write")
    table.add_column("Move")
    for rule in info["transitions"]:
        cells = (rule["state"], " ".join(rule["reads"]), rule["next_state"], " ".join(rule["writes"]), " ".join(rule["moves"]))
        table.add_row(*(escape(cell) for cell in cells))
    console.print(table)

    for entry in info["overridden"]:
        rule = escape(f"[{entry['state']} {' '.join(entry['reads'])}]")
        console.print(f"[yellow]Rule on line {entry['line']} for {rule} is overridden by a later rule.[/yellow]")

def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Definition Inspector")
    parser.add_argument("definition", help="Path to a machine definition file")
    args = parser.parse_args(argv)

    console = Console()
    try:
        machine = parse_file(args.definition)
    except ParseError as e:
        console.print(f"[red]{e.kind}[/red] at line {e.line}: {escape(e.message)}")
        return 2
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    pretty_print_definition(machine, console)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
