# simulator/display.py

import time

from rich.console import Console
from rich.live import Live
from rich.text import Text

CURSOR_STYLE = "bold red underline"


def render(machine):
    """Build one frame: the current state followed by every tape with its head cell highlighted."""
    frame = Text()
    frame.append(f"state : {machine.current_state}\n")
    for tape in machine.tapes:
        frame.append(f"tape {tape.name} : ")
        for idx, symbol in enumerate(tape.content):
            frame.append(symbol, style=CURSOR_STYLE if idx == tape.cursor else None)
        frame.append("\n")
    frame.rstrip()
    return frame


def animate(machine, delay=1.0, max_steps=None, console=None, on_step=None):
    """Step the machine, redrawing the frame in place and sleeping between steps."""
    console = console or Console()
    steps = 0
    with Live(render(machine), console=console, auto_refresh=False) as live:
        while not machine.done() and (not max_steps or steps < max_steps):
            machine.step()
            steps += 1
            if on_step is not None:
                on_step(machine)
            time.sleep(delay)
            live.update(render(machine), refresh=True)
    return steps


def print_final(machine, console=None):
    console = console or Console()
    console.print(render(machine))
