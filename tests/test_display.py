from rich.console import Console

from simulator import display
from simulator.display import CURSOR_STYLE, animate, print_final, render
from simulator.parser import parse

SOURCE = """\
tapes input scratch
states q(initial) h(final)
[q > >] -> [q @ @ -> -]
[q 1 >] -> [h 0 @ - -]
"""


def _machine():
    machine = parse(SOURCE)
    machine.reset(["1"])
    return machine


class TestRender:
    def test_lines(self):
        frame = render(_machine())
        assert frame.plain.split("\n") == [
            "state : q",
            "tape input : >1",
            "tape scratch : >",
        ]

    def test_cursor_cell_is_styled(self):
        machine = _machine()
        machine.step()
        frame = render(machine)
        styled = [frame.plain[span.start:span.end] for span in frame.spans if span.style == CURSOR_STYLE]
        assert styled == ["1", ">"]


class TestAnimate:
    def test_runs_to_final_state(self, monkeypatch):
        sleeps = []
        monkeypatch.setattr(display.time, "sleep", sleeps.append)
        machine = _machine()
        console = Console(record=True, width=80)
        seen = []
        steps = animate(machine, delay=0.5, console=console, on_step=lambda m: seen.append(m.current_state))
        assert steps == 2
        assert sleeps == [0.5, 0.5]
        assert seen == ["q", "h"]
        assert machine.done()

    def test_max_steps(self, monkeypatch):
        monkeypatch.setattr(display.time, "sleep", lambda _: None)
        machine = _machine()
        assert animate(machine, delay=0, max_steps=1, console=Console(record=True)) == 1
        assert not machine.done()

    def test_print_final(self):
        console = Console(record=True, width=80)
        machine = _machine()
        machine.run()
        print_final(machine, console)
        text = console.export_text()
        assert "state : h" in text
        assert "tape input : >0" in text
