"""
Tests for the execution engine: reset, step, done and run.
"""

import pytest

from simulator.errors import BoundaryOverwrite, ExecutionError, MissingTransition, ResetError, TapeUnderflow
from simulator.parser import parse, parse_file
from simulator.turing_machine import BLANK, BOUNDARY, Move, State, Tape

INCREMENT = """\
alphabet 0 1
tapes input
states q0(initial) qf(final)
[q0 >] -> [q0 @ ->]
[q0 1] -> [q0 1 ->]
[q0 0] -> [qf 1 -]
"""


def _machine(source=INCREMENT, seeds=()):
    machine = parse(source)
    machine.reset(seeds)
    return machine


# ─── Tape ─────────────────────

class TestTape:
    def test_new_tape_is_boundary_only(self):
        tape = Tape("t")
        assert tape.content == [BOUNDARY]
        assert tape.cursor == 0

    def test_keep_token_leaves_cell(self):
        tape = Tape("t")
        tape.load("a")
        tape.cursor = 1
        tape.write("@")
        assert tape.content == [">", "a"]
        tape.write("b")
        assert tape.content == [">", "b"]

    def test_right_at_last_cell_appends_one_blank(self):
        tape = Tape("t")
        tape.load("ab")
        tape.cursor = 2
        assert tape.shift(Move.RIGHT)
        assert tape.content == [">", "a", "b", BLANK]
        assert tape.cursor == 3

    def test_right_inside_tape_does_not_grow(self):
        tape = Tape("t")
        tape.load("ab")
        tape.shift(Move.RIGHT)
        assert len(tape.content) == 3
        assert tape.cursor == 1

    def test_left_at_zero_refused(self):
        tape = Tape("t")
        assert not tape.shift(Move.LEFT)
        assert tape.cursor == 0

    def test_stay(self):
        tape = Tape("t")
        tape.load("a")
        assert tape.shift(Move.STAY)
        assert tape.cursor == 0


# ─── Reset ─────────────────────

class TestReset:
    def test_reset_loads_seed(self):
        machine = _machine(seeds=["110"])
        tape = machine.tapes[0]
        assert tape.content == [">", "1", "1", "0"]
        assert tape.cursor == 0

    def test_reset_restores_initial_state(self):
        machine = _machine(seeds=["0"])
        machine.run()
        assert machine.current_state == "qf"
        machine.reset(["1"])
        assert machine.current_state == "q0"
        assert machine.steps == 0
        assert machine.tapes[0].content == [">", "1"]

    def test_missing_seeds_give_blank_tapes(self):
        machine = parse("tapes a b\nstates q(initial)\n")
        machine.reset(["xy"])
        assert machine.tapes[0].content == [">", "x", "y"]
        assert machine.tapes[1].content == [">"]
        assert machine.tapes[1].cursor == 0

    def test_too_many_seeds(self):
        machine = parse(INCREMENT)
        with pytest.raises(ResetError):
            machine.reset(["1", "0"])

    def test_reset_keeps_states_and_transitions(self):
        machine = parse(INCREMENT)
        transitions = dict(machine.transitions)
        machine.reset(["1"])
        assert machine.transitions == transitions
        assert set(machine.states) == {"q0", "qf"}


# ─── Step ─────────────────────

class TestStep:
    def test_unary_increment_scenario(self):
        machine = _machine(seeds=["110"])
        while not machine.done():
            machine.step()
        tape = machine.tapes[0]
        assert tape.content == [">", "1", "1", "1"]
        assert tape.cursor == 3
        assert machine.current_state == "qf"
        assert machine.steps == 4

    def test_step_returns_rule(self):
        machine = _machine(seeds=["1"])
        rule = machine.step()
        assert rule.state == "q0"
        assert rule.moves == (Move.RIGHT,)

    def test_missing_transition(self):
        machine = _machine("tapes t\nstates q0(initial)\n[q0 0] -> [q0 0 -]\n", ["1"])
        machine.tapes[0].cursor = 1
        with pytest.raises(MissingTransition) as info:
            machine.step()
        assert info.value.kind == "MissingTransition"
        assert info.value.state == "q0"
        assert info.value.symbols == ("1",)
        assert not machine.done()

    def test_missing_transition_on_boundary(self):
        machine = _machine("tapes t\nstates q0(initial)\n[q0 0] -> [q0 0 -]\n", ["1"])
        with pytest.raises(MissingTransition):
            machine.step()

    def test_boundary_marker_cannot_be_overwritten(self):
        machine = _machine("tapes t\nstates q(initial) h(final)\n[q >] -> [h x -]\n", [""])
        with pytest.raises(BoundaryOverwrite) as info:
            machine.step()
        assert info.value.kind == "BoundaryOverwrite"
        assert info.value.tape_name == "t"
        assert info.value.symbol == "x"
        assert machine.tapes[0].content == [BOUNDARY]

    def test_writing_the_marker_onto_itself_is_allowed(self):
        machine = _machine("tapes t\nstates q(initial) h(final)\n[q >] -> [h > ->]\n", [""])
        machine.step()
        assert machine.tapes[0].content == [BOUNDARY, BLANK]
        assert machine.done()

    def test_left_at_boundary_underflows(self):
        machine = _machine("tapes t\nstates q(initial)\n[q >] -> [q @ <-]\n", [""])
        with pytest.raises(TapeUnderflow) as info:
            machine.step()
        assert info.value.tape_name == "t"
        assert machine.tapes[0].cursor == 0
        assert isinstance(info.value, ExecutionError)

    def test_right_at_end_grows_by_one(self):
        machine = _machine("tapes t\nstates q(initial)\n[q >] -> [q @ ->]\n", [""])
        machine.step()
        assert machine.tapes[0].content == [">", BLANK]
        assert machine.tapes[0].cursor == 1

    def test_write_then_move_per_tape(self):
        source = "tapes a b\nstates q(initial) r(final)\n[q > >] -> [q @ @ -> -]\n[q 1 >] -> [r x @ -> -]\n"
        machine = _machine(source, ["1", ""])
        machine.step()
        machine.step()
        a, b = machine.tapes
        assert a.content == [">", "x", BLANK]
        assert a.cursor == 2
        assert b.content == [">"]
        assert b.cursor == 0
        assert machine.done()

    def test_two_tape_copy(self, definitions_dir):
        machine = parse_file(definitions_dir / "copy.tm")
        machine.reset(["ab"])
        steps = machine.run()
        assert steps == 7
        assert machine.current_state == "done"
        for tape in machine.tapes:
            assert tape.content == [">", "a", "b", BLANK]
            assert tape.cursor == 0

    def test_binary_not(self, definitions_dir):
        machine = parse_file(definitions_dir / "binary_not.tm")
        machine.reset(["101"])
        machine.run()
        assert machine.tapes[0].content == [">", "0", "1", "0", BLANK]
        assert machine.tapes[0].cursor == 4


# ─── Done / run ─────────────────────

class TestDoneAndRun:
    def test_done_depends_only_on_state(self):
        machine = _machine(seeds=["0"])
        assert not machine.done()
        machine.current_state = "qf"
        assert machine.done()
        machine.tapes[0].load("xyz")
        assert machine.done()

    def test_done_is_pure(self):
        machine = _machine(seeds=["10"])
        before = machine.snapshot()
        machine.done()
        assert machine.snapshot() == before

    def test_initial_final_state_is_done_immediately(self):
        machine = _machine("tapes t\nstates s(initial final)\n", [""])
        assert machine.done()
        assert machine.run() == 0

    def test_run_respects_max_steps(self):
        machine = _machine("tapes t\nstates q(initial) h(final)\n[q >] -> [q @ ->]\n[q _] -> [q 1 ->]\n", [""])
        assert machine.run(max_steps=10) == 10
        assert not machine.done()
        assert len(machine.tapes[0].content) == 11

    def test_run_calls_on_step(self):
        seen = []
        machine = _machine(seeds=["10"])
        machine.run(on_step=lambda m: seen.append(m.current_state))
        assert seen == ["q0", "q0", "qf"]

    def test_run_propagates_errors(self):
        machine = _machine(seeds=["1"])
        with pytest.raises(MissingTransition):
            machine.run()

    def test_snapshot(self):
        machine = _machine(seeds=["0"])
        machine.run()
        assert machine.snapshot() == {
            "state": "qf",
            "done": True,
            "steps": 2,
            "tapes": [{"name": "input", "content": [">", "1"], "cursor": 1}],
        }


class TestState:
    def test_equality_and_repr(self):
        assert State("a", is_initial=True) == State("a", is_initial=True)
        assert State("a") != State("a", is_final=True)
        assert repr(State("a", is_initial=True, is_final=True)) == "State('a', initial, final)"
