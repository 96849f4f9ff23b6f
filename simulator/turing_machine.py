from enum import Enum
from typing import NamedTuple

from simulator.errors import BoundaryOverwrite, MissingTransition, ResetError, TapeUnderflow

BLANK = "_"
BOUNDARY = ">"
KEEP = "@"


class Move(Enum):
    LEFT = "<-"
    RIGHT = "->"
    STAY = "-"


class State:
    def __init__(self, name, is_initial=False, is_final=False):
        self.name = name
        self.is_initial = is_initial
        self.is_final = is_final

    def __eq__(self, other):
        if not isinstance(other, State):
            return NotImplemented
        return (self.name, self.is_initial, self.is_final) == (other.name, other.is_initial, other.is_final)

    def __repr__(self):
        flags = [f for f, on in (("initial", self.is_initial), ("final", self.is_final)) if on]
        return f"State({self.name!r}{', ' + ', '.join(flags) if flags else ''})"


class Tape:
    def __init__(self, name):
        self.name = name
        self.content = [BOUNDARY]
        self.cursor = 0

    def load(self, seed=""):
        """Replace the content with the boundary marker followed by one cell per character."""
        self.content = [BOUNDARY] + list(seed)
        self.cursor = 0

    def read(self):
        return self.content[self.cursor]

    def write(self, symbol):
        """Write a symbol under the head. Returns False if it would replace the boundary marker."""
        if symbol == KEEP:
            return True
        if self.cursor == 0 and symbol != BOUNDARY:
            return False
        self.content[self.cursor] = symbol
        return True

    def shift(self, move):
        """Move the head. Returns False if the move would cross the boundary marker."""
        if move is Move.LEFT:
            if self.cursor == 0:
                return False
            self.cursor -= 1
        elif move is Move.RIGHT:
            self.cursor += 1
            if self.cursor == len(self.content):
                self.content.append(BLANK)
        return True

    def __repr__(self):
        return f"Tape({self.name!r}, {''.join(self.content)!r}, cursor={self.cursor})"


class TransitionKey(NamedTuple):
    state: str
    symbols: tuple


class TransitionValue(NamedTuple):
    state: str
    writes: tuple
    moves: tuple


class TuringMachine:
    def __init__(self, initial_state, states, tapes, transitions, alphabet=None, overridden=None):
        self.initial_state = initial_state
        self.states = states
        self.tapes = tapes
        self.transitions = transitions
        self.alphabet = list(alphabet or [])
        # (line, key) for every rule replaced by a later one with the same key
        self.overridden = list(overridden or [])
        self.current_state = initial_state
        self.steps = 0

    def reset(self, seeds=()):
        seeds = list(seeds)
        if len(seeds) > len(self.tapes):
            raise ResetError(f"{len(seeds)} seed strings given for {len(self.tapes)} tapes", self.current_state)
        for idx, tape in enumerate(self.tapes):
            tape.load(seeds[idx] if idx < len(seeds) else "")
        self.current_state = self.initial_state
        self.steps = 0

    def step(self):
        symbols = tuple(tape.read() for tape in self.tapes)
        key = TransitionKey(self.current_state, symbols)
        if key not in self.transitions:
            raise MissingTransition(self.current_state, symbols)
        rule = self.transitions[key]

        self.current_state = rule.state
        for tape, write, move in zip(self.tapes, rule.writes, rule.moves):
            if not tape.write(write):
                raise BoundaryOverwrite(self.current_state, tape.name, write)
            if not tape.shift(move):
                raise TapeUnderflow(self.current_state, tape.name)
        self.steps += 1
        return rule

    def done(self):
        state = self.states.get(self.current_state)
        return state is not None and state.is_final

    def run(self, max_steps=None, on_step=None):
        """Step until a final state is reached or max_steps steps were taken. Returns the step count."""
        steps = 0
        while not self.done() and (not max_steps or steps < max_steps):
            self.step()
            steps += 1
            if on_step is not None:
                on_step(self)
        return steps

    def snapshot(self):
        return {
            "state": self.current_state,
            "done": self.done(),
            "steps": self.steps,
            "tapes": [
                {"name": tape.name, "content": list(tape.content), "cursor": tape.cursor}
                for tape in self.tapes
            ],
        }
