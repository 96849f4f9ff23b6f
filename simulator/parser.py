"""
Parser for the machine definition language.

    alphabet 0 1
    tapes input work
    states q0(initial) q1 qf(final)
    # comment
    [q0 1 _] -> [q1 @ 1 -> -]

The parser is a finite automaton over the token stream. Each phase has a
handler that consumes one token and returns the next phase:

    Begin                  alphabet -> Alphabet, tapes -> Tapes, states -> States,
                           [ -> TransitionInputState, # -> Comment
    Alphabet / Tapes       word -> same, newline -> Begin
    States                 word -> States, ( -> StateOptions, newline -> Begin
    StateOptions           initial|final -> StateOptions, ) -> States
    Comment                newline -> Begin
    TransitionInputState   word -> TransitionInputSymbol
    TransitionInputSymbol  word -> same, ] -> Transition
    Transition             -> -> Transition, [ -> TransitionOutputState
    TransitionOutputState  word -> TransitionOutputSymbol
    TransitionOutputSymbol word -> same, after one per tape -> TransitionOutputMoves
    TransitionOutputMoves  word -> same, ] -> Begin

Anything else is a fatal ParseError carrying the line number.
"""

from enum import Enum

from simulator.errors import DefinitionSyntaxError, MultipleInitialError, UndefinedStateError
from simulator.lexer import TokenType, tokenize
from simulator.turing_machine import Move, State, Tape, TransitionKey, TransitionValue, TuringMachine


class Phase(Enum):
    BEGIN = "Begin"
    ALPHABET = "Alphabet"
    TAPES = "Tapes"
    STATES = "States"
    STATE_OPTIONS = "StateOptions"
    COMMENT = "Comment"
    TRANSITION_INPUT_STATE = "TransitionInputState"
    TRANSITION_INPUT_SYMBOL = "TransitionInputSymbol"
    TRANSITION = "Transition"
    TRANSITION_OUTPUT_STATE = "TransitionOutputState"
    TRANSITION_OUTPUT_SYMBOL = "TransitionOutputSymbol"
    TRANSITION_OUTPUT_MOVES = "TransitionOutputMoves"


COMMANDS = {
    "alphabet": Phase.ALPHABET,
    "tapes": Phase.TAPES,
    "states": Phase.STATES,
}

STATE_OPTIONS = ("initial", "final")

ARROW = "->"

# Phases in which a line may legally end
LINE_PHASES = {Phase.BEGIN, Phase.ALPHABET, Phase.TAPES, Phase.STATES, Phase.COMMENT}


class Parser:
    def __init__(self, source):
        self.tokens = tokenize(source)
        self.phase = Phase.BEGIN

        self.alphabet = []
        self.tapes = []
        self.states = {}
        self.transitions = {}
        self.initial_state = None
        self.overridden = []

        self._rule_lines = {}
        self._line_items = 0
        self._last_state = None
        self._clear_rule()

        self._handlers = {
            Phase.BEGIN: self._begin,
            Phase.ALPHABET: self._alphabet,
            Phase.TAPES: self._tapes,
            Phase.STATES: self._states,
            Phase.STATE_OPTIONS: self._state_options,
            Phase.COMMENT: self._comment,
            Phase.TRANSITION_INPUT_STATE: self._input_state,
            Phase.TRANSITION_INPUT_SYMBOL: self._input_symbol,
            Phase.TRANSITION: self._transition,
            Phase.TRANSITION_OUTPUT_STATE: self._output_state,
            Phase.TRANSITION_OUTPUT_SYMBOL: self._output_symbol,
            Phase.TRANSITION_OUTPUT_MOVES: self._output_moves,
        }

    def parse(self):
        for token in self.tokens:
            if token.type is TokenType.EOF:
                self._finish(token)
                break
            if token.type is TokenType.COMMENT:
                # Inside a clause the comment is skipped and the line break that follows is reported
                if self.phase in LINE_PHASES:
                    self._end_line(token)
                    self.phase = Phase.COMMENT
                continue
            self.phase = self._handlers[self.phase](token)

        return TuringMachine(
            self.initial_state,
            self.states,
            self.tapes,
            self.transitions,
            alphabet=self.alphabet,
            overridden=self.overridden,
        )

    # === Helpers ===
    def _syntax_error(self, message, token):
        raise DefinitionSyntaxError(message, token.line, token.value)

    def _unexpected(self, token):
        if token.type is TokenType.NEWLINE:
            self._syntax_error("unexpected line break", token)
        self._syntax_error(f"unexpected {token.value!r}", token)

    def _resolve_state(self, token):
        if token.value not in self.states:
            raise UndefinedStateError(f"undefined state {token.value!r}", token.line, token.value)
        return token.value

    def _clear_rule(self):
        self._rule_line = None
        self._input_state_name = None
        self._reads = []
        self._arrow = False
        self._output_state_name = None
        self._writes = []
        self._moves = []

    def _end_line(self, token):
        """Close an alphabet/tapes/states line, which must have named at least one item."""
        if self.phase in COMMANDS.values() and self._line_items == 0:
            self._syntax_error(f"expected at least one name after {self.phase.value.lower()!r}", token)

    def _finish(self, token):
        if self.phase not in LINE_PHASES:
            self._syntax_error("unexpected end of file", token)
        self._end_line(token)
        if self.initial_state is None:
            raise UndefinedStateError("no initial state declared", token.line)

    # === Top level ===
    def _begin(self, token):
        if token.type is TokenType.NEWLINE:
            return Phase.BEGIN
        if token.type is TokenType.WORD:
            if token.value not in COMMANDS:
                self._syntax_error(f"unknown command {token.value!r}", token)
            self._line_items = 0
            self._last_state = None
            return COMMANDS[token.value]
        if token.type is TokenType.LBRACKET:
            if not self.tapes:
                self._syntax_error("transition defined before any tapes were declared", token)
            self._clear_rule()
            self._rule_line = token.line
            return Phase.TRANSITION_INPUT_STATE
        self._unexpected(token)

    def _comment(self, token):
        return Phase.BEGIN if token.type is TokenType.NEWLINE else Phase.COMMENT

    def _alphabet(self, token):
        if token.type is TokenType.WORD:
            self.alphabet.append(token.value)
            self._line_items += 1
            return Phase.ALPHABET
        if token.type is TokenType.NEWLINE:
            self._end_line(token)
            return Phase.BEGIN
        self._unexpected(token)

    def _tapes(self, token):
        if token.type is TokenType.WORD:
            if self.transitions:
                self._syntax_error("tapes declared after transitions", token)
            if any(tape.name == token.value for tape in self.tapes):
                self._syntax_error(f"duplicate tape {token.value!r}", token)
            self.tapes.append(Tape(token.value))
            self._line_items += 1
            return Phase.TAPES
        if token.type is TokenType.NEWLINE:
            self._end_line(token)
            return Phase.BEGIN
        self._unexpected(token)

    def _states(self, token):
        if token.type is TokenType.WORD:
            if token.value in self.states:
                self._syntax_error(f"duplicate state {token.value!r}", token)
            self.states[token.value] = State(token.value)
            self._last_state = token.value
            self._line_items += 1
            return Phase.STATES
        if token.type is TokenType.LPAREN:
            if self._last_state is None:
                self._syntax_error("state options given without a state name", token)
            return Phase.STATE_OPTIONS
        if token.type is TokenType.NEWLINE:
            self._end_line(token)
            return Phase.BEGIN
        self._unexpected(token)

    def _state_options(self, token):
        if token.type is TokenType.WORD:
            state = self.states[self._last_state]
            if token.value == "initial":
                if self.initial_state is not None and self.initial_state != state.name:
                    raise MultipleInitialError(
                        f"state {state.name!r} flagged initial but {self.initial_state!r} already is",
                        token.line,
                        token.value,
                    )
                state.is_initial = True
                self.initial_state = state.name
            elif token.value == "final":
                state.is_final = True
            else:
                self._syntax_error(
                    f"unknown state option {token.value!r} (expected one of {', '.join(STATE_OPTIONS)})",
                    token,
                )
            return Phase.STATE_OPTIONS
        if token.type is TokenType.RPAREN:
            self._last_state = None
            return Phase.STATES
        self._unexpected(token)

    # === Transitions ===
    def _input_state(self, token):
        if token.type is TokenType.WORD:
            self._input_state_name = self._resolve_state(token)
            return Phase.TRANSITION_INPUT_SYMBOL
        self._unexpected(token)

    def _input_symbol(self, token):
        if token.type is TokenType.WORD:
            self._reads.append(token.value)
            return Phase.TRANSITION_INPUT_SYMBOL
        if token.type is TokenType.RBRACKET:
            if len(self._reads) != len(self.tapes):
                self._syntax_error(
                    f"expected {len(self.tapes)} read symbols, got {len(self._reads)}", token
                )
            return Phase.TRANSITION
        self._unexpected(token)

    def _transition(self, token):
        if token.type is TokenType.WORD and token.value == ARROW and not self._arrow:
            self._arrow = True
            return Phase.TRANSITION
        if token.type is TokenType.LBRACKET:
            if not self._arrow:
                self._syntax_error(f"expected {ARROW!r} between transition clauses", token)
            return Phase.TRANSITION_OUTPUT_STATE
        self._unexpected(token)

    def _output_state(self, token):
        if token.type is TokenType.WORD:
            self._output_state_name = self._resolve_state(token)
            return Phase.TRANSITION_OUTPUT_SYMBOL
        self._unexpected(token)

    def _output_symbol(self, token):
        if token.type is TokenType.WORD:
            self._writes.append(token.value)
            if len(self._writes) == len(self.tapes):
                return Phase.TRANSITION_OUTPUT_MOVES
            return Phase.TRANSITION_OUTPUT_SYMBOL
        if token.type is TokenType.NEWLINE:
            self._syntax_error(
                f"unexpected line break: expected {len(self.tapes)} write symbols, got {len(self._writes)}",
                token,
            )
        if token.type is TokenType.RBRACKET:
            self._syntax_error(
                f"expected {len(self.tapes)} write symbols, got {len(self._writes)}", token
            )
        self._unexpected(token)

    def _output_moves(self, token):
        if token.type is TokenType.WORD:
            try:
                move = Move(token.value)
            except ValueError:
                self._syntax_error(f"unknown move {token.value!r}", token)
            if len(self._moves) == len(self.tapes):
                self._syntax_error(f"too many moves, expected {len(self.tapes)}", token)
            self._moves.append(move)
            return Phase.TRANSITION_OUTPUT_MOVES
        if token.type is TokenType.RBRACKET:
            if len(self._moves) != len(self.tapes):
                self._syntax_error(f"expected {len(self.tapes)} moves, got {len(self._moves)}", token)
            self._commit_rule()
            return Phase.BEGIN
        self._unexpected(token)

    def _commit_rule(self):
        key = TransitionKey(self._input_state_name, tuple(self._reads))
        if key in self.transitions:
            self.overridden.append((self._rule_lines[key], key))
        self.transitions[key] = TransitionValue(self._output_state_name, tuple(self._writes), tuple(self._moves))
        self._rule_lines[key] = self._rule_line
        self._clear_rule()


def parse(source):
    """Build a TuringMachine from definition source text."""
    return Parser(source).parse()


def parse_file(path):
    with open(path, "rb") as f:
        raw = f.read()
    try:
        source = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        line = raw.count(b"\n", 0, e.start) + 1
        raise DefinitionSyntaxError(f"invalid UTF-8 byte {raw[e.start:e.start + 1]!r}", line, None) from e
    return parse(source)
