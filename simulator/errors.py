# simulator/errors.py

class TuringError(Exception):
    """Base class for every problem raised while loading or running a machine."""


# === Parse-time errors ===
class ParseError(TuringError):
    kind = "ParseError"

    def __init__(self, message, line, token=None):
        self.message = message
        self.line = line
        self.token = token
        super().__init__(f"{self.kind} at line {line}: {message}")

    def to_dict(self):
        return {"kind": self.kind, "line": self.line, "token": self.token, "message": self.message}


class DefinitionSyntaxError(ParseError):
    kind = "SyntaxError"


class UndefinedStateError(ParseError):
    kind = "ReferenceError"


class MultipleInitialError(ParseError):
    kind = "MultipleInitialError"


# === Execution-time errors ===
class ExecutionError(TuringError):
    kind = "RuntimeError"

    def __init__(self, message, state=None):
        self.message = message
        self.state = state
        super().__init__(f"{self.kind}: {message}")

    def to_dict(self):
        return {"kind": self.kind, "state": self.state, "message": self.message}


class MissingTransition(ExecutionError):
    kind = "MissingTransition"

    def __init__(self, state, symbols):
        self.symbols = tuple(symbols)
        super().__init__(f"no transition for state {state!r} reading {' '.join(self.symbols)!r}", state)


class TapeUnderflow(ExecutionError):
    kind = "TapeUnderflow"

    def __init__(self, state, tape_name):
        self.tape_name = tape_name
        super().__init__(f"head of tape {tape_name!r} cannot move left of the boundary marker", state)


class ResetError(ExecutionError):
    kind = "ResetError"


class BoundaryOverwrite(ExecutionError):
    kind = "BoundaryOverwrite"

    def __init__(self, state, tape_name, symbol):
        self.tape_name = tape_name
        self.symbol = symbol
        super().__init__(f"cannot write {symbol!r} over the boundary marker of tape {tape_name!r}", state)
