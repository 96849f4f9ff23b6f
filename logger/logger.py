import json
import os
from datetime import datetime, timezone

class RunLogger:
    """Appends JSON lines to dated files: step traces, run summaries, and halted/failed outcomes."""

    def __init__(self, output_directory="logs/", log_file_prefix="turing_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.trace_file = os.path.join(self.output_directory, f"{self.log_file_prefix}{self.today}.jsonl")

    def _append(self, path, entries):
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log_batch(self, snapshots: list):
        """Write one run's step snapshots in a single append."""
        self._append(self.trace_file, snapshots)

    def log_summary(self, entries: list):
        self._append(os.path.join(self.output_directory, f"{self.log_file_prefix}summary_{self.today}.jsonl"), entries)

    def log_halted(self, entries: list):
        """Final snapshots of runs that reached a final state."""
        self._append(os.path.join(self.output_directory, f"halted_{self.today}.jsonl"), entries)

    def log_failed(self, entries: list):
        """Runs stopped by an execution error or the step limit."""
        self._append(os.path.join(self.output_directory, f"failed_{self.today}.jsonl"), entries)
