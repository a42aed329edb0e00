"""
exits.py — process exit signals raised by the hooks

Both are SystemExit subclasses: left uncaught they end the process with the
documented code (0 for a skip, 255 for a fatal failure) and no traceback.
The step runner catches StepSkipped to abort only the current step.
"""

SKIP_EXIT_CODE = 0
FAILED_EXIT_CODE = 255


class StepSkipped(SystemExit):
    def __init__(self, kind: str, title: str = ""):
        super().__init__(SKIP_EXIT_CODE)
        self.kind = kind
        self.title = title

    def __str__(self) -> str:
        return f"{self.kind} skipped: {self.title}"


class ScriptFailed(SystemExit):
    def __init__(self, *context):
        super().__init__(FAILED_EXIT_CODE)
        self.context = context

    def __str__(self) -> str:
        return " ".join(str(c) for c in self.context)
