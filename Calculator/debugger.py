# debugger.py
import logging

logger = logging.getLogger("Calculator.trace")


class Debugger:
    """Append-only trace buffer the Executor writes phase results into.

    It never influences the evaluation. When enabled, every line is also
    forwarded to the `Calculator.trace` logger.
    """

    def __init__(self, enabled=False):
        self.enabled = enabled
        self.lines = []

    def debug(self, *args):
        line = "".join(str(arg) for arg in args)
        self.lines.append(line)
        if self.enabled:
            logger.debug(line)

    def clean(self):
        self.lines = []

    def __str__(self):
        return "\n".join(self.lines)
