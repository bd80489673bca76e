"""
Diagnostic emission helper for semantic passes.

Errors in the semantic passes are raised as CompileError subclasses; this
wrapper is what passes use for the non-fatal side (warnings), binding the
reporter once instead of threading it through every call:

    self.err = PassErrorReporter(reporter)
    self.err.emit(er.ERR.XW2001, span, name="Shape", labels="'TRIANGLE'")
"""

from typing import Optional
from xdrc.internals.report import Span, Reporter
from xdrc.internals import errors as er


class PassErrorReporter:
    """Thin wrapper for diagnostic emission in semantic passes."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter

    def emit(self, error_msg: er.ErrorMessage, span: Optional[Span], **kwargs) -> None:
        """Emit an error or warning.

        Args:
            error_msg: The catalog entry (e.g., er.ERR.XW2001)
            span: Source location span (can be None)
            **kwargs: Format parameters for the message
        """
        er.emit(self.reporter, error_msg, span, **kwargs)
