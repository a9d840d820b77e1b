"""
Order pipeline exception hierarchy.

Row-level problems never raise; they degrade to TBD / None / Unknown.
These errors are for run-level failures only.
"""


class OrderPipelineError(Exception):
    """Base exception for all order pipeline failures."""


class RecordParseError(OrderPipelineError):
    """Raised when the uploaded payload cannot be read into rows."""


class PipelineRunError(OrderPipelineError):
    """Raised for unexpected failures while normalizing or aggregating rows."""
