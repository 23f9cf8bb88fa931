"""
Error types raised by the pipeline.

Every error aborts the run; nothing here is retried.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class DataFileError(PipelineError, IOError):
    """Input file is absent or cannot be read."""


class FormatError(PipelineError, ValueError):
    """Input does not have the expected sheet, columns or types."""


class DataError(PipelineError, ValueError):
    """A column is degenerate (all missing, too few values for a statistic)."""


class NumericError(PipelineError, ArithmeticError):
    """The regression problem is ill-conditioned (rank-deficient design matrix)."""
