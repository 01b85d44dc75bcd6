"""
Fatal error types for a postal geometry run.

Per-feature geometric problems never raise; they are recorded as skips in the
run report. Only these errors abort a run.
"""


class PostalPipelineError(Exception):
    """Base class for fatal pipeline errors."""


class ConfigurationError(PostalPipelineError):
    """Missing or contradictory run configuration."""


class MaskBuildError(PostalPipelineError):
    """The mask could not be turned into any geometry."""


class InputDataError(PostalPipelineError):
    """A required input file is missing or unreadable."""
