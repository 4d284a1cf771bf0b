"""Exceptions raised while building a report."""


class ReportError(Exception):
    """Base class for report generation failures."""


class DocumentError(ReportError, ValueError):
    """The API document could not be parsed or has the wrong top-level shape."""


class ConfigError(ReportError, ValueError):
    """A report configuration file is malformed."""
