# taskflow/services/errors.py
"""
Service-level exceptions. Routers translate these into HTTP responses.
"""


class ReportError(Exception):
    """Base class for report generation failures"""


class InvalidInput(ReportError):
    """Missing, non-numeric or out-of-range request parameters"""


class DataUnavailable(ReportError):
    """A store query failed; the whole report is abandoned"""


class SheetsUnavailable(Exception):
    """The purchase spreadsheet could not be read"""
