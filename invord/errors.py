class ReportParseError(Exception):
    """Base class for everything the report parser raises on purpose."""


class InvalidReportError(ReportParseError):
    """
    The extracted text as a whole is not an Inventory Order Report (or the
    extraction upstream failed). Fatal for the parse call.
    """


class LineParseError(ReportParseError):
    """A single line could not be turned into a record. Recovered per line."""
