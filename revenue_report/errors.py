# revenue_report/errors.py


class ReportError(Exception):
    """Base class for every fatal pipeline error."""


class SchemaError(ReportError):
    def __init__(self, relation: str, missing):
        self.relation = relation
        self.missing = list(missing)
        super().__init__(
            f"relation '{relation}' is missing required column(s): {', '.join(self.missing)}"
        )


class ColumnTypeError(ReportError, TypeError):
    """A numeric column holds values that do not parse or do not fit its decimal type."""

    def __init__(self, relation: str, column: str, samples=(), reason: str = "is not numeric"):
        self.relation = relation
        self.column = column
        self.samples = list(samples)
        self.reason = reason
        super().__init__(
            f"relation '{relation}' column '{column}' {reason}, bad values: {self.samples}"
        )
