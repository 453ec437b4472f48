"""Exceptions raised by the strand analysis model."""


class StrandAnalysisError(Exception):
    """Base class for all analysis errors."""


class UnknownProductType(StrandAnalysisError, KeyError):
    """The requested product type is not in the geometry catalog."""

    def __init__(self, product_type: str) -> None:
        super().__init__(product_type)
        self.product_type = product_type

    def __str__(self) -> str:
        return f"Unknown product type '{self.product_type}'"


class InvalidCutSpec(StrandAnalysisError, ValueError):
    """A cut width/keeper side combination that cannot be applied to the plank."""


class DuplicateReading(StrandAnalysisError, ValueError):
    """More than one slippage reading for the same strand end."""


class UnknownPattern(StrandAnalysisError, KeyError):
    """The requested strand pattern is not in the repository."""

    def __init__(self, pattern_id: str) -> None:
        super().__init__(pattern_id)
        self.pattern_id = pattern_id

    def __str__(self) -> str:
        return f"Unknown strand pattern '{self.pattern_id}'"


class RecordFormatError(StrandAnalysisError, ValueError):
    """A pattern, job or slippage record could not be interpreted."""
