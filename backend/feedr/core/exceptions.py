"""Exceptions raised by the recipe-extraction pipeline.

The Lambda runtime reports the class name as the error type, and the state
machine's Retry and Catch clauses match on those names. Renaming a class here
means updating ``feedr.services.state_machine`` as well.
"""


class FeedrError(Exception):
    """Base class for pipeline errors."""
    pass


class InputValidationError(FeedrError):
    """Raised when a submission lacks an id or both a url and a picture."""
    pass


class AcquisitionError(FeedrError):
    """Raised when raw recipe text cannot be fetched or OCR'd."""
    pass


class ExtractionError(FeedrError):
    """Raised when the language model call or its parsing fails."""
    pass


class PersistenceError(FeedrError):
    """Raised when a recipe item cannot be written."""
    pass


class RecipeNotFoundError(FeedrError):
    """Raised when no Recipe item exists for an id."""
    pass
