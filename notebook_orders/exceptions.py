"""
notebook_orders.exceptions

Error kinds of the order-to-artifact pipeline. Views translate these into JSON
envelopes; clients only ever see a message string, never the kind.
"""


class NotebookPipelineError(Exception):
    """Base class for pipeline errors."""


class SignatureInvalid(NotebookPipelineError):
    """Webhook not authentic or not fresh. One message for every cause."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class MissingMetadata(NotebookPipelineError):
    """Paid event lacks owner id, calendar id or fiscal year."""

    def __init__(self, message: str = "Missing metadata"):
        super().__init__(message)


class StoreUnavailable(NotebookPipelineError):
    """The transactional store failed; nothing was written."""


class DispatchFailed(NotebookPipelineError):
    """The worker endpoint did not accept the job. The ledger write stands."""


class GenerationFailed(NotebookPipelineError):
    """Generation could not produce an artifact; the order ends in `failed`."""


class CalendarSourceError(GenerationFailed):
    """Calendar data could not be read."""
