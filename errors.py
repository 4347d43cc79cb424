class ConversionError(Exception):
    """Base class for failures of a conversion run."""


class DocumentSourceError(ConversionError):
    """The attached file could not be read into a document tree."""


class RecordNotFoundError(ConversionError):
    def __init__(self, record_id: str):
        super().__init__(f"No documentation unit with id {record_id!r}")
        self.record_id = record_id


class PersistenceError(ConversionError):
    """Saving the initialized core data failed. The caller decides about retries."""

    def __init__(self, record_id: str, reason: str = "save returned failure"):
        super().__init__(f"Could not persist documentation unit {record_id!r}: {reason}")
        self.record_id = record_id
        self.reason = reason


class CorruptRecordError(ConversionError):
    """A stored record exists but cannot be read back into core data."""

    def __init__(self, record_id: str, reason: str):
        super().__init__(f"Stored record {record_id!r} is unreadable: {reason}")
        self.record_id = record_id
        self.reason = reason
