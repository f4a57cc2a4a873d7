"""Domain exceptions."""


class ProcessingError(Exception):
    """A processing run could not produce a result."""


class SpreadsheetFormatError(ProcessingError):
    """The upload is not a readable spreadsheet."""


class MissingColumnError(ProcessingError):
    """A mandatory column was not found in the header row."""

    def __init__(self, role: str, synonyms: tuple[str, ...]) -> None:
        self.role = role
        self.synonyms = synonyms
        quoted = " or ".join(f'"{s.upper()}"' for s in synonyms)
        super().__init__(
            f"Could not find {role.upper()} column. "
            f"Please ensure your file has a column containing {quoted}"
        )


class ConfigStoreError(Exception):
    """Site or stakeholder configuration could not be read."""


class EmailDeliveryError(Exception):
    """An email transport failed to deliver a message."""
