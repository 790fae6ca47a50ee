"""Exceptions raised by the curation pipeline."""


class CurationError(Exception):
    """Base class for curation errors."""


class InvalidRequestError(CurationError):
    """The request cannot be processed at all (e.g. no job role)."""


class MissingCredentialError(CurationError):
    """A source needs a credential that is not configured."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"{variable} environment variable is missing.")
        self.variable = variable
