"""Domain errors raised by the tone services."""


class ToneCheckError(Exception):
    """Base class for tone evaluation failures."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class MissingSignature(ToneCheckError):
    """The brand has no stored tone signature."""

    status_code = 404

    def __init__(self, brand_id: str):
        super().__init__(f"No tone signature found for brand {brand_id}")
        self.brand_id = brand_id


class NoSignaturesStored(ToneCheckError):
    status_code = 404

    def __init__(self):
        super().__init__("No brand signatures stored")


class MalformedOracleResponse(ToneCheckError):
    """Oracle output could not be parsed into the expected shape."""

    status_code = 502


class OracleUnavailable(ToneCheckError):
    status_code = 502


class OracleTimeout(ToneCheckError):
    status_code = 504


class NotifierUnreachable(ToneCheckError):
    status_code = 502


class StoreError(ToneCheckError):
    """The backing store rejected or failed a query."""

    status_code = 500


class SweepInProgress(ToneCheckError):
    """A retune sweep is already running."""

    status_code = 409
