class SafeHashesError(Exception):
    pass


class UnsupportedVersion(SafeHashesError):
    """No supported Safe contract for the given version.

    Raised for an empty version (no Safe deployed on the network) and for
    versions below 0.1.0. Callers treat it as "nothing to verify".
    """

    def __init__(self, version: str, message: str):
        super().__init__(message)
        self.version = version


class InvalidInput(SafeHashesError, ValueError):
    pass


class MissingNestedParameter(InvalidInput):
    pass


class AmbiguousSelection(SafeHashesError):
    """Several transactions share the requested nonce."""

    def __init__(self, count: int):
        super().__init__(
            f"Found {count} transactions with the same nonce. "
            "Select one by index."
        )
        self.count = count


class NoTransactionFound(SafeHashesError):
    pass
