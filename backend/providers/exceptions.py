class ResolutionFailure(ValueError):
    """
    A descriptor could not be turned into an embed URL. Always recoverable:
    pick another provider or fix the descriptor.
    """

    code = "resolution_failed"

    def __init__(self, message: str, *, provider: str | None = None):
        self.provider = provider
        super().__init__(message)


class MissingIdentifier(ResolutionFailure):
    code = "missing_identifier"


class UnsupportedKind(ResolutionFailure):
    code = "unsupported_kind"


class NoCompatibleProvider(ResolutionFailure):
    code = "no_compatible_provider"


class UnknownProvider(ResolutionFailure):
    code = "unknown_provider"
