class Error(Exception):
    """
    Base class for provider errors.
    """


class NotThisResourceKind(Error):  # noqa: N818
    """
    Raised when an object that is not a data source is given to the provider.
    """
    def __init__(self, obj):
        self.obj = obj
        super().__init__(
            f"managed resource is not a DataSource custom resource "
            f"(got '{type(obj).__name__}')"
        )


class FetchError(Error):
    """
    Base class for errors raised when looking up the value of a data source.
    """


class InvalidParameters(FetchError):  # noqa: N818
    """
    Raised when the parameters for a data source are not valid for its type.
    """
    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(message)


class SourceUnreachable(FetchError):  # noqa: N818
    """
    Raised when a source could not be reached or the requested entry does not exist.
    """
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"source '{source}' is unreachable: {reason}")


class SourceRespondedWithFailure(FetchError):  # noqa: N818
    """
    Raised when an HTTP source responds with a non-success status code.
    """
    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"source '{url}' responded with HTTP status {status_code}")


class DecodeFailure(FetchError):  # noqa: N818
    """
    Raised when the data from a source cannot be decoded as JSON.
    """
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"data from source '{source}' could not be decoded: {reason}")


class ConnectError(Error):
    """
    Base class for errors raised while connecting a data source to its provider config.
    """


class ConfigNotFound(ConnectError):  # noqa: N818
    """
    Raised when the provider config for a data source does not exist.
    """
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"cannot get ProviderConfig '{name}'")


class UsageTrackingFailed(ConnectError):  # noqa: N818
    """
    Raised when the usage of a provider config cannot be recorded.
    """
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"cannot track usage of ProviderConfig '{name}': {reason}")


class ReconcileError(Error):
    """
    Raised when a phase of the reconciliation fails.

    The underlying error is available as ``__cause__``.
    """
    def __init__(self, context: str, cause: Exception):
        self.context = context
        self.cause = cause
        super().__init__(f"{context}: {cause}")
