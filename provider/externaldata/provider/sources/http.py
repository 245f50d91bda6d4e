import logging
import typing as t

import httpx
from httpx_retries import Retry, RetryTransport

from .. import errors


logger = logging.getLogger(__name__)


#: The content type that is requested from HTTP sources
ACCEPT = "application/json"
#: The URL schemes that HTTP sources may use
SCHEMES = ("http", "https")
#: The timeout (seconds) for each request to an HTTP source
TIMEOUT = 1.0
#: The number of times a request is retried after a transport error
#: Requests are never retried because of the HTTP status of the response
RETRIES = 1


async def _log_response(response):
    """
    HTTPX response hook that logs responses.
    """
    logger.info(
        "Data source request: \"%s %s\" %s",
        response.request.method,
        response.request.url,
        response.status_code
    )


def client(
    base_url: t.Optional[str] = None,
    headers: t.Optional[t.Mapping[str, str]] = None,
    transport: t.Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """
    Returns an HTTPX client for reading from HTTP sources.

    The transport retries requests that fail at the transport level.
    """
    retry = Retry(
        total = RETRIES,
        backoff_factor = 0,
        status_forcelist = (),
        retry_on_exceptions = (httpx.TransportError, ),
    )
    return httpx.AsyncClient(
        base_url = base_url or "",
        headers = headers,
        timeout = TIMEOUT,
        transport = RetryTransport(transport = transport, retry = retry),
        event_hooks = { "response": [_log_response] }
    )


def _reject_constant(name: str):
    """
    Rejects the non-standard constants that the json module accepts by default.
    """
    raise ValueError(f"{name} is not valid JSON")


class HttpJsonFetcher:
    """
    Reads JSON data from HTTP sources.
    """
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    def _build_request(self, url: str) -> httpx.Request:
        """
        Builds the request for the given URL, rejecting URLs that cannot be requested.
        """
        try:
            request = self.client.build_request("GET", url, headers = { "Accept": ACCEPT })
        except httpx.InvalidURL as exc:
            raise errors.InvalidParameters("url", f"url '{url}' is not valid: {exc}") from exc
        if request.url.scheme not in SCHEMES:
            raise errors.InvalidParameters(
                "url",
                f"url '{url}' must use one of the schemes: {', '.join(SCHEMES)}"
            )
        port = request.url.port
        if port is not None and not 0 < port <= 65535:
            raise errors.InvalidParameters("url", f"url '{url}' has an invalid port")
        return request

    async def fetch(self, url: str) -> t.Any:
        """
        Returns the decoded JSON from a GET request to the given URL.
        """
        request = self._build_request(url)
        try:
            response = await self.client.send(request)
        except httpx.TransportError as exc:
            raise errors.SourceUnreachable(url, str(exc) or type(exc).__name__) from exc
        if not response.is_success:
            raise errors.SourceRespondedWithFailure(url, response.status_code)
        try:
            data = response.json(parse_constant = _reject_constant)
        except ValueError as exc:
            raise errors.DecodeFailure(url, str(exc)) from exc
        # A null value cannot be told apart from an unset value once it is in the status
        if data is None:
            raise errors.DecodeFailure(url, "source returned null")
        return data

    async def aclose(self):
        """
        Close the underlying HTTP client.
        """
        await self.client.aclose()
