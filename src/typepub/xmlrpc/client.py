"""HTTP transport for XML-RPC round trips."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .decoder import XmlRpcError, decode_response
from .encoder import encode_call
from .values import Value

logger = logging.getLogger(__name__)

ERROR_BODY_EXCERPT = 200


class TransportError(XmlRpcError):
    """Raised when the HTTP exchange itself fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_proxied_url(endpoint: str, proxy_url: str | None) -> str:
    """Route an endpoint through a CORS-style forwarding proxy.

    The proxy may contain a ``{target}`` placeholder; otherwise the encoded
    endpoint is passed as a ``target`` query parameter, or appended as a
    path segment when the proxy ends with ``/``.
    """
    if not proxy_url:
        return endpoint

    target = quote(endpoint, safe="")
    if "{target}" in proxy_url:
        return proxy_url.replace("{target}", target)
    if "?" in proxy_url:
        return f"{proxy_url}&target={target}"
    if proxy_url.endswith("/"):
        return proxy_url + target
    return f"{proxy_url}?target={target}"


class XmlRpcClient:
    """Sends method calls to one XML-RPC endpoint."""

    def __init__(
        self,
        endpoint: str,
        proxy_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.proxy_url = proxy_url
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        """URL the requests are actually posted to."""
        return build_proxied_url(self.endpoint, self.proxy_url)

    async def post(self, body: str) -> str:
        """POST a request document and return the response text.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.url,
                    content=body.encode("utf-8"),
                    headers={"Content-Type": "text/xml"},
                )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out after {self._timeout}s") from e
        except httpx.RequestError as e:
            raise TransportError(f"Request failed: {e}") from e

        text = response.text
        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code}: {text[:ERROR_BODY_EXCERPT]}",
                status_code=response.status_code,
            )
        return text

    async def call(self, method: str, *params: Value | Any) -> Value:
        """Invoke a remote method and decode its result.

        Raises:
            Fault: If the server answers with a fault.
            TransportError: If the HTTP exchange fails.
        """
        logger.debug("XML-RPC call %s -> %s", method, self.endpoint)
        return decode_response(await self.post(encode_call(method, params)))
