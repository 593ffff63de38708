"""HTTP transport for the FedEx XML gateway.

Thin wrapper around httpx. FedEx takes every request as a single XML
POST to one endpoint per environment; the root element decides the
operation.
"""

import logging

import httpx

from src.services.fedex_constants import FEDEX_LIVE_URL, FEDEX_TEST_URL

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def endpoint_for(test: bool) -> str:
    """Return the gateway URL for the test or live environment."""
    return FEDEX_TEST_URL if test else FEDEX_LIVE_URL


class FedExTransport:
    """Posts request XML and returns the reply text.

    Errors are not translated: connection failures surface as
    httpx.TransportError and non-2xx replies as httpx.HTTPStatusError.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize with an optional preconfigured client.

        Args:
            client: httpx client to send through (tests pass one built on
                httpx.MockTransport). A verifying client is created when None.
            timeout: Request timeout in seconds for the default client.
        """
        self._client = client or httpx.Client(timeout=timeout, verify=True)

    def post(self, body: str, test: bool = False) -> str:
        """POST request XML to the FedEx gateway.

        Args:
            body: Serialized request XML. Line breaks are removed before
                sending.
            test: Send to the test environment instead of live.

        Returns:
            Raw reply text.

        Raises:
            httpx.HTTPStatusError: On a non-2xx reply.
            httpx.TransportError: On connection or timeout failures.
        """
        url = endpoint_for(test)
        payload = body.replace("\n", "").replace("\r", "")

        response = self._client.post(
            url,
            content=payload.encode("utf-8"),
            headers={"Content-Type": "text/xml; charset=utf-8"},
        )
        logger.debug("FedEx POST %s -> HTTP %s", url, response.status_code)
        response.raise_for_status()
        return response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FedExTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
