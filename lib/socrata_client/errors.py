from __future__ import annotations

import httpx


class SocrataClientError(Exception):
    """Base client error."""


class InvalidArgument(SocrataClientError, ValueError):
    """Malformed query, config or format argument."""


# Network failures are not wrapped; httpx raises them as-is.
TransportFailure = httpx.RequestError
