"""Event stream endpoint: /api/refreshStates."""

from __future__ import annotations

from pyhc3._constants import REFRESH_STATES_ENDPOINT
from pyhc3._transport import Transport
from pyhc3.exceptions import Hc3TransportError
from pyhc3.models.events import RefreshStates


async def fetch_refresh_states(
    transport: Transport,
    last: int,
    *,
    server_timeout: int,
    client_timeout: float,
) -> RefreshStates:
    """Issue one long-poll request for events newer than *last*.

    The hub holds the request for up to *server_timeout* seconds when it
    has nothing new; *client_timeout* bounds the whole exchange.
    """
    response = await transport.request(
        "GET",
        REFRESH_STATES_ENDPOINT,
        params={"last": last, "timeout": server_timeout},
        timeout=client_timeout,
    )
    decoded = response.json()
    if not isinstance(decoded, dict):
        raise Hc3TransportError(
            f"Expected an object from {REFRESH_STATES_ENDPOINT}, got {type(decoded).__name__}",
            status_code=response.status,
            endpoint=REFRESH_STATES_ENDPOINT,
        )
    return RefreshStates.model_validate(decoded)
