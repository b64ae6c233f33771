from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import httpx

from sprintboard.board.state import Card
from sprintboard.core import get_settings
from sprintboard.logs import debug_logger

settings = get_settings()


class GatewayError(Exception):
    """A card API call did not succeed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotAuthenticated(GatewayError):
    pass


class NotFound(GatewayError):
    pass


class NetworkOrServerError(GatewayError):
    pass


def _card_payload(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Translate card attributes to the API's JSON field names"""
    payload: Dict[str, Any] = {}
    for key, value in fields.items():
        if key == "due_date":
            payload["dueDate"] = value.isoformat() if isinstance(value, date) else value
        elif key == "labels":
            payload["labels"] = list(value or [])
        else:
            payload[key] = value
    return payload


def _parse_card(data: Any) -> Card:
    if not isinstance(data, dict):
        raise NetworkOrServerError(f"Card API returned {type(data).__name__} instead of a card")
    try:
        return Card.from_api(data)
    except ValueError as e:
        raise NetworkOrServerError(f"Card API returned a malformed card: {e}") from e


class CardGateway:
    """Async client for the /kanban-cards endpoints.

    The session cookie is attached to every call. Failures surface as
    ``NotAuthenticated`` (401), ``NotFound`` (404) or ``NetworkOrServerError``
    (anything else, including transport errors and timeouts).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        cookies = {settings.AUTH_COOKIE_NAME: session_token} if session_token else None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            cookies=cookies,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "CardGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._client.request(method, "/kanban-cards", json=json)
        except httpx.HTTPError as e:
            debug_logger.warning(f"{method} /kanban-cards failed: {e!r}")
            raise NetworkOrServerError(str(e) or type(e).__name__) from e

        if response.status_code == 401:
            raise NotAuthenticated("Not authenticated", response.status_code)
        if response.status_code == 404:
            raise NotFound("Card not found", response.status_code)
        if response.is_error:
            debug_logger.warning(
                f"{method} /kanban-cards returned {response.status_code}: {response.text[:200]}"
            )
            raise NetworkOrServerError(
                f"Card API returned {response.status_code}", response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise NetworkOrServerError("Card API returned invalid JSON", response.status_code) from e

    async def list(self) -> Dict[str, List[Card]]:
        """Full board, keyed by column id"""
        data = await self._request("GET")
        if not isinstance(data, dict):
            raise NetworkOrServerError("Card API returned a listing that is not keyed by column")
        return {
            column_id: [_parse_card(item) for item in items or []]
            for column_id, items in data.items()
        }

    async def create(
        self,
        column_id: str,
        title: str,
        description: str = "",
        priority: str = "medium",
        color: Optional[str] = None,
        due_date: Optional[date] = None,
        labels: Iterable[str] = (),
    ) -> Card:
        payload = _card_payload({
            "title": title,
            "description": description,
            "column": column_id,
            "priority": priority,
            "due_date": due_date,
            "labels": labels,
        })
        if color:
            payload["color"] = color
        return _parse_card(await self._request("POST", json=payload))

    async def update(self, card_id: str, column_id: Optional[str] = None, **fields) -> Card:
        """Partial update; only the given fields are sent"""
        payload = _card_payload(fields)
        payload["cardId"] = card_id
        if column_id is not None:
            payload["column"] = column_id
        return _parse_card(await self._request("PUT", json=payload))

    async def delete(self, card_id: str) -> None:
        await self._request("DELETE", json={"cardId": card_id})
