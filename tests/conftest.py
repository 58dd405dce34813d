"""Shared test fixtures: canned HTTP responses for requests and aiohttp."""
import asyncio
import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, Mock

import requests


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    text: Optional[str] = None,
) -> Mock:
    """Create a mock ``requests.Response``."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.headers = headers or {}
    if text is not None:
        response.text = text
        response.content = text.encode()
        response.json.side_effect = ValueError("Expecting value")
    elif json_body is None:
        response.text = ""
        response.content = b""
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.text = json.dumps(json_body)
        response.content = response.text.encode()
        response.json.return_value = json_body
    return response


def token_body(token: str = "token123", token_id: str = "tid1", expires_in: int = 3600) -> Dict[str, Any]:
    return {"access_token": token, "id": token_id, "expires_in": expires_in}


class FakeAiohttpResponse:
    """Async context manager standing in for ``aiohttp.ClientResponse``."""

    def __init__(
        self,
        status: int = 200,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
        delay: float = 0,
        block: Optional[asyncio.Event] = None,
    ) -> None:
        self.status = status
        self.headers = headers or {}
        if text is not None:
            self._body = text
        else:
            self._body = "" if json_body is None else json.dumps(json_body)
        self._delay = delay
        self._block = block
        self.released = False

    async def text(self) -> str:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._block is not None:
            await self._block.wait()
        return self._body

    async def __aenter__(self) -> "FakeAiohttpResponse":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.released = True


def make_fake_session(*responses: FakeAiohttpResponse) -> MagicMock:
    """Create a fake ``aiohttp.ClientSession`` answering with ``responses`` in order."""
    session = MagicMock()
    session.closed = False
    session.request = Mock(side_effect=list(responses))
    return session
