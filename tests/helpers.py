"""Stand-ins for aiohttp objects used across the tests."""

import json
from typing import Any, List, Optional
from unittest.mock import AsyncMock, MagicMock


def make_response(
    json_data: Any = None, *, status: int = 200, body: Optional[str] = None
) -> MagicMock:
    """Build a response whose body is *json_data* encoded, or the raw *body*."""
    if body is None:
        body = "" if json_data is None else json.dumps(json_data)

    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=body)
    return response


def make_session(*responses: Any) -> MagicMock:
    """Build a session whose ``post`` returns (or raises) *responses* in order."""
    session = MagicMock()
    session.post = AsyncMock(side_effect=list(responses))
    return session


def posted_urls(session: MagicMock) -> List[str]:
    return [call.args[0] for call in session.post.call_args_list]
