from typing import Dict, List, Optional

import pytest
import requests


class FakeResponse:
    def __init__(self, body: Optional[Dict] = None, status_code: int = 200) -> None:
        self.body = body or {}
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Dict:
        return self.body


class FakeSession:
    """Replays canned responses and records every request."""

    def __init__(self, responses: List[FakeResponse]) -> None:
        self.headers: Dict[str, str] = {}
        self.responses = list(responses)
        self.requests: List[Dict] = []
        self.closed = False

    def post(self, url: str, json: Dict, timeout: float) -> FakeResponse:
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        return self.responses.pop(0)

    def close(self) -> None:
        self.closed = True


def make_record(title: str = "Title", author: str = "Author", url: str = "https://example.com",
                category: Optional[str] = "Science") -> Dict:
    return {
        "object": "page",
        "properties": {
            "Title": {"type": "title", "title": [{"plain_text": title}]},
            "Author": {"type": "rich_text", "rich_text": [{"plain_text": author}]},
            "URL": {"type": "url", "url": url},
            "Category": {
                "type": "select",
                "select": {"name": category} if category is not None else None,
            },
            "Issue": {"type": "number", "number": 1},
        },
    }


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response_factory():
    return FakeResponse


@pytest.fixture
def record_factory():
    return make_record
