"""
Shared fixtures: an in-memory admin API behind httpx.MockTransport and a
query cache driven by a fake clock.
"""

import json
import sys
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import httpx
import pytest

from api.auth import static_token_provider
from api.client import ApiClient
from services import QueryCache, Services

TIMESTAMP = "2025-01-15T10:00:00.000Z"


class FakeApi:
    """
    Routes (method, path) to canned responses and records every request.

    Usage:
        fake_api.route("GET", "/api/companies", json={"companies": []})
        fake_api.route("POST", "/api/companies", status=400, json={"error": "Bad"})
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def route(self, method, path, json=None, status=200, content=None, headers=None, raises=None):
        self.routes[(method, path)] = {
            "json": json, "status": status, "content": content, "headers": headers, "raises": raises,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"No route for {request.method} {request.url.path}"})
        if route["raises"] is not None:
            raise route["raises"]
        if route["content"] is not None:
            return httpx.Response(route["status"], content=route["content"], headers=route["headers"])
        return httpx.Response(route["status"], json=route["json"], headers=route["headers"])

    def calls(self, method=None, path=None):
        return [
            request for request in self.requests
            if (method is None or request.method == method)
            and (path is None or request.url.path == path)
        ]

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def advance(self, seconds):
        self.now += seconds

    def __call__(self):
        return self.now


class Payloads:
    """Wire-shaped entity builders."""

    @staticmethod
    def company(company_id="c1", name="Acme", users=0, domains=None):
        return {
            "id": company_id,
            "name": name,
            "timezone": "UTC",
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
            "domains": domains or [],
            "_count": {"users": users},
        }

    @staticmethod
    def user(user_id="u1", role="superadmin", email="ada@acme.com", company_id="c1"):
        return {
            "id": user_id,
            "clerkId": f"clerk_{user_id}",
            "email": email,
            "firstName": "Ada",
            "lastName": "Lovelace",
            "role": role,
            "companyId": company_id,
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
        }

    @staticmethod
    def video(video_id="v1", company_id=None, publish_date="2025-01-01T00:00:00.000Z"):
        return {
            "id": video_id,
            "title": "Fire Safety",
            "url": f"https://cdn.example.com/{video_id}.mp4",
            "publishDate": publish_date,
            "companyId": company_id,
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
            "company": None,
        }

    @staticmethod
    def answer(answer_id, text, is_correct, order, question_id="q1"):
        return {
            "id": answer_id,
            "text": text,
            "isCorrect": is_correct,
            "order": order,
            "questionId": question_id,
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
        }

    @classmethod
    def question(cls, question_id="q1", video_id="v1", text="Which extinguisher?", order=0, answers=None):
        if answers is None:
            answers = [
                cls.answer(f"{question_id}-a1", "Water", False, 0, question_id),
                cls.answer(f"{question_id}-a2", "CO2", True, 1, question_id),
            ]
        return {
            "id": question_id,
            "text": text,
            "order": order,
            "videoId": video_id,
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
            "answers": answers,
        }


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def api_client(fake_api):
    client = ApiClient("http://cms.test", static_token_provider("test-token"),
                       transport=httpx.MockTransport(fake_api.handler))
    yield client
    client.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(max_entries=64, stale_time=30.0, clock=clock)


@pytest.fixture
def services(api_client, cache):
    return Services(api_client, cache)


@pytest.fixture
def payloads():
    return Payloads
