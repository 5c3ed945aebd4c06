"""Shared test fixtures."""

import os
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before the settings are loaded
os.environ.pop("VERCEL_ENV", None)
os.environ["ROAST_ENVIRONMENT"] = "development"
os.environ["ROAST_GITHUB_TOKEN"] = "test-token"
os.environ["ROAST_GEMINI_API_KEY"] = "test-key"
os.environ["ROAST_LOG_LEVEL"] = "ERROR"  # Reduce log noise

from roast_api import api  # noqa: E402
from roast_api.exceptions import ModelError  # noqa: E402
from roast_api.factory import Services  # noqa: E402
from roast_api.github import ProfileFetcher  # noqa: E402
from roast_api.providers import LLMConfig, LLMResponse  # noqa: E402
from roast_api.roast import RoastGenerator  # noqa: E402
from roast_api.storage import InMemoryProfileCache, LocalCounter  # noqa: E402

GITHUB_HOST = "api.github.com"
CONTRIBUTIONS_HOST = "github-contributions-api.jogruber.de"


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """Stands in for the GitHub and contributions APIs via httpx.MockTransport."""

    def __init__(self, user: dict[str, Any], contributions: dict[str, Any]) -> None:
        self.user = user
        self.contributions = contributions
        self.user_status = 200
        self.contributions_status = 200
        self.user_error_body: Any = {"message": "Not Found"}
        self.fail_transport = False
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)

        if request.url.host == GITHUB_HOST:
            if self.user_status >= 400:
                if isinstance(self.user_error_body, str):
                    return httpx.Response(self.user_status, text=self.user_error_body)
                return httpx.Response(self.user_status, json=self.user_error_body)
            return httpx.Response(200, json=self.user)

        if request.url.host == CONTRIBUTIONS_HOST:
            if self.contributions_status >= 400:
                return httpx.Response(self.contributions_status, text="Internal Server Error")
            return httpx.Response(200, json=self.contributions)

        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]


class MockProvider:
    """Mock LLM provider for testing."""

    def __init__(self, config: LLMConfig | None = None) -> None:
        self.config = config or LLMConfig(model="mock-model", api_key="test-key")
        self.prompts: list[str] = []
        self.should_fail = False

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    def set_failure(self, should_fail: bool = True) -> None:
        """Configure the provider to fail on next call."""
        self.should_fail = should_fail

    async def complete(self, prompt: str) -> LLMResponse:
        """Generate a mock roast that reveals which template was used."""
        self.prompts.append(prompt)

        if self.should_fail:
            raise ModelError("Mock provider configured to fail")

        if "Hindi" in prompt:
            text = "Bhai, itne followers ke saath bhi commit karna bhool gaye?"
        else:
            text = "Bro's commit history reads like a ghost town with Wi-Fi."

        return LLMResponse(text=text, model=self.config.model, usage={"total_tokens": 42})

    async def health_check(self) -> bool:
        return bool(self.config.api_key)


@pytest.fixture
def github_user() -> dict[str, Any]:
    """GitHub users API payload for octocat."""
    return {
        "login": "octocat",
        "id": 583231,
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "html_url": "https://github.com/octocat",
        "type": "User",
        "name": "The Octocat",
        "company": "@github",
        "blog": "https://github.blog",
        "location": "San Francisco",
        "email": None,
        "hireable": None,
        "bio": None,
        "public_repos": 8,
        "public_gists": 8,
        "followers": 9999,
        "following": 9,
    }


@pytest.fixture
def contributions_payload() -> dict[str, Any]:
    """Contributions API payload for ?y=last."""
    return {
        "total": {"lastYear": 123},
        "contributions": [{"date": "2024-01-01", "count": 2, "level": 1}],
    }


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def profile_cache(fake_clock: FakeClock) -> InMemoryProfileCache:
    return InMemoryProfileCache(ttl_seconds=3600, clock=fake_clock)


@pytest.fixture
def fake_upstream(github_user: dict[str, Any], contributions_payload: dict[str, Any]) -> FakeUpstream:
    return FakeUpstream(github_user, contributions_payload)


@pytest.fixture
def mock_llm_provider() -> MockProvider:
    return MockProvider()


@pytest_asyncio.fixture
async def upstream_client(fake_upstream: FakeUpstream) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with fake_upstream.client() as http_client:
        yield http_client


@pytest.fixture
def fetcher(profile_cache: InMemoryProfileCache, upstream_client: httpx.AsyncClient) -> ProfileFetcher:
    return ProfileFetcher(cache=profile_cache, http_client=upstream_client, token="test-token")


@pytest.fixture
def services(
    fetcher: ProfileFetcher,
    profile_cache: InMemoryProfileCache,
    mock_llm_provider: MockProvider,
    upstream_client: httpx.AsyncClient,
) -> Services:
    return Services(
        fetcher=fetcher,
        generator=RoastGenerator(mock_llm_provider),
        counter=LocalCounter(),
        cache=profile_cache,
        llm_provider=mock_llm_provider,
        http_client=upstream_client,
    )


@pytest_asyncio.fixture
async def client(services: Services) -> AsyncGenerator[AsyncClient, None]:
    """Test client fixture - services injected in place of the lifespan."""
    api._services = services

    transport = ASGITransport(app=api.app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    api._services = None
