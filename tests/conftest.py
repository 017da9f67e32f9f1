"""Shared fixtures: in-memory storage, fake Gemini transport, API client."""

import json
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Callable

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool


def ensure_src_on_path() -> None:
    root = Path(__file__).resolve().parent.parent
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


ensure_src_on_path()

from api.routers import credentials, sweep  # noqa: E402
from models import Base, get_db  # noqa: E402


def listing_html(brand: str | None, with_title: bool = True) -> str:
    """Markup for one search-result listing in the host page's structure."""
    if not with_title:
        return '<div role="listitem"><div class="price">9.99</div></div>'
    if brand is None:
        return (
            '<div role="listitem"><div data-cy="title-recipe">'
            '<div class="s-title-instructions-style"><h2><a>No brand here</a></h2></div>'
            "</div></div>"
        )
    return (
        '<div role="listitem"><div data-cy="title-recipe">'
        f'<div class="s-title-instructions-style"><h2><span>{brand}</span></h2></div>'
        "</div></div>"
    )


def page_html(*listings: str) -> str:
    return "<html><body><div class=\"results\">" + "".join(listings) + "</div></body></html>"


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class FakeGemini:
    """Records requests and answers them with a canned response."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    @classmethod
    def replying(cls, text: str, status_code: int = 200) -> "FakeGemini":
        return cls(lambda request: httpx.Response(status_code, json=gemini_payload(text)))

    @classmethod
    def replying_json(cls, payload, status_code: int = 200) -> "FakeGemini":
        return cls(lambda request: httpx.Response(status_code, json=payload))

    def transport(self) -> httpx.MockTransport:
        def _handle(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.handler(request)

        return httpx.MockTransport(_handle)

    def sent_prompt(self, index: int = 0) -> str:
        body = json.loads(self.requests[index].content)
        return body["contents"][0]["parts"][0]["text"]


@pytest.fixture
def page():
    return page_html


@pytest.fixture
def listing():
    return listing_html


@pytest.fixture
def fake_gemini():
    return FakeGemini


@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    connection = db_engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def test_app():
    @asynccontextmanager
    async def test_lifespan(app: FastAPI) -> AsyncGenerator:
        yield

    app = FastAPI(
        title="BrandSweep Test",
        description="Remove search-result listings by brand with Gemini",
        version="0.1.0",
        lifespan=test_lifespan,
    )

    app.include_router(credentials.router, prefix="/api/v1", tags=["credentials"])
    app.include_router(sweep.router, prefix="/api/v1", tags=["sweep"])

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


@pytest.fixture(scope="function")
def client(db_session: Session, test_app: FastAPI):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()
