"""
Shared fixtures for linkfinder tests.

Provides:
- FakeLinkStore: in-memory LinkStore whose calls can be held open and failed
  on demand, so tests decide the order in which responses settle
- stub_app: a FastAPI stand-in for the link store HTTP API
- http_store: HttpLinkStore wired to stub_app through httpx.ASGITransport
"""

import asyncio
import itertools
from typing import Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from linkfinder.api.schemas import CreateRequest, LinkPayload, SearchRequest, ViewCounts
from linkfinder.clients.link_store import HttpLinkStore, LinkStore
from linkfinder.core.exceptions import LinkNotFoundError

Call = Tuple[str, str]


class FakeLinkStore(LinkStore):
    """In-memory link store with per-call gates and injected failures."""

    def __init__(self, links: Optional[List[LinkPayload]] = None):
        self.links: Dict[str, LinkPayload] = {link.alias: link for link in links or []}
        self.calls: List[Call] = []
        self._gates: Dict[Call, asyncio.Event] = {}
        self._done: Dict[Call, asyncio.Event] = {}
        self._failures: Dict[Call, Exception] = {}
        self._aliases = itertools.count(1)

    def hold(self, op: str, arg: str) -> asyncio.Event:
        """Keep the next op(arg) call pending until the returned event is set."""
        gate = asyncio.Event()
        self._gates[(op, arg)] = gate
        return gate

    def fail(self, op: str, arg: str, error: Exception) -> None:
        self._failures[(op, arg)] = error

    def count(self, op: str) -> int:
        return sum(1 for call_op, _ in self.calls if call_op == op)

    async def wait_done(self, op: str, arg: str, timeout: float = 1.0) -> None:
        """Wait until a call for op(arg) has returned or raised."""
        done = self._done.setdefault((op, arg), asyncio.Event())
        await asyncio.wait_for(done.wait(), timeout)

    async def _enter(self, op: str, arg: str) -> None:
        self.calls.append((op, arg))
        gate = self._gates.get((op, arg))
        if gate is not None:
            await gate.wait()
        error = self._failures.get((op, arg))
        if error is not None:
            raise error

    def _leave(self, op: str, arg: str) -> None:
        self._done.setdefault((op, arg), asyncio.Event()).set()

    async def search(self, query: str) -> List[LinkPayload]:
        try:
            await self._enter("search", query)
            return [
                LinkPayload(alias=link.alias, url=link.url)
                for link in self.links.values()
                if query in link.alias or query in link.url
            ]
        finally:
            self._leave("search", query)

    async def lookup(self, alias: str) -> LinkPayload:
        try:
            await self._enter("lookup", alias)
            if alias not in self.links:
                raise LinkNotFoundError(alias)
            return self.links[alias]
        finally:
            self._leave("lookup", alias)

    async def create(self, target: str) -> LinkPayload:
        try:
            await self._enter("create", target)
            link = LinkPayload(alias=f"s{next(self._aliases)}", url=target, views=ViewCounts())
            self.links[link.alias] = link
            return link
        finally:
            self._leave("create", target)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Poll predicate on the event loop until it holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


SAMPLE_LINKS = [
    LinkPayload(alias="docs", url="https://docs.example.com", views=ViewCounts(today=1, week=5, all=40)),
    LinkPayload(alias="foo", url="foo.com"),
    LinkPayload(alias="abc", url="https://abc.example.com/start"),
]


@pytest.fixture
def fake_store() -> FakeLinkStore:
    return FakeLinkStore(SAMPLE_LINKS)


def create_stub_app(links: List[LinkPayload]) -> FastAPI:
    """
    FastAPI stand-in for the link store.

    'boom' as a query, alias or url answers 500; 'https://taken.example'
    answers 409 on create.
    """
    api = FastAPI()
    store: Dict[str, LinkPayload] = {link.alias: link for link in links}
    aliases = itertools.count(100)

    @api.post("/api/links/search")
    async def search_links(body: SearchRequest):
        if body.query == "boom":
            raise HTTPException(status_code=500, detail="search index unavailable")
        results = [
            link.model_dump(exclude_none=True)
            for link in store.values()
            if body.query in link.alias or body.query in link.url
        ]
        return {"results": results}

    @api.get("/api/links/{alias}")
    async def get_link(alias: str):
        if alias == "boom":
            raise HTTPException(status_code=500, detail="store unavailable")
        if alias not in store:
            raise HTTPException(status_code=404, detail=f"Alias '{alias}' not found")
        return store[alias].model_dump(exclude_none=True)

    @api.post("/api/links", status_code=201)
    async def create_link(body: CreateRequest):
        if body.url == "boom":
            raise HTTPException(status_code=500, detail="store unavailable")
        if body.url == "https://taken.example":
            return JSONResponse(status_code=409, content={"alias": "taken"})
        link = LinkPayload(alias=f"l{next(aliases)}", url=body.url, views=ViewCounts())
        store[link.alias] = link
        return link.model_dump()

    return api


@pytest.fixture
def stub_app() -> FastAPI:
    return create_stub_app(SAMPLE_LINKS)


@pytest.fixture
async def http_store(stub_app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=stub_app),
        base_url="http://store.test",
    ) as client:
        yield HttpLinkStore(client=client)
