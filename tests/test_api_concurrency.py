from __future__ import annotations

import anyio
import httpx
import pytest
from anyio import to_thread

from traceledger.auth import create_access_token
from traceledger.ledger import get_ledger
from traceledger.main import app
from traceledger.use_cases.product_registry import list_existing_ids

WORKER_THREADS = 4
REQUESTS = 16


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def ledger_app(ledger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    try:
        yield app
    finally:
        app.dependency_overrides.pop(get_ledger, None)


async def _gather(calls) -> list[httpx.Response]:
    responses: list[httpx.Response] = []

    async def _run(call) -> None:
        responses.append(await call())

    with anyio.fail_after(10):
        async with anyio.create_task_group() as group:
            for call in calls:
                group.start_soon(_run, call)
    return responses


@pytest.mark.anyio
async def test_reads_beyond_worker_threads_complete(ledger_app) -> None:
    to_thread.current_default_thread_limiter().total_tokens = WORKER_THREADS
    transport = httpx.ASGITransport(app=ledger_app)

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        responses = await _gather(
            [lambda: client.get("/api/v1/products/count") for _ in range(REQUESTS)]
        )

    assert len(responses) == REQUESTS
    assert all(response.status_code == 200 for response in responses)
    assert {response.json()["count"] for response in responses} == {0}


@pytest.mark.anyio
async def test_writes_beyond_worker_threads_get_dense_ids(ledger_app, ledger, accounts) -> None:
    to_thread.current_default_thread_limiter().total_tokens = WORKER_THREADS
    headers = {"Authorization": f"Bearer {create_access_token(accounts.admin)}"}
    transport = httpx.ASGITransport(app=ledger_app)

    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        responses = await _gather(
            [
                lambda index=index: client.post(
                    "/api/v1/products",
                    json={"name": f"Parallel {index}", "category": "Load"},
                    headers=headers,
                )
                for index in range(REQUESTS)
            ]
        )

    assert all(response.status_code == 201 for response in responses)
    assert sorted(response.json()["id"] for response in responses) == list(range(1, REQUESTS + 1))
    with ledger.session() as db:
        assert list_existing_ids(db) == list(range(1, REQUESTS + 1))
