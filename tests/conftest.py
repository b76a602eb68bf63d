import asyncio

import pytest
from aiohttp import web

VALID_TOKEN = "fresh-token"
CLIENT_ID = "client-id"
CLIENT_SECRET = "client-secret"

BATCHES = {
    "primes": [2, 3, 5, 7],
    "fibo": [1, 1, 2, 3, 5, 8],
    "even": [2, 4, 6, 8, 10, 12, 14],
    "rand": [9, "x", True, 4.5, None],
}


def build_upstream_app():
    """In-process stand-in for the evaluation service."""
    stats = {"auth_calls": 0, "number_calls": 0, "auth_ok": True}

    async def numbers(request):
        stats["number_calls"] += 1
        if request.headers.get("Authorization") != f"Bearer {VALID_TOKEN}":
            return web.json_response({"message": "token expired"}, status=401)
        if request.headers.get("clientID") != CLIENT_ID:
            return web.json_response({"message": "unknown client"}, status=403)
        return web.json_response({"numbers": BATCHES[request.match_info["category"]]})

    async def auth(request):
        stats["auth_calls"] += 1
        body = await request.json()
        if not stats["auth_ok"] or body.get("clientID") != CLIENT_ID or body.get("clientSecret") != CLIENT_SECRET:
            return web.json_response({"message": "invalid credentials"}, status=401)
        return web.json_response({"token_type": "Bearer", "access_token": VALID_TOKEN})

    async def slow(request):
        await asyncio.sleep(1)
        return web.json_response({"numbers": [1]})

    async def broken(request):
        return web.json_response({"message": "boom"}, status=500)

    async def garbage(request):
        return web.Response(text="not json", content_type="application/json")

    async def empty(request):
        return web.json_response({})

    app = web.Application()
    app["stats"] = stats
    app.router.add_get("/slow", slow)
    app.router.add_get("/broken", broken)
    app.router.add_get("/garbage", garbage)
    app.router.add_get("/empty", empty)
    app.router.add_get("/{category}", numbers)
    app.router.add_post("/auth", auth)
    return app


@pytest.fixture
async def upstream(aiohttp_server):
    return await aiohttp_server(build_upstream_app())
