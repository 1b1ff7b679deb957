import asyncio

import redis.exceptions

from conftest import make_params, sample_flights
import truefare.services.cache_service as cache_module
from truefare.services.cache_service import TTL_EXPLANATION, TTL_SEARCH_OFFERS, CacheService


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.closed = False

    async def ping(self):
        return True

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex

    async def aclose(self):
        self.closed = True


class DownRedis(FakeRedis):
    async def ping(self):
        raise redis.exceptions.ConnectionError("Connection refused")


def _use(monkeypatch, client):
    monkeypatch.setattr(cache_module.redis, "from_url", lambda *args, **kwargs: client)


def test_search_key_ignores_origin_order_and_case():
    cache = CacheService(url="redis://unused")
    a = cache.search_key(make_params(origins=["JFK", "bos"]))
    b = cache.search_key(make_params(origins=["BOS", "jfk", "BOS"]))
    assert a == b
    assert a.startswith("offers:BOS,JFK:TPA:")


def test_search_key_changes_with_any_search_field():
    cache = CacheService(url="redis://unused")
    base = cache.search_key(make_params())
    assert cache.search_key(make_params(nights=4)) != base
    assert cache.search_key(make_params(cabin="business")) != base
    assert cache.search_key(make_params(include_cars=False)) != base


def test_explanation_key_is_stable_for_equal_payloads():
    cache = CacheService(url="redis://unused")
    payload = {"true_total": 512, "flight": {"id": "F2"}}
    same = {"flight": {"id": "F2"}, "true_total": 512}
    assert cache.explanation_key(payload) == cache.explanation_key(same)
    assert cache.explanation_key(payload) != cache.explanation_key({**payload, "true_total": 513})


def test_offers_round_trip_with_ttl(monkeypatch):
    fake = FakeRedis()
    _use(monkeypatch, fake)
    cache = CacheService(url="redis://fake")
    params = make_params()
    snapshot = {"flights": [sample_flights()[0].model_dump(mode="json")], "status": {"flights": "ok"}}

    async def go():
        await cache.set_offers(params, snapshot)
        got = await cache.get_offers(params)
        await cache.close()
        return got

    assert asyncio.run(go()) == snapshot
    assert fake.ttls[cache.search_key(params)] == TTL_SEARCH_OFFERS
    assert fake.closed is True


def test_explanation_uses_its_own_ttl(monkeypatch):
    fake = FakeRedis()
    _use(monkeypatch, fake)
    cache = CacheService(url="redis://fake")
    payload = {"true_total": 512}

    async def go():
        await cache.set_explanation(payload, "Good value.")
        return await cache.get_explanation(payload)

    assert asyncio.run(go()) == "Good value."
    assert fake.ttls[cache.explanation_key(payload)] == TTL_EXPLANATION


def test_redis_down_degrades_to_miss(monkeypatch):
    _use(monkeypatch, DownRedis())
    cache = CacheService(url="redis://down")
    params = make_params()

    async def go():
        stored = await cache.set(cache.search_key(params), {"flights": []})
        return stored, await cache.get_offers(params)

    assert asyncio.run(go()) == (False, None)

