import threading
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from typedex.knowledge.pokeapi_client import PokeApiClient
from typedex.knowledge.type_chart import STATIC_CHART, TYPE_LIST

BASE_URL = "http://pokeapi.test/api/v2"


class DummyResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload


class HtmlResponse:
    """200 answer whose body is not JSON, e.g. a captive portal page."""

    status_code = 200

    def json(self):
        raise requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)


def _refs(names):
    return [{"name": n, "url": f"{BASE_URL}/type/{TYPE_LIST.index(n) + 1}/"} for n in sorted(names)]


def type_payload(name: str) -> Dict[str, object]:
    rel = STATIC_CHART[name]
    return {
        "name": name,
        "damage_relations": {
            "double_damage_from": _refs(rel.weak_to),
            "half_damage_from": _refs(rel.resistant_to),
            "no_damage_from": _refs(rel.immune_to),
            "double_damage_to": _refs(rel.super_effective_against),
            "half_damage_to": _refs(rel.not_very_effective_against),
            "no_damage_to": _refs(rel.no_effect_against),
        },
    }


class FakePokeApi:
    """Requester double serving a tiny PokeAPI; records every requested url."""

    def __init__(self) -> None:
        self.routes: Dict[str, object] = {}
        self.species: List[tuple] = []
        self.calls: List[str] = []
        self.listing_status = 200
        self.listing_gate: Optional[threading.Event] = None
        self._lock = threading.Lock()

    def add_pokemon(self, pid: int, name: str, types, german: Optional[str] = None) -> None:
        self.species.append((pid, name))
        self.routes[f"pokemon/{name}"] = {
            "id": pid,
            "name": name,
            "types": [{"slot": i + 1, "type": {"name": t}} for i, t in enumerate(types)],
            "sprites": {"front_default": f"https://img.test/{pid}.png"},
        }
        names = [{"language": {"name": "en"}, "name": name.title()}]
        if german:
            names.append({"language": {"name": "de"}, "name": german})
        self.routes[f"pokemon-species/{pid}"] = {"id": pid, "names": names}

    def add_types(self) -> None:
        for t in TYPE_LIST:
            self.routes[f"type/{t}"] = type_payload(t)

    def count(self, prefix: str) -> int:
        return sum(1 for c in self.calls if c.startswith(f"{BASE_URL}/{prefix}"))

    def __call__(self, url, timeout=10):
        with self._lock:
            self.calls.append(url)
        path = url[len(BASE_URL) + 1 :]
        if path.startswith("pokemon?"):
            if self.listing_gate is not None:
                self.listing_gate.wait(5)
            if self.listing_status != 200:
                return DummyResponse({}, self.listing_status)
            limit = int(parse_qs(urlsplit(url).query)["limit"][0])
            results = [
                {"name": name, "url": f"{BASE_URL}/pokemon/{pid}/"} for pid, name in self.species[:limit]
            ]
            return DummyResponse({"count": len(self.species), "results": results})
        route = self.routes.get(path)
        if route is None:
            return DummyResponse({"detail": "Not found."}, 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, (DummyResponse, HtmlResponse)):
            return route
        return DummyResponse(route)


@pytest.fixture
def fake_api():
    api = FakePokeApi()
    api.add_pokemon(4, "charmander", ["fire"], german="Glumanda")
    api.add_pokemon(6, "charizard", ["fire", "flying"], german="Glurak")
    api.add_pokemon(25, "pikachu", ["electric"], german="Pikachu")
    api.add_pokemon(472, "gliscor", ["ground", "flying"], german="Skorgro")
    return api


@pytest.fixture
def client(fake_api):
    return PokeApiClient(base_url=BASE_URL, requester=fake_api)
