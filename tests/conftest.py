"""Shared fixtures: PokéAPI payloads and an in-memory client."""

import json
import threading
from typing import Dict, List

import pytest
import requests

from pokeapi_live import (
    CandidateEntry,
    NotFoundError,
    ServiceError,
    TypeMatchup,
    TypeRef,
    parse_pokemon,
    parse_type_matchup,
)

TYPE_URL = "https://pokeapi.co/api/v2/type/{}/"


def pokemon_payload(pid: int, name: str, types: List[str]) -> dict:
    return {
        "id": pid,
        "name": name,
        "sprites": {"front_default": f"https://sprites.example/{pid}.png"},
        "types": [
            {"slot": i + 1, "type": {"name": t, "url": TYPE_URL.format(t)}}
            for i, t in enumerate(types)
        ],
        "abilities": [{"ability": {"name": "static"}}, {"ability": {"name": "lightning-rod"}}],
        "stats": [
            {"base_stat": 35, "stat": {"name": "hp"}},
            {"base_stat": 55, "stat": {"name": "attack"}},
        ],
        "height": 4,
        "weight": 60,
    }


def type_payload(strong: List[str], weak: List[str]) -> dict:
    return {
        "damage_relations": {
            "double_damage_to": [{"name": n} for n in strong],
            "double_damage_from": [{"name": n} for n in weak],
            "half_damage_to": [{"name": "grass"}],
            "no_damage_to": [{"name": "ground"}],
        }
    }


POKEMON = {
    "pikachu": pokemon_payload(25, "pikachu", ["electric"]),
    "charizard": pokemon_payload(6, "charizard", ["fire", "flying"]),
    "bulbasaur": pokemon_payload(1, "bulbasaur", ["grass", "poison"]),
}

TYPES = {
    "electric": type_payload(["flying", "water"], ["ground"]),
    "fire": type_payload(["grass", "ice", "bug", "steel"], ["ground", "rock", "water"]),
    "flying": type_payload(["grass", "fighting", "bug"], ["rock", "electric", "ice"]),
    "grass": type_payload(["ground", "rock", "water"], ["flying", "poison", "bug", "fire", "ice"]),
    "poison": type_payload(["grass", "fairy"], ["ground", "psychic"]),
}

CANDIDATE_NAMES = ["bulbasaur", "ivysaur", "charizard", "pikachu", "pichu", "Pidgey", "raichu"]


def make_response(status: int, payload=None, url: str = "https://pokeapi.co/api/v2/x") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return resp


class FakeClient:
    """Stands in for PokeAPIClient; lookups are case-insensitive like the live service."""

    def __init__(self) -> None:
        self.names = list(CANDIDATE_NAMES)
        self.pokemon = dict(POKEMON)
        self.types = dict(TYPES)
        self.pokemon_calls: List[str] = []
        self.type_calls: List[str] = []
        self.gates: Dict[str, threading.Event] = {}
        self.failing_types: set = set()
        self.candidate_error: Exception | None = None

    def _wait(self, key: str) -> None:
        gate = self.gates.get(key)
        if gate is not None:
            assert gate.wait(timeout=5), f"gate for {key} never opened"

    def load_candidates(self, limit):
        if self.candidate_error is not None:
            raise self.candidate_error
        return tuple(CandidateEntry(name=n, url="") for n in self.names[:limit])

    def get_pokemon(self, name):
        self.pokemon_calls.append(name)
        self._wait(name.lower())
        payload = self.pokemon.get(name.lower())
        if payload is None:
            raise NotFoundError(f"no pokemon {name}", status_code=404)
        return parse_pokemon(payload)

    def get_type_matchup(self, type_ref: TypeRef) -> TypeMatchup:
        self.type_calls.append(type_ref.name)
        self._wait(f"type:{type_ref.name}")
        if type_ref.name in self.failing_types:
            raise ServiceError(f"type {type_ref.name} failed", status_code=500)
        return parse_type_matchup(self.types[type_ref.name])


@pytest.fixture
def fake_client():
    return FakeClient()
