"""Live PokéAPI access for the Pokédex lookup.

Blocking HTTP goes through a shared :class:`requests.Session`; the async helpers at
the bottom of the module push those calls onto worker threads so the view state
controller can await them from the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple
from urllib.parse import quote

import requests

from settings import DEFAULT_API_BASE, DEFAULT_CANDIDATE_LIMIT, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

USER_AGENT = "PokeDexLookup/1.0 (+https://pokeapi.co)"


class PokeAPIError(Exception):
    """Base class for failures talking to PokéAPI."""


class NetworkError(PokeAPIError):
    """The request never produced an HTTP response (DNS, refused, timeout...)."""


class ServiceError(PokeAPIError):
    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NotFoundError(ServiceError):
    """The service has no Pokémon under the requested name."""


@dataclass(frozen=True)
class CandidateEntry:
    name: str
    url: str = ""


@dataclass(frozen=True)
class TypeRef:
    name: str
    relations_url: str


@dataclass(frozen=True)
class AbilityRef:
    name: str


@dataclass(frozen=True)
class StatValue:
    name: str
    value: int


@dataclass(frozen=True)
class PokemonRecord:
    id: int
    name: str
    sprite_url: str | None
    types: Tuple[TypeRef, ...]
    abilities: Tuple[AbilityRef, ...]
    stats: Tuple[StatValue, ...]
    height: int
    weight: int

    @property
    def type_names(self) -> List[str]:
        return [t.name for t in self.types]


@dataclass(frozen=True)
class TypeMatchup:
    # Names keep the order the service lists them in.
    strong_against: Tuple[str, ...] = ()
    weak_against: Tuple[str, ...] = ()


DamageRelations = Dict[str, TypeMatchup]


def _unique_names(items: Iterable[Mapping[str, Any]] | None) -> Tuple[str, ...]:
    out: List[str] = []
    for item in items or []:
        name = str(item["name"])
        if name not in out:
            out.append(name)
    return tuple(out)


def parse_candidates(payload: Mapping[str, Any]) -> Tuple[CandidateEntry, ...]:
    try:
        return tuple(
            CandidateEntry(name=str(row["name"]), url=str(row.get("url") or ""))
            for row in payload["results"]
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ServiceError(f"Malformed candidate list: {exc!r}") from exc


def parse_pokemon(payload: Mapping[str, Any]) -> PokemonRecord:
    """Build a :class:`PokemonRecord` from a ``/pokemon/<name>`` payload."""
    try:
        types = tuple(
            TypeRef(name=str(slot["type"]["name"]), relations_url=str(slot["type"]["url"]))
            for slot in payload["types"]
        )
        record = PokemonRecord(
            id=int(payload["id"]),
            name=str(payload["name"]),
            sprite_url=(payload.get("sprites") or {}).get("front_default"),
            types=types,
            abilities=tuple(
                AbilityRef(name=str(slot["ability"]["name"])) for slot in payload.get("abilities") or []
            ),
            stats=tuple(
                StatValue(name=str(slot["stat"]["name"]), value=int(slot["base_stat"]))
                for slot in payload.get("stats") or []
            ),
            height=int(payload.get("height") or 0),
            weight=int(payload.get("weight") or 0),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ServiceError(f"Malformed Pokémon payload: {exc!r}") from exc
    if not record.types:
        raise ServiceError(f"Pokémon {record.name!r} has no types")
    return record


def parse_type_matchup(payload: Mapping[str, Any]) -> TypeMatchup:
    try:
        relations = payload["damage_relations"]
        return TypeMatchup(
            strong_against=_unique_names(relations.get("double_damage_to")),
            weak_against=_unique_names(relations.get("double_damage_from")),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ServiceError(f"Malformed damage relations: {exc!r}") from exc


class PokeAPIClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def _get_json(self, url: str, params: Dict[str, Any] | None = None) -> Any:
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"GET {url} failed: {exc}") from exc
        if resp.status_code == 404:
            raise NotFoundError(f"GET {url} returned 404", status_code=404, url=url)
        if not resp.ok:
            raise ServiceError(
                f"GET {url} returned {resp.status_code}", status_code=resp.status_code, url=url
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise ServiceError(f"GET {url} returned invalid JSON", status_code=resp.status_code, url=url) from exc

    def load_candidates(self, limit: int = DEFAULT_CANDIDATE_LIMIT) -> Tuple[CandidateEntry, ...]:
        payload = self._get_json(f"{self.base_url}/pokemon", params={"limit": limit})
        return parse_candidates(payload)

    def get_pokemon(self, name: str) -> PokemonRecord:
        # Passed through verbatim; casing is the caller's concern.
        url = f"{self.base_url}/pokemon/{quote(name, safe='')}"
        return parse_pokemon(self._get_json(url))

    def get_type_matchup(self, type_ref: TypeRef) -> TypeMatchup:
        try:
            payload = self._get_json(type_ref.relations_url)
        except NotFoundError as exc:
            # A missing type document is a service fault, not a missing Pokémon.
            raise ServiceError(str(exc), status_code=exc.status_code, url=exc.url) from exc
        return parse_type_matchup(payload)


async def load_candidate_index(client: PokeAPIClient, limit: int = DEFAULT_CANDIDATE_LIMIT) -> Tuple[CandidateEntry, ...]:
    return await asyncio.to_thread(client.load_candidates, limit)


async def fetch_pokemon(client: PokeAPIClient, name: str) -> PokemonRecord:
    return await asyncio.to_thread(client.get_pokemon, name)


async def aggregate_damage_relations(client: PokeAPIClient, types: Sequence[TypeRef]) -> DamageRelations:
    """Fetch every type's damage relations concurrently and merge them by type name.

    All-or-nothing: the first failing fetch propagates and nothing is returned.
    """
    matchups = await asyncio.gather(
        *(asyncio.to_thread(client.get_type_matchup, type_ref) for type_ref in types)
    )
    return {type_ref.name: matchup for type_ref, matchup in zip(types, matchups)}
