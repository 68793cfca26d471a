"""Owns everything the Pokédex page renders and the commands that change it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple

from pokeapi_live import (
    CandidateEntry,
    DamageRelations,
    NotFoundError,
    PokeAPIClient,
    PokeAPIError,
    PokemonRecord,
    TypeMatchup,
    aggregate_damage_relations,
    fetch_pokemon,
    load_candidate_index,
)
from presentation import capitalize_first
from settings import DEFAULT_BLUR_DELAY, DEFAULT_CANDIDATE_LIMIT
from suggestions import SuggestionPanel, filter_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputState:
    text: str = ""
    suggestions_visible: bool = False


@dataclass(frozen=True)
class ViewState:
    candidates: Tuple[CandidateEntry, ...] = ()
    input: InputState = field(default_factory=InputState)
    entity: PokemonRecord | None = None
    relations: Mapping[str, TypeMatchup] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def suggestions(self) -> List[CandidateEntry]:
        return filter_candidates(self.candidates, self.input.text)

    @property
    def show_suggestions(self) -> bool:
        return self.input.suggestions_visible and bool(self.input.text) and bool(self.suggestions)


class PokedexController:
    """Coordinates input, suggestions, the displayed Pokémon and its type matchups.

    Every search is tagged with a sequence number; a Pokémon fetch that completes
    after a newer search was issued is dropped, and type matchups are applied
    only while their Pokémon is still the one displayed.
    """

    def __init__(
        self,
        client: PokeAPIClient,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
        blur_delay: float = DEFAULT_BLUR_DELAY,
    ) -> None:
        self.client = client
        self.candidate_limit = candidate_limit
        self.panel = SuggestionPanel(blur_delay)
        self._candidates: Tuple[CandidateEntry, ...] = ()
        self._text = ""
        self._entity: PokemonRecord | None = None
        self._relations: DamageRelations = {}
        self._started = False
        self._search_seq = 0

    @property
    def state(self) -> ViewState:
        return ViewState(
            candidates=self._candidates,
            input=InputState(text=self._text, suggestions_visible=self.panel.visible),
            entity=self._entity,
            relations=MappingProxyType(dict(self._relations)),
        )

    async def start(self) -> None:
        if self._started:
            return
        self._started = True
        try:
            self._candidates = await load_candidate_index(self.client, self.candidate_limit)
        except PokeAPIError as exc:
            logger.error("Could not load Pokémon list, suggestions disabled: %s", exc)
            return
        logger.info("Loaded %d Pokémon names", len(self._candidates))

    def on_input_change(self, text: str) -> None:
        self._text = text
        self.panel.show()

    def on_focus(self) -> None:
        self.panel.show()

    def on_blur(self) -> None:
        self.panel.schedule_hide()

    async def on_search(self, name: str | None = None) -> None:
        query = (self._text if name is None else name).strip()
        if not query:
            return
        self._search_seq += 1
        seq = self._search_seq

        try:
            record = await fetch_pokemon(self.client, query)
        except NotFoundError:
            logger.warning("No Pokémon named %r", query)
            return
        except PokeAPIError as exc:
            logger.error("Error fetching Pokémon %r: %s", query, exc)
            return
        if seq != self._search_seq:
            logger.debug("Discarding stale result for %r", query)
            return
        self._entity = record
        self._relations = {}

        try:
            relations = await aggregate_damage_relations(self.client, record.types)
        except PokeAPIError as exc:
            logger.error("Error fetching damage relations for %r: %s", record.name, exc)
            return
        # Relations belong to whichever record is on screen, even if a later search failed.
        if self._entity is not record:
            logger.debug("Discarding stale damage relations for %r", record.name)
            return
        self._relations = relations

    async def on_suggestion_select(self, name: str) -> None:
        capitalized = capitalize_first(name)
        self._text = capitalized
        self.panel.hide()
        await self.on_search(capitalized)

    def reset(self) -> None:
        """Clear input and results; the loaded name list is kept."""
        self._search_seq += 1
        self._text = ""
        self._entity = None
        self._relations = {}
        self.panel.hide()
