from __future__ import annotations

import asyncio
import logging
from typing import Dict

import streamlit as st

from pokeapi_live import PokeAPIClient
from presentation import capitalize_first, render_pokemon_html
from settings import Settings, configure_logging, load_settings
from view_state import PokedexController

logger = logging.getLogger(__name__)

CONTROLLER_KEY = "pokedex_controller"
INPUT_KEY = "search_query_input"
SUGGESTION_PANEL_HEIGHT = 260

COLOR_PALETTE: Dict[str, str] = {
    "blue": "#3b4cca",
    "gold": "#b3a125",
}


def set_page_metadata() -> None:
    st.set_page_config(
        page_title="Pokédex",
        page_icon="⚡️",
        layout="centered",
        initial_sidebar_state="collapsed",
    )
    colors = COLOR_PALETTE
    st.markdown(
        f"""
    <style>
      :root {{
        --poke-blue: {colors["blue"]};
        --poke-gold: {colors["gold"]};
      }}
      .poke-card {{
        background: rgba(255, 255, 255, 0.96);
        border-radius: 20px;
        border: 1px solid rgba(59, 76, 202, 0.15);
        box-shadow: 0 12px 26px rgba(0, 0, 0, 0.08);
        padding: 1.4rem;
        margin-top: 1rem;
      }}
      .card-header {{
        display: flex;
        align-items: center;
        gap: 1.2rem;
      }}
      .card-header .name {{
        font-size: 1.4rem;
        font-weight: 700;
        color: var(--poke-blue);
      }}
      .card-header .meta {{
        color: gray;
        font-weight: normal;
      }}
      .pixel-icon {{
        height: 120px;
        width: 120px;
        object-fit: contain;
        image-rendering: pixelated;
      }}
      .type-chip {{
        display: inline-block;
        padding: 0.15rem 0.6rem;
        margin-right: 0.3rem;
        border-radius: 999px;
        color: #ffffff;
        font-size: 0.8rem;
        font-weight: 600;
      }}
      .section-grid {{
        display: grid;
        gap: 0.75rem;
        grid-template-columns: repeat(auto-fill, minmax(240px, 1fr));
        margin-top: 1rem;
      }}
      .section-block {{
        border: 1px solid rgba(179, 161, 37, 0.28);
        border-radius: 15px;
        padding: 0.65rem 0.85rem;
      }}
      .section-title {{
        margin: 0 0 0.45rem;
        font-size: 0.9rem;
        color: var(--poke-gold);
        text-transform: uppercase;
        font-weight: 600;
      }}
      .info-table {{
        width: 100%;
        border-collapse: collapse;
        font-size: 0.9rem;
      }}
      .info-table td {{
        padding: 4px;
        border: none;
      }}
      .info-table td.label {{
        text-align: left;
        font-weight: bold;
      }}
      .info-table td.value {{
        text-align: right;
      }}
    </style>
    """,
        unsafe_allow_html=True,
    )


def get_controller(settings: Settings) -> PokedexController:
    # One controller per browser session, built on its first run.
    controller = st.session_state.get(CONTROLLER_KEY)
    if controller is None:
        client = PokeAPIClient(base_url=settings.api_base, timeout=settings.timeout)
        controller = PokedexController(
            client,
            candidate_limit=settings.candidate_limit,
            blur_delay=settings.blur_delay,
        )
        with st.spinner("Loading Pokémon names…"):
            asyncio.run(controller.start())
        st.session_state[CONTROLLER_KEY] = controller
    return controller


def _handle_input_change() -> None:
    controller: PokedexController = st.session_state[CONTROLLER_KEY]
    controller.on_input_change(st.session_state.get(INPUT_KEY, ""))


def _handle_search() -> None:
    controller: PokedexController = st.session_state[CONTROLLER_KEY]
    controller.on_input_change(st.session_state.get(INPUT_KEY, ""))
    # The click has taken focus from the input; no blur grace period to wait out.
    controller.panel.hide()
    asyncio.run(controller.on_search())


def _handle_suggestion(name: str) -> None:
    controller: PokedexController = st.session_state[CONTROLLER_KEY]
    asyncio.run(controller.on_suggestion_select(name))
    st.session_state[INPUT_KEY] = controller.state.input.text


def _handle_clear() -> None:
    controller: PokedexController = st.session_state[CONTROLLER_KEY]
    controller.reset()
    st.session_state[INPUT_KEY] = ""


def render_suggestions(controller: PokedexController) -> None:
    state = controller.state
    if not state.show_suggestions:
        return
    with st.container(height=SUGGESTION_PANEL_HEIGHT, border=True):
        for candidate in state.suggestions:
            st.button(
                capitalize_first(candidate.name),
                key=f"suggestion-{candidate.name}",
                on_click=_handle_suggestion,
                args=(candidate.name,),
                use_container_width=True,
                type="tertiary",
            )


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    set_page_metadata()
    controller = get_controller(settings)

    st.markdown("<h1 style='text-align:center;'>Pokédex</h1>", unsafe_allow_html=True)
    st.text_input(
        "Search the Pokédex",
        placeholder="Search Pokémon",
        key=INPUT_KEY,
        label_visibility="collapsed",
        autocomplete="off",
        on_change=_handle_input_change,
    )
    render_suggestions(controller)

    search_cols = st.columns(2)
    with search_cols[0]:
        st.button("Search Pokémon", use_container_width=True, key="search_submit", on_click=_handle_search)
    with search_cols[1]:
        st.button("Clear", use_container_width=True, key="clear_search", on_click=_handle_clear)

    state = controller.state
    if state.entity is not None:
        st.markdown(render_pokemon_html(state.entity, state.relations), unsafe_allow_html=True)


if __name__ == "__main__":
    main()
