from __future__ import annotations

import html
from typing import Dict, List, Mapping, Sequence, Tuple

from pokeapi_live import PokemonRecord, TypeMatchup

NOT_AVAILABLE = "N/A"

TYPE_COLORS: Dict[str, str] = {
    "normal": "#A8A77A",
    "fire": "#EE8130",
    "water": "#6390F0",
    "electric": "#F7D02C",
    "grass": "#7AC74C",
    "ice": "#96D9D6",
    "fighting": "#C22E28",
    "poison": "#A33EA1",
    "ground": "#E2BF65",
    "flying": "#A98FF3",
    "psychic": "#F95587",
    "bug": "#A6B91A",
    "rock": "#B6A136",
    "ghost": "#735797",
    "dragon": "#6F35FC",
    "dark": "#705746",
    "steel": "#B7B7CE",
    "fairy": "#D685AD",
}


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_measure(value: int, unit: str) -> str:
    # PokéAPI reports decimetres and hectograms.
    return f"{value / 10:g} {unit}"


def join_capitalized(names: Sequence[str]) -> str:
    return ", ".join(capitalize_first(n) for n in names)


def matchup_rows(
    entity: PokemonRecord, relations: Mapping[str, TypeMatchup], strong: bool
) -> List[Tuple[str, str]]:
    """One ``(type, opponents)`` row per entity type; unknown relations show ``N/A``."""
    rows: List[Tuple[str, str]] = []
    for type_ref in entity.types:
        matchup = relations.get(type_ref.name)
        names: Sequence[str] = ()
        if matchup is not None:
            names = matchup.strong_against if strong else matchup.weak_against
        rows.append((capitalize_first(type_ref.name), join_capitalized(names) or NOT_AVAILABLE))
    return rows


def build_type_chips_html(types: Sequence[str] | None) -> str:
    spans: List[str] = []
    for t in types or []:
        label = str(t)
        color = TYPE_COLORS.get(label.lower(), "#777777")
        spans.append(
            f'<span class="type-chip" style="background-color:{color};">{html.escape(label.title())}</span>'
        )
    return "".join(spans)


def _render_table(title: str, rows: Sequence[Tuple[str, str]]) -> str:
    body = "".join(
        f"<tr><td class=\"label\">{html.escape(label)}</td><td class=\"value\">{html.escape(value)}</td></tr>"
        for label, value in rows
    )
    return (
        '<div class="section-block">'
        f'<div class="section-title">{html.escape(title)}</div>'
        f'<table class="info-table"><tbody>{body}</tbody></table>'
        "</div>"
    )


def render_pokemon_html(entity: PokemonRecord, relations: Mapping[str, TypeMatchup]) -> str:
    name = capitalize_first(entity.name)
    sprite = html.escape(entity.sprite_url or "", quote=True)
    details = [
        ("Height", format_measure(entity.height, "m")),
        ("Weight", format_measure(entity.weight, "kg")),
        ("Abilities", join_capitalized([a.name for a in entity.abilities]) or NOT_AVAILABLE),
    ]
    stats = [(capitalize_first(s.name), str(s.value)) for s in entity.stats]

    parts = [
        '<div class="poke-card">',
        '  <div class="card-header">',
    ]
    if sprite:
        parts.append(f'    <img class="pixel-icon" src="{sprite}" alt="{html.escape(entity.name)}" />')
    parts.extend(
        [
            "    <div>",
            f'      <div class="name">{html.escape(name)} <span class="meta">#{entity.id}</span></div>',
            f'      <div class="type-row">{build_type_chips_html(entity.type_names)}</div>',
            "    </div>",
            "  </div>",
            '  <div class="section-grid">',
            _render_table("Details", details),
            _render_table("Stats", stats),
            _render_table("Strong Against", matchup_rows(entity, relations, strong=True)),
            _render_table("Weak Against", matchup_rows(entity, relations, strong=False)),
            "  </div>",
            "</div>",
        ]
    )
    return "\n".join(parts)
