"""Roster reference data and upsert-time sanitation.

Type names are normalized and validated exactly once, when a record is
prepared for upsert. Stored entities therefore always carry a non-empty
tuple of valid type names and reads never need to repair them.
"""

from dataclasses import replace

from pokerank.config import settings
from pokerank.storage.base import EntityUpsert

# Fixed enumeration of categories, in display order
POKEMON_TYPES: tuple[str, ...] = (
    "Normal", "Fire", "Water", "Electric", "Grass", "Ice", "Fighting", "Poison",
    "Ground", "Flying", "Psychic", "Bug", "Rock", "Ghost", "Dragon", "Dark",
    "Steel", "Fairy",
)

FALLBACK_TYPE = "Normal"

# Badge colour per type, as used by the web client
TYPE_COLORS: dict[str, str] = {
    "Normal": "bg-gray-400",
    "Fire": "bg-red-500",
    "Water": "bg-blue-500",
    "Grass": "bg-green-500",
    "Electric": "bg-yellow-500",
    "Ice": "bg-cyan-400",
    "Fighting": "bg-red-700",
    "Poison": "bg-purple-500",
    "Ground": "bg-amber-700",
    "Flying": "bg-indigo-300",
    "Psychic": "bg-pink-500",
    "Bug": "bg-lime-500",
    "Rock": "bg-yellow-700",
    "Ghost": "bg-purple-700",
    "Dark": "bg-gray-700",
    "Dragon": "bg-indigo-600",
    "Steel": "bg-gray-500",
    "Fairy": "bg-pink-300",
}
DEFAULT_TYPE_COLOR = "bg-gray-400"

# Corrections for entries whose upstream data is missing or wrong, keyed by
# pokedex number: (name, types)
KNOWN_POKEMON: dict[int, tuple[str, tuple[str, ...]]] = {
    1: ("Bulbasaur", ("Grass", "Poison")),
    2: ("Ivysaur", ("Grass", "Poison")),
    3: ("Venusaur", ("Grass", "Poison")),
    4: ("Charmander", ("Fire",)),
    5: ("Charmeleon", ("Fire",)),
    6: ("Charizard", ("Fire", "Flying")),
    7: ("Squirtle", ("Water",)),
    8: ("Wartortle", ("Water",)),
    9: ("Blastoise", ("Water",)),
    10: ("Caterpie", ("Bug",)),
    11: ("Metapod", ("Bug",)),
    12: ("Butterfree", ("Bug", "Flying")),
    13: ("Weedle", ("Bug", "Poison")),
    14: ("Kakuna", ("Bug", "Poison")),
    15: ("Beedrill", ("Bug", "Poison")),
    16: ("Pidgey", ("Normal", "Flying")),
    17: ("Pidgeotto", ("Normal", "Flying")),
    18: ("Pidgeot", ("Normal", "Flying")),
    19: ("Rattata", ("Normal",)),
    20: ("Raticate", ("Normal",)),
    25: ("Pikachu", ("Electric",)),
    150: ("Mewtwo", ("Psychic",)),
    152: ("Chikorita", ("Grass",)),
    155: ("Cyndaquil", ("Fire",)),
    158: ("Totodile", ("Water",)),
    252: ("Treecko", ("Grass",)),
    253: ("Grovyle", ("Grass",)),
    255: ("Torchic", ("Fire",)),
    258: ("Mudkip", ("Water",)),
    300: ("Skitty", ("Normal",)),
    387: ("Turtwig", ("Grass",)),
    390: ("Chimchar", ("Fire",)),
    393: ("Piplup", ("Water",)),
    495: ("Snivy", ("Grass",)),
    498: ("Tepig", ("Fire",)),
    501: ("Oshawott", ("Water",)),
    553: ("Krookodile", ("Ground", "Dark")),
    650: ("Chespin", ("Grass",)),
    653: ("Fennekin", ("Fire",)),
    656: ("Froakie", ("Water",)),
    722: ("Rowlet", ("Grass", "Flying")),
    725: ("Litten", ("Fire",)),
    728: ("Popplio", ("Water",)),
    800: ("Necrozma", ("Psychic",)),
    810: ("Grookey", ("Grass",)),
    813: ("Scorbunny", ("Fire",)),
    816: ("Sobble", ("Water",)),
    906: ("Sprigatito", ("Grass",)),
    909: ("Fuecoco", ("Fire",)),
    912: ("Quaxly", ("Water",)),
}

# Used when the seed source is unusable
STARTER_POKEDEX_NUMBERS: tuple[int, ...] = (1, 4, 7, 25)

PLACEHOLDER_PREFIX = "Pokémon #"


def sprite_url(natural_key: int) -> str:
    return f"{settings.seed_sprite_base_url}/{natural_key}.png"


def placeholder_name(natural_key: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{natural_key}"


def is_placeholder_name(name: str) -> bool:
    return name.startswith(PLACEHOLDER_PREFIX)


def normalize_type(raw: str) -> str:
    """'fire' / ' FIRE ' -> 'Fire'."""
    return raw.strip().capitalize()


def sanitize_categories(natural_key: int, categories) -> tuple[str, ...]:
    """Return a non-empty, de-duplicated tuple of valid type names.

    Any type name outside POKEMON_TYPES (upstream has been seen to send
    localized species names in the types field) replaces the whole list
    with the known correction for this pokedex number if there is one;
    otherwise the invalid names are dropped. An empty result becomes
    ("Normal",).
    """
    valid: list[str] = []
    saw_invalid = False
    for raw in categories:
        name = normalize_type(raw)
        if name in POKEMON_TYPES:
            if name not in valid:
                valid.append(name)
        else:
            saw_invalid = True

    known = KNOWN_POKEMON.get(natural_key)
    if saw_invalid and known is not None:
        return known[1]
    if not valid:
        return known[1] if known is not None else (FALLBACK_TYPE,)
    return tuple(valid)


def prepare_upsert(record: EntityUpsert) -> EntityUpsert:
    """Sanitize a seed record before it reaches the entity store."""
    display_name = record.display_name.strip() or placeholder_name(record.natural_key)
    known = KNOWN_POKEMON.get(record.natural_key)
    if known is not None and is_placeholder_name(display_name):
        display_name = known[0]

    return replace(
        record,
        display_name=display_name,
        categories=sanitize_categories(record.natural_key, record.categories),
        image_url=record.image_url or sprite_url(record.natural_key),
    )


def starter_roster() -> list[EntityUpsert]:
    return [
        EntityUpsert(
            natural_key=number,
            display_name=KNOWN_POKEMON[number][0],
            categories=KNOWN_POKEMON[number][1],
            image_url=sprite_url(number),
        )
        for number in STARTER_POKEDEX_NUMBERS
    ]
