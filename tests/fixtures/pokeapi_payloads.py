"""PokeAPI 응답 자산

실제 PokeAPI 스키마 중 BFF가 소비하는 필드만 담은 축소 카탈로그입니다.
키는 절대 URL, 값은 JSON 응답(dict)입니다.

카탈로그 (20개):
- 1~9: 이상해씨/파이리/꼬부기 계열 (1세대)
- 25, 26, 172: 피카츄 계열 (피츄만 2세대), 10080: pikachu-rock-star (변종)
- 133~136: 이브이 계열 (분기형 진화)
- 412~414: burmy 계열. wormadam은 /pokemon/wormadam 이 없고
  기본 variety인 wormadam-plant(413)만 존재
"""

BASE_URL = "https://pokeapi.co/api/v2"

# (id, name, species, types, chain_id)
POKEMON_ROWS = [
    (1, "bulbasaur", "bulbasaur", ["grass", "poison"], 1),
    (2, "ivysaur", "ivysaur", ["grass", "poison"], 1),
    (3, "venusaur", "venusaur", ["grass", "poison"], 1),
    (4, "charmander", "charmander", ["fire"], 2),
    (5, "charmeleon", "charmeleon", ["fire"], 2),
    (6, "charizard", "charizard", ["fire", "flying"], 2),
    (7, "squirtle", "squirtle", ["water"], 3),
    (8, "wartortle", "wartortle", ["water"], 3),
    (9, "blastoise", "blastoise", ["water"], 3),
    (25, "pikachu", "pikachu", ["electric"], 10),
    (26, "raichu", "raichu", ["electric"], 10),
    (133, "eevee", "eevee", ["normal"], 67),
    (134, "vaporeon", "vaporeon", ["water"], 67),
    (135, "jolteon", "jolteon", ["electric"], 67),
    (136, "flareon", "flareon", ["fire"], 67),
    (172, "pichu", "pichu", ["electric"], 10),
    (412, "burmy", "burmy", ["bug"], 213),
    (413, "wormadam-plant", "wormadam", ["bug", "grass"], 213),
    (414, "mothim", "mothim", ["bug", "flying"], 213),
    (10080, "pikachu-rock-star", "pikachu", ["electric"], 10),
]

# chain_id -> (root, {parent: [children]})
EVOLUTION_TREES = {
    1: ("bulbasaur", {"bulbasaur": ["ivysaur"], "ivysaur": ["venusaur"]}),
    2: ("charmander", {"charmander": ["charmeleon"], "charmeleon": ["charizard"]}),
    3: ("squirtle", {"squirtle": ["wartortle"], "wartortle": ["blastoise"]}),
    10: ("pichu", {"pichu": ["pikachu"], "pikachu": ["raichu"]}),
    67: ("eevee", {"eevee": ["vaporeon", "jolteon", "flareon"]}),
    213: ("burmy", {"burmy": ["wormadam", "mothim"]}),
}

GENERATION_NAMES = {
    1: "generation-i", 2: "generation-ii", 3: "generation-iii", 4: "generation-iv",
    5: "generation-v", 6: "generation-vi", 7: "generation-vii", 8: "generation-viii",
    9: "generation-ix",
}

GENERATION_SPECIES = {
    1: [
        "bulbasaur", "ivysaur", "venusaur", "charmander", "charmeleon", "charizard",
        "squirtle", "wartortle", "blastoise", "pikachu", "raichu",
        "eevee", "vaporeon", "jolteon", "flareon",
    ],
    2: ["pichu"],
    4: ["burmy", "wormadam", "mothim"],
}

TYPE_NAMES = ["normal", "fire", "water", "electric", "grass", "poison", "bug", "flying", "unknown", "shadow"]

# species 이름 -> species id (= 기본 variety의 포켓몬 id, 폼/변종은 10000번대)
SPECIES_IDS = {species: pid for pid, _, species, _, _ in POKEMON_ROWS if pid < 10000}


def _pokemon_url(pokemon_id):
    return f"{BASE_URL}/pokemon/{pokemon_id}/"


def _species_ref(species):
    return {"name": species, "url": f"{BASE_URL}/pokemon-species/{SPECIES_IDS[species]}/"}


def _sprites(pokemon_id):
    return {
        "front_default": f"https://sprites.example/pokemon/{pokemon_id}.png",
        "other": {
            "home": {"front_default": f"https://sprites.example/home/{pokemon_id}.png"},
            "official-artwork": {"front_default": f"https://sprites.example/artwork/{pokemon_id}.png"},
        },
    }


def _pokemon(pokemon_id, name, species, types):
    return {
        "id": pokemon_id,
        "name": name,
        "species": _species_ref(species),
        # slot 역순으로 넣어 정렬 여부를 검증
        "types": [
            {"slot": slot, "type": {"name": t, "url": f"{BASE_URL}/type/{t}/"}}
            for slot, t in reversed(list(enumerate(types, start=1)))
        ],
        "stats": [
            {"base_stat": 35 + pokemon_id % 50, "stat": {"name": "hp"}},
            {"base_stat": 55, "stat": {"name": "attack"}},
        ],
        "sprites": _sprites(pokemon_id),
    }


def _chain_node(name, children_by_parent):
    return {
        "species": _species_ref(name),
        "evolves_to": [_chain_node(c, children_by_parent) for c in children_by_parent.get(name, [])],
    }


def build_routes():
    """절대 URL -> JSON 응답 dict"""
    routes = {}

    routes[f"{BASE_URL}/pokemon?limit=100000&offset=0"] = {
        "count": len(POKEMON_ROWS),
        "next": None,
        "previous": None,
        # 업스트림 순서는 보장되지 않으므로 일부러 섞어서 반환
        "results": [
            {"name": name, "url": _pokemon_url(pid)}
            for pid, name, _, _, _ in sorted(POKEMON_ROWS, key=lambda r: r[1])
        ],
    }

    species_chain = {}
    species_default = {}
    for pid, name, species, types, chain_id in POKEMON_ROWS:
        record = _pokemon(pid, name, species, types)
        routes[f"{BASE_URL}/pokemon/{name}"] = record
        routes[_pokemon_url(pid)] = record
        species_chain[species] = chain_id
        if species not in species_default or name == species:
            species_default[species] = (pid, name)

    for species, chain_id in species_chain.items():
        default_id, default_name = species_default[species]
        routes[f"{BASE_URL}/pokemon-species/{species}"] = {
            "name": species,
            "evolution_chain": {"url": f"{BASE_URL}/evolution-chain/{chain_id}/"},
            "genera": [
                {"genus": "ポケモン", "language": {"name": "ja"}},
                {"genus": f"{species.capitalize()} Pokémon", "language": {"name": "en"}},
            ],
            "flavor_text_entries": [
                {"flavor_text": "Texte en français.", "language": {"name": "fr"}},
                {"flavor_text": f"{species.upper()} lives\nin the\fforest.", "language": {"name": "en"}},
            ],
            "varieties": [
                {"is_default": True, "pokemon": {"name": default_name, "url": _pokemon_url(default_id)}},
            ],
        }

    for chain_id, (root, children) in EVOLUTION_TREES.items():
        routes[f"{BASE_URL}/evolution-chain/{chain_id}/"] = {
            "id": chain_id,
            "chain": _chain_node(root, children),
        }

    for gen_id, gen_name in GENERATION_NAMES.items():
        routes[f"{BASE_URL}/generation/{gen_id}"] = {
            "id": gen_id,
            "name": gen_name,
            "pokemon_species": [_species_ref(s) for s in GENERATION_SPECIES.get(gen_id, [])],
        }

    routes[f"{BASE_URL}/type?limit=100"] = {
        "results": [{"name": t, "url": f"{BASE_URL}/type/{t}/"} for t in TYPE_NAMES],
    }
    for type_name in TYPE_NAMES:
        routes[f"{BASE_URL}/type/{type_name}"] = {
            "pokemon": [
                {"slot": 1, "pokemon": {"name": name, "url": _pokemon_url(pid)}}
                for pid, name, _, types, _ in POKEMON_ROWS
                if type_name in types
            ],
        }

    return routes


ALL_IDS = sorted(row[0] for row in POKEMON_ROWS)
