"""Engine Layer - Core Aggregation and Pipeline Management

This module provides the core engine layer of the BFF, implementing:
- SearchOrchestrator: search / hydrate / detail entry point
- ConcurrencyPool: bounded-parallelism job queue (+ best_effort_map)
- CatalogIndex: full catalog / generation / type indexes
- EvolutionExpander: evolution chain expansion
- Result types: CardItem, SearchResult, PokemonDetail
"""

from .evolution import EvolutionExpander, flatten_evolution_chain
from .indexes import CatalogIndex
from .orchestrator import SearchOrchestrator
from .pool import BatchOutcome, ConcurrencyPool, best_effort_map
from .result import (
    CardItem,
    ChainMember,
    EvolutionItem,
    FamilyExpansion,
    GenerationRef,
    IndexEntry,
    PokemonDetail,
    SearchResult,
    StatItem,
)

__all__ = [
    "SearchOrchestrator",
    "ConcurrencyPool",
    "BatchOutcome",
    "best_effort_map",
    "CatalogIndex",
    "EvolutionExpander",
    "flatten_evolution_chain",
    # Results
    "CardItem",
    "ChainMember",
    "EvolutionItem",
    "FamilyExpansion",
    "GenerationRef",
    "IndexEntry",
    "PokemonDetail",
    "SearchResult",
    "StatItem",
]
