# --- START OF FILE catalog_index.py ---

# =============================================================================
# CATALOG INDEX
# =============================================================================
# Read-only lookup structure over the exam catalog, grouped by modality and
# body region. Snapshots are immutable; rebuilding produces a whole new
# snapshot that CatalogIndexHolder swaps in atomically, so readers never see
# a half-built index.

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from fuzzywuzzy import fuzz

from template_models import CatalogEntry, RegionGroup
from text_normalizer import normalize_modality

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchHit:
    """A matching catalog entry annotated with the region it belongs to."""
    entry: CatalogEntry
    region_name: str

    def to_dict(self) -> Dict:
        data = self.entry.to_dict()
        data['regionName'] = self.region_name
        return data


@dataclass(frozen=True)
class Suggestion:
    entry: CatalogEntry
    score: int

    def to_dict(self) -> Dict:
        data = self.entry.to_dict()
        data['score'] = self.score
        return data


class CatalogIndex:
    """
    Immutable modality -> region groups index with substring search.

    Modality keys are folded with the text normalizer (so 'US' and 'USG'
    address the same exams). Search is a case-insensitive substring test in
    catalog declaration order; there is no relevance ranking. An empty result
    is a legitimate answer meaning "custom exam name".
    """

    def __init__(self, catalog: Mapping[str, Sequence[RegionGroup]]):
        grouped: Dict[str, Tuple[RegionGroup, ...]] = {}
        for modality, regions in catalog.items():
            key = normalize_modality(modality)
            grouped[key] = grouped.get(key, ()) + tuple(regions)
        self._regions = MappingProxyType(grouped)
        self._flat = MappingProxyType({
            modality: tuple((entry, group.region_name) for group in regions for entry in group.exams)
            for modality, regions in grouped.items()
        })
        self._size = sum(len(v) for v in self._flat.values())

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry]) -> 'CatalogIndex':
        """Groups flat entries by modality, then region, keeping first-seen order."""
        grouped: Dict[str, Dict[str, List[CatalogEntry]]] = {}
        for entry in entries:
            grouped.setdefault(entry.modality, {}).setdefault(entry.region_name, []).append(entry)
        return cls({
            modality: [RegionGroup(region, tuple(exams)) for region, exams in regions.items()]
            for modality, regions in grouped.items()
        })

    def modalities(self) -> List[str]:
        return list(self._regions.keys())

    def regions_for(self, modality: str) -> Tuple[RegionGroup, ...]:
        return self._regions.get(normalize_modality(modality), ())

    def _candidates(self, modality: str, region: Optional[str]) -> Tuple[Tuple[CatalogEntry, str], ...]:
        if region:
            # Aliased modality keys can each hold a group with the same region name
            return tuple((entry, group.region_name)
                         for group in self.regions_for(modality) if group.region_name == region
                         for entry in group.exams)
        return self._flat.get(normalize_modality(modality), ())

    def search(self, modality: str, query: str, region: Optional[str] = None) -> List[SearchHit]:
        """
        Finds catalog entries whose name contains the query (case-insensitive).

        Args:
            modality: Modality code whose exams are searched.
            query: Free text typed by the user; an empty query matches everything.
            region: Optional region name restricting the candidates first.

        Returns:
            Hits in catalog declaration order, each carrying its region name.
        """
        needle = (query or '').strip().lower()
        return [SearchHit(entry, region_name)
                for entry, region_name in self._candidates(modality, region)
                if needle in entry.name.lower()]

    def suggest(self, modality: str, query: str, limit: int = 5, min_score: int = 60,
                region: Optional[str] = None) -> List[Suggestion]:
        """
        Fuzzy "did you mean" candidates for queries that found no substring match.

        Scores use fuzzywuzzy's partial ratio; ties keep catalog order.
        """
        needle = (query or '').strip().lower()
        if not needle:
            return []
        scored = []
        for position, (entry, _) in enumerate(self._candidates(modality, region)):
            score = fuzz.partial_ratio(needle, entry.name.lower())
            if score >= min_score:
                scored.append((-score, position, entry))
        scored.sort()
        return [Suggestion(entry, -neg_score) for neg_score, _, entry in scored[:limit]]

    def to_dict(self) -> Dict[str, List[Dict]]:
        return {modality: [g.to_dict() for g in groups] for modality, groups in self._regions.items()}

    def __len__(self) -> int:
        return self._size


class CatalogIndexHolder:
    """Owns the current index snapshot and swaps it wholesale on rebuild."""

    def __init__(self, index: Optional[CatalogIndex] = None):
        self._index = index or CatalogIndex({})
        self._lock = threading.Lock()

    def current(self) -> CatalogIndex:
        return self._index

    def rebuild(self, catalog: Mapping[str, Sequence[RegionGroup]]) -> CatalogIndex:
        # Build outside the lock; only the reference assignment is guarded.
        new_index = CatalogIndex(catalog)
        with self._lock:
            self._index = new_index
        logger.info(f"Catalog index rebuilt: {len(new_index)} exams across {len(new_index.modalities())} modalities")
        return new_index


def build_default_index() -> CatalogIndex:
    from catalog_data import EXAM_CATALOG
    return CatalogIndex(EXAM_CATALOG)

# --- END OF FILE catalog_index.py ---
