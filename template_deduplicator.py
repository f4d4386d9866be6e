# --- START OF FILE template_deduplicator.py ---

# =============================================================================
# TEMPLATE DUPLICATE DETECTOR
# =============================================================================
# Finds near-duplicate templates and keeps one canonical survivor per cluster.
#
# Records are ordered richest-first (serialized section length + title
# length) and folded into an accumulator of accepted entries. A record is a
# duplicate when an already accepted entry has the same folded modality and
# either normalized title contains the other. The first accepted match wins,
# so the richer record always survives.
#
# KNOWN WEAKNESS: containment is permissive. Two unrelated exams where one
# normalized title happens to sit inside the other (same modality) collapse
# into one cluster, and an empty normalized title matches everything in its
# modality. This mirrors the behaviour existing catalogs were cleaned with;
# a length-ratio or edit-distance threshold needs product sign-off first.

import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from template_models import TemplateRecord
from text_normalizer import TextNormalizer, get_normalizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcceptedEntry:
    modality: str
    normalized_title: str
    record: TemplateRecord


@dataclass(frozen=True)
class DedupAccumulator:
    """State threaded through the fold: accepted entries in acceptance order plus removals."""
    accepted: Tuple[AcceptedEntry, ...] = ()
    removed: Tuple[TemplateRecord, ...] = ()


@dataclass
class DedupResult:
    canonical: List[TemplateRecord] = field(default_factory=list)
    removed: List[TemplateRecord] = field(default_factory=list)

    @property
    def removed_ids(self) -> List[str]:
        return [r.id for r in self.removed if r.id is not None]


def richness(record: TemplateRecord) -> int:
    """Approximates how detailed a template is."""
    return len(record.serialize_sections()) + len(record.title)


def sort_by_richness(records: Iterable[TemplateRecord]) -> List[TemplateRecord]:
    # sorted() is stable: equally rich records keep their input order.
    return sorted(records, key=richness, reverse=True)


def find_duplicate_of(accumulator: DedupAccumulator, modality: str,
                      normalized_title: str) -> Optional[AcceptedEntry]:
    """Returns the first accepted entry (acceptance order) that clusters with the given key."""
    for entry in accumulator.accepted:
        if entry.modality != modality:
            continue
        if normalized_title in entry.normalized_title or entry.normalized_title in normalized_title:
            return entry
    return None


def accept_or_remove(accumulator: DedupAccumulator, record: TemplateRecord,
                     normalizer: Optional[TextNormalizer] = None) -> DedupAccumulator:
    """One fold step: accept the record or mark it as a duplicate of an earlier, richer one."""
    normalizer = normalizer or get_normalizer()
    modality, normalized_title = normalizer.comparison_key(record.title, record.modality)
    if not normalized_title:
        logger.warning(f"Template {record.id or record.title!r} has an empty comparison title; "
                       f"it clusters with every {modality} template")

    duplicate_of = find_duplicate_of(accumulator, modality, normalized_title)
    if duplicate_of is not None:
        logger.info(f"Found duplicate: \"{record.title}\" matched existing \"{duplicate_of.record.title}\"")
        return DedupAccumulator(accumulator.accepted, accumulator.removed + (record,))

    entry = AcceptedEntry(modality, normalized_title, record)
    return DedupAccumulator(accumulator.accepted + (entry,), accumulator.removed)


def deduplicate(records: Sequence[TemplateRecord],
                normalizer: Optional[TextNormalizer] = None) -> DedupResult:
    """
    Clusters near-duplicate templates and keeps the richest of each cluster.

    Args:
        records: Parsed or stored templates, in any order.
        normalizer: Optional normalizer; the shared config-driven one by default.

    Returns:
        DedupResult with the canonical records (acceptance order) and the removed ones.
    """
    normalizer = normalizer or get_normalizer()
    final = reduce(lambda acc, record: accept_or_remove(acc, record, normalizer),
                   sort_by_richness(records), DedupAccumulator())

    result = DedupResult(canonical=[e.record for e in final.accepted], removed=list(final.removed))
    logger.info(f"Deduplication kept {len(result.canonical)} of {len(records)} templates")
    return result


def deduplicate_exact(records: Sequence[TemplateRecord]) -> DedupResult:
    """
    Removes exact duplicates only: same trimmed, case-folded title and modality.

    Within each group the record with the longest serialized sections is kept.
    This is the conservative pass to run before (or instead of) the fuzzy one.
    """
    groups: Dict[Tuple[str, str], List[TemplateRecord]] = {}
    for record in records:
        key = (record.title.strip().lower(), record.modality.strip().lower())
        groups.setdefault(key, []).append(record)

    result = DedupResult()
    for key, group in groups.items():
        ranked = sorted(group, key=lambda r: len(r.serialize_sections()), reverse=True)
        result.canonical.append(ranked[0])
        if len(ranked) > 1:
            logger.info(f"Found {len(ranked)} duplicates for: {key[0]}|{key[1]}")
            result.removed.extend(ranked[1:])
    return result

# --- END OF FILE template_deduplicator.py ---
