# --- START OF FILE exam_intake.py ---

# =============================================================================
# EXAM REQUEST RESOLUTION
# =============================================================================
# Turns what a requester typed or picked into the ExamRequest handed to the
# exam-creation service. Free text goes through the laterality resolver and
# the catalog index; catalog picks only need the chosen side appended.

import logging
from typing import Optional

from catalog_index import CatalogIndex
from config_manager import get_config
from laterality_resolver import append_side, extract_laterality
from template_models import CatalogEntry, ExamRequest, Side
from text_normalizer import normalize_modality

logger = logging.getLogger(__name__)


def resolve_free_text(raw_name: str, modality: str, index: CatalogIndex,
                      region: Optional[str] = None) -> ExamRequest:
    """
    Resolves a typed exam name against the catalog.

    The side is stripped before searching so 'USG Ombro Direito' finds the
    catalog entry 'USG Ombro'. An exact (case-insensitive) name hit wins over
    the first substring hit. With no hit the exam is custom and filed under
    the configured custom region.
    """
    laterality = extract_laterality(raw_name)
    clean_name = laterality.clean_name.strip()
    hits = index.search(modality, clean_name, region) if clean_name else []

    exact = next((h for h in hits if h.entry.name.lower() == clean_name.lower()), None)
    hit = exact or (hits[0] if hits else None)

    if hit is None:
        custom_region = region or get_config().get('catalog.custom_region', 'Geral')
        logger.info(f"No catalog match for '{clean_name}' ({modality}); treating as custom exam")
        return ExamRequest(exam_name=append_side(clean_name, laterality.detected_side),
                           modality=normalize_modality(modality),
                           region_name=custom_region,
                           laterality=laterality.detected_side,
                           is_custom=True)

    base_name = hit.entry.name if exact else clean_name
    return ExamRequest(exam_name=append_side(base_name, laterality.detected_side),
                       modality=hit.entry.modality,
                       region_name=hit.region_name,
                       laterality=laterality.detected_side,
                       is_custom=False)


def resolve_catalog_selection(entry: CatalogEntry, side: Side = Side.NONE) -> ExamRequest:
    """Builds the request for an entry picked from the catalog, appending the side when it applies."""
    effective_side = side if entry.has_laterality else Side.NONE
    if side is not Side.NONE and not entry.has_laterality:
        logger.debug(f"Ignoring side {side.value} for '{entry.name}' (no laterality)")
    return ExamRequest(exam_name=append_side(entry.name, effective_side),
                       modality=entry.modality,
                       region_name=entry.region_name,
                       laterality=effective_side,
                       is_custom=False)

# --- END OF FILE exam_intake.py ---
