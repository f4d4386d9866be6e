# --- START OF FILE catalog_builder.py ---

# =============================================================================
# CATALOG BUILDER
# =============================================================================
# Derives a runtime search catalog from the stored template list, so that
# templates imported from documents become searchable exam names without
# editing the static catalog by hand.

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from config_manager import get_config
from template_models import CatalogEntry, RegionGroup, TemplateRecord

logger = logging.getLogger(__name__)

# Catalog-level modality fold. Broader than the dedup key fold: the catalog
# also merges the MMG spelling of mammography.
CATALOG_MODALITY_ALIASES = {
    'US': 'USG',
    'USG': 'USG',
    'MG': 'MG',
    'MMG': 'MG',
}


def catalog_modality(template: TemplateRecord) -> str:
    """
    Maps a template's modality onto a catalog modality key.

    ANGIO templates are filed under the cross-sectional modality named in
    their title (TC or RM), or under OT when neither is mentioned.
    """
    modality = template.modality.upper()
    if modality in CATALOG_MODALITY_ALIASES:
        return CATALOG_MODALITY_ALIASES[modality]
    if modality == 'ANGIO':
        title = template.title.lower()
        if 'tc' in title or 'tomografia' in title:
            return 'TC'
        if 'rm' in title or 'ressonância' in title:
            return 'RM'
        return 'OT'
    return modality


def build_catalog(templates: Iterable[TemplateRecord],
                  lateral_regions: Optional[Sequence[str]] = None) -> Dict[str, List[RegionGroup]]:
    """
    Groups active templates into modality -> region groups.

    Args:
        templates: Stored templates; inactive ones are ignored.
        lateral_regions: Body regions whose exams need a side; config default.

    Returns:
        A catalog mapping ready for CatalogIndex, ordered by modality, region and title.
    """
    if lateral_regions is None:
        lateral_regions = get_config().get('catalog.lateral_regions', [])
    lateral = set(lateral_regions)

    active = [t for t in templates if t.is_active]
    active.sort(key=lambda t: (t.modality, t.body_region, t.title))

    grouped: Dict[str, Dict[str, List[CatalogEntry]]] = {}
    for template in active:
        modality = catalog_modality(template)
        regions = grouped.setdefault(modality, {})
        regions.setdefault(template.body_region, []).append(
            CatalogEntry(name=template.title,
                         has_laterality=template.body_region in lateral,
                         region_name=template.body_region,
                         modality=modality))

    catalog = {
        modality: [RegionGroup(region, tuple(entries)) for region, entries in regions.items()]
        for modality, regions in grouped.items()
    }
    logger.info(f"Built catalog from {len(active)} active templates across {len(catalog)} modalities")
    return catalog

# --- END OF FILE catalog_builder.py ---
