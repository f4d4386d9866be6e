# --- START OF FILE ingestion.py ---

# =============================================================================
# TEMPLATE INGESTION & MAINTENANCE JOBS
# =============================================================================
# Batch jobs run against a template store:
#   - import_documents: parse template documents and persist new templates;
#   - seed_templates: load the default seed set into a store;
#   - run_deduplication: remove near-duplicate (or exact-duplicate) templates;
#   - verify_templates: summarize what the store currently holds.
# Jobs report aggregate counts. At most one job should run against a store at
# a time; callers enforce that.

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from catalog_data import default_templates
from database_models import StorageError, TemplateStore
from template_deduplicator import deduplicate, deduplicate_exact
from template_models import TemplateRecord
from template_parser import TemplateDocumentParser

logger = logging.getLogger(__name__)

DEDUP_MODES = ('fuzzy', 'exact')


@dataclass
class ImportSummary:
    imported: int = 0
    skipped: int = 0
    failed_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'imported': self.imported, 'skipped': self.skipped, 'failedFiles': list(self.failed_files)}


@dataclass
class DedupSummary:
    deleted: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {'deleted': list(self.deleted), 'deletedCount': len(self.deleted)}


def _store_new(records: Iterable[TemplateRecord], store: TemplateStore, summary: ImportSummary) -> None:
    """
    Creates records that are not already stored under the same title + modality.

    Counts go straight into `summary`, so templates stored before a
    StorageError are still counted when the error propagates.
    """
    for record in records:
        if store.find_existing(record.title, record.modality):
            summary.skipped += 1
            logger.debug(f"Skipping already imported template: [{record.modality}] {record.title}")
            continue
        store.create(record)
        summary.imported += 1


def import_documents(paths: Sequence[str], store: TemplateStore,
                     parser: Optional[TemplateDocumentParser] = None) -> ImportSummary:
    """
    Parses each template document and persists templates not yet stored.

    Blocks the parser discards and templates already present (same title and
    modality) both count as skipped. A file that cannot be read, or whose
    templates cannot be stored, is logged and listed in `failed_files`; the
    remaining files are still processed.

    Args:
        paths: Template document paths (UTF-8 text).
        store: Storage collaborator.
        parser: Optional parser; the config-driven one by default.

    Returns:
        ImportSummary with aggregate counts.
    """
    parser = parser or TemplateDocumentParser()
    summary = ImportSummary()

    for path in paths:
        file_path = Path(path)
        logger.info(f"Processing {file_path.name}...")
        try:
            content = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read template document {file_path}: {e}")
            summary.failed_files.append(str(path))
            continue

        result = parser.parse_document(content, file_path.name)
        summary.skipped += result.skipped
        try:
            _store_new(result.records, store, summary)
        except StorageError as e:
            logger.error(f"Storage failure while importing {file_path.name}: {e}", exc_info=True)
            summary.failed_files.append(str(path))

    logger.info(f"Import finished: {summary.imported} imported, {summary.skipped} skipped, "
                f"{len(summary.failed_files)} files failed")
    return summary


def seed_templates(store: TemplateStore, templates: Optional[Iterable[TemplateRecord]] = None) -> int:
    """Loads seed templates (the default set unless given), skipping ones already stored."""
    if templates is None:
        templates = default_templates()
    counts = ImportSummary()
    _store_new(templates, store, counts)
    logger.info(f"Seeded {counts.imported} templates ({counts.skipped} already present)")
    return counts.imported


def run_deduplication(store: TemplateStore, mode: str = 'fuzzy') -> DedupSummary:
    """
    Removes duplicate templates from the store.

    'fuzzy' uses the containment-based detector (richest survives);
    'exact' only collapses identical title + modality pairs. Running the
    same mode twice in a row deletes nothing the second time.
    """
    if mode not in DEDUP_MODES:
        raise ValueError(f"Unknown deduplication mode {mode!r}; expected one of {DEDUP_MODES}")

    records = store.find_all_active()
    result = deduplicate(records) if mode == 'fuzzy' else deduplicate_exact(records)

    summary = DedupSummary()
    for template_id in result.removed_ids:
        store.delete(template_id)
        summary.deleted.append(template_id)
        logger.info(f"Deleted duplicate ID: {template_id}")

    logger.info(f"Deduplication ({mode}) finished: {len(summary.deleted)} deleted")
    return summary


def verify_templates(store: TemplateStore, limit: int = 5) -> Dict:
    """Total template count plus the most recently stored templates and their section labels."""
    recent = store.recent(limit)
    return {
        'total': store.count(),
        'recent': [
            {
                'id': t.id,
                'modality': t.modality,
                'title': t.title,
                'bodyRegion': t.body_region,
                'sections': t.section_labels(),
            }
            for t in recent
        ],
    }

# --- END OF FILE ingestion.py ---
