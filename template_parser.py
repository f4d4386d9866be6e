# --- START OF FILE template_parser.py ---

# =============================================================================
# TEMPLATE DOCUMENT PARSER
# =============================================================================
# Turns semi-structured template documents into TemplateRecords. Parsing is a
# two-pass scan:
#   1. split the document into blocks on lines consisting solely of '---';
#   2. run small, named extractors over each block (header, source-hint
#      fallback, modality canonicalization, bold-labelled fields).
# A block that cannot yield a meaningful record is skipped and counted; it
# never aborts the rest of the document.

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from config_manager import get_config
from template_models import TemplateRecord, TemplateSection

logger = logging.getLogger(__name__)

TITLE_LABEL = 'Título'
METHOD_LABEL = 'Método'
FINDINGS_LABEL = 'Achados'
CONCLUSION_LABEL = 'Conclusão'

# Only these three become sections, always in this order. The title label
# feeds TemplateRecord.title instead.
SECTION_LABELS = (METHOD_LABEL, FINDINGS_LABEL, CONCLUSION_LABEL)
FIELD_LABELS = (TITLE_LABEL,) + SECTION_LABELS

# e.g. "## 2.1.1 RX – Crânio", "## TC - Tórax", "##RM – Joelho – Direito"
HEADER_PATTERN = re.compile(r'^[ \t]*##\s*(?:[\d.]+\s+)?([A-Za-z]+)\s*[–-]\s*(.*)$', re.MULTILINE)
REGION_SPLIT_PATTERN = re.compile(r'[–-]')


@dataclass
class BlockHeader:
    modality: str
    region: str


@dataclass
class ParseResult:
    records: List[TemplateRecord] = field(default_factory=list)
    skipped: int = 0


def _field_pattern(label: str) -> 're.Pattern':
    # Content runs from the bold label to the next bold marker or end of block.
    return re.compile(r'\*\*' + re.escape(label) + r':?\*\*\s*:?\s*(.*?)(?=\*\*|\Z)', re.DOTALL)


_FIELD_PATTERNS = {label: _field_pattern(label) for label in FIELD_LABELS}


def split_blocks(document: str, separator: str = '---') -> List[str]:
    """Splits a document on separator-only lines, dropping blocks that are blank."""
    if not document:
        return []
    separator_line = re.compile(r'^' + re.escape(separator) + r'\r?$', re.MULTILINE)
    return [block for block in separator_line.split(document) if block.strip()]


def extract_header(block: str) -> Optional[BlockHeader]:
    """
    Finds the '## [id] MODALITY – region' line of a block.

    The region keeps only the text before any further dash, so
    'Ombro – Direito' yields 'Ombro'; laterality is resolved elsewhere.
    """
    match = HEADER_PATTERN.search(block)
    if not match:
        return None
    modality = match.group(1).strip().upper()
    rest = match.group(2).strip()
    region = REGION_SPLIT_PATTERN.split(rest)[0].strip()
    return BlockHeader(modality=modality, region=region)


def modality_from_source(source_hint: str, hints: Sequence[Sequence[str]], default: str = 'OT') -> str:
    """Derives a modality from a file name or tag; the first matching substring wins."""
    hint = (source_hint or '').lower()
    for needle, modality in hints:
        if needle.lower() in hint:
            return modality
    return default


def canonical_modality(token: str, modality_map: Dict[str, str]) -> str:
    """Maps header tokens through the canonical table; unknown tokens pass through unchanged."""
    code = (token or '').strip().upper()
    return modality_map.get(code, code)


def extract_labeled_fields(block: str) -> Dict[str, str]:
    """Returns the content of every known bold label; missing labels map to ''."""
    fields = {}
    for label, pattern in _FIELD_PATTERNS.items():
        match = pattern.search(block)
        fields[label] = match.group(1).strip() if match else ''
    return fields


class TemplateDocumentParser:
    """
    Parses plain-text template documents into TemplateRecords.

    All tunables (block separator, fallback title/region, source hints and
    the modality table) come from the `parser` config section unless given
    explicitly.
    """

    def __init__(self, parser_config: Optional[Dict] = None):
        cfg = parser_config if parser_config is not None else get_config().get_section('parser')
        self.block_separator = cfg.get('block_separator', '---')
        self.fallback_region = cfg.get('fallback_region', 'Geral')
        self.fallback_title = cfg.get('fallback_title', 'Sem Título')
        self.default_modality = cfg.get('default_modality', 'OT')
        self.source_hints: List[Tuple[str, str]] = [tuple(h) for h in cfg.get('source_hints', [])]
        self.modality_map: Dict[str, str] = {
            k.upper(): v.upper() for k, v in (cfg.get('modality_map') or {}).items()
        }

    def parse_block(self, block: str, source_hint: str) -> Optional[TemplateRecord]:
        """Parses one block, returning None when the block must be discarded."""
        header = extract_header(block)
        if header:
            modality = header.modality
            region = header.region or self.fallback_region
        else:
            modality = modality_from_source(source_hint, self.source_hints, self.default_modality)
            region = self.fallback_region
        modality = canonical_modality(modality, self.modality_map)

        fields = extract_labeled_fields(block)
        title = fields[TITLE_LABEL] or self.fallback_title
        if title == self.fallback_title and not fields[METHOD_LABEL] and not fields[FINDINGS_LABEL]:
            return None

        sections = [TemplateSection(label, fields[label]) for label in SECTION_LABELS]
        return TemplateRecord(
            title=title,
            modality=modality,
            body_region=region,
            sections=sections,
            complexity=1,
            is_active=True,
        )

    def parse_document(self, document: str, source_hint: str = '') -> ParseResult:
        result = ParseResult()
        for position, block in enumerate(split_blocks(document, self.block_separator), start=1):
            try:
                record = self.parse_block(block, source_hint)
            except Exception as e:
                logger.warning(f"Skipping block {position} of '{source_hint}': {e}")
                result.skipped += 1
                continue
            if record is None:
                logger.debug(f"Discarding empty block {position} of '{source_hint}'")
                result.skipped += 1
                continue
            result.records.append(record)

        logger.info(f"Parsed '{source_hint}': {len(result.records)} templates, {result.skipped} skipped")
        return result

    def parse(self, document: str, source_hint: str = '') -> List[TemplateRecord]:
        return self.parse_document(document, source_hint).records


def parse(document: str, source_hint: str = '') -> List[TemplateRecord]:
    """Convenience wrapper using the config-driven parser."""
    return TemplateDocumentParser().parse(document, source_hint)

# --- END OF FILE template_parser.py ---
