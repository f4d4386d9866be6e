# --- START OF FILE template_models.py ---

# =============================================================================
# TEMPLATE & CATALOG RECORD TYPES
# =============================================================================
# Plain data carriers shared by the parser, deduplicator, catalog index,
# storage layer and intake workflow. No behaviour beyond validation and
# serialization lives here.

import json
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

DEFAULT_SECTION_LABEL = 'Laudo'
VALID_TARGET_SEX = ('M', 'F')


class Side(Enum):
    """Laterality detected in (or chosen for) an exam name."""
    NONE = 'none'
    LEFT = 'left'
    RIGHT = 'right'
    BILATERAL = 'bilateral'


@dataclass(frozen=True)
class TemplateSection:
    """One labelled section of a report template."""
    label: str
    default_content: str = ''

    def to_dict(self) -> Dict[str, str]:
        # Key names match the stored/serialized form consumed by the report editor.
        return {'label': self.label, 'defaultContent': self.default_content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TemplateSection':
        return cls(label=str(data.get('label', '')),
                   default_content=str(data.get('defaultContent', data.get('default_content', '')) or ''))


@dataclass
class TemplateRecord:
    """
    A reusable report template for one exam type.

    Construction enforces the record invariants: a non-empty trimmed title,
    an uppercase modality code, a complexity tier in 1..4 and at least one
    section. Records built without sections receive a single empty default
    section so that downstream rendering always has something to show.
    """
    title: str
    modality: str
    body_region: str = 'Geral'
    sections: List[TemplateSection] = field(default_factory=list)
    complexity: int = 1
    is_active: bool = True
    variants: Optional[FrozenSet[str]] = None
    target_sex: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        self.title = (self.title or '').strip()
        if not self.title:
            raise ValueError("TemplateRecord.title must be non-empty")
        self.modality = (self.modality or '').strip().upper()
        if not self.modality:
            raise ValueError("TemplateRecord.modality must be non-empty")
        self.body_region = (self.body_region or '').strip() or 'Geral'
        if not isinstance(self.complexity, int) or not 1 <= self.complexity <= 4:
            raise ValueError(f"complexity must be an integer in 1..4, got {self.complexity!r}")
        if self.target_sex is not None:
            self.target_sex = self.target_sex.strip().upper() or None
            if self.target_sex is not None and self.target_sex not in VALID_TARGET_SEX:
                raise ValueError(f"target_sex must be one of {VALID_TARGET_SEX}, got {self.target_sex!r}")
        if self.variants is not None:
            self.variants = frozenset(v.strip() for v in self.variants if v and v.strip())
        self.sections = list(self.sections)
        if not self.sections:
            self.sections = [TemplateSection(DEFAULT_SECTION_LABEL, '')]

    def has_content(self) -> bool:
        """True when any section carries default text."""
        return any(s.default_content.strip() for s in self.sections)

    def serialize_sections(self) -> str:
        """Compact JSON rendering of the sections, non-ASCII preserved."""
        return json.dumps([s.to_dict() for s in self.sections], ensure_ascii=False, separators=(',', ':'))

    def serialize_variants(self) -> str:
        return json.dumps(sorted(self.variants or []), ensure_ascii=False)

    def section_labels(self) -> List[str]:
        return [s.label for s in self.sections]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'modality': self.modality,
            'bodyRegion': self.body_region,
            'sections': [s.to_dict() for s in self.sections],
            'complexity': self.complexity,
            'isActive': self.is_active,
            'variants': sorted(self.variants or []),
            'targetSex': self.target_sex,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TemplateRecord':
        """Builds a record from the JSON shape produced by `to_dict` (camelCase or snake_case keys)."""
        sections = data.get('sections') or []
        if isinstance(sections, str):
            sections = json.loads(sections)
        variants = data.get('variants')
        if isinstance(variants, str):
            variants = json.loads(variants)
        return cls(
            title=data.get('title', ''),
            modality=data.get('modality', ''),
            body_region=data.get('bodyRegion', data.get('body_region', 'Geral')),
            sections=[TemplateSection.from_dict(s) for s in sections],
            complexity=int(data.get('complexity', 1) or 1),
            is_active=bool(data.get('isActive', data.get('is_active', True))),
            variants=frozenset(variants) if variants else None,
            target_sex=data.get('targetSex', data.get('target_sex')),
            id=data.get('id'),
        )


@dataclass(frozen=True)
class CatalogEntry:
    """A known exam name in the runtime search catalog."""
    name: str
    has_laterality: bool
    region_name: str
    modality: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'hasLaterality': self.has_laterality,
            'regionName': self.region_name,
            'modality': self.modality,
        }


@dataclass(frozen=True)
class RegionGroup:
    """The exams of one body region under one modality, in declaration order."""
    region_name: str
    exams: Tuple[CatalogEntry, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.region_name, 'exams': [e.to_dict() for e in self.exams]}


@dataclass(frozen=True)
class ExamRequest:
    """Resolved exam identity handed to the exam-creation collaborator."""
    exam_name: str
    modality: str
    region_name: str
    laterality: Side = Side.NONE
    is_custom: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['laterality'] = self.laterality.value
        return data

# --- END OF FILE template_models.py ---
