# --- START OF FILE laterality_resolver.py ---

# =============================================================================
# LATERALITY RESOLVER
# =============================================================================
# Detects a side indicator embedded in a free-text exam name (left, right,
# bilateral), strips it and reports the side separately as a Side value. The
# reverse direction (putting a chosen side back on a clean catalog name) is
# the caller's job; `append_side` is the helper intake code uses for it.

import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from template_models import Side

logger = logging.getLogger(__name__)

SIDE_LABELS: Dict[Side, str] = {
    Side.LEFT: 'Esquerdo',
    Side.RIGHT: 'Direito',
    Side.BILATERAL: 'Bilateral',
}

SIDE_LABELS_FEMININE: Dict[Side, str] = {
    Side.LEFT: 'Esquerda',
    Side.RIGHT: 'Direita',
    Side.BILATERAL: 'Bilateral',
}


@dataclass(frozen=True)
class LateralityResult:
    clean_name: str
    detected_side: Side

    def to_dict(self) -> Dict[str, str]:
        return {'cleanName': self.clean_name, 'detectedSide': self.detected_side.value}


class LateralityResolver:
    """
    Splits an exam name into a clean base name and a detected side.

    Rules are checked most specific first: 'bilateral' beats the left/right
    words, and the first matching rule decides the side. Each rule removes
    one occurrence of its whole word (plural and adverb forms included,
    e.g. "Esquerdos", "Bilateralmente") together with an optional leading
    hyphen or en-dash. Leftover hyphens and empty parentheses are tidied
    away afterwards.
    """

    def __init__(self):
        self.rules: List[Tuple[Side, re.Pattern, re.Pattern]] = [
            (Side.BILATERAL,
             re.compile(r'bilateral', re.IGNORECASE),
             re.compile(r'\s*[-–]?\s*bilateral\w*', re.IGNORECASE)),
            (Side.LEFT,
             re.compile(r'esquerd[oa]', re.IGNORECASE),
             re.compile(r'\s*[-–]?\s*esquerd\w*', re.IGNORECASE)),
            (Side.RIGHT,
             re.compile(r'direit[oa]', re.IGNORECASE),
             re.compile(r'\s*[-–]?\s*direit\w*', re.IGNORECASE)),
        ]
        self.cleanup_patterns = [
            (re.compile(r'\(\s*\)'), ' '),          # empty parenthetical left behind
            (re.compile(r'\s*[-–]\s*$'), ''),       # trailing standalone hyphen
            (re.compile(r'\s+'), ' '),
        ]

    def _cleanup(self, name: str) -> str:
        cleaned = name
        for pattern, replacement in self.cleanup_patterns:
            cleaned = pattern.sub(replacement, cleaned).strip()
        return cleaned

    def extract(self, raw_name: str) -> LateralityResult:
        if not raw_name:
            return LateralityResult('', Side.NONE)

        for side, detector, remover in self.rules:
            if detector.search(raw_name):
                stripped = remover.sub(' ', raw_name, count=1)
                clean_name = self._cleanup(stripped)
                logger.debug(f"Laterality {side.value} detected in '{raw_name}' -> '{clean_name}'")
                return LateralityResult(clean_name, side)

        return LateralityResult(raw_name, Side.NONE)


_resolver = LateralityResolver()

def extract_laterality(raw_name: str) -> LateralityResult:
    return _resolver.extract(raw_name)

def side_label(side: Side, feminine: bool = False) -> str:
    """Display label for a side; empty for Side.NONE."""
    labels = SIDE_LABELS_FEMININE if feminine else SIDE_LABELS
    return labels.get(side, '')

def append_side(clean_name: str, side: Side, feminine: bool = False) -> str:
    """Builds the final exam name for a chosen side, e.g. 'USG Ombro' + RIGHT -> 'USG Ombro Direito'."""
    label = side_label(side, feminine)
    if not label:
        return clean_name.strip()
    return f"{clean_name.strip()} {label}"

# --- END OF FILE laterality_resolver.py ---
