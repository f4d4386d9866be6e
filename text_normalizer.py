# --- START OF FILE text_normalizer.py ---

# =============================================================================
# TEXT NORMALIZER
# =============================================================================
# Builds comparison keys for template titles and modality codes. The keys are
# never displayed; they only decide whether two templates describe the same
# exam. Synonym rules come from the `normalizer` config section.

import re
import logging
import unicodedata
from typing import Dict, List, Optional, Sequence, Tuple

from config_manager import get_config

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')

class TextNormalizer:
    """
    Folds template titles and modality codes into comparison keys.

    Title folding lowercases the text, rewrites long Portuguese modality
    phrases to their abbreviations (e.g. 'tomografia computadorizada de' ->
    'tc'), turns en-dashes into hyphens and collapses whitespace. Every
    synonym rule is applied in sequence, so one rewrite never prevents a
    later one from matching.
    """

    def __init__(self, title_synonyms: Optional[Sequence[Sequence[str]]] = None,
                 modality_aliases: Optional[Dict[str, str]] = None):
        if title_synonyms is None or modality_aliases is None:
            section = get_config().get_section('normalizer')
            if title_synonyms is None:
                title_synonyms = section.get('title_synonyms', [])
            if modality_aliases is None:
                modality_aliases = section.get('modality_aliases', {})

        self.title_synonyms: List[Tuple[str, str]] = [
            (phrase.lower(), abbreviation) for phrase, abbreviation in title_synonyms
        ]
        self.modality_aliases: Dict[str, str] = {
            k.strip().upper(): v.strip().upper() for k, v in (modality_aliases or {}).items()
        }

    def normalize_title(self, title: str) -> str:
        if not title:
            return ''
        # NFC first so decomposed accents still meet the synonym phrases.
        key = unicodedata.normalize('NFC', title).lower()
        for phrase, abbreviation in self.title_synonyms:
            key = key.replace(phrase, abbreviation)
        key = key.replace('–', '-')
        key = _WHITESPACE.sub(' ', key)
        return key.strip()

    def normalize_modality(self, modality: str) -> str:
        """Uppercases the code and folds known aliases (US -> USG); everything else passes through."""
        code = (modality or '').strip().upper()
        return self.modality_aliases.get(code, code)

    def comparison_key(self, title: str, modality: str) -> Tuple[str, str]:
        return self.normalize_modality(modality), self.normalize_title(title)


_default_normalizer: Optional[TextNormalizer] = None

def get_normalizer() -> TextNormalizer:
    """Returns the shared, config-driven normalizer instance."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = TextNormalizer()
    return _default_normalizer

def normalize_title(title: str) -> str:
    return get_normalizer().normalize_title(title)

def normalize_modality(modality: str) -> str:
    return get_normalizer().normalize_modality(modality)

# --- END OF FILE text_normalizer.py ---
