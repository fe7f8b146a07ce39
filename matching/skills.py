import json
import logging
import re
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

import config

logger = logging.getLogger(__name__)

_STRIP_RX = re.compile(r"[^/\w\s-]")
_SPACE_RX = re.compile(r"\s+")


def clean_skill_text(raw) -> str:
    """Lowercase, drop punctuation (keeping / and -), collapse whitespace."""
    if not isinstance(raw, str):
        return ""
    text = _STRIP_RX.sub("", raw.strip().lower())
    return _SPACE_RX.sub(" ", text).strip()


def load_aliases(path: str) -> Mapping[str, str]:
    """Load the raw-spelling -> canonical-token table as a read-only mapping.

    Keys are cleaned the same way user input is, so the table can be written
    with natural spellings ("Node.js", "MS Excel"). Every canonical value must
    already be canonical; otherwise canonicalization would not be idempotent.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    table = {}
    for key, value in raw.items():
        k = clean_skill_text(key)
        if k:
            table[k] = value

    for k, v in table.items():
        if clean_skill_text(v) != v or table.get(v, v) != v:
            raise ValueError(f"Alias '{k}' points to non-canonical value '{v}'")

    logger.info(f"Loaded {len(table)} skill aliases from {path}")
    return MappingProxyType(table)


class SkillCanonicalizer:
    """Turns free-text skill names into stable tokens via an alias table."""

    def __init__(self, aliases: Optional[Mapping[str, str]] = None, max_length: int = config.MAX_SKILL_LENGTH):
        self.aliases = aliases if aliases is not None else MappingProxyType({})
        self.max_length = max_length

    def canonicalize(self, raw) -> str:
        cleaned = clean_skill_text(raw)
        return self.aliases.get(cleaned, cleaned)

    def sanitize(self, raw) -> str:
        return self.canonicalize(raw)[: self.max_length]


@lru_cache(maxsize=1)
def default_canonicalizer() -> SkillCanonicalizer:
    return SkillCanonicalizer(load_aliases(config.SKILL_ALIASES_PATH))


def canonicalize_skill_name(raw, canonicalizer: Optional[SkillCanonicalizer] = None) -> str:
    return (canonicalizer or default_canonicalizer()).canonicalize(raw)


def sanitize_skill(raw, canonicalizer: Optional[SkillCanonicalizer] = None) -> str:
    return (canonicalizer or default_canonicalizer()).sanitize(raw)
