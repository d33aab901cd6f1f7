"""Descriptive tags for timeline events.

Rule-based (no LLM): phrases, context patterns, keywords, then a generic
significant-word fallback.
Descriptions are free text entered by editors: tags are display metadata only.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)

MAX_TAGS = 3
MIN_DESCRIPTION_LENGTH = 5
DEFAULT_TAG = "historical event"


POLITICAL_PHRASES: tuple[str, ...] = (
    "vote of no confidence",
    "no confidence",
    "state of emergency",
    "martial law",
    "military coup",
    "coup d'etat",
    "civil war",
    "cold war",
    "world war",
    "peace treaty",
    "peace agreement",
    "peace talks",
    "ceasefire agreement",
    "trade agreement",
    "trade deal",
    "free trade",
    "nuclear deal",
    "border dispute",
    "territorial dispute",
    "prime minister",
    "head of state",
    "opposition leader",
    "supreme court",
    "constitutional court",
    "constitutional amendment",
    "constitutional reform",
    "electoral reform",
    "economic reform",
    "land reform",
    "general election",
    "presidential election",
    "parliamentary election",
    "snap election",
    "election fraud",
    "independence referendum",
    "national assembly",
    "coalition government",
    "interim government",
    "transitional government",
    "one-party state",
    "political party",
    "human rights",
    "civil rights",
    "economic crisis",
    "financial crisis",
    "foreign policy",
    "diplomatic relations",
    "european union",
    "united nations",
    "security council",
)


@dataclass(frozen=True)
class ContextPattern:
    """Two concepts that must co-occur in order: `first`, then later `second`."""

    first: re.Pattern
    second: re.Pattern
    tag: str

    def matches(self, text: str) -> bool:
        # earliest `first` leaves the most room for `second`; one pass each
        m = self.first.search(text)
        return m is not None and self.second.search(text, m.end()) is not None


def _rule(first: str, second: str, tag: str) -> ContextPattern:
    return ContextPattern(first=re.compile(first), second=re.compile(second), tag=tag)


# order is priority: earlier rules win when fewer than MAX_TAGS slots remain
CONTEXT_PATTERNS: tuple[ContextPattern, ...] = (
    _rule(r"\b(president|prime minister|chancellor|premier|leader|head of state)\b", r"\b(resign|stepped down|steps down)", "leader resigned"),
    _rule(r"\b(parliament|assembly|legislature|congress|senate)\b", r"\bdissolv", "parliament dissolved"),
    _rule(r"\b(treaty|accord|agreement|pact)\b", r"\b(sign|ratif)", "treaty signed"),
    _rule(r"\b(sign|ratif)\w*\b", r"\b(treaty|accord|agreement|pact)\b", "treaty signed"),
    _rule(r"\b(military|army|armed forces|junta)\b", r"\b(seiz|took power|overthr|topple)", "military takeover"),
    _rule(r"\b(government|regime|president)\b", r"\b(overthr|topple|ousted)", "government overthrown"),
    _rule(r"\b(protest|demonstration)s?\b", r"\b(erupt|broke out|spread)", "mass protests"),
    _rule(r"\b(election|vote|ballot)s?\b", r"\b(won|wins|victory|landslide)\b", "election victory"),
    _rule(r"\b(election|vote|ballot)s?\b", r"\b(fraud|rigg|irregularit)", "disputed election"),
    _rule(r"\b(declar|proclaim)\w*\b", r"\bindependence\b", "independence declared"),
    _rule(r"\b(gain|achiev|won)\w*\b", r"\bindependence\b", "independence achieved"),
    _rule(r"\bconstitution\b", r"\b(amend|adopt|approv|rewr)", "constitutional change"),
    _rule(r"\b(law|bill|act|legislation)\b", r"\b(pass|enact|approv|adopt)", "law enacted"),
    _rule(r"\b(war|conflict|hostilities|fighting)\b", r"\b(ended|ceasefire|armistice)\b", "conflict ended"),
    _rule(r"\b(war|invasion|conflict|hostilities)\b", r"\b(began|broke out|erupted|launched)\b", "conflict began"),
    _rule(r"\b(sanction|embargo)\w*\b", r"\b(impos|announc|lift)", "sanctions"),
    _rule(r"\b(corruption|bribery|embezzlement)\b", r"\b(scandal|charge|investigat|convict)", "corruption scandal"),
    _rule(r"\b(president|prime minister|minister|opposition|leader)\b", r"\b(arrest|detain|jail|imprison)", "political arrest"),
    _rule(r"\b(president|prime minister|minister|official)\b", r"\bimpeach", "impeachment"),
    _rule(r"\b(president|prime minister|leader|king|minister)\b", r"\bassassinat", "leader assassinated"),
    _rule(r"\b(state of emergency|martial law)\b", r"\b(declar|impos|lift)", "emergency rule"),
)


POLITICAL_KEYWORDS: tuple[str, ...] = (
    "democracy",
    "constitution",
    "parliament",
    "election",
    "vote",
    "referendum",
    "president",
    "prime minister",
    "congress",
    "senate",
    "court",
    "supreme court",
    "amendment",
    "treaty",
    "law",
    "legislation",
    "reform",
    "policy",
    "regulation",
    "protest",
    "opposition",
    "coup",
    "revolution",
    "war",
    "conflict",
    "peace",
    "rights",
    "freedom",
    "independence",
    "sovereignty",
    "monarchy",
    "republic",
    "sanction",
    "diplomatic",
    "alliance",
    "trade",
    "economy",
    "crisis",
    "scandal",
    "corruption",
    "impeachment",
    "resignation",
    "assassination",
    "military",
    "minister",
    "dictator",
    "authoritarian",
    "democratic",
    "liberal",
    "conservative",
    "socialist",
    "communist",
    "capitalist",
    "nationalist",
    "populist",
    "progressive",
    "radical",
    "moderate",
    "bilateral",
    "multilateral",
)

DESCRIPTORS: tuple[str, ...] = (
    "major",
    "controversial",
    "historic",
    "landmark",
    "significant",
    "disputed",
    "contested",
    "peaceful",
    "violent",
    "bloody",
    "failed",
    "successful",
    "massive",
    "sweeping",
    "unprecedented",
    "widespread",
)

COMMON_WORDS: frozenset[str] = frozenset(
    {
        "the", "a", "an", "and", "but", "or", "in", "on", "at", "to", "for", "with", "by", "of",
        "that", "this", "is", "are", "was", "were",
        "from", "after", "before", "during", "into", "over", "under", "while", "when", "which",
        "their", "there", "these", "those", "have", "been", "will", "would", "also", "amid",
        "more", "most", "than", "then", "they", "them", "what", "where", "about", "through",
        "against", "between", "following", "other", "some", "such",
    }
)

# tokens are whitespace-split, then trimmed of edge punctuation ("capital." -> "capital")
_WORD_CHAR_RE = re.compile(r"\w")


def _strip_edge_punct(token: str) -> str:
    m = _WORD_CHAR_RE.search(token)
    if m is None:
        return ""
    end = len(token)
    while not _WORD_CHAR_RE.match(token, end - 1):
        end -= 1
    return token[m.start():end]


def _in_any(word: str, tags: list[str]) -> bool:
    return any(word in t for t in tags)


def match_phrases(text: str) -> list[str]:
    """Known phrases present in `text`, most specific (longest) first.

    Returns at most two: the longest match, plus the runner-up when neither
    phrase contains the other.
    """
    found = sorted((p for p in POLITICAL_PHRASES if p in text), key=len, reverse=True)
    if not found:
        return []
    out = [found[0]]
    if len(found) > 1:
        first, second = found[0], found[1]
        if second != first and second not in first and first not in second:
            out.append(second)
    return out


def match_context_patterns(text: str, tags: list[str]) -> list[str]:
    """Pattern tags in declaration order, filling up to MAX_TAGS together with `tags`."""
    out: list[str] = []
    for rule in CONTEXT_PATTERNS:
        if len(tags) + len(out) >= MAX_TAGS:
            break
        if rule.tag in tags or rule.tag in out:
            continue
        if rule.matches(text):
            out.append(rule.tag)
    return out


def match_keywords(text: str, tags: list[str]) -> list[str]:
    room = MAX_TAGS - len(tags)
    if room <= 0:
        return []

    out: list[str] = []
    for kw in POLITICAL_KEYWORDS:
        if kw not in text or _in_any(kw, tags + out):
            continue
        if not out:
            descriptor = next((d for d in DESCRIPTORS if d in text), None)
            out.append(f"{descriptor} {kw}" if descriptor else kw)
        else:
            out.append(kw)
        if len(out) >= min(2, room):
            break
    return out


def significant_words(text: str, tags: list[str]) -> list[str]:
    words = []
    for token in text.split():
        w = _strip_edge_punct(token)
        if len(w) <= 3 or w in COMMON_WORDS:
            continue
        if _in_any(w, tags):
            continue
        words.append(w)
    return words


def _significant_word_tag(text: str, tags: list[str]) -> Optional[str]:
    words = significant_words(text, tags)
    if len(words) >= 2:
        first, second = words[0], words[1]
        if not _in_any(first, tags) and not _in_any(second, tags):
            return f"{first} {second}"
    if words:
        return words[0]
    return None


def extract_tags(description: str | None) -> list[str]:
    if not description or len(description) < MIN_DESCRIPTION_LENGTH:
        return []

    text = description.lower()

    tags: list[str] = match_phrases(text)
    if len(tags) < MAX_TAGS:
        tags += match_context_patterns(text, tags)
    if len(tags) < MAX_TAGS:
        tags += match_keywords(text, tags)
    if len(tags) < MAX_TAGS:
        extra = _significant_word_tag(text, tags)
        if extra:
            tags.append(extra)

    if not tags:
        logger.debug("no tag heuristic matched; using default tag")
        tags = [DEFAULT_TAG]

    # stable order, limit size
    dedup = []
    seen = set()
    for t in tags:
        if t in seen:
            continue
        seen.add(t)
        dedup.append(t)
    return dedup[:MAX_TAGS]
