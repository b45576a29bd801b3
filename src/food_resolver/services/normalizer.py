"""Query normalization with alias substitution and typo correction."""

import re
import unicodedata
from functools import lru_cache

from rapidfuzz import fuzz, process

from food_resolver.services.vocabulary import known_words

# Ordered (source phrase, replacement). The first rule matching at a position wins.
ALIAS_RULES: tuple[tuple[str, str], ...] = (
    ("hotdogs", "hot dogs"),
    ("hotdog", "hot dog"),
    ("hamburgers", "burgers"),
    ("hamburger", "burger"),
    ("mac n cheese", "mac and cheese"),
    ("mac cheese", "mac and cheese"),
    ("califirnia", "california"),
    ("peperoni", "pepperoni"),
    ("hawai", "hawaii"),
    ("barbecue", "bbq"),
    ("barbeque", "bbq"),
    ("yoghurt", "yogurt"),
    ("doughnut", "donut"),
    ("doughnuts", "donuts"),
    ("spagetti", "spaghetti"),
    ("expresso", "espresso"),
    ("porridge", "oatmeal"),
    ("sammich", "sandwich"),
)

FUZZY_MIN_LENGTH = 5
FUZZY_SCORE_CUTOFF = 85.0

_APOSTROPHES = re.compile(r"['’]")
_NON_TEXT = re.compile(r"[^a-z0-9./\s]")
_LOOSE_DOT = re.compile(r"(?<!\d)\.|\.(?!\d)")
_LOOSE_SLASH = re.compile(r"(?<!\d)/|/(?!\d)")
_WHITESPACE = re.compile(r"\s+")


def _compile_rules(
    rules: tuple[tuple[str, str], ...],
) -> tuple[tuple[tuple[str, ...], tuple[str, ...]], ...]:
    return tuple((tuple(src.split()), tuple(dst.split())) for src, dst in rules)


_RULES = _compile_rules(ALIAS_RULES)
_ALIAS_SOURCE_TOKENS = frozenset(token for source, _ in _RULES for token in source)
_VOCABULARY = known_words() | frozenset(
    token for _, replacement in _RULES for token in replacement
)
_VOCABULARY_LIST = sorted(_VOCABULARY)
_MAX_ALIAS_PASSES = len(_RULES) + 1


def normalize(raw: str | None) -> str:
    """Return the canonical form of a free-text food query.

    Lowercases, strips punctuation, collapses whitespace, corrects near-miss
    spellings against the known vocabulary and applies the alias table until
    nothing changes. The function is total and idempotent.
    """
    if not raw:
        return ""
    tokens = _clean(raw).split()
    tokens = [_correct_token(token) for token in tokens]
    return " ".join(_apply_aliases(tokens))


def _clean(raw: str) -> str:
    text = unicodedata.normalize("NFKD", raw)
    text = "".join(char for char in text if not unicodedata.combining(char))
    text = _APOSTROPHES.sub("", text.lower())
    text = _NON_TEXT.sub(" ", text)
    text = _LOOSE_DOT.sub(" ", text)
    text = _LOOSE_SLASH.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


@lru_cache(maxsize=4096)
def _correct_token(token: str) -> str:
    """Snap a near-miss spelling to the single closest vocabulary word."""
    if (
        len(token) < FUZZY_MIN_LENGTH
        or token in _VOCABULARY
        or token in _ALIAS_SOURCE_TOKENS
        or any(char.isdigit() for char in token)
    ):
        return token
    matches = process.extract(
        token,
        _VOCABULARY_LIST,
        scorer=fuzz.ratio,
        limit=2,
        score_cutoff=FUZZY_SCORE_CUTOFF,
    )
    if not matches:
        return token
    if len(matches) > 1 and matches[1][1] >= matches[0][1]:
        return token
    return matches[0][0]


def _alias_pass(tokens: list[str]) -> list[str]:
    result: list[str] = []
    index = 0
    while index < len(tokens):
        for source, replacement in _RULES:
            if tuple(tokens[index : index + len(source)]) == source:
                result.extend(replacement)
                index += len(source)
                break
        else:
            result.append(tokens[index])
            index += 1
    return result


def _apply_aliases(tokens: list[str]) -> list[str]:
    for _ in range(_MAX_ALIAS_PASSES):
        updated = _alias_pass(tokens)
        if updated == tokens:
            return updated
        tokens = updated
    raise ValueError("Alias rules do not converge")


def _validate_rules() -> None:
    """Reject alias tables that cycle or rewrite vocabulary words."""
    single_sources = {source[0] for source, _ in _RULES if len(source) == 1}
    shadowed = single_sources & _ALIAS_SOURCE_TOKENS & known_words()
    if shadowed:
        raise ValueError(f"Alias sources shadow vocabulary: {sorted(shadowed)}")
    for source, _ in _RULES:
        _apply_aliases(list(source))


_validate_rules()
