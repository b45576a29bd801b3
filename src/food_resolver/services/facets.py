"""Facet extraction from normalized food queries."""

import re

from food_resolver.domain.facets import Facets, UnitCount
from food_resolver.services.normalizer import normalize
from food_resolver.services.vocabulary import (
    CORE_NOUNS,
    CUISINES,
    NUMBER_WORDS,
    PREP_METHODS,
    UNIT_NOUNS,
    singular_forms,
)

_MULTIWORD_CORE = sorted(
    (phrase for phrase in CORE_NOUNS if " " in phrase),
    key=lambda phrase: len(phrase.split()),
    reverse=True,
)
_NUMBER_WORD_PATTERN = "|".join(sorted(NUMBER_WORDS, key=len, reverse=True))
_UNIT_PATTERN = "|".join(sorted(UNIT_NOUNS, key=len, reverse=True))
_LEADING_QUANTITY = re.compile(
    r"^(?:(?P<number>\d+/\d+|\d+(?:\.\d+)?)\s*"
    rf"|(?P<word>{_NUMBER_WORD_PATTERN})\s+)"
    rf"(?P<unit>{_UNIT_PATTERN})\b(?:\s+of\b)?"
)


def parse_query(query: str | None) -> Facets:
    """Extract facets from a food query.

    The query is always normalized first, so raw and pre-normalized input give
    the same facets.
    """
    text = normalize(query)
    if not text:
        return Facets()

    tokens = text.split()
    consumed = [False] * len(tokens)
    units, quantity_width = _parse_units(text)
    consumed[:quantity_width] = [True] * quantity_width
    core: list[tuple[int, str]] = []

    for phrase in _MULTIWORD_CORE:
        phrase_tokens = phrase.split()
        width = len(phrase_tokens)
        for index in range(len(tokens) - width + 1):
            if any(consumed[index : index + width]):
                continue
            window = tokens[index : index + width]
            if window[:-1] == phrase_tokens[:-1] and phrase_tokens[-1] in singular_forms(
                window[-1]
            ):
                consumed[index : index + width] = [True] * width
                core.append((index, CORE_NOUNS[phrase]))

    prep: list[str] = []
    cuisine: list[str] = []
    for index, token in enumerate(tokens):
        if consumed[index]:
            continue
        if token in PREP_METHODS:
            _append_unique(prep, PREP_METHODS[token])
        elif token in CUISINES:
            _append_unique(cuisine, CUISINES[token])
        else:
            noun = _match_core(token)
            if noun is not None:
                core.append((index, noun))

    ordered_core: list[str] = []
    for _, noun in sorted(core):
        _append_unique(ordered_core, noun)

    return Facets(
        core=tuple(ordered_core),
        prep=tuple(prep),
        cuisine=tuple(cuisine),
        units=units,
    )


def _match_core(token: str) -> str | None:
    for form in singular_forms(token):
        if form in CORE_NOUNS:
            return CORE_NOUNS[form]
    return None


def _parse_units(text: str) -> tuple[UnitCount | None, int]:
    """Return the leading quantity and how many tokens it spans."""
    match = _LEADING_QUANTITY.match(text)
    if match is None:
        return None, 0
    if match.group("word") is not None:
        count: float | None = float(NUMBER_WORDS[match.group("word")])
    else:
        count = _parse_number(match.group("number"))
    if count is None or count <= 0:
        return None, 0
    unit = UNIT_NOUNS[match.group("unit")]
    return UnitCount(count=count, unit=unit), len(match.group(0).split())


def _parse_number(raw: str) -> float | None:
    if "/" in raw:
        numerator, denominator = raw.split("/", 1)
        if int(denominator) == 0:
            return None
        return int(numerator) / int(denominator)
    return float(raw)


def _append_unique(values: list[str], value: str) -> None:
    if value not in values:
        values.append(value)
