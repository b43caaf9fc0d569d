# petrosys/services/extraction/patterns.py
"""
Keyword-anchored matchers that pull numbers, ranges and categories out of
free-text narratives.

Every function here is pure: it takes the text as an argument, keeps no state
and never raises for missing data. Absence is signalled with the documented
sentinel default, and callers that need to tell "not found" apart from a real
zero use the ``search_*``/``find_*`` variants that return ``None``.

When several candidates match, the first one wins: keywords are tried in the
order given, and for a keyword the earliest occurrence in the text is used.
"""
import re
from typing import List, NamedTuple, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

NUMBER = r"(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"

# Longest tokens first so "%Ro" wins over "%" and "km²" over "km".
UNIT_TOKENS = (
    r"%\s*Ro", r"%", r"percent", r"per\s+cent",
    r"°\s*C\s*/\s*km", r"°\s*C", r"deg(?:rees)?\s*C",
    r"mW\s*/\s*m(?:²|2)", r"MPa",
    r"MMBOE", r"MMBO", r"MMbbl", r"MMstb", r"million\s+barrels",
    r"Bcf", r"Tcf", r"billion\s+cubic\s+feet",
    r"km(?:²|2)", r"sq\s*km", r"km", r"mD", r"md", r"ppm",
    r"Mya", r"Myr", r"Ma", r"m", r"ft", r"Mt",
)
UNIT = r"(?:" + "|".join(UNIT_TOKENS) + r")(?![A-Za-z0-9])"

_FORWARD_GAP = r"[^\d\n.;]{0,30}?"
_RANGE_LEAD = r"[^\d\n]{0,40}?"
_RANGE_SEP = r"[^\d\n]{1,25}?"
_SENTENCE_END = re.compile(r"(?<!\d)[.!?](?!\d)|\n")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+|\n+")

_UNCERTAINTY = re.compile(r"(?:±|\+/-|\+/−|\+-|plus\s+or\s+minus)\s*" + NUMBER, re.IGNORECASE)
_CONFIDENCE = re.compile(
    r"confidence(?:\s+level)?(?:\s+(?:of|is|at))?[\s:=]*" + NUMBER + r"\s*%?"
    r"|" + NUMBER + r"\s*%\s*confidence",
    re.IGNORECASE,
)
_PROBABILITY = re.compile(
    r"probability(?:\s+of\s+success)?(?:\s+(?:of|is|at))?[\s:=]*" + NUMBER + r"\s*(%)?"
    r"|" + NUMBER + r"\s*(%)\s*probability",
    re.IGNORECASE,
)

DEFAULT_VALUE = 0.0
DEFAULT_CONFIDENCE = 50.0
DEFAULT_PROBABILITY = 0.0
DEFAULT_UNCERTAINTY = 0.0


class ValueMatch(NamedTuple):
    value: float
    unit: Optional[str]
    start: int


class RangeMatch(NamedTuple):
    values: Tuple[float, float, float]
    unit: Optional[str]


def _to_float(raw: str) -> float:
    return float(raw.replace(",", ""))


def keyword_pattern(keyword: str) -> str:
    """Regex for a keyword phrase, tolerant to hyphens and repeated spaces."""
    words = [re.escape(w) for w in re.split(r"[\s-]+", keyword.strip()) if w]
    return r"\b" + r"[\s-]+".join(words) + r"\b"


def _compile(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern, re.IGNORECASE)


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Canonical lower-case unit token: "km²" -> "km2", "° C" -> "°c"."""
    if not unit:
        return None
    return re.sub(r"\s+", "", unit).lower().replace("²", "2")


def find_value(
    text: str,
    keywords: Sequence[str],
    units: Optional[Sequence[Optional[str]]] = None,
) -> Optional[ValueMatch]:
    """
    Find the number attached to the first keyword that has one.

    Two shapes are recognised, in the same sentence:
        "<keyword> ... <number> <unit?>"   e.g. "porosity of 12%"
        "<number> <unit?> <keyword>"       e.g. "4,500 m basement depth"

    Args:
        text: Narrative text
        keywords: Keyword anchors in priority order
        units: Accepted normalized units; include None to accept a bare number.
            When omitted any unit is accepted.

    Returns:
        The matched value with its normalized unit and position, or None
    """
    if not text:
        return None
    for keyword in keywords:
        kw = keyword_pattern(keyword)
        forward = _compile(kw + _FORWARD_GAP + NUMBER + r"\s*(" + UNIT + r")?")
        reverse = _compile(r"(?<![\d.,])" + NUMBER + r"\s*(" + UNIT + r")?\s*(?:of\s+)?" + kw)
        candidates = sorted(
            list(forward.finditer(text)) + list(reverse.finditer(text)),
            key=lambda m: m.start(),
        )
        for match in candidates:
            unit = normalize_unit(match.group(2))
            if units is not None and unit not in units:
                continue
            return ValueMatch(value=_to_float(match.group(1)), unit=unit, start=match.start())
    return None


def search_numerical_value(
    text: str,
    keywords: Sequence[str],
    units: Optional[Sequence[Optional[str]]] = None,
) -> Optional[float]:
    match = find_value(text, keywords, units)
    return match.value if match else None


def extract_numerical_value(text: str, keywords: Sequence[str], default: float = DEFAULT_VALUE) -> float:
    """
    Best-effort numeric extraction. Returns ``default`` (0) when nothing matches;
    callers must treat that as "unextracted" wherever zero is not a legal value.
    """
    value = search_numerical_value(text, keywords)
    return default if value is None else value


def find_range(text: str, keyword: str) -> Optional[RangeMatch]:
    """
    Three sequential numbers following the keyword, in textual order, with the
    unit written after the third one (normalized; None when absent).
    """
    if not text:
        return None
    pattern = _compile(
        keyword_pattern(keyword) + _RANGE_LEAD + NUMBER + _RANGE_SEP + NUMBER + _RANGE_SEP + NUMBER
        + r"(?:\s*(" + UNIT + r"))?"
    )
    match = pattern.search(text)
    if not match:
        return None
    values = (_to_float(match.group(1)), _to_float(match.group(2)), _to_float(match.group(3)))
    return RangeMatch(values=values, unit=normalize_unit(match.group(4)))


def search_range(text: str, keyword: str) -> Optional[Tuple[float, float, float]]:
    match = find_range(text, keyword)
    return match.values if match else None


def extract_range(text: str, keyword: str) -> Tuple[float, float, float]:
    """
    Returns (low, best, high) exactly as they appear after the keyword, or
    (0, 0, 0). The triple is never reordered; monotonicity is the caller's check.
    """
    return search_range(text, keyword) or (0.0, 0.0, 0.0)


def sentence_from(text: str, start: int) -> str:
    """Text from position ``start`` to the end of that sentence."""
    end = _SENTENCE_END.search(text or "", start)
    return (text or "")[start:end.start() if end else len(text or "")]


def anchored_segment(text: str, anchor: str) -> str:
    """Text from the first occurrence of ``anchor`` to the end of its sentence."""
    if not text:
        return ""
    match = _compile(keyword_pattern(anchor)).search(text)
    if not match:
        return ""
    end = _SENTENCE_END.search(text, match.end())
    return text[match.start():end.start() if end else len(text)]


def _scope(text: str, anchor: Optional[str]) -> str:
    return anchored_segment(text, anchor) if anchor else (text or "")


def search_uncertainty(text: str, anchor: Optional[str] = None) -> Optional[float]:
    match = _UNCERTAINTY.search(_scope(text, anchor))
    return _to_float(match.group(1)) if match else None


def extract_uncertainty(text: str, anchor: Optional[str] = None) -> float:
    """``±N`` / ``+/-N``; 0 when absent."""
    value = search_uncertainty(text, anchor)
    return DEFAULT_UNCERTAINTY if value is None else value


def search_confidence(text: str, anchor: Optional[str] = None) -> Optional[float]:
    match = _CONFIDENCE.search(_scope(text, anchor))
    if not match:
        return None
    return _to_float(match.group(1) or match.group(2))


def extract_confidence(text: str, anchor: Optional[str] = None) -> float:
    """``confidence: N%``; 50 (a neutral prior) when absent."""
    value = search_confidence(text, anchor)
    return DEFAULT_CONFIDENCE if value is None else value


def search_probability(text: str, anchor: Optional[str] = None) -> Optional[float]:
    match = _PROBABILITY.search(_scope(text, anchor))
    if not match:
        return None
    if match.group(1) is not None:
        return as_percent(_to_float(match.group(1)), match.group(2))
    return _to_float(match.group(3))


def extract_probability(text: str, anchor: Optional[str] = None) -> float:
    """``probability: N%``; 0 when absent, since no claim means no presence asserted."""
    value = search_probability(text, anchor)
    return DEFAULT_PROBABILITY if value is None else value


def as_percent(value: float, unit: Optional[str]) -> float:
    """Read a bare value of at most 1 as a fraction, e.g. "probability 0.8"."""
    if unit is None and value <= 1.0:
        return value * 100.0
    return value


def contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(_compile(keyword_pattern(k)).search(text or "") for k in keywords)


def extract_choice(text: str, choices: Sequence[Tuple[T, Sequence[str]]], default: T) -> T:
    """First choice, in the order given, whose keywords appear in the text."""
    for value, keywords in choices:
        if contains_any(text, keywords):
            return value
    return default


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text or "") if s and s.strip()]


def extract_sentences(text: str, keywords: Sequence[str], limit: int = 5) -> List[str]:
    """Sentences mentioning any keyword, deduplicated, in textual order."""
    seen = []
    for sentence in split_sentences(text):
        if sentence not in seen and contains_any(sentence, keywords):
            seen.append(sentence)
        if len(seen) >= limit:
            break
    return seen


def extract_orientation(text: str) -> Optional[str]:
    """Compass trend such as "NE-SW" or "N45E"."""
    match = re.search(r"\b([NSEW]{1,3}\s*-\s*[NSEW]{1,3}|[NS]\d{1,3}[EW])\b", text or "")
    return match.group(1).replace(" ", "") if match else None


def extract_terms(text: str, terms: Sequence[str]) -> List[str]:
    """Distinct terms present in the text, lower-cased, in order of first appearance."""
    found = []
    for match in _compile("|".join(keyword_pattern(t) for t in terms)).finditer(text or ""):
        term = re.sub(r"[\s-]+", " ", match.group(0).lower())
        if term not in found:
            found.append(term)
    return found


_CONDITIONAL = (
    re.compile(r"P\(\s*([A-Za-z ]+?)\s*\|\s*([A-Za-z ]+?)\s*\)\s*[=:]?\s*" + NUMBER + r"\s*(%)?"),
    re.compile(
        r"probability\s+of\s+([A-Za-z]+)\s+given\s+([A-Za-z]+)[^\d\n.;]{0,20}?" + NUMBER + r"\s*(%)?",
        re.IGNORECASE,
    ),
)


def extract_conditional_probabilities(text: str) -> List[Tuple[str, str, float]]:
    """(event, given, probability %) for "P(a | b) = x" and "probability of a given b is x" forms."""
    found = []
    for pattern in _CONDITIONAL:
        for match in pattern.finditer(text or ""):
            value = as_percent(_to_float(match.group(3)), match.group(4))
            entry = (match.group(1).strip().lower(), match.group(2).strip().lower(), value)
            found.append((match.start(), entry))
    return [entry for _, entry in sorted(found, key=lambda f: f[0])]


def mask_conditional_probabilities(text: str) -> str:
    """Blank out conditional expressions so their event names cannot anchor other fields."""
    masked = text or ""
    for pattern in _CONDITIONAL:
        masked = pattern.sub(lambda m: " " * len(m.group(0)), masked)
    return masked


_BASIN_NAME = re.compile(r"\b((?:[A-Z][A-Za-z'-]+\s+){1,3})Basin\b")
_NAME_STOPWORDS = {
    "the", "a", "an", "in", "like", "both", "similar", "analog", "analogue", "target", "this", "that",
    "compared", "versus", "vs", "with", "and", "or", "of", "to", "for", "from", "than", "candidate",
}


def _basin_key(name: str) -> str:
    return re.sub(r"\s+basin$", "", name.strip().lower())


def find_basin_names(text: str, known: Sequence[str] = ()) -> List[Tuple[int, str]]:
    """
    Basins named in the text as (position of first mention, name), in textual order.

    Capitalised "<Name> Basin" phrases are recognised, as are any ``known``
    names; leading words such as "The" are dropped.
    """
    found = {}
    for match in _BASIN_NAME.finditer(text or ""):
        words = match.group(1).split()
        while words and words[0].lower() in _NAME_STOPWORDS:
            words.pop(0)
        if not words:
            continue
        name = " ".join(words) + " Basin"
        offset = match.group(0).find(words[0])
        found.setdefault(_basin_key(name), (match.start() + offset, name))
    for name in known:
        key = _basin_key(name)
        match = _compile(keyword_pattern(name)).search(text or "")
        if match and (key not in found or match.start() < found[key][0]):
            found[key] = (match.start(), name)
    return sorted(found.values())


def same_basin(a: str, b: str) -> bool:
    return _basin_key(a) == _basin_key(b)


_SCENARIO_LEAD = re.compile(r"\bscenario\s+([A-Za-z0-9][\w'-]*(?:\s+[A-Za-z][\w'-]*){0,3}?)\s*[:(\-–]", re.IGNORECASE)
_SCENARIO_TAIL = re.compile(r"\b([A-Za-z][\w'-]*(?:\s+[A-Za-z][\w'-]*){0,2}?)\s+scenario\b", re.IGNORECASE)
_PERCENT_VALUE = re.compile(NUMBER + r"\s*%")


def extract_scenarios(text: str) -> List[Tuple[str, float, str]]:
    """
    (name, probability %, sentence) for each sentence naming a scenario,
    either "Scenario <name>: ..." or "<name> scenario ...". Sentences without
    a probability are skipped.
    """
    found = []
    for sentence in extract_sentences(text, ("scenario",), limit=20):
        match = _SCENARIO_LEAD.search(sentence) or _SCENARIO_TAIL.search(sentence)
        if not match:
            continue
        name = re.sub(r"\s+", " ", match.group(1)).strip().lower()
        rest = sentence[match.end():]
        probability = search_probability(rest)
        if probability is None:
            value = _PERCENT_VALUE.search(rest) or _PERCENT_VALUE.search(sentence)
            if not value:
                continue
            probability = _to_float(value.group(1))
        if name not in [f[0] for f in found]:
            found.append((name, probability, sentence))
    return found


SIGNED_NUMBER = r"(-?(?:" + NUMBER[1:-1] + r"))"

_COORDINATES = (
    re.compile(r"\bx\s*[=:]\s*" + SIGNED_NUMBER + r"[\s,;]+y\s*[=:]\s*" + SIGNED_NUMBER, re.IGNORECASE),
    re.compile(r"\(\s*" + SIGNED_NUMBER + r"\s*,\s*" + SIGNED_NUMBER + r"\s*\)"),
)


def extract_coordinates(text: str) -> Optional[Tuple[float, float]]:
    """First "x = a, y = b" or "(a, b)" pair in the text."""
    for pattern in _COORDINATES:
        match = pattern.search(text or "")
        if match:
            return _to_float(match.group(1)), _to_float(match.group(2))
    return None
