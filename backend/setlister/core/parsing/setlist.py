"""Setlist text parsing: splits pasted text into sets of song candidates.

Pipeline:
1. Split into non-blank, stripped lines
2. Classify each line as a set separator or a song line
3. Separators close the current set and open a new named one
4. Song lines become SongCandidate objects (see line.py)
5. Flush the trailing set, guarantee at least one set
6. Attach a complexity advisory for long or poorly parsed input
"""

from __future__ import annotations

import re

import structlog

from setlister.core.metrics import setlist_parse_total

from .line import LINE_SEPARATORS, parse_song_line
from .models import ParsedSetlist, SetlistSet

logger = structlog.get_logger("setlister.parsing")

HIGH_COMPLEXITY_LINE_COUNT = 50
MEDIUM_COMPLEXITY_MIN_LINES = 10
MIN_PARSE_SUCCESS_RATE = 0.7

HIGH_COMPLEXITY_MESSAGE = (
    "This list is long. Consider pasting one set at a time, "
    "with one song per line as 'Title - Artist'."
)
MEDIUM_COMPLEXITY_MESSAGE = (
    "Some lines could not be read as songs. "
    "Try one song per line as 'Title - Artist' or 'Title, Artist'."
)

ORDINAL_WORDS = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
    "ninth": 9,
    "tenth": 10,
}

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_WORD_NUMBERS = "|".join([*ORDINAL_WORDS, *NUMBER_WORDS])

DIVIDER_LINE = re.compile(r"^[-=_#]{3,}$")
_NUMBERED_SET = re.compile(r"^(\d+)\s*(?:st|nd|rd|th)?\s+set\b", re.IGNORECASE)
_WORD_SET = re.compile(rf"^({_WORD_NUMBERS})\s+set\b", re.IGNORECASE)
_CONTAINS_SET = re.compile(r"\bset\b", re.IGNORECASE)
_NUMBERED_LINE = re.compile(r"^\d+\.\s")

_SET_DIGITS = re.compile(r"^set\s*#?\s*(\d+)", re.IGNORECASE)
_SET_NUMBER_WORD = re.compile(rf"^set\s+({'|'.join(NUMBER_WORDS)})\b", re.IGNORECASE)
_ORDINAL_DIGITS = re.compile(r"^(\d+)\s*(?:st|nd|rd|th)\b", re.IGNORECASE)


def _looks_like_song_line(line: str) -> bool:
    if "\t" in line or _NUMBERED_LINE.match(line):
        return True
    return any(separator in line for separator in LINE_SEPARATORS)


def is_set_separator(line: str) -> bool:
    """Check whether a line starts a new set.

    Divider runs ("----", "====", "___", "###") and headers that start with
    "set" and a number ("Set 2", "set three") always count. Any other line
    with the word "set", including "2nd set" and "second set", counts only if
    it doesn't look like a song line ("Title - Artist", "1. Title", a table
    row). So "Set Me Free - The Kinks" and "1 Set Me Free - The Kinks" stay
    songs.
    """
    text = line.strip()
    if not text:
        return False
    if DIVIDER_LINE.match(text):
        return True
    if _SET_DIGITS.match(text) or _SET_NUMBER_WORD.match(text):
        return True
    return bool(_CONTAINS_SET.search(text)) and not _looks_like_song_line(text)


def extract_set_name(line: str, fallback_number: int) -> str:
    """Name a set from its separator line.

    Args:
        line: Separator line
        fallback_number: Number to use when the line carries none

    Returns:
        "Set <n>"
    """
    text = line.strip()

    match = _SET_DIGITS.match(text) or _ORDINAL_DIGITS.match(text) or _NUMBERED_SET.match(text)
    if match:
        return f"Set {int(match.group(1))}"

    match = _SET_NUMBER_WORD.match(text)
    if match:
        return f"Set {NUMBER_WORDS[match.group(1).lower()]}"

    match = _WORD_SET.match(text)
    if match:
        word = match.group(1).lower()
        return f"Set {ORDINAL_WORDS.get(word) or NUMBER_WORDS[word]}"

    return f"Set {fallback_number}"


def assess_complexity(total_lines: int, parsed_lines: int) -> tuple[str, str | None]:
    """Advisory complexity for a parse run.

    Returns:
        Tuple of (complexity, message). Message is None for "low".
    """
    if total_lines > HIGH_COMPLEXITY_LINE_COUNT:
        return "high", HIGH_COMPLEXITY_MESSAGE

    if total_lines > MEDIUM_COMPLEXITY_MIN_LINES:
        success_rate = parsed_lines / total_lines
        if success_rate < MIN_PARSE_SUCCESS_RATE:
            return "medium", MEDIUM_COMPLEXITY_MESSAGE

    return "low", None


def parse_song_list(text: str | None) -> ParsedSetlist:
    """Parse pasted setlist text into sets of song candidates.

    Never raises: any input, including an empty string, yields at least one set.

    Args:
        text: Raw text, one song or set separator per line

    Returns:
        ParsedSetlist with sets, complexity advisory and line counts
    """
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]

    sets: list[SetlistSet] = []
    current = SetlistSet(name="Set 1")
    parsed_lines = 0

    for index, line in enumerate(lines, start=1):
        if is_set_separator(line):
            parsed_lines += 1
            if current.songs:
                sets.append(current)
            current = SetlistSet(name=extract_set_name(line, len(sets) + 1))
            continue

        candidate = parse_song_line(line, index)
        if candidate is None:
            logger.debug("Dropping unparseable line", line_number=index, line=line[:80])
            continue

        parsed_lines += 1
        current.songs.append(candidate)

    if current.songs:
        sets.append(current)

    if not sets:
        sets.append(SetlistSet(name="Set 1"))

    complexity, message = assess_complexity(len(lines), parsed_lines)
    setlist_parse_total.labels(complexity=complexity).inc()

    logger.info(
        "Parsed setlist",
        total_lines=len(lines),
        parsed_lines=parsed_lines,
        sets=len(sets),
        songs=sum(len(s.songs) for s in sets),
        complexity=complexity,
    )

    return ParsedSetlist(
        sets=sets,
        complexity=complexity,  # type: ignore[arg-type]
        message=message,
        total_lines=len(lines),
        parsed_lines=parsed_lines,
    )
