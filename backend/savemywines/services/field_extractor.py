"""
Best-effort extraction of wine fields from label OCR text.

The heuristics here are a guess, not a guarantee: a label whose first
readable line is a slogan will produce that slogan as the name. No
confidence score is computed. Missing data comes back as an empty
string (or None for the vintage); extraction never raises.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional


_YEAR_PATTERN = re.compile(r'\b(19|20)\d{2}\b')
_LINE_SPLIT = re.compile(r'\r?\n')

# Controlled varietal vocabulary. Order matters: when several entries
# appear in the text, the earliest entry in this list wins.
VARIETALS = (
    "cabernet sauvignon",
    "merlot",
    "pinotage",
    "shiraz",
    "syrah",
    "pinot noir",
    "chardonnay",
    "sauvignon blanc",
    "chenin blanc",
    "malbec",
    "tempranillo",
    "grenache",
    "riesling",
    "nebbiolo",
)

MIN_LINE_LENGTH = 3


@dataclass(frozen=True)
class ExtractedWineFields:
    """Fields derived from one label scan."""
    name: str = ""
    producer: str = ""
    varietal: str = ""           # always "" or a member of VARIETALS
    vintage: Optional[int] = None


def extract_vintage(text: str) -> Optional[int]:
    """First 19xx/20xx year in the text, reading order."""
    match = _YEAR_PATTERN.search(text or "")
    return int(match.group(0)) if match else None


def extract_varietal(text: str, label_descriptions: Iterable[str] = ()) -> str:
    """
    Match the varietal vocabulary against OCR text, then label tags.

    Text wins over labels. Within the text, vocabulary order decides,
    not position in the text. Labels must match an entry exactly.
    """
    lowered = (text or "").lower()
    for varietal in VARIETALS:
        if varietal in lowered:
            return varietal

    labels = set(label_descriptions or ())
    for varietal in VARIETALS:
        if varietal in labels:
            return varietal

    return ""


def _is_candidate_line(line: str) -> bool:
    """A line that could be a name or producer."""
    lowered = line.lower()
    if any(v in lowered for v in VARIETALS):
        return False
    if _YEAR_PATTERN.search(lowered):
        return False
    return len(lowered) >= MIN_LINE_LENGTH


def extract_name_and_producer(text: str) -> tuple[str, str]:
    """First candidate line is the name, the next distinct one the producer."""
    name = ""
    producer = ""

    for raw in _LINE_SPLIT.split(text or ""):
        line = raw.strip()
        if not line or not _is_candidate_line(line):
            continue
        if not name:
            name = line
        elif line != name:
            producer = line
            break

    return name, producer


def extract(full_text: str, label_descriptions: Iterable[str] = ()) -> ExtractedWineFields:
    """
    Derive name, producer, varietal and vintage from a label scan.

    Args:
        full_text: Complete OCR text block, lines in reading order
        label_descriptions: Lowercase label tags from the vision service

    Returns:
        ExtractedWineFields; unrecognised fields are empty / None
    """
    text = full_text if isinstance(full_text, str) else ""
    name, producer = extract_name_and_producer(text)
    return ExtractedWineFields(
        name=name,
        producer=producer,
        varietal=extract_varietal(text, label_descriptions),
        vintage=extract_vintage(text),
    )
