"""Remove artificial line breaks from text copied out of a PDF viewer.

PDF extraction wraps every visual line with a hard line break.  The longest
line in the paste stands in for a "full" line: a line that could not have
fitted the next word was wrapped by the renderer and is merged, while a
short line ending in terminal punctuation is a genuine paragraph end.

Blank lines are author-intended paragraph boundaries and are never merged
across, so cleaning already-cleaned output is a no-op.

Usage:
    python -m smart_paste.cleaning.pdf_text FILE [--force]
"""

import logging
import math

from pydantic import BaseModel

from smart_paste.cleaning.patterns import (
    CAPITAL_START_RE,
    CODE_LINE_RE,
    LIST_LINE_START_RE,
    MARKUP_TAG_RE,
    SENTENCE_END_RE,
)

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 50
MIN_LINE_COUNT = 3

# Lines within this fraction of the mean length count as "consistent"
CONSISTENT_LENGTH_FRACTION = 0.3
# ...and more than this share of lines must be consistent
CONSISTENT_LINE_SHARE = 0.6

# A line is "full" when it plus the next word reaches within this of the max
FULL_LINE_SLACK = 3

# Paragraph length guards, as multiples of (max line length + tolerance)
MAX_PARAGRAPH_FACTOR = 2.0
SENTENCE_SPLIT_FACTOR = 1.5


class LinePatternStats(BaseModel):
    """Line-length statistics of a paste; max_length stands in for a full line."""

    max_length: int
    avg_length: float
    count: int
    variance: float
    tolerance: int


def _non_empty_lines(text: str) -> list[str]:
    """Split on newlines, trim, and drop blank lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def analyze_line_patterns(lines: list[str]) -> LinePatternStats:
    """Compute max / mean / variance of line lengths and a small adaptive tolerance."""
    if not lines:
        return LinePatternStats(max_length=0, avg_length=0.0, count=0, variance=0.0, tolerance=2)

    lengths = [len(line) for line in lines]
    avg = sum(lengths) / len(lengths)
    variance = sum((length - avg) ** 2 for length in lengths) / len(lengths)

    # Tolerance grows with the spread of line lengths, clamped to [2, 10]
    tolerance = max(2.0, min(10.0, math.sqrt(variance) * 0.1))
    return LinePatternStats(
        max_length=max(lengths),
        avg_length=avg,
        count=len(lengths),
        variance=variance,
        tolerance=int(tolerance + 0.5),
    )


def _looks_structured(text: str, lines: list[str]) -> bool:
    """Return True for code, JSON, markup, or tab-separated data."""
    if sum(1 for line in lines if "\t" in line) > 1:
        return True
    if CODE_LINE_RE.search(text):
        return True
    stripped = text.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        return True
    return bool(MARKUP_TAG_RE.search(text))


def should_clean(text: str) -> bool:
    """Return True if *text* looks like PDF-extracted prose worth cleaning."""
    if not text or len(text) < MIN_TEXT_LENGTH:
        return False

    lines = _non_empty_lines(text)
    if len(lines) < MIN_LINE_COUNT:
        return False

    if _looks_structured(text, lines):
        logger.debug("Skipping PDF cleaning: text looks like code or structured data")
        return False

    # Most lines wrap near the same width
    lengths = [len(line) for line in lines]
    avg = sum(lengths) / len(lengths)
    consistent = sum(1 for length in lengths if abs(length - avg) < avg * CONSISTENT_LENGTH_FRACTION)
    if consistent > len(lines) * CONSISTENT_LINE_SHARE:
        return True

    # Or a sentence visibly continues onto the next line
    for line, next_line in zip(lines, lines[1:]):
        if not SENTENCE_END_RE.search(line) and next_line[0].islower():
            return True
    return False


def decide_merges(lines: list[str], block_ends: list[bool], max_length: int) -> list[bool]:
    """Return one decision per adjacent line pair: True merges, False keeps the break."""
    decisions: list[bool] = []
    for i, line in enumerate(lines[:-1]):
        if block_ends[i]:
            decisions.append(False)
            continue
        next_words = lines[i + 1].split()
        first_word = next_words[0] if next_words else ""
        combined = len(line) + 1 + len(first_word)

        # The next word would not have fitted: the renderer wrapped this line
        if combined > max_length - FULL_LINE_SLACK:
            decisions.append(True)
        # Short line with terminal punctuation: genuine paragraph end
        elif SENTENCE_END_RE.search(line):
            decisions.append(False)
        else:
            decisions.append(True)
    return decisions


def fold_lines(lines: list[str], block_ends: list[bool], decisions: list[bool]) -> tuple[list[str], list[bool]]:
    """Fold lines left to right per *decisions*, carrying each result's block-end flag."""
    if not lines:
        return [], []

    folded: list[str] = []
    folded_ends: list[bool] = []
    current = lines[0]
    for i, merge in enumerate(decisions):
        if merge:
            current += " " + lines[i + 1]
        else:
            folded.append(current)
            folded_ends.append(block_ends[i])
            current = lines[i + 1]
    folded.append(current)
    folded_ends.append(True)
    return folded, folded_ends


def group_into_paragraphs(lines: list[str], block_ends: list[bool], stats: LinePatternStats) -> list[str]:
    """Group folded lines into paragraphs, splitting conservatively on sentence boundaries."""
    full_line = stats.max_length + stats.tolerance
    paragraphs: list[str] = []
    current: list[str] = []

    for i, line in enumerate(lines):
        next_line = lines[i + 1] if i + 1 < len(lines) else None
        current.append(line)
        joined = " ".join(current)

        next_is_list_item = bool(next_line and LIST_LINE_START_RE.match(next_line))
        combined = len(joined) + (len(next_line) + 1 if next_line else 0)
        too_long = combined > full_line * MAX_PARAGRAPH_FACTOR

        if block_ends[i] or next_line is None or next_is_list_item or too_long:
            paragraphs.append(joined)
            current = []
        elif SENTENCE_END_RE.search(line) and CAPITAL_START_RE.match(next_line):
            # Only split flowing prose once the paragraph is already substantial
            if len(joined) > full_line * SENTENCE_SPLIT_FACTOR:
                paragraphs.append(joined)
                current = []

    if current:
        paragraphs.append(" ".join(current))
    return paragraphs


def _lines_with_block_ends(text: str) -> tuple[list[str], list[bool]]:
    """Return trimmed non-empty lines and, per line, whether a blank line (or the end) follows."""
    lines: list[str] = []
    block_ends: list[bool] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if line:
            lines.append(line)
            block_ends.append(False)
        elif block_ends:
            block_ends[-1] = True
    if block_ends:
        block_ends[-1] = True
    return lines, block_ends


def clean_pdf_text(text: str, force: bool = False) -> str:
    """Remove artificial line breaks and regroup paragraphs, separated by one blank line.

    Text that does not look PDF-like is returned unchanged unless *force* is set.
    """
    if not (force or should_clean(text)):
        return text

    lines, block_ends = _lines_with_block_ends(text)
    if not lines:
        return text

    stats = analyze_line_patterns(lines)
    decisions = decide_merges(lines, block_ends, stats.max_length)
    folded, folded_ends = fold_lines(lines, block_ends, decisions)
    paragraphs = group_into_paragraphs(folded, folded_ends, stats)

    logger.debug(
        "PDF cleaning: %d lines -> %d merged lines -> %d paragraphs (max line %d)",
        len(lines),
        len(folded),
        len(paragraphs),
        stats.max_length,
    )
    return "\n\n".join(paragraphs)


if __name__ == "__main__":
    import argparse
    from pathlib import Path

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    parser = argparse.ArgumentParser(description="Remove artificial PDF line breaks from a text file.")
    parser.add_argument("path", type=Path)
    parser.add_argument("--force", action="store_true", help="clean even if the text does not look PDF-like")
    args = parser.parse_args()

    print(clean_pdf_text(args.path.read_text(encoding="utf-8"), force=args.force))
