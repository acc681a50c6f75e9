"""Citation marker extraction for streamed assistant text.

The chat backend cites documents inline using markers of the form
``【4:0†report.pdf】``. The text after the dagger names a PDF stored in the
blob store. Extraction is re-run on the growing buffer after every streamed
chunk, so both functions must be cheap on text without markers and must
ignore markers that are still open at the tail.
"""

import re

CITATION_OPEN = "【"
CITATION_CLOSE = "】"
CITATION_SEPARATOR = "†"

_CITATION_PATTERN = re.compile(
    rf"{CITATION_OPEN}\d+:\d+{CITATION_SEPARATOR}([^{CITATION_OPEN}{CITATION_CLOSE}]+){CITATION_CLOSE}"
)


def extract_last_citation(text: str) -> str | None:
    """Return the name in the last closed citation marker.

    Args:
        text: Accumulated assistant text.

    Returns:
        The cited name, or None when the last closed bracket pair is not a
        well-formed marker or there is no closing bracket at all.
    """
    if CITATION_CLOSE not in text:
        return None

    close_index = text.rfind(CITATION_CLOSE)
    open_index = text.rfind(CITATION_OPEN, 0, close_index)
    if open_index == -1:
        return None

    match = _CITATION_PATTERN.fullmatch(text, open_index, close_index + 1)
    return match.group(1) if match else None


def extract_citations(text: str) -> list[str]:
    """Return every cited name in order of appearance.

    Duplicates are kept; callers dedupe against what they already fetched.

    Args:
        text: Accumulated assistant text.

    Returns:
        Cited names, left to right.
    """
    if CITATION_CLOSE not in text:
        return []
    return _CITATION_PATTERN.findall(text)
