"""Text helpers: keyword extraction and file type sniffing."""

import re
from collections import Counter

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "from", "as", "is", "was", "are", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
        "may", "might", "must", "can", "this", "that", "these", "those", "i", "you",
        "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    }
)  # fmt: skip

_NON_WORD = re.compile(r"[^\w\s]")


def extract_keywords(text: str | None, min_length: int = 3, max_keywords: int = 50) -> list[str]:
    """Extract the most frequent meaningful words from text.

    Args:
        text: Source text.
        min_length: Minimum word length to keep.
        max_keywords: Maximum number of keywords returned.

    Returns:
        Lowercase keywords ordered by frequency, ties in first-seen order.
    """
    if not text:
        return []

    words = [
        word
        for word in _NON_WORD.sub(" ", text.lower()).split()
        if len(word) >= min_length and word not in STOP_WORDS and not word.isdigit()
    ]
    return [word for word, _ in Counter(words).most_common(max_keywords)]


def detect_file_type(buffer: bytes) -> str:
    """Detect a document type from its leading magic bytes.

    Returns:
        "pdf", "docx", "doc", or "unknown".
    """
    if buffer[:4] == b"%PDF":
        return "pdf"
    if buffer[:2] == b"PK":
        return "docx"
    if buffer[:2] == b"\xd0\xcf":
        return "doc"
    return "unknown"
