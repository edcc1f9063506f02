"""
Text matching helpers shared by the scorers.

Two kinds of matching are used:
- Plain substring matching (case-insensitive) for focus areas and topics,
  where partial matches are wanted ("health" matches "healthcare").
- Word-boundary matching for entity names, where short names must not
  collide with longer words ("ICE" must not match "justice").
"""


def normalize_text(text: str) -> str:
    """
    Lowercase, drop punctuation and collapse whitespace.

    Example:
        >>> normalize_text("  Sen. Warren's   bill ")
        'sen warrens bill'
    """
    if not text:
        return ""
    kept = "".join(ch for ch in text.lower() if ch.isalnum() or ch.isspace() or ch == "_")
    return " ".join(kept.split())


def text_contains(text: str, term: str) -> bool:
    """Case-insensitive substring check. Empty terms never match."""
    if not term or not term.strip():
        return False
    return term.strip().lower() in (text or "").lower()


def contains_phrase(text: str, phrase: str) -> bool:
    """
    Check whether a phrase occurs in text on word boundaries.

    Both sides are normalized first, so punctuation and case are ignored.
    """
    norm_text = normalize_text(text)
    norm_phrase = normalize_text(phrase)
    if not norm_text or not norm_phrase:
        return False
    return f" {norm_phrase} " in f" {norm_text} "


def entity_matches(a: str, b: str) -> bool:
    """
    Bidirectional entity match on word boundaries.

    True when the normalized names are equal or either one contains the
    other as a whole-word phrase ("Warren" ~ "Elizabeth Warren").
    """
    return contains_phrase(a, b) or contains_phrase(b, a)


def label_key(label: str) -> str:
    """Comparison key for a label: trimmed and lowercased."""
    return (label or "").strip().lower()


def same_label(a: str, b: str) -> bool:
    """Case-insensitive exact comparison of two labels. Blank labels never match."""
    key = label_key(a)
    return bool(key) and key == label_key(b)
