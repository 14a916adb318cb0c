"""Locale-aware string ordering for display tie-breaks."""

import unicodedata


def collation_key(text: str | None) -> tuple[str, str]:
    """
    Sort key approximating German dictionary order.

    Accents and umlauts compare equal to their base letter first
    ("Ärger" sorts with "Arger"), case is ignored, and the accented form
    only decides between otherwise equal strings.
    """
    if not text:
        return ("", "")
    folded = text.strip().casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base, folded)
