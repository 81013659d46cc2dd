"""
Brand term normalization.

Single source of truth for lookup keys: cache, ledger, registry URL
generation and the internal repository all key on normalize_term().
"""

import re


_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_term(term: str) -> str:
    """
    Canonicalize a free-text brand name into a lookup key.

    Lowercase, trim, then drop every character outside [a-z0-9].
    Lossy on purpose: accented letters and separators disappear.

    Examples:
        "Coca-Cola"   -> "cocacola"
        "COCA COLA"   -> "cocacola"
        " Node.js "   -> "nodejs"
        "Citroën"     -> "citron"
    """
    if not term:
        return ""

    return _NON_ALNUM.sub("", term.lower().strip())
