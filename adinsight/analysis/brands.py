"""
Heuristic brand name extraction from free text.
"""

import re
from typing import List

# Capitalized word: "Acme", "Nord" (not "ACME", not "iPhone")
CAPITALIZED_WORD = re.compile(r'^[A-Z][a-z]{2,}$')

# Alphanumeric run followed by a trademark/registered symbol: "Acme®", "Widget ™"
TRADEMARKED = re.compile(r'([A-Za-z0-9]+)(?:\s*[®™])')

_TOKEN_PUNCTUATION = re.compile(r'[,.!?;:()"\']')


def extract_brands(text: str) -> List[str]:
    """
    Return candidate brand names found in text.

    Duplicates are kept; callers deduplicate.
    """
    if not text:
        return []

    brands = []

    for word in text.split():
        clean_word = _TOKEN_PUNCTUATION.sub('', word)
        if CAPITALIZED_WORD.match(clean_word):
            brands.append(clean_word)

    for match in TRADEMARKED.finditer(text):
        brands.append(match.group(1))

    return brands
