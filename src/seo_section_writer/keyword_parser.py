"""
Keyword list parsing and optional-keyword sampling.

Keywords are entered as free text separated by commas (ASCII or full-width)
or newlines. Duplicates are kept: repeated entries are treated as independent
keywords by the prompt builder and the density analyzer.
"""

import random
import re
from typing import Optional

# Split on ASCII comma, full-width comma, or any line break
KEYWORD_DELIMITERS = re.compile(r"[,，\r\n]")

# Optional keywords injected into a single prompt
MAX_OPTIONAL_PER_PROMPT = 2


def parse_keywords(raw: Optional[str]) -> list[str]:
    """
    Split delimited keyword text into a list of trimmed keywords.

    Args:
        raw: Keyword text, e.g. "seo tool, ai writing\\nrank".

    Returns:
        Non-empty keywords in their original order.
    """
    if not raw:
        return []
    tokens = (token.strip() for token in KEYWORD_DELIMITERS.split(raw))
    return [token for token in tokens if token]


def select_optional_keywords(
    raw: Optional[str],
    limit: int = MAX_OPTIONAL_PER_PROMPT,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """
    Sample a small random subset of the optional keyword pool.

    Pools at or under the limit are returned unchanged. Larger pools are
    shuffled (Fisher-Yates, on a copy) and the first `limit` entries are
    returned. Call once per prompt so each section gets its own sample.

    Args:
        raw: Optional keyword pool as delimited text.
        limit: Maximum keywords to return.
        rng: Random source; defaults to the module-level generator.

    Returns:
        At most `limit` keywords drawn from the pool.
    """
    pool = parse_keywords(raw)
    if len(pool) <= limit:
        return pool

    rng = rng or random
    shuffled = list(pool)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled[:limit]


def join_keywords(keywords: list[str]) -> str:
    """Render a keyword list the way prompts and reports display it."""
    return ", ".join(keywords)
