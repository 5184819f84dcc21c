from typing import Optional


# ---------------------------------------------------------------------------
# Category keywords, evaluated in this order. First hit wins.
# Matching is plain substring search on lowercased "title description",
# so short keywords like "ai" also hit inside longer words.
# ---------------------------------------------------------------------------

CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("Technology",    ("tech", "ai", "digital", "software", "computer")),
    ("Business",      ("business", "company", "market", "stock", "economy")),
    ("Health",        ("health", "medical", "disease", "treatment", "doctor")),
    ("Sports",        ("sport", "game", "player", "team", "match")),
    ("Science",       ("science", "research", "study", "discovery")),
    ("Entertainment", ("entertainment", "movie", "music", "celebrity", "film")),
    ("Politics",      ("politics", "government", "election", "president", "minister")),
]

DEFAULT_CATEGORY = "World"

CATEGORIES: list[str] = [label for label, _ in CATEGORY_KEYWORDS] + [DEFAULT_CATEGORY]


def classify(title: Optional[str], description: Optional[str]) -> str:
    """
    Map an article's title and description to one of CATEGORIES.

    Returns:
        the first category whose keyword set hits, or DEFAULT_CATEGORY
    """
    text = f"{title or ''} {description or ''}".lower()

    for label, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return label

    return DEFAULT_CATEGORY
