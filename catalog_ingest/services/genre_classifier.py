"""
Genre Classifier

Infers genre tags from playlist titles by keyword matching.
"""

from typing import Dict, List

FALLBACK_GENRE = "other"

# Genre -> title keywords (substring match on the lower-cased title)
GENRE_KEYWORDS: Dict[str, List[str]] = {
    "romance": ["romance", "love", "slice of life", "slice-of-life"],
    "horror": ["horror", "scary", "terror", "ghoul"],
    "action": ["action", "battle", "fight", "shounen", "shonen"],
    "comedy": ["comedy", "gag", "funny"],
    "drama": ["drama", "trag"],
    "fantasy": ["fantasy", "isekai", "magic"],
    "sci-fi": ["sci-fi", "science", "space", "future"],
    "thriller": ["thriller", "mystery"],
    "sports": ["sports", "baseball", "basketball", "soccer"],
    "mecha": ["mecha", "robot"],
    "slice of life": ["slice of life", "slice-of-life"],
}

# Seeded when the catalog has no genres yet
BASELINE_GENRES: List[str] = list(GENRE_KEYWORDS)


def classify_title(title: str) -> List[str]:
    """
    Return the genres whose keywords appear in the title.

    Order follows GENRE_KEYWORDS so identical titles always classify the
    same way. Falls back to ["other"] when nothing matches.
    """
    text = str(title or "").lower()
    found = [
        genre
        for genre, keywords in GENRE_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    ]
    return found or [FALLBACK_GENRE]
