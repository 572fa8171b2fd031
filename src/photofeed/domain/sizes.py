from __future__ import annotations

WANTED_IMAGE_SIZES = frozenset(
    {
        "Medium",
        "Medium 640",
        "Medium 800",
        "Large",
        "Large 1600",
        "Large 2048",
    }
)

# Suffixes used by the `extras=url_<key>` fields, mapped to their size labels.
SIZE_KEY_LABELS = {
    "sq": "Square",
    "q": "Large Square",
    "t": "Thumbnail",
    "s": "Small",
    "n": "Small 320",
    "w": "Small 400",
    "m": "Medium",
    "z": "Medium 640",
    "c": "Medium 800",
    "l": "Large",
    "h": "Large 1600",
    "k": "Large 2048",
    "3k": "X-Large 3K",
    "4k": "X-Large 4K",
    "5k": "X-Large 5K",
    "6k": "X-Large 6K",
    "o": "Original",
}
