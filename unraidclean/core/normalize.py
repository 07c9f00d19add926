"""Title normalization for cross-system matching."""

import re

NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_title(title: str) -> str:
    """Lowercase a title and collapse non-alphanumeric runs to single spaces."""
    lower = title.strip().lower()
    return NON_ALNUM.sub(" ", lower).strip(" ")


def normalize_title_year(title: str, year: int | None) -> str:
    """Normalize a title and append the year to tell remakes apart."""
    norm = normalize_title(title)
    if year and year > 0:
        return f"{norm} {year}"
    return norm
