"""
Image discovery, master labels and bounding-box geometry.
"""

import re
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

_SEPARATORS = re.compile(r"[\s._-]+")

LABEL_CASES = ("title", "upper", "lower", "none")


def list_images(folder, extensions: Sequence[str] = (".svg", ".png")) -> List[Path]:
    """List importable images directly inside a folder.

    Files sharing a stem (``icon.svg`` and ``icon.png``) collapse to one,
    keeping the extension listed first in ``extensions``.

    Args:
        folder: Directory to scan (not recursive)
        extensions: Accepted suffixes in order of preference

    Returns:
        Image paths sorted by file name
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Image folder not found: {folder}")

    rank = {ext.lower(): i for i, ext in enumerate(extensions)}
    by_stem = {}
    for path in folder.iterdir():
        if not path.is_file():
            continue
        suffix = path.suffix.lower()
        if suffix not in rank:
            continue
        key = path.stem.lower()
        current = by_stem.get(key)
        if current is None or rank[suffix] < rank[current.suffix.lower()]:
            by_stem[key] = path

    return sorted(by_stem.values(), key=lambda p: p.name.lower())


def label_from_filename(path, case: str = "title") -> str:
    """Turn a file name into a master label.

    ``aws-lambda_function.svg`` becomes ``Aws Lambda Function`` with the
    default title casing. Title casing only touches the first letter of each
    word so acronyms survive.
    """
    text = _SEPARATORS.sub(" ", Path(path).stem).strip()
    if not text:
        # Stem is nothing but separators
        return Path(path).stem
    if case == "title":
        return " ".join(word[:1].upper() + word[1:] for word in text.split(" ") if word)
    if case == "upper":
        return text.upper()
    if case == "lower":
        return text.lower()
    if case == "none":
        return text
    raise ValueError(f"Unknown label case: {case!r} (expected one of {', '.join(LABEL_CASES)})")


def unique_name(name: str, taken: Iterable[str]) -> str:
    """Return ``name`` or the first free ``name (n)``; Visio compares master names case-insensitively."""
    lowered = {t.lower() for t in taken}
    if name.lower() not in lowered:
        return name
    n = 2
    while f"{name} ({n})".lower() in lowered:
        n += 1
    return f"{name} ({n})"


def fit_within(width: float, height: float, max_dimension: float) -> Tuple[float, float]:
    """Scale a box so its longer side equals ``max_dimension``, keeping the aspect ratio."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Shape has no area ({width} x {height})")
    if max_dimension <= 0:
        raise ValueError(f"max_dimension must be positive, got {max_dimension}")
    factor = max_dimension / max(width, height)
    return width * factor, height * factor
