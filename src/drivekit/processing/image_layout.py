# image_layout.py
"""Ordering and placement rules for image slides."""
# mypy: disable-error-code="import-untyped"

from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from pyuca import Collator

from drivekit.models import ImageResource


# region image_sort_key
@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Parses the full Unicode collation table; built once, on first sort.
    return Collator()


def image_sort_key(name: str) -> tuple[int, ...]:
    """
    Unicode Collation Algorithm sort key for a file name (root-locale order, as JavaScript's localeCompare gives).

    Compared level by level:
      1. base characters: punctuation before digits before letters,
         with "_" before "-" before "." ("plot_2.png" < "plot-2.png" < "plot.png" < "plot2.png")
      2. accents ("e.png" before "é.png")
      3. case: lowercase before uppercase ("a.png" before "A.png")

    So "B.png" sorts after "a.png", although "B" < "a" in ASCII.
    """
    return _collator().sort_key(name)


# endregion


# region sort_images
def sort_images(images: Iterable[ImageResource]) -> list[ImageResource]:
    """Sort images by file name with image_sort_key. Stable for equal names."""
    return sorted(images, key=lambda image: image_sort_key(image.name))


# endregion


# region centered_position
def centered_position(
    page_width: float, page_height: float, image_width: float, image_height: float
) -> tuple[float, float]:
    """
    (left, top) that centers an image on the page at its native size.

    An image larger than the page gets a negative offset and overflows evenly on both sides.
    """
    left = (page_width - image_width) / 2
    top = (page_height - image_height) / 2
    return left, top


# endregion
