# core/ranking.py

import logging
from typing import Iterable, List

from core.errors import UnreadableImageError
from core.image_access import peek_dimensions

logger = logging.getLogger(__name__)


def rank_by_resolution(paths: Iterable[str]) -> List[str]:
    """
    Order image paths by pixel area, largest first.

    Equal areas are ordered by path string ascending, so the result does
    not depend on the order the paths were given in. Files whose
    dimensions cannot be read are left out of the result.
    """
    ranked = []

    for path in paths:
        try:
            width, height = peek_dimensions(path)
        except UnreadableImageError as e:
            logger.debug("Dropping %s from ranking: %s", path, e.reason)
            continue
        ranked.append((width * height, str(path)))

    ranked.sort(key=lambda item: (-item[0], item[1]))

    return [path for _, path in ranked]
