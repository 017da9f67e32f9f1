import logging
from typing import Any, List, Mapping, Sequence

from models.domain import Decision
from services.listing_extractor import BrandMapping

logger = logging.getLogger(__name__)


def apply_decisions(
    mappings: Sequence[BrandMapping],
    decisions: Mapping[str, Any],
) -> List[BrandMapping]:
    """Detach every listing whose brand was classified as delete.

    Only the exact string "delete" removes a listing. A missing brand or any
    other value leaves it in place. Returns the removed mappings in order.
    """
    removed: List[BrandMapping] = []

    for mapping in mappings:
        decision = decisions.get(mapping.brand)
        logger.debug(f"Decision for '{mapping.brand}': {decision!r}")
        if decision == Decision.DELETE.value:
            mapping.element.extract()
            removed.append(mapping)

    logger.info(f"Removed {len(removed)} of {len(mappings)} listings")
    return removed
