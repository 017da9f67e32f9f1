"""
Brand extraction from search-result listings.

Each listing element is matched with the brand label printed in its title.
The path from listing to brand is a chain of CSS selectors taken from
settings, so a markup change on the host page is a configuration change.
Listings that do not follow the expected structure are skipped, never
reported as errors.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from config import settings
from services.text_utils import normalize_brand_label

logger = logging.getLogger(__name__)


@dataclass
class BrandMapping:
    """A listing element paired with the brand label found inside it."""
    brand: str
    element: Tag


def _follow_selector_chain(node: Tag, selector_chain: Sequence[str]) -> Optional[Tag]:
    """Apply each selector to the previous match; None as soon as a step misses."""
    current = node
    for selector in selector_chain:
        current = current.select_one(selector)
        if current is None:
            return None
    return current


def extract_brand_mappings(
    document: BeautifulSoup,
    listing_selector: Optional[str] = None,
    title_selector: Optional[str] = None,
    brand_selector_chain: Optional[Sequence[str]] = None,
) -> List[BrandMapping]:
    """Collect (brand, listing) pairs in document order."""
    listing_selector = listing_selector or settings.listing_selector
    title_selector = title_selector or settings.title_selector
    if brand_selector_chain is None:
        brand_selector_chain = settings.brand_selector_chain

    mappings: List[BrandMapping] = []

    listings = document.select(listing_selector)
    for listing in listings:
        title = listing.select_one(title_selector)
        if title is None:
            continue

        brand_node = _follow_selector_chain(title, brand_selector_chain)
        if brand_node is None:
            continue

        brand = normalize_brand_label(brand_node.get_text())
        if not brand:
            continue

        mappings.append(BrandMapping(brand=brand, element=listing))

    logger.info(f"Found {len(mappings)} branded listings out of {len(listings)}")
    return mappings


def unique_brands(mappings: Iterable[BrandMapping]) -> List[str]:
    """Distinct brand labels in first-seen order."""
    return list(dict.fromkeys(mapping.brand for mapping in mappings))
