"""Listing sweep pipeline: credential -> extract -> classify -> apply."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup

from config import settings
from models.domain import SweepStatus
from services.brand_classifier import BrandClassifier
from services.credential_store import CredentialStore
from services.errors import CredentialMissingError, SweepError
from services.listing_applier import apply_decisions
from services.listing_extractor import BrandMapping, extract_brand_mappings, unique_brands

logger = logging.getLogger(__name__)

KeyPrompt = Callable[[], Optional[str]]
Extractor = Callable[[BeautifulSoup], List[BrandMapping]]


@dataclass
class SweepResult:
    status: SweepStatus
    brands: List[str] = field(default_factory=list)
    decisions: Dict[str, Any] = field(default_factory=dict)
    removed: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (SweepStatus.COMPLETED, SweepStatus.NOTHING_TO_CLASSIFY)


class ListingSweeper:
    """
    Run one sweep over a parsed document.

    The API key comes from the credential store, then from configuration,
    then from the injected prompt (whose answer is stored for later runs).
    Stages run strictly in order and every failure ends the run with a
    logged, non-raising result. Classification failures happen before any
    listing is touched, so a failed run removes nothing.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        classifier: Optional[BrandClassifier] = None,
        prompt_for_key: Optional[KeyPrompt] = None,
        configured_api_key: Optional[str] = None,
        extractor: Optional[Extractor] = None,
    ):
        self.credential_store = credential_store
        self.classifier = classifier or BrandClassifier()
        self.prompt_for_key = prompt_for_key
        self.configured_api_key = configured_api_key
        self.extractor = extractor or extract_brand_mappings

    def _resolve_api_key(self) -> str:
        stored = self.credential_store.get()
        if stored:
            return stored

        if self.configured_api_key:
            logger.info("Using configured Gemini API key")
            return self.configured_api_key

        if self.prompt_for_key is None:
            raise CredentialMissingError("No Gemini API key stored or configured")

        entered = (self.prompt_for_key() or "").strip()
        if not entered:
            raise CredentialMissingError("No Gemini API key provided")

        return self.credential_store.set(entered)

    async def run(self, document: BeautifulSoup) -> SweepResult:
        try:
            api_key = self._resolve_api_key()
        except CredentialMissingError as e:
            logger.error(f"{e}. Listings will not be swept.")
            return SweepResult(status=SweepStatus.NO_CREDENTIAL, error=str(e))
        except SweepError as e:
            logger.error(f"Could not resolve Gemini API key: {e}")
            return SweepResult(status=SweepStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error while resolving Gemini API key: {e}")
            return SweepResult(status=SweepStatus.FAILED, error=str(e))

        brands: List[str] = []
        try:
            mappings = self.extractor(document)
            brands = unique_brands(mappings)
            if not brands:
                logger.info("No brand names found.")
                return SweepResult(status=SweepStatus.NOTHING_TO_CLASSIFY)

            decisions = await self.classifier.classify(brands, api_key)
            removed = apply_decisions(mappings, decisions)
        except SweepError as e:
            logger.error(f"Sweep aborted: {e}")
            return SweepResult(status=SweepStatus.FAILED, brands=brands, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error while sweeping listings: {e}")
            return SweepResult(status=SweepStatus.FAILED, brands=brands, error=str(e))

        return SweepResult(
            status=SweepStatus.COMPLETED,
            brands=brands,
            decisions=decisions,
            removed=[mapping.brand for mapping in removed],
        )


def build_sweeper(
    credential_store: CredentialStore,
    prompt_for_key: Optional[KeyPrompt] = None,
) -> ListingSweeper:
    return ListingSweeper(
        credential_store,
        classifier=BrandClassifier(),
        prompt_for_key=prompt_for_key,
        configured_api_key=settings.gemini_api_key,
    )


async def sweep_html(html: str, sweeper: ListingSweeper) -> tuple[str, SweepResult]:
    document = BeautifulSoup(html, "html.parser")
    result = await sweeper.run(document)
    return str(document), result
