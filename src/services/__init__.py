from .brand_classifier import BrandClassifier
from .credential_store import CredentialStore, get_credential_store
from .gemini import GeminiService
from .listing_applier import apply_decisions
from .listing_extractor import BrandMapping, extract_brand_mappings, unique_brands
from .sweep_pipeline import ListingSweeper, SweepResult, build_sweeper, sweep_html

__all__ = [
    "BrandClassifier",
    "BrandMapping",
    "CredentialStore",
    "GeminiService",
    "ListingSweeper",
    "SweepResult",
    "apply_decisions",
    "build_sweeper",
    "extract_brand_mappings",
    "get_credential_store",
    "sweep_html",
    "unique_brands",
]
