"""
Prompt templates for the listing filter.

Each prompt is a Markdown file under this package: optional YAML front matter
(``version``, ``description``, ``requires``) followed by a Jinja2 body.
Rendering fails on any variable the template uses but the caller omitted.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jinja2 import Environment, StrictUndefined

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent

_env = Environment(undefined=StrictUndefined, keep_trailing_newline=False)


@dataclass
class PromptTemplate:
    prompt_id: str
    body: str
    version: str = "v1"
    description: str = ""
    requires: List[str] = field(default_factory=list)

    def render(self, **context: Any) -> str:
        missing = [name for name in self.requires if name not in context]
        if missing:
            raise ValueError(f"Missing required vars for prompt '{self.prompt_id}': {missing}")
        return _env.from_string(self.body).render(**context).strip()


def get_prompt_path(prompt_id: str) -> Path:
    return PROMPTS_DIR / f"{prompt_id}.md"


def _split_front_matter(content: str) -> tuple[Dict[str, Any], str]:
    if not content.startswith("---"):
        return {}, content

    _, header, body = (content.split("---", 2) + ["", ""])[:3]
    if not body:
        return {}, content

    try:
        metadata = yaml.safe_load(header) or {}
    except yaml.YAMLError:
        logger.warning("Ignoring unreadable front matter in prompt template")
        metadata = {}
    return metadata, body.strip()


@lru_cache(maxsize=16)
def get_prompt_template(prompt_id: str) -> PromptTemplate:
    path = get_prompt_path(prompt_id)
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")

    metadata, body = _split_front_matter(path.read_text(encoding="utf-8"))
    template = PromptTemplate(
        prompt_id=prompt_id,
        body=body,
        version=str(metadata.get("version", "v1")),
        description=metadata.get("description", ""),
        requires=list(metadata.get("requires") or []),
    )
    logger.debug(f"Loaded prompt '{prompt_id}' ({template.version})")
    return template


def load_prompt(prompt_id: str, **context: Any) -> str:
    return get_prompt_template(prompt_id).render(**context)


def reload_prompts() -> None:
    get_prompt_template.cache_clear()
