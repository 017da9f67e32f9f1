"""Prompt templates sent to Gemini."""

from prompts.loader import PromptTemplate, get_prompt_path, get_prompt_template, load_prompt, reload_prompts

__all__ = ["PromptTemplate", "get_prompt_path", "get_prompt_template", "load_prompt", "reload_prompts"]
