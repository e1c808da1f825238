"""Prompt templates for SQL generation and auxiliary model calls."""

from askdb.prompts.loader import PromptLoader, get_prompt_loader

__all__ = ["PromptLoader", "get_prompt_loader"]
