"""
Query generation pipeline.

Usage:
    from askdb.generation import SQLGenerator

    sql = await generator.generate(schema, prompt="show all users")
"""

from askdb.generation.auxiliary import SampleQuestionGenerator, TitleGenerator
from askdb.generation.completion import CompletionClient
from askdb.generation.conversation import ConversationBuilder
from askdb.generation.extractor import extract_sql
from askdb.generation.generator import SQLGenerator, auto_fix_message
from askdb.generation.schema_encoder import encode_schema

__all__ = [
    "CompletionClient",
    "ConversationBuilder",
    "SQLGenerator",
    "SampleQuestionGenerator",
    "TitleGenerator",
    "auto_fix_message",
    "encode_schema",
    "extract_sql",
]
