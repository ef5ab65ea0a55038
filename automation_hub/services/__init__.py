"""
Model-backed services: context extraction and code generation.
"""

from .code_generator import (
    CodeGenerationRequest,
    generate_automation_code,
    parse_generated_code,
)
from .context_extractor import extract_context_from_messages

__all__ = [
    "CodeGenerationRequest",
    "extract_context_from_messages",
    "generate_automation_code",
    "parse_generated_code",
]
