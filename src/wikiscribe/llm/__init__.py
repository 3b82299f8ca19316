"""LLM integration for Wikiscribe."""

from wikiscribe.llm.client import LLMClient, LLMError, GenerationResult
from wikiscribe.llm.prompts import DocMode, GenerationRequest, get_system_prompt
from wikiscribe.llm.optimizer import analyze_input, optimize_input

__all__ = [
    "LLMClient",
    "LLMError",
    "GenerationResult",
    "DocMode",
    "GenerationRequest",
    "get_system_prompt",
    "analyze_input",
    "optimize_input",
]
