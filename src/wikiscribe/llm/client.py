"""LLM client wrapper using LiteLLM for multi-provider support."""

import os
from dataclasses import dataclass, field
from typing import Optional

from litellm import completion
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from wikiscribe.config import Settings, get_settings
from wikiscribe.llm.optimizer import optimize_input
from wikiscribe.llm.prompts import (
    DocMode,
    GenerationRequest,
    build_user_prompt,
    get_system_prompt,
    mock_documentation,
)

MOCK_MODEL = "mock"


class LLMError(Exception):
    """Error communicating with LLM provider."""

    pass


@dataclass
class GenerationResult:
    """Documentation produced for one request.

    Attributes:
        documentation: Generated Markdown
        model: Model that produced it ("mock" in mock mode)
        was_optimized: Whether the input was reduced before sending
        metadata: Sizes and routing details
    """

    documentation: str
    model: str
    was_optimized: bool = False
    metadata: dict = field(default_factory=dict)


class LLMClient:
    """Unified LLM client using LiteLLM for provider-agnostic API calls."""

    def __init__(
        self,
        model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        api_base: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: int = 4096,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the LLM client.

        Args:
            model: LiteLLM model string (e.g., "groq/llama-3.3-70b-versatile")
            fallback_model: Model tried when the primary model fails
            api_base: Optional API base URL (for local LLMs)
            temperature: Sampling temperature (lower = more deterministic)
            max_tokens: Maximum tokens in response
            settings: Settings to use instead of the global instance
        """
        settings = settings or get_settings()
        self.model = model or settings.default_model
        self.fallback_model = fallback_model or settings.fallback_model
        self.api_base = api_base
        self.temperature = (
            temperature if temperature is not None else settings.llm_temperature
        )
        self.max_tokens = max_tokens
        self.mock_mode = not settings.has_llm_credentials and api_base is None

        # Ensure API keys are set in environment for LiteLLM
        self._setup_api_keys(settings)

    def _setup_api_keys(self, settings: Settings) -> None:
        """Ensure API keys are available in environment for LiteLLM."""
        keys = {
            "GEMINI_API_KEY": settings.gemini_api_key,
            "GROQ_API_KEY": settings.groq_api_key,
            "OPENAI_API_KEY": settings.openai_api_key,
            "ANTHROPIC_API_KEY": settings.anthropic_api_key,
        }
        for name, value in keys.items():
            if value:
                os.environ[name] = value

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((LLMError,)),
        reraise=True,
    )
    def _call_llm(self, model: str, text: str, system_prompt: str) -> str:
        """Make an LLM API call with retry logic."""
        try:
            response = completion(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": text},
                ],
                api_base=self.api_base,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            content = response.choices[0].message.content
            if content is None:
                raise LLMError("LLM returned empty response")
            return content
        except LLMError:
            raise
        except Exception as e:
            if "rate_limit" in str(e).lower():
                raise LLMError(f"Rate limited: {e}") from e
            elif "api" in str(e).lower() or "connection" in str(e).lower():
                raise LLMError(f"API error: {e}") from e
            raise

    def generate_documentation(self, request: GenerationRequest) -> GenerationResult:
        """Generate Markdown documentation for a request.

        The input is optimized first when oversized. The primary model is
        tried first; on failure the fallback model is tried once.

        Raises:
            LLMError: If every configured model fails
        """
        logger.info(
            "Documentation requested: mode={} input={} chars",
            DocMode(request.mode).value,
            len(request.context),
        )

        if self.mock_mode:
            logger.warning("No LLM API key configured, using mock documentation")
            return GenerationResult(
                documentation=mock_documentation(request),
                model=MOCK_MODEL,
                metadata={"original_size": len(request.context)},
            )

        optimization = optimize_input(request.context)
        user_prompt = build_user_prompt(request, optimization.optimized_context)
        system_prompt = get_system_prompt(request.mode)
        metadata = {
            "original_size": optimization.original_size,
            "processed_size": optimization.optimized_size,
            "reduction_percent": optimization.reduction_percent,
        }

        try:
            documentation = self._call_llm(self.model, user_prompt, system_prompt)
            metadata["selection_reason"] = "primary"
            return GenerationResult(
                documentation=documentation,
                model=self.model,
                was_optimized=optimization.was_optimized,
                metadata=metadata,
            )
        except Exception as primary_error:
            logger.error("{} failed: {}", self.model, primary_error)
            if not self.fallback_model or self.fallback_model == self.model:
                raise LLMError(f"{self.model} failed: {primary_error}") from primary_error

            logger.info("Attempting fallback to {}", self.fallback_model)
            try:
                documentation = self._call_llm(
                    self.fallback_model, user_prompt, system_prompt
                )
            except Exception as fallback_error:
                logger.error("Fallback {} also failed: {}", self.fallback_model, fallback_error)
                raise LLMError(
                    f"All LLM providers failed. "
                    f"Primary ({self.model}): {primary_error}. "
                    f"Fallback ({self.fallback_model}): {fallback_error}"
                ) from fallback_error

            metadata["selection_reason"] = (
                f"Fallback to {self.fallback_model} after {self.model} failure"
            )
            metadata["primary_error"] = str(primary_error)
            return GenerationResult(
                documentation=documentation,
                model=self.fallback_model,
                was_optimized=optimization.was_optimized,
                metadata=metadata,
            )


def validate_documentation(output: str) -> tuple[bool, list[str]]:
    """Validate that LLM output looks like Markdown documentation.

    Args:
        output: The generated Markdown

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues: list[str] = []

    if not output.strip():
        issues.append("empty output")
        return False, issues

    lines = [line.strip() for line in output.splitlines()]
    if not any(line.startswith("# ") for line in lines):
        issues.append("top-level heading")

    # A fence left open swallows the rest of the document into one code block
    fences = sum(1 for line in lines if line.startswith("```"))
    if fences % 2:
        issues.append("unterminated code fence")

    return len(issues) == 0, issues
