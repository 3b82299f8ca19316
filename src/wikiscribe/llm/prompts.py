"""System prompts for documentation generation."""

from dataclasses import dataclass
from enum import Enum


class DocMode(str, Enum):
    """Kind of documentation to generate."""

    TASK = "task"
    ARCHITECTURE = "architecture"
    MEETING = "meeting"


@dataclass(frozen=True)
class GenerationRequest:
    """User input for one documentation request.

    Attributes:
        context: Free-form context dump (task notes, overview or transcript)
        mode: Documentation mode
        code: Optional code implementation (task mode)
        challenges: Optional challenges and solutions (task mode)
    """

    context: str
    mode: DocMode = DocMode.TASK
    code: str = ""
    challenges: str = ""


# Shared output rules. These keep the output inside what the block
# translator understands.
_FORMAT_RULES = '''## OUTPUT FORMAT:
- Output ONLY Markdown, no preamble and no closing remarks
- Use "#", "##" and "###" headings only (never deeper)
- Use "-" for bullet lists and "1." for numbered lists, never nested
- Use fenced code blocks with a language tag (```python)
- Use **bold**, *italic*, `inline code` and [label](url) links
- Do not use tables, footnotes or nested quotes
'''

# =============================================================================
# Task documentation
# =============================================================================

TASK_SYSTEM_PROMPT = '''You are a senior data engineer writing internal documentation for a completed task.

Turn the raw notes you receive into clear, reviewable documentation.

## REQUIRED SECTIONS:
# <Task title>
## Context
## Implementation
## Code Highlights (only if code was provided)
## Challenges & Solutions (only if challenges were provided)
## Next Steps

Be concrete. Keep ticket ids, dates, metrics and file names exactly as given.

''' + _FORMAT_RULES

# =============================================================================
# Architecture documentation
# =============================================================================

ARCHITECTURE_SYSTEM_PROMPT = '''You are a software architect documenting a system for new team members.

## REQUIRED SECTIONS:
# <System name> Architecture
## Overview
## Primary Components
## Flow & Stack
## Decisions & Trade-offs

Explain each decision together with the alternative that was rejected.

''' + _FORMAT_RULES

# =============================================================================
# Meeting records
# =============================================================================

MEETING_SYSTEM_PROMPT = '''You are a technical writer turning a meeting transcript into a meeting record.

## REQUIRED SECTIONS:
# Meeting Record: <topic>
## Executive Summary
## Key Decisions & Definitions
## Technical Context Extracted
## Action Items & Next Steps

List every action item as "- **Owner**: task (due date if mentioned)".

''' + _FORMAT_RULES


_PROMPTS = {
    DocMode.TASK: TASK_SYSTEM_PROMPT,
    DocMode.ARCHITECTURE: ARCHITECTURE_SYSTEM_PROMPT,
    DocMode.MEETING: MEETING_SYSTEM_PROMPT,
}


def get_system_prompt(mode: DocMode = DocMode.TASK) -> str:
    """Get the system prompt for a documentation mode."""
    return _PROMPTS[DocMode(mode)]


def build_user_prompt(request: GenerationRequest, context: str | None = None) -> str:
    """Assemble the user message from the request fields.

    Args:
        request: The documentation request
        context: Replacement for ``request.context`` (e.g. after optimization)

    Returns:
        The user message sent alongside the system prompt
    """
    body = request.context if context is None else context
    mode = DocMode(request.mode)

    if mode == DocMode.MEETING:
        parts = [f"MEETING TRANSCRIPT:\n{body}"]
    elif mode == DocMode.ARCHITECTURE:
        parts = [f"ARCHITECTURE NOTES:\n{body}"]
    else:
        parts = [f"TASK CONTEXT:\n{body}"]
        if request.code.strip():
            parts.append(f"CODE IMPLEMENTATION:\n```\n{request.code.strip()}\n```")
        if request.challenges.strip():
            parts.append(f"CHALLENGES & SOLUTIONS:\n{request.challenges.strip()}")

    return "\n\n".join(parts)


def mock_documentation(request: GenerationRequest) -> str:
    """Build placeholder documentation used when no LLM key is configured."""
    preview = request.context[:180] if request.context else "-"
    mode = DocMode(request.mode)

    if mode == DocMode.ARCHITECTURE:
        return f"""# Architecture Documentation (mock mode)

## Overview
Mock architecture documentation generated without an API key.

## Context Snapshot
{preview}...

## Primary Components
- Component A: Handles data ingestion and validation
- Component B: Manages transformation and processing

## Decisions & Trade-offs
- Mock decision: configure an LLM API key to generate real content
"""

    if mode == DocMode.MEETING:
        return f"""# Meeting Record: Project Sync (mock mode)

## Executive Summary
Mock meeting documentation generated without an API key.

## Context Snapshot
{preview}...

## Action Items & Next Steps
- **Owner**: configure an LLM API key
"""

    return f"""# Task Documentation (mock mode)

## Context
{preview}...

## Implementation
Mock task documentation generated without an API key.

## Next Steps
1. Configure an LLM API key
2. Generate the documentation again
"""
