"""Shared test fixtures for the gptproto_docs test suite."""

from __future__ import annotations

import pytest

from gptproto_docs.models.index import DocEntry, DocsIndex


@pytest.fixture()
def sample_entries() -> list[DocEntry]:
    """A small index spanning three vendors plus non-API guide pages."""
    return [
        DocEntry(
            path="docs/allapi/OpenAI/gpt-4o/official-format/text-to-text-chat",
            title="gpt-4o (Text to Text (Chat))",
            description="Chat completions with gpt-4o",
            vendor="OpenAI",
            model="gpt-4o",
            format="official-format",
            capability="text-to-text-chat",
            category="api",
            content="# gpt-4o chat",
        ),
        DocEntry(
            path="docs/allapi/OpenAI/gpt-4o/official-format/image-to-text",
            title="gpt-4o (Image to Text)",
            description="Vision input with gpt-4o",
            vendor="OpenAI",
            model="gpt-4o",
            format="official-format",
            capability="image-to-text",
            category="api",
            content="# gpt-4o vision",
        ),
        DocEntry(
            path="docs/allapi/OpenAI/dall-e-3/official-format/text-to-image",
            title="dall-e-3 (Text to Image)",
            description="Generate images from a prompt",
            vendor="OpenAI",
            model="dall-e-3",
            format="official-format",
            capability="text-to-image",
            category="api",
            content="# dall-e-3",
        ),
        DocEntry(
            path="docs/allapi/Claude/claude-sonnet-4/official-format/text-to-text",
            title="claude-sonnet-4 (Text to Text)",
            description="Messages API for Claude",
            vendor="Claude",
            model="claude-sonnet-4",
            format="official-format",
            capability="text-to-text",
            category="api",
            content="# claude-sonnet-4",
        ),
        DocEntry(
            path="docs/allapi/Google/gemini-2.5-flash/official-format/text-to-video",
            title="gemini-2.5-flash (Text to Video)",
            description="Video generation with Gemini",
            vendor="Google",
            model="gemini-2.5-flash",
            format="official-format",
            capability="text-to-video",
            category="api",
            content="# gemini video",
        ),
        DocEntry(
            path="quickstart",
            title="Quickstart",
            description="Make your first request",
            category="quickstart",
            content="# Quickstart guide",
        ),
        DocEntry(
            path="authentication",
            title="Authentication",
            description="API keys and headers",
            category="getting-started",
            content="# Authentication guide",
        ),
        DocEntry(
            path="docs/guides/openai-streaming",
            title="Streaming responses",
            description="Server-sent events with OpenAI models",
            vendor="OpenAI",
            category="guide",
            content="# Streaming",
        ),
    ]


@pytest.fixture()
def docs_index(sample_entries: list[DocEntry]) -> DocsIndex:
    return DocsIndex(version="1.0.0", generatedAt="2026-01-01T00:00:00Z", entries=sample_entries)
