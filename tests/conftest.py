"""Shared fixtures: sample profile data and offline stand-ins for the models."""

import json
import re

import pytest
from langchain_core.messages import AIMessage, AIMessageChunk

from resume_rag.access.identity import ApiKeyVerifier, hash_api_key
from resume_rag.access.quota import InMemoryQuotaStore
from resume_rag.embedding.provider import EmbeddingProvider
from resume_rag.retrieval.context import FALLBACK_ANSWER

DIMENSION = 768
TEST_TOKEN = "test-key"
TEST_IDENTITY = "visitor@example.com"

# Words mapped onto fixed axes; text without any of them lands on the last axis.
KEYWORD_AXES = {
    "cornell": 0,
    "study": 0,
    "studied": 0,
    "degree": 0,
    "coinbase": 1,
    "job": 1,
    "python": 2,
    "skills": 2,
    "color": 5,
}
FALLBACK_AXIS = DIMENSION - 1


class KeywordEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-keywords embeddings."""

    def __init__(self, dimension: int = DIMENSION, broken_for: str | None = None):
        super().__init__(dimension)
        self.broken_for = broken_for
        self.calls: list[str] = []

    def _embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * self.dimension
        if self.broken_for and self.broken_for in text:
            # Wrong length for this text only
            return vector[:-1]
        words = set(re.findall(r"[a-z]+", text.lower()))
        hit = False
        for word, axis in KEYWORD_AXES.items():
            if word in words:
                vector[axis] += 1.0
                hit = True
        if not hit:
            vector[FALLBACK_AXIS] = 1.0
        return vector


def grounded_reply(prompt: str) -> str:
    """Answer from the first context chunk, or the fallback sentence without one."""
    if "<S1>" not in prompt:
        return FALLBACK_ANSWER
    if "Cornell" in prompt:
        return "Ilan studied at Cornell University."
    return "Ilan has a strong engineering background."


class StubChatModel:
    """Minimal async chat model with ainvoke/astream."""

    def __init__(self, reply=grounded_reply, fragments=None, fail_after=None):
        self.reply = reply
        self.fragments = fragments
        self.fail_after = fail_after
        self.prompts: list[str] = []
        self.stream_closed = False

    async def ainvoke(self, prompt):
        self.prompts.append(prompt)
        text = self.reply(prompt)
        return AIMessage(
            content=text,
            usage_metadata={"input_tokens": 10, "output_tokens": 5, "total_tokens": 15},
        )

    async def astream(self, prompt):
        self.prompts.append(prompt)
        fragments = self.fragments or [self.reply(prompt)]
        try:
            for i, fragment in enumerate(fragments):
                if self.fail_after is not None and i == self.fail_after:
                    raise RuntimeError("upstream connection reset")
                yield AIMessageChunk(content=fragment)
        finally:
            self.stream_closed = True


@pytest.fixture
def profile_data():
    return {
        "name": "Ilan Klimberg",
        "contact": {
            "email": "ilan@example.com",
            "location": "New York, NY",
        },
        "education": [
            {
                "institution": "Cornell University",
                "location": "Ithaca, NY",
                "degree": "B.S. Computer Science",
                "dates": "2021 - 2025",
                "gpa": "3.8",
                "honors": ["Dean's List"],
                "coursework": ["Algorithms", "Machine Learning"],
            }
        ],
        "experience": [
            {
                "company": "Coinbase",
                "role": "Software Engineer Intern",
                "location": "Remote",
                "dates": "Summer 2024",
                "description": "Built internal tooling for the trading platform.",
                "highlights": ["Cut report generation from hours to minutes"],
            }
        ],
        "projects": [
            {
                "name": "Portfolio Site",
                "description": "Personal website with a question box.",
                "technologies": ["React", "TypeScript"],
                "highlights": ["Streams answers to visitors"],
            }
        ],
        "skills": ["Python", "TypeScript", "SQL"],
    }


@pytest.fixture
def profile_file(tmp_path, profile_data):
    path = tmp_path / "resumeData.json"
    path.write_text(json.dumps(profile_data), encoding="utf-8")
    return path


@pytest.fixture
def embedder():
    return KeywordEmbeddingProvider()


@pytest.fixture
def chat_model():
    return StubChatModel()


@pytest.fixture
def verifier():
    return ApiKeyVerifier({hash_api_key(TEST_TOKEN): TEST_IDENTITY})


@pytest.fixture
def quota_store():
    return InMemoryQuotaStore()


@pytest.fixture
def auth_header():
    return f"Bearer {TEST_TOKEN}"


@pytest.fixture
def make_embedder():
    return KeywordEmbeddingProvider


@pytest.fixture
def make_chat_model():
    return StubChatModel
