from __future__ import annotations

from snapsolve.infra.ports.llm import VisionLLMPort

MOCK_RESPONSE = """1. What is 2+2?
A) 3
B) 4
C) 5
D) 22
Answer: B) 4
Explanation: Basic arithmetic.

2. Name the largest planet in the solar system.
Answer: Jupiter
Explanation: Jupiter is more than twice as massive as all the other planets combined."""


class MockVisionLLM(VisionLLMPort):
    provider_name = "mock"
    model_name = "mock-vision-v1"

    def __init__(self, response: str = MOCK_RESPONSE):
        self.response = response

    def generate_text_from_media(
        self,
        *,
        prompt: str,
        media_bytes: bytes,
        media_mime_type: str,
        system_prompt: str | None = None,
        model: str | None = None,
    ) -> str:
        return self.response
