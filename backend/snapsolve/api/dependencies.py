from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

from snapsolve.application.services import DocumentExportService, ExtractionService
from snapsolve.core.config import get_settings
from snapsolve.infra.db.store import QuestionSetStore
from snapsolve.infra.llm.gemini import GeminiVisionLLM
from snapsolve.infra.llm.mock import MockVisionLLM
from snapsolve.infra.ports.llm import VisionLLMPort


@lru_cache(maxsize=1)
def get_store() -> QuestionSetStore:
    return QuestionSetStore()


@lru_cache(maxsize=1)
def get_llm() -> VisionLLMPort:
    settings = get_settings()
    if settings.llm_backend == "gemini":
        if not settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY is required when SNAPSOLVE_LLM_BACKEND=gemini")
        return GeminiVisionLLM(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            timeout_seconds=settings.llm_timeout_seconds,
            max_media_bytes=settings.max_media_bytes,
        )
    return MockVisionLLM()


@lru_cache(maxsize=1)
def get_render_executor() -> ThreadPoolExecutor:
    settings = get_settings()
    return ThreadPoolExecutor(max_workers=settings.render_workers, thread_name_prefix="render")


def get_extraction_service() -> ExtractionService:
    return ExtractionService(llm=get_llm(), store=get_store())


def get_export_service() -> DocumentExportService:
    return DocumentExportService(store=get_store())


async def provide_store() -> QuestionSetStore:
    return get_store()


async def provide_extraction_service() -> ExtractionService:
    return get_extraction_service()


async def provide_export_service() -> DocumentExportService:
    return get_export_service()


async def provide_render_executor() -> ThreadPoolExecutor:
    return get_render_executor()
