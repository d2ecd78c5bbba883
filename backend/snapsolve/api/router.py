from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, Response, UploadFile
from fastapi.concurrency import run_in_threadpool

from snapsolve.api.dependencies import (
    provide_export_service,
    provide_extraction_service,
    provide_render_executor,
    provide_store,
)
from snapsolve.api.schemas.paste import PasteImageRequest
from snapsolve.api.schemas.question_set import QuestionSetDeleteResponse, QuestionSetResponse
from snapsolve.application.services import DocumentExportService, ExtractionService
from snapsolve.core.errors import QuestionSetNotFoundError, SnapSolveError
from snapsolve.infra.db.store import QuestionSetStore

router = APIRouter(tags=["mcq"])


def _http_error(exc: SnapSolveError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


@router.post("/upload", response_model=QuestionSetResponse)
async def upload_image(
    image: UploadFile | None = File(default=None),
    service: ExtractionService = Depends(provide_extraction_service),
):
    payload = await image.read() if image is not None else b""
    try:
        question_set = await run_in_threadpool(
            service.process_upload,
            filename=image.filename if image is not None else None,
            content_type=image.content_type if image is not None else None,
            payload=payload,
        )
    except SnapSolveError as exc:
        raise _http_error(exc) from exc
    return QuestionSetResponse.from_domain(question_set)


@router.post("/paste-image", response_model=QuestionSetResponse)
async def paste_image(
    body: PasteImageRequest = Body(...),
    service: ExtractionService = Depends(provide_extraction_service),
):
    try:
        question_set = await run_in_threadpool(service.process_pasted_image, body.base64Image)
    except SnapSolveError as exc:
        raise _http_error(exc) from exc
    return QuestionSetResponse.from_domain(question_set)


@router.get("/history", response_model=list[QuestionSetResponse])
async def history(
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    store: QuestionSetStore = Depends(provide_store),
):
    rows = await run_in_threadpool(store.list_newest_first, limit=limit, offset=offset)
    return [QuestionSetResponse.from_domain(row) for row in rows]


@router.get("/results/{set_id}", response_model=QuestionSetResponse)
async def get_results(set_id: str, store: QuestionSetStore = Depends(provide_store)):
    question_set = await run_in_threadpool(store.get, set_id)
    if question_set is None:
        raise _http_error(QuestionSetNotFoundError(set_id))
    return QuestionSetResponse.from_domain(question_set)


@router.delete("/results/{set_id}", response_model=QuestionSetDeleteResponse)
async def delete_results(set_id: str, store: QuestionSetStore = Depends(provide_store)):
    deleted = await run_in_threadpool(store.delete, set_id)
    if not deleted:
        raise _http_error(QuestionSetNotFoundError(set_id))
    return QuestionSetDeleteResponse(id=set_id)


async def _export(
    set_id: str,
    fmt: str,
    service: DocumentExportService,
    executor: ThreadPoolExecutor,
) -> Response:
    loop = asyncio.get_running_loop()
    try:
        document = await loop.run_in_executor(executor, partial(service.export, set_id, fmt))
    except SnapSolveError as exc:
        raise _http_error(exc) from exc
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/results/{set_id}/pdf")
async def download_pdf(
    set_id: str,
    service: DocumentExportService = Depends(provide_export_service),
    executor: ThreadPoolExecutor = Depends(provide_render_executor),
):
    return await _export(set_id, "pdf", service, executor)


@router.get("/results/{set_id}/word")
async def download_word(
    set_id: str,
    service: DocumentExportService = Depends(provide_export_service),
    executor: ThreadPoolExecutor = Depends(provide_render_executor),
):
    return await _export(set_id, "word", service, executor)
