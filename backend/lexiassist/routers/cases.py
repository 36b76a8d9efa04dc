import logging
import os

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from lexiassist.deps import get_ai, get_current_user_id, get_db, get_files
from lexiassist.errors import AIError, NotFoundError
from lexiassist.models.base import utcnow
from lexiassist.models.case import (
    Case,
    CaseCreate,
    CaseResponse,
    CaseUpdate,
    SimilarCase,
    SummaryResponse,
)
from lexiassist.services.case_ai import find_similar_cases, generate_summary
from lexiassist.services.llm import AIClient
from lexiassist.services.references import with_clients
from lexiassist.storage.database import Database
from lexiassist.storage.files import FileStore

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_owned(db: Database, user_id: str, case_id: str) -> Case:
    row = await db.cases.get(user_id, case_id)
    if not row:
        raise NotFoundError("Case")
    return Case.model_validate(row)


async def _respond(db: Database, user_id: str, case: Case) -> CaseResponse:
    [resp] = await with_clients(db, user_id, [case])
    return resp


@router.get("")
async def list_cases(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> list[CaseResponse]:
    cases = [Case.model_validate(r) for r in await db.cases.list(user_id)]
    return await with_clients(db, user_id, cases)


@router.get("/{case_id}")
async def get_case(
    case_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> CaseResponse:
    case = await _get_owned(db, user_id, case_id)
    return await _respond(db, user_id, case)


@router.post("", status_code=201)
async def create_case(
    body: CaseCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> CaseResponse:
    case = Case(**body.model_dump(), lawyer_id=user_id)
    row = await db.cases.insert(case.model_dump())
    return await _respond(db, user_id, Case.model_validate(row))


@router.put("/{case_id}")
async def update_case(
    case_id: str,
    body: CaseUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> CaseResponse:
    changes = body.changes()
    changes["updated_at"] = utcnow()
    row = await db.cases.update(user_id, case_id, changes)
    if not row:
        raise NotFoundError("Case")
    return await _respond(db, user_id, Case.model_validate(row))


@router.delete("/{case_id}")
async def delete_case(
    case_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    if not await db.cases.delete(user_id, case_id):
        raise NotFoundError("Case")
    return {"message": "Case deleted"}


# --- AI ---

@router.post("/{case_id}/summary")
async def summarize_case(
    case_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    ai: AIClient = Depends(get_ai),
) -> SummaryResponse:
    try:
        summary = await generate_summary(db, ai, user_id, case_id)
    except AIError as e:
        e.context = "Failed to generate summary."
        raise
    return SummaryResponse(summary=summary)


@router.post("/{case_id}/similar")
async def similar_cases(
    case_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    ai: AIClient = Depends(get_ai),
) -> list[SimilarCase]:
    try:
        return await find_similar_cases(db, ai, user_id, case_id)
    except AIError as e:
        e.context = "Failed to find similar cases."
        raise


# --- documents ---

@router.post("/{case_id}/document")
async def attach_document(
    case_id: str,
    document: UploadFile | None = File(None),
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    files: FileStore = Depends(get_files),
) -> CaseResponse:
    case = await _get_owned(db, user_id, case_id)
    if document is None or not document.filename:
        raise HTTPException(400, "No file uploaded.")

    content = await document.read()
    doc = files.save(case_id, document.filename, content)
    try:
        row = await db.cases.update(
            user_id, case_id,
            {"documents": [d.model_dump() for d in [*case.documents, doc]], "updated_at": utcnow()},
        )
    except Exception:
        files.remove(doc.url)
        raise
    if not row:
        files.remove(doc.url)
        raise NotFoundError("Case")

    logger.info("attached %s to case %s", doc.name, case_id)
    return await _respond(db, user_id, Case.model_validate(row))


@router.get("/{case_id}/document/{doc_id}")
async def download_document(
    case_id: str,
    doc_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    files: FileStore = Depends(get_files),
):
    case = await _get_owned(db, user_id, case_id)
    doc = next((d for d in case.documents if d.id == doc_id), None)
    if doc is None:
        raise NotFoundError("Document")

    full_path = files.path_for(doc.url)
    if not os.path.isfile(full_path):
        logger.warning("attachment missing on disk: %s", full_path)
        raise NotFoundError("Document")
    return FileResponse(full_path, filename=doc.name)


@router.delete("/{case_id}/document/{doc_id}")
async def detach_document(
    case_id: str,
    doc_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    files: FileStore = Depends(get_files),
) -> CaseResponse:
    case = await _get_owned(db, user_id, case_id)
    removed = [d for d in case.documents if d.id == doc_id]
    kept = [d for d in case.documents if d.id != doc_id]

    row = await db.cases.update(
        user_id, case_id, {"documents": [d.model_dump() for d in kept], "updated_at": utcnow()},
    )
    if not row:
        raise NotFoundError("Case")

    # blob goes only after the case no longer points at it
    for doc in removed:
        files.remove(doc.url)
    return await _respond(db, user_id, Case.model_validate(row))
