"""fill in the records a case, client or hearing points at.
lookups go through the same owner filter as everything else, so a reference to
another lawyer's record simply resolves to nothing."""
from __future__ import annotations

from lexiassist.models.case import Case, CaseRef, CaseResponse, ClientRef
from lexiassist.models.client import Client, ClientResponse
from lexiassist.models.hearing import Hearing, HearingResponse
from lexiassist.storage.database import Database


async def with_clients(db: Database, owner_id: str, cases: list[Case]) -> list[CaseResponse]:
    ids = sorted({c.client_id for c in cases if c.client_id})
    rows = await db.clients.get_many(owner_id, ids)
    clients = {r["id"]: ClientRef.model_validate(r) for r in rows}
    return [
        CaseResponse(**c.model_dump(), client_details=clients.get(c.client_id))
        for c in cases
    ]


async def with_cases(
    db: Database, owner_id: str, hearings: list[Hearing],
) -> list[HearingResponse]:
    ids = sorted({h.case_id for h in hearings})
    rows = await db.cases.get_many(owner_id, ids)
    cases = {
        r["id"]: CaseRef(id=r["id"], case_number=r["case_number"], title=r["title"])
        for r in rows
    }
    return [
        HearingResponse(**h.model_dump(), case_details=cases.get(h.case_id))
        for h in hearings
    ]


async def with_case_list(db: Database, owner_id: str, client: Client) -> ClientResponse:
    rows = await db.cases.get_many(owner_id, client.case_ids)
    by_id = {r["id"]: CaseRef.model_validate(r) for r in rows}
    # keep the client's own ordering
    cases = [by_id[i] for i in client.case_ids if i in by_id]
    return ClientResponse(**client.model_dump(), cases=cases)
