from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from lexiassist.models.base import ApiModel, PartialUpdate, new_id, utcnow
from lexiassist.models.case import CaseRef


class ClientCreate(ApiModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: str = Field(min_length=1)
    address: str = ""
    id_proof: str = ""
    notes: str = ""
    # informational only: nothing keeps this in step with Case.client_id
    case_ids: list[str] = []


class ClientUpdate(PartialUpdate):
    required = ("name", "phone", "case_ids")

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    id_proof: Optional[str] = None
    notes: Optional[str] = None
    case_ids: Optional[list[str]] = None


class Client(ClientCreate):
    id: str = Field(default_factory=new_id)
    lawyer_id: str
    created_at: datetime = Field(default_factory=utcnow)


class ClientResponse(Client):
    cases: list[CaseRef] = []
