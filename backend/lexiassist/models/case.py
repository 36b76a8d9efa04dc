from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import Field

from lexiassist.models.base import ApiModel, PartialUpdate, UtcDatetime, new_id, utcnow


class CaseStatus(str, enum.Enum):
    FILED = "filed"
    ONGOING = "ongoing"
    HEARING = "hearing"
    CLOSED = "closed"
    WON = "won"
    LOST = "lost"


class Document(ApiModel):
    id: str = Field(default_factory=new_id)
    name: str
    url: str  # storage path relative to settings.upload_dir
    uploaded_at: datetime = Field(default_factory=utcnow)


class SimilarCase(ApiModel):
    case_title: str = ""
    citation: str = ""
    verdict: str = ""
    relevance: Optional[float] = None


class CaseCreate(ApiModel):
    case_number: str = Field(min_length=1)
    title: str = Field(min_length=1)
    client_id: Optional[str] = None
    case_type: str = Field(min_length=1)
    court: str = ""
    filing_date: Optional[UtcDatetime] = None
    status: CaseStatus = CaseStatus.FILED
    description: str = ""


class CaseUpdate(PartialUpdate):
    required = ("case_number", "title", "case_type", "status")

    case_number: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    client_id: Optional[str] = None
    case_type: Optional[str] = Field(default=None, min_length=1)
    court: Optional[str] = None
    filing_date: Optional[UtcDatetime] = None
    status: Optional[CaseStatus] = None
    description: Optional[str] = None


class Case(CaseCreate):
    id: str = Field(default_factory=new_id)
    lawyer_id: str
    documents: list[Document] = []
    similar_cases: list[SimilarCase] = []
    summary: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ClientRef(ApiModel):
    id: str
    name: str
    phone: str = ""
    email: Optional[str] = None
    address: Optional[str] = None


class CaseResponse(Case):
    client_details: Optional[ClientRef] = None


class CaseRef(ApiModel):
    id: str
    case_number: str
    title: str
    status: Optional[CaseStatus] = None


class SummaryResponse(ApiModel):
    summary: str
