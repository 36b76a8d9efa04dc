from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import Field

from lexiassist.models.base import ApiModel, PartialUpdate, UtcDatetime, new_id, utcnow
from lexiassist.models.case import CaseRef


class HearingType(str, enum.Enum):
    HEARING = "hearing"
    FILING = "filing"
    ARGUMENT = "argument"
    JUDGMENT = "judgment"


class HearingStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    POSTPONED = "postponed"


class HearingCreate(ApiModel):
    case_id: str = Field(min_length=1)
    date: UtcDatetime
    time: str = ""
    court: str = ""
    judge: str = ""
    type: HearingType = HearingType.HEARING
    status: HearingStatus = HearingStatus.SCHEDULED
    notes: str = ""


class HearingUpdate(PartialUpdate):
    required = ("case_id", "date", "type", "status")

    case_id: Optional[str] = Field(default=None, min_length=1)
    date: Optional[UtcDatetime] = None
    time: Optional[str] = None
    court: Optional[str] = None
    judge: Optional[str] = None
    type: Optional[HearingType] = None
    status: Optional[HearingStatus] = None
    notes: Optional[str] = None


class Hearing(HearingCreate):
    id: str = Field(default_factory=new_id)
    lawyer_id: str
    reminder_sent: bool = False  # no operation sets this yet
    created_at: datetime = Field(default_factory=utcnow)


class HearingResponse(Hearing):
    case_details: Optional[CaseRef] = None
