"""AI-backed case operations: summary and similar-case search.

similar-case search runs the model's text through two stages before anything is
stored: strip_code_fences (sanitize) then parse_similar_cases (validate), which
returns a ParsedSimilarCases or a SimilarCasesParseFailure and never raises.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Union

from lexiassist.errors import AIResponseFormatError, NotFoundError
from lexiassist.models.case import Case, SimilarCase
from lexiassist.models.base import utcnow
from lexiassist.services.llm import AIClient
from lexiassist.storage.database import Database

logger = logging.getLogger(__name__)

SIMILAR_CASE_FIELDS = ("caseTitle", "citation", "verdict")


def build_summary_prompt(case: Case) -> str:
    return (
        "You are an expert legal assistant. Summarize the following case description into a concise, "
        "2-3 sentence summary suitable for a case file.\n\n"
        f"Case Title: {case.title}\n"
        f"Case Type: {case.case_type}\n"
        f"Court: {case.court}\n"
        f"Description: {case.description}\n\n"
        "Generate only the summary text."
    )


def build_similar_cases_prompt(case: Case) -> str:
    return (
        "You are a legal research assistant. Find 3-5 similar Indian legal cases to the following:\n"
        f"Case Title: {case.title}\n"
        f"Case Type: {case.case_type}\n"
        f"Description: {case.description}\n\n"
        "Your response MUST be a valid JSON array of objects, and nothing else.\n"
        "Do not include markdown ```json``` tags or any explanatory text.\n\n"
        "The JSON format for each object must be:\n"
        "{\n"
        '  "caseTitle": "The full case title",\n'
        '  "citation": "The official citation",\n'
        '  "verdict": "A one-sentence summary of the verdict or key ruling."\n'
        "}\n\n"
        "Example of a perfect response:\n"
        "[\n"
        '  {"caseTitle": "Kesavananda Bharati v. State of Kerala", "citation": "(1973) 4 SCC 225", '
        '"verdict": "The Supreme Court held that Parliament cannot alter the basic structure of the Constitution."},\n'
        '  {"caseTitle": "Maneka Gandhi v. Union of India", "citation": "AIR 1978 SC 597", '
        "\"verdict\": \"The Court held that the 'procedure established by law' under Article 21 must be fair, just, and reasonable.\"}\n"
        "]"
    )


# --- response pipeline ---

@dataclass
class ParsedSimilarCases:
    cases: list[SimilarCase]


@dataclass
class SimilarCasesParseFailure:
    reason: str
    raw_text: str


SimilarCasesParse = Union[ParsedSimilarCases, SimilarCasesParseFailure]


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _as_relevance(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    # NaN and infinities are not storable as JSON
    return number if math.isfinite(number) else None


def parse_similar_cases(text: str) -> SimilarCasesParse:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        return SimilarCasesParseFailure(reason=f"not valid JSON: {e}", raw_text=text)

    if not isinstance(data, list):
        return SimilarCasesParseFailure(
            reason=f"expected a JSON array, got {type(data).__name__}", raw_text=text,
        )

    cases = []
    for item in data:
        # one malformed entry should not cost the whole answer
        if not isinstance(item, dict):
            continue
        cases.append(SimilarCase(
            case_title=_as_text(item.get("caseTitle")),
            citation=_as_text(item.get("citation")),
            verdict=_as_text(item.get("verdict")),
            relevance=_as_relevance(item.get("relevance")),
        ))
    return ParsedSimilarCases(cases=cases)


# --- operations ---

async def _load_case(db: Database, owner_id: str, case_id: str) -> Case:
    row = await db.cases.get(owner_id, case_id)
    if not row:
        raise NotFoundError("Case")
    return Case.model_validate(row)


async def generate_summary(db: Database, ai: AIClient, owner_id: str, case_id: str) -> str:
    case = await _load_case(db, owner_id, case_id)
    summary = await ai.complete(build_summary_prompt(case))

    updated = await db.cases.update(
        owner_id, case_id, {"summary": summary, "updated_at": utcnow()},
    )
    if not updated:
        raise NotFoundError("Case")
    return summary


async def find_similar_cases(
    db: Database, ai: AIClient, owner_id: str, case_id: str,
) -> list[SimilarCase]:
    case = await _load_case(db, owner_id, case_id)
    raw = await ai.complete(build_similar_cases_prompt(case), web_search=True)

    result = parse_similar_cases(strip_code_fences(raw))
    if isinstance(result, SimilarCasesParseFailure):
        logger.warning(
            "similar-case search for %s returned unusable text (%s): %r",
            case_id, result.reason, result.raw_text,
        )
        raise AIResponseFormatError(result.reason)

    updated = await db.cases.update(
        owner_id, case_id,
        {"similar_cases": [c.model_dump() for c in result.cases], "updated_at": utcnow()},
    )
    if not updated:
        raise NotFoundError("Case")
    return result.cases
