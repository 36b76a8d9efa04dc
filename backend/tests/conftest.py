"""
Shared fixtures: an app built by create_app with an in-memory database,
a stub AI client and a file store under tmp_path.
"""

import copy

import pytest
from httpx import ASGITransport, AsyncClient

from lexiassist.config import Settings
from lexiassist.main import create_app
from lexiassist.services.auth import create_access_token
from lexiassist.storage.files import FileStore

LAWYER_A = "lawyer000aaa"
LAWYER_B = "lawyer000bbb"


class InMemoryTable:
    """same owner-scoped surface as storage.database.OwnedTable"""

    def __init__(self, order_key: str, descending: bool):
        self.rows: dict[str, dict] = {}
        self.order_key = order_key
        self.descending = descending

    async def list(self, owner_id):
        rows = [copy.deepcopy(r) for r in self.rows.values() if r["lawyer_id"] == owner_id]
        return sorted(rows, key=lambda r: r[self.order_key], reverse=self.descending)

    async def get(self, owner_id, record_id):
        row = self.rows.get(record_id)
        if row is None or row["lawyer_id"] != owner_id:
            return None
        return copy.deepcopy(row)

    async def get_many(self, owner_id, record_ids):
        rows = [await self.get(owner_id, i) for i in record_ids]
        return [r for r in rows if r is not None]

    async def insert(self, record):
        self.rows[record["id"]] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def update(self, owner_id, record_id, changes):
        if await self.get(owner_id, record_id) is None:
            return None
        self.rows[record_id].update(copy.deepcopy(changes))
        return copy.deepcopy(self.rows[record_id])

    async def delete(self, owner_id, record_id):
        if await self.get(owner_id, record_id) is None:
            return False
        del self.rows[record_id]
        return True


class InMemoryHearingTable(InMemoryTable):
    async def upcoming(self, owner_id, now, limit):
        rows = [
            r for r in await self.list(owner_id)
            if r["date"] >= now and r["status"] == "scheduled"
        ]
        return sorted(rows, key=lambda r: r["date"])[:limit]


class InMemoryUserTable:
    def __init__(self):
        self.rows: dict[str, dict] = {}

    async def get(self, user_id):
        row = self.rows.get(user_id)
        return copy.deepcopy(row) if row else None

    async def get_by_email(self, email):
        for row in self.rows.values():
            if row["email"] == email:
                return copy.deepcopy(row)
        return None

    async def insert(self, record):
        self.rows[record["id"]] = copy.deepcopy(record)
        return copy.deepcopy(record)


class InMemoryDatabase:
    def __init__(self):
        self.users = InMemoryUserTable()
        self.cases = InMemoryTable("created_at", descending=True)
        self.clients = InMemoryTable("created_at", descending=True)
        self.hearings = InMemoryHearingTable("date", descending=False)

    async def connect(self):
        pass

    async def close(self):
        pass


class StubAI:
    """returns `reply` or raises `error`; remembers every call"""

    def __init__(self):
        self.reply = ""
        self.error: Exception | None = None
        self.calls: list[tuple[str, bool]] = []

    async def complete(self, prompt, web_search=False):
        self.calls.append((prompt, web_search))
        if self.error is not None:
            raise self.error
        return self.reply

    async def close(self):
        pass


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="test-openai-key",
        jwt_secret_key="test-secret-key-for-lexiassist-suite",
        upload_dir=str(tmp_path / "uploads"),
        _env_file=None,
    )


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def ai():
    return StubAI()


@pytest.fixture
def app(settings, db, ai):
    app = create_app(settings)
    app.state.db = db
    app.state.ai = ai
    app.state.files = FileStore(settings.upload_dir)
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def headers_a(settings):
    return {"Authorization": f"Bearer {create_access_token(settings, LAWYER_A)}"}


@pytest.fixture
def headers_b(settings):
    return {"Authorization": f"Bearer {create_access_token(settings, LAWYER_B)}"}


@pytest.fixture
def case_payload():
    return {
        "caseNumber": "CS/123/2025",
        "title": "Sharma v. Verma",
        "caseType": "civil",
        "court": "Delhi High Court",
        "filingDate": "2025-01-15T00:00:00Z",
        "status": "ongoing",
        "description": "Dispute over ancestral property partition.",
    }


@pytest.fixture
async def created_case(client, headers_a, case_payload):
    resp = await client.post("/api/cases", json=case_payload, headers=headers_a)
    assert resp.status_code == 201
    return resp.json()
