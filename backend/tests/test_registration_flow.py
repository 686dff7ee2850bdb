import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from registration_api.api.deps import get_db, get_submission_limiter
from registration_api.core.settings import Settings, get_settings
from registration_api.db.base import Base
import registration_api.models.player  # noqa: F401
from registration_api.main import app
from registration_api.services.rate_limit import SlidingWindowRateLimiter

ADMIN = {"X-Admin-Token": "test-admin-token"}


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    settings = Settings(ADMIN_TOKEN="test-admin-token")
    limiter = SlidingWindowRateLimiter(limit=1000, window_seconds=900)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_submission_limiter] = lambda: limiter
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _draft(**overrides):
    payload = {
        "name": "A Kumar",
        "mobile": "9876543210",
        "email": "A.Kumar@Example.com",
        "dob": "1982-03-14",
        "age": 43,
        "adhar": "1234 5678 9012",
        "category": "40+",
        "playerImageUrl": "https://img.test/photo.jpg",
        "validDocumentUrl": "https://img.test/id.jpg",
    }
    payload.update(overrides)
    return payload


def test_registration_scenario(client):
    r = client.post("/api/players", json=_draft())
    assert r.status_code == 201
    created = r.json()
    player_id = created["id"]
    assert created["_id"] == player_id
    assert created["paymentStatus"] is False
    assert created["registrationState"] == "DRAFT"
    assert created["playingStyle"] == "UNKNOWN"
    assert created["email"] == "a.kumar@example.com"
    assert created["createdAt"] is not None

    f = client.patch(
        f"/api/players/{player_id}/details",
        json={
            "paymentStatus": True,
            "upiOrBarcode": "TXN123",
            "paymentScreenshotUrl": "https://img.test/receipt.jpg",
            "playingStyle": "OFFENSIVE",
            "achievements": "District champion 2019",
        },
    )
    assert f.status_code == 200
    data = f.json()
    assert data["paymentStatus"] is True
    assert data["upiOrBarcode"] == "TXN123"
    assert data["name"] == "A Kumar"
    assert data["registrationState"] == "FINALIZED"

    lst = client.get("/api/players", params={"paymentStatus": "true"}, headers=ADMIN)
    assert lst.status_code == 200
    assert player_id in [p["id"] for p in lst.json()["results"]]

    d = client.delete(f"/api/players/{player_id}", headers=ADMIN)
    assert d.status_code == 200
    assert d.json() == {"message": "Deleted successfully"}

    g = client.get(f"/api/players/{player_id}", headers=ADMIN)
    assert g.status_code == 404
    assert g.json() == {"error": "Player not found"}


def test_create_ignores_payment_status_and_assigns_unique_ids(client):
    ids = set()
    for i in range(3):
        r = client.post("/api/players", json=_draft(mobile=f"98765432{i:02d}", paymentStatus=True))
        assert r.status_code == 201
        assert r.json()["paymentStatus"] is False
        ids.add(r.json()["id"])
    assert len(ids) == 3


def test_create_accepts_missing_optional_fields(client):
    payload = _draft()
    for key in ("email", "adhar", "validDocumentUrl"):
        payload.pop(key)

    r = client.post("/api/players", json=payload)
    assert r.status_code == 201
    assert r.json()["email"] is None
    assert r.json()["validDocumentUrl"] is None


@pytest.mark.parametrize("missing", ["name", "mobile", "dob", "age", "category", "playerImageUrl"])
def test_create_requires_fields(client, missing):
    payload = _draft()
    payload.pop(missing)

    r = client.post("/api/players", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert missing in body["error"]
    assert any(f["field"] == missing for f in body["fields"])


def test_create_rejects_unknown_category(client):
    r = client.post("/api/players", json=_draft(category="60+"))
    assert r.status_code == 400
    assert any(f["field"] == "category" for f in r.json()["fields"])


def test_create_rejects_blank_name(client):
    r = client.post("/api/players", json=_draft(name="   "))
    assert r.status_code == 400


def test_finalize_only_writes_detail_fields(client):
    player_id = client.post("/api/players", json=_draft()).json()["id"]

    r = client.patch(
        f"/api/players/{player_id}/details",
        json={
            "upiOrBarcode": "TXN999",
            "paymentStatus": True,
            "name": "Someone Else",
            "category": "20-30",
            "mobile": "0000000000",
        },
    )
    assert r.status_code == 200
    data = r.json()
    assert data["upiOrBarcode"] == "TXN999"
    assert data["name"] == "A Kumar"
    assert data["category"] == "40+"
    assert data["mobile"] == "9876543210"
    # Not part of this payload, so left as created.
    assert data["playingStyle"] == "UNKNOWN"
    assert data["validDocumentUrl"] == "https://img.test/id.jpg"


def test_finalize_is_safe_to_retry(client):
    player_id = client.post("/api/players", json=_draft()).json()["id"]
    payload = {"upiOrBarcode": "TXN1", "paymentStatus": True, "remark": "paid at desk"}

    first = client.patch(f"/api/players/{player_id}/details", json=payload).json()
    second = client.patch(f"/api/players/{player_id}/details", json=payload).json()
    for key in ("upiOrBarcode", "paymentStatus", "remark", "name"):
        assert first[key] == second[key]

    third = client.patch(f"/api/players/{player_id}/details", json={"upiOrBarcode": "TXN2"})
    assert third.json()["upiOrBarcode"] == "TXN2"


def test_finalize_unknown_id(client):
    r = client.patch("/api/players/does-not-exist/details", json={"upiOrBarcode": "TXN1"})
    assert r.status_code == 404
    assert r.json() == {"error": "Player record not found."}


def test_finalize_cannot_revert_paid_record(client):
    player_id = client.post("/api/players", json=_draft()).json()["id"]
    client.patch(f"/api/players/{player_id}/details", json={"paymentStatus": True, "upiOrBarcode": "T"})

    r = client.patch(f"/api/players/{player_id}/details", json={"paymentStatus": False})
    assert r.status_code == 400

    g = client.get(f"/api/players/{player_id}", headers=ADMIN)
    assert g.json()["paymentStatus"] is True


def test_finalize_rejects_bad_playing_style(client):
    player_id = client.post("/api/players", json=_draft()).json()["id"]
    r = client.patch(f"/api/players/{player_id}/details", json={"playingStyle": "AGGRESSIVE"})
    assert r.status_code == 400


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
