"""
HTTP-level tests for the AutoApply API.

Each test gets a fresh in-memory database and a dict-backed document
cache; Stripe is replaced by a stub entitlement service.

Run with: cd backend && pytest tests/test_api.py -v
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from autoapply.api.deps import get_entitlement_service
from autoapply.auth import COOKIE_NAME, create_session_token
from autoapply.database import Base, get_db
from autoapply.errors import PersistenceError
from autoapply.main import app
from autoapply.schemas import CurrentUser, Entitlement
from autoapply.services.documents import GeneratedDocumentCache, get_document_cache
from autoapply.services.persistence import SqlJobApplicationStore


class StubEntitlementService:
    def __init__(self, subscribed: bool = True):
        self.subscribed = subscribed

    async def check_entitlement(self, user):
        return Entitlement(subscribed=self.subscribed, subscription_id="sub_1" if self.subscribed else None)

    async def create_checkout(self, user, origin=None):
        return f"https://checkout.test/{user.id}"


@pytest_asyncio.fixture
async def client(mock_redis):
    from autoapply import models  # noqa: F401

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    documents = GeneratedDocumentCache(redis_url="redis://localhost:6379", ttl=60)
    documents.redis = mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_document_cache] = lambda: documents
    app.dependency_overrides[get_entitlement_service] = lambda: StubEntitlementService()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    await engine.dispose()


async def _sign_up(client, email: str) -> dict:
    response = await client.post(
        "/auth/signup", json={"email": email, "password": "correct-horse", "display_name": email.split("@")[0]}
    )
    assert response.status_code == 201
    user = CurrentUser(**response.json())
    client.cookies.clear()
    return {"Authorization": f"Bearer {create_session_token(user)}"}


@pytest_asyncio.fixture
async def alice_headers(client):
    return await _sign_up(client, "alice@example.com")


@pytest_asyncio.fixture
async def bob_headers(client):
    return await _sign_up(client, "bob@example.com")


async def _create(client, headers, **fields) -> dict:
    body = {"title": "Backend Engineer", "company": "Acme", **fields}
    response = await client.post("/applications", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy"}


class TestAuth:
    """Sign-up, sign-in and session identity."""

    @pytest.mark.asyncio
    async def test_login_sets_session_cookie(self, client, alice_headers):
        response = await client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "correct-horse"}
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.headers["set-cookie"].startswith(f"{COOKIE_NAME}=")

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, alice_headers):
        response = await client.post("/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_duplicate_signup_rejected(self, client, alice_headers):
        response = await client.post(
            "/auth/signup", json={"email": "Alice@Example.com", "password": "another-pass"}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_short_password_rejected(self, client):
        response = await client.post("/auth/signup", json={"email": "c@example.com", "password": "short"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_me(self, client, alice_headers):
        response = await client.get("/auth/me", headers=alice_headers)
        assert response.json()["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_me_requires_session(self, client):
        assert (await client.get("/auth/me")).status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_anonymous(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestApplicationsAPI:
    """Board CRUD and status moves over HTTP."""

    @pytest.mark.asyncio
    async def test_anonymous_reads_empty_and_cannot_write(self, client):
        assert (await client.get("/applications")).json() == []

        response = await client.post("/applications", json={"title": "Engineer", "company": "Acme"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_defaults(self, client, alice_headers):
        created = await _create(client, alice_headers)

        assert created["status"] == "To Apply"
        assert created["date_added"] is not None
        assert created["date_applied"] is None
        assert created["fit_score"] is None

    @pytest.mark.asyncio
    async def test_create_blank_company_is_422(self, client, alice_headers):
        response = await client.post(
            "/applications", json={"title": "Engineer", "company": "  "}, headers=alice_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_move_flow(self, client, alice_headers):
        created = await _create(client, alice_headers)
        app_id = created["id"]

        applied = (await client.post(f"/applications/{app_id}/move", json={"status": "Applied"}, headers=alice_headers)).json()
        assert applied["status"] == "Applied"
        assert applied["date_applied"] is not None

        listed = (await client.get("/applications", params={"status": "Applied"}, headers=alice_headers)).json()
        assert [a["id"] for a in listed] == [app_id]

        offered = (await client.post(f"/applications/{app_id}/move", json={"status": "Offer"}, headers=alice_headers)).json()
        assert offered["status"] == "Offer"
        assert offered["date_applied"] == applied["date_applied"]

    @pytest.mark.asyncio
    async def test_move_unknown_status_is_422(self, client, alice_headers):
        created = await _create(client, alice_headers)
        response = await client.post(
            f"/applications/{created['id']}/move", json={"status": "Ghosted"}, headers=alice_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_patch_status_does_not_stamp(self, client, alice_headers):
        created = await _create(client, alice_headers)

        response = await client.patch(
            f"/applications/{created['id']}", json={"status": "Applied", "notes": "emailed"}, headers=alice_headers
        )

        body = response.json()
        assert body["status"] == "Applied"
        assert body["notes"] == "emailed"
        assert body["date_applied"] is None

    @pytest.mark.asyncio
    async def test_board_lists_every_column(self, client, alice_headers):
        await _create(client, alice_headers)

        columns = (await client.get("/applications/board", headers=alice_headers)).json()["columns"]

        assert [c["status"] for c in columns] == ["To Apply", "Applied", "Interview", "Offer", "Rejected"]
        assert len(columns[0]["applications"]) == 1

    @pytest.mark.asyncio
    async def test_delete_twice(self, client, alice_headers):
        created = await _create(client, alice_headers)
        url = f"/applications/{created['id']}"

        assert (await client.delete(url, headers=alice_headers)).status_code == 204
        assert (await client.delete(url, headers=alice_headers)).status_code == 204
        assert (await client.get(url, headers=alice_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_other_user_cannot_touch_record(self, client, alice_headers, bob_headers):
        created = await _create(client, alice_headers)
        url = f"/applications/{created['id']}"

        assert (await client.get(url, headers=bob_headers)).status_code == 404
        assert (await client.patch(url, json={"notes": "mine"}, headers=bob_headers)).status_code == 404
        assert (await client.post(f"{url}/move", json={"status": "Rejected"}, headers=bob_headers)).status_code == 404
        assert (await client.delete(url, headers=bob_headers)).status_code == 404

        still = (await client.get(url, headers=alice_headers)).json()
        assert still["status"] == "To Apply"
        assert still["notes"] == ""

    @pytest.mark.asyncio
    async def test_storage_failure_is_503_and_not_applied(self, client, alice_headers):
        created = await _create(client, alice_headers)

        with patch.object(SqlJobApplicationStore, "update", AsyncMock(side_effect=PersistenceError("down"))):
            response = await client.post(
                f"/applications/{created['id']}/move", json={"status": "Applied"}, headers=alice_headers
            )
        assert response.status_code == 503

        current = (await client.get(f"/applications/{created['id']}", headers=alice_headers)).json()
        assert current["status"] == "To Apply"

    @pytest.mark.asyncio
    async def test_score_from_profile(self, client, alice_headers):
        created = await _create(client, alice_headers, description="python django kubernetes terraform")
        await client.post("/profile/skills", json={"skill": "python"}, headers=alice_headers)
        await client.post("/profile/skills", json={"skill": "django"}, headers=alice_headers)

        response = await client.post(f"/applications/{created['id']}/score", json={}, headers=alice_headers)

        assert response.json()["fit_score"] == 70


class TestProfileAPI:
    @pytest.mark.asyncio
    async def test_profile_created_on_first_access(self, client, alice_headers):
        profile = (await client.get("/profile", headers=alice_headers)).json()

        assert profile["email"] == "alice@example.com"
        assert profile["experiences"] == []
        assert profile["completeness"] == 17

    @pytest.mark.asyncio
    async def test_update_profile(self, client, alice_headers):
        response = await client.put(
            "/profile", json={"name": "Alice", "title": "Engineer"}, headers=alice_headers
        )
        assert response.json()["name"] == "Alice"
        assert response.json()["completeness"] == 50

    @pytest.mark.asyncio
    async def test_skill_dedup(self, client, alice_headers):
        await client.post("/profile/skills", json={"skill": "Python"}, headers=alice_headers)
        skills = (await client.post("/profile/skills", json={"skill": "Python"}, headers=alice_headers)).json()

        assert skills == ["Python"]

    @pytest.mark.asyncio
    async def test_remove_skill_containing_slash(self, client, alice_headers):
        await client.post("/profile/skills", json={"skill": "CI/CD"}, headers=alice_headers)
        await client.post("/profile/skills", json={"skill": "C/C++"}, headers=alice_headers)

        response = await client.delete("/profile/skills/CI/CD", headers=alice_headers)

        assert response.status_code == 200
        assert response.json() == ["C/C++"]
        assert (await client.get("/profile", headers=alice_headers)).json()["skills"] == ["C/C++"]

    @pytest.mark.asyncio
    async def test_experience_lifecycle(self, client, alice_headers):
        created = (
            await client.post(
                "/profile/experiences", json={"company": "Acme", "title": "Dev"}, headers=alice_headers
            )
        ).json()

        patched = await client.patch(
            f"/profile/experiences/{created['id']}", json={"title": "Senior Dev"}, headers=alice_headers
        )
        assert patched.json()["title"] == "Senior Dev"

        deleted = await client.delete(f"/profile/experiences/{created['id']}", headers=alice_headers)
        assert deleted.status_code == 204
        missing = await client.delete(f"/profile/experiences/{created['id']}", headers=alice_headers)
        assert missing.status_code == 404


class TestAnalyzerAPI:
    @pytest.mark.asyncio
    async def test_fit_score(self, client):
        response = await client.post(
            "/analyzer/fit-score",
            json={"job_text": "javascript react", "candidate_text": "I know javascript and react well"},
        )
        assert response.json() == {"score": 100}

    @pytest.mark.asyncio
    async def test_fit_score_empty_input(self, client):
        response = await client.post("/analyzer/fit-score", json={"job_text": "", "candidate_text": "x"})
        assert response.json() == {"score": 50}

    @pytest.mark.asyncio
    async def test_analyze_with_pasted_resume(self, client):
        response = await client.post(
            "/analyzer/analyze",
            json={"job_text": "React engineer", "candidate_text": "react and typescript engineer"},
        )
        body = response.json()
        assert body["score"] == 100
        assert body["band"] == "strong"
        assert "react" in body["strengths"]

    @pytest.mark.asyncio
    async def test_analyze_requires_resume_or_experience(self, client, alice_headers):
        response = await client.post("/analyzer/analyze", json={"job_text": "React engineer"}, headers=alice_headers)
        assert response.status_code == 422


class TestDocumentsAPI:
    @pytest.mark.asyncio
    async def test_save_and_get(self, client, alice_headers):
        created = await _create(client, alice_headers)
        url = f"/documents/{created['id']}/resume"

        assert (await client.get(url, headers=alice_headers)).status_code == 404

        await client.put(url, json={"content": "# Alice"}, headers=alice_headers)
        response = await client.get(url, headers=alice_headers)

        assert response.json() == {"application_id": created["id"], "kind": "resume", "content": "# Alice"}

    @pytest.mark.asyncio
    async def test_other_users_application(self, client, alice_headers, bob_headers):
        created = await _create(client, alice_headers)
        response = await client.put(
            f"/documents/{created['id']}/cover_letter", json={"content": "Dear"}, headers=bob_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_application_discards_documents(self, client, alice_headers, mock_redis):
        created = await _create(client, alice_headers)
        await client.put(f"/documents/{created['id']}/resume", json={"content": "r"}, headers=alice_headers)

        await client.delete(f"/applications/{created['id']}", headers=alice_headers)

        assert mock_redis.data == {}


class TestBillingAPI:
    @pytest.mark.asyncio
    async def test_subscription(self, client, alice_headers):
        response = await client.get("/billing/subscription", headers=alice_headers)
        assert response.json()["subscribed"] is True

    @pytest.mark.asyncio
    async def test_checkout(self, client, alice_headers):
        response = await client.post("/billing/checkout", headers=alice_headers)
        assert response.json()["url"].startswith("https://checkout.test/")

    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        assert (await client.get("/billing/subscription")).status_code == 401


class TestStatsAPI:
    @pytest.mark.asyncio
    async def test_stats(self, client, alice_headers):
        first = await _create(client, alice_headers)
        await _create(client, alice_headers)
        await client.post(f"/applications/{first['id']}/move", json={"status": "Interview"}, headers=alice_headers)

        stats = (await client.get("/stats", headers=alice_headers)).json()

        assert stats["total"] == 2
        assert stats["applied"] == 1
        assert stats["interviewing"] == 1
        assert stats["by_status"]["To Apply"] == 1
        assert stats["profile_completeness"] == 17


class TestMetricsMiddleware:
    """Requests to included routers pass through the Prometheus middleware."""

    @pytest.mark.asyncio
    async def test_router_route_is_served_and_counted(self, client):
        response = await client.post(
            "/analyzer/fit-score", json={"job_text": "javascript react", "candidate_text": "javascript react"}
        )
        assert response.status_code == 200

        metrics = (await client.get("/metrics")).text
        assert 'http_requests_total{method="POST",endpoint="/analyzer/fit-score",status="200"}' in metrics

    @pytest.mark.asyncio
    async def test_every_router_is_reachable(self, client, alice_headers):
        for path in ["/applications", "/applications/board", "/profile", "/stats", "/auth/me", "/billing/subscription"]:
            response = await client.get(path, headers=alice_headers)
            assert response.status_code == 200, path
