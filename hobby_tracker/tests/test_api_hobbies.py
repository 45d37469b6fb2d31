"""Tests for /api/hobbies: CRUD, aggregates and ownership over HTTP."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session as DBSession


def create_hobby(client, headers=None, **fields):
    response = client.post("/api/hobbies", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["hobby"]


class TestListHobbies:
    def test_unauthenticated_is_401(self, client):
        assert client.get("/api/hobbies").status_code == 401

    def test_empty_list(self, auth_client):
        response = auth_client.get("/api/hobbies")
        assert response.status_code == 200
        assert response.json() == {"hobbies": []}

    def test_new_hobby_has_zero_aggregates(self, auth_client):
        create_hobby(auth_client, name="Painting")
        [hobby] = auth_client.get("/api/hobbies").json()["hobbies"]
        assert hobby["name"] == "Painting"
        assert hobby["total_time_spent"] == 0
        assert hobby["session_count"] == 0

    def test_guitar_scenario(self, auth_client):
        hobby = create_hobby(auth_client, name="Guitar")
        for duration, date in [(30, "2024-01-01"), (45, "2024-01-02")]:
            response = auth_client.post(
                f"/api/hobbies/{hobby['id']}/sessions",
                json={"duration": duration, "date": date},
            )
            assert response.status_code == 201

        hobbies = auth_client.get("/api/hobbies").json()["hobbies"]
        assert len(hobbies) == 1
        assert hobbies[0]["name"] == "Guitar"
        assert hobbies[0]["total_time_spent"] == 75
        assert hobbies[0]["session_count"] == 2

    def test_newest_first(self, auth_client):
        create_hobby(auth_client, name="Old")
        create_hobby(auth_client, name="New")
        names = [h["name"] for h in auth_client.get("/api/hobbies").json()["hobbies"]]
        assert names == ["New", "Old"]


class TestCreateHobby:
    def test_created_with_all_fields(self, auth_client):
        response = auth_client.post(
            "/api/hobbies",
            json={"name": "Guitar", "description": "Fingerstyle", "category": "Music"},
        )
        assert response.status_code == 201
        hobby = response.json()["hobby"]
        assert hobby["name"] == "Guitar"
        assert hobby["description"] == "Fingerstyle"
        assert hobby["category"] == "Music"
        assert {"id", "user_id", "created_at", "updated_at"} <= hobby.keys()

    def test_optional_fields_are_null(self, auth_client):
        hobby = create_hobby(auth_client, name="Running")
        assert hobby["description"] is None
        assert hobby["category"] is None

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"description": "no name"}])
    def test_missing_name_is_400(self, auth_client, body):
        response = auth_client.post("/api/hobbies", json=body)
        assert response.status_code == 400
        assert response.json() == {"detail": "Name is required"}
        assert auth_client.get("/api/hobbies").json()["hobbies"] == []

    def test_unauthenticated_is_401(self, client):
        assert client.post("/api/hobbies", json={"name": "Guitar"}).status_code == 401


class TestGetHobby:
    def test_get_own_hobby(self, auth_client):
        hobby = create_hobby(auth_client, name="Guitar")
        response = auth_client.get(f"/api/hobbies/{hobby['id']}")
        assert response.status_code == 200
        assert response.json()["hobby"]["name"] == "Guitar"

    def test_missing_is_404(self, auth_client):
        response = auth_client.get("/api/hobbies/999")
        assert response.status_code == 404
        assert response.json() == {"detail": "Hobby not found"}

    def test_non_integer_id_is_400(self, auth_client):
        assert auth_client.get("/api/hobbies/abc").status_code == 400


class TestUpdateHobby:
    def test_update(self, auth_client):
        hobby = create_hobby(auth_client, name="Guitar", category="Music")
        response = auth_client.put(
            f"/api/hobbies/{hobby['id']}",
            json={"name": "Bass", "description": "Four strings"},
        )
        assert response.status_code == 200
        updated = response.json()["hobby"]
        assert updated["name"] == "Bass"
        assert updated["description"] == "Four strings"
        assert updated["category"] is None

    def test_missing_is_404(self, auth_client):
        assert auth_client.put("/api/hobbies/999", json={"name": "X"}).status_code == 404

    def test_empty_name_is_400(self, auth_client):
        hobby = create_hobby(auth_client, name="Guitar")
        response = auth_client.put(f"/api/hobbies/{hobby['id']}", json={"name": ""})
        assert response.status_code == 400


class TestDeleteHobby:
    def test_delete(self, auth_client):
        hobby = create_hobby(auth_client, name="Guitar")
        response = auth_client.delete(f"/api/hobbies/{hobby['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert auth_client.get(f"/api/hobbies/{hobby['id']}").status_code == 404

    def test_delete_twice_is_404(self, auth_client):
        hobby = create_hobby(auth_client, name="Guitar")
        auth_client.delete(f"/api/hobbies/{hobby['id']}")
        assert auth_client.delete(f"/api/hobbies/{hobby['id']}").status_code == 404


class TestOwnership:
    """Another user's hobby must be indistinguishable from a missing one."""

    @pytest.fixture
    def owner_headers(self, app):
        return {"Authorization": f"Bearer {app.state.tokens.issue(1, 'admin')}"}

    @pytest.fixture
    def owned_hobby(self, client, owner_headers):
        return create_hobby(client, headers=owner_headers, name="Private")

    def test_get_is_404(self, client, owned_hobby, second_user_headers):
        response = client.get(f"/api/hobbies/{owned_hobby['id']}", headers=second_user_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "Hobby not found"}

    def test_update_is_404(self, client, owned_hobby, owner_headers, second_user_headers):
        response = client.put(
            f"/api/hobbies/{owned_hobby['id']}",
            json={"name": "Hijacked"},
            headers=second_user_headers,
        )
        assert response.status_code == 404
        hobby = client.get(f"/api/hobbies/{owned_hobby['id']}", headers=owner_headers).json()["hobby"]
        assert hobby["name"] == "Private"

    def test_delete_is_404(self, client, owned_hobby, owner_headers, second_user_headers):
        response = client.delete(f"/api/hobbies/{owned_hobby['id']}", headers=second_user_headers)
        assert response.status_code == 404
        assert client.get(f"/api/hobbies/{owned_hobby['id']}", headers=owner_headers).status_code == 200

    def test_not_in_other_users_list(self, client, owned_hobby, second_user_headers):
        response = client.get("/api/hobbies", headers=second_user_headers)
        assert response.json() == {"hobbies": []}


class TestTimestamps:
    def test_same_utc_format_on_every_endpoint(self, auth_client):
        created = create_hobby(auth_client, name="Guitar")
        assert created["created_at"].endswith("Z")
        assert created["updated_at"].endswith("Z")

        fetched = auth_client.get(f"/api/hobbies/{created['id']}").json()["hobby"]
        listed = auth_client.get("/api/hobbies").json()["hobbies"][0]
        for hobby in (fetched, listed):
            assert hobby["created_at"] == created["created_at"]
            assert hobby["updated_at"] == created["updated_at"]

        updated = auth_client.put(f"/api/hobbies/{created['id']}", json={"name": "Bass"}).json()["hobby"]
        assert updated["updated_at"].endswith("Z")
        refetched = auth_client.get(f"/api/hobbies/{created['id']}").json()["hobby"]
        assert refetched["updated_at"] == updated["updated_at"]


class TestStorageFailure:
    def test_storage_error_is_generic_500(self, auth_client, monkeypatch, caplog):
        def failing_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(DBSession, "execute", failing_execute)
        response = auth_client.get("/api/hobbies")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
        assert "database is locked" not in response.text
        assert "Storage failure while listing hobbies" in caplog.text
