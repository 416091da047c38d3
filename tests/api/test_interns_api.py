"""
API tests for intern records
"""
import pytest

from tests.factories import intern_fields, login


def pdf(name: str):
    return (name, b"%PDF-1.4", "application/pdf")


@pytest.fixture
def as_staff(client, notifier, staff_user, hr_user):
    login(client, notifier, "IT")
    return client


@pytest.fixture
def with_s100(as_staff):
    response = as_staff.post("/api/interns", data=intern_fields(), files={"letter": pdf("letter.pdf")})
    assert response.status_code == 201, response.text
    return as_staff


class TestCreate:
    """Test POST /api/interns"""

    def test_create(self, as_staff):
        """Test a multipart form creates the record with its documents"""
        response = as_staff.post(
            "/api/interns",
            data=intern_fields(),
            files={"letter": pdf("letter.pdf"), "profile_picture": ("me.jpg", b"\xff\xd8", "image/jpeg")},
        )

        assert response.status_code == 201
        intern = response.json()["intern"]
        assert intern["id_number"] == "S100"
        assert intern["attachments"] == ["letter.pdf"]
        assert intern["profile_picture"] == "me.jpg"
        assert intern["status"] == "Active"
        assert intern["comments"] == []
        assert intern["start_date"] == "2024-01-01"
        assert intern["added_by_staff_email"] == "it.staff@org.com"

    def test_validation_lists_every_field(self, as_staff):
        """Test all missing fields come back in one 422"""
        fields = intern_fields(full_name="")
        del fields["receipt_number"]
        response = as_staff.post("/api/interns", data=fields)

        assert response.status_code == 422
        errors = response.json()["error"]["details"]["errors"]
        assert {e["field"] for e in errors} == {"full_name", "receipt_number"}

    def test_duplicate(self, with_s100):
        """Test a duplicate ID number is a 409"""
        response = with_s100.post("/api/interns", data=intern_fields(full_name="Other"))
        assert response.status_code == 409
        assert with_s100.get("/api/interns/S100").json()["full_name"] == "Jane Wanjiru"

    def test_file_too_large(self, as_staff, settings):
        """Test oversized uploads are rejected before anything is stored"""
        settings.MAX_UPLOAD_BYTES = 4
        response = as_staff.post("/api/interns", data=intern_fields(), files={"letter": pdf("letter.pdf")})

        assert response.status_code == 422
        assert response.json()["error"]["details"]["errors"][0]["field"] == "letter"
        assert as_staff.get("/api/interns/S100").status_code == 404

    def test_create_json_body_rejected(self, as_staff):
        """Test records are only created from form bodies"""
        response = as_staff.post("/api/interns", json=intern_fields())
        assert response.status_code == 415
        assert as_staff.get("/api/interns/S100").status_code == 404

    def test_requires_session(self, client):
        """Test anonymous requests are refused"""
        assert client.post("/api/interns", data=intern_fields()).status_code == 401

    def test_hr_cannot_create(self, client, notifier, staff_user, hr_user):
        """Test HR sessions cannot add interns"""
        login(client, notifier, "Human Resources")
        assert client.post("/api/interns", data=intern_fields()).status_code == 403


class TestUpdate:
    """Test PUT /api/interns/{id_number}"""

    def test_documents_are_appended(self, with_s100):
        """Test uploading an ID copy keeps the existing letter"""
        response = with_s100.put("/api/interns/S100", files={"id_copy": ("id.png", b"png", "image/png")})

        assert response.status_code == 200
        assert response.json()["intern"]["attachments"] == ["letter.pdf", "id.png"]

    def test_partial_field_update(self, with_s100):
        """Test a single field can be changed"""
        response = with_s100.put("/api/interns/S100", data={"institution": "Strathmore"})

        intern = response.json()["intern"]
        assert response.status_code == 200
        assert intern["institution"] == "Strathmore"
        assert intern["full_name"] == "Jane Wanjiru"
        assert intern["attachments"] == ["letter.pdf"]
        assert intern["updated_by_staff_email"] == "it.staff@org.com"

    def test_empty_update(self, with_s100):
        """Test an update without fields or files changes nothing"""
        response = with_s100.put("/api/interns/S100")
        assert response.status_code == 200
        assert response.json()["intern"]["attachments"] == ["letter.pdf"]

    def test_json_body_rejected(self, with_s100):
        """Test a JSON body is refused instead of being applied as an empty update"""
        response = with_s100.put("/api/interns/S100", json={"full_name": "Changed Name", "bogus": 1})

        assert response.status_code == 415
        assert response.json()["error"]["code"] == "UnsupportedMediaTypeException"
        intern = with_s100.get("/api/interns/S100").json()
        assert intern["full_name"] == "Jane Wanjiru"
        assert intern["updated_by_staff_email"] is None

    def test_unknown_form_field_rejected(self, with_s100):
        """Test unknown form fields are reported"""
        response = with_s100.put("/api/interns/S100", data={"full_name": "Changed Name", "bogus": "1"})

        assert response.status_code == 422
        assert [e["field"] for e in response.json()["error"]["details"]["errors"]] == ["bogus"]
        assert with_s100.get("/api/interns/S100").json()["full_name"] == "Jane Wanjiru"

    def test_unknown_intern(self, as_staff):
        """Test updating a missing record is a 404"""
        assert as_staff.put("/api/interns/S404", data={"full_name": "X"}).status_code == 404


class TestStatusAndComments:
    """Test PATCH status and POST comments"""

    def test_hr_changes_status(self, with_s100, notifier):
        """Test HR sets status and an invalid value keeps the previous one"""
        login(with_s100, notifier, "Human Resources")

        response = with_s100.patch("/api/interns/S100/status", json={"status": "Suspended"})
        assert response.status_code == 200
        assert response.json()["intern"]["status"] == "Suspended"

        response = with_s100.patch("/api/interns/S100/status", json={"status": "Bogus"})
        assert response.status_code == 422
        assert with_s100.get("/api/interns/S100").json()["status"] == "Suspended"

    def test_staff_cannot_change_status(self, with_s100):
        """Test Staff sessions cannot change status"""
        assert with_s100.patch("/api/interns/S100/status", json={"status": "Expelled"}).status_code == 403

    def test_comments_accumulate(self, with_s100, notifier):
        """Test two comments are both kept, authored by the session user"""
        login(with_s100, notifier, "Human Resources")

        with_s100.post("/api/interns/S100/comments", json={"text": "Great work"})
        response = with_s100.post("/api/interns/S100/comments", json={"text": "Great work"})

        comments = response.json()["intern"]["comments"]
        assert response.status_code == 200
        assert len(comments) == 2
        assert all(c["author"] == "HR" and c["author_email"] == "hr@org.com" for c in comments)

    def test_blank_comment(self, with_s100):
        """Test empty comment text is a 422"""
        assert with_s100.post("/api/interns/S100/comments", json={"text": ""}).status_code == 422


class TestReadAndDelete:
    """Test listing, lookup and deletion"""

    def test_list(self, with_s100):
        """Test the list contains the department's interns"""
        response = with_s100.get("/api/interns")
        assert response.status_code == 200
        assert [i["id_number"] for i in response.json()] == ["S100"]

    def test_delete(self, with_s100, blob_store):
        """Test deletion removes the record and releases its files"""
        response = with_s100.delete("/api/interns/S100")

        assert response.status_code == 200
        assert blob_store.released == ["letter.pdf"]
        assert with_s100.get("/api/interns/S100").status_code == 404

    def test_other_department_forbidden(self, with_s100, notifier, user_repo, other_staff_user):
        """Test Staff of another department cannot read or delete the record"""
        login(with_s100, notifier, "Finance")

        assert with_s100.get("/api/interns/S100").status_code == 403
        assert with_s100.delete("/api/interns/S100").status_code == 403
        assert with_s100.get("/api/interns").json() == []
