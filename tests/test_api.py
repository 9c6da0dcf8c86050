"""End-to-end tests for the HTTP endpoints"""

from docgen.main import app
from docgen.services.file_types import FILE_TYPES
from docgen.validation.composite import CONVERSION_MESSAGE, MANDATORY_MESSAGE
from docgen.validation.middleware import UploadLimits, get_upload_limits
from helpers import b64, docx_text

PROBLEM_JSON = "application/problem+json"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_upload_limit_resolved_at_startup(client):
    assert app.state.upload_limits == UploadLimits(max_file_size=25 * 1024 * 1024)


def test_file_types(client):
    response = client.get("/api/v1/fileTypes")

    assert response.status_code == 200
    assert response.json() == {"dictionary": FILE_TYPES}


class TestInlineRender:
    def test_render_txt_template(self, client, fake_storage):
        response = client.post("/api/v1/template/render", json={
            "data": {"name": "Ada"},
            "options": {"convertTo": "txt", "reportName": "greeting-{{ d.name }}"},
            "template": {"content": b64(b"Hello {{ d.name }}"), "encodingType": "base64", "fileType": "txt"},
        })

        assert response.status_code == 200
        assert response.content == b"Hello Ada"
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["content-disposition"] == 'attachment; filename="greeting-Ada.txt"'
        uid = response.headers["x-report-id"]
        assert fake_storage.objects[f"reports/{uid}/greeting-Ada.txt"] == b"Hello Ada"

    def test_render_docx_template(self, client, template_payload):
        response = client.post("/api/v1/template/render", json=template_payload)

        assert response.status_code == 200
        assert "Hello Ada" in docx_text(response.content)

    def test_hex_encoded_template(self, client):
        response = client.post("/api/v1/template/render", json={
            "data": [1, 2, 3],
            "options": {"convertTo": "txt"},
            "template": {"content": b"{{ d|sum }}".hex(), "encodingType": "hex", "fileType": "txt"},
        })

        assert response.status_code == 200
        assert response.content == b"6"

    def test_validation_failure_is_a_single_problem_response(self, client):
        response = client.post("/api/v1/template/render", json={
            "data": {"a": 1},
            "template": {"content": "", "encodingType": "base64", "fileType": "docx"},
        })

        assert response.status_code == 422
        assert response.headers["content-type"].startswith(PROBLEM_JSON)
        body = response.json()
        assert body["status"] == 422
        assert body["detail"] == "Validation failed"
        assert body["errors"] == [{"message": MANDATORY_MESSAGE}]

    def test_every_base_violation_is_listed(self, client):
        response = client.post("/api/v1/template/render", json={
            "data": [],
            "options": {"convertTo": "exe"},
            "formatters": "{oops",
        })

        assert response.status_code == 422
        assert len(response.json()["errors"]) == 3

    def test_size_limit_uses_configured_value(self, client, template_payload):
        app.dependency_overrides[get_upload_limits] = lambda: UploadLimits(max_file_size=10)

        response = client.post("/api/v1/template/render", json=template_payload)

        assert response.status_code == 422
        assert response.json()["errors"] == [{
            "value": "Template document too large",
            "message": "Template exceeds size limit of 10B.",
        }]

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/v1/template/render", content=b"{not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith(PROBLEM_JSON)

    def test_template_error_is_reported(self, client):
        response = client.post("/api/v1/template/render", json={
            "data": {"a": 1},
            "options": {"convertTo": "txt"},
            "template": {"content": b64(b"{% for %}"), "encodingType": "base64", "fileType": "txt"},
        })

        assert response.status_code == 422
        assert response.json()["errorType"] == "template_syntax_error"


class TestStoredTemplates:
    def _upload(self, client, filename, content):
        return client.post("/api/v1/template", files={"file": (filename, content, "text/plain")})

    def test_upload_and_render(self, client, fake_storage):
        upload = self._upload(client, "letter.txt", b"Dear {{ name }}")
        assert upload.status_code == 201
        body = upload.json()
        assert body["fileType"] == "txt"
        assert body["size"] == len(b"Dear {{ name }}")

        response = client.post(
            f"/api/v1/template/{body['templateId']}/render",
            json={"data": {"name": "Bob"}, "options": {"convertTo": "txt"}},
        )

        assert response.status_code == 200
        assert response.content == b"Dear Bob"

    def test_upload_rejects_unknown_type(self, client):
        response = self._upload(client, "script.exe", b"MZ")

        assert response.status_code == 422
        assert response.json()["errors"] == [{"value": "exe", "message": "Invalid value `template.fileType`."}]

    def test_upload_respects_size_limit(self, client):
        app.dependency_overrides[get_upload_limits] = lambda: UploadLimits(max_file_size=4)

        response = self._upload(client, "letter.txt", b"far too long")

        assert response.status_code == 422
        assert response.json()["errors"][0]["message"] == "Template exceeds size limit of 4B."

    def test_render_validates_request_body(self, client):
        template_id = self._upload(client, "letter.txt", b"x").json()["templateId"]

        response = client.post(f"/api/v1/template/{template_id}/render", json={"data": []})

        assert response.status_code == 422
        assert response.json()["errors"] == [{"value": [], "message": "Invalid value `data`."}]

    def test_render_checks_conversion_against_stored_type(self, client):
        template_id = self._upload(client, "feed.xml", b"<a>{{ d.v }}</a>").json()["templateId"]

        response = client.post(
            f"/api/v1/template/{template_id}/render",
            json={"data": {"v": 1}, "options": {"convertTo": "docx"}},
        )

        assert response.status_code == 422
        assert response.json()["errors"] == [{"values": ["xml", "docx"], "message": CONVERSION_MESSAGE}]

    def test_unknown_template(self, client):
        response = client.post(
            "/api/v1/template/00000000-0000-0000-0000-000000000000/render", json={"data": {"a": 1}}
        )

        assert response.status_code == 404
        assert response.json()["errorType"] == "template_not_found"

    def test_delete_template(self, client, fake_storage):
        template_id = self._upload(client, "letter.txt", b"x").json()["templateId"]

        assert client.delete(f"/api/v1/template/{template_id}").status_code == 200
        assert fake_storage.objects == {}
        assert client.delete(f"/api/v1/template/{template_id}").status_code == 404


class TestReports:
    def _render(self, client, name):
        return client.post("/api/v1/template/render", json={
            "data": {"n": name},
            "options": {"convertTo": "txt", "reportName": "summary"},
            "template": {"content": b64(b"{{ n }}"), "encodingType": "base64", "fileType": "txt"},
        })

    def test_generations_are_aggregated_by_title(self, client):
        first = self._render(client, "one").headers["x-report-id"]
        second = self._render(client, "two").headers["x-report-id"]

        response = client.get("/api/v1/reports")

        assert response.status_code == 200
        [summary] = response.json()
        assert summary["title"] == "summary"
        assert summary["total_generated_reports"] == 2
        assert summary["uid"] == second
        assert [r["uid"] for r in summary["reports"]] == [first, second]

    def test_download_counts(self, client):
        uid = self._render(client, "one").headers["x-report-id"]

        for _ in range(2):
            download = client.get(f"/api/v1/reports/{uid}/download")
            assert download.status_code == 200
            assert download.content == b"one"

        [summary] = client.get("/api/v1/reports").json()
        assert summary["reports"][0]["total_downloads"] == 2

    def test_download_unknown_report(self, client):
        response = client.get("/api/v1/reports/nope/download")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith(PROBLEM_JSON)
