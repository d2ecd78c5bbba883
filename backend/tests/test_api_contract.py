import base64

from snapsolve.api import dependencies
from snapsolve.application.services import ExtractionService
from snapsolve.core.errors import ExtractionTimeoutError, TransportError
from snapsolve.infra.llm.mock import MockVisionLLM
from snapsolve.infra.ports.llm import VisionLLMPort
from snapsolve.main import app

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class RaisingLLM(VisionLLMPort):
    provider_name = "raising"

    def __init__(self, exc: Exception):
        self.exc = exc

    def generate_text_from_media(self, **kwargs) -> str:
        raise self.exc


def _use_llm(llm: VisionLLMPort) -> None:
    async def _provide() -> ExtractionService:
        return ExtractionService(llm=llm, store=dependencies.get_store())

    app.dependency_overrides[dependencies.provide_extraction_service] = _provide


def test_upload_returns_persisted_set(client):
    resp = client.upload("worksheet.png", PNG_BYTES)

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"].startswith("qs_")
    assert body["title"] == "Uploaded Image: worksheet.png"
    assert body["createdAt"]
    assert body["questionCount"] == 2
    first, second = body["questions"]
    assert first["questionText"] == "What is 2+2?"
    assert first["questionType"] == "MULTIPLE_CHOICE"
    assert first["options"] == ["3", "4", "5", "22"]
    assert first["answer"] == "B) 4"
    assert first["explanation"] == "Basic arithmetic."
    assert first["id"].startswith("q_")
    assert second["questionType"] == "GENERAL"
    assert second["options"] == []

    fetched = client.api("GET", f"/results/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body


def test_paste_image_returns_persisted_set(client):
    encoded = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")

    resp = client.api("POST", "/paste-image", json={"base64Image": encoded})

    assert resp.status_code == 200
    assert resp.json()["title"] == "Pasted Image"


def test_history_is_newest_first(client):
    older = client.upload("older.png", PNG_BYTES).json()["id"]
    newer = client.upload("newer.png", PNG_BYTES).json()["id"]

    resp = client.api("GET", "/history")

    assert resp.status_code == 200
    ids = [item["id"] for item in resp.json()]
    assert ids.index(newer) < ids.index(older)


def test_history_rejects_bad_paging(client):
    assert client.api("GET", "/history", params={"limit": 0}).status_code == 422
    assert client.api("GET", "/history", params={"offset": -1}).status_code == 422


def test_pdf_and_word_downloads(client):
    set_id = client.upload("docs.png", PNG_BYTES).json()["id"]

    pdf = client.api("GET", f"/results/{set_id}/pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert f'filename="mcq-results-{set_id}.pdf"' in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")

    word = client.api("GET", f"/results/{set_id}/word")
    assert word.status_code == 200
    assert word.headers["content-type"] == DOCX_MEDIA_TYPE
    assert f'filename="mcq-results-{set_id}.docx"' in word.headers["content-disposition"]
    assert word.content.startswith(b"PK")


def test_delete_removes_set(client):
    set_id = client.upload("delete.png", PNG_BYTES).json()["id"]

    deleted = client.api("DELETE", f"/results/{set_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True, "id": set_id}

    assert client.api("GET", f"/results/{set_id}").status_code == 404
    assert client.api("GET", f"/results/{set_id}/pdf").status_code == 404
    assert client.api("DELETE", f"/results/{set_id}").status_code == 404


def test_unknown_set_is_404(client):
    for path in ("/results/qs_missing", "/results/qs_missing/pdf", "/results/qs_missing/word"):
        resp = client.api("GET", path)
        assert resp.status_code == 404
        assert "qs_missing" in resp.json()["detail"]


def test_empty_upload_is_400(client):
    resp = client.upload("empty.png", b"")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please select an image to upload"


def test_paste_rejects_missing_and_malformed_data(client):
    missing = client.api("POST", "/paste-image", json={})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "No image data provided"

    malformed = client.api("POST", "/paste-image", json={"base64Image": "not base64 at all!!"})
    assert malformed.status_code == 400


def test_unparseable_model_output_is_422(client):
    _use_llm(MockVisionLLM(response="```\n---\n```"))

    resp = client.upload("blank.png", PNG_BYTES)

    assert resp.status_code == 422
    assert resp.json()["detail"] == "No questions could be extracted from the image"


def test_transport_failures_map_to_gateway_errors(client):
    before = len(client.api("GET", "/history").json())

    _use_llm(RaisingLLM(TransportError("Gemini API error (503): overloaded")))
    unavailable = client.upload("x.png", PNG_BYTES)
    assert unavailable.status_code == 502
    assert "overloaded" in unavailable.json()["detail"]

    _use_llm(RaisingLLM(ExtractionTimeoutError("Gemini API timeout (timeout=5s).")))
    assert client.upload("x.png", PNG_BYTES).status_code == 504

    after = len(client.api("GET", "/history").json())
    assert after == before
