import json

import httpx
import pytest

from faceless.video_engine import creatomate


@pytest.fixture(autouse=True)
def creatomate_env(monkeypatch):
    monkeypatch.setenv("CREATOMATE_API_KEY", "cm-test")


def test_create_render_returns_job_id(mock_httpx):
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(202, json=[{"id": "job-1", "status": "planned"}])

    mock_httpx(creatomate, handler)
    job_id = creatomate.create_render("tpl", {"hdr_name": "Alex"}, "https://hook")

    assert job_id == "job-1"
    assert seen["auth"] == "Bearer cm-test"
    assert seen["body"] == {
        "template_id": "tpl",
        "modifications": {"hdr_name": "Alex"},
        "output_format": "mp4",
        "webhook_url": "https://hook",
    }


def test_create_render_error_status(mock_httpx):
    mock_httpx(creatomate, lambda request: httpx.Response(400, json={"message": "bad template"}))
    with pytest.raises(creatomate.CreatomateError) as exc:
        creatomate.create_render("tpl", {})
    assert exc.value.code == "CREATOMATE_ERROR"
    assert exc.value.status == 400
    assert exc.value.details == {"message": "bad template"}


def test_create_render_without_job_id(mock_httpx):
    mock_httpx(creatomate, lambda request: httpx.Response(200, json={}))
    with pytest.raises(creatomate.CreatomateError) as exc:
        creatomate.create_render("tpl", {})
    assert exc.value.code == "NO_JOB_ID_IN_RESPONSE"


def test_get_render(mock_httpx):
    def handler(request: httpx.Request):
        assert request.url.path == "/v1/renders/job-9"
        return httpx.Response(200, json={"id": "job-9", "status": "succeeded", "url": "https://v.mp4"})

    mock_httpx(creatomate, handler)
    assert creatomate.get_render("job-9")["url"] == "https://v.mp4"


def test_missing_key(monkeypatch):
    monkeypatch.delenv("CREATOMATE_API_KEY", raising=False)
    with pytest.raises(creatomate.CreatomateError) as exc:
        creatomate.get_render("job-9")
    assert exc.value.code == "MISSING_CREATOMATE_API_KEY"


@pytest.mark.parametrize("raw,expected", [
    ("succeeded", "succeeded"),
    ("Completed", "succeeded"),
    ("done", "succeeded"),
    ("failed", "failed"),
    ("error", "failed"),
    ("planned", "rendering"),
    ("waiting", "rendering"),
    ("rendering", "rendering"),
    ("", ""),
    (None, ""),
    ("weird", "weird"),
])
def test_normalize_status(raw, expected):
    assert creatomate.normalize_status(raw) == expected


def test_extract_output_url():
    assert creatomate.extract_output_url({"url": "a"}) == "a"
    assert creatomate.extract_output_url({"outputs": [{"url": "b"}]}) == "b"
    assert creatomate.extract_output_url({"status": "planned"}) is None
    assert creatomate.extract_output_url(None) is None


def _timeout(request: httpx.Request):
    raise httpx.ReadTimeout("timed out", request=request)


def test_create_render_network_error(mock_httpx):
    mock_httpx(creatomate, _timeout)
    with pytest.raises(creatomate.CreatomateError) as exc:
        creatomate.create_render("tpl", {})
    assert exc.value.code == "CREATOMATE_ERROR"
    assert exc.value.status == 502


def test_get_render_network_error(mock_httpx):
    mock_httpx(creatomate, _timeout)
    with pytest.raises(creatomate.CreatomateError) as exc:
        creatomate.get_render("job-9")
    assert exc.value.code == "CREATOMATE_GET_FAILED"
