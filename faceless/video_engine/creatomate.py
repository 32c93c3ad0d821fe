"""
faceless/video_engine/creatomate.py
Creatomate render API client: submit a template render, poll one, and
normalize the status vocabulary its webhooks and API responses use.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from faceless.core.config import get_creatomate_key

logger = logging.getLogger(__name__)

CREATOMATE_RENDERS_URL = "https://api.creatomate.com/v1/renders"


class CreatomateError(RuntimeError):
    def __init__(self, code: str, status: Optional[int] = None, details: Any = None):
        self.code = code
        self.status = status
        self.details = details
        super().__init__(f"{code} ({status})" if status else code)


def _headers() -> Dict[str, str]:
    api_key = get_creatomate_key()
    if not api_key:
        raise CreatomateError("MISSING_CREATOMATE_API_KEY")
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _json_or_raw(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return {"raw": resp.text}


def create_render(template_id: str, modifications: Dict[str, Any], webhook_url: str = "") -> str:
    """Submit a render and return its job id."""
    payload: Dict[str, Any] = {
        "template_id": template_id,
        "modifications": modifications,
        "output_format": "mp4",
    }
    if webhook_url:
        payload["webhook_url"] = webhook_url

    headers = _headers()
    try:
        with httpx.Client(timeout=60.0) as client:
            resp = client.post(CREATOMATE_RENDERS_URL, headers=headers, json=payload)
    except httpx.HTTPError as exc:
        raise CreatomateError("CREATOMATE_ERROR", status=502, details=str(exc)) from exc

    data = _json_or_raw(resp)
    if resp.status_code not in (200, 202):
        raise CreatomateError("CREATOMATE_ERROR", status=resp.status_code, details=data)

    job = data[0] if isinstance(data, list) and data else data
    job_id = job.get("id") if isinstance(job, dict) else None
    if not job_id:
        raise CreatomateError("NO_JOB_ID_IN_RESPONSE", status=502, details=data)

    logger.info(f"Creatomate render queued: {job_id} (template {template_id})")
    return str(job_id)


def get_render(render_id: str) -> Dict[str, Any]:
    headers = _headers()
    try:
        with httpx.Client(timeout=30.0) as client:
            resp = client.get(f"{CREATOMATE_RENDERS_URL}/{render_id}", headers=headers)
    except httpx.HTTPError as exc:
        raise CreatomateError("CREATOMATE_GET_FAILED", status=502, details=str(exc)) from exc
    data = _json_or_raw(resp)
    if resp.status_code >= 400:
        raise CreatomateError("CREATOMATE_GET_FAILED", status=resp.status_code, details=data)
    return data if isinstance(data, dict) else {}


def normalize_status(raw: Any) -> str:
    s = str(raw or "").strip().lower()
    if not s:
        return ""
    if s == "done" or "succeed" in s or "complete" in s:
        return "succeeded"
    if "fail" in s or "error" in s:
        return "failed"
    if any(k in s for k in ("queue", "process", "render", "wait", "plan", "transcrib")):
        return "rendering"
    return s


def extract_output_url(obj: Any) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    outputs = obj.get("outputs")
    from_outputs = None
    if isinstance(outputs, list) and outputs and isinstance(outputs[0], dict):
        from_outputs = outputs[0].get("url") or outputs[0].get("output")
    return (
        obj.get("output")
        or obj.get("url")
        or obj.get("video_url")
        or obj.get("download_url")
        or from_outputs
        or None
    )
