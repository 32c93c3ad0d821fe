"""
faceless/store/renders.py
Row helpers for the renders table, shared by the pipeline and webhook routes.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from faceless.store.models import Render
from faceless.video_engine.creatomate import extract_output_url, normalize_status

logger = logging.getLogger(__name__)


def create_render_row(session: Session, kind: str, choices: Dict[str, Any]) -> Render:
    row = Render(kind=kind, status="waiting", render_id="pending", choices=dict(choices or {}))
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def get_render_row(session: Session, render_db_id: str) -> Optional[Render]:
    return session.get(Render, render_db_id)


def update_render_row(session: Session, row: Render, **fields: Any) -> Render:
    for key, value in fields.items():
        if not hasattr(row, key):
            raise AttributeError(f"Render has no column '{key}'")
        setattr(row, key, value)
    session.commit()
    session.refresh(row)
    return row


def mark_failed(session: Session, row: Render, error: Any) -> Render:
    text = error if isinstance(error, str) else json.dumps(error, default=str)
    logger.warning(f"Render {row.id} failed: {text[:200]}")
    return update_render_row(session, row, status="failed", error=text)


def apply_webhook(session: Session, row: Render, payload: Dict[str, Any]) -> Render:
    """
    Copy a render-service callback onto the row.

    Only terminal states are final; anything else leaves the row rendering.
    """
    status = normalize_status(payload.get("status"))
    url = extract_output_url(payload)
    incoming_id = str(payload.get("id") or payload.get("render_id") or "").strip()

    fields: Dict[str, Any] = {}
    if incoming_id and row.render_id in ("", "pending"):
        fields["render_id"] = incoming_id

    if status == "succeeded" and url:
        fields.update(status="succeeded", video_url=str(url), error=None)
    elif status == "failed" and row.status != "succeeded":
        fields.update(status="failed", error=json.dumps(payload, default=str))
    elif row.status not in ("succeeded", "failed"):
        fields["status"] = "rendering"

    if not fields:
        return row
    return update_render_row(session, row, **fields)
