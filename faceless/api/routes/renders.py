"""
faceless/api/routes/renders.py
Render status lookup and the render-service webhook.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from faceless.api.schemas import RenderOut
from faceless.store.db import get_db
from faceless.store.renders import apply_webhook, get_render_row
from faceless.video_engine.creatomate import (
    CreatomateError, extract_output_url, get_render, normalize_status,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/renders/{db_id}", response_model=RenderOut)
def get_render_status(db_id: str, db: Session = Depends(get_db)):
    row = get_render_row(db, db_id)
    if not row:
        raise HTTPException(status_code=404, detail={"error": "RENDER_NOT_FOUND"})
    return row.to_dict()


@router.post("/creatomate-webhook")
def creatomate_webhook(
    id: Optional[str] = None,
    kind: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
):
    db_id = (id or "").strip()
    if not db_id:
        return {"ok": True, "skipped": "MISSING_DB_ID"}

    row = get_render_row(db, db_id)
    if not row:
        # 404 makes the sender retry; the row may not be committed yet.
        logger.warning(f"Creatomate webhook for unknown render {db_id}")
        raise HTTPException(status_code=404, detail={"error": "ROW_NOT_FOUND_RETRY"})

    payload = payload or {}
    status = normalize_status(payload.get("status"))
    terminal = status == "failed" or (status == "succeeded" and extract_output_url(payload))
    render_id = str(payload.get("id") or "").strip() or row.render_id
    if not terminal and render_id and render_id != "pending":
        try:
            payload = {**payload, **get_render(render_id)}
        except CreatomateError as exc:
            logger.warning(f"Creatomate GET fallback failed for {render_id}: {exc}")

    row = apply_webhook(db, row, payload)
    logger.info(f"Creatomate webhook ({kind or 'main'}): render {db_id} -> {row.status}")
    return {"ok": True, "status": row.status}
