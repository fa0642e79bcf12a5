from __future__ import annotations

import os

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from app.config import settings

router = APIRouter(prefix=settings.media_url_prefix.rstrip("/"))


@router.get("/{path:path}")
def serve_image(path: str) -> FileResponse:
    """Serve a stored listing image. Transform segments such as ``w_250/`` are
    accepted and ignored; the original file is returned."""
    file_path = os.path.join(settings.upload_dir, os.path.basename(path))
    if not os.path.isfile(file_path):
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(file_path)
