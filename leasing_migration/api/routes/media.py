from __future__ import annotations

import time

from fastapi import APIRouter, HTTPException

from leasing_migration.core.errors import ConfigError
from leasing_migration.core.settings import settings
from leasing_migration.services.image_store import sign_params

router = APIRouter()


@router.get("/signature")
async def upload_signature():
    """Sign a direct browser upload into the catalog folder."""
    try:
        settings.require_cloudinary()
    except ConfigError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    timestamp = int(time.time())
    signature = sign_params({"timestamp": timestamp, "folder": settings.cdn_folder}, settings.cloudinary_api_secret)
    return {
        "timestamp": timestamp,
        "signature": signature,
        "cloud_name": settings.cloudinary_cloud_name,
        "api_key": settings.cloudinary_api_key,
        "folder": settings.cdn_folder,
    }
