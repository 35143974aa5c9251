# speakup/api/routers/site.py - Site-wide configuration
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Dict, Any
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import require_admin
from speakup.models.site import Configuration
from speakup.schemas.site import ConfigurationIn, ConfigurationOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/configuration")
async def get_configuration(db: Session = Depends(get_db)):
    """The configuration row, or an empty object before it is first saved"""
    config = db.execute(select(Configuration)).scalars().first()
    if not config:
        return {}
    return ConfigurationOut.model_validate(config)


@router.post("/configuration", response_model=ConfigurationOut)
async def save_configuration(
    data: ConfigurationIn,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    site_name = (data.site_name or "").strip()
    admin_id = (data.admin_id or "").strip()
    if not site_name or not data.admin_email or not admin_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="site_name, admin_email and admin_id are required"
        )

    config = db.execute(select(Configuration)).scalars().first()
    if not config:
        config = Configuration(site_name=site_name, admin_email=str(data.admin_email), admin_id=admin_id)
        db.add(config)
    else:
        config.site_name = site_name
        config.admin_email = str(data.admin_email)
        config.admin_id = admin_id

    try:
        db.commit()
        db.refresh(config)
        logger.info(f"Site configuration saved by {ctx['user'].email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving site configuration: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error saving configuration"
        )

    return config
