"""Liveness and readiness of the onboarding pipeline."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.dependencies import get_file_storage, get_ocr_extractor
from recruitment.db.session import get_db
from recruitment.services.collaborators.base import FileStorage
from recruitment.services.ocr.base import OcrExtractor

logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@lru_cache(maxsize=1)
def migration_head() -> Optional[str]:
    """Revision the migration scripts end at, or None outside a source checkout."""
    ini = PROJECT_ROOT / "alembic.ini"
    scripts = PROJECT_ROOT / "alembic"
    if not (ini.exists() and scripts.exists()):
        return None

    config = Config(str(ini))
    config.set_main_option("script_location", str(scripts))
    return ScriptDirectory.from_config(config).get_current_head()


async def _probe(db: AsyncSession, statement: str):
    try:
        result = await db.execute(text(statement))
    except SQLAlchemyError:
        await db.rollback()
        raise
    return result.scalar_one_or_none()


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    extractor: Optional[OcrExtractor] = Depends(get_ocr_extractor),
    storage: FileStorage = Depends(get_file_storage),
):
    """
    Report whether the service can take onboarding traffic.

    KTP uploads still succeed without OCR (the candidate types the fields
    by hand), so ``ocr_enabled`` is informational and never fails the check.
    """
    db_ok = True
    applied: Optional[str] = None
    try:
        await _probe(db, "SELECT 1")
    except SQLAlchemyError:
        logger.exception("Health check: database unreachable")
        db_ok = False

    if db_ok:
        try:
            applied = await _probe(db, "SELECT version_num FROM alembic_version")
        except SQLAlchemyError:
            # create_all schemas carry no alembic_version table
            logger.info("Health check: alembic_version table missing")

    head = migration_head()

    return {
        "api_ok": True,
        "db_ok": db_ok,
        "alembic_head_ok": applied is not None and applied == head,
        "alembic_current": applied,
        "alembic_head": head,
        "ocr_enabled": extractor is not None,
        "storage_backend": type(storage).__name__,
    }
