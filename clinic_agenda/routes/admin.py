import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..domain.accounts.schemas import CreateAdminRequest
from ..domain.accounts.service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/create-admin", status_code=201)
async def create_admin(data: CreateAdminRequest, db: Session = Depends(get_db)):
    """
    Bootstrap the first admin account.
    Only allowed while no admin exists; the new admin must change the password on first login.
    """
    logger.info(f"📥 Admin bootstrap requested for {data.email}")
    return AccountService(db).create_admin(data)
