import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..domain.accounts.schemas import LoginRequest
from ..domain.accounts.service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login")
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer access token"""
    return AccountService(db).login(data.email, data.password)
