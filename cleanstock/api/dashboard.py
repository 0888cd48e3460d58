from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cleanstock.api.auth import get_current_user
from cleanstock.database import get_db
from cleanstock.schemas.dashboard import DashboardOut
from cleanstock.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    return dashboard_service.summary(db)
