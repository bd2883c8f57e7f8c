# taskflow/routers/mis_report.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.models.user import User
from taskflow.services.errors import DataUnavailable, InvalidInput
from taskflow.services.mis_report import build_mis_report
from taskflow.utils.auth import require_superadmin

router = APIRouter(prefix="/mis-report", tags=["MIS Report"])

@router.get("/data")
def get_mis_report_data(
    year: Optional[str] = Query(None, description="Report year, e.g. 2024"),
    month: Optional[str] = Query(None, description="Report month, 1-12"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_superadmin),
):
    """Aggregated task, FMS, checklist and help ticket statistics for one month"""
    try:
        return build_mis_report(db, year, month)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DataUnavailable as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate MIS report: {e}",
        )
