# taskflow/routers/purchase.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from taskflow.database import get_db
from taskflow.models.user import User
from taskflow.services.cache import TimedCache
from taskflow.services.checklist_summary import checklists_by_person
from taskflow.services.errors import SheetsUnavailable
from taskflow.services.purchase import (
    PurchaseService,
    fallback_dashboard,
    filter_indents,
    load_dashboard,
    paginate,
    refresh_dashboard,
)
from taskflow.utils.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/purchase", tags=["Purchase"])

def get_purchase_service(request: Request) -> PurchaseService:
    return request.app.state.purchase_service

def get_purchase_cache(request: Request) -> TimedCache:
    return request.app.state.purchase_cache

@router.get("/dashboard")
def get_purchase_dashboard(
    service: PurchaseService = Depends(get_purchase_service),
    cache: TimedCache = Depends(get_purchase_cache),
    current_user: User = Depends(get_current_user),
):
    """Indent metrics, per-store stats and recent indents"""
    try:
        return load_dashboard(service, cache)
    except SheetsUnavailable as e:
        logger.error(f"Purchase dashboard error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=fallback_dashboard(str(e)),
        )

@router.get("/indents")
def get_indents(
    store: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    nature: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    service: PurchaseService = Depends(get_purchase_service),
    current_user: User = Depends(get_current_user),
):
    """All indent records with optional filtering and pagination"""
    try:
        records = service.fetch_indent_records()
    except SheetsUnavailable as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Unable to fetch indent records: {e}",
        )

    records = filter_indents(records, store=store, status=status_filter, nature=nature, search=search)
    return paginate(records, page, limit)

@router.get("/indent/{indent_number}")
def get_indent(
    indent_number: str,
    service: PurchaseService = Depends(get_purchase_service),
    current_user: User = Depends(get_current_user),
):
    """A single indent by its indent number"""
    try:
        records = service.fetch_indent_records()
    except SheetsUnavailable as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Unable to fetch indent: {e}",
        )

    indent = next((r for r in records if r["indentNumber"] == indent_number), None)
    if indent is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Indent not found")
    return {"success": True, "indent": indent}

@router.post("/refresh")
def refresh_purchase_dashboard(
    service: PurchaseService = Depends(get_purchase_service),
    cache: TimedCache = Depends(get_purchase_cache),
    current_user: User = Depends(get_current_user),
):
    """Drop the cached dashboard and load it again"""
    try:
        data = refresh_dashboard(service, cache)
    except SheetsUnavailable as e:
        logger.error(f"Purchase dashboard refresh error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Unable to refresh data: {e}",
        )
    return {"success": True, "message": "Dashboard data refreshed", "data": data}

@router.get("/checklists-by-person")
def get_checklists_by_person(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Active checklist templates grouped by person (all time)"""
    return checklists_by_person(db)
