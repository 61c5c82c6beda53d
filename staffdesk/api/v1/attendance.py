"""
Attendance endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from staffdesk.core.deps import get_db, get_current_user
from staffdesk.models.profile import Profile
from staffdesk.schemas.attendance import AttendanceOut, AttendanceListResponse
from staffdesk.services import attendance_service

router = APIRouter()


@router.post("/mark", response_model=AttendanceOut)
async def mark_attendance(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Mark today as PRESENT; repeating it keeps the first clock-in"""
    return attendance_service.mark_attendance(db, current_user)


@router.post("/clock-out", response_model=AttendanceOut)
async def clock_out(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return attendance_service.clock_out(db, current_user)


@router.get("/today", response_model=Optional[AttendanceOut])
async def get_today(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return attendance_service.get_today(db, current_user.id)


@router.get("", response_model=AttendanceListResponse)
async def list_attendance(
    user_id: Optional[int] = Query(None, description="Employee (managers only)"),
    from_date: Optional[date] = Query(None, alias="from"),
    to_date: Optional[date] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    items = attendance_service.list_attendance(
        db,
        current_user,
        user_id=user_id,
        from_date=from_date,
        to_date=to_date,
    )
    return AttendanceListResponse(items=items, total=len(items))
