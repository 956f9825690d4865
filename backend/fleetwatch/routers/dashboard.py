from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from ..schemas.dashboard import DashboardSnapshot, DashboardStats
from ..schemas.devices import Device
from ..schemas.logs import LogView
from ..services.view import DashboardView

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_view(request: Request) -> DashboardView:
    view = getattr(request.app.state, "view", None)
    if view is None:
        raise HTTPException(status_code=503, detail="Dashboard view unavailable")
    return view


@router.get("", response_model=DashboardSnapshot)
def read_dashboard(view: DashboardView = Depends(get_view)) -> DashboardSnapshot:
    return view.snapshot()


@router.get("/stats", response_model=DashboardStats)
def read_stats(view: DashboardView = Depends(get_view)) -> DashboardStats:
    return view.stats()


@router.get("/devices", response_model=List[Device])
def list_devices(view: DashboardView = Depends(get_view)) -> List[Device]:
    return view.devices


@router.get("/devices/{device_id}", response_model=Device)
def read_device(device_id: str, view: DashboardView = Depends(get_view)) -> Device:
    device = view.find_device(device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


@router.get("/devices/{device_id}/logs", response_model=List[LogView])
def list_device_logs(device_id: str, view: DashboardView = Depends(get_view)) -> List[LogView]:
    return view.device_log_views(device_id)


@router.put("/selection", response_model=DashboardSnapshot)
def select_device(payload: Device, view: DashboardView = Depends(get_view)) -> DashboardSnapshot:
    view.on_select_device(payload)
    return view.snapshot()


@router.delete("/selection", response_model=DashboardSnapshot)
def clear_selection(view: DashboardView = Depends(get_view)) -> DashboardSnapshot:
    view.clear_selection()
    return view.snapshot()
