"""API routes for sheetlink."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, model_validator

from ..sheets import SyncResult

router = APIRouter()


def get_sync():
    """Get the global sync instance."""
    from .app import get_sync as _get_sync

    return _get_sync()


class CellEditRequest(BaseModel):
    """An edit addressed either by A1 range or by 0-based grid position."""

    value: str
    range: Optional[str] = None
    row: Optional[int] = None
    col: Optional[int] = None

    @model_validator(mode="after")
    def _check_address(self):
        if self.range is None and (self.row is None or self.col is None):
            raise ValueError("Provide either 'range' or both 'row' and 'col'")
        if (self.row is not None and self.row < 0) or (self.col is not None and self.col < 0):
            raise ValueError("'row' and 'col' must be non-negative")
        return self


class CellWriteRequest(BaseModel):
    range: str
    value: str


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from ..config import settings

    # Gather non-secret diagnostics
    config = {
        "spreadsheet_configured": bool(settings.spreadsheet_id),
        "sheet_name": settings.sheet_name,
        "cell_range": settings.cell_range,
        "api_key_present": settings.has_api_key,
        "service_account_configured": settings.has_service_account,
    }

    return {
        "status": "ok",
        "service": "sheetlink",
        "config": config,
    }


@router.get("/grid", response_model=SyncResult)
async def get_grid():
    """Fetch the configured range with dropdown validation."""
    return await get_sync().fetch_grid_with_validation()


@router.get("/values")
async def get_values():
    """Fetch the configured range as plain values."""
    rows = await get_sync().fetch_values()
    return {"rows": rows}


@router.put("/cells")
async def queue_cell_edit(request: CellEditRequest):
    """Queue an edit; it is written once edits go quiet."""
    sync = get_sync()
    if not sync.has_write_access:
        raise HTTPException(status_code=403, detail="Writing requires a service account")
    if request.range is not None:
        range_a1 = request.range
        sync.queue_edit(range_a1, request.value)
    else:
        range_a1 = sync.queue_cell_edit(request.row, request.col, request.value)
    return {"range": range_a1, "pending": sync.queue.pending_count}


@router.post("/cells/write")
async def write_cell(request: CellWriteRequest):
    """Write a single cell immediately."""
    success = await get_sync().update_cell(request.range, request.value)
    return {"range": request.range, "success": success}


@router.post("/flush")
async def flush():
    """Write all pending edits now."""
    results = await get_sync().flush()
    return {"results": results, "failed": sorted(r for r, ok in results.items() if not ok)}


@router.get("/status")
async def status():
    """Pending and failed edits."""
    sync = get_sync()
    return {
        "write_access": sync.has_write_access,
        "pending": sync.queue.pending,
        "syncing": sync.queue.is_syncing,
        "failed": sync.queue.failed,
    }
