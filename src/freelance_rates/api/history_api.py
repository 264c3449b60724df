"""
History API - FastAPI router for the calculation history.
"""
from typing import Literal
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..history import CalculationHistory
from ..services.export_service import export_basename, to_csv_bytes, to_excel_bytes

router = APIRouter(prefix="/history", tags=["history"])

EXPORT_MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def content_disposition(filename: str) -> str:
    """Attachment header safe for any file name: ASCII fallback plus RFC 5987 UTF-8 form."""
    fallback = filename.encode("ascii", "replace").decode("ascii")
    for char in ('?', '"', '\\'):
        fallback = fallback.replace(char, "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def get_history(request: Request) -> CalculationHistory:
    return request.app.state.history


# Endpoints

@router.get("")
async def list_history(history: CalculationHistory = Depends(get_history)):
    """List calculations, most recent first."""
    return {"calculations": [calc.to_dict() for calc in history.list()]}


@router.get("/latest")
async def latest_calculation(history: CalculationHistory = Depends(get_history)):
    """The calculation shown by default."""
    latest = history.latest()
    if latest is None:
        raise HTTPException(status_code=404, detail="No calculations yet")
    return latest.to_dict()


@router.get("/export")
async def export_history(format: Literal["csv", "xlsx"] = "csv",
                         history: CalculationHistory = Depends(get_history)):
    """Download the whole history as CSV or Excel."""
    calculations = history.list()
    content = to_csv_bytes(calculations) if format == "csv" else to_excel_bytes(calculations)
    basename = export_basename(calculations[0]) if calculations else "history"
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[format],
        headers={"Content-Disposition": content_disposition(f"{basename}.{format}")},
    )


@router.get("/{calculation_id}")
async def get_calculation(calculation_id: str, history: CalculationHistory = Depends(get_history)):
    """Get a single calculation by ID."""
    calculation = history.get(calculation_id)
    if calculation is None:
        raise HTTPException(status_code=404, detail=f"Calculation '{calculation_id}' not found")
    return {**calculation.to_dict(), "exportName": export_basename(calculation)}


@router.delete("/{calculation_id}")
async def delete_calculation(calculation_id: str, history: CalculationHistory = Depends(get_history)):
    """Delete a calculation; deleting an unknown id is not an error."""
    history.remove(calculation_id)
    return {"success": True, "count": len(history)}


@router.delete("")
async def clear_history(history: CalculationHistory = Depends(get_history)):
    """Delete every calculation."""
    history.clear()
    return {"success": True, "count": 0}
