"""Backup endpoints: export, import and wipe all data."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from fastapi.concurrency import run_in_threadpool

from factory import ServiceFactory
from adapters.rest.dependencies import get_factory
from domain.exceptions import BackupFormatError

router = APIRouter(tags=["backup"])


@router.get("/backup")
def export_backup(factory: ServiceFactory = Depends(get_factory)):
    payload = factory.create_backup_service().export_all()
    return Response(content=payload, media_type="application/json")


@router.post("/backup")
async def import_backup(
    request: Request,
    factory: ServiceFactory = Depends(get_factory),
):
    """Replace all data with the uploaded backup (raw JSON body)."""
    try:
        text = (await request.body()).decode("utf-8")
    except UnicodeDecodeError as e:
        raise BackupFormatError(f"Backup is not valid UTF-8: {e}") from e
    summary = await run_in_threadpool(factory.create_backup_service().import_all, text)
    return asdict(summary)


@router.delete("/data")
def clear_all_data(factory: ServiceFactory = Depends(get_factory)):
    factory.create_backup_service().clear_all()
    return {"ok": True}
