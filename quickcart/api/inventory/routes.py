from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from quickcart.api.inventory.models import (
    CreateSnapshotResponse,
    CreateSnapshotSchema,
    RollbackRequestSchema,
    RollbackResultSchema,
    SnapshotSummarySchema,
    UploadLogSchema,
    UploadResultSchema,
)
from quickcart.api.inventory.service import InventoryService
from quickcart.core.responses import json_response
from quickcart.dependencies.services import get_inventory_service
from quickcart.shared.exceptions import ValidationException

inventory_router = APIRouter(prefix="/admin/inventory", tags=["Inventory"])


@inventory_router.get(
    "/snapshots",
    summary="List recent inventory snapshots",
    response_model=List[SnapshotSummarySchema],
)
async def list_snapshots(
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    snapshots = await inventory_service.list_snapshots()
    return json_response([s.model_dump(mode="json") for s in snapshots])


@inventory_router.post(
    "/snapshots",
    summary="Capture the current catalog",
    response_model=CreateSnapshotResponse,
)
async def create_snapshot(
    payload: CreateSnapshotSchema = CreateSnapshotSchema(),
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    result = await inventory_service.create_snapshot(payload.name)
    return json_response(result.model_dump(mode="json"))


@inventory_router.post(
    "/rollback",
    summary="Restore the catalog recorded in a snapshot",
    response_model=RollbackResultSchema,
)
async def rollback_inventory(
    payload: RollbackRequestSchema,
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    """
    Best-effort restore. Products that fail are reported in **errors** while
    the rest are still restored.
    """
    result = await inventory_service.rollback(payload.snapshot_id)
    return json_response(result.model_dump(mode="json", exclude_none=True))


@inventory_router.post(
    "/upload",
    summary="Import stock and prices from a CSV file",
    response_model=UploadResultSchema,
)
async def upload_inventory(
    file: UploadFile = File(...),
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    raw = await file.read()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationException(detail="CSV file must be UTF-8 encoded")

    result = await inventory_service.import_csv(file.filename or "upload.csv", content)
    return json_response(result.model_dump(mode="json", exclude_none=True))


@inventory_router.get(
    "/upload",
    summary="List recent import and rollback audit logs",
    response_model=List[UploadLogSchema],
)
async def list_upload_logs(
    inventory_service: InventoryService = Depends(get_inventory_service),
):
    logs = await inventory_service.list_upload_logs()
    return json_response([log.model_dump(mode="json") for log in logs])
