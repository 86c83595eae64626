"""Spreadsheet import endpoints: preview, then commit valid rows"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from credit_desk.api.v1.schemas import ImportPreviewResponse, ImportCommitResponse, ImportedCustomerSchema
from credit_desk.api.dependencies import get_current_user_id, get_request_id
from credit_desk.infrastructure.database.session import get_db
from credit_desk.infrastructure.database.repositories import CustomerRepository
from credit_desk.domain.models import ImportResult
from credit_desk.domain.importer import normalize_import_rows
from credit_desk.domain.spreadsheets import read_rows
from credit_desk.domain.exceptions import ImportParseError, UnsupportedFileError
from credit_desk.infrastructure.observability.metrics import import_failures_counter, record_import
from credit_desk.infrastructure.observability.logging import log_import
from credit_desk.config import settings

router = APIRouter()


async def _normalize_upload(file: UploadFile, request_id: str) -> ImportResult:
    """Decode and normalize an upload; batch-level failures abort before any row is kept"""
    content = await file.read()
    try:
        rows = read_rows(file.filename or "", content)
        return normalize_import_rows(rows, max_rows=settings.import_max_rows)
    except UnsupportedFileError as e:
        import_failures_counter.inc()
        logging.warning(f"Unsupported import file: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=415, detail=str(e))
    except ImportParseError as e:
        import_failures_counter.inc()
        logging.warning(f"Import rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))


def _error_preview(errors: list) -> list:
    return errors[: settings.import_error_preview_limit]


@router.post("/imports/preview", response_model=ImportPreviewResponse)
async def preview_import(
    request: Request,
    file: UploadFile = File(..., description=".csv, .xlsx or .json customer sheet"),
    user_id: str = Depends(get_current_user_id),
):
    """Normalize an uploaded sheet without saving anything"""
    request_id = get_request_id(request)
    result = await _normalize_upload(file, request_id)

    log_import(request_id, user_id, file.filename or "", len(result.records), len(result.errors), committed=False)

    return ImportPreviewResponse(
        total_rows=len(result.records) + len(result.errors),
        valid_rows=len(result.records),
        error_count=len(result.errors),
        errors=_error_preview(result.errors),
        records=[ImportedCustomerSchema(**asdict(r)) for r in result.records],
    )


@router.post("/imports", response_model=ImportCommitResponse, status_code=201)
async def commit_import(
    request: Request,
    file: UploadFile = File(..., description=".csv, .xlsx or .json customer sheet"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Import customers from an uploaded sheet.

    Partial import: valid rows are saved, rejected rows are reported back so
    the sheet can be fixed and the remainder re-imported.
    """
    request_id = get_request_id(request)
    result = await _normalize_upload(file, request_id)

    if not result.records:
        import_failures_counter.inc()
        raise HTTPException(
            status_code=422,
            detail={"message": "No valid rows to import", "errors": _error_preview(result.errors)},
        )

    try:
        customers = CustomerRepository(db).create_customers(user_id, result.records)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Import commit failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_import(len(result.records), len(result.errors))
    log_import(request_id, user_id, file.filename or "", len(result.records), len(result.errors), committed=True)

    return ImportCommitResponse(
        imported=len(customers),
        customer_ids=[str(c.id) for c in customers],
        error_count=len(result.errors),
        errors=_error_preview(result.errors),
    )
