"""Billing router for student payments."""
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.auth.dependencies import CurrentUser
from src.domains.students.service import StudentService

from .models import PaymentStatus
from .schemas import (
    REFERENCE_MONTH_PATTERN,
    MarkPaidRequest,
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    PaymentUpdate,
)
from .service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing"])


def _payment_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Payment not found",
    )


@router.get("/payments", response_model=PaymentListResponse)
async def list_payments(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    student_id: Annotated[UUID | None, Query()] = None,
    status_filter: Annotated[PaymentStatus | None, Query(alias="status")] = None,
    reference_month: Annotated[str | None, Query(pattern=REFERENCE_MONTH_PATTERN)] = None,
) -> PaymentListResponse:
    """List the trainer's payments, newest first."""
    payments = await BillingService(db).list_payments(
        user_id=current_user.id,
        student_id=student_id,
        status=status_filter,
        reference_month=reference_month,
    )
    return PaymentListResponse(
        payments=[PaymentResponse.from_payment(p) for p in payments],
        total=len(payments),
    )


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PaymentResponse:
    """Get a specific payment."""
    payment = await BillingService(db).get_payment(current_user.id, payment_id)
    if not payment:
        raise _payment_not_found()
    return PaymentResponse.from_payment(payment)


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    request: PaymentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PaymentResponse:
    """Record a payment for one of the trainer's students."""
    student = await StudentService(db).get_student(current_user.id, request.student_id)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    payment = await BillingService(db).create_payment(request.model_dump())
    return PaymentResponse.from_payment(payment)


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: UUID,
    request: PaymentUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PaymentResponse:
    """Update a payment. Only fields present in the body change."""
    billing_service = BillingService(db)
    payment = await billing_service.get_payment(current_user.id, payment_id)
    if not payment:
        raise _payment_not_found()

    data = {
        k: v for k, v in request.model_dump(exclude_unset=True).items()
        if v is not None or k in ("payment_date", "notes")
    }
    updated = await billing_service.update_payment(payment, data)
    return PaymentResponse.from_payment(updated)


@router.post("/payments/{payment_id}/mark-paid", response_model=PaymentResponse)
async def mark_payment_paid(
    payment_id: UUID,
    request: MarkPaidRequest,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PaymentResponse:
    """Mark a payment as paid."""
    billing_service = BillingService(db)
    payment = await billing_service.get_payment(current_user.id, payment_id)
    if not payment:
        raise _payment_not_found()

    if payment.status == PaymentStatus.PAID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Payment is already paid",
        )

    updated = await billing_service.mark_paid(payment, request.payment_date)
    return PaymentResponse.from_payment(updated)


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a payment."""
    billing_service = BillingService(db)
    payment = await billing_service.get_payment(current_user.id, payment_id)
    if not payment:
        raise _payment_not_found()

    await billing_service.delete_payment(payment)
    logger.info("Deleted payment %s for trainer %s", payment_id, current_user.id)
