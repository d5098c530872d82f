"""Financial support submissions; reviewed by admins, no ledger effect"""

from decimal import Decimal, InvalidOperation
from typing import List
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.exceptions import NotFoundException, ValidationException
from cleanhood.models import User, FinancialSupport, FinancialSupportStatus
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional
from cleanhood.services.state_machine import financial_support_state_machine

logger = logging.getLogger(__name__)

class FinancialSupportService(TransactionalService):

    @transactional("Submit financial support")
    async def submit_support(self, user_id: int, amount, bank_name: str, receipt_url: str) -> ActionResult:
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise ValidationException("Amount must be a number.")
        if amount <= 0:
            raise ValidationException("Amount must be greater than zero.")
        if not bank_name or not receipt_url:
            raise ValidationException("Bank name and receipt are required.")

        if await self.db.get(User, user_id) is None:
            raise NotFoundException("User not found")

        submission = FinancialSupport(
            user_id=user_id,
            amount=amount,
            bank_name=bank_name,
            receipt_url=receipt_url,
        )
        self.db.add(submission)
        await self.db.flush()

        logger.info("Financial support %s submitted by user %s", submission.id, user_id)
        return ActionResult.ok("Support submission received successfully.", support_id=submission.id)

    @transactional("Update financial support status")
    async def update_support_status(self, support_id: int, status: FinancialSupportStatus) -> ActionResult:
        submission = await self._get_for_update(FinancialSupport, support_id, "Financial support submission")
        changed = await self._transition(submission, financial_support_state_machine, status)

        if changed and status == FinancialSupportStatus.APPROVED:
            self.queue_notification(
                submission.user_id,
                "Thank you for your support!",
                f"We confirmed receipt of your support of {submission.amount} YER. "
                "Your contribution helps us keep going.",
            )

        return ActionResult.ok(
            "Financial support status updated." if changed else f"Submission is already {status.value}.",
            support_id=support_id,
            status=status.value,
        )

    @transactional("Delete financial support")
    async def delete_support(self, support_id: int) -> ActionResult:
        result = await self.db.execute(delete(FinancialSupport).where(FinancialSupport.id == support_id))
        if not result.rowcount:
            raise NotFoundException("Financial support submission not found")

        logger.info("Financial support %s deleted", support_id)
        return ActionResult.ok("Support submission deleted.", support_id=support_id)

async def get_support_submissions(db: AsyncSession) -> List[FinancialSupport]:
    result = await db.execute(
        select(FinancialSupport).order_by(FinancialSupport.submitted_at.desc(), FinancialSupport.id.desc())
    )
    return list(result.scalars().all())
