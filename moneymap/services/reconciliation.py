"""Runs reconciliation passes against the database and records the outcome"""

import logging
import time
from datetime import date
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from moneymap.config import settings
from moneymap.domain.models import (
    EPFContribution,
    Investment,
    Obligation,
    ReconciliationResult,
    SIPPlan,
)
from moneymap.domain.reconciler import plan_reconciliation, plan_skip_markers
from moneymap.infrastructure.database.repositories import (
    ClaimRepository,
    EPFRepository,
    InvestmentRepository,
    ProfileRepository,
    SIPPlanRepository,
    epf_to_domain,
    investment_to_domain,
    plan_to_domain,
)
from moneymap.infrastructure.observability.logging import log_reconciliation
from moneymap.infrastructure.observability.metrics import (
    reconciliation_duration_histogram,
    record_failure,
    record_inserts,
)
from moneymap.utils.date_utils import month_start

EPF_CLAIM_KEY = "epf"


class ReconciliationService:
    """Reads a user's rows, plans missing monthly entries and inserts them"""

    def __init__(self, db: Session):
        self.db = db
        self.claims = ClaimRepository(db)
        self.epf_repo = EPFRepository(db)
        self.investment_repo = InvestmentRepository(db)
        self.plan_repo = SIPPlanRepository(db)
        self.profile_repo = ProfileRepository(db)

    def reconcile(
        self,
        user_id: str,
        today: date,
        last_reconciled_month: Optional[date] = None,
        request_id: str = "unknown",
    ) -> ReconciliationResult:
        """
        Ensure this month's EPF contribution and SIP investments exist.

        Never raises: read and write failures are logged and the affected
        obligation is reported as "no entry added".
        """
        start_time = time.time()
        result = ReconciliationResult(month=month_start(today))

        with reconciliation_duration_histogram.time():
            try:
                self._run(user_id, today, last_reconciled_month, request_id, result)
            except Exception as e:
                self.db.rollback()
                result.failures += 1
                logging.error(f"Unexpected reconciliation error: {e}", extra={"user_id": user_id, "request_id": request_id})

        if result.skipped_by_guard:
            logging.debug("Month already reconciled this session", extra={"user_id": user_id, "request_id": request_id})
            return result

        duration_ms = (time.time() - start_time) * 1000
        log_reconciliation(
            request_id,
            user_id,
            result.month.isoformat(),
            len(result.inserted_epf),
            len(result.inserted_investments),
            result.failures,
            duration_ms,
        )
        return result

    def skip_month(self, user_id: str, today: date, request_id: str = "unknown") -> List[Investment]:
        """
        Insert zero-amount skip markers for every active plan still open this month.

        Unlike `reconcile`, database errors propagate to the caller; a claim
        conflict only means another session already settled that plan.
        """
        plans = [plan_to_domain(row) for row in self.plan_repo.list_by_user(user_id)]
        investments = [investment_to_domain(row) for row in self.investment_repo.list_by_user(user_id)]

        inserted = []
        for marker in plan_skip_markers(user_id, today, plans, investments):
            row = self._insert_claimed(
                Obligation.SIP,
                str(marker.sip_plan_id),
                month_start(today),
                lambda marker=marker: investment_to_domain(self.investment_repo.create(marker)),
                user_id,
                request_id,
                raise_errors=True,
            )
            if row is not None:
                inserted.append(row)

        record_inserts("SIP_SKIP", len(inserted))
        logging.info(
            "SIP month skipped",
            extra={"user_id": user_id, "request_id": request_id, "plans_skipped": len(inserted)},
        )
        return inserted

    def _run(
        self,
        user_id: str,
        today: date,
        last_reconciled_month: Optional[date],
        request_id: str,
        result: ReconciliationResult,
    ) -> None:
        contributions = self._read_epf(user_id, request_id, result)
        plans, investments = self._read_sip(user_id, request_id, result)

        epf_monthly = settings.default_epf_monthly_cents
        if contributions is not None:
            try:
                configured = self.profile_repo.get_epf_monthly_cents(user_id)
                if configured is not None:
                    epf_monthly = configured
            except SQLAlchemyError as e:
                self._read_failed(Obligation.EPF, user_id, request_id, e, result)
                contributions = None

        plan = plan_reconciliation(
            user_id=user_id,
            today=today,
            contributions=contributions or [],
            plans=plans or [],
            investments=investments or [],
            epf_monthly_cents=epf_monthly,
            last_reconciled_month=last_reconciled_month,
            epf_trigger_day=settings.epf_trigger_day,
            sip_trigger_day=settings.sip_trigger_day,
        )
        if plan.skipped_by_guard:
            result.skipped_by_guard = True
            return

        if plan.epf is not None and contributions is not None:
            epf = plan.epf
            row = self._insert_claimed(
                Obligation.EPF,
                EPF_CLAIM_KEY,
                plan.month,
                lambda: epf_to_domain(self.epf_repo.create(epf)),
                user_id,
                request_id,
                result=result,
            )
            if row is not None:
                result.inserted_epf.append(row)

        if plans is not None:
            for investment in plan.investments:
                row = self._insert_claimed(
                    Obligation.SIP,
                    str(investment.sip_plan_id),
                    plan.month,
                    lambda investment=investment: investment_to_domain(self.investment_repo.create(investment)),
                    user_id,
                    request_id,
                    result=result,
                )
                if row is not None:
                    result.inserted_investments.append(row)

        record_inserts(Obligation.EPF.value, len(result.inserted_epf))
        record_inserts(Obligation.SIP.value, len(result.inserted_investments))

    def _read_epf(self, user_id: str, request_id: str, result: ReconciliationResult) -> Optional[List[EPFContribution]]:
        try:
            return [epf_to_domain(row) for row in self.epf_repo.list_by_user(user_id)]
        except SQLAlchemyError as e:
            self._read_failed(Obligation.EPF, user_id, request_id, e, result)
            return None

    def _read_sip(
        self, user_id: str, request_id: str, result: ReconciliationResult
    ) -> tuple[Optional[List[SIPPlan]], Optional[List[Investment]]]:
        try:
            plans = [plan_to_domain(row) for row in self.plan_repo.list_by_user(user_id)]
            investments = [investment_to_domain(row) for row in self.investment_repo.list_by_user(user_id)]
            return plans, investments
        except SQLAlchemyError as e:
            self._read_failed(Obligation.SIP, user_id, request_id, e, result)
            return None, None

    def _read_failed(
        self,
        obligation: Obligation,
        user_id: str,
        request_id: str,
        error: Exception,
        result: ReconciliationResult,
    ) -> None:
        self.db.rollback()
        result.failures += 1
        record_failure(obligation.value, "read")
        logging.error(
            f"Failed to read {obligation.value} rows: {error}",
            extra={"user_id": user_id, "request_id": request_id, "obligation": obligation.value, "stage": "read"},
        )

    def _insert_claimed(
        self,
        obligation: Obligation,
        key: str,
        period: date,
        insert,
        user_id: str,
        request_id: str,
        result: Optional[ReconciliationResult] = None,
        raise_errors: bool = False,
    ):
        """Claim the month and insert the row in one transaction; None when nothing was added"""
        try:
            self.claims.claim(user_id, obligation, key, period)
            row = insert()
            self.db.commit()
            return row

        except IntegrityError:
            self.db.rollback()
            record_failure(obligation.value, "conflict")
            logging.warning(
                "Monthly entry already claimed by another session",
                extra={
                    "user_id": user_id,
                    "request_id": request_id,
                    "obligation": obligation.value,
                    "obligation_key": key,
                    "period": period.isoformat(),
                },
            )
            return None

        except SQLAlchemyError as e:
            self.db.rollback()
            record_failure(obligation.value, "write")
            if raise_errors:
                raise
            if result is not None:
                result.failures += 1
            logging.error(
                f"Failed to insert {obligation.value} entry: {e}",
                extra={"user_id": user_id, "request_id": request_id, "obligation": obligation.value, "stage": "write"},
            )
            return None
