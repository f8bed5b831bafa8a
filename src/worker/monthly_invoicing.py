"""Monthly Invoicing Background Worker

Generates draft monthly invoices for every active client.
Can be run as a standalone script or triggered by an external scheduler.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.app.use_cases.billing import (
    GenerateMonthlyInvoiceCommandDTO,
    GeneratedInvoiceDTO,
    ClientInvoiceRunDTO,
    MonthlyInvoiceRunResultDTO,
)
from src.depends import build_invoice_generator

logger = logging.getLogger(__name__)


class MonthlyInvoiceWorker:
    """
    Background worker for monthly invoice generation

    Features:
    - Bills the previous month (in the billing timezone) by default
    - Creates draft invoices attributed to the system actor
    - Idempotent: re-running skips clients already invoiced
    - One client's failure never stops the run

    Usage:
        # Run for previous month (typical cron usage)
        worker = MonthlyInvoiceWorker()
        result = await worker.run_once()

        # Run for a specific month
        result = await worker.run_once(year=2026, month=3)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        actor_id: Optional[str] = None,
        billing_timezone: Optional[str] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            actor_id: Actor recorded on invoices and lock audit (defaults to ApplicationConfig.SYSTEM_ACTOR_ID)
            billing_timezone: IANA zone deciding the default billing month (defaults to ApplicationConfig.BILLING_TIMEZONE)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.actor_id = actor_id or ApplicationConfig.SYSTEM_ACTOR_ID
        self.billing_timezone = ZoneInfo(billing_timezone or ApplicationConfig.BILLING_TIMEZONE)

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("MonthlyInvoiceWorker initialized")

    def _get_billing_month(
        self, year: Optional[int] = None, month: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Resolve the billing month, defaulting to the previous month
        as seen in the billing timezone

        Returns:
            Tuple of (year, month)
        """
        if year is not None and month is not None:
            return year, month

        today = datetime.now(self.billing_timezone)
        if today.month == 1:
            return today.year - 1, 12
        return today.year, today.month - 1

    async def run_once(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> MonthlyInvoiceRunResultDTO:
        """
        Generate invoices for all active clients for one billing month

        Args:
            year: Year (optional, defaults to previous month)
            month: Month (optional, defaults to previous month)

        Returns:
            MonthlyInvoiceRunResultDTO with summary and per-client results
        """
        start_time = time.time()
        billing_year, billing_month = self._get_billing_month(year, month)

        logger.info(f"Starting monthly invoicing for {billing_year}-{billing_month:02d}")

        results = []
        successful = 0
        skipped = 0
        failed = 0

        async with self.async_session_factory() as session:
            client_repo = SqlAlchemyClientRepository(session)
            clients = await client_repo.get_active_clients()

        logger.info(f"Found {len(clients)} active clients")

        for client in clients:
            client_start = time.time()

            try:
                # Isolate each client's writes in its own session
                async with self.async_session_factory() as client_session:
                    use_case = build_invoice_generator(client_session)

                    command = GenerateMonthlyInvoiceCommandDTO(
                        client_id=client.id,
                        month=billing_month,
                        year=billing_year,
                        actor_id=self.actor_id,
                        is_draft=True,
                    )

                    result = await use_case.execute(command)

                duration_ms = int((time.time() - client_start) * 1000)

                if result.is_err():
                    failed += 1
                    logger.error(
                        f"Failed to invoice client {client.company_name} ({client.id}): "
                        f"{result.error.message} - {result.error.reason}"
                    )
                    results.append(
                        ClientInvoiceRunDTO(
                            client_id=client.id,
                            client_name=client.company_name,
                            status="error",
                            message=result.error.message,
                            duration_ms=duration_ms,
                        )
                    )
                elif isinstance(result.value, GeneratedInvoiceDTO):
                    successful += 1
                    invoice = result.value.invoice
                    logger.info(
                        f"Created invoice {invoice.invoice_number} for client "
                        f"{client.company_name}: {invoice.total_amount} "
                        f"({result.value.stats.order_count} orders)"
                    )
                    results.append(
                        ClientInvoiceRunDTO(
                            client_id=client.id,
                            client_name=client.company_name,
                            status="success",
                            invoice_number=invoice.invoice_number,
                            amount=invoice.total_amount,
                            order_count=result.value.stats.order_count,
                            duration_ms=duration_ms,
                        )
                    )
                else:
                    skipped += 1
                    logger.info(
                        f"Skipped client {client.company_name}: {result.value.reason.value}"
                    )
                    results.append(
                        ClientInvoiceRunDTO(
                            client_id=client.id,
                            client_name=client.company_name,
                            status="skipped",
                            reason=result.value.reason.value,
                            message=result.value.message,
                            duration_ms=duration_ms,
                        )
                    )

            except Exception as e:
                failed += 1
                logger.error(f"Unexpected error processing client {client.id}: {e}")
                results.append(
                    ClientInvoiceRunDTO(
                        client_id=client.id,
                        client_name=client.company_name,
                        status="error",
                        message=str(e),
                        duration_ms=int((time.time() - client_start) * 1000),
                    )
                )

        execution_time_ms = int((time.time() - start_time) * 1000)

        summary = MonthlyInvoiceRunResultDTO(
            billing_month=billing_month,
            billing_year=billing_year,
            total_clients=len(clients),
            successful=successful,
            skipped=skipped,
            failed=failed,
            results=results,
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Monthly invoicing complete: {successful} generated, {skipped} skipped, "
            f"{failed} failed of {len(clients)} clients, {execution_time_ms}ms"
        )

        return summary

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("MonthlyInvoiceWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for previous month
        python -m src.worker.monthly_invoicing

        # Run for specific month
        python -m src.worker.monthly_invoicing --year 2026 --month 3
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Monthly Invoicing Worker")
    parser.add_argument("--year", type=int, help="Billing year")
    parser.add_argument("--month", type=int, choices=range(1, 13), help="Billing month")
    args = parser.parse_args()

    if not ApplicationConfig.MONTHLY_INVOICING_ENABLED:
        logger.info("Monthly invoicing disabled; exiting")
        return

    worker = MonthlyInvoiceWorker()

    try:
        result = await worker.run_once(year=args.year, month=args.month)
        print(f"Invoicing complete for {result.billing_year}-{result.billing_month:02d}:")
        print(f"  Total clients: {result.total_clients}")
        print(f"  Generated: {result.successful}")
        print(f"  Skipped: {result.skipped}")
        print(f"  Failed: {result.failed}")
        print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
