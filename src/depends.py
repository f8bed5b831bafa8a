from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyOrderItemRepository,
    SqlAlchemyOrderLockAuditRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import (
    GenerateMonthlyInvoice,
    GetOrderLockStatus,
    RebuildMonthlyInvoice,
)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def build_invoice_generator(session: AsyncSession) -> GenerateMonthlyInvoice:
    """Wire GenerateMonthlyInvoice to repositories sharing one session"""
    return GenerateMonthlyInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        order_repo=SqlAlchemyOrderRepository(session),
        order_item_repo=SqlAlchemyOrderItemRepository(session),
        lock_audit_repo=SqlAlchemyOrderLockAuditRepository(session),
    )


async def get_invoice_generator(
    session: AsyncSession = Depends(get_session),
) -> GenerateMonthlyInvoice:
    return build_invoice_generator(session)


async def get_order_lock_status(
    session: AsyncSession = Depends(get_session),
) -> GetOrderLockStatus:
    return GetOrderLockStatus(
        order_repo=SqlAlchemyOrderRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        lock_audit_repo=SqlAlchemyOrderLockAuditRepository(session),
    )


def build_invoice_rebuilder(session: AsyncSession) -> RebuildMonthlyInvoice:
    return RebuildMonthlyInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        order_repo=SqlAlchemyOrderRepository(session),
        generator=build_invoice_generator(session),
    )


async def get_invoice_rebuilder(
    session: AsyncSession = Depends(get_session),
) -> RebuildMonthlyInvoice:
    return build_invoice_rebuilder(session)
