from datetime import datetime
from typing import List

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers tables on SQLModel.metadata
from src.depends import get_session
from src.domain.client import Client
from src.domain.order import Order, OrderStatus
from src.domain.order_item import OrderItem
from src.domain.product import Product


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine backed by a temporary SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def app(db_session):
    """Create application with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    return app


@pytest_asyncio.fixture
async def client(app):
    """Create test client for the application"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class BillingSeeder:
    """Inserts clients, products and orders for a test"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def client(self, client_id: str, company_name: str = "Acme Fulfillment", is_active: bool = True):
        self.session.add(Client(id=client_id, company_name=company_name, is_active=is_active))
        await self.session.commit()

    async def product(self, product_id: str, sku: str, name: str):
        self.session.add(Product(id=product_id, sku=sku, name=name))
        await self.session.commit()

    async def order(
        self,
        order_id: str,
        client_id: str,
        quantities: List[int],
        product_id: str = None,
        delivered_at: datetime = None,
        dispatched_at: datetime = None,
        status: OrderStatus = OrderStatus.DELIVERED,
        invoice_id: str = None,
        created_at: datetime = None,
    ):
        self.session.add(
            Order(
                id=order_id,
                order_number=f"ORD-{order_id}",
                client_id=client_id,
                status=status,
                delivered_at=delivered_at,
                dispatched_at=dispatched_at,
                invoice_id=invoice_id,
                created_at=created_at or datetime(2026, 2, 20),
            )
        )
        await self.session.flush()
        for index, quantity in enumerate(quantities):
            self.session.add(
                OrderItem(
                    id=f"{order_id}-item-{index}",
                    order_id=order_id,
                    product_id=product_id,
                    quantity=quantity,
                )
            )
        await self.session.commit()


@pytest_asyncio.fixture
async def seed(db_session):
    return BillingSeeder(db_session)
