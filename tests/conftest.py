"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Generator
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from adyen_gateway.adyen.config import GatewayConfig
from adyen_gateway.api.dependencies import get_gateway_registry
from adyen_gateway.api.main import create_app
from adyen_gateway.domain.models import (
    Address,
    ContactName,
    Customer,
    Money,
    Payment,
    PaymentLine,
    PaymentMethods,
    TaxedMoney,
)
from adyen_gateway.gateway import Gateway, GatewayRegistry
from adyen_gateway.infrastructure.clients.adyen import AdyenClient
from adyen_gateway.infrastructure.database.models import Base
from adyen_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        config_id=1,
        merchant_account="YOUR_MERCHANT_ACCOUNT",
        api_key="test_api_key",
        origin_url="https://shop.example.com",
        default_locale="nl_NL",
    )


@pytest.fixture
def adyen_client() -> MagicMock:
    """Adyen client collaborator without network access"""
    return MagicMock(spec=AdyenClient)


@pytest.fixture
def gateway(gateway_config: GatewayConfig, adyen_client: MagicMock) -> Gateway:
    return Gateway(gateway_config, adyen_client)


@pytest.fixture
def registry(gateway: Gateway) -> GatewayRegistry:
    return GatewayRegistry({gateway.config.config_id: gateway})


@pytest.fixture
def client(db: Session, registry: GatewayRegistry) -> TestClient:
    """Create FastAPI test client with test database and gateway registry"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway_registry] = lambda: registry
    return TestClient(app)


@pytest.fixture
def make_payment() -> Callable[..., Payment]:
    """Factory for a generic payment with sensible defaults"""

    def factory(**overrides) -> Payment:
        values = dict(
            id=1001,
            config_id=1,
            total_amount=Money(value=Decimal("10.00"), currency="EUR"),
            method=PaymentMethods.IDEAL,
            issuer="ABC",
            description="Order 1001",
            return_url="https://x/r",
        )
        values.update(overrides)
        return Payment(**values)

    return factory


@pytest.fixture
def customer() -> Customer:
    return Customer(
        name=ContactName(first_name="Jane", last_name="Doe"),
        email="jane@example.com",
        phone="+31612345678",
        ip_address="203.0.113.7",
        locale="de_DE",
        user_id="42",
        gender="female",
        birth_date=date(1990, 4, 2),
    )


@pytest.fixture
def billing_address() -> Address:
    return Address(
        street_name="Keizersgracht",
        house_number="1",
        postal_code="1015 CJ",
        city="Amsterdam",
        country_code="NL",
    )


@pytest.fixture
def sample_lines() -> list[PaymentLine]:
    """Two taxed lines and one without name or description"""
    return [
        PaymentLine(
            id="sku-1",
            name="Widget",
            quantity=2,
            unit_price=TaxedMoney(value=Decimal("12.10"), currency="EUR", tax_value=Decimal("2.10"), tax_percentage=Decimal("21")),
            total_amount=TaxedMoney(value=Decimal("24.20"), currency="EUR", tax_value=Decimal("4.20"), tax_percentage=Decimal("21")),
        ),
        PaymentLine(
            description="Gift wrapping",
            quantity=1,
            unit_price=TaxedMoney(value=Decimal("1.09"), currency="EUR", tax_value=Decimal("0.09"), tax_percentage=Decimal("9")),
            total_amount=TaxedMoney(value=Decimal("1.09"), currency="EUR", tax_value=Decimal("0.09"), tax_percentage=Decimal("9")),
        ),
        PaymentLine(
            quantity=1,
            unit_price=TaxedMoney(value=Decimal("5.00"), currency="EUR"),
            total_amount=TaxedMoney(value=Decimal("5.00"), currency="EUR"),
        ),
    ]
