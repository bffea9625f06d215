from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from app.schemas.shipment import ProductLine, ShipmentSnapshot

# Fixed evaluation clock so date-relative rules are deterministic
FIXED_NOW = datetime(2024, 1, 12, 9, 30)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
async def client():
    from app.dependencies import get_now
    from app.main import app

    app.dependency_overrides[get_now] = lambda: FIXED_NOW

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def clean_snapshot() -> ShipmentSnapshot:
    """A fully filled container shipment that triggers no rule at FIXED_NOW."""
    return ShipmentSnapshot(
        etd="2024-01-05",
        eta="2024-02-10",
        payment_method="bank_transfer",
        fixed_price_usd_per_ton=450,
        cargo_type="containers",
        container_count=10,
        weight_ton=200,
        free_time_days=14,
        lines=(
            ProductLine(quantity_mt=200, amount_usd=90000, bags_count=8000),
        ),
        bl_no="MSKU1234567",
    )
