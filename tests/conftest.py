import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.services.position_sizing import PositionSizeInputs, size_position


@pytest.fixture
def long_inputs():
    # 10k account, 1% risk, 150 entry / 145 stop -> 20 shares
    return PositionSizeInputs(
        account_size=10000.0,
        risk_percentage=1.0,
        entry_price=150.0,
        stop_loss_price=145.0,
    )


@pytest.fixture
def long_result(long_inputs):
    return size_position(long_inputs)


@pytest.fixture
def short_inputs():
    return PositionSizeInputs(
        account_size=10000.0,
        risk_percentage=1.0,
        entry_price=50.0,
        stop_loss_price=52.0,
    )


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
