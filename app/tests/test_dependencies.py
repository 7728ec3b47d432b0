import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from core.db import get_db
from core.dependencies import get_bus_service, get_user_service
from exceptions import domain_exception_handler
from schemas.bus import BusCreate
from schemas.user import UserCreate
from services.bus_service import BusService
from services.exceptions import FleetDomainError
from services.user_service import UserService


@pytest.fixture
def test_app(async_db_session) -> FastAPI:
    """A lightweight app exercising the providers against the test session."""
    async def override_get_db():
        yield async_db_session

    test_app = FastAPI()
    test_app.add_exception_handler(FleetDomainError, domain_exception_handler)

    @test_app.post("/buses")
    async def create(svc: BusService = Depends(get_bus_service)):
        bus = await svc.create_bus(BusCreate())
        return {"nia": bus.nia}

    @test_app.get("/buses/count")
    async def count(svc: BusService = Depends(get_bus_service)):
        return await svc.count_buses()

    @test_app.patch("/drivers/{driver_id}/route")
    async def change_route(driver_id: int, svc: BusService = Depends(get_bus_service)):
        bus = await svc.change_route(driver_id, None)
        return {"id": bus.id}

    @test_app.post("/users")
    async def signup(svc: UserService = Depends(get_user_service)):
        user = await svc.create_user(
            UserCreate(name="Rui", email="rui@example.com", number="+244911000000", password="x1y2z3")
        )
        return {"id": user.id}

    test_app.dependency_overrides[get_db] = override_get_db
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_providers_share_request_session(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        assert (await client.post("/buses")).json() == {"nia": "BUS-0001"}
        assert (await client.post("/buses")).json() == {"nia": "BUS-0002"}
        assert (await client.get("/buses/count")).json() == {"count": 2}


@pytest.mark.asyncio
async def test_domain_errors_surface_through_providers(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        response = await client.patch("/drivers/42/route")
        assert response.status_code == 404
        assert response.json()["message"] == "Este autocarro não existe"

        assert (await client.post("/users")).status_code == 200
        duplicate = await client.post("/users")
        assert duplicate.status_code == 400
        assert duplicate.json()["message"] == "Já encontramos uma conta com este e-mail !"
