from decimal import Decimal
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.services.notification_service import LoggingNotificationService
from src.adapter.services.payment_gateway import SimulatedPaymentGateway
from src.adapter.services.use_case_factory import UseCaseFactory
from src.depends import get_notification_service, get_payment_gateway, get_session
from src.domain.catalog import Album, Artist, Event, Merchandise, Track


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """File-backed SQLite database, fresh for every test"""
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'monetization_test.db'}"

    engine = create_async_engine(db_url, echo=False, future=True, connect_args={"timeout": 10})

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def catalog(db_session):
    """
    Seed the catalog tables

    One artist owning a paid event (100 USD), a free event, a merchandise
    item with a single unit in stock, an album and a track.
    """
    db_session.add_all([
        Artist(id="artist_1", user_id="artist_user", name="The Rooftops"),
        Artist(id="artist_2", user_id="other_artist_user", name="Somebody Else"),
        Event(
            id="event_paid", artist_id="artist_1", title="Live at the Roof",
            is_paid=True, price=Decimal("100"), currency="USD",
        ),
        Event(id="event_free", artist_id="artist_1", title="Open rehearsal", is_paid=False),
        Merchandise(id="merch_1", artist_id="artist_1", name="Tour hoodie", price=Decimal("40"), stock=1),
        Album(id="album_1", artist_id="artist_1", title="First Light"),
        Track(id="track_1", album_id="album_1", title="Opening"),
    ])
    await db_session.commit()

    return SimpleNamespace(
        artist_id="artist_1",
        artist_user="artist_user",
        other_artist_id="artist_2",
        paid_event_id="event_paid",
        free_event_id="event_free",
        merchandise_id="merch_1",
        album_id="album_1",
        track_id="track_1",
    )


@pytest.fixture
def payment_gateway():
    return SimulatedPaymentGateway(success_rate=1.0)


@pytest_asyncio.fixture
async def use_cases(db_session, payment_gateway):
    """Use cases over the test session with an always-approving gateway"""
    return UseCaseFactory(
        db_session,
        payment_gateway=payment_gateway,
        notification_service=LoggingNotificationService(),
    )


@pytest_asyncio.fixture
async def client(db_session, payment_gateway):
    """Create test client with database session and gateway overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_notification_service] = LoggingNotificationService

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=f"http://test{ApplicationConfig.API_PREFIX}",
    ) as ac:
        yield ac
