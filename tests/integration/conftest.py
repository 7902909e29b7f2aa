import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tests.fixtures.json_loader import TestDataLoader
from zerogrid.adapter.services.database import Database
from zerogrid.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from zerogrid.app.services.notifier import INotifier
from zerogrid.depends import get_notifier, get_unit_of_work


class RecordingNotifier(INotifier):
    """Keeps submitted emails in memory instead of delivering them"""

    def __init__(self):
        self.messages = []

    def submit(self, message):
        self.messages.append(message)

    def of_kind(self, kind):
        return [m for m in self.messages if m.kind == kind]


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def database():
    database = Database("sqlite+aiosqlite:///./test.db")
    await database.create_all()
    yield database
    await database.drop_all()
    await database.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
def notifier():
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(db_session, notifier):
    from config import ApplicationConfig
    from zerogrid.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
