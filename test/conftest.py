import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from tabula import DbClient, TableConfig, TableModel

MEMBER_COUNT = 45
MEMBER_ATTRIBUTES = frozenset({"name", "email", "age"})


class Member(TableModel):
    pass


# One in-memory database per test, shared by every connection of the engine
@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE member ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "name TEXT NOT NULL, "
                "email TEXT, "
                "age INTEGER)"
            )
        )
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    return DbClient(engine=engine)


# member01 .. member45, age equal to the id
@pytest.fixture
def seeded(engine):
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO member (name, email, age) VALUES (:name, :email, :age)"),
            [
                {"name": f"member{i:02d}", "email": f"m{i}@example.com", "age": i}
                for i in range(1, MEMBER_COUNT + 1)
            ],
        )


@pytest.fixture
def member_config():
    return TableConfig(attributes=MEMBER_ATTRIBUTES)


@pytest.fixture
def make_member(db, member_config, seeded):
    def _make(raw=None):
        return Member(member_config, db, raw)

    return _make
