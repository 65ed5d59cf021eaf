import pytest
from sqlmodel import Session, SQLModel

from ..core.db import create_engine_for_url


@pytest.fixture
def engine(tmp_path):
    db_engine = create_engine_for_url(f"sqlite:///{tmp_path / 'ledger.db'}")
    SQLModel.metadata.create_all(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session
