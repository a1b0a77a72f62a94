"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy.orm import Session, sessionmaker

from src.db.database import create_db_engine
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_db_engine(DATABASE_URL)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Sessions on a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
