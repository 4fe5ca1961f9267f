import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import backend.core.store as store
from backend.core.db import Base


@pytest.fixture
def store_db(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'climate.db'}",
        connect_args={"check_same_thread": False},
    )
    SessionLocal = sessionmaker(bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(store, "SessionLocal", SessionLocal)
    monkeypatch.setitem(store.CLIMATE, "default_target_temp_c", 22.0)
    yield SessionLocal
    engine.dispose()
