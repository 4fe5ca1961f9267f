# -*- coding: utf-8 -*-
# backend/core/db.py – SQLite + SQLAlchemy
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    create_engine,
    event,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from backend.core.config import settings

engine = create_engine(f"sqlite:///{settings.db_path}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # ON DELETE CASCADE on schema_intervals is a no-op without this pragma
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)


# MODELS
class Setting(Base):
    __tablename__ = "settings"
    key = Column(String, primary_key=True)
    value = Column(String)


class TemperatureLog(Base):
    __tablename__ = "temperature_log"
    id = Column(Integer, primary_key=True)
    ts = Column(DateTime, default=datetime.utcnow, index=True)
    temperature = Column(Float, nullable=False)


class ClimateSchema(Base):
    __tablename__ = "schemas"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    in_office_temp = Column(Float, nullable=False)
    out_of_office_temp = Column(Float, nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)

    intervals = relationship(
        "SchemaInterval",
        back_populates="schema",
        cascade="all, delete-orphan",
        order_by=lambda: [SchemaInterval.day_of_week, SchemaInterval.start_time_minutes],
    )


class SchemaInterval(Base):
    __tablename__ = "schema_intervals"
    id = Column(Integer, primary_key=True)
    schema_id = Column(Integer, ForeignKey("schemas.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)          # 0 = Sunday
    start_time_minutes = Column(Integer, nullable=False)   # 0-1439
    end_time_minutes = Column(Integer, nullable=False)     # 1-1440

    schema = relationship("ClimateSchema", back_populates="intervals")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_interval_day"),
        CheckConstraint("start_time_minutes BETWEEN 0 AND 1439", name="ck_interval_start"),
        CheckConstraint("end_time_minutes BETWEEN 1 AND 1440", name="ck_interval_end"),
        CheckConstraint("end_time_minutes > start_time_minutes", name="ck_interval_order"),
    )


Index("ux_schemas_name_nocase", func.lower(ClimateSchema.name), unique=True)
# at most one row may carry is_active = 1
Index(
    "ux_schemas_single_active",
    ClimateSchema.is_active,
    unique=True,
    sqlite_where=ClimateSchema.is_active == True,  # noqa: E712
)
