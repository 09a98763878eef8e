# database.py (SQLAlchemy; SQLite or Postgres URL)
from typing import List, Sequence

from sqlalchemy import create_engine, delete, insert, select
from sqlalchemy.engine import Engine

from .models import DailyRecord, daily_texts, metadata


def get_engine(database_url: str) -> Engine:
    return create_engine(database_url, future=True)


def init_db(engine: Engine) -> None:
    metadata.create_all(engine)


def replace_year(engine: Engine, year: str, records: Sequence[DailyRecord]) -> int:
    """
    Replace every row of `year` with `records` in a single transaction.
    Returns the number of rows inserted.
    """
    init_db(engine)
    with engine.begin() as conn:
        conn.execute(delete(daily_texts).where(daily_texts.c.date.like(f'{year}-%')))
        if records:
            conn.execute(insert(daily_texts), [r.to_row() for r in records])
    return len(records)


def fetch_year(engine: Engine, year: str) -> List[DailyRecord]:
    stmt = (
        select(daily_texts)
        .where(daily_texts.c.date.like(f'{year}-%'))
        .order_by(daily_texts.c.date.asc())
    )
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [DailyRecord.from_row(r) for r in rows]
