import json
from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CSVBatch(Base):
    """
    Model for a stored batch of CSV records

    Records are kept as JSON text rather than a JSON column so key order
    survives backends (such as PostgreSQL JSONB) that reorder object keys.
    """
    __tablename__ = 'csv_data'

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False, default='')
    data = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @property
    def records(self) -> List[Dict[str, str]]:
        return json.loads(self.data)

    @records.setter
    def records(self, value: List[Dict[str, str]]) -> None:
        self.data = json.dumps(value, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"<CSVBatch id={self.id} filename={self.filename!r}>"
