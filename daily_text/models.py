# models.py
from dataclasses import dataclass
from typing import Any, Dict

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

daily_texts = Table(
    'daily_texts',
    metadata,
    Column('date', Text, primary_key=True),  # YYYY-MM-DD
    Column('text', Text, nullable=False),
    Column('text_content', Text, nullable=False),
    Column('explanation', Text, nullable=False),
    Column('reference', Text, nullable=False),
)


@dataclass(frozen=True)
class DailyRecord:
    date: str
    text: str
    text_content: str
    explanation: str
    reference: str

    def to_dict(self) -> Dict[str, str]:
        """JSON shape, in the field order consumers expect."""
        return {
            'date': self.date,
            'text': self.text,
            'textContent': self.text_content,
            'explanation': self.explanation,
            'reference': self.reference,
        }

    def to_row(self) -> Dict[str, str]:
        return {
            'date': self.date,
            'text': self.text,
            'text_content': self.text_content,
            'explanation': self.explanation,
            'reference': self.reference,
        }

    @classmethod
    def from_row(cls, row: Any) -> 'DailyRecord':
        return cls(
            date=row['date'],
            text=row['text'],
            text_content=row['text_content'],
            explanation=row['explanation'],
            reference=row['reference'],
        )


@dataclass(frozen=True)
class ScriptureParts:
    text: str  # citation, e.g. "(Juan 11:4)."
    text_content: str  # scripture body
