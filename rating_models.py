from dataclasses import dataclass, field
from typing import List, Optional

COLUMN_NAMES = ("номер", "согласие", "приоритет", "баллы", "статус")

FETCH_FAILED_MESSAGE = "Не удалось получить данные с сайта МГУ"
EMIT_FAILED_MESSAGE = "Не удалось сформировать Excel-файл"


class ScrapeError(Exception):
    """Base class for failures of the fetch -> extract -> emit chain."""


class FetchError(ScrapeError):
    pass


class ExtractionError(ScrapeError):
    pass


class EmissionError(ScrapeError):
    pass


@dataclass
class RankingSnapshot:
    # Free text taken from the page prose, repeated on every exported row
    publication_date: str = ""
    column_names: tuple = COLUMN_NAMES
    rows: List[List[str]] = field(default_factory=list)

    def to_dict(self):
        return {
            "date": self.publication_date,
            "headers": list(self.column_names),
            "rows": [list(row) for row in self.rows],
        }


@dataclass
class ScrapeResult:
    snapshot: Optional[RankingSnapshot] = None
    error: Optional[ScrapeError] = None

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def success(cls, snapshot):
        return cls(snapshot=snapshot)

    @classmethod
    def failure(cls, error):
        return cls(error=error)
