import os
from dataclasses import dataclass

DEFAULT_SOURCE_URL = "https://cpk.msu.ru/rating/dep_02"
# The source answers automation-tool User-Agents with an error page
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class ScraperConfig:
    source_url: str = DEFAULT_SOURCE_URL
    timeout: float = 10
    user_agent: str = DEFAULT_USER_AGENT
    port: int = DEFAULT_PORT
    attachment_name: str = "PMI_Rating.xlsx"
    sheet_title: str = "Рейтинг ПМИ"

    @classmethod
    def from_env(cls, environ=None):
        """Build the config; only PORT is read from the environment."""
        environ = os.environ if environ is None else environ
        port = environ.get("PORT")
        if not port:
            return cls()
        return cls(port=int(port))
