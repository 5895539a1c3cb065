import http.client
import urllib.request
import logging
import sys

from rating_models import FetchError, FETCH_FAILED_MESSAGE
from settings import ScraperConfig

logger = logging.getLogger(__name__)

output_file = "pmi_rating.html"


def _decode(content, charset):
    try:
        return content.decode(charset or "utf-8")
    except (LookupError, UnicodeDecodeError):
        return content.decode("utf-8", errors="replace")


def fetch_html(config):
    """Download the ranking page once, no retries.

    Raises FetchError on timeouts, unreachable hosts and non-2xx answers.
    """
    request = urllib.request.Request(
        config.source_url, headers={"User-Agent": config.user_agent}
    )
    logger.info(f"Downloading from {config.source_url}...")
    try:
        with urllib.request.urlopen(request, timeout=config.timeout) as response:
            status = getattr(response, "status", 200)
            if not 200 <= status < 300:
                raise FetchError(f"{FETCH_FAILED_MESSAGE} (HTTP {status})")
            content = response.read()
            charset = response.headers.get_content_charset()
    except FetchError:
        raise
    # HTTPError, URLError and socket timeouts are OSError subclasses;
    # truncated bodies and malformed status lines are HTTPException
    except (OSError, http.client.HTTPException, ValueError) as e:
        raise FetchError(FETCH_FAILED_MESSAGE) from e
    logger.info(f"Received {len(content)} bytes")
    return _decode(content, charset)


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    argv = sys.argv[1:] if argv is None else argv
    target = argv[0] if argv else output_file
    try:
        html = fetch_html(ScraperConfig.from_env())
    except FetchError as e:
        logging.error(f"Failed to download page: {e} ({e.__cause__})")
        sys.exit(1)
    with open(target, 'w', encoding='utf-8') as f:
        f.write(html)
    logging.info(f"Successfully downloaded to {target}")


if __name__ == "__main__":
    main()
