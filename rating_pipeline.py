from fetch_rating import fetch_html
from parse_rating import parse_rating_html
from rating_models import ScrapeError, ScrapeResult


def scrape_rating(config, fetcher=fetch_html):
    """Run fetch then extract, returning the outcome instead of raising."""
    try:
        html = fetcher(config)
        snapshot = parse_rating_html(html)
    except ScrapeError as e:
        return ScrapeResult.failure(e)
    return ScrapeResult.success(snapshot)
