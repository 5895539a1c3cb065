from bs4 import BeautifulSoup
import json
import logging
import sys

from rating_models import (
    COLUMN_NAMES,
    ExtractionError,
    FETCH_FAILED_MESSAGE,
    RankingSnapshot,
)

logger = logging.getLogger(__name__)

# Positions below match the live cpk.msu.ru layout, not any published schema.
# The page has no ids or classes on these elements, so a new paragraph or
# table upstream shifts everything and yields wrong or empty data.
DATE_PARAGRAPH_INDEX = 15
RANKING_TABLE_INDEX = 8

# Flattened table text: a fixed header region, then one block per applicant.
PREAMBLE_TOKENS = 16
BLOCK_SIZE = 19
# Block offsets for номер, согласие, приоритет, баллы, статус
FIELD_OFFSETS = (1, 2, 3, 7, 16)


def _nth(soup, tag, index):
    elements = soup.find_all(tag)
    if len(elements) <= index:
        logger.warning(f"Page has {len(elements)} <{tag}> elements, expected more than {index}")
        return None
    return elements[index]


def find_publication_date(soup):
    paragraph = _nth(soup, 'p', DATE_PARAGRAPH_INDEX)
    if paragraph is None:
        return ""
    return paragraph.get_text().strip()


def find_ranking_table(soup):
    return _nth(soup, 'table', RANKING_TABLE_INDEX)


def flatten_table_text(table):
    """Split the table's text on newlines, dropping blank fragments."""
    if table is None:
        return []
    fragments = (item.strip() for item in table.get_text().split('\n'))
    return [item for item in fragments if item]


def split_blocks(tokens):
    # A trailing partial block is dropped
    last_start = len(tokens) - BLOCK_SIZE
    return [tokens[i:i + BLOCK_SIZE] for i in range(PREAMBLE_TOKENS, last_start + 1, BLOCK_SIZE)]


def block_to_row(block):
    return [block[offset] for offset in FIELD_OFFSETS]


def extract_snapshot(soup):
    date = find_publication_date(soup)
    tokens = flatten_table_text(find_ranking_table(soup))
    rows = [block_to_row(block) for block in split_blocks(tokens)]
    logger.info(f"Extracted {len(rows)} rows from {len(tokens)} table tokens")
    return RankingSnapshot(publication_date=date, column_names=COLUMN_NAMES, rows=rows)


def parse_rating_html(html):
    """Parse the ranking page into a RankingSnapshot.

    Any parser failure surfaces as ExtractionError with the original
    exception chained.
    """
    try:
        soup = BeautifulSoup(html, 'html.parser')
        return extract_snapshot(soup)
    except Exception as e:
        raise ExtractionError(FETCH_FAILED_MESSAGE) from e


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    argv = sys.argv[1:] if argv is None else argv
    html_file = argv[0] if len(argv) > 0 else "pmi_rating.html"
    json_file = argv[1] if len(argv) > 1 else "pmi_rating.json"

    with open(html_file, 'r', encoding='utf-8') as f:
        snapshot = parse_rating_html(f.read())
    print(f"Extracted {len(snapshot.rows)} rows, date: {snapshot.publication_date!r}")
    with open(json_file, "w", encoding='utf-8') as f:
        json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)


if __name__ == "__main__":
    main()
