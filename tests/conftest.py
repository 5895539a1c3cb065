import pytest


def build_page(tokens, date="Дата обновления: 20.07.2025 12:00", paragraphs=16, tables=9):
    """Render a page shaped like the cpk.msu.ru rating page.

    The date goes into paragraph 15 and the tokens into the last table.
    """
    parts = ["<html><body>"]
    for i in range(paragraphs):
        text = f"  {date}  " if i == 15 else f"paragraph {i}"
        parts.append(f"<p>{text}</p>")
    for i in range(tables - 1):
        parts.append(f"<table><tr><td>decoy {i}</td></tr></table>")
    if tables:
        cells = "\n".join(f"<tr><td>  {token} </td></tr>" for token in tokens)
        parts.append(f"<table>\n{cells}\n</table>")
    parts.append("</body></html>")
    return "\n".join(parts)


def make_tokens(blocks, extra=0):
    """16 preamble tokens, then `blocks` 19-token blocks, then `extra` leftovers."""
    tokens = [f"h{i}" for i in range(16)]
    for b in range(blocks):
        tokens.extend(f"b{b}_{i}" for i in range(19))
    tokens.extend(f"x{i}" for i in range(extra))
    return tokens


@pytest.fixture
def page_factory():
    return build_page


@pytest.fixture
def token_factory():
    return make_tokens
