import io

import pytest
from openpyxl import load_workbook

from app import create_app
from export_excel import XLSX_MIMETYPE
from rating_models import FetchError
from settings import ScraperConfig


def _client(fetcher):
    return create_app(ScraperConfig(), fetcher=fetcher).test_client()


def _unreachable(config):
    raise AssertionError("the landing page must not fetch anything")


def test_landing_page_links_to_download():
    response = _client(_unreachable).get("/")
    assert response.status_code == 200
    assert 'href="/download-pmi-excel"' in response.get_data(as_text=True)


def test_download_returns_workbook(page_factory, token_factory):
    html = page_factory(token_factory(2), date="Обновлено 21.07.2025")
    response = _client(lambda config: html).get("/download-pmi-excel")

    assert response.status_code == 200
    assert response.headers["Content-Type"] == XLSX_MIMETYPE
    disposition = response.headers["Content-Disposition"]
    assert disposition.startswith("attachment")
    assert "filename=PMI_Rating.xlsx" in disposition

    sheet = load_workbook(io.BytesIO(response.data)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert len(rows) == 3
    assert rows[1][-1] == "Обновлено 21.07.2025"


def test_download_with_empty_table_is_header_only(page_factory):
    response = _client(lambda config: page_factory([])).get("/download-pmi-excel")
    assert response.status_code == 200
    rows = list(load_workbook(io.BytesIO(response.data)).active.iter_rows(values_only=True))
    assert len(rows) == 1


def test_fetch_timeout_returns_500(caplog):
    def timed_out(config):
        raise FetchError("Не удалось получить данные с сайта МГУ") from TimeoutError("timed out")

    response = _client(timed_out).get("/download-pmi-excel")

    assert response.status_code == 500
    assert response.mimetype == "text/html"
    body = response.get_data(as_text=True)
    assert "Не удалось получить данные с сайта МГУ" in body
    assert "Ошибка сервера" in body
    assert "Failed to scrape" in caplog.text


def test_extraction_failure_returns_500(monkeypatch):
    import rating_pipeline

    def broken(html):
        from rating_models import ExtractionError
        raise ExtractionError("Не удалось получить данные с сайта МГУ")

    monkeypatch.setattr(rating_pipeline, "parse_rating_html", broken)
    response = _client(lambda config: "<html></html>").get("/download-pmi-excel")
    assert response.status_code == 500
    assert "МГУ" in response.get_data(as_text=True)


@pytest.mark.parametrize("message", ["<script>alert(1)</script>"])
def test_error_message_is_escaped(message):
    def failing(config):
        raise FetchError(message)

    body = _client(failing).get("/download-pmi-excel").get_data(as_text=True)
    assert "<script>" not in body
    assert "&lt;script&gt;" in body


def test_emission_failure_returns_500(monkeypatch, page_factory):
    import app as app_module
    from rating_models import EmissionError

    def broken(snapshot, title):
        raise EmissionError("Не удалось сформировать Excel-файл")

    monkeypatch.setattr(app_module, "workbook_bytes", broken)
    response = _client(lambda config: page_factory([])).get("/download-pmi-excel")
    assert response.status_code == 500
    assert "Не удалось сформировать Excel-файл" in response.get_data(as_text=True)


def test_truncated_source_body_returns_error_page(monkeypatch):
    import http.client
    import urllib.request

    class CutOffResponse:
        status = 200

        def read(self):
            raise http.client.IncompleteRead(b"<html>", 5000)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

    monkeypatch.setattr(urllib.request, "urlopen", lambda request, timeout=None: CutOffResponse())
    app = create_app(ScraperConfig())
    app.config["PROPAGATE_EXCEPTIONS"] = False

    response = app.test_client().get("/download-pmi-excel")

    assert response.status_code == 500
    body = response.get_data(as_text=True)
    assert "Ошибка сервера" in body
    assert "Не удалось получить данные с сайта МГУ" in body
