import logging

from flask import Flask, send_file
from markupsafe import escape

from export_excel import XLSX_MIMETYPE, workbook_bytes
from fetch_rating import fetch_html
from rating_models import ScrapeError
from rating_pipeline import scrape_rating
from settings import ScraperConfig

logger = logging.getLogger(__name__)

DOWNLOAD_ROUTE = "/download-pmi-excel"

LANDING_PAGE = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Рейтинг ПМИ МГУ</title>
  <style>
    body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 40px auto; }}
    h1 {{ color: #1a3d6d; }}
    .btn {{
      display: inline-block;
      padding: 15px 30px;
      background: #1a3d6d;
      color: white;
      text-decoration: none;
      border-radius: 5px;
      font-size: 18px;
      margin: 20px 0;
    }}
    .btn:hover {{ background: #0d2a4d; }}
  </style>
</head>
<body>
  <h1>Рейтинг поступающих на ПМИ МГУ</h1>
  <p>Сервер автоматически парсит данные с официального сайта МГУ и формирует Excel-файл</p>
  <a href="{DOWNLOAD_ROUTE}" class="btn">Скачать Excel-файл</a>
  <p><small>При проблемах со скачиванием обновите страницу или попробуйте позже</small></p>
</body>
</html>
"""

ERROR_PAGE = """<h1>Ошибка сервера</h1>
<p>{message}</p>
<p>Попробуйте позже или обратитесь к администратору</p>
"""


def error_response(error):
    body = ERROR_PAGE.format(message=escape(str(error)))
    return body, 500, {"Content-Type": "text/html; charset=utf-8"}


def create_app(config=None, fetcher=fetch_html):
    config = config or ScraperConfig()
    app = Flask(__name__)

    @app.route('/')
    def index():
        return LANDING_PAGE

    @app.route(DOWNLOAD_ROUTE)
    def download_excel():
        result = scrape_rating(config, fetcher=fetcher)
        if not result.ok:
            logger.error("Failed to scrape the ranking page", exc_info=result.error)
            return error_response(result.error)
        # The whole document is built before the response starts
        try:
            buffer = workbook_bytes(result.snapshot, config.sheet_title)
        except ScrapeError as e:
            logger.exception("Failed to build the Excel file")
            return error_response(e)
        return send_file(
            buffer,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=config.attachment_name,
        )

    return app


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    config = ScraperConfig.from_env()
    app = create_app(config)
    logging.info(f"Server listening on port {config.port}")
    logging.info(f"Open in a browser: http://localhost:{config.port}")
    logging.info(f"Download link: http://localhost:{config.port}{DOWNLOAD_ROUTE}")
    app.run(host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
