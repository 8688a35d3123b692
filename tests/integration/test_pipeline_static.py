"""
Integration test for the complete opinion pipeline.

Runs the real components (static page session, BeautifulSoup parsing, link
collection, extraction, translation client, word analysis and formatting)
with only the HTTP layer mocked.
"""

import json
import pytest
from unittest.mock import Mock, patch

from opinion_insights.config.defaults import create_test_config
from opinion_insights.pipeline import OpinionPipeline, build_session
from opinion_insights.postprocess.formatter import ReportFormatter


LISTING = "https://elpais.com/opinion/"

LISTING_HTML = """
<html><body>
  <article><header><h2><a href="/opinion/2024-05-01/el-futuro-del-clima.html">El futuro del clima</a></h2></header></article>
  <article><h2><a href="/opinion/2024-05-01/el-futuro-del-trabajo.html">El futuro del trabajo</a></h2></article>
  <article><h2><a href="/opinion/2024-05-01/el-futuro-del-clima.html">Duplicado</a></h2></article>
  <article><h2><a href="/opinion/2024-05-01/clima-y-futuro.html">Clima y futuro</a></h2></article>
  <article><h2><a href="/opinion/2024-05-01/roto.html">Roto</a></h2></article>
</body></html>
"""


def _article_html(title, paragraphs, image=None):
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    figure = f'<figure><img src="{image}"></figure>' if image else ""
    return f"""
    <html><body><article>
      <header><h1 class="a_t">{title}</h1></header>
      {figure}
      <div data-dtm-region="articulo_cuerpo">{body}</div>
    </article></body></html>
    """


PAGES = {
    LISTING: LISTING_HTML,
    "https://elpais.com/opinion/2024-05-01/el-futuro-del-clima.html": _article_html(
        "El futuro del clima", ["Uno.", "", "Dos.", "Tres.", "Cuatro."], "https://imagenes.elpais.com/clima.jpg?w=414"
    ),
    "https://elpais.com/opinion/2024-05-01/el-futuro-del-trabajo.html": _article_html(
        "El futuro del trabajo", ["Trabajo."]
    ),
    "https://elpais.com/opinion/2024-05-01/clima-y-futuro.html": _article_html(
        "Clima y futuro", ["Futuro."], "https://imagenes.elpais.com/futuro.jpg"
    ),
}

TRANSLATIONS = {
    "El futuro del clima": "The future of climate",
    "El futuro del trabajo": "The future of work",
    "Clima y futuro": "Climate and future",
}


def _fake_get(url, **kwargs):
    response = Mock()
    response.url = url
    response.headers = {"Content-Type": "text/html; charset=utf-8"}
    response.encoding = "utf-8"
    if url in PAGES:
        response.status_code = 200
        response.reason = "OK"
        response.text = PAGES[url]
    else:
        response.status_code = 404
        response.reason = "Not Found"
        response.text = ""
    return response


def _post_factory(failing=()):
    def fake_post(url, json=None, **kwargs):
        response = Mock()
        response.headers = {"Content-Type": "application/json"}
        if json["q"] in failing:
            response.status_code = 503
            response.text = "upstream unavailable"
        else:
            response.status_code = 200
            response.json.return_value = [TRANSLATIONS[json["q"]]]
        return response
    return fake_post


class TestStaticPipeline:
    """End-to-end run over static HTML with mocked HTTP."""

    @patch('requests.Session.post', side_effect=_post_factory())
    @patch('requests.Session.get', side_effect=_fake_get)
    def test_complete_run(self, mock_get, mock_post):
        config = create_test_config()
        config.scrape_settings.article_count = 4

        pipeline = OpinionPipeline(config, listing_url=LISTING)
        report = pipeline.run_with_session(lambda: build_session(config, pipeline.site_config))

        # Four unique links in first-seen order; the last one is broken
        assert [a.url for a in report.articles] == [
            "https://elpais.com/opinion/2024-05-01/el-futuro-del-clima.html",
            "https://elpais.com/opinion/2024-05-01/el-futuro-del-trabajo.html",
            "https://elpais.com/opinion/2024-05-01/clima-y-futuro.html",
            "https://elpais.com/opinion/2024-05-01/roto.html",
        ]

        first = report.articles[0]
        assert first.title == "El futuro del clima"
        assert first.content == "Uno. Dos."
        assert first.image_url == "https://imagenes.elpais.com/clima.jpg?w=414"
        assert report.articles[1].image_url is None
        assert report.articles[3].title == ""
        assert report.articles[3].content == ""

        # The broken article's empty title made no call
        assert report.translated_titles == [
            "The future of climate",
            "The future of work",
            "Climate and future",
            "",
        ]
        assert mock_post.call_count == 3
        assert report.repeated_words == [("future", 3)]

        text = ReportFormatter().format_text(report)
        assert 'Repeated word "future" appears 3 times.' in text
        assert "Title (ES): El futuro del clima" in text
        assert "Article 4 Title (EN): Not found" in text

    @patch('requests.Session.post', side_effect=_post_factory(failing={"Clima y futuro"}))
    @patch('requests.Session.get', side_effect=_fake_get)
    def test_failed_translation_keeps_original(self, mock_get, mock_post):
        config = create_test_config()
        config.scrape_settings.article_count = 3

        pipeline = OpinionPipeline(config, listing_url=LISTING)
        report = pipeline.run_with_session(lambda: build_session(config, pipeline.site_config))

        assert report.translated_titles == [
            "The future of climate",
            "The future of work",
            "Clima y futuro",
        ]
        assert report.repeated_words == []

    @patch('requests.Session.post', side_effect=_post_factory())
    @patch('requests.Session.get', side_effect=_fake_get)
    def test_images_saved(self, mock_get, mock_post, tmp_path):
        def get_with_images(url, **kwargs):
            if url.startswith("https://imagenes.elpais.com/"):
                response = Mock()
                response.url = url
                response.status_code = 200
                response.content = b"jpeg"
                response.headers = {"Content-Type": "image/jpeg"}
                response.encoding = None
                return response
            return _fake_get(url, **kwargs)

        mock_get.side_effect = get_with_images
        config = create_test_config()
        config.scrape_settings.article_count = 3
        config.scrape_settings.images_dir = str(tmp_path)

        pipeline = OpinionPipeline(config, listing_url=LISTING)
        report = pipeline.run_with_session(lambda: build_session(config, pipeline.site_config))

        assert report.articles[0].image_path == str(tmp_path / "cover_1_clima.jpg")
        assert report.articles[2].image_path == str(tmp_path / "cover_3_futuro.jpg")
        assert (tmp_path / "cover_1_clima.jpg").read_bytes() == b"jpeg"

    @patch('requests.Session.get', side_effect=_fake_get)
    def test_unreachable_listing_gives_empty_report(self, mock_get):
        config = create_test_config()
        pipeline = OpinionPipeline(config, listing_url="https://elpais.com/missing/")

        report = pipeline.run_with_session(lambda: build_session(config, pipeline.site_config))

        assert report.articles == []
        data = json.loads(ReportFormatter().format_json(report))
        assert data["errors_encountered"]
