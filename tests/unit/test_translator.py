"""
Unit tests for the title translation client.
"""

import pytest
from unittest.mock import Mock, call
import requests

from opinion_insights.analysis.error_handler import MalformedTranslationResponse
from opinion_insights.analysis.translator import TranslationClient, parse_translation
from opinion_insights.config.models import TranslationAPIConfig
from opinion_insights.scraper.cancellation import CancellationToken
from opinion_insights.scraper.errors import OperationCancelled


def _response(status_code=200, payload=None, text="", content_type="application/json"):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.headers = {"Content-Type": content_type}
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


class TestParseTranslation:
    """Test cases for response payload parsing."""

    def test_list_payload(self):
        """The multi-traduction endpoint answers with a list of strings."""
        assert parse_translation(["Hello world"]) == "Hello world"

    def test_plain_string_payload(self):
        assert parse_translation("  Hello  ") == "Hello"

    def test_object_payloads(self):
        """Common provider response shapes are understood."""
        assert parse_translation({"translatedText": "Hi"}) == "Hi"
        assert parse_translation({"translation": "Hi"}) == "Hi"
        assert parse_translation({"data": {"translations": [{"translatedText": "Hi"}]}}) == "Hi"

    @pytest.mark.parametrize("payload", [None, [], {}, {"message": 42}, [""], "   "])
    def test_malformed_payloads(self, payload):
        """Payloads without non-empty text are rejected."""
        with pytest.raises(MalformedTranslationResponse):
            parse_translation(payload)


class TestTranslationClient:
    """Test cases for TranslationClient class."""

    def setup_method(self):
        self.config = TranslationAPIConfig(
            endpoint_url="https://translate.example.com/t",
            api_key="test-key",
            inter_call_delay_seconds=0
        )
        self.http = Mock(spec=requests.Session)

    def _client(self, config=None, cancellation=None):
        return TranslationClient(config or self.config, http_session=self.http, cancellation=cancellation)

    def test_translates_in_order(self):
        """Each title is translated and results stay aligned with the input."""
        self.http.post.side_effect = [
            _response(payload=["The future of climate"]),
            _response(payload=["The future of work"]),
        ]

        result = self._client().translate(["El futuro del clima", "El futuro del trabajo"])

        assert result == ["The future of climate", "The future of work"]
        sent = [c.kwargs["json"]["q"] for c in self.http.post.call_args_list]
        assert sent == ["El futuro del clima", "El futuro del trabajo"]

    def test_empty_title_and_failed_call_keep_input(self):
        """An empty title makes no call; a failed call keeps the original title."""
        self.http.post.side_effect = requests.exceptions.ConnectionError("down")

        result = self._client().translate(["", "Hola mundo"])

        assert result == ["", "Hola mundo"]
        assert self.http.post.call_count == 1

    def test_partial_failure_preserves_alignment(self):
        """A failure in the middle only affects its own position."""
        self.http.post.side_effect = [
            _response(payload=["One"]),
            _response(status_code=500, text="error"),
            _response(payload=["Three"]),
        ]

        result = self._client().translate(["Uno", "Dos", "Tres"])

        assert result == ["One", "Dos", "Three"]

    def test_request_format(self):
        """Payload, credential and host headers follow the endpoint's contract."""
        self.http.post.return_value = _response(payload=["Hello"])

        self._client().translate(["Hola"], source_lang="es", target_lang="en")

        args, kwargs = self.http.post.call_args
        assert args[0] == "https://translate.example.com/t"
        assert kwargs["json"] == {"from": "es", "to": "en", "q": "Hola"}
        assert kwargs["headers"]["x-rapidapi-key"] == "test-key"
        assert kwargs["headers"]["x-rapidapi-host"] == "translate.example.com"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == (5, 15)

    def test_explicit_api_host(self):
        config = TranslationAPIConfig(api_key="k", api_host="custom.host", inter_call_delay_seconds=0)
        self.http.post.return_value = _response(payload=["Hello"])

        self._client(config).translate(["Hola"])

        assert self.http.post.call_args.kwargs["headers"]["x-rapidapi-host"] == "custom.host"

    def test_missing_credential_makes_no_calls(self):
        """Without an API key the original titles are returned untouched."""
        config = TranslationAPIConfig(api_key=None)

        result = self._client(config).translate(["Hola", ""])

        assert result == ["Hola", ""]
        self.http.post.assert_not_called()

    def test_malformed_response_keeps_original(self):
        """A JSON body without a translation is a failure for that title."""
        self.http.post.return_value = _response(payload={"unexpected": True})

        assert self._client().translate(["Hola"]) == ["Hola"]

    def test_non_json_text_response(self):
        """A plain-text body is accepted as the translation."""
        self.http.post.return_value = _response(
            payload=ValueError("not json"), text="Hello", content_type="text/plain; charset=utf-8"
        )

        assert self._client().translate(["Hola"]) == ["Hello"]

    def test_non_json_html_response_keeps_original(self):
        self.http.post.return_value = _response(
            payload=ValueError("not json"), text="<html>", content_type="text/html"
        )

        assert self._client().translate(["Hola"]) == ["Hola"]

    def test_fixed_delay_after_every_call(self):
        """The rate-limit delay follows every non-empty call, successful or not."""
        config = TranslationAPIConfig(api_key="k", inter_call_delay_seconds=1.5)
        token = Mock(spec=CancellationToken)
        self.http.post.side_effect = [
            _response(payload=["A"]),
            requests.exceptions.Timeout("slow"),
        ]

        result = self._client(config, cancellation=token).translate(["a", "", "b"])

        assert result == ["A", "", "b"]
        assert token.wait.call_args_list == [call(1.5), call(1.5)]

    def test_rate_limited_call_retried_when_enabled(self):
        """With retries configured a 429 is retried before falling back."""
        config = TranslationAPIConfig(
            api_key="k", max_retries=1, retry_delay_seconds=0, inter_call_delay_seconds=0
        )
        self.http.post.side_effect = [
            _response(status_code=429, text="slow down"),
            _response(payload=["Hello"]),
        ]

        assert self._client(config).translate(["Hola"]) == ["Hello"]
        assert self.http.post.call_count == 2

    def test_client_errors_not_retried(self):
        """A 4xx other than 429 fails immediately."""
        config = TranslationAPIConfig(
            api_key="k", max_retries=3, retry_delay_seconds=0, inter_call_delay_seconds=0
        )
        self.http.post.return_value = _response(status_code=403, text="forbidden")

        assert self._client(config).translate(["Hola"]) == ["Hola"]
        assert self.http.post.call_count == 1

    def test_cancellation_stops_translation(self):
        """A cancelled run raises instead of continuing with the next title."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelled):
            self._client(cancellation=token).translate(["Hola"])
        self.http.post.assert_not_called()

    def test_empty_input(self):
        assert self._client().translate([]) == []
