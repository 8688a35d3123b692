"""
Unit tests for the command-line entry point.
"""

import os

import pytest
from unittest.mock import patch

from opinion_insights import cli
from opinion_insights.config.defaults import create_test_config
from opinion_insights.config.validation import ConfigurationError
from opinion_insights.postprocess.formatter import RunReport
from opinion_insights.scraper.errors import OperationCancelled, SessionFatal


@pytest.fixture
def args_for():
    parser = cli.build_parser()
    return lambda *argv: parser.parse_args(list(argv))


class TestArguments:
    """Test cases for command-line overrides."""

    def test_no_arguments_keep_configuration(self, args_for):
        config = cli.apply_arguments(create_test_config(), args_for())

        assert config.scrape_settings.article_count == 5
        assert config.scrape_settings.session_backend == "static"
        assert config.translation_config.api_key == "test-key"

    def test_overrides_applied(self, args_for):
        args = args_for(
            "--count", "3", "--paragraphs", "2", "--threshold", "1",
            "--target-lang", "fr", "--api-key", "cli-key", "--session", "selenium",
            "--headless", "--images-dir", "covers", "--translation-delay", "0.2",
            "--log-level", "debug"
        )

        config = cli.apply_arguments(create_test_config(), args)

        assert config.scrape_settings.article_count == 3
        assert config.scrape_settings.paragraph_cap == 2
        assert config.scrape_settings.repeat_threshold == 1
        assert config.scrape_settings.session_backend == "selenium"
        assert config.scrape_settings.headless is True
        assert config.scrape_settings.images_dir == "covers"
        assert config.translation_config.target_lang == "fr"
        assert config.translation_config.api_key == "cli-key"
        assert config.translation_config.inter_call_delay_seconds == 0.2
        assert config.log_level == "DEBUG"

    def test_invalid_override_rejected(self, args_for):
        with pytest.raises(ConfigurationError):
            cli.apply_arguments(create_test_config(), args_for("--count", "0"))


class TestMain:
    """Test cases for main() exit codes."""

    @pytest.fixture(autouse=True)
    def _isolate(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
        self.base_argv = ["--env-file", str(tmp_path / "missing.env"), "--config-dir", str(tmp_path)]

    @patch.dict(os.environ, {}, clear=True)
    def test_successful_run_prints_report(self, capsys):
        report = RunReport(listing_url="https://elpais.com/opinion/", repeated_words=[("future", 3)])

        with patch.object(cli.OpinionPipeline, "run_with_session", return_value=report):
            code = cli.main(self.base_argv + ["--session", "static"])

        assert code == cli.EXIT_OK
        output = capsys.readouterr().out
        assert "SCRAPED ARTICLES" in output
        assert 'Repeated word "future" appears 3 times.' in output

    @patch.dict(os.environ, {}, clear=True)
    def test_json_output(self, capsys):
        report = RunReport(listing_url="https://elpais.com/opinion/")

        with patch.object(cli.OpinionPipeline, "run_with_session", return_value=report):
            code = cli.main(self.base_argv + ["--json"])

        assert code == cli.EXIT_OK
        assert '"listing_url": "https://elpais.com/opinion/"' in capsys.readouterr().out

    @patch.dict(os.environ, {}, clear=True)
    def test_session_fatal_exit_code(self):
        with patch.object(cli.OpinionPipeline, "run_with_session", side_effect=SessionFatal("no browser")):
            assert cli.main(self.base_argv) == cli.EXIT_SESSION_FATAL

    @patch.dict(os.environ, {}, clear=True)
    def test_cancelled_exit_code(self):
        with patch.object(cli.OpinionPipeline, "run_with_session", side_effect=OperationCancelled()):
            assert cli.main(self.base_argv) == cli.EXIT_CANCELLED

    @patch.dict(os.environ, {}, clear=True)
    def test_configuration_error_exit_code(self):
        assert cli.main(self.base_argv + ["--count", "-1"]) == cli.EXIT_CONFIG_ERROR

    @patch.dict(os.environ, {}, clear=True)
    def test_sigint_handler_restored(self):
        import signal
        before = signal.getsignal(signal.SIGINT)

        with patch.object(cli.OpinionPipeline, "run_with_session", return_value=RunReport(listing_url="u")):
            cli.main(self.base_argv)

        assert signal.getsignal(signal.SIGINT) is before
