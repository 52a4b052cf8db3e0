import io
import json
import logging
import sys
import pytest
from unittest.mock import MagicMock, patch
import constants
import timeline_annotator
from state_store import TimelineStore
from system import ConfigManager


@pytest.fixture
def config(tmp_path):
    return ConfigManager(str(tmp_path / "config" / constants.CONFIG_FILENAME))


def parse(*argv):
    return timeline_annotator.build_parser().parse_args(list(argv))


class TestShow:
    def test_listing(self, config):
        out = io.StringIO()
        timeline_annotator.run_show(parse("show", "?duration=125&e=70%3AB&e=5%3AA&mode=vertical"), config, out)
        assert out.getvalue().splitlines() == ["mode: vertical", "duration: 2:05", "0:05:A", "1:10:B"]

    def test_json(self, config):
        out = io.StringIO()
        timeline_annotator.run_show(parse("show", "--json", "duration=60&e=2%3AX"), config, out)
        assert json.loads(out.getvalue()) == {
            "duration": "60",
            "events": [{"timestamp": "2", "text": "X"}],
            "mode": "editor",
        }

    def test_restores_last_session(self, config):
        timeline_annotator.run_show(parse("show", "https://example.org/?duration=30"), config, io.StringIO())
        assert config.get("last_query") == "duration=30"
        out = io.StringIO()
        timeline_annotator.run_show(parse("show"), config, out)
        assert "duration: 0:30" in out.getvalue()


    def test_oversized_timestamp(self, config):
        out = io.StringIO()
        huge = "9" * 400
        assert timeline_annotator.run_show(parse("show", f"duration=60&e={huge}%3Ax&e=5%3Ay"), config, out) == 0
        assert out.getvalue().splitlines() == ["mode: editor", "duration: 1:00", "0:05:y", "Infinity:NaN:x"]

    def test_reads_through_store(self, config):
        with patch("timeline_annotator.TimelineStore", wraps=TimelineStore) as store:
            timeline_annotator.run_show(parse("show", "https://example.org/?duration=9#top"), config, io.StringIO())
        store.assert_called_once_with("duration=9")


class TestEncode:
    def test_encode_events(self):
        out = io.StringIO()
        timeline_annotator.run_encode(parse("encode", "--duration", "120", "--event", "10:Start",
                                            "--event", "5:Intro: part one", "--mode", "horizontal"), out)
        assert out.getvalue().strip() == "mode=horizontal&duration=120&e=10%3AStart&e=5%3AIntro%3A+part+one"

    def test_event_without_text(self):
        assert timeline_annotator.parse_event_arg(" 7").timestamp == "7"
        assert timeline_annotator.parse_event_arg("7").text == ""


class TestPlay:
    def test_replays_events_until_duration(self, config, scheduler):
        app = MagicMock()
        out = io.StringIO()
        with patch("timeline_annotator.QtTickScheduler", return_value=scheduler):
            timeline_annotator.run_play(parse("play", "mode=horizontal&duration=2&e=1%3AHello&e=0%3AZero"),
                                        config, out, app)
            app.exec_.assert_called_once()
            scheduler.fire(4)
            app.quit.assert_not_called()
            scheduler.fire(4)
        app.quit.assert_called_once()
        assert out.getvalue().splitlines() == [
            "0:00 [left: 0%] Zero",
            "0:01 [left: 50%] Hello",
            "0:02 done",
        ]
        assert scheduler.pending == {}

    def test_vertical_flag(self, config, scheduler):
        out = io.StringIO()
        with patch("timeline_annotator.QtTickScheduler", return_value=scheduler):
            timeline_annotator.run_play(parse("play", "--vertical", "duration=4&e=1%3AA"), config, out, MagicMock())
            scheduler.fire(4)
        assert "0:01 [top: 25%] A" in out.getvalue()

    def test_non_numeric_duration(self, config):
        out = io.StringIO()
        app = MagicMock()
        assert timeline_annotator.run_play(parse("play", "duration=abc"), config, out, app) == 1
        app.exec_.assert_not_called()

    def test_oversized_duration_keeps_playing(self, config, scheduler):
        app = MagicMock()
        out = io.StringIO()
        with patch("timeline_annotator.QtTickScheduler", return_value=scheduler):
            timeline_annotator.run_play(parse("play", "duration=" + "9" * 400 + "&e=1%3AA"), config, out, app)
            scheduler.fire(8)
        app.exec_.assert_called_once()
        app.quit.assert_not_called()
        assert out.getvalue().splitlines() == ["0:01 [left: 0%] A"]

    def test_zero_duration_finishes_immediately(self, config, scheduler):
        app = MagicMock()
        out = io.StringIO()
        with patch("timeline_annotator.QtTickScheduler", return_value=scheduler):
            assert timeline_annotator.run_play(parse("play", "duration=0"), config, out, app) == 0
        app.exec_.assert_not_called()
        assert out.getvalue().splitlines() == ["0:00 done"]


class TestMain:
    def test_main_encode(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        logger = logging.getLogger(constants.LOGGER_NAME)
        before = list(logger.handlers)
        try:
            rc = timeline_annotator.main(["--home", str(tmp_path), "encode", "--duration", "120",
                                          "--event", "10:Start"])
        finally:
            for h in logger.handlers[:]:
                if h not in before:
                    logger.removeHandler(h)
                    h.close()
        assert rc == 0
        assert capsys.readouterr().out.strip() == "mode=editor&duration=120&e=10%3AStart"
        assert (tmp_path / "logs" / constants.LOG_FILENAME).exists()

    def test_exception_hook_logs_critical(self, caplog):
        with patch.object(sys, "__excepthook__") as default_hook, \
                caplog.at_level(logging.CRITICAL, logger=constants.LOGGER_NAME):
            try:
                raise ValueError("kaboom")
            except ValueError:
                timeline_annotator.exception_hook(*sys.exc_info())
        default_hook.assert_called_once()
        assert "kaboom" in caplog.text
