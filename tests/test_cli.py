import json
import logging

import pytest
from openpyxl import load_workbook

from conference_validator import cli
from conference_validator.core.settings import ValidatorSettings

from conftest import FakeFetcher


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger("conference_validator")
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()


@pytest.fixture
def fake_browser(monkeypatch, fake_pages):
    created = []

    class FakePageFetcher(FakeFetcher):
        def __init__(self, settings, log=None):
            super().__init__(fake_pages)
            self.settings = settings
            created.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return None

    monkeypatch.setattr(cli, "PageFetcher", FakePageFetcher)
    return created


@pytest.fixture
def input_file(tmp_path, conference_data):
    p = tmp_path / "conference_data.json"
    p.write_text(json.dumps(conference_data), encoding="utf-8")
    return p


def test_main_writes_workbook_and_json(tmp_path, input_file, fake_browser):
    out = tmp_path / "report.xlsx"
    js = tmp_path / "results.json"
    rc = cli.main([
        "--input", str(input_file),
        "--out", str(out),
        "--json", str(js),
        "--screenshots", str(tmp_path / "shots"),
        "--log", str(tmp_path / "run.log"),
        "--delay", "0",
    ])
    assert rc == 0
    assert load_workbook(out).sheetnames[0] == "All Conferences"
    assert len(json.loads(js.read_text(encoding="utf-8"))) == 4
    assert (tmp_path / "shots").is_dir()
    assert "Loaded 4 conferences" in (tmp_path / "run.log").read_text(encoding="utf-8")
    assert len(fake_browser[0].visits) == 4


def test_main_bad_input_returns_2(tmp_path, fake_browser):
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    rc = cli.main(["--input", str(bad), "--log", str(tmp_path / "run.log")])
    assert rc == 2
    assert fake_browser == []


def test_main_bad_config_returns_2(tmp_path, input_file, fake_browser):
    cfg = tmp_path / "settings.yml"
    cfg.write_text("nonsense_key: 1\n", encoding="utf-8")
    rc = cli.main(["--input", str(input_file), "--config", str(cfg), "--log", str(tmp_path / "run.log")])
    assert rc == 2


def test_build_settings_cli_overrides_file(tmp_path):
    cfg = tmp_path / "settings.yml"
    cfg.write_text("target_year: 2027\ndelay_s: 5\n", encoding="utf-8")
    args = cli.parse_args(["--config", str(cfg), "--delay", "1", "--headed"])
    s = cli.build_settings(args)
    assert s.target_year == 2027
    assert s.delay_s == 1.0
    assert s.headless is False
    assert s.output == ValidatorSettings().output


def test_setup_logging_writes_file(tmp_path):
    log_path = tmp_path / "logs" / "x.log"
    log = cli.setup_logging(str(log_path))
    log.info("hello %s", "world")
    for h in log.handlers:
        h.flush()
    assert "hello world" in log_path.read_text(encoding="utf-8")


def test_main_mistyped_config_value_returns_2(tmp_path, input_file, fake_browser):
    cfg = tmp_path / "settings.yml"
    cfg.write_text('delay_s: "2"\n', encoding="utf-8")
    rc = cli.main(["--input", str(input_file), "--config", str(cfg), "--log", str(tmp_path / "run.log")])
    assert rc == 2
    assert fake_browser == []
