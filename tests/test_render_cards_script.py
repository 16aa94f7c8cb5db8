import importlib.util
from pathlib import Path

import pytest

SCRIPT = Path(__file__).parent.parent / "scripts" / "render_cards.py"


@pytest.fixture
def script(monkeypatch):
    spec = importlib.util.spec_from_file_location("render_cards", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    monkeypatch.setattr(module, "setup_logging", lambda **kwargs: None)
    return module


class FakeRenderer:
    def __init__(self):
        self.calls = []

    def render_embed(self, slugs, author=None):
        self.calls.append((slugs, author))
        return "<div>cards</div>\n"


def test_writes_html_to_file(script, monkeypatch, tmp_path):
    fake = FakeRenderer()
    monkeypatch.setattr(script, "build_renderer", lambda config: fake)
    out = tmp_path / "out" / "cards.html"

    code = script.main(["--slugs", "akismet", "--author", "automattic", "--output", str(out)])

    assert code == 0
    assert out.read_text(encoding="utf-8") == "<div>cards</div>\n"
    assert fake.calls == [("akismet", "automattic")]


def test_prints_html_to_stdout(script, monkeypatch, capsys):
    monkeypatch.setattr(script, "build_renderer", lambda config: FakeRenderer())

    assert script.main(["--slugs", "akismet"]) == 0
    assert "<div>cards</div>" in capsys.readouterr().out


def test_requires_slugs_or_author(script):
    with pytest.raises(SystemExit):
        script.main([])


def test_missing_config_file(script, tmp_path):
    assert script.main(["--slugs", "akismet", "--config", str(tmp_path / "missing.yml")]) == 1
