from typedex import cli
from typedex.errors import NotFound
from typedex.session import LookupOutcome


def test_types_command_renders_static_matchups(capsys):
    assert cli.main(["types", "ground", "flying"]) == 0
    out = capsys.readouterr().out
    assert "Typen: Boden / Flug" in out
    assert "Eis        4×" in out
    assert "Elektro    0×" in out


def test_render_outcome_error():
    outcome = LookupOutcome(query="xyz", error=NotFound("xyz"))
    text = cli.render_outcome(outcome)
    assert text.startswith("Fehler beim Laden")
    assert '"xyz"' in text


def test_render_empty_list():
    assert cli.render_list("Schwächen", []) == ["Schwächen:", "  Keine"]


def test_lookup_command_uses_session(monkeypatch, capsys):
    seen = {}

    async def fake_lookup(name, config):
        seen["name"] = name
        seen["static"] = config.use_static_types
        return LookupOutcome(query=name, error=NotFound(name))

    monkeypatch.setattr("typedex.cli.run_lookup", fake_lookup)
    assert cli.main(["--env-file", "missing.env", "lookup", "Glurak", "--static-types"]) == 1
    assert seen == {"name": "Glurak", "static": True}
    assert "Glurak" in capsys.readouterr().out
