from __future__ import annotations

import tomllib

from lingo_drill.workspace import cli


def test_lingo_init_creates_workspace_and_config(isolated_env, capsys):
    code = cli.main([])

    captured = capsys.readouterr()
    assert code == 0
    assert "Workspace ready" in captured.out
    config_path = isolated_env / "config" / "lingo.toml"
    assert f"Config: {config_path} (written)" in captured.out
    data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    assert data["quiz"]["time_limit_seconds"] == 30
    assert data["speech"]["voice_settings"]["stability"] == 0.5


def test_lingo_init_keeps_existing_config(isolated_env, capsys):
    cli.main(["--quiet"])
    config_path = isolated_env / "config" / "lingo.toml"
    config_path.write_text("[quiz]\ntime_limit_seconds = 9\n", encoding="utf-8")

    code = cli.main([])

    captured = capsys.readouterr()
    assert code == 0
    assert "(exists)" in captured.out
    assert "time_limit_seconds = 9" in config_path.read_text(encoding="utf-8")


def test_lingo_init_force_rewrites_config(isolated_env):
    cli.main(["--quiet"])
    config_path = isolated_env / "config" / "lingo.toml"
    config_path.write_text("# custom\n", encoding="utf-8")

    cli.main(["--quiet", "--force"])

    assert "[speech.fallback]" in config_path.read_text(encoding="utf-8")


def test_lingo_init_supports_custom_path(tmp_path, capsys):
    target = tmp_path / "custom"

    code = cli.main(["--path", str(target)])

    captured = capsys.readouterr()
    assert code == 0
    assert target.is_dir()
    assert str(target) in captured.out


def test_lingo_init_quiet_mode(isolated_env, capsys):
    code = cli.main(["--quiet"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == ""
