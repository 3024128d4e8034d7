from pathlib import Path

import pytest
from click.testing import CliRunner

from polycule import __version__
from polycule.cli import cli
from polycule.persistence.codec import decode_graph, encode_graph


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "polycule.toml"
    path.write_text(
        '[persistence]\nstorage_path = "storage.json"\n\n[log]\nchange_log_path = "changes.log"\n',
        encoding="utf-8",
    )
    return path


def invoke(config_file: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(config_file), *args])


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_fmt_rewrites_to_canonical_form(config_file: Path, tmp_path: Path, sample_dot: str) -> None:
    messy = tmp_path / "messy.dot"
    messy.write_text(
        'graph {\n Bob\n Alice [y=-20.5, x=10, size=40, color="#F00", label="Alice Smith"]\n'
        ' Alice -- Bob [labelmode=hover, style=dashed, penwidth=2.5, color="#00ff00", label=dating]\n}\n',
        encoding="utf-8",
    )
    out = tmp_path / "clean.dot"

    assert invoke(config_file, "fmt", str(messy), "--check").exit_code == 1
    result = invoke(config_file, "fmt", str(messy), "--out", str(out))
    assert result.exit_code == 0
    # Bob was declared first
    assert out.read_text(encoding="utf-8").splitlines()[1] == '  "Bob";'
    assert invoke(config_file, "fmt", str(out), "--check").exit_code == 0


def test_fmt_reports_invalid_dot(config_file: Path, tmp_path: Path) -> None:
    bad = tmp_path / "bad.dot"
    bad.write_text("graph { A -- ", encoding="utf-8")
    result = invoke(config_file, "fmt", str(bad))
    assert result.exit_code == 1
    assert "Error" in result.output


def test_encode_and_decode(config_file: Path, dot_file: Path, tmp_path: Path, sample_snapshot) -> None:
    result = invoke(config_file, "encode", str(dot_file))
    assert result.exit_code == 0
    token = result.output.strip()
    assert decode_graph(token) == sample_snapshot

    link = invoke(config_file, "encode", str(dot_file), "--link").output.strip()
    assert link == f"#g={token}"

    out = tmp_path / "decoded.dot"
    result = invoke(config_file, "decode", f"https://example.org/#g={token}", "--out", str(out))
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == dot_file.read_text(encoding="utf-8")


def test_decode_rejects_garbage(config_file: Path) -> None:
    result = invoke(config_file, "decode", "garbage-not-base64")
    assert result.exit_code == 1


def test_show(config_file: Path, dot_file: Path) -> None:
    result = invoke(config_file, "show", str(dot_file))
    assert result.exit_code == 0
    assert "Alice Smith" in result.output
    assert "dashed" in result.output


def test_focus(config_file: Path, tmp_path: Path) -> None:
    path = tmp_path / "chain.dot"
    path.write_text("graph { A -- B -- C -- D }\n", encoding="utf-8")
    out = tmp_path / "focus.dot"

    result = invoke(config_file, "focus", str(path), "B", "--out", str(out))
    assert result.exit_code == 0
    text = out.read_text(encoding="utf-8")
    assert '"A" -- "B";' in text
    assert '"D"' not in text

    assert invoke(config_file, "focus", str(path), "Q").exit_code == 1
    assert invoke(config_file, "focus", str(path), "B", "--depth", "0").exit_code != 0


def test_load_priority_chain(config_file: Path, tmp_path: Path, sample_snapshot) -> None:
    result = invoke(config_file, "load")
    assert result.exit_code == 0
    assert "Loaded from default" in result.output
    assert not (tmp_path / "storage.json").exists()

    fragment = f"#g={encode_graph(sample_snapshot)}"
    result = invoke(config_file, "load", "--fragment", fragment, "--save")
    assert result.exit_code == 0
    assert "Loaded from fragment" in result.output
    assert (tmp_path / "storage.json").exists()

    result = invoke(config_file, "load", "--fragment", "#g=garbage-not-base64")
    assert "Loaded from storage" in result.output
    assert '"Alice" -- "Bob"' in result.output


def test_edit_commands_rewrite_file_and_record_history(config_file: Path, dot_file: Path, tmp_path: Path) -> None:
    assert invoke(config_file, "edit", "rename", str(dot_file), "Bob", "Robert!", "--label", "Rob").exit_code == 0
    text = dot_file.read_text(encoding="utf-8")
    assert '"robert" [label="Rob"];' in text
    assert '"Alice" -- "robert"' in text

    assert invoke(config_file, "edit", "add", str(dot_file), "Cleo").exit_code == 0
    assert invoke(config_file, "edit", "connect", str(dot_file), "Cleo", "Alice", "--label", "friends").exit_code == 0
    assert '"Cleo" -- "Alice" [label="friends"];' in dot_file.read_text(encoding="utf-8")

    assert invoke(config_file, "edit", "pin", str(dot_file), "Cleo", "5", "6").exit_code == 0
    assert '"Cleo" [x="5", y="6"];' in dot_file.read_text(encoding="utf-8")
    assert invoke(config_file, "edit", "unpin", str(dot_file), "Cleo").exit_code == 0

    assert invoke(config_file, "edit", "delete", str(dot_file), "Alice").exit_code == 0
    text = dot_file.read_text(encoding="utf-8")
    assert '"Alice"' not in text
    assert " -- " not in text

    result = invoke(config_file, "history", "--last", "2")
    assert result.exit_code == 0
    assert "set-position" in result.output
    assert "delete-node" in result.output
    assert "add-node" not in result.output
    assert (tmp_path / "changes.log").exists()


def test_edit_rejections(config_file: Path, dot_file: Path) -> None:
    original = dot_file.read_text(encoding="utf-8")
    assert invoke(config_file, "edit", "connect", str(dot_file), "Alice", "Alice").exit_code == 1
    assert invoke(config_file, "edit", "rename", str(dot_file), "Alice", "???").exit_code == 1
    assert invoke(config_file, "edit", "pin", str(dot_file), "Nobody", "1", "2").exit_code == 1
    assert dot_file.read_text(encoding="utf-8") == original


def test_history_when_empty(config_file: Path) -> None:
    result = invoke(config_file, "history")
    assert result.exit_code == 0
    assert "No changes recorded" in result.output


def test_invalid_config(tmp_path: Path) -> None:
    path = tmp_path / "polycule.toml"
    path.write_text('[graph]\nnode_id_policy = "random"\n', encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(path), "history"])
    assert result.exit_code == 2


def test_verbose_flag(config_file: Path, dot_file: Path) -> None:
    result = CliRunner().invoke(cli, ["--verbose", "--config", str(config_file), "fmt", str(dot_file), "--check"])
    assert result.exit_code == 0


def test_unpin_unknown_node_is_rejected(config_file: Path, dot_file: Path) -> None:
    original = dot_file.read_text(encoding="utf-8")
    result = invoke(config_file, "edit", "unpin", str(dot_file), "Nobody")
    assert result.exit_code == 1
    assert dot_file.read_text(encoding="utf-8") == original
