from pathlib import Path

import pytest

from lsdview.color import ThemeOption
from lsdview.config import (
    ColorConfig,
    Config,
    ConfigError,
    IconsConfig,
    RecursionConfig,
    SortingConfig,
    config_file_path,
    expand_home,
)


def test_read_default():
    expected = Config(
        classic=False,
        blocks=["permission", "user", "group", "size", "date", "name"],
        color=ColorConfig(when="auto", theme=ThemeOption.DEFAULT),
        date=None,
        dereference=False,
        display=None,
        icons=IconsConfig(when="auto", theme="fancy", separator=" "),
        ignore_globs=None,
        indicators=False,
        layout="grid",
        recursion=RecursionConfig(enabled=False, depth=None),
        size="default",
        permission="rwx",
        sorting=SortingConfig(column="name", reverse=False, dir_grouping="none"),
        no_symlink=False,
        total_size=False,
        symlink_arrow="\u21d2",
        hyperlink="never",
        header=None,
    )
    assert Config.builtin() == expected


def test_read_config_ok():
    assert Config.from_yaml("classic: true").classic is True


def test_read_config_bad_bool():
    with pytest.raises(ConfigError):
        Config.from_yaml("classic: notbool")


def test_read_config_file_not_found():
    assert Config.from_file("not-existed") is None


def test_read_bad_display():
    with pytest.raises(ConfigError):
        Config.from_yaml("display: bad")


def test_unknown_top_level_field_is_rejected():
    with pytest.raises(ConfigError, match="unknown field"):
        Config.from_yaml("colour: auto")


def test_unknown_nested_field_is_ignored():
    config = Config.from_yaml("sorting:\n  column: size\n  extra: 1\n")
    assert config.sorting == SortingConfig(column="size")


def test_custom_theme_and_kebab_keys():
    config = Config.from_yaml(
        "color:\n  theme: mine.yaml\nignore-globs:\n  - .git\nrecursion:\n  depth: 3\n"
    )
    assert config.color.theme == ThemeOption.custom("mine.yaml")
    assert config.ignore_globs == [".git"]
    assert config.recursion.depth == 3


def test_negative_depth_is_rejected():
    with pytest.raises(ConfigError):
        Config.from_yaml("recursion:\n  depth: -1\n")


def test_empty_yaml_gives_nothing_set():
    assert Config.from_yaml("") == Config.with_none()


def test_bad_syntax_raises():
    with pytest.raises(ConfigError):
        Config.from_yaml("blocks: [permission")


def test_from_file_format_error_returns_none(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("layout: sideways")
    assert Config.from_file(path) is None
    assert "format error" in capsys.readouterr().err


def test_from_file_reads_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("layout: tree\nheader: true\n")
    config = Config.from_file(path)
    assert config.layout == "tree"
    assert config.header is True


def _point_config_dir(monkeypatch, directory):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(directory))
    monkeypatch.setenv("APPDATA", str(directory))


def test_config_file_path(monkeypatch, tmp_path):
    _point_config_dir(monkeypatch, tmp_path)
    assert config_file_path() == tmp_path / "lsd"


def test_default_uses_user_file(monkeypatch, tmp_path):
    _point_config_dir(monkeypatch, tmp_path)
    (tmp_path / "lsd").mkdir()
    (tmp_path / "lsd" / "config.yaml").write_text("layout: tree")
    assert Config.default().layout == "tree"


def test_default_falls_back_to_builtin(monkeypatch, tmp_path):
    _point_config_dir(monkeypatch, tmp_path)
    assert Config.default() == Config.builtin()


def _set_home(monkeypatch, home):
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))


def test_expand_home_without_tilde():
    assert expand_home("some/path") == Path("some/path")


def test_expand_home_tilde_alone(monkeypatch, tmp_path):
    _set_home(monkeypatch, tmp_path)
    assert expand_home("~") == tmp_path


def test_expand_home_tilde_prefix(monkeypatch, tmp_path):
    _set_home(monkeypatch, tmp_path)
    assert expand_home("~/.config/lsd") == tmp_path / ".config" / "lsd"


def test_expand_home_tilde_in_name_is_kept():
    assert expand_home("~user/file") == Path("~user/file")