import pytest

from lsdview.cli import build, parse_args, validate_date_argument, validate_time_format


def test_defaults_when_nothing_given():
    ns = parse_args([])
    assert ns.files == ["."]
    assert ns.all == 0
    assert ns.color is None
    assert ns.blocks is None
    assert ns.ignore_config is False


def test_files_are_collected_around_options():
    ns = parse_args(["a", "-l", "b"])
    assert ns.files == ["a", "b"]
    assert ns.long == 1


def test_all_and_almost_all_override_each_other():
    ns = parse_args(["-a", "-A"])
    assert (ns.all, ns.almost_all) == (0, 1)
    ns = parse_args(["--almost-all", "--all"])
    assert (ns.all, ns.almost_all) == (1, 0)


def test_version_sort_overwritten_by_timesort():
    ns = parse_args(["-v", "-t", "--ignore-config", "dir"])
    assert ns.timesort == 1
    assert ns.versionsort == 0


def test_version_sort_overwritten_by_sizesort():
    ns = parse_args(["-v", "-S", "--ignore-config", "dir"])
    assert ns.sizesort == 1
    assert ns.versionsort == 0


def test_sort_word_overrides_short_sort_flags():
    ns = parse_args(["-t", "--sort", "size"])
    assert ns.sort == "size"
    assert ns.timesort == 0
    ns = parse_args(["--sort", "size", "-U"])
    assert ns.sort is None
    assert ns.no_sort == 1


def test_invalid_sort_word_is_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--sort", "colour"])


def test_recursive_conflicts_with_tree():
    with pytest.raises(SystemExit):
        parse_args(["-R", "--tree"])


def test_directory_only_conflicts_with_depth_and_recursive():
    with pytest.raises(SystemExit):
        parse_args(["-d", "--depth", "2"])
    with pytest.raises(SystemExit):
        parse_args(["-d", "-R"])


def test_tree_with_directory_only_is_allowed():
    ns = parse_args(["dir", "--tree", "-d", "--ignore-config"])
    assert ns.tree == 1
    assert ns.directory_only is True


def test_all_with_directory_only():
    ns = parse_args(["-a", "-d", "--ignore-config", "dir"])
    assert ns.all == 1
    assert ns.directory_only is True


def test_single_use_switch_cannot_repeat():
    with pytest.raises(SystemExit):
        parse_args(["--classic", "--classic"])


def test_blocks_split_on_commas():
    ns = parse_args(["--blocks", "inode,name", "--ignore-config", "dir"])
    assert ns.blocks == ["inode", "name"]


def test_blocks_accumulate_across_occurrences():
    ns = parse_args(["--blocks", "size,name", "--blocks", "date"])
    assert ns.blocks == ["size", "name", "date"]


def test_blocks_reject_unknown_value():
    with pytest.raises(SystemExit):
        parse_args(["--blocks", "size,colour"])


def test_when_option_last_value_wins():
    ns = parse_args(["--color", "never", "--color=always"])
    assert ns.color == "always"


def test_when_option_rejects_unknown():
    with pytest.raises(SystemExit):
        parse_args(["--icon", "sometimes"])


@pytest.mark.parametrize("value", ["+testDateFormat%.3f", "+testDateFormat%_d", "date", "relative"])
def test_date_values_accepted(value):
    assert parse_args(["-l", "--date", value]).date == value


def test_date_value_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--date", "yesterday"])


def test_ignore_glob_repeats():
    ns = parse_args(["-I", "*.o", "--ignore-glob", "tmp"])
    assert ns.ignore_glob == ["*.o", "tmp"]


def test_short_digit_option_is_oneline():
    assert parse_args(["-1"]).oneline == 1


def test_short_h_is_human_readable():
    assert parse_args(["-h"]).human_readable == 1


def test_inode_and_long_together():
    ns = parse_args(["-i", "-l", "--ignore-config", "dir"])
    assert (ns.inode, ns.long) == (1, 1)


def test_config_file_value():
    ns = parse_args(["--config-file", "/tmp/config.yaml", "folder"])
    assert ns.config_file == "/tmp/config.yaml"
    assert ns.files == ["folder"]


def test_dereference_short_and_long():
    assert parse_args(["-l", "-L"]).dereference == 1
    assert parse_args(["--dereference", "-L"]).dereference == 2


def test_version_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as exc:
        parse_args(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("lsd ")


def test_build_help_lists_options():
    text = build().format_help()
    assert "--tree" in text
    assert "--group-dirs" in text


@pytest.mark.parametrize(
    "fmt",
    ["", "plain", "%Y-%m-%d", "%.f", "%.3f", "%6f", "%:z", "%#z", "%-d", "%_H", "%0m", "%%", "%+"],
)
def test_valid_time_formats(fmt):
    assert validate_time_format(fmt) is None


@pytest.mark.parametrize(
    "fmt, message",
    [
        ("%J", "invalid format specifier: %J"),
        ("%.4", "invalid format specifier: %.4"),
        ("%.3x", "invalid format specifier: %.3x"),
        ("%:y", "invalid format specifier: %:y"),
        ("%-A", "invalid format specifier: %-A"),
        ("%3x", "invalid format specifier: %3x"),
    ],
)
def test_invalid_time_formats(fmt, message):
    with pytest.raises(ValueError) as exc:
        validate_time_format(fmt)
    assert str(exc.value) == message


@pytest.mark.parametrize("fmt", ["%", "abc%", "%.", "%.3", "%:", "%_", "%9"])
def test_missing_time_specifier(fmt):
    with pytest.raises(ValueError, match="missing format specifier"):
        validate_time_format(fmt)


def test_validate_date_argument():
    assert validate_date_argument("relative") is None
    assert validate_date_argument("+%Y") is None
    with pytest.raises(ValueError, match="possible values: date, relative, \\+date-time-format"):
        validate_date_argument("other")
    with pytest.raises(ValueError, match="invalid format specifier: %Q"):
        validate_date_argument("+%Q")