# lsdview

`lsdview` is a library holding the pieces used to present a directory
listing in a terminal the way a modern `ls` replacement does: the option
set of such a command, its YAML configuration file, colour themes and
`LS_COLORS` styling, and a grid layout engine with tree-view helpers.

## Modules

- `lsdview.cli` – the command-line definition.
  - `build()` returns an `argparse.ArgumentParser` with every option:
    `-a/--all`, `-A/--almost-all`, `--color`, `--icon`, `--icon-theme`,
    `-F/--classify`, `-l/--long`, `--ignore-config`, `--config-file`,
    `-1/--oneline`, `-R/--recursive`, `-h/--human-readable`, `--tree`,
    `--depth`, `-d/--directory-only`, `--permission`, `--size`,
    `--total-size`, `--date`, the sort options `-t`, `-S`, `-X`, `-v`,
    `--sort`, `-U`, and `-r/--reverse`, `--group-dirs`,
    `--group-directories-first`, `--blocks`, `--classic`, `--no-symlink`,
    `-I/--ignore-glob`, `-i/--inode`, `-L/--dereference`, `-Z/--context`,
    `--hyperlink`, `--header` and `--system-protected`. Positional `FILE`
    arguments default to `["."]`.
  - `parse_args(argv)` parses a list of arguments. Options that are not
    given stay at `None`, `0` or `False`, so that a configuration file or
    a default can supply them. The sort options override one another, as
    do `--all` and `--almost-all`; `--recursive` cannot be combined with
    `--tree`, nor `--directory-only` with `--depth` or `--recursive`.
  - `validate_date_argument(arg)` accepts `date`, `relative` or a
    `+`-prefixed format, and `validate_time_format(formatter)` checks every
    `%` specifier of such a format. Both raise `ValueError`.
- `lsdview.flags` – the `Configurable` base class. `configure_from(matches,
  config)` takes a setting from the command line first, then from the
  environment, then from the configuration file, and falls back to
  `default()`.
- `lsdview.color` – colour themes and styling.
  - `ColorTheme` holds a colour for every kind of element;
    `ColorTheme.default_dark()` is the built-in theme and
    `ColorTheme.from_file(path)` loads a YAML theme in which left-out keys
    keep their default colour.
  - `Elem` (with an `ElemKind`) is an element to colour;
    `Elem.get_color(theme)` picks its colour.
  - `parse_ls_colors(value)` turns an `LS_COLORS` string into `Style`
    objects keyed by indicator code (`di`, `ln`, `ex`, …) or glob pattern.
  - `Colors(theme_option)` styles text with `colorize(text, elem)` and
    `colorize_using_path(text, path, elem)`. `ThemeOption.NO_COLOR` leaves
    text without escape sequences, `ThemeOption.NO_LSCOLORS` uses the
    theme only, and `ThemeOption.DEFAULT` or `ThemeOption.custom(file)`
    also apply `LS_COLORS`. A custom theme file that cannot be read falls
    back to the default theme.
- `lsdview.config` – the YAML configuration file.
  - `Config.from_yaml(text)` parses text and raises `ConfigError` on bad
    syntax, unknown keys or bad values.
  - `Config.from_file(path)` returns `None` for a missing file, and reports
    other problems on standard error before returning `None`.
  - `Config.builtin()` gives the built-in settings, `Config.default()` the
    user's file if it loads and the built-in settings otherwise, and
    `Config.with_none()` a configuration with nothing set.
  - `config_file_path()` gives the directory holding `config.yaml`
    (`$XDG_CONFIG_HOME/lsd`, `~/.config/lsd`, or `%APPDATA%\lsd` on
    Windows), and `expand_home(path)` replaces a leading `~`.
- `lsdview.grid` – `Grid`, `Cell` and `Direction` lay text out in columns
  with `fit_into_width(width)` (returns `None` when the cells cannot fit)
  or `fit_into_columns(columns)`. `get_visible_width(text, hyperlink)`
  measures text as a terminal shows it, leaving out colour escapes and,
  when asked, hyperlink escapes; wide characters count as two columns.
- `lsdview.display` – tree-view and grid helpers: `tree_prefix` and
  `tree_child_prefix` build the `├── `, `└── ` and `│   ` edges,
  `add_header` adds centred, underlined block headers to a grid,
  `should_display_folder_path` decides whether folder titles are shown and
  `display_folder_path` formats one.

## Examples

```python
from lsdview.config import Config, ConfigError

config = Config.from_yaml("classic: true")
assert config.classic is True

try:
    Config.from_yaml("classic: notbool")
except ConfigError as err:
    print("bad configuration:", err)
```

```python
from lsdview.cli import parse_args, validate_date_argument

validate_date_argument("+%Y-%m-%d %H:%M")   # accepted
args = parse_args(["-v", "-t", "some/dir"])
assert args.timesort == 1 and args.versionsort == 0
```

An unknown specifier such as `+%Q` is rejected with
`ValueError("invalid format specifier: %Q")`.

```python
from lsdview.grid import Cell, Grid, get_visible_width
from lsdview.display import tree_prefix

grid = Grid()
grid.add(Cell("a"))
grid.add(Cell("bb"))
assert grid.fit_into_columns(2) == "a bb\n"

assert get_visible_width("\x1b[38;5;40mhi\x1b[39m") == 2
assert tree_prefix("", 1, True) == "└── "
```

## Configuration file

The configuration file is YAML and accepts the keys `classic`, `blocks`,
`color` (`when`, `theme`), `date`, `dereference`, `display`, `icons`
(`when`, `theme`, `separator`), `ignore-globs`, `indicators`, `layout`,
`recursion` (`enabled`, `depth`), `size`, `permission`, `sorting`
(`column`, `reverse`, `dir-grouping`), `no-symlink`, `total-size`,
`symlink-arrow`, `hyperlink` and `header`. Unknown keys and values outside
each key's choices are reported as errors.

## What this package does not do

`lsdview` provides no command to run and does not list directories by
itself. It does not read file metadata (permissions, owners, sizes, dates,
inodes), does not sort entries, has no icon set and does not render the
blocks of a listing; those have to be supplied by the program that uses
these modules.

## Running the tests

Install the package with its `test` extra and run `pytest` from the
project directory.