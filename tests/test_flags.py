import argparse
import os
from dataclasses import dataclass

import pytest

from lsdview.flags import Configurable

ENV_NAME = "LSDVIEW_TEST_WIDTH"

# The base class's own lookup chain, applied to the sample settings below.
base_configure = Configurable.configure_from.__func__
base_default = Configurable.default.__func__
base_environment = Configurable.from_environment.__func__


@dataclass(frozen=True)
class Width(Configurable):
    value: int = 80

    @classmethod
    def from_arg_matches(cls, matches):
        raw = getattr(matches, "width", None)
        return None if raw is None else cls(int(raw))

    @classmethod
    def from_config(cls, config):
        raw = config.get("width")
        return None if raw is None else cls(raw)

    @classmethod
    def from_environment(cls):
        raw = os.environ.get(ENV_NAME)
        return None if raw is None else cls(int(raw))


@dataclass(frozen=True)
class Quiet(Configurable):
    enabled: bool = False

    @classmethod
    def from_arg_matches(cls, matches):
        return cls(True) if getattr(matches, "quiet", 0) else None

    @classmethod
    def from_config(cls, config):
        raw = config.get("quiet")
        return None if raw is None else cls(raw)


def test_command_line_wins_over_everything(monkeypatch):
    monkeypatch.setenv(ENV_NAME, "7")
    result = base_configure(Width, argparse.Namespace(width="12"), {"width": 30})
    assert result == Width(12)


def test_environment_wins_over_config(monkeypatch):
    monkeypatch.setenv(ENV_NAME, "7")
    result = base_configure(Width, argparse.Namespace(width=None), {"width": 30})
    assert result == Width(7)


def test_config_used_when_no_argument_or_environment(monkeypatch):
    monkeypatch.delenv(ENV_NAME, raising=False)
    result = base_configure(Width, argparse.Namespace(), {"width": 30})
    assert result == Width(30)


def test_falsy_config_value_is_still_used(monkeypatch):
    monkeypatch.delenv(ENV_NAME, raising=False)
    result = base_configure(Width, argparse.Namespace(), {"width": 0})
    assert result == Width(0)


def test_default_when_no_source_has_a_value(monkeypatch):
    monkeypatch.delenv(ENV_NAME, raising=False)
    result = base_configure(Width, argparse.Namespace(), {})
    assert result == Width()
    assert base_default(Width) == Width()


def test_environment_not_consulted_when_argument_given(monkeypatch):
    calls = []

    class Tracked(Width):
        @classmethod
        def from_environment(cls):
            calls.append("env")
            return None

    result = base_configure(Tracked, argparse.Namespace(width="3"), {})
    assert result == Tracked(3)
    assert calls == []


def test_base_environment_lookup_yields_nothing():
    assert base_environment(Quiet) is None
    assert base_configure(Quiet, argparse.Namespace(), {"quiet": True}) == Quiet(True)
    assert base_configure(Quiet, argparse.Namespace(quiet=1), {"quiet": False}) == Quiet(True)
    assert base_configure(Quiet, argparse.Namespace(), {}) == Quiet()


def test_incomplete_subclass_cannot_be_instantiated():
    class Incomplete(Configurable):
        @classmethod
        def from_config(cls, config):
            return None

    with pytest.raises(TypeError):
        Configurable()
    with pytest.raises(TypeError):
        Incomplete()