"""The order in which every setting looks for its value."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class Configurable(ABC):
    """A setting read from the command line, the environment, a config file or its default.

    The first source that yields a value other than None wins, in this order:
    command line, environment, configuration file, default.
    """

    @classmethod
    def configure_from(cls, matches: Any, config: Any) -> Any:
        """Return the setting's value from the first source that provides one."""
        sources = (
            lambda: cls.from_arg_matches(matches),
            cls.from_environment,
            lambda: cls.from_config(config),
        )
        for source in sources:
            value = source()
            if value is not None:
                return value
        return cls.default()

    @classmethod
    @abstractmethod
    def from_arg_matches(cls, matches: Any) -> Optional[Any]:
        """The value given on the command line, or None."""

    @classmethod
    @abstractmethod
    def from_config(cls, config: Any) -> Optional[Any]:
        """The value given in the configuration file, or None."""

    @classmethod
    def from_environment(cls) -> Optional[Any]:
        """The value given by environment variables; none by default."""
        return None

    @classmethod
    def default(cls) -> Any:
        """The value used when no source provides one."""
        return cls()