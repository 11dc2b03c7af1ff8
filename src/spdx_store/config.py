"""Configuration of spdx_store.

The configuration is a TOML file with one table per section, e.g.::

    [store]
    backend = "memory"

    [log]
    pretty = false
"""
from __future__ import annotations
from dataclasses import fields, dataclass

from typing import TYPE_CHECKING, get_type_hints, ClassVar

from tomlkit import parse
from tomlkit.exceptions import TOMLKitError
from typeguard import check_type, TypeCheckError

import logging
import os

if TYPE_CHECKING:
    from typing import List, Type, TypeVar

    T = TypeVar("T", bound="ConfigSection")


def known_config_files() -> List[str]:
    """Return the configuration files to read, in load order."""
    if "SPDX_STORE_CONFIG" in os.environ:
        return [os.environ["SPDX_STORE_CONFIG"]]
    return [
        os.path.join(
            os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
            "spdx-store.toml",
        ),
        os.path.expanduser("~/spdx-store.toml"),
    ]


@dataclass
class ConfigSection:
    """Typed view of a configuration table.

    Subclasses are dataclasses whose fields are the accepted keys, with
    their defaults, and whose title is the table name.
    """

    title: ClassVar[str]

    @classmethod
    def load(cls: Type[T]) -> T:
        """Build the section from the configuration.

        Keys that are not fields are ignored. Values not matching the field
        annotation are reported and the field default is kept.
        """
        hints = get_type_hints(cls)
        expected = {f.name: hints[f.name] for f in fields(cls)}
        kwargs = {}

        for key, value in Config.load_section(cls.title).items():
            if key not in expected:
                continue
            try:
                check_type(value, expected[key])
            except TypeCheckError as err:
                logging.error(f"{cls.title}.{key}: {err}")
            else:
                kwargs[key] = value

        return cls(**kwargs)  # type: ignore


class Config:
    """Content of the configuration files, as plain dictionaries."""

    data: ClassVar[dict] = {}

    @classmethod
    def load_section(cls, section: str) -> dict:
        """Return the content of a configuration table.

        The configuration files are read on first use.

        :param section: the table name
        :return: the table content, empty if the table is not defined
        """
        if not cls.data:
            cls.load()
        return cls.data.get(section, {})

    @classmethod
    def load_file(cls, filename: str) -> None:
        """Merge a configuration file into the current configuration.

        A file that cannot be parsed is reported and ignored.

        :param filename: path to a TOML file
        """
        with open(filename) as f:
            try:
                cls.data.update(parse(f.read()).unwrap())
            except TOMLKitError as e:
                logging.error(f"cannot load {filename}: {e}")

    @classmethod
    def load(cls) -> None:
        """Read all the existing files returned by known_config_files."""
        for config_file in known_config_files():
            if os.path.isfile(config_file):
                cls.load_file(config_file)
