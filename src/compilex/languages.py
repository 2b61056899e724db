"""Language registry.

Each supported language is described by one immutable
:class:`LanguageProfile`.  The profile says how to name the staged source
file, how to compile it (if at all), how to run it and how long the run may
take.  Per-language differences are confined to :class:`RunStyle`, which the
build and run stages switch on when turning a profile into a concrete
command line.

To add a language, add one entry to ``_PROFILES``.
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from typing import List, Mapping, Tuple

from .errors import UnsupportedLanguageError


class RunStyle(str, enum.Enum):
    """How a profile's run command is completed for one execution."""

    INTERPRETER = "interpreter"
    """``run_cmd`` followed by the staged source file."""

    CLASS = "class"
    """``run_cmd`` followed by the declared entry class name."""

    BINARY = "binary"
    """The compiled artifact is executed directly."""


@dataclass(frozen=True)
class LanguageProfile:
    name: str
    extension: str
    run_cmd: Tuple[str, ...] = ()
    compile_cmd: Tuple[str, ...] = ()
    timeout: float = 10.0
    run_style: RunStyle = RunStyle.INTERPRETER

    @property
    def needs_compile(self) -> bool:
        return bool(self.compile_cmd)


_PROFILES = (
    LanguageProfile(
        name="python",
        extension=".py",
        run_cmd=("python3",),
        timeout=10.0,
    ),
    LanguageProfile(
        name="javascript",
        extension=".js",
        run_cmd=("node",),
        timeout=10.0,
    ),
    LanguageProfile(
        name="java",
        extension=".java",
        compile_cmd=("javac",),
        run_cmd=("java",),
        timeout=15.0,
        run_style=RunStyle.CLASS,
    ),
    LanguageProfile(
        name="cpp",
        extension=".cpp",
        # The artifact path is appended after the output flag at build time.
        compile_cmd=("g++", "-o"),
        timeout=15.0,
        run_style=RunStyle.BINARY,
    ),
    LanguageProfile(
        name="ruby",
        extension=".rb",
        run_cmd=("ruby",),
        timeout=10.0,
    ),
)

LANGUAGES: Mapping[str, LanguageProfile] = types.MappingProxyType(
    {profile.name: profile for profile in _PROFILES}
)


def get_profile(
    language: str, languages: Mapping[str, LanguageProfile] = LANGUAGES
) -> LanguageProfile:
    """Return the profile for ``language`` or raise :class:`UnsupportedLanguageError`."""
    try:
        return languages[language]
    except KeyError:
        raise UnsupportedLanguageError(language) from None


def supported_languages(languages: Mapping[str, LanguageProfile] = LANGUAGES) -> List[str]:
    return list(languages)
