from __future__ import annotations

import dataclasses

import pytest

from compilex.errors import ErrorKind, UnsupportedLanguageError
from compilex.languages import LANGUAGES, RunStyle, get_profile, supported_languages


def test_baseline_languages():
    assert supported_languages() == ["python", "javascript", "java", "cpp", "ruby"]


@pytest.mark.parametrize(
    "name, extension, timeout, style, compiled",
    [
        ("python", ".py", 10, RunStyle.INTERPRETER, False),
        ("javascript", ".js", 10, RunStyle.INTERPRETER, False),
        ("ruby", ".rb", 10, RunStyle.INTERPRETER, False),
        ("java", ".java", 15, RunStyle.CLASS, True),
        ("cpp", ".cpp", 15, RunStyle.BINARY, True),
    ],
)
def test_profile_shapes(name, extension, timeout, style, compiled):
    profile = get_profile(name)
    assert profile.name == name
    assert profile.extension == extension
    assert profile.timeout == timeout
    assert profile.run_style is style
    assert profile.needs_compile is compiled


def test_interpreted_profiles_have_single_program():
    for name in ("python", "javascript", "ruby"):
        assert len(get_profile(name).run_cmd) == 1


def test_binary_profile_has_no_run_program():
    assert get_profile("cpp").run_cmd == ()


def test_unknown_language():
    with pytest.raises(UnsupportedLanguageError) as excinfo:
        get_profile("cobol")
    assert excinfo.value.kind is ErrorKind.UNSUPPORTED_LANGUAGE
    assert str(excinfo.value) == "unsupported language: cobol"


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        LANGUAGES["go"] = LANGUAGES["python"]  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        LANGUAGES["python"].timeout = 1  # type: ignore[misc]


def test_custom_registry():
    custom = {"py": dataclasses.replace(LANGUAGES["python"], name="py")}
    assert get_profile("py", custom).extension == ".py"
    assert supported_languages(custom) == ["py"]
    with pytest.raises(UnsupportedLanguageError):
        get_profile("python", custom)
