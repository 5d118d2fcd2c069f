"""Tests for model-assisted file selection."""

from __future__ import annotations

import pytest

from gitme.models import FileData, RepoInfo
from gitme.selector import FileSelector, extract_json_array, parse_selected_paths
from tests._fixtures.http_stub import ScriptedProvider

REPO = RepoInfo(name="demo", description="Demo project", language="Python")


def _files(count: int) -> list[FileData]:
    return [FileData(path=f"src/file_{index:02d}.py", content="x = 1\n") for index in range(count)]


def test_selection_keeps_input_order() -> None:
    files = _files(5)
    provider = ScriptedProvider(['Here you go: ["src/file_03.py", "src/file_01.py"]'])

    selected = FileSelector(provider).select(files, REPO)

    assert [item.path for item in selected] == ["src/file_01.py", "src/file_03.py"]


def test_unknown_paths_are_ignored() -> None:
    files = _files(3)
    provider = ScriptedProvider(['["src/file_02.py", "src/invented.py"]'])

    selected = FileSelector(provider).select(files, REPO)

    assert [item.path for item in selected] == ["src/file_02.py"]


@pytest.mark.parametrize(
    "reply",
    [
        "I think main.py matters most.",
        '["src/file_01.py", ',
        "[src/file_01.py, src/file_02.py]",
        '["nothing/known.py"]',
        "[]",
    ],
)
def test_unusable_replies_fall_back_to_prefix(reply: str) -> None:
    files = _files(20)
    provider = ScriptedProvider([reply])

    selected = FileSelector(provider).select(files, REPO)

    assert selected == files[:15]


def test_fallback_with_fewer_files_than_the_slice() -> None:
    files = _files(4)

    selected = FileSelector(ScriptedProvider(["no json"])).select(files, REPO)

    assert selected == files


def test_prompt_lists_at_most_one_hundred_paths() -> None:
    files = _files(150)
    provider = ScriptedProvider(['["src/file_00.py"]'])

    FileSelector(provider).select(files, REPO)

    prompt = provider.prompts[0]
    assert "src/file_99.py" in prompt
    assert "src/file_100.py" not in prompt
    assert "Repository: demo" in prompt
    assert "Description: Demo project" in prompt
    assert "Language: Python" in prompt


def test_extract_json_array_finds_first_balanced_array() -> None:
    text = 'Files: ["a [draft].md", ["nested"]] and later ["b"]'

    assert extract_json_array(text) == '["a [draft].md", ["nested"]]'


def test_extract_json_array_retries_after_unbalanced_bracket() -> None:
    assert extract_json_array('[ oops ["a.py"]') == '["a.py"]'
    assert extract_json_array('] nothing [') is None
    assert extract_json_array('noise ["a.py"] tail') == '["a.py"]'


def test_parse_selected_paths_drops_non_strings() -> None:
    assert parse_selected_paths('["a.py", 3, null, "b.py"]') == ["a.py", "b.py"]
    assert parse_selected_paths("no array") is None
