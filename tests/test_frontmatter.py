from datetime import datetime

import pytest

from blogops.core.content.frontmatter import (
    parse_front_matter,
    render_toml_front_matter,
    split_front_matter,
)
from blogops.core.errors import FrontMatterError


def test_toml_front_matter_parsed():
    fm, body, fmt = parse_front_matter('+++\ntitle = "Hello"\ntags = ["a", "b", "a"]\nweight = 3\n+++\n\nBody\n')
    assert fmt == "toml"
    assert fm.title == "Hello"
    assert fm.tags == ["a", "b"]
    assert fm.weight == 3
    assert body == "Body\n"


def test_yaml_front_matter_parsed():
    fm, body, fmt = parse_front_matter("---\ntitle: Hi\ntags: solo\ndraft: true\n---\ntext")
    assert fmt == "yaml"
    assert fm.tags == ["solo"]
    assert fm.draft is True
    assert body == "text"


def test_local_date_becomes_datetime():
    fm, _, _ = parse_front_matter('+++\ntitle = "x"\ndate = 2024-04-10\n+++\n')
    assert fm.date == datetime(2024, 4, 10)


def test_unknown_keys_preserved():
    fm, _, _ = parse_front_matter('+++\ntitle = "x"\ncover = "img.png"\n+++\n')
    assert fm.model_extra["cover"] == "img.png"


def test_missing_front_matter_rejected():
    with pytest.raises(FrontMatterError):
        split_front_matter("# just markdown\n")


def test_unclosed_block_rejected():
    with pytest.raises(FrontMatterError, match="never closed"):
        split_front_matter('+++\ntitle = "x"\n')


def test_bad_toml_rejected_with_path():
    with pytest.raises(FrontMatterError) as ei:
        parse_front_matter("+++\ntitle = \n+++\n", path="notes/bad.md")
    assert "notes/bad.md" in str(ei.value)


def test_missing_title_lists_field():
    with pytest.raises(FrontMatterError, match="title"):
        parse_front_matter('+++\ntags = ["x"]\n+++\n')


def test_render_toml_skips_none_and_reparses():
    text = render_toml_front_matter(
        {"title": 'Say "hi"', "draft": True, "weight": None, "tags": ["a", "b"], "date": datetime(2024, 1, 2, 3, 4, 5)}
    )
    assert "weight" not in text
    fm, _, _ = parse_front_matter(text)
    assert fm.title == 'Say "hi"'
    assert fm.draft is True
    assert fm.tags == ["a", "b"]


def test_bad_yaml_rejected():
    with pytest.raises(FrontMatterError, match="invalid YAML"):
        parse_front_matter("---\ntitle: [unclosed\n---\n")


@pytest.mark.parametrize(
    "text",
    [
        "---\n- a\n- b\n---\n",
        "---\njust a string\n---\n",
    ],
)
def test_non_mapping_block_rejected(text):
    with pytest.raises(FrontMatterError, match="must be a mapping"):
        parse_front_matter(text)


def test_render_toml_escapes_control_characters():
    title = "line\rbreak\x01bell\x7f end"
    text = render_toml_front_matter({"title": title})
    assert "\\u0001" in text
    assert "\\u007F" in text
    fm, _, _ = parse_front_matter(text)
    assert fm.title == title
