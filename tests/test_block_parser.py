import logging

import pytest

from course_reader.textbook import BlockParser, BlockType, ContentBlock, parse_blocks


def _types(blocks):
    return [block.type for block in blocks]


def test_headings_by_depth():
    blocks = parse_blocks("# One\n## Two\n### Three\n#### Four\n##NoSpace")
    assert _types(blocks) == [
        BlockType.HEADING1,
        BlockType.HEADING2,
        BlockType.HEADING3,
        BlockType.HEADING3,
        BlockType.HEADING2,
    ]
    assert [block.content for block in blocks] == ["One", "Two", "Three", "Four", "NoSpace"]


def test_fenced_callout_alias_with_title():
    blocks = parse_blocks(":::important[Heads up]\nBody text\n:::")
    assert blocks == [ContentBlock(type=BlockType.KEY_CONCEPT, content="**Heads up**\n\nBody text")]


@pytest.mark.parametrize(
    "name,expected",
    [
        ("didyouknow", BlockType.DIDYOUKNOW),
        ("tip", BlockType.TIP),
        ("warning", BlockType.WARNING),
        ("example", BlockType.EXAMPLE),
        ("exercise", BlockType.EXERCISE),
        ("note", BlockType.CALLOUT),
        ("info", BlockType.CALLOUT),
        ("keyconcept", BlockType.KEY_CONCEPT),
        ("key-concept", BlockType.KEY_CONCEPT),
        ("summary", BlockType.SUMMARY),
        ("banana", BlockType.CALLOUT),
    ],
)
def test_fenced_callout_type_aliases(name, expected):
    blocks = parse_blocks(f":::{name}\nBody\n:::")
    assert blocks == [ContentBlock(type=expected, content="Body")]


def test_fenced_callout_with_empty_body_is_suppressed():
    blocks = parse_blocks(":::tip[Title]\n:::\n\nAfter")
    assert blocks == [ContentBlock(type=BlockType.PARAGRAPH, content="After")]


def test_unclosed_fence_runs_to_end_of_input():
    blocks = parse_blocks(":::tip[T]\nbody line\nsecond line")
    assert blocks == [ContentBlock(type=BlockType.TIP, content="**T**\n\nbody line\nsecond line")]


def test_stray_closing_fence_is_skipped():
    blocks = parse_blocks("Alpha\n:::\nBeta")
    assert blocks == [
        ContentBlock(type=BlockType.PARAGRAPH, content="Alpha"),
        ContentBlock(type=BlockType.PARAGRAPH, content="Beta"),
    ]


def test_one_cell_table_becomes_sidebar_callout():
    blocks = parse_blocks("---\n\n| 💡 TIP |\n| --- |\n| Body text |")
    assert blocks == [ContentBlock(type=BlockType.CALLOUT, content="**💡 TIP**\n\nBody text")]


def test_regular_table_keeps_rows():
    text = "---\n\n| a | b |\n| --- | --- |\n| 1 | 2 |"
    blocks = parse_blocks(text)
    assert blocks == [ContentBlock(type=BlockType.TABLE, content="| a | b |\n| --- | --- |\n| 1 | 2 |")]


def test_single_row_table_is_dropped():
    blocks = parse_blocks("---\n\n| lonely |\n\nText")
    assert blocks == [ContentBlock(type=BlockType.PARAGRAPH, content="Text")]


def test_hero_region_blocks():
    text = (
        "# Cells\n"
        "\n"
        "⏱ Tiempo: 10 min | Nivel: Básico\n"
        "\n"
        "> Every living thing\n"
        "> is made of cells.\n"
        "\n"
        "---\n"
        "\n"
        "> A plain note\n"
        "\n"
        "Runs | level with the text"
    )
    blocks = parse_blocks(text)
    assert _types(blocks) == [
        BlockType.HEADING1,
        BlockType.META,
        BlockType.STANDFIRST,
        BlockType.CALLOUT,
        BlockType.PARAGRAPH,
    ]
    assert blocks[2].content == "Every living thing is made of cells."
    assert blocks[3].content == "A plain note"


def test_bold_line_is_standfirst_only_in_hero():
    blocks = parse_blocks("# T\n**A bold lead**\n\n---\n\n**Bold body**")
    assert blocks == [
        ContentBlock(type=BlockType.HEADING1, content="T"),
        ContentBlock(type=BlockType.STANDFIRST, content="A bold lead"),
        ContentBlock(type=BlockType.PARAGRAPH, content="**Bold body**"),
    ]


def test_section_heading_before_rule_stays_in_hero():
    blocks = parse_blocks("# T\n\n## Intro\n\n> The lead of this module.\n\n---\n\nBody")
    assert blocks == [
        ContentBlock(type=BlockType.HEADING1, content="T"),
        ContentBlock(type=BlockType.HEADING2, content="Intro"),
        ContentBlock(type=BlockType.STANDFIRST, content="The lead of this module."),
        ContentBlock(type=BlockType.PARAGRAPH, content="Body"),
    ]


def test_bare_heading_markers_are_paragraphs():
    blocks = parse_blocks("---\n\n##\n\n####\n\nText")
    assert blocks == [
        ContentBlock(type=BlockType.PARAGRAPH, content="##"),
        ContentBlock(type=BlockType.PARAGRAPH, content="####"),
        ContentBlock(type=BlockType.PARAGRAPH, content="Text"),
    ]


def test_insight_card_inside_hero_becomes_standfirst(caplog):
    with caplog.at_level(logging.INFO, logger="course_reader.textbook.blocks"):
        blocks = parse_blocks("# T\n\n> ### Quick take\n> Cells are small.")
    assert blocks == [
        ContentBlock(type=BlockType.HEADING1, content="T"),
        ContentBlock(type=BlockType.STANDFIRST, content="Quick take Cells are small."),
    ]
    assert "Ambiguous blockquote" in caplog.text


def test_pull_quote_outside_hero():
    blocks = parse_blocks("---\n\n> ## Big idea\n> continues here")
    assert blocks == [ContentBlock(type=BlockType.QUOTE, content="Big idea\ncontinues here")]


def test_pull_quote_inside_hero_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="course_reader.textbook.blocks"):
        blocks = parse_blocks("# T\n\n> ## Pulled\n> text")
    assert _types(blocks) == [BlockType.HEADING1, BlockType.QUOTE]
    assert "Ambiguous blockquote" in caplog.text


@pytest.mark.parametrize(
    "heading,expected",
    [
        ("⚠️ Watch out", BlockType.WARNING),
        ("Common pitfall", BlockType.WARNING),
        ("💡 TECH INSIGHT", BlockType.DIDYOUKNOW),
        ("¿Sabías que...?", BlockType.DIDYOUKNOW),
        ("Pro tip", BlockType.TIP),
        ("Key concept", BlockType.KEY_CONCEPT),
        ("Exercise 1", BlockType.EXERCISE),
        ("Something else", BlockType.CALLOUT),
    ],
)
def test_insight_cards_are_classified(heading, expected):
    blocks = parse_blocks(f"---\n\n> ### {heading}\n> Do this carefully")
    assert blocks == [ContentBlock(type=expected, content=f"**{heading}**\n\nDo this carefully")]


def test_insight_card_without_body_is_suppressed():
    assert parse_blocks("---\n\n> ### Pro tip") == []


def test_design_placeholder_becomes_callout():
    blocks = parse_blocks("---\n\n![DISEÑO: a cell diagram](http://example.com/x.png)\n![DISENO: plain prompt]")
    assert blocks == [
        ContentBlock(type=BlockType.CALLOUT, content="a cell diagram"),
        ContentBlock(type=BlockType.CALLOUT, content="plain prompt"),
    ]


def test_emoji_shortcuts():
    text = "💡 Bees can count\n⚠️ Hot surface\n🔴 Stop\n✅ Drink water\n💚 Rest\n🎯 Focus\n📌 Pin this"
    blocks = parse_blocks(text)
    assert _types(blocks) == [
        BlockType.DIDYOUKNOW,
        BlockType.WARNING,
        BlockType.WARNING,
        BlockType.TIP,
        BlockType.TIP,
        BlockType.KEY_CONCEPT,
        BlockType.KEY_CONCEPT,
    ]
    assert [block.content for block in blocks] == [
        "Bees can count",
        "Hot surface",
        "Stop",
        "Drink water",
        "Rest",
        "Focus",
        "Pin this",
    ]


def test_bullet_and_numbered_lists():
    blocks = parse_blocks("- one\n* two\n\n1. first\n2. second")
    assert blocks == [
        ContentBlock(type=BlockType.LIST, content="", items=["one", "two"]),
        ContentBlock(type=BlockType.NUMBERED_LIST, content="", items=["first", "second"]),
    ]


def test_code_fence_keeps_language_as_caption():
    blocks = parse_blocks("```python\ndef f():\n    return 1\n```\n\n```\nplain\n```")
    assert blocks == [
        ContentBlock(type=BlockType.CODE, content="def f():\n    return 1", caption="python"),
        ContentBlock(type=BlockType.CODE, content="plain"),
    ]


def test_paragraph_joins_lines_until_next_block():
    blocks = parse_blocks("First line\nsecond line\n- item\nText with <u>markup</u>")
    assert blocks == [
        ContentBlock(type=BlockType.PARAGRAPH, content="First line second line"),
        ContentBlock(type=BlockType.LIST, content="", items=["item"]),
        ContentBlock(type=BlockType.PARAGRAPH, content="Text with <u>markup</u>"),
    ]


def test_legacy_html_box_is_parsed_as_didyouknow():
    raw = '---\n\n<div style="border: 1px solid"><b>Fun fact</b><br>Bees dance.</div>'
    blocks = parse_blocks(raw)
    assert blocks == [ContentBlock(type=BlockType.DIDYOUKNOW, content="**Fun fact**\n\nBees dance.")]


def test_malformed_input_never_raises():
    blocks = parse_blocks("> \n|\n```\n:::\n#\n***")
    assert _types(blocks) == [BlockType.CODE]
    assert blocks[0].content == ":::\n#\n***"


def test_empty_input_has_no_blocks():
    assert parse_blocks("") == []
    assert parse_blocks("\n\n   \n") == []


def test_parser_is_reusable_and_deterministic():
    parser = BlockParser()
    text = "# T\n\nSome text.\n\n## S\n\n- a\n- b"
    assert parser.parse(text) == parser.parse(text)


def test_non_string_input_fails_fast():
    with pytest.raises(TypeError):
        parse_blocks(b"# bytes")
