from gatecord.datatypes.ban_datatypes import DEFAULT_BAN_REASON, BanRecord
from gatecord.datatypes.discord_datatypes import UserID
from gatecord.moderation.ban_list_renderer import (
    BAN_LIST_TITLE,
    CHUNK_CEILING,
    CONTINUATION_LABEL,
    FIRST_CHUNK_LABEL,
    MAX_DISPLAY,
    MAX_REASON_LENGTH,
    format_ban_block,
    format_summary,
    pack_chunks,
    render_ban_list,
    shorten_reason,
)


def _record(n: int, reason="spam") -> BanRecord:
    return BanRecord(user_id=UserID(100000000000000000 + n), display_tag=f"user{n}", reason=reason)


def test_empty_list():
    document = render_ban_list([], "Test Guild")

    assert document.title == BAN_LIST_TITLE
    assert document.summary == "No users are currently banned."
    assert document.footer == "Test Guild ban management"
    assert document.total == 0
    assert document.displayed == 0
    assert document.chunks == []


def test_summary_pluralization():
    assert format_summary(1) == "**1** user is currently banned."
    assert format_summary(7) == "**7** users are currently banned."


def test_block_format():
    block = format_ban_block(3, _record(1, reason="raiding"))
    assert block == (
        "3. **user1** (<@100000000000000001>)\n"
        "   └ ID: `100000000000000001`\n"
        "   └ Reason: raiding"
    )


def test_missing_reason_uses_placeholder():
    assert shorten_reason(None) == DEFAULT_BAN_REASON
    assert shorten_reason("   ") == DEFAULT_BAN_REASON


def test_long_reason_is_shortened():
    shortened = shorten_reason("x" * 500)
    assert len(shortened) == MAX_REASON_LENGTH
    assert shortened.endswith("…")


def test_order_is_preserved_and_numbered():
    records = [_record(n) for n in (5, 1, 3)]
    document = render_ban_list(records, "Guild")

    content = "".join(chunk.content for chunk in document.chunks)
    assert content.index("user5") < content.index("user1") < content.index("user3")
    assert content.startswith("1. **user5**")
    assert "2. **user1**" in content
    assert "3. **user3**" in content


def test_display_cap_and_overflow_line():
    records = [_record(n) for n in range(25)]
    document = render_ban_list(records, "Guild")

    content = "\n\n".join(chunk.content for chunk in document.chunks)
    assert document.total == 25
    assert document.displayed == MAX_DISPLAY
    assert document.summary == "**25** users are currently banned."
    assert f"{MAX_DISPLAY}. **user19**" in content
    assert "user20" not in content
    assert content.endswith("... and +5 more")


def test_chunks_respect_ceiling_and_labels():
    records = [_record(n, reason="r" * 140) for n in range(MAX_DISPLAY)]
    document = render_ban_list(records, "Guild")

    assert len(document.chunks) > 1
    assert all(len(chunk.content) <= CHUNK_CEILING for chunk in document.chunks)
    assert document.chunks[0].label == FIRST_CHUNK_LABEL
    assert all(chunk.label == CONTINUATION_LABEL for chunk in document.chunks[1:])

    # Every block appears whole in exactly one chunk
    for index, record in enumerate(records, start=1):
        block = format_ban_block(index, record)
        assert sum(block in chunk.content for chunk in document.chunks) == 1


def test_pack_chunks_never_splits_blocks():
    blocks = ["a" * 600, "b" * 300, "c" * 300, "d" * 50]
    chunks = pack_chunks(blocks, ceiling=1000)
    assert chunks == ["a" * 600 + "\n\n" + "b" * 300, "c" * 300 + "\n\n" + "d" * 50]


def test_pack_chunks_oversized_block_gets_own_chunk():
    chunks = pack_chunks(["x" * 20, "y" * 50, "z"], ceiling=30)
    assert chunks == ["x" * 20, "y" * 50, "z"]
