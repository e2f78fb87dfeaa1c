import threading

import pytest

from foyle.blocks import Block, BlockKind, Doc
from foyle.stream import (
    Assertion,
    AssertionName,
    AssertResult,
    StreamState,
    assert_markup_after_code,
)


def _doc(kind):
    return Doc(blocks=[Block(kind=kind, contents="echo hello")])


def test_code_selected_markup_first_passes():
    result = assert_markup_after_code(
        _doc(BlockKind.CODE), 0, [Block(kind=BlockKind.MARKUP, contents="explain")]
    )
    assert result.result == AssertResult.PASSED
    assert result.name == AssertionName.MARKUP_AFTER_CODE


def test_code_selected_code_first_fails():
    result = assert_markup_after_code(
        _doc(BlockKind.CODE), 0, [Block(kind=BlockKind.CODE, contents="ls")]
    )
    assert result.result == AssertResult.FAILED


def test_markup_selected_is_skipped():
    result = assert_markup_after_code(
        _doc(BlockKind.MARKUP), 0, [Block(kind=BlockKind.CODE, contents="ls")]
    )
    assert result.result == AssertResult.SKIPPED


@pytest.mark.parametrize("kind", [BlockKind.MARKUP, BlockKind.CODE])
def test_no_blocks_fails(kind):
    result = assert_markup_after_code(_doc(kind), 0, [])
    assert result.result == AssertResult.FAILED


def test_selected_index_out_of_range():
    with pytest.raises(IndexError):
        assert_markup_after_code(_doc(BlockKind.CODE), 3, [])


def test_assertion_ids_are_unique_ulids():
    ids = {Assertion(name=AssertionName.NON_EMPTY_DOC).id for _ in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 26 for i in ids)


def test_stream_state_defaults_to_empty():
    assert StreamState().get_context_id() == ""


def test_stream_state_set_and_get():
    state = StreamState()
    state.set_context_id("ctx-1")
    assert state.get_context_id() == "ctx-1"
    state.set_context_id("ctx-2")
    assert state.get_context_id() == "ctx-2"


def test_stream_state_concurrent_writes_leave_a_written_value():
    state = StreamState()
    values = [f"ctx-{n}" for n in range(20)]
    threads = [threading.Thread(target=state.set_context_id, args=(v,)) for v in values]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert state.get_context_id() in values