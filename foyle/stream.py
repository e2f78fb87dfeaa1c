"""Shared state for streaming generation and assertions about completions."""

from __future__ import annotations

import enum
import logging
import secrets
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from foyle.blocks import Block, BlockKind, Doc

_log = logging.getLogger(__name__)

LEVEL1_ASSERTION = "Level1Assertion"

_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"


def _generate_id() -> str:
    """Return a new ULID: 48 bits of milliseconds then 80 random bits."""
    value = (int(time.time() * 1000) << 80) | secrets.randbits(80)
    chars = []
    for _ in range(26):
        chars.append(_CROCKFORD[value & 0x1F])
        value >>= 5
    return "".join(reversed(chars))


class AssertResult(enum.IntEnum):
    """Outcome of an assertion."""

    UNKNOWN_ASSERT_RESULT = 0
    PASSED = 1
    FAILED = 2
    SKIPPED = 3


class AssertionName(enum.IntEnum):
    """The checks run on generated completions."""

    UNKNOWN = 0
    AT_LEAST_ONE_BLOCK = 1
    AT_LEAST_ONE_BLOCK_POST_PROCESSED = 2
    NON_EMPTY_DOC = 3
    MARKUP_AFTER_CODE = 4


@dataclass
class Assertion:
    """A named check with its result and a unique identifier."""

    name: AssertionName
    result: AssertResult = AssertResult.UNKNOWN_ASSERT_RESULT
    id: str = field(default_factory=_generate_id)


class StreamState:
    """Thread-safe state shared by the reader and writer of a stream."""

    def __init__(self) -> None:
        self._context_id = ""
        self._lock = threading.Lock()

    def set_context_id(self, cid: str) -> None:
        with self._lock:
            self._context_id = cid

    def get_context_id(self) -> str:
        with self._lock:
            return self._context_id


def assert_markup_after_code(doc: Doc, selected_index: int, blocks: Sequence[Block]) -> Assertion:
    """Check that a completion for a selected code cell starts with markup.

    The check is skipped when the selected cell is not code, and fails
    whenever no blocks were generated.
    """
    assertion = Assertion(name=AssertionName.MARKUP_AFTER_CODE, result=AssertResult.SKIPPED)
    selected = doc.blocks[selected_index]
    if selected.kind == BlockKind.CODE:
        if blocks and blocks[0].kind == BlockKind.MARKUP:
            assertion.result = AssertResult.PASSED
        else:
            assertion.result = AssertResult.FAILED
    if not blocks:
        assertion.result = AssertResult.FAILED
    _log.info("%s: %s", LEVEL1_ASSERTION, assertion)
    return assertion