"""Document blocks and the post-processing applied to generated completions."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

# Response header carrying the trace ID of a generation.
TRACE_ID_HEADER = "Foyle-Trace-ID"

SYSTEM_PROMPT = (
    "You are a helpful AI assistant for software developers. You are helping software engineers write \n"
    "markdown documents to deploy and operate software. Your job is to help users with tasks related to building, "
    "deploying,\n"
    "and operating software. You should interpret any questions or commands in that context. You job is to suggest\n"
    "commands the user can execute to accomplish their goals."
)

# Upper bound on document characters included in prompts (about 2 characters per token).
MAX_DOC_CHARS = 1110

_OUTPUT_TAG = "</output>"


class BlockKind(enum.IntEnum):
    """Kind of a notebook block."""

    UNKNOWN_BLOCK_KIND = 0
    MARKUP = 1
    CODE = 2


@dataclass
class Block:
    """A single markup or code cell of a document."""

    kind: BlockKind = BlockKind.UNKNOWN_BLOCK_KIND
    contents: str = ""
    language: str = ""
    id: str = ""


@dataclass
class Doc:
    """A document made of blocks."""

    blocks: list[Block] = field(default_factory=list)


@dataclass
class StreamGenerateResponse:
    """A completion sent back to a streaming client."""

    cells: list[Block] = field(default_factory=list)
    notebook_uri: str = ""
    insert_at: int = 0
    context_id: str = ""


@dataclass(frozen=True)
class Example:
    """A worked example included in a prompt."""

    input: str
    output: str


def is_output_tag(contents: str) -> bool:
    """True if the contents are only a closing output tag."""
    return contents.strip() == _OUTPUT_TAG


def post_process_blocks(blocks: Iterable[Block]) -> list[Block]:
    """Clean up generated blocks.

    Drops empty blocks and stray output tags, merges consecutive markup
    blocks and stops after the first code block. The input blocks are
    left unchanged.
    """
    results: list[Block] = []
    for block in blocks:
        if is_output_tag(block.contents):
            continue
        if not block.contents.strip():
            continue
        if (
            results
            and block.kind == BlockKind.MARKUP
            and results[-1].kind == BlockKind.MARKUP
        ):
            last = results[-1]
            last.contents = f"{last.contents}\n{block.contents}"
            continue

        results.append(replace(block))
        # Showing several code blocks is confusing, so stop at the first one.
        if block.kind == BlockKind.CODE:
            break
    return results


def should_trigger(doc: Doc, selected_index: int) -> bool:
    """Whether a completion should be generated for the document."""
    return len(doc.blocks) != 0


def drop_response(response: StreamGenerateResponse | None) -> bool:
    """Whether a response should be withheld from the client.

    Empty responses would make the client remove earlier suggestions.
    """
    if response is None:
        return True
    return len(response.cells) == 0