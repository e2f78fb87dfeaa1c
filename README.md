# foyle

Building blocks for an AI assistant that helps engineers write markdown
notebooks for building, deploying and operating software. The package
provides:

- `foyle.api`: the configuration types for the agent (`AgentConfig`,
  `RAGConfig`, `ModelProvider`), experiment resources (`Experiment`,
  `ExperimentSpec`, `Metadata`), LLM usage records (`LLMUsage`), and
  `LogEntry`, which reads structured JSON log lines.
- `foyle.retry`: a `RetryInterceptor` that retries unary calls failing with
  `Code.DEADLINE_EXCEEDED` or `Code.CANCELED`.
- `foyle.blocks`: notebook `Block` and `Doc` types and the post-processing
  applied to model output (`post_process_blocks`, `should_trigger`,
  `drop_response`).
- `foyle.stream`: assertions logged about generated responses and the
  thread-safe `StreamState` used by streaming sessions.

## Installation

```
pip install .
```

## Command line

```
foyle version
```

prints the name, version, commit, build date and builder of the installed
build.

## Examples

Reading a log line:

```python
import json
from foyle.api import LogEntry

entry = LogEntry(json.loads('{"time": 1713208269, "message": "hello", "traceId": "1234"}'))
entry.message()   # "hello"
entry.trace_id()  # "1234"
entry.time()      # datetime for 1713208269 seconds after the epoch
```

Cleaning up blocks returned by a model:

```python
from foyle.blocks import Block, BlockKind, post_process_blocks

blocks = [
    Block(kind=BlockKind.MARKUP, contents="first block"),
    Block(kind=BlockKind.MARKUP, contents="second block"),
    Block(kind=BlockKind.CODE, contents="echo hello"),
    Block(kind=BlockKind.MARKUP, contents="dropped"),
]
post_process_blocks(blocks)
# [Block(MARKUP, "first block\nsecond block"), Block(CODE, "echo hello")]
```

Adjacent markup blocks are merged, empty blocks and stray `</output>` tags are
removed, and everything after the first code block is dropped.

Retrying calls:

```python
from foyle.retry import RetryInterceptor

interceptor = RetryInterceptor(max_retries=3, backoff=0.01)
call = interceptor.wrap_unary(send_request)
response = call(request)
```

## Tests

```
pip install .[test]
pytest
```