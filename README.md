# clice

Building blocks for a C/C++ language server, as a plain Python library with no
third-party dependencies.

## Modules

- `clice.tasks`: a single-threaded cooperative scheduler. `Task` wraps a
  coroutine that starts suspended; `schedule()` puts it on the loop, `cancel()`
  marks it and every task it is awaiting so that none of them resumes, and
  `dispose()` lets it be destroyed once it finishes or is cancelled. `done()`,
  `cancelled()` and `result()` report on it, and a `Task` can be awaited from
  inside another `Task`. `sleep(milliseconds)` (a number or a `timedelta`)
  suspends the current task, `submit(work)` returns a task that runs a blocking
  callable in a small thread pool, and `run_pending()` drives the loop until no
  task, timer or thread job is left.
- `clice.sync`: `Event` (`set`, `clear`, `is_set`, awaitable) and `Lock`.
  `await lock.try_lock()` returns a `Guard`; waiting tasks get the lock in
  arrival order. The guard releases the lock on `release()`, on leaving a
  `with` block, or when it is garbage-collected.
- `clice.gather`: `gather(*awaitables)` returns a task whose result is the
  tuple of their results, in order. `gather_each(values, coroutine,
  concurrency)` runs `coroutine` on every value with at most `concurrency`
  running at once (default: the CPU count); the first false result cancels the
  rest and the task yields `False`, otherwise `True`. `run(*awaitables)` does
  the gathering synchronously and returns the tuple.
- `clice.filesystem`: file access through the thread pool. `Mode` flags
  (`READ`, `WRITE`, `READ_WRITE`, `CREATE`, `APPEND`, `TRUNCATE`, `EXCLUSIVE`),
  `open_file` returning a `FileHandle` (`read`, `write`, `close`, context
  manager), whole-file `read` (returns `bytes`) and `write` (by default
  `WRITE | CREATE | TRUNCATE`), and `stat` returning `Stats` with `mtime` as a
  `timedelta` in whole milliseconds.
- `clice.protocol`: Language Server Protocol records such as `Position`,
  `Range`, `TextEdit`, `TextDocumentItem`, `HeaderContext` and
  `CompletionOptions`, the `ErrorCodes` and `TextDocumentSyncKind` enums, and
  `to_json`, which turns them into JSON-ready data with camelCase field names.
  `Position` checks that its values lie in `[0, 2**31 - 1]`.
- `clice.config`: option records `ServerOptions`, `CacheOptions`,
  `IndexOptions` and `Rule`.
- `clice.include_graph`: `TranslationUnit`, `Header`, `HeaderIndex`,
  `Context`, `IncludeLocation` and `HeaderContext`; `Header.get_index(tu,
  include)` finds the index of a header context.
- `clice.completion`: `CompletionPrefix.parse(content, offset)` splits the text
  before the cursor into a scope qualifier (such as `std::`) and a partial
  name; `edit_range(content, offset)` gives the identifier range a completion
  replaces.
- `clice.semantic_tokens`: `LocalSourceRange`, `SemanticToken` and
  `merge_tokens`, which sorts tokens by range, marks tokens claiming the same
  range with the `CONFLICT` kind and joins adjacent tokens of one kind.
- `clice.folding`: `FoldingRange` and `FoldingRangeKind`, and helpers working
  on offsets: `pragma_regions` folds `#pragma region` / `#pragma endregion`
  pairs, `condition_branches` folds the branches an `#else` closes,
  `call_parentheses` finds the matching parentheses of a call from its tokens,
  and `spans_lines` tells whether a range crosses a line break. Only ranges
  spanning several lines are folded.

## Example

```python
from clice.gather import run
from clice.tasks import Task, sleep

counter = 0

async def step():
    global counter
    await sleep(10)
    counter += 1
    return counter

print(run(Task(step()), Task(step()), Task(step())))  # (1, 2, 3)
```

## What it does not do

This package has no language server of its own: no command, no message
transport, no request handling. It does not parse or compile C or C++ code,
does not build or store an index, and does not load configuration files; the
feature helpers work on text, offsets and tokens that the caller supplies.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```