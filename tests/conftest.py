from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

PYTHON_TRACE = "\n".join(
    [
        "Traceback (most recent call last):",
        '  File "/app/main.py", line 42, in process_request',
        "    result = handler.execute(query)",
        '  File "/app/handlers.py", line 156, in execute',
        "    return self._run_query(query)",
        '  File "/app/handlers.py", line 203, in _run_query',
        "    cursor.execute(sql)",
        'psycopg2.errors.SyntaxError: syntax error at or near "FROM"',
    ]
)

GO_TRACE = "\n".join(
    [
        "panic: runtime error: index out of range [5] with length 3",
        "",
        "goroutine 1 [running]:",
        "main.processItems(0xc0000a6000, 0x3, 0x8)",
        "        /home/user/project/main.go:45 +0x1a3",
        "main.handleRequest(0xc0000b2000)",
        "        handlers.go:89 +0x85",
        "main.main()",
        "        main.go:23 +0x45",
    ]
)

NODE_TRACE = "\n".join(
    [
        "TypeError: Cannot read property 'id' of undefined",
        "    at UserService.getUser (/app/services/user.js:45:23)",
        "    at AuthController.authenticate (/app/controllers/auth.js:78:15)",
        "    at Router.handle (/app/router.js:34:12)",
        "    at Server.<anonymous> (/app/server.js:89:5)",
    ]
)


@pytest.fixture
def python_trace() -> str:
    return PYTHON_TRACE


@pytest.fixture
def go_trace() -> str:
    return GO_TRACE


@pytest.fixture
def node_trace() -> str:
    return NODE_TRACE


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(rel_path: str, content: str) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
