"""
Default settings for file discovery.

The ignore file uses the splitignore syntax: one rule per line, `#` comments,
directory rules ending with `/`, and `*` wildcards.
"""

from __future__ import annotations

# Ignore file read from the workspace root.
IGNORE_FILE_NAME: str = ".splitignore"

# Threads used to list directories concurrently. 1 disables the thread pool.
DEFAULT_WORKERS: int = 8
