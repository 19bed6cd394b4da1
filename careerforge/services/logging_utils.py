import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional


def print_with_prefix(prefix: str, message: Optional[str], enabled: bool = True) -> None:
    if not enabled:
        return
    text = "" if message is None else str(message)
    lines = text.splitlines() or [""]
    for line in lines:
        if line:
            print(f"{prefix} {line}")
        else:
            print(prefix)


def log_section(
    log_fn: Callable[[str], None],
    title: str,
    width: int = 70,
    char: str = "=",
) -> None:
    line = char * width
    log_fn(line)
    log_fn(title)
    log_fn(line)


def truncate(text: Optional[str], limit: int = 100) -> str:
    """Accorcia prompt e output prima di loggarli."""
    if text is None:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


@contextmanager
def log_timing(log_fn: Callable[[str], None], operation: str) -> Iterator[None]:
    """Logga la durata di un'operazione (anche se fallisce, poi rilancia)."""
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        log_fn(f"Failed {operation} ({elapsed_ms}ms): {e}")
        raise
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    log_fn(f"Performance: {operation} ({elapsed_ms}ms)")
