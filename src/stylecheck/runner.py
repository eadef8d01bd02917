"""Checker runner: discovers files and checks them concurrently.

Every file goes through lex -> parse -> validate on its own worker thread
with no shared state. Results are joined once all workers finish and only
then turned into a :class:`Report`.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable

from stylecheck.config import CheckConfig
from stylecheck.model.report import FileFailure, FileResult, Report
from stylecheck.parser import LexError, ParseError, parse_stylesheet
from stylecheck.validation import validate

logger = logging.getLogger(__name__)


def _read_failure(path: str, message: str) -> FileResult:
    return FileResult(path=path, failure=FileFailure(path, "ReadError", "", message))


def discover(
    paths: Iterable[str | Path], extensions: Iterable[str]
) -> tuple[list[Path], list[FileResult]]:
    """Expand *paths* into the files to check.

    Directories are walked recursively for files with one of *extensions*;
    explicitly named files are always checked. Missing paths come back as
    read failures instead of raising.
    """
    suffixes = tuple(extensions)
    files: list[Path] = []
    missing: list[FileResult] = []
    seen: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found = sorted(p for p in path.rglob("*") if p.is_file() and p.suffix in suffixes)
            logger.debug("Found %d stylesheet(s) under %s", len(found), path)
        elif path.exists():
            found = [path]
        else:
            missing.append(_read_failure(str(path), "No such file or directory."))
            continue
        for file in found:
            if file not in seen:
                seen.add(file)
                files.append(file)
    return files, missing


def check_source(source: str, path: str = "", config: CheckConfig | None = None) -> FileResult:
    """Check stylesheet text that is already in memory."""
    config = config or CheckConfig()
    try:
        root = parse_stylesheet(source)
    except (LexError, ParseError) as exc:
        kind = "LexError" if isinstance(exc, LexError) else "ParseError"
        failure = FileFailure(path, kind, exc.kind.value, str(exc), exc.span)
        logger.info("%s: %s", path, failure.label)
        lines = {exc.span.line} if config.show_source else set()
        return FileResult(path=path, failure=failure, excerpts=_excerpts(source, lines))

    violations = tuple(validate(root, config, path))
    logger.debug("%s: %d violation(s)", path, len(violations))
    lines = {v.span.line for v in violations} if config.show_source else set()
    return FileResult(path=path, violations=violations, excerpts=_excerpts(source, lines))


def _excerpts(source: str, lines: set[int]) -> dict[int, str]:
    if not lines:
        return {}
    # Line numbers count "\n" only, as the lexer does.
    text = source.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return {n: text[n - 1] for n in sorted(lines) if 0 < n <= len(text)}


def check_file(path: Path, config: CheckConfig | None = None) -> FileResult:
    """Read and check one file. Unreadable files become read failures."""
    logger.debug("Checking %s", path)
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.info("Cannot read %s: %s", path, exc)
        return _read_failure(str(path), str(exc))
    return check_source(source, str(path), config)


def run_check(
    paths: Iterable[str | Path],
    config: CheckConfig | None = None,
    cancel: threading.Event | None = None,
) -> Report:
    """Check every stylesheet under *paths* and build the report.

    Setting *cancel* abandons files that have not started yet; the report is
    then marked incomplete.
    """
    config = config or CheckConfig()
    files, results = discover(paths, config.extensions)
    if not files:
        return Report.from_results(results)

    def work(file: Path) -> FileResult | None:
        if cancel is not None and cancel.is_set():
            return None
        return check_file(file, config)

    incomplete = False
    with ThreadPoolExecutor(max_workers=config.jobs) as pool:
        futures: dict[Future[FileResult | None], Path] = {
            pool.submit(work, file): file for file in files
        }
        for future in as_completed(futures):
            if future.cancelled():
                incomplete = True
                continue
            try:
                result = future.result()
            except Exception as exc:
                logger.exception("Unexpected error while checking %s", futures[future])
                path = str(futures[future])
                result = FileResult(
                    path=path,
                    failure=FileFailure(path, "InternalError", type(exc).__name__, str(exc)),
                )
            if result is None:
                incomplete = True
                continue
            results.append(result)
            if cancel is not None and cancel.is_set():
                for pending in futures:
                    pending.cancel()

    if incomplete:
        logger.info("Run cancelled; %d of %d file(s) checked", len(results), len(files))
    return Report.from_results(results, incomplete=incomplete)
