# File: src/mstair/textdump/base/fs_helpers.py
"""
File system helpers used by configuration loading and log formatting.
"""

import logging
import warnings
from pathlib import Path
from typing import IO, TypeAlias

import dotenv


__all__ = [
    "StrPath",
    "fs_find_pyproject_toml",
    "fs_load_dotenv",
]

StrPath: TypeAlias = str | Path

_fs_pyproject_toml_cache: dict[Path, Path | None] = {}


def fs_find_pyproject_toml(
    *,
    start_dir: Path | None = None,
    strict: bool = False,
    warn: bool = False,
) -> Path | None:
    """
    Return the absolute path of the nearest `pyproject.toml` file.

    Results are memoized per start directory; log formatting calls this once
    per record, so the walk must not touch the file system twice.

    :param start_dir: The directory to start searching from, default is the current working directory.
    :param strict: If True, raises `FileNotFoundError` if the file is not found.
    :param warn: If True, emits a `UserWarning` if the file is not found.
    :return: The path of the nearest `pyproject.toml`, or None.
    :raises FileNotFoundError: If no file is found and `strict` is True.
    """
    start_dir = start_dir or Path.cwd()
    if start_dir in _fs_pyproject_toml_cache:
        return _fs_pyproject_toml_cache[start_dir]

    for directory in [start_dir, *start_dir.parents]:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            _fs_pyproject_toml_cache[start_dir] = candidate
            return candidate

    if strict:
        raise FileNotFoundError(f"No pyproject.toml found for {start_dir}")
    if warn:
        warnings.warn(
            message=f"No pyproject.toml found for {start_dir}.",
            category=UserWarning,
            stacklevel=2,
        )
    _fs_pyproject_toml_cache[start_dir] = None
    return None


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    override: bool = False,
    encoding: str | None = "utf-8",
) -> bool:
    """
    Parse a `.env` file and load its variables into the process environment.

    Existing environment variables win unless `override` is set, so values
    exported by the shell or by a test's monkeypatch are never clobbered.

    :param logger: Logger receiving python-dotenv's own warnings; enables verbose mode.
    :param dotenv_path: Absolute or relative path to the `.env` file.
    :param stream: Text stream with `.env` content, used if `dotenv_path` is None.
    :param override: Whether `.env` values replace existing environment variables.
    :param encoding: Encoding of the `.env` file.
    :return: True if at least one environment variable was set.
    """
    verbose = False
    if logger is not None:
        dotenv.main.logger = logger
        verbose = True
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
        interpolate=True,
        encoding=encoding,
    )


# End of file: src/mstair/textdump/base/fs_helpers.py
