"""JSON handling utilities with orjson for performance."""

import os
from pathlib import Path
from typing import Any

import orjson


class JsonHandler:
    """JSON handler using orjson."""

    @staticmethod
    def dumps(data: Any, pretty: bool = False) -> str:
        """
        Serialize data to JSON string.

        Args:
            data: Data to serialize
            pretty: Whether to format with indentation

        Returns:
            JSON string
        """
        options = orjson.OPT_SORT_KEYS
        if pretty:
            options |= orjson.OPT_INDENT_2

        return orjson.dumps(data, option=options).decode("utf-8")

    @staticmethod
    def dump_file(data: Any, path: Path, pretty: bool = True) -> None:
        """
        Write data to JSON file.

        The document is written to a sibling temp file first and moved over
        the target, so a failed write leaves the previous file intact.

        Args:
            data: Data to write
            path: File path
            pretty: Whether to format with indentation
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        options = orjson.OPT_SORT_KEYS | orjson.OPT_APPEND_NEWLINE
        if pretty:
            options |= orjson.OPT_INDENT_2

        tmp_path = path.with_name(path.name + ".part")
        try:
            with open(tmp_path, "wb") as f:
                f.write(orjson.dumps(data, option=options))
            os.replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    @staticmethod
    def load_file(path: Path) -> Any:
        """
        Load data from JSON file.

        Args:
            path: File path

        Returns:
            Parsed Python object
        """
        with open(path, "rb") as f:
            return orjson.loads(f.read())
