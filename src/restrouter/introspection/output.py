"""Model description output.

Writes one YAML file per introspected table. The files are an inspection aid
only; nothing reads them back during a pipeline run.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

import yaml

from restrouter.core.errors import IntrospectionError
from restrouter.core.logging import get_logger
from restrouter.core.models import TableDescription

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]")


def description_filename(table_name: str) -> str:
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', table_name)}.yaml"


class ModelDescriptionWriter:
    """Writes TableDescriptions as YAML files into a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def write(self, tables: Sequence[TableDescription]) -> list[Path]:
        """Write every description, creating the directory if needed.

        Returns:
            Paths of the written files, in table order
        """
        written: list[Path] = []
        for table in tables:
            path = self.directory / description_filename(table.name)
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                with path.open("w", encoding="utf-8") as f:
                    yaml.safe_dump(table.model_dump(mode="json"), f, sort_keys=False)
            except OSError as e:
                raise IntrospectionError(
                    f"Failed to write model description to {path}: {e}", table=table.name
                ) from e
            written.append(path)

        logger.info("model_descriptions_written", directory=str(self.directory), files=len(written))
        return written
