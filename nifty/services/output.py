"""Output directory layout and atomic file writes."""

import json
import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from ..errors import OutputError

logger = logging.getLogger(__name__)


@contextmanager
def atomic_path(path: Path) -> Iterator[Path]:
    """Yield a hidden temporary sibling of path, renamed into place on success."""
    path = Path(path)
    tmp = path.with_name(f".{path.name}.part")
    try:
        yield tmp
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def dump_json(document: dict[str, Any]) -> str:
    """Serialize metadata the same way for generation and deploy."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def write_json(path: Path, document: dict[str, Any]):
    """Atomically write a JSON document."""
    try:
        with atomic_path(path) as tmp:
            tmp.write_text(dump_json(document), encoding="utf-8")
    except OSError as e:
        raise OutputError(f"unable to write metadata ({e})", str(path))


class OutputWriter:
    """Owns the output/, output/media/ and output/metadata/ directories."""

    def __init__(self, output_path: Path, media_path: Path, metadata_path: Path):
        self.output_path = Path(output_path)
        self.media_path = Path(media_path)
        self.metadata_path = Path(metadata_path)

    def init(self, clean: bool = False):
        """Create the output directories; existing non-empty output requires clean."""
        logger.debug("checking output directories...")
        if self.output_path.is_dir() and any(self.output_path.iterdir()):
            if not clean:
                raise OutputError(
                    "output directory already exists and is not empty - use --clean to clear it",
                    str(self.output_path),
                )
            logger.warning(f"clearing existing output directory '{self.output_path}'")
            shutil.rmtree(self.output_path)

        for path in (self.output_path, self.media_path, self.metadata_path):
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputError(f"could not create directory ({e})", str(path))

    def media_file(self, token_id: int, ext: str) -> Path:
        return self.media_path / f"{token_id}.{ext}"

    def metadata_file(self, token_id: int) -> Path:
        # No extension so it can be served as /metadata/{id}
        return self.metadata_path / str(token_id)

    def discard(self, token_id: int):
        """Remove whatever media/metadata a failed token managed to write."""
        paths = [self.metadata_file(token_id), *self.media_path.glob(f"{token_id}.*")]
        for path in paths:
            if path.is_file():
                logger.debug(f"removing partial output '{path}'")
                path.unlink(missing_ok=True)

    def write_metadata(self, token_id: int, document: dict[str, Any]) -> Path:
        path = self.metadata_file(token_id)
        logger.debug(f"saving token #{token_id} metadata as '{path}'")
        write_json(path, document)
        return path
