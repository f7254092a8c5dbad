"""Deploy - point produced metadata at the hosted media location."""

import json
import logging
from pathlib import Path
from urllib.parse import urlparse

from ..errors import ConfigError, OutputError
from .output import dump_json, write_json

logger = logging.getLogger(__name__)

URL_FIELDS = ("image", "animation_url")


class DeployService:
    """Rewrite media-location fields of every metadata document to {base_uri}{filename}."""

    def __init__(self, metadata_path: Path):
        self.metadata_path = Path(metadata_path)

    def deploy(self, base_uri: str) -> int:
        """
        Rewrite image/animation_url in every metadata file.

        All other fields are left untouched and running twice with the same
        base URI gives byte-identical files.

        Returns:
            Number of files rewritten
        """
        validate_base_uri(base_uri)
        if not self.metadata_path.is_dir():
            raise OutputError("metadata directory not found", str(self.metadata_path))

        updated = 0
        for path in sorted(self.metadata_path.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            if self._deploy_file(path, base_uri):
                updated += 1

        logger.info(f"updated {updated} metadata files to '{base_uri}'")
        return updated

    def _deploy_file(self, path: Path, base_uri: str) -> bool:
        logger.debug(f"reading metadata from '{path}'...")
        try:
            original = path.read_text(encoding="utf-8")
            document = json.loads(original)
        except (OSError, json.JSONDecodeError) as e:
            raise OutputError(f"unable to read metadata as JSON ({e})", str(path))

        for field in URL_FIELDS:
            value = document.get(field)
            if isinstance(value, str) and value:
                document[field] = rewrite_url(value, base_uri)
                logger.debug(f"updated url of '{field}' to '{document[field]}'")

        if dump_json(document) == original:
            logger.debug(f"no changes made to '{path}'")
            return False
        write_json(path, document)
        return True


def validate_base_uri(base_uri: str):
    parsed = urlparse(base_uri)
    if not parsed.scheme or not parsed.netloc:
        raise ConfigError(f"'{base_uri}' is not an absolute URI", field="base_uri")
    if not base_uri.endswith("/"):
        raise ConfigError(f"base uri of '{base_uri}' does not end with a '/'", field="base_uri")


def rewrite_url(value: str, base_uri: str) -> str:
    """Keep the last path segment of value and join it onto base_uri."""
    filename = urlparse(value).path.rstrip("/").rsplit("/", 1)[-1]
    return f"{base_uri}{filename}"
