"""Main manifest parser: reads files or URLs and dispatches by format."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import requests
import yaml

from ..interfaces.parser import ISBOMParser
from ..models.document import SBOMDocument
from ..models.enums import FileFormat
from .cyclonedx_parser import CycloneDXParser
from .exceptions import DocumentCorruptedError, DocumentFetchError, UnsupportedFormatError
from .spdx_parser import SPDXParser

logger = logging.getLogger(__name__)

_TEXT_TAGS = {"tag:yaml.org,2002:timestamp", "tag:yaml.org,2002:float"}


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps and decimals as the text written."""


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

SUPPORTED_FORMATS = ["cyclonedx-json", "cyclonedx-yaml", "spdx-json", "spdx-yaml"]

_GITHUB_BLOB = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/blob/(.+)$")


def is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def raw_github_url(url: str) -> str:
    """Rewrite a github.com ``blob`` page URL to its raw.githubusercontent.com file."""
    match = _GITHUB_BLOB.match(url)
    if not match:
        return url
    owner, repo, rest = match.groups()
    return f"https://raw.githubusercontent.com/{owner}/{repo}/{rest}"


class SBOMParser:
    """
    Main manifest parser that delegates to format-specific parsers.

    Reads local files or downloads URLs, decodes JSON or YAML, and hands the
    result to the first parser (CycloneDX, SPDX) that recognizes it.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        parsers: Optional[List[ISBOMParser]] = None,
    ):
        self.timeout = timeout
        self._session = session
        self._parsers = parsers if parsers is not None else [CycloneDXParser(), SPDXParser()]

    def parse(self, source: str) -> SBOMDocument:
        """
        Parse a manifest from a local path or an http(s) URL.

        Args:
            source: File path or URL.

        Returns:
            Parsed SBOMDocument.

        Raises:
            DocumentFetchError: If the file cannot be read or downloaded.
            UnsupportedFormatError: If the manifest format is not supported.
            DocumentCorruptedError: If the content cannot be decoded.
        """
        if is_url(source):
            content = self.fetch_url(source)
        else:
            content = self.read_file(source)
        return self.parse_content(content, source)

    def read_file(self, file_path: str) -> bytes:
        path = Path(file_path)
        if not path.is_file():
            raise DocumentFetchError(message="File not found", file_path=file_path)
        try:
            return path.read_bytes()
        except OSError as e:
            raise DocumentFetchError(
                message=f"Cannot read file: {e}",
                file_path=file_path,
            ) from e

    def fetch_url(self, url: str) -> bytes:
        """
        Download a manifest.

        Raises:
            DocumentFetchError: On connection errors, timeouts and non-2xx
                responses; ``details["status_code"]`` holds the HTTP status
                when there was a response.
        """
        target = raw_github_url(url)
        if target != url:
            logger.debug(f"Rewrote {url} to {target}")

        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(target, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise DocumentFetchError(
                message=f"Download failed with HTTP status {status}",
                file_path=url,
                details={"status_code": status},
            ) from e
        except requests.RequestException as e:
            raise DocumentFetchError(
                message=f"Download failed: {e}",
                file_path=url,
            ) from e
        return response.content

    def parse_content(self, content: Union[bytes, str], source: str = "<memory>") -> SBOMDocument:
        """
        Parse already loaded manifest content.

        Args:
            content: Raw bytes or text.
            source: Path or URL used in error messages.

        Returns:
            Parsed SBOMDocument.
        """
        if isinstance(content, bytes):
            try:
                text = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise DocumentCorruptedError(
                    message="Content is not valid UTF-8",
                    file_path=source,
                    details={"position": e.start},
                ) from e
        else:
            text = content

        data, file_format = self.decode(text, source)
        for parser in self._parsers:
            if parser.can_parse(data):
                try:
                    return parser.parse_data(data, file_format)
                except DocumentCorruptedError as e:
                    e.file_path = e.file_path or source
                    raise

        raise UnsupportedFormatError(
            message="Content is neither CycloneDX nor SPDX",
            file_path=source,
            details={"supported_formats": SUPPORTED_FORMATS},
        )

    def decode(self, text: str, source: str = "<memory>") -> Tuple[Dict[str, Any], str]:
        """
        Decode JSON, falling back to YAML.

        Returns:
            Tuple of (decoded mapping, file format value).

        Raises:
            UnsupportedFormatError: For XML, RDF and SPDX tag-value content.
            DocumentCorruptedError: If neither decoder yields a mapping.
        """
        stripped = text.lstrip()
        unsupported = self._unsupported_serialization(stripped)
        if unsupported is not None:
            raise UnsupportedFormatError(
                message=f"{unsupported.value} manifests are not supported",
                file_path=source,
                location="serialization",
                details={"supported_formats": SUPPORTED_FORMATS},
            )

        try:
            data = json.loads(text)
            file_format = FileFormat.JSON
        except json.JSONDecodeError as json_error:
            try:
                data = yaml.load(text, Loader=ManifestLoader)
            except yaml.YAMLError as e:
                raise DocumentCorruptedError(
                    message="Content is neither valid JSON nor valid YAML",
                    file_path=source,
                    details={"json_error": str(json_error), "yaml_error": str(e)},
                ) from e
            file_format = FileFormat.YAML

        if not isinstance(data, dict):
            raise DocumentCorruptedError(
                message="Manifest root must be a mapping",
                file_path=source,
                details={"root_type": type(data).__name__},
            )
        return data, file_format.value

    @staticmethod
    def _unsupported_serialization(stripped: str) -> Optional[FileFormat]:
        if stripped.startswith("<"):
            return FileFormat.RDF if "rdf:RDF" in stripped[:2048] else FileFormat.XML
        if re.match(r"^(SPDXVersion|DataLicense|SPDXID)\s*:", stripped):
            return FileFormat.TAG_VALUE
        return None

    def get_supported_formats(self) -> List[str]:
        """Return list of supported manifest formats."""
        return list(SUPPORTED_FORMATS)
