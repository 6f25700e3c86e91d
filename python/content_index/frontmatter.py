import json
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Dict, Optional, Tuple, Union

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

# Header delimited by "---" lines at the very top of a markdown file
_MARKDOWN_HEADER = re.compile(
    r"^---\s*[\r\n]+(.*?)\r?\n---\s*[\r\n]+(.*)\Z", re.DOTALL
)
# Leading /* ... */ or /** ... */ comment that contains a "---" section
_JSX_HEADER = re.compile(
    r"^/\*\*?.*?---\s*[\r\n]+(.*?)\r?\n---.*?\*/\s*", re.DOTALL
)

_CODE_SPANS = re.compile(r"`{1,3}.*?`{1,3}", re.DOTALL)
_TAGS = re.compile(r"<[^>]*>")
_MARKDOWN_CHARS = re.compile(r"[#>*_~`]")
_LINKS = re.compile(r"\[(.*?)\]\(.*?\)")
_WHITESPACE = re.compile(r"\s+")


class SourceFormat(Enum):
    """Content source formats the indexer understands."""

    MARKDOWN = "markdown"
    JSX = "jsx"

    @classmethod
    def from_path(cls, path: Union[str, PurePath]) -> Optional["SourceFormat"]:
        """Pick the format from the file extension, None if unsupported."""
        return EXTENSION_FORMATS.get(PurePath(path).suffix.lower())


EXTENSION_FORMATS = {
    ".md": SourceFormat.MARKDOWN,
    ".mdx": SourceFormat.MARKDOWN,
    ".jsx": SourceFormat.JSX,
}


class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"


@dataclass(frozen=True)
class FrontmatterValue:
    """
    A single front-matter value tagged with its parsed shape.

    The accessors return None when the value has a different kind, so
    callers have to decide what to do with each shape explicitly.
    """

    kind: ValueKind
    value: Union[str, int, float, bool, Tuple[str, ...]]

    def as_string(self) -> Optional[str]:
        """Text value; ISO dates count as text too."""
        if self.kind in (ValueKind.STRING, ValueKind.DATE):
            return self.value
        return None

    def as_date(self) -> Optional[str]:
        if self.kind is ValueKind.DATE:
            return self.value
        if self.kind is ValueKind.STRING and DATE_PATTERN.match(self.value):
            return self.value
        return None

    def as_number(self) -> Optional[Union[int, float]]:
        return self.value if self.kind is ValueKind.NUMBER else None

    def as_bool(self) -> Optional[bool]:
        return self.value if self.kind is ValueKind.BOOLEAN else None

    def as_list(self) -> Optional[Tuple[str, ...]]:
        return self.value if self.kind is ValueKind.ARRAY else None

    def to_python(self):
        """Plain Python value (lists for arrays), e.g. for JSON output."""
        if self.kind is ValueKind.ARRAY:
            return list(self.value)
        return self.value


Frontmatter = Dict[str, FrontmatterValue]


@dataclass(frozen=True)
class ParsedSource:
    """Front matter plus the markup-free body of one content source."""

    frontmatter: Frontmatter = field(default_factory=dict)
    body: str = ""
    has_header: bool = False


def _parse_array(value_raw: str) -> Tuple[str, ...]:
    try:
        parsed = json.loads(value_raw.replace("'", '"'))
    except ValueError as e:
        logger.debug("Malformed array literal %r: %s", value_raw, e)
        return ()

    if not isinstance(parsed, list):
        return ()

    items = []
    for item in parsed:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            items.append(str(item))
    return tuple(items)


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_value(value_raw: str) -> FrontmatterValue:
    """
    Parse the right-hand side of a `key: value` line.

    Arrays use a JSON-like syntax (single quotes allowed); a malformed
    array yields an empty array rather than an error.
    """
    value_raw = value_raw.strip()

    if value_raw.startswith("[") and value_raw.endswith("]"):
        return FrontmatterValue(ValueKind.ARRAY, _parse_array(value_raw))

    if value_raw in ("true", "false"):
        return FrontmatterValue(ValueKind.BOOLEAN, value_raw == "true")

    if DATE_PATTERN.match(value_raw):
        return FrontmatterValue(ValueKind.DATE, value_raw)

    if _NUMBER_PATTERN.match(value_raw):
        if _INTEGER_PATTERN.match(value_raw):
            return FrontmatterValue(ValueKind.NUMBER, int(value_raw))
        return FrontmatterValue(ValueKind.NUMBER, float(value_raw))

    return FrontmatterValue(ValueKind.STRING, _strip_quotes(value_raw))


def parse_frontmatter_block(source: str) -> Frontmatter:
    """
    Parse a simple YAML-like block of `key: value` lines.

    Blank lines and lines starting with '#' are skipped, as are lines
    without a colon. Later keys overwrite earlier ones.
    """
    data: Frontmatter = {}
    if not source:
        return data

    for raw_line in source.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue

        key, value_raw = line.split(":", 1)
        key = key.strip()
        if not key:
            continue

        data[key] = parse_value(value_raw)
        logger.trace("front matter %s -> %s", key, data[key].kind.value)

    return data


def strip_formatting(value: str) -> str:
    """
    Reduce markdown/JSX source to plain text for indexing.

    Removes code spans, HTML/JSX tags and markdown markers, turns
    [text](url) links into text and collapses whitespace. Not a real
    parser; good enough for full-text search.
    """
    if not value:
        return ""
    value = _CODE_SPANS.sub(" ", value)
    value = _TAGS.sub(" ", value)
    value = _MARKDOWN_CHARS.sub(" ", value)
    value = _LINKS.sub(r"\1", value)
    value = _WHITESPACE.sub(" ", value)
    return value.strip()


def parse_markdown(raw: str) -> ParsedSource:
    """Split a markdown/MDX file into front matter and stripped body."""
    if not raw or not isinstance(raw, str):
        return ParsedSource()

    match = _MARKDOWN_HEADER.match(raw)
    if not match:
        return ParsedSource(body=strip_formatting(raw))

    header, body = match.groups()
    return ParsedSource(
        frontmatter=parse_frontmatter_block(header),
        body=strip_formatting(body),
        has_header=True,
    )


def parse_jsx(raw: str) -> ParsedSource:
    """Read front matter from the leading block comment of a JSX file."""
    if not raw or not isinstance(raw, str):
        return ParsedSource()

    match = _JSX_HEADER.match(raw)
    if not match:
        return ParsedSource(body=strip_formatting(raw))

    return ParsedSource(
        frontmatter=parse_frontmatter_block(match.group(1)),
        body=strip_formatting(raw[match.end():]),
        has_header=True,
    )


_PARSERS = {
    SourceFormat.MARKDOWN: parse_markdown,
    SourceFormat.JSX: parse_jsx,
}


def parse_source(raw: str, fmt: SourceFormat) -> ParsedSource:
    """Dispatch to the parser for the given source format."""
    return _PARSERS[fmt](raw)
