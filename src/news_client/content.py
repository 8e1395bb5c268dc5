"""Rich content blocks and their plain-text rendering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup

# Display configuration
EXCERPT_MAX_LENGTH = 200

BLOCK_TYPES = frozenset(
    {"paragraph", "heading", "quote", "list", "image", "image-group"}
)
# Older articles used these names before the block editor settled
LEGACY_BLOCK_TYPES = {"subheading": "heading", "text": "paragraph"}
_BREAKING_TAGS = [
    "p", "div", "br", "li", "blockquote", "h1", "h2", "h3", "h4", "h5", "h6",
]


@dataclass(frozen=True)
class BlockImage:
    """One image inside an image or image-group block."""

    url: str
    caption: str = ""


@dataclass(frozen=True)
class ContentBlock:
    """A single block of article body content.

    Attributes:
        type: Block kind (paragraph, heading, quote, list, image, image-group).
        content: Block body. May contain inline HTML for text blocks.
        level: Heading level (2-6) for heading blocks.
        list_type: "bullet" or "numbered" for list blocks.
        source: Attribution shown under a quote.
        caption: Caption for image blocks.
        images: Images attached to image and image-group blocks.
    """

    type: str = "paragraph"
    content: str = ""
    level: int = 2
    list_type: str = "bullet"
    source: str | None = None
    caption: str | None = None
    images: tuple[BlockImage, ...] = ()

    @property
    def is_image(self) -> bool:
        return self.type in {"image", "image-group"}


def parse_block(raw: Mapping[str, Any]) -> ContentBlock:
    """Build a ContentBlock from its API representation."""
    block_type = str(raw.get("type") or "paragraph")
    block_type = LEGACY_BLOCK_TYPES.get(block_type, block_type)
    if block_type not in BLOCK_TYPES:
        block_type = "paragraph"

    metadata = raw.get("metadata")
    if not isinstance(metadata, Mapping):
        metadata = {}
    images = tuple(
        BlockImage(url=str(image["url"]), caption=str(image.get("caption") or ""))
        for image in metadata.get("images") or []
        if isinstance(image, Mapping) and image.get("url")
    )

    return ContentBlock(
        type=block_type,
        content=str(raw.get("content") or ""),
        level=_heading_level(metadata.get("level")),
        list_type="numbered" if metadata.get("listType") == "numbered" else "bullet",
        source=metadata.get("source") or None,
        caption=metadata.get("caption") or None,
        images=images,
    )


def parse_blocks(raw_blocks: Iterable[Any] | None) -> tuple[ContentBlock, ...]:
    """Parse a sequence of raw blocks, skipping anything that is not a mapping."""
    if not raw_blocks:
        return ()
    return tuple(parse_block(raw) for raw in raw_blocks if isinstance(raw, Mapping))


def html_to_text(html: str) -> str:
    """Strip markup from an HTML fragment, collapsing whitespace.

    Block-level elements and line breaks separate words; inline elements
    such as <b> or <a> do not.
    """
    if not html or "<" not in html:
        return " ".join((html or "").split())
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_BREAKING_TAGS):
        tag.insert_after("\n")
    return " ".join(soup.get_text().split())


def list_items(block: ContentBlock) -> list[str]:
    """Return the text of each item in a list block.

    Items come from ``<li>`` elements when present, otherwise from lines.
    """
    if "<li" in block.content:
        soup = BeautifulSoup(block.content, "lxml")
        items = [html_to_text(str(li)) for li in soup.find_all("li")]
    else:
        items = [" ".join(line.split()) for line in block.content.splitlines()]
    return [item for item in items if item]


def block_text(block: ContentBlock) -> str:
    """Return the readable text of a block, without markup."""
    if block.is_image:
        captions = [image.caption for image in block.images if image.caption]
        if block.caption:
            captions.insert(0, block.caption)
        return " ".join(captions)
    if block.type == "list":
        return " ".join(list_items(block))
    return html_to_text(block.content)


def render_block(block: ContentBlock) -> str:
    """Render one block as plain text."""
    if block.type == "heading":
        return html_to_text(block.content).upper()

    if block.type == "quote":
        text = f"> {html_to_text(block.content)}"
        if block.source:
            text += f"\n>   - {block.source}"
        return text

    if block.type == "list":
        items = list_items(block)
        if block.list_type == "numbered":
            return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))
        return "\n".join(f"- {item}" for item in items)

    if block.is_image:
        caption = block_text(block)
        count = len(block.images) or 1
        label = "image" if count == 1 else f"{count} images"
        return f"[{label}: {caption}]" if caption else f"[{label}]"

    return html_to_text(block.content)


def render_plain_text(blocks: Iterable[ContentBlock]) -> str:
    """Render blocks as plain text separated by blank lines.

    Empty blocks are omitted.
    """
    rendered = (render_block(block) for block in blocks)
    return "\n\n".join(text for text in rendered if text.strip())


def make_excerpt(
    blocks: Iterable[ContentBlock], max_length: int = EXCERPT_MAX_LENGTH
) -> str:
    """Build a short excerpt from the first text-bearing block."""
    for block in blocks:
        if block.is_image:
            continue
        text = block_text(block)
        if not text:
            continue
        if len(text) > max_length:
            return text[:max_length].rstrip() + "..."
        return text
    return ""


def _heading_level(raw: Any) -> int:
    """Coerce a heading level such as 2, "2" or "h2" into 2..6."""
    value = str(raw or "").lower().removeprefix("h")
    try:
        level = int(value)
    except ValueError:
        return 2
    return min(max(level, 2), 6)
