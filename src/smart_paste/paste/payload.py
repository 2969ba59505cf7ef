"""Clipboard payload and content-category models.

A ClipboardPayload is supplied once per paste event and never mutated.
classify.py maps it to exactly one ContentCategory variant, which carries
the data its handler needs.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ClipboardItem(BaseModel):
    """One clipboard item; only image items are acted on."""

    model_config = ConfigDict(frozen=True)

    mime_category: Literal["image", "other"]
    mime_type: str = ""
    blob: bytes = b""
    file_name: str | None = None


class ClipboardPayload(BaseModel):
    """Everything the host read from the clipboard for one paste."""

    model_config = ConfigDict(frozen=True)

    plain_text: str = ""
    html: str = ""
    items: tuple[ClipboardItem, ...] = ()

    def image_item(self) -> ClipboardItem | None:
        """Return the first image item, if any."""
        return next((item for item in self.items if item.mime_category == "image"), None)


# ─── Content Categories ───────────────────────────────────────────────────────


class ImageContent(BaseModel):
    kind: Literal["image"] = "image"
    item: ClipboardItem


class TabularTextContent(BaseModel):
    kind: Literal["tabular_text"] = "tabular_text"
    text: str
    delimiter: Literal["\t", ","]


class HtmlTableContent(BaseModel):
    kind: Literal["html_table"] = "html_table"
    html: str


class ProseTextContent(BaseModel):
    kind: Literal["prose_text"] = "prose_text"
    text: str


class EmptyContent(BaseModel):
    kind: Literal["empty"] = "empty"


ContentCategory = Annotated[
    ImageContent | TabularTextContent | HtmlTableContent | ProseTextContent | EmptyContent,
    Field(discriminator="kind"),
]
