"""Block variant catalog and document data models"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


DOCUMENT_VERSION = "1.0"
DEFAULT_GAP = 16


class BlockType(str, Enum):
    """Closed set of block variants a page can hold"""
    text = "text"
    image = "image"
    button = "button"
    columns = "columns"
    code = "code"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TextData(_Frozen):
    content: dict[str, Any]         # opaque rich-text document (TipTap JSON)


class ImageData(_Frozen):
    src: str = ""                   # empty = no image chosen yet
    alt: str = ""
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ButtonData(_Frozen):
    text: str
    url: str
    variant: Literal["primary", "secondary"] = "primary"


class CodeData(_Frozen):
    code: str = ""
    language: Optional[str] = None
    inline: bool = False


class TextBlock(_Frozen):
    id: str
    type: Literal["text"] = "text"
    data: TextData


class ImageBlock(_Frozen):
    id: str
    type: Literal["image"] = "image"
    data: ImageData


class ButtonBlock(_Frozen):
    id: str
    type: Literal["button"] = "button"
    data: ButtonData


class CodeBlock(_Frozen):
    id: str
    type: Literal["code"] = "code"
    data: CodeData


NestedBlock = Annotated[
    Union[TextBlock, ImageBlock, ButtonBlock, CodeBlock],
    Field(discriminator="type"),
]


class ColumnsData(_Frozen):
    column_count: Literal[2, 3, 4] = Field(default=2, alias="columnCount")
    gap: Optional[int] = DEFAULT_GAP
    columns: list[list[NestedBlock]]

    @model_validator(mode="after")
    def _check_column_count(self) -> "ColumnsData":
        if len(self.columns) != self.column_count:
            raise ValueError(
                f"columns has {len(self.columns)} entries but columnCount is {self.column_count}"
            )
        return self


class ColumnsBlock(_Frozen):
    id: str
    type: Literal["columns"] = "columns"
    data: ColumnsData


Block = Annotated[
    Union[TextBlock, ImageBlock, ButtonBlock, CodeBlock, ColumnsBlock],
    Field(discriminator="type"),
]


class Document(_Frozen):
    """A page: an ordered sequence of blocks, top to bottom."""
    version: Literal["1.0"] = DOCUMENT_VERSION
    blocks: list[Block] = Field(default_factory=list)
