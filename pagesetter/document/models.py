"""
Data models for the layout engine.

Document elements are a closed tagged union: one frozen dataclass per
element kind, each carrying only the fields that kind needs. The upstream
parser hands over an ordered sequence of these; the renderer only reads them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Sequence, Tuple


class ElementType(Enum):
    """Element kinds"""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    TASK_LIST_ITEM = "task_list_item"
    BLOCK_QUOTE = "block_quote"
    TABLE = "table"
    CODE = "code"
    CODE_BLOCK = "code_block"
    LINK = "link"
    IMAGE = "image"
    HORIZONTAL_RULE = "horizontal_rule"
    FOOTNOTE = "footnote"
    FOOTNOTE_REFERENCE = "footnote_reference"
    OTHER = "other"


class TextFormat(Enum):
    """Inline style markers"""
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"


class ListKind(Enum):
    """List flavours"""
    BULLET = "bullet"
    ORDERED = "ordered"
    TASK = "task"


@dataclass(frozen=True)
class ListType:
    """List flavour plus the first number for ordered lists"""
    kind: ListKind = ListKind.BULLET
    start: int = 1  # Only meaningful for ORDERED

    @classmethod
    def bullet(cls) -> "ListType":
        return cls(ListKind.BULLET)

    @classmethod
    def ordered(cls, start: int = 1) -> "ListType":
        return cls(ListKind.ORDERED, start)

    @classmethod
    def task(cls) -> "ListType":
        return cls(ListKind.TASK)

    @property
    def is_ordered(self) -> bool:
        return self.kind == ListKind.ORDERED


@dataclass(frozen=True)
class TableData:
    """Table structure. Rows may be ragged."""
    headers: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()

    def __post_init__(self):
        # Accept lists from callers, store tuples so the element stays hashable
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(tuple(row) for row in self.rows))

    @property
    def column_count(self) -> int:
        """Max of header length and every row length"""
        return max([len(self.headers)] + [len(row) for row in self.rows])

    @property
    def has_header(self) -> bool:
        return len(self.headers) > 0

    def padded_row(self, index: int) -> Tuple[str, ...]:
        """Row at index, truncated or padded with blanks to column_count"""
        row = self.rows[index][:self.column_count]
        return row + ("",) * (self.column_count - len(row))


@dataclass(frozen=True)
class DocumentElement:
    """Common base: text content plus the element-wide inline formats"""
    element_type: ClassVar[ElementType] = ElementType.OTHER

    content: str = ""
    formatting: Tuple[TextFormat, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "formatting", tuple(self.formatting))

    @property
    def is_list_item(self) -> bool:
        return self.element_type in (ElementType.LIST_ITEM, ElementType.TASK_LIST_ITEM)


@dataclass(frozen=True)
class Heading(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.HEADING
    level: int = 1  # 1-6, deeper levels render as 6


@dataclass(frozen=True)
class Paragraph(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.PARAGRAPH


@dataclass(frozen=True)
class ListItem(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.LIST_ITEM
    list_type: ListType = field(default_factory=ListType.bullet)
    depth: int = 0  # Nesting level, 0 = top-level list


@dataclass(frozen=True)
class TaskListItem(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.TASK_LIST_ITEM
    is_checked: bool = False
    depth: int = 0

    @property
    def list_type(self) -> ListType:
        return ListType.task()


@dataclass(frozen=True)
class BlockQuote(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.BLOCK_QUOTE


@dataclass(frozen=True)
class Table(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.TABLE
    table_data: TableData = field(default_factory=TableData)


@dataclass(frozen=True)
class InlineCode(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.CODE


@dataclass(frozen=True)
class CodeBlock(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.CODE_BLOCK
    language: Optional[str] = None


@dataclass(frozen=True)
class Link(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.LINK
    url: Optional[str] = None


@dataclass(frozen=True)
class Image(DocumentElement):
    """Image reference; content is the caption"""
    element_type: ClassVar[ElementType] = ElementType.IMAGE
    url: str = ""


@dataclass(frozen=True)
class HorizontalRule(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.HORIZONTAL_RULE


@dataclass(frozen=True)
class Footnote(DocumentElement):
    """Footnote definition, flushed at the end of the document"""
    element_type: ClassVar[ElementType] = ElementType.FOOTNOTE
    label: Optional[str] = None


@dataclass(frozen=True)
class FootnoteReference(DocumentElement):
    element_type: ClassVar[ElementType] = ElementType.FOOTNOTE_REFERENCE


@dataclass(frozen=True)
class OtherElement(DocumentElement):
    """Anything the parser emitted that has no renderer"""
    element_type: ClassVar[ElementType] = ElementType.OTHER
    raw_type: Optional[str] = None


ELEMENT_CLASSES = {
    ElementType.HEADING: Heading,
    ElementType.PARAGRAPH: Paragraph,
    ElementType.LIST_ITEM: ListItem,
    ElementType.TASK_LIST_ITEM: TaskListItem,
    ElementType.BLOCK_QUOTE: BlockQuote,
    ElementType.TABLE: Table,
    ElementType.CODE: InlineCode,
    ElementType.CODE_BLOCK: CodeBlock,
    ElementType.LINK: Link,
    ElementType.IMAGE: Image,
    ElementType.HORIZONTAL_RULE: HorizontalRule,
    ElementType.FOOTNOTE: Footnote,
    ElementType.FOOTNOTE_REFERENCE: FootnoteReference,
    ElementType.OTHER: OtherElement,
}


def count_by_type(elements: Sequence[DocumentElement]) -> List[Tuple[ElementType, int]]:
    """Element histogram in ElementType declaration order (zero counts omitted)"""
    counts = {}
    for element in elements:
        counts[element.element_type] = counts.get(element.element_type, 0) + 1
    return [(t, counts[t]) for t in ElementType if t in counts]
