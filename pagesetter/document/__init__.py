"""
Document element model consumed by the PDF engine.
"""

from .models import (
    ElementType,
    TextFormat,
    ListKind,
    ListType,
    TableData,
    DocumentElement,
    Heading,
    Paragraph,
    ListItem,
    TaskListItem,
    BlockQuote,
    Table,
    InlineCode,
    CodeBlock,
    Link,
    Image,
    HorizontalRule,
    Footnote,
    FootnoteReference,
    OtherElement,
    count_by_type,
)
from .loader import element_from_dict, elements_from_json, parse_list_type


__all__ = [
    'ElementType',
    'TextFormat',
    'ListKind',
    'ListType',
    'TableData',
    'DocumentElement',
    'Heading',
    'Paragraph',
    'ListItem',
    'TaskListItem',
    'BlockQuote',
    'Table',
    'InlineCode',
    'CodeBlock',
    'Link',
    'Image',
    'HorizontalRule',
    'Footnote',
    'FootnoteReference',
    'OtherElement',
    'count_by_type',
    'element_from_dict',
    'elements_from_json',
    'parse_list_type',
]
