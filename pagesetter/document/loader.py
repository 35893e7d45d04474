"""
Build DocumentElement values from the upstream parser's JSON contract.

Each record is a mapping with the keys ``element_type``, ``content``,
``level``, ``list_type``, ``is_checked``, ``url``, ``formatting`` and
``table_data``. Only the keys relevant to the element kind are read.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pagesetter.exceptions import ElementParseError

from .models import (
    ELEMENT_CLASSES,
    DocumentElement,
    ElementType,
    ListKind,
    ListType,
    OtherElement,
    TableData,
    TextFormat,
)


logger = logging.getLogger(__name__)


def _normalize_key(value: str) -> str:
    return value.replace("_", "").replace("-", "").replace(" ", "").lower()


_TYPE_LOOKUP = {_normalize_key(t.value): t for t in ElementType}
_TYPE_LOOKUP.update({
    "blockquote": ElementType.BLOCK_QUOTE,
    "quote": ElementType.BLOCK_QUOTE,
    "hr": ElementType.HORIZONTAL_RULE,
    "rule": ElementType.HORIZONTAL_RULE,
    "tasklistitem": ElementType.TASK_LIST_ITEM,
})

_FORMAT_LOOKUP = {
    "bold": TextFormat.BOLD,
    "strong": TextFormat.BOLD,
    "italic": TextFormat.ITALIC,
    "emphasis": TextFormat.ITALIC,
    "strikethrough": TextFormat.STRIKETHROUGH,
    "strike": TextFormat.STRIKETHROUGH,
    "code": TextFormat.CODE,
}


def parse_list_type(value: Any) -> ListType:
    """
    Accepts "bullet" / "task" / "ordered", {"ordered": 3} and
    {"kind": "ordered", "start": 3}.
    """
    if value is None:
        return ListType.bullet()

    if isinstance(value, str):
        kind = _normalize_key(value)
        if kind == "ordered":
            return ListType.ordered(1)
        if kind == "task":
            return ListType.task()
        if kind == "bullet":
            return ListType.bullet()
        raise ElementParseError(f"Unknown list type: {value!r}")

    if isinstance(value, Mapping):
        if "kind" in value:
            list_type = parse_list_type(value["kind"])
            if list_type.is_ordered:
                return ListType.ordered(int(value.get("start", 1)))
            return list_type
        if len(value) == 1:
            key, start = next(iter(value.items()))
            if _normalize_key(key) == "ordered":
                return ListType.ordered(int(start))

    raise ElementParseError(f"Unknown list type: {value!r}")


def parse_formatting(values: Optional[List[Any]]) -> List[TextFormat]:
    formats = []
    for value in values or []:
        fmt = _FORMAT_LOOKUP.get(_normalize_key(str(value)))
        if fmt is None:
            logger.debug(f"Ignoring unknown inline format: {value!r}")
            continue
        if fmt not in formats:
            formats.append(fmt)
    return formats


def parse_table_data(value: Any) -> TableData:
    if value is None:
        return TableData()
    if not isinstance(value, Mapping):
        raise ElementParseError("table_data must be an object with headers and rows")

    headers = [str(h) for h in value.get("headers") or []]
    rows = []
    for row in value.get("rows") or []:
        if not isinstance(row, (list, tuple)):
            raise ElementParseError("table rows must be lists of cells")
        rows.append([str(cell) for cell in row])
    return TableData(headers=headers, rows=rows)


def element_from_dict(record: Mapping[str, Any], index: Optional[int] = None) -> DocumentElement:
    """
    Convert one parser record into its element variant.

    Args:
        record: Mapping following the parser contract
        index: Position in the source sequence, used in error messages

    Returns:
        The matching DocumentElement subclass instance

    Raises:
        ElementParseError: If the record is not a mapping or a field is invalid
    """
    if not isinstance(record, Mapping):
        raise ElementParseError("record must be an object", index)

    raw_type = record.get("element_type")
    if not raw_type:
        raise ElementParseError("missing element_type", index)

    element_type = _TYPE_LOOKUP.get(_normalize_key(str(raw_type)))
    content = str(record.get("content") or "")

    try:
        formatting = parse_formatting(record.get("formatting"))
        common: Dict[str, Any] = {"content": content, "formatting": formatting}

        if element_type is None:
            logger.debug(f"Unknown element type {raw_type!r}, keeping as OtherElement")
            return OtherElement(raw_type=str(raw_type), **common)

        cls = ELEMENT_CLASSES[element_type]

        if element_type == ElementType.HEADING:
            return cls(level=int(record.get("level") or 1), **common)
        if element_type == ElementType.LIST_ITEM:
            list_type = parse_list_type(record.get("list_type"))
            return cls(list_type=list_type, depth=int(record.get("depth") or 0), **common)
        if element_type == ElementType.TASK_LIST_ITEM:
            return cls(
                is_checked=bool(record.get("is_checked")),
                depth=int(record.get("depth") or 0),
                **common,
            )
        if element_type == ElementType.TABLE:
            return cls(table_data=parse_table_data(record.get("table_data")), **common)
        if element_type == ElementType.CODE_BLOCK:
            return cls(language=record.get("language"), **common)
        if element_type == ElementType.LINK:
            return cls(url=record.get("url"), **common)
        if element_type == ElementType.IMAGE:
            return cls(url=str(record.get("url") or ""), **common)
        if element_type == ElementType.FOOTNOTE:
            return cls(label=record.get("url") or record.get("label"), **common)
        if element_type == ElementType.OTHER:
            return cls(raw_type=str(raw_type), **common)
        return cls(**common)

    except ElementParseError as e:
        if e.index is None and index is not None:
            raise ElementParseError(str(e), index) from e
        raise
    except (TypeError, ValueError) as e:
        raise ElementParseError(f"invalid field value: {e}", index) from e


def elements_from_json(source: Union[str, Path]) -> List[DocumentElement]:
    """
    Load a JSON array of element records from a file path or JSON text.
    """
    if isinstance(source, Path) or (isinstance(source, str) and not source.lstrip().startswith("[")):
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise ElementParseError(f"cannot read {source}: {e}") from e
    else:
        text = source

    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise ElementParseError(f"invalid JSON: {e}") from e

    if not isinstance(records, list):
        raise ElementParseError("expected a JSON array of elements")

    elements = [element_from_dict(record, i) for i, record in enumerate(records)]
    logger.info(f"Loaded {len(elements)} elements")
    return elements
