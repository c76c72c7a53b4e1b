"""SQLAlchemy entity metadata -> object schema.

Accepts a mapped class, a mapper, a mapped instance or a ``Table``.
Columns are converted in declaration order; nullable columns become
optional properties and column comments become descriptions.
"""

import datetime
import decimal
import uuid
from typing import Any

from sqlalchemy import ARRAY, Column, inspect
from sqlalchemy import Enum as SAEnum
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Mapper

from schemadoc.converters.base import ConversionError, build_object
from schemadoc.schema.nodes import (
    ObjectNode,
    SchemaNode,
    any_,
    array,
    boolean,
    date,
    enum,
    number,
    string,
)


def _python_type(column_type: Any) -> type | None:
    try:
        return column_type.python_type
    except NotImplementedError:
        return None


def _node_for_python_type(py_type: type | None) -> SchemaNode:
    if py_type is None:
        return any_()
    if issubclass(py_type, bool):
        return boolean()
    if issubclass(py_type, (int, float, decimal.Decimal)):
        return number()
    if issubclass(py_type, str):
        return string()
    if issubclass(py_type, datetime.date):
        return date()
    if issubclass(py_type, uuid.UUID):
        return string().uuid()
    return any_()


def _column_node(column: Column) -> SchemaNode:
    column_type = column.type
    if isinstance(column_type, ARRAY):
        node = array(_node_for_python_type(_python_type(column_type.item_type)))
    elif isinstance(column_type, SAEnum) and column_type.enums:
        node = enum(column_type.enums)
    else:
        node = _node_for_python_type(_python_type(column_type))

    if column.comment:
        node = node.describe(column.comment)
    return node


def _columns(entity: Any) -> list[tuple[str, Column]]:
    try:
        target = inspect(entity)
    except NoInspectionAvailable as exc:
        raise ConversionError(
            f"No ORM metadata found for entity {entity!r}. "
            "Pass a mapped class, a mapper or a Table."
        ) from exc

    mapper = getattr(target, "mapper", None)
    if isinstance(mapper, Mapper):
        return [(prop.key, prop.columns[0]) for prop in mapper.column_attrs]

    columns = getattr(target, "columns", None)
    if columns is None:
        raise ConversionError(f"Entity {entity!r} has no column metadata")
    return [(column.key, column) for column in columns]


def to_schema(entity: Any) -> ObjectNode:
    """Build an object schema from a SQLAlchemy entity or table."""
    if entity is None:
        raise ConversionError("Invalid ORM entity: expected a mapped class or a Table, got None")

    return build_object(
        _columns(entity),
        _column_node,
        lambda column: not column.nullable,
        "column",
    )
