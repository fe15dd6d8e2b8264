"""Thin SQL adapter wrapping a SQLAlchemy engine and the images table."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    Engine,
    Integer,
    LargeBinary,
    MetaData,
    Row,
    String,
    Table,
    create_engine,
    delete,
    func,
    insert,
    select,
)
from sqlalchemy.types import TypeDecorator

from imaging.models.identifiers import ImageID
from imaging.models.values import RGB
from imaging.utils.constants import METADATA_TABLE_NAME


class ImageIDType(TypeDecorator[ImageID]):
    """Stores an ImageID as its 12 raw bytes."""

    impl = LargeBinary(12)
    cache_ok = True

    def process_bind_param(self, value: ImageID | None, dialect: Any) -> bytes | None:
        return None if value is None else value.raw

    def process_result_value(self, value: bytes | None, dialect: Any) -> ImageID | None:
        return None if value is None else ImageID(value)


class RGBType(TypeDecorator[RGB]):
    """Stores an RGB color in a 12-byte binary column."""

    impl = LargeBinary(12)
    cache_ok = True

    def process_bind_param(self, value: RGB | None, dialect: Any) -> bytes | None:
        return None if value is None else value.to_bytes()

    def process_result_value(self, value: bytes | None, dialect: Any) -> RGB | None:
        return None if value is None else RGB.from_bytes(value)


metadata_obj = MetaData()

images_table = Table(
    METADATA_TABLE_NAME,
    metadata_obj,
    Column("id", ImageIDType(), primary_key=True),
    Column("store_name", String(32), nullable=False),
    Column("format", String(8), nullable=False),
    Column("width", Integer, nullable=False),
    Column("height", Integer, nullable=False),
    Column("size", Integer, nullable=False),
    Column("upload_size", Integer, nullable=False),
    Column("average_color", RGBType(), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)


class SQLAdapter:
    """Low-level SQL operations (mechanical, no error handling).

    This adapter:
    - Wraps a SQLAlchemy engine
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, database_url: str, *, engine: Engine | None = None) -> None:
        """Create the engine and make sure the images table exists."""
        self.engine: Engine = engine or create_engine(database_url)
        metadata_obj.create_all(self.engine, tables=[images_table])

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Yield a connection inside a transaction (commit or rollback on exit)."""
        with self.engine.begin() as conn:
            yield conn

    def insert_row(self, conn: Connection, values: dict[str, Any]) -> None:
        conn.execute(insert(images_table).values(**values))

    def select_rows(self, ids: Sequence[ImageID]) -> list[Row[Any]]:
        if not ids:
            return []
        with self.engine.connect() as conn:
            result = conn.execute(select(images_table).where(images_table.c.id.in_(ids)))
            return list(result)

    def delete_rows(self, conn: Connection, ids: Sequence[ImageID]) -> int:
        if not ids:
            return 0
        result = conn.execute(delete(images_table).where(images_table.c.id.in_(ids)))
        return result.rowcount
