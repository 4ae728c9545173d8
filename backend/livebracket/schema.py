from sqlalchemy import Column, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import JSON, BigInteger, DateTime

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

documents = Table(
    "documents",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("collection", String, nullable=False, index=True),
    Column("key", String, nullable=False),
    Column("value", JSON, nullable=False),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("collection", "key"),
)
