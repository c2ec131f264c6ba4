"""
Persistence gateway interface.

A gateway issues plain table operations (select, insert, update, delete,
count) against the catalog tables and returns rows as dicts. Filters are
equality only; related rows are attached with Embed, following the foreign
key held by the parent row.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

MACHINE_CATEGORIES = "machine_categories"
PRODUCT_TYPES = "product_types"
GLOBAL_PRODUCTS = "global_products"
COMPANY_PRODUCTS = "company_products"
MACHINE_TEMPLATES = "machine_templates"

# table -> {related table: foreign key column on table}
FOREIGN_KEYS: Dict[str, Dict[str, str]] = {
    PRODUCT_TYPES: {MACHINE_CATEGORIES: "machine_category_id"},
    GLOBAL_PRODUCTS: {
        MACHINE_CATEGORIES: "machine_category_id",
        PRODUCT_TYPES: "product_type_id",
    },
    COMPANY_PRODUCTS: {GLOBAL_PRODUCTS: "product_id"},
    MACHINE_TEMPLATES: {MACHINE_CATEGORIES: "machine_category_id"},
}

Row = Dict[str, Any]
Filters = Mapping[str, Any]


@dataclass(frozen=True)
class Embed:
    """Related table to attach to each row; empty columns means all columns."""

    table: str
    columns: Tuple[str, ...] = ()
    embed: Tuple["Embed", ...] = ()


def foreign_key(table: str, related: str) -> str:
    try:
        return FOREIGN_KEYS[table][related]
    except KeyError:
        raise ValueError(f"No relationship between '{table}' and '{related}'") from None


class Gateway(ABC):
    """Typed table access against the storage backend. Failures raise BackendError."""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order: Optional[str] = None,
        descending: bool = False,
        embed: Tuple[Embed, ...] = (),
    ) -> List[Row]:
        """Rows matching all filters, optionally ordered and with related rows attached."""

    @abstractmethod
    async def get(self, table: str, row_id: str, embed: Tuple[Embed, ...] = ()) -> Optional[Row]:
        """Row by primary key, or None."""

    @abstractmethod
    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        """Number of rows matching all filters."""

    @abstractmethod
    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        """Insert one row and return it as stored (generated id, defaults)."""

    @abstractmethod
    async def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Optional[Row]:
        """Update one row by primary key; None when nothing matched."""

    @abstractmethod
    async def delete(self, table: str, row_id: str) -> int:
        """Delete one row by primary key and return how many rows were removed."""

    @abstractmethod
    async def ping(self) -> None:
        """Raise BackendError if the backend cannot be reached."""

    async def close(self) -> None:
        pass
