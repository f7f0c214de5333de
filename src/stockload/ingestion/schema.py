"""Products table schemas for the two import variants."""

from dataclasses import dataclass

from stockload.database import DatabaseService

SIMPLE = "simple"
SKU = "sku"
VARIANTS = (SIMPLE, SKU)

_ID_COLUMN = {
    "sqlite": "id INTEGER PRIMARY KEY AUTOINCREMENT",
    "postgresql": "id SERIAL PRIMARY KEY",
}


@dataclass(frozen=True)
class TableSpec:
    name: str
    ddl: str
    columns: list[str]
    conflict_columns: list[str] | None = None

    def ddl_for(self, dialect: str) -> str:
        return self.ddl.format(id_column=_ID_COLUMN[dialect])


SIMPLE_PRODUCTS = TableSpec(
    name="products",
    ddl="""
CREATE TABLE IF NOT EXISTS products (
    {id_column},
    name          VARCHAR(255)  NOT NULL,
    price         NUMERIC(12,2),
    quantity      INTEGER
);
""",
    columns=["name", "price", "quantity"],
)

SKU_PRODUCTS = TableSpec(
    name="products",
    ddl="""
CREATE TABLE IF NOT EXISTS products (
    sku           VARCHAR(64)   PRIMARY KEY,
    name          VARCHAR(255)  NOT NULL,
    quantity      INTEGER,
    price         NUMERIC(12,2),
    reorder_level INTEGER,
    status        VARCHAR(32)   NOT NULL DEFAULT 'active'
);
CREATE INDEX IF NOT EXISTS idx_products_status ON products(status);
""",
    columns=["sku", "name", "quantity", "price", "reorder_level", "status"],
    conflict_columns=["sku"],
)

_TABLES = {SIMPLE: SIMPLE_PRODUCTS, SKU: SKU_PRODUCTS}


def get_table(variant: str) -> TableSpec:
    try:
        return _TABLES[variant]
    except KeyError:
        raise ValueError(f"Unknown import variant: {variant!r}") from None


def ensure_schema(service: DatabaseService, variant: str) -> None:
    """Create the products table for the variant if it doesn't exist."""
    service.execute_ddl(get_table(variant).ddl_for(service.dialect))
