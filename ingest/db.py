"""SQLite database schema and the catalog store used by the importer."""

import sqlite3
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Generator, Iterable, List, Optional, Sequence

from ingest.config import DB_PATH
from ingest.errors import StoreError
from ingest.logging_config import get_logger
from ingest.models import Category, Condition, Product, ProductDraft, RichText

__all__ = [
    "DEFAULT_DB_PATH",
    "get_connection",
    "init_db",
    "CatalogStore",
]

DEFAULT_DB_PATH = DB_PATH

logger = get_logger(__name__)


@contextmanager
def get_connection(db_path: str = DEFAULT_DB_PATH) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Case-insensitive uniqueness; concurrent imports racing on the same
        # new name end up sharing one row instead of creating duplicates.
        cursor.execute("""
            CREATE UNIQUE INDEX IF NOT EXISTS idx_categories_name_nocase
            ON categories(name COLLATE NOCASE)
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                specs TEXT NOT NULL DEFAULT '',
                price TEXT,
                condition TEXT NOT NULL DEFAULT 'new'
                    CHECK (condition IN ('new', 'refurbished')),
                category_id INTEGER,
                image_url TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE SET NULL
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_category_id ON products(category_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_created_at ON products(created_at)")

        conn.commit()


def _parse_price(value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        logger.warning("Ignoring unreadable stored price %r", value)
        return None


def _row_to_product(row: sqlite3.Row) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        specs=RichText(row["specs"] or ""),
        price=_parse_price(row["price"]),
        condition=Condition.from_text(row["condition"]),
        category_id=row["category_id"],
        image_url=row["image_url"],
        category_name=row["category_name"],
        created_at=row["created_at"],
    )


class CatalogStore:
    """Catalog persistence over SQLite.

    Each public call runs in its own transaction and either commits fully or
    raises StoreError.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, initialize: bool = True):
        self.db_path = db_path
        if initialize:
            try:
                init_db(db_path)
            except sqlite3.Error as exc:
                raise StoreError(f"Could not initialize database at {db_path}: {exc}") from exc

    def list_categories(self) -> List[Category]:
        """All categories ordered by name (case-insensitive), then id."""
        try:
            with get_connection(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT id, name FROM categories ORDER BY name COLLATE NOCASE, id"
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not list categories: {exc}") from exc
        return [Category(id=row["id"], name=row["name"]) for row in rows]

    def insert_categories(self, names: Iterable[str]) -> List[Category]:
        """Insert categories in one transaction.

        Names that already exist (ignoring case) are left alone, so the
        result only contains rows this call actually created.
        """
        created: List[Category] = []
        try:
            with get_connection(self.db_path) as conn:
                cursor = conn.cursor()
                for name in names:
                    cursor.execute(
                        "INSERT OR IGNORE INTO categories (name) VALUES (?)",
                        (name,),
                    )
                    if cursor.rowcount == 1:
                        created.append(Category(id=cursor.lastrowid, name=name))
                conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not insert categories: {exc}") from exc
        return created

    def insert_products(self, drafts: Sequence[ProductDraft]) -> int:
        """Bulk insert product drafts in one transaction, returning the count."""
        if not drafts:
            return 0
        params = [
            (
                d.name,
                d.specs.markup,
                str(d.price) if d.price is not None else None,
                d.condition.value,
                d.category_id,
                d.image_url,
            )
            for d in drafts
        ]
        try:
            with get_connection(self.db_path) as conn:
                conn.executemany(
                    """
                    INSERT INTO products (name, specs, price, condition, category_id, image_url)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    params,
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not insert products: {exc}") from exc
        return len(params)

    def list_products(self, condition: Optional[Condition] = None) -> List[Product]:
        """Products with their category name, most recently created first."""
        query = """
            SELECT p.*, c.name AS category_name
            FROM products p
            LEFT JOIN categories c ON c.id = p.category_id
        """
        params: List[str] = []
        if condition is not None:
            query += " WHERE p.condition = ?"
            params.append(Condition(condition).value)
        query += " ORDER BY p.created_at DESC, p.id DESC"

        try:
            with get_connection(self.db_path) as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not list products: {exc}") from exc
        return [_row_to_product(row) for row in rows]

    def get_product_count(self) -> int:
        return self._count("products")

    def get_category_count(self) -> int:
        return self._count("categories")

    def _count(self, table: str) -> int:
        if table not in ("products", "categories"):
            raise ValueError(f"Invalid table name: {table}")
        try:
            with get_connection(self.db_path) as conn:
                return conn.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()["count"]
        except sqlite3.Error as exc:
            raise StoreError(f"Could not count {table}: {exc}") from exc
