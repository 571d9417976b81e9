from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            kind=row["kind"],
            emoji=row["emoji"] or "",
            color_hex=row["color_hex"],
        )

    def get_all(self) -> list[Category]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT * FROM categories ORDER BY name"
            ).fetchall()
            self._all_cache = [self._row_to_model(r) for r in rows]
        return self._all_cache

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_kind(self, kind: str) -> list[Category]:
        return [c for c in self.get_all() if c.kind == kind]

    def find_by_name(self, name: str, kind: str) -> Optional[Category]:
        """Case-insensitive name match within a kind."""
        folded = name.casefold()
        return next(
            (c for c in self.get_by_kind(kind) if c.name.casefold() == folded),
            None,
        )

    def create(self, name: str, kind: str, emoji: str = "", color_hex: str | None = None) -> Category:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO categories(name, kind, emoji, color_hex) VALUES (?, ?, ?, ?)",
            (name, kind, emoji, color_hex),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(cursor.lastrowid)

    def update(self, category_id: int, name: str, emoji: str, color_hex: str | None) -> Category:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE categories SET name=?, emoji=?, color_hex=? WHERE id=?",
            (name, emoji, color_hex, category_id),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(category_id)

    def delete(self, category_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        conn.commit()
        self._invalidate_cache()
