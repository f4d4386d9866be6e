import json
import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from typing import List, Optional

from template_models import TemplateRecord, TemplateSection

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the template store cannot complete an operation."""


class TemplateStore:
    """
    SQLite-backed storage for report templates.

    Implements the storage collaborator used by ingestion and maintenance:
    exact-match lookups, creation, listing of active templates and deletion.
    Sections and variants are stored as JSON text columns.
    """

    def __init__(self, db_path: str = "exam_catalog.db"):
        self.db_path = db_path
        self.lock = threading.Lock()
        self._init_database()

    def _init_database(self):
        """Initialize database with required tables."""
        with self.get_connection() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS pre_report_templates (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    modality TEXT NOT NULL,
                    body_region TEXT NOT NULL,
                    sections TEXT NOT NULL,
                    complexity INTEGER NOT NULL DEFAULT 1,
                    is_active BOOLEAN NOT NULL DEFAULT 1,
                    variants TEXT NOT NULL DEFAULT '[]',
                    target_sex TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_template_title_modality ON pre_report_templates(title, modality)')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_template_active ON pre_report_templates(is_active)')

    @contextmanager
    def get_connection(self):
        """Get database connection with proper locking."""
        with self.lock:
            try:
                conn = sqlite3.connect(self.db_path, timeout=30.0)
            except sqlite3.Error as e:
                raise StorageError(f"Cannot open template store at {self.db_path}: {e}") from e
            conn.row_factory = sqlite3.Row
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(str(e)) from e
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> TemplateRecord:
        sections = [TemplateSection.from_dict(s) for s in json.loads(row['sections'] or '[]')]
        variants = json.loads(row['variants'] or '[]')
        return TemplateRecord(
            id=row['id'],
            title=row['title'],
            modality=row['modality'],
            body_region=row['body_region'],
            sections=sections,
            complexity=row['complexity'],
            is_active=bool(row['is_active']),
            variants=frozenset(variants) if variants else None,
            target_sex=row['target_sex'],
        )

    def find_existing(self, title: str, modality: str) -> bool:
        """Exact title + modality match, active or not."""
        with self.get_connection() as conn:
            row = conn.execute(
                'SELECT 1 FROM pre_report_templates WHERE title = ? AND modality = ? LIMIT 1',
                (title, modality)
            ).fetchone()
            return row is not None

    def create(self, record: TemplateRecord) -> str:
        """Persists a record and returns its new id (also set on the record)."""
        template_id = record.id or str(uuid.uuid4())
        with self.get_connection() as conn:
            conn.execute('''
                INSERT INTO pre_report_templates
                    (id, title, modality, body_region, sections, complexity, is_active, variants, target_sex)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', (template_id, record.title, record.modality, record.body_region,
                  record.serialize_sections(), record.complexity, record.is_active,
                  record.serialize_variants(), record.target_sex))
        record.id = template_id
        logger.debug(f"Created template {template_id}: [{record.modality}] {record.title}")
        return template_id

    def get(self, template_id: str) -> Optional[TemplateRecord]:
        with self.get_connection() as conn:
            row = conn.execute('SELECT * FROM pre_report_templates WHERE id = ?', (template_id,)).fetchone()
            return self._row_to_record(row) if row else None

    def find_all_active(self) -> List[TemplateRecord]:
        with self.get_connection() as conn:
            rows = conn.execute(
                'SELECT * FROM pre_report_templates WHERE is_active = 1 ORDER BY created_at, rowid'
            ).fetchall()
            return [self._row_to_record(r) for r in rows]

    def list_templates(self, modality: Optional[str] = None, search: Optional[str] = None) -> List[TemplateRecord]:
        """
        Active templates ordered by modality, region and title.

        `search` matches title or body region, case-insensitive. Filtering
        happens in Python because SQLite's LOWER() only folds ASCII.
        """
        records = self.find_all_active()
        if modality:
            records = [r for r in records if r.modality == modality.upper()]
        if search:
            needle = search.lower()
            records = [r for r in records if needle in r.title.lower() or needle in r.body_region.lower()]
        records.sort(key=lambda r: (r.modality, r.body_region, r.title))
        return records

    def delete(self, template_id: str) -> bool:
        """Hard delete; returns False when no such id exists."""
        with self.get_connection() as conn:
            cursor = conn.execute('DELETE FROM pre_report_templates WHERE id = ?', (template_id,))
            return cursor.rowcount > 0

    def deactivate(self, template_id: str) -> bool:
        """Soft delete: the template stays stored but is no longer listed or searched."""
        with self.get_connection() as conn:
            cursor = conn.execute('''
                UPDATE pre_report_templates
                SET is_active = 0, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
            ''', (template_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self.get_connection() as conn:
            return conn.execute('SELECT COUNT(*) FROM pre_report_templates').fetchone()[0]

    def recent(self, limit: int = 5) -> List[TemplateRecord]:
        with self.get_connection() as conn:
            rows = conn.execute(
                'SELECT * FROM pre_report_templates ORDER BY created_at DESC, rowid DESC LIMIT ?',
                (limit,)
            ).fetchall()
            return [self._row_to_record(r) for r in rows]
