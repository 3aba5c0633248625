"""Tests for engine and session wiring."""

from sqlalchemy import inspect

from mediadesk.core.config import Settings
from mediadesk.db.session import get_engine, init_db, open_session, session_scope


class TestEngineCache:
    """One engine per database file."""

    def test_same_file_shares_engine(self, tmp_path):
        first = get_engine(Settings(db_path=tmp_path / "a.db"))
        second = get_engine(Settings(db_path=tmp_path / "sub" / ".." / "a.db"))
        assert first is second

    def test_different_files_get_different_engines(self, tmp_path):
        first = get_engine(Settings(db_path=tmp_path / "a.db"))
        second = get_engine(Settings(db_path=tmp_path / "b.db"))
        assert first is not second

    def test_creates_parent_directory(self, tmp_path):
        get_engine(Settings(db_path=tmp_path / "nested" / "requests.db"))
        assert (tmp_path / "nested").is_dir()


class TestInitDb:
    """init_db creates the request tables."""

    def test_tables_created(self, tmp_path):
        settings = Settings(db_path=tmp_path / "requests.db")
        init_db(settings)

        tables = set(inspect(get_engine(settings)).get_table_names())
        assert {"request_ids", "requests", "closed_requests"}.issubset(tables)

    def test_sessions_bound_to_engine(self, tmp_path):
        settings = Settings(db_path=tmp_path / "requests.db")
        session = open_session(settings)
        try:
            assert session.get_bind() is get_engine(settings)
        finally:
            session.close()


class TestSessionScope:
    """session_scope closes without committing."""

    def test_uncommitted_work_discarded(self, tmp_path):
        from mediadesk.db import repo
        from mediadesk.db.schema import RequestId

        settings = Settings(db_path=tmp_path / "requests.db")
        init_db(settings)

        with session_scope(settings) as session:
            repo.allocate_request_id(session)

        with session_scope(settings) as session:
            assert session.query(RequestId).count() == 0
