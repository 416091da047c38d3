"""
Concurrency tests: one session per magic link, no lost attachment appends
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from intern_registry.config import Settings
from intern_registry.domain.models.intern import Intern
from intern_registry.domain.models.user import ROLE_STAFF, User
from intern_registry.domain.schemas.intern import InternFields
from intern_registry.infrastructure.database import Base, create_db_engine, create_session_factory
from intern_registry.infrastructure.repositories.intern_repository import SQLAlchemyInternRepository
from intern_registry.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from tests.factories import intern_fields

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
TOKEN = "a" * 64
WORKERS = 4


@pytest.fixture
def session_factory(tmp_path):
    """File-backed SQLite so every worker gets its own connection"""
    engine = create_db_engine(Settings(_env_file=None, DATABASE_URL=f"sqlite:///{tmp_path / 'race.db'}"))
    Base.metadata.create_all(bind=engine)
    yield create_session_factory(engine)
    engine.dispose()


def run_concurrently(session_factory, repo_class, model, work):
    """Run ``work(repo, index)`` in parallel workers, each with its own session."""
    barrier = threading.Barrier(WORKERS)

    def worker(index):
        db = session_factory()
        try:
            repo = repo_class(db, model)
            barrier.wait()
            return work(repo, index)
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(worker, range(WORKERS)))


class TestMagicLinkRace:
    """Test concurrent verification of one magic link"""

    def test_only_one_session_minted(self, session_factory):
        """Test parallel consumers of one token yield exactly one session"""
        db = session_factory()
        repo = SQLAlchemyUserRepository(db, User)
        user = repo.add(User(email="it.staff@org.com", role=ROLE_STAFF, department="IT"))
        repo.store_magic_link(user.id, TOKEN, T0 + timedelta(minutes=15))
        db.close()

        results = run_concurrently(
            session_factory,
            SQLAlchemyUserRepository,
            User,
            lambda r, i: r.consume_magic_link(TOKEN, T0, f"{i:064d}", T0 + timedelta(hours=24)) is not None,
        )

        assert results.count(True) == 1

        db = session_factory()
        stored = SQLAlchemyUserRepository(db, User).get_by_email("it.staff@org.com")
        assert stored.magic_link_token is None
        assert stored.session_token == f"{results.index(True):064d}"
        db.close()

    def test_consumed_token_is_rejected_by_another_session(self, session_factory):
        """Test a token consumed through one session is gone for every other session"""
        db = session_factory()
        repo = SQLAlchemyUserRepository(db, User)
        user = repo.add(User(email="it.staff@org.com", role=ROLE_STAFF, department="IT"))
        repo.store_magic_link(user.id, TOKEN, T0 + timedelta(minutes=15))

        other = session_factory()
        other_repo = SQLAlchemyUserRepository(other, User)
        assert other_repo.consume_magic_link(TOKEN, T0, "1" * 64, T0 + timedelta(hours=24)) is not None
        assert repo.consume_magic_link(TOKEN, T0, "2" * 64, T0 + timedelta(hours=24)) is None
        assert repo.get_by_session("2" * 64, T0) is None
        other.close()
        db.close()


class TestAttachmentRace:
    """Test concurrent appends to one intern"""

    def test_no_append_is_lost(self, session_factory):
        """Test attachments appended in parallel all survive"""
        db = session_factory()
        repo = SQLAlchemyInternRepository(db, Intern)
        values = InternFields.model_validate(intern_fields()).model_dump()
        intern_id = repo.create(values, ["letter.pdf"]).id
        db.close()

        run_concurrently(
            session_factory,
            SQLAlchemyInternRepository,
            Intern,
            lambda r, i: r.apply_update(intern_id, {"updated_by_staff_email": f"staff{i}@org.com"}, [f"doc{i}.pdf"]),
        )

        db = session_factory()
        attachments = SQLAlchemyInternRepository(db, Intern).get_by_id_number("S100").attachments
        db.close()

        assert attachments[0] == "letter.pdf"
        assert sorted(attachments[1:]) == [f"doc{i}.pdf" for i in range(WORKERS)]
