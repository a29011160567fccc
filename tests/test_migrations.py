"""The Alembic revision builds the same tables as the ORM models"""
import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from app.db.base import Base
import app.models  # noqa: F401

VERSIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"


def _load_revisions():
    modules = []
    for path in sorted(VERSIONS.glob("*.py")):
        spec = importlib.util.spec_from_file_location(path.stem, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        modules.append(module)
    return modules


def _run(engine, step):
    with engine.begin() as conn:
        context = MigrationContext.configure(conn)
        with Operations.context(context):
            step()


def test_single_root_revision():
    revisions = _load_revisions()
    assert len(revisions) == 1
    assert revisions[0].down_revision is None


def test_upgrade_matches_models_and_downgrade_drops_everything(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrated.db'}")
    revision = _load_revisions()[0]
    try:
        _run(engine, revision.upgrade)

        inspector = inspect(engine)
        assert set(inspector.get_table_names()) == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            migrated = {col["name"] for col in inspector.get_columns(name)}
            assert migrated == {col.name for col in table.columns}, name

        index_names = {ix["name"] for ix in inspector.get_indexes("otp_codes")}
        assert "ix_otp_codes_email_code_purpose" in index_names

        _run(engine, revision.downgrade)
        assert inspect(engine).get_table_names() == []
    finally:
        engine.dispose()
