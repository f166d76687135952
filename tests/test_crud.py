"""Tests for CRUD operations."""

import io
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from vcfolio import crud, models, schemas
from vcfolio.exceptions import MissingFieldError, ProjectNotFoundError


def _upload(db_session, project_id=None, doc_type="business_plan", content=b"%PDF-1.4 plan"):
    return crud.create_uploaded_document(
        db_session,
        file_obj=io.BytesIO(content),
        filename="plan.pdf",
        name="Business plan",
        doc_type=doc_type,
        project_id=project_id,
    )


class TestProjectCRUD:
    def test_create_project(self, db_session):
        data = schemas.ProjectCreate(
            name="Harbor Pay", investment_date=date(2023, 1, 20),
            capital_invested=500_000,
        )
        project = crud.create_project(db_session, data)
        assert project.id is not None
        assert project.name == "Harbor Pay"
        assert project.book_value is None
        assert project.moic is None

    def test_derived_values(self, sample_project):
        assert sample_project.book_value == pytest.approx(200_000)
        assert sample_project.moic == 2.00

    def test_get_project(self, db_session, sample_project):
        fetched = crud.get_project(db_session, sample_project.id)
        assert fetched is not None
        assert fetched.name == sample_project.name

    def test_get_nonexistent_project(self, db_session):
        assert crud.get_project(db_session, 9999) is None

    def test_update_project(self, db_session, sample_project):
        data = schemas.ProjectUpdate(current_shareholding_ratio=10.0)
        updated = crud.update_project(db_session, sample_project.id, data)
        assert updated.current_shareholding_ratio == 10.0
        assert updated.book_value == pytest.approx(100_000)
        assert updated.moic == 1.0

    def test_update_ignores_null_for_required_fields(self, db_session, sample_project):
        data = schemas.ProjectUpdate(name=None, brief_intro=None)
        updated = crud.update_project(db_session, sample_project.id, data)
        assert updated.name == "Acme AI"
        assert updated.brief_intro is None

    def test_update_nonexistent_project(self, db_session):
        assert crud.update_project(db_session, 9999, schemas.ProjectUpdate(name="x")) is None

    def test_list_projects_ordered_by_investment_date(self, db_session):
        for name, year in [("Old", 2019), ("New", 2024), ("Mid", 2021)]:
            crud.create_project(db_session, schemas.ProjectCreate(
                name=name, investment_date=date(year, 1, 1), capital_invested=1,
            ))
        names = [p.name for p in crud.list_projects(db_session)]
        assert names == ["New", "Mid", "Old"]
        assert [p.name for p in crud.list_projects(db_session, limit=1)] == ["New"]
        assert [p.name for p in crud.list_projects(db_session, search="ol")] == ["Old"]

    def test_delete_project(self, db_session, sample_project):
        assert crud.delete_project(db_session, sample_project.id) == []
        assert crud.get_project(db_session, sample_project.id) is None

    def test_delete_nonexistent_project(self, db_session):
        assert crud.delete_project(db_session, 9999) is None


class TestDocumentCRUD:
    def test_create_link_document(self, db_session, sample_project):
        data = schemas.DocumentCreate(
            name="Term sheet", type="Contract", url="https://example.com/ts.pdf",
            project_id=sample_project.id,
        )
        doc = crud.create_document(db_session, data)
        assert doc.id is not None
        assert doc.type == "contract"
        assert doc.stored_filename is None
        assert doc.is_visible is True

    def test_link_document_unknown_project(self, db_session):
        data = schemas.DocumentCreate(
            name="Term sheet", type="contract", url="https://example.com/ts.pdf",
            project_id=9999,
        )
        with pytest.raises(ProjectNotFoundError):
            crud.create_document(db_session, data)

    def test_document_schema_requires_project_unless_general(self):
        with pytest.raises(ValueError):
            schemas.DocumentCreate(name="x", type="contract", url="https://example.com")
        general = schemas.DocumentCreate(name="x", type="General", url="https://example.com")
        assert general.project_id is None

    def test_owner_constraint_enforced_by_database(self, db_session):
        db_session.add(models.Document(name="x", type="contract", url="/x"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_upload_document(self, db_session, sample_project, upload_dir):
        doc = _upload(db_session, project_id=sample_project.id)
        assert doc.project_id == sample_project.id
        assert doc.content_type == "application/pdf"
        assert doc.size_bytes == len(b"%PDF-1.4 plan")
        assert doc.url == f"/api/files/{doc.stored_filename}"
        assert (upload_dir / doc.stored_filename).read_bytes() == b"%PDF-1.4 plan"

    def test_upload_general_document_without_project(self, db_session, upload_dir):
        doc = _upload(db_session, doc_type="general")
        assert doc.project_id is None
        assert crud.list_documents(db_session, general_only=True) == [doc]

    def test_upload_typed_document_without_project(self, db_session, upload_dir):
        with pytest.raises(MissingFieldError):
            _upload(db_session, doc_type="contract")
        assert list(upload_dir.iterdir()) == []

    def test_upload_unknown_project_writes_nothing(self, db_session, upload_dir):
        with pytest.raises(ProjectNotFoundError):
            _upload(db_session, project_id=9999)
        assert list(upload_dir.iterdir()) == []

    def test_upload_rolls_back_file_when_insert_fails(
        self, db_session, sample_project, upload_dir, monkeypatch,
    ):
        def failing_commit():
            raise IntegrityError("INSERT", {}, Exception("db down"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        with pytest.raises(IntegrityError):
            _upload(db_session, project_id=sample_project.id)
        monkeypatch.undo()

        assert list(upload_dir.iterdir()) == []
        assert crud.list_documents(db_session) == []

    def test_list_documents_filters(self, db_session, sample_project, upload_dir):
        plan = _upload(db_session, project_id=sample_project.id)
        general = _upload(db_session, doc_type="general")
        crud.set_document_visibility(db_session, general.id, False)

        assert {d.id for d in crud.list_documents(db_session)} == {plan.id, general.id}
        assert [d.id for d in crud.list_documents(db_session, project_id=sample_project.id)] == [plan.id]
        assert [d.id for d in crud.list_documents(db_session, visible=True)] == [plan.id]
        assert [d.id for d in crud.list_documents(db_session, doc_type="general")] == [general.id]
        assert crud.count_documents(db_session) == 2

    def test_set_visibility_nonexistent(self, db_session):
        assert crud.set_document_visibility(db_session, 9999, False) is None

    def test_delete_document_removes_file(self, db_session, sample_project, upload_dir):
        doc = _upload(db_session, project_id=sample_project.id)
        stored = doc.stored_filename
        assert crud.delete_document(db_session, doc.id) is True
        assert crud.get_document(db_session, doc.id) is None
        assert not (upload_dir / stored).exists()

    def test_delete_document_with_missing_file(self, db_session, sample_project, upload_dir):
        doc = _upload(db_session, project_id=sample_project.id)
        (upload_dir / doc.stored_filename).unlink()
        assert crud.delete_document(db_session, doc.id) is True

    def test_delete_project_cascades_documents_and_files(
        self, db_session, sample_project, upload_dir,
    ):
        first = _upload(db_session, project_id=sample_project.id)
        second = _upload(db_session, project_id=sample_project.id)
        (upload_dir / second.stored_filename).unlink()

        removed = crud.delete_project(db_session, sample_project.id)

        assert sorted(removed) == sorted([first.stored_filename, second.stored_filename])
        assert crud.list_documents(db_session) == []
        assert list(upload_dir.iterdir()) == []
