import csv
from io import BytesIO, StringIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.config import Settings
from app.core.database import Base, build_session_factory
from app.main import create_application

HEADERS = ["Student_ID", "Student_Name", "Total_Marks", "Marks_Obtained"]

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture()
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        AUTO_CREATE_TABLES=False,
        ENFORCE_OBTAINED_LE_TOTAL=True,
        _env_file=None,
    )


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture()
def client(settings, engine):
    app = create_application(settings=settings, engine=engine)
    return TestClient(app)


@pytest.fixture()
def make_csv():
    def _make(rows, headers=HEADERS):
        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow(headers)
        writer.writerows(rows)
        return buffer.getvalue().encode("utf-8")

    return _make


@pytest.fixture()
def make_xlsx():
    def _make(rows, headers=HEADERS):
        wb = Workbook()
        ws = wb.active
        ws.append(headers)
        for row in rows:
            ws.append(row)
        output = BytesIO()
        wb.save(output)
        return output.getvalue()

    return _make


@pytest.fixture()
def upload(client, make_csv):
    """POST a CSV built from rows to /api/upload."""

    def _upload(rows, filename="grades.csv", headers=HEADERS):
        content = make_csv(rows, headers)
        return client.post(
            "/api/upload",
            files={"file": (filename, content, "text/csv")},
        )

    return _upload
