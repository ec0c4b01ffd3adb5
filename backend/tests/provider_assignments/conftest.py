from __future__ import annotations

import uuid
from datetime import date, datetime

import pytest
from sqlalchemy import create_engine, insert, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roster.core.settings import Settings
from roster.models import (
    HOSPITALIZATION_STATUS_SEED,
    Base,
    Facility,
    Hospitalization,
    HospitalizationStatus,
    Patient,
    PatientFacility,
    ProviderAssignmentBatch,
    ProviderAssignmentBatchStatus,
    Provider,
    ProviderType,
    StagingProviderAssignment,
    Visit,
)
from roster.services.provider_assignments.name_parser import normalize_staging_row

FACILITY_ID = 5
OTHER_FACILITY_ID = 7
SERVICE_DATE = date(2026, 3, 2)


class RosterSeed:
    """Builds reference rows and staged roster rows for one test."""

    facility_id = FACILITY_ID
    other_facility_id = OTHER_FACILITY_ID
    service_date = SERVICE_DATE

    def __init__(self, session):
        self.session = session
        self.batch_id = uuid.uuid4()

    def provider(self, last_name, provider_type=ProviderType.physician, first_name="Alex"):
        provider = Provider(first_name=first_name, last_name=last_name, type=provider_type)
        self.session.add(provider)
        self.session.flush()
        return provider

    def nurse_practitioner(self, last_name, first_name="Sam"):
        return self.provider(last_name, ProviderType.nurse_practitioner, first_name)

    def patient(self, mrn, facility_id=FACILITY_ID, last_name="Doe", first_name="Jane"):
        patient = Patient(first_name=first_name, last_name=last_name, date_of_birth=date(1980, 1, 1))
        self.session.add(patient)
        self.session.flush()
        self.session.add(PatientFacility(patient_id=patient.id, facility_id=facility_id, mrn=mrn))
        self.session.flush()
        return patient

    def hospitalization(self, patient, case_id, facility_id=FACILITY_ID):
        hospitalization = Hospitalization(
            case_id=case_id,
            facility_id=facility_id,
            patient_id=patient.id,
            admission_date=datetime(2026, 2, 27, 14, 0),
            hospitalization_status_id=1,
        )
        self.session.add(hospitalization)
        self.session.flush()
        return hospitalization

    def visit(self, hospitalization, date_serviced=SERVICE_DATE):
        visit = Visit(
            hospitalization_id=hospitalization.id,
            date_serviced=date_serviced,
            room="101",
            bed="A",
        )
        self.session.add(visit)
        self.session.flush()
        return visit

    def batch(self, status=ProviderAssignmentBatchStatus.imported, batch_id=None):
        batch = ProviderAssignmentBatch(
            id=batch_id or self.batch_id,
            facility_id=self.facility_id,
            service_date=self.service_date,
            status=status,
        )
        self.session.add(batch)
        self.session.flush()
        return batch

    def staging_row(self, **overrides):
        values = {
            "batch_id": self.batch_id,
            "facility_id": self.facility_id,
            "service_date": self.service_date,
            "name": "Doe, Jane",
            "attending_md": "",
            "nurse_practitioner": "",
            "hospital_number": "",
            "mrn": "",
            "location": "101A",
            "psych_eval": "",
        }
        values.update(overrides)
        errors = values.pop("validation_errors", None)
        row = StagingProviderAssignment(**values)
        normalize_staging_row(row)
        if errors:
            row.add_validation_errors(errors)
        self.session.add(row)
        self.session.flush()
        return row

    def commit(self):
        self.session.commit()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(insert(HospitalizationStatus), HOSPITALIZATION_STATUS_SEED)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    session.add_all(
        [
            Facility(id=FACILITY_ID, name="Mercy General", abbreviation="MG"),
            Facility(id=OTHER_FACILITY_ID, name="St. Luke", abbreviation="SL"),
        ]
    )
    session.commit()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(session):
    return RosterSeed(session)


@pytest.fixture
def test_settings():
    return Settings(
        app_env="test",
        database_url="sqlite://",
        resolution_retry_max=2,
        resolution_retry_base_sleep=0.0,
        resolution_retry_max_sleep=0.0,
        resolution_advisory_lock=True,
        resolution_statement_timeout_seconds=30,
        default_hospitalization_status_id=1,
    )


@pytest.fixture
def fetch_rows(session_factory):
    """Read staging rows back through a fresh session."""

    def _fetch(batch_id):
        with session_factory() as fresh:
            return list(
                fresh.scalars(
                    select(StagingProviderAssignment)
                    .where(StagingProviderAssignment.batch_id == batch_id)
                    .order_by(StagingProviderAssignment.id)
                )
            )

    return _fetch
