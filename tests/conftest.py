import copy
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jurispanel.api.v1.deps import get_gateway
from jurispanel.db.database import get_db, init_db
from jurispanel.db.schemas import CaseRecord, ProviderConfig
from jurispanel.main import create_app
from jurispanel.services.audit_service import AuditService
from jurispanel.services.id_service import IdService, InMemoryCounterStore
from jurispanel.services.providers import ModelGateway


def raw_case(chamada: Optional[int], numero: str, **overrides: Any) -> Dict[str, Any]:
    record = {
        "chamada": chamada,
        "numero_processo": numero,
        "classe": "Apelação Cível",
        "partes": [
            {"role": "Apelante", "name": "Maria da Silva", "advogado": "João Souza"},
            {"role": "Apelado", "name": "INSS"},
        ],
        "ementa": "PREVIDENCIÁRIO. APOSENTADORIA POR IDADE RURAL.",
        "resumo_estruturado": "### Causa em Julgamento\nConcessão de aposentadoria rural.",
        "tags": ["Previdenciário", "Aposentadoria", "Rural", "Prova", "Carência"],
    }
    if chamada is None:
        del record["chamada"]
    record.update(overrides)
    return record


THREE_CASES = [
    raw_case(1, "0001234-56.2023.4.01.0000"),
    raw_case(2, "0002345-67.2023.4.01.0000"),
    raw_case(3, "0003456-78.2023.4.01.0000"),
]


def make_case(internal_id: str, chamada: int, **overrides: Any) -> CaseRecord:
    return CaseRecord(internal_id=internal_id, chamada=chamada, numero_processo=f"proc-{chamada}", **overrides)


class FakeGateway(ModelGateway):
    """Scripted gateway: returns canned records or raises a canned error."""

    provider = "fake"

    def __init__(self, records: Any = None, metadata: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        super().__init__(ProviderConfig(name="Fake", key="", model="fake-model"), 0.2)
        self.records = THREE_CASES if records is None else records
        self.metadata = metadata or {}
        self.error = error
        self.calls = 0
        self.metadata_calls = 0

    def extract(self, document, schema):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.records)

    def extract_metadata(self, document):
        self.metadata_calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.metadata)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def ids() -> IdService:
    return IdService(InMemoryCounterStore())


@pytest.fixture
def audit(db, ids) -> AuditService:
    return AuditService(db, ids=ids)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def app(session_factory, gateway):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    return app


@pytest.fixture
def client(app) -> TestClient:
    # no context manager: the lifespan would initialise the default database
    return TestClient(app)


def logs_of(audit: AuditService) -> List[str]:
    return [entry.action for entry in audit.list_logs()]
