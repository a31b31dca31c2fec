import asyncio

from jurispanel.services.providers import ModelGatewayError

PAUTA = "PAUTA DE JULGAMENTO - 1ª TURMA\n1. 0001234-56\n2. 0002345-67\n3. 0003456-78".encode("utf-8")


def extract(client, content=PAUTA, **form):
    return client.post(
        "/api/v1/extraction",
        files={"file": ("pauta.txt", content, "text/plain")},
        data=form,
    )


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["database"]["status"] == "ok"
    assert response.json()["ai"]["provider"] == "google"


def test_correlation_header_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_extraction_publishes_three_pending_cases(client):
    response = extract(client, orgao="1ª Turma")

    assert response.status_code == 200
    payload = response.json()
    cases = payload["cases"]
    assert [c["chamada"] for c in cases] == [1, 2, 3]
    assert all(c["status"] == "pending" for c in cases)
    assert all(c["internalId"].startswith("P-") for c in cases)
    assert len({c["internalId"] for c in cases}) == 3
    assert payload["cacheHit"] is False
    assert payload["sessionId"] is None
    assert payload["metadata"]["orgao"] == "1ª Turma"
    assert payload["metadata"]["total_processos"] == "3"


def test_second_upload_of_same_document_hits_cache(client, gateway):
    first = extract(client).json()
    second = extract(client).json()

    assert gateway.calls == 1
    assert second["cacheHit"] is True
    assert second["contentHash"] == first["contentHash"]
    assert {c["internalId"] for c in first["cases"]}.isdisjoint({c["internalId"] for c in second["cases"]})


def test_gateway_failure_returns_503_and_publishes_nothing(client, gateway):
    gateway.error = ModelGatewayError("fake", "HTTP 429: quota")

    response = extract(client)

    assert response.status_code == 503
    assert client.get("/api/v1/workspace").json()["cases"] == []
    assert client.get("/api/v1/logs").json()[0]["action"] == "Erro Processamento"


def test_concurrent_extraction_is_rejected(client, app):
    asyncio.run(app.state.workspace.extraction_lock.acquire())

    response = extract(client)

    assert response.status_code == 409
    assert client.get("/api/v1/workspace").json()["extractionInProgress"] is True
    app.state.workspace.extraction_lock.release()


def test_unsupported_upload(client):
    response = client.post("/api/v1/extraction", files={"file": ("foto.png", b"\x89PNG", "image/png")})
    assert response.status_code == 415


def test_vote_single_case(client):
    cases = extract(client).json()["cases"]
    target = cases[1]["internalId"]

    response = client.post(f"/api/v1/workspace/cases/{target}/vote", json={"type": "Concordo"})

    assert response.status_code == 200
    assert [c["status"] for c in response.json()["cases"]] == ["pending", "reviewed", "pending"]
    latest = client.get("/api/v1/logs", params={"limit": 1}).json()
    assert latest[0]["action"] == "Voto Registrado"
    assert latest[0]["targetId"] == target


def test_batch_vote_and_selection_reset(client):
    cases = extract(client).json()["cases"]
    first, third = cases[0]["internalId"], cases[2]["internalId"]
    client.post(f"/api/v1/workspace/batch/{first}")
    client.post(f"/api/v1/workspace/batch/{third}")

    payload = client.post(f"/api/v1/workspace/cases/{first}/vote", json={"type": "Vista"}).json()

    voted = [c for c in payload["cases"] if c["status"] == "reviewed"]
    assert {c["internalId"] for c in voted} == {first, third}
    assert voted[0]["voto"]["timestamp"] == voted[1]["voto"]["timestamp"]
    assert payload["batchIds"] == []


def test_select_all_toggles(client):
    extract(client)

    selected = client.post("/api/v1/workspace/batch/all").json()["batchIds"]
    assert len(selected) == 3
    assert client.post("/api/v1/workspace/batch/all").json()["batchIds"] == []


def test_vote_unknown_case(client):
    extract(client)
    assert client.post("/api/v1/workspace/cases/P-999/vote", json={"type": "Concordo"}).status_code == 404


def test_note_lifecycle(client):
    target = extract(client).json()["cases"][0]["internalId"]

    created = client.put(f"/api/v1/workspace/cases/{target}/note", json={"text": "Verificar"}).json()
    note_id = created["cases"][0]["notes"]["id"]
    edited = client.put(f"/api/v1/workspace/cases/{target}/note", json={"text": "Ok"}).json()
    assert edited["cases"][0]["notes"]["id"] == note_id

    assert client.delete(f"/api/v1/workspace/cases/{target}/note").status_code == 400
    deleted = client.delete(f"/api/v1/workspace/cases/{target}/note", params={"confirm": "true"}).json()
    assert deleted["cases"][0]["notes"] is None


def test_save_twice_keeps_one_session(client):
    cases = extract(client).json()["cases"]
    first = client.post("/api/v1/sessions").json()
    client.post(f"/api/v1/workspace/cases/{cases[0]['internalId']}/vote", json={"type": "Discordo"})
    second = client.post("/api/v1/sessions").json()

    assert first["id"] == second["id"] == "L-001"
    sessions = client.get("/api/v1/sessions").json()
    assert len(sessions) == 1
    assert sessions[0]["cases"][0]["voto"]["type"] == "Discordo"
    assert client.get("/api/v1/workspace").json()["sessionId"] == "L-001"


def test_saving_empty_workspace_is_rejected(client):
    assert client.post("/api/v1/sessions").status_code == 400


def test_load_trash_restore_purge(client):
    extract(client)
    code = client.post("/api/v1/sessions").json()["id"]
    client.post("/api/v1/workspace/new")

    loaded = client.post(f"/api/v1/sessions/{code}/load").json()
    assert loaded["sessionId"] == code
    assert len(loaded["cases"]) == 3

    assert client.delete(f"/api/v1/sessions/{code}").json()["state"] == "trashed"
    assert client.get("/api/v1/sessions").json() == []
    assert client.get("/api/v1/workspace").json()["sessionId"] is None

    assert client.post(f"/api/v1/sessions/trash/{code}/restore").status_code == 200
    assert len(client.get("/api/v1/sessions").json()) == 1

    assert client.delete(f"/api/v1/sessions/trash/{code}").status_code == 404
    client.delete(f"/api/v1/sessions/{code}")
    assert client.delete(f"/api/v1/sessions/trash/{code}").status_code == 204
    assert client.get("/api/v1/sessions/trash").json() == []

    actions = [e["action"] for e in client.get("/api/v1/logs").json()]
    assert actions[0] == "Sessão Excluída Permanentemente"
    assert "Sessão Restaurada" in actions
    assert "Sessão Carregada" in actions


def test_metadata_suggestion(client, gateway):
    gateway.metadata = {"orgao": "4ª Turma", "relator": "Des. Beltrano"}

    response = client.post(
        "/api/v1/extraction/metadata",
        files={"file": ("pauta.txt", PAUTA, "text/plain")},
    )

    assert response.status_code == 200
    assert response.json()["orgao"] == "4ª Turma"
    assert response.json()["hora"] == ""


def test_ai_settings_endpoints(client):
    defaults = client.get("/api/v1/settings/ai").json()
    assert defaults["activeProvider"] == "google"

    updated = client.put(
        "/api/v1/settings/ai/providers/openai",
        json={"key": "sk-test-123456", "model": "gpt-4o-mini"},
    ).json()
    assert updated["configs"]["openai"]["key"].endswith("3456")
    assert "sk-test" not in updated["configs"]["openai"]["key"]

    assert client.post("/api/v1/settings/ai/providers/openai/activate").json()["activeProvider"] == "openai"
    assert client.delete("/api/v1/settings/ai/providers/openai").json()["activeProvider"] == "google"
    assert client.put("/api/v1/settings/ai/temperature", json={"temperature": 0.9}).json()["temperature"] == 0.9
    assert client.put("/api/v1/settings/ai/temperature", json={"temperature": 3}).status_code == 422
    assert client.post("/api/v1/settings/ai/providers/mistral/activate").status_code == 422
