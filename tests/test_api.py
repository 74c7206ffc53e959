"""End-to-end tests through the FastAPI application."""

from datetime import datetime

from helpdesk.config import Role
from tests.conftest import create_staff, register_and_login


class TestHealth:
    """Service metadata endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["sla_scheduler"] == "disabled"
        assert body["checks"]["notifier"].startswith("running")
        assert body["checks"]["teams_webhook"] == "not_configured"

    def test_security_headers_and_correlation_id(self, client):
        response = client.get("/", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert response.headers["Referrer-Policy"] == "no-referrer"
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert "error" in response.json()


class TestIdentityApi:
    """Register, login and me."""

    def test_register_defaults_role_to_requester(self, client):
        response = client.post("/api/register", json={"email": "a@x.com", "name": "A", "password": "secret1"})

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "requester"
        assert body["email"] == "a@x.com"
        assert "password" not in body and "password_hash" not in body

    def test_register_ignores_role_in_body(self, client):
        response = client.post(
            "/api/register",
            json={"email": "a@x.com", "name": "A", "password": "secret1", "role": "admin"}
        )

        assert response.json()["role"] == "requester"

    def test_register_invalid(self, client):
        response = client.post("/api/register", json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Dados inválidos"}

    def test_register_duplicate(self, client):
        client.post("/api/register", json={"email": "a@x.com", "name": "A", "password": "secret1"})

        response = client.post("/api/register", json={"email": "a@x.com", "name": "B", "password": "secret2"})

        assert response.status_code == 400
        assert response.json() == {"error": "E-mail já cadastrado"}

    def test_login_wrong_password(self, client):
        client.post("/api/register", json={"email": "a@x.com", "name": "A", "password": "secret1"})

        response = client.post("/api/login", json={"email": "a@x.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Credenciais inválidas"}

    def test_login_returns_token_and_user(self, client):
        client.post("/api/register", json={"email": "a@x.com", "name": "A", "password": "secret1"})

        response = client.post("/api/login", json={"email": "a@x.com", "password": "secret1"})

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "a@x.com"

    def test_me(self, client):
        headers = register_and_login(client, "a@x.com", name="Ana")

        response = client.get("/api/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Ana"

    def test_missing_token(self, client):
        response = client.get("/api/tickets")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthenticated"}

    def test_invalid_token(self, client):
        response = client.get("/api/tickets", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}


class TestTicketsApi:
    """Ticket lifecycle over HTTP."""

    def test_create_ticket(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu", "priority": "P1"}, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "open"
        assert body["assignee_id"] is None
        created_at = datetime.fromisoformat(body["created_at"].replace("Z", "+00:00"))
        due_at = datetime.fromisoformat(body["due_at"].replace("Z", "+00:00"))
        assert (due_at - created_at).total_seconds() == 30 * 60

    def test_create_ticket_default_priority(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=headers)

        assert response.json()["priority"] == "P3"

    def test_create_ticket_empty_title(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.post("/api/tickets", json={"title": "", "content": "Caiu"}, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Título e descrição são obrigatórios"}

    def test_create_ticket_invalid_priority(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu", "priority": "P9"}, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Prioridade inválida"}

    def test_requester_cannot_patch_own_ticket(self, client):
        headers = register_and_login(client, "a@x.com")
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=headers).json()

        response = client.patch(f"/api/tickets/{ticket['id']}", json={"status": "closed"}, headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden"}

    def test_agent_triages_ticket(self, client):
        requester = register_and_login(client, "a@x.com", name="Ana")
        agent = create_staff(client, "agent@x.com", Role.AGENT)
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=requester).json()
        agent_id = client.get("/api/me", headers=agent).json()["id"]

        assigned = client.patch(f"/api/tickets/{ticket['id']}", json={"assignee_id": agent_id}, headers=agent)
        progressed = client.patch(f"/api/tickets/{ticket['id']}", json={"status": "in_progress"}, headers=agent)

        assert assigned.status_code == 200
        assert progressed.status_code == 200
        assert progressed.json()["assignee_id"] == agent_id
        assert progressed.json()["status"] == "in_progress"
        assert progressed.json()["due_at"] == ticket["due_at"]

        listed = client.get("/api/tickets", headers=agent).json()
        assert listed[0]["requester"] == "Ana"
        assert listed[0]["assignee"] == "agent"

    def test_patch_invalid_status(self, client):
        requester = register_and_login(client, "a@x.com")
        admin = create_staff(client, "admin@x.com", Role.ADMIN)
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=requester).json()

        response = client.patch(f"/api/tickets/{ticket['id']}", json={"status": "archived"}, headers=admin)

        assert response.status_code == 400
        assert response.json() == {"error": "Status inválido"}

    def test_patch_missing_ticket(self, client):
        agent = create_staff(client, "agent@x.com", Role.AGENT)

        response = client.patch("/api/tickets/999", json={"status": "closed"}, headers=agent)

        assert response.status_code == 404
        assert response.json() == {"error": "Não encontrado"}

    def test_visibility(self, client):
        ana = register_and_login(client, "ana@x.com")
        bruno = register_and_login(client, "bruno@x.com")
        agent = create_staff(client, "agent@x.com", Role.AGENT)
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=ana).json()

        assert client.get(f"/api/tickets/{ticket['id']}", headers=ana).status_code == 200
        assert client.get(f"/api/tickets/{ticket['id']}", headers=bruno).status_code == 403
        assert client.get(f"/api/tickets/{ticket['id']}", headers=agent).status_code == 200
        assert client.get("/api/tickets", headers=bruno).json() == []
        assert len(client.get("/api/tickets", headers=agent).json()) == 1

    def test_get_missing_ticket(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.get("/api/tickets/999", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Não encontrado"}

    def test_non_numeric_id(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.get("/api/tickets/abc", headers=headers)

        assert response.status_code == 400


class TestCommentsApi:
    """Comment thread over HTTP."""

    def test_comment_thread(self, client):
        requester = register_and_login(client, "a@x.com", name="Ana")
        agent = create_staff(client, "agent@x.com", Role.AGENT)
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=requester).json()

        first = client.post(f"/api/tickets/{ticket['id']}/comments", json={"content": "Alguma novidade?"}, headers=requester)
        second = client.post(f"/api/tickets/{ticket['id']}/comments", json={"content": "Verificando"}, headers=agent)

        assert first.status_code == 200
        assert second.status_code == 200

        comments = client.get(f"/api/tickets/{ticket['id']}/comments", headers=requester).json()
        assert [c["content"] for c in comments] == ["Alguma novidade?", "Verificando"]
        assert [c["author"] for c in comments] == ["Ana", "agent"]

    def test_empty_comment(self, client):
        headers = register_and_login(client, "a@x.com")
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=headers).json()

        response = client.post(f"/api/tickets/{ticket['id']}/comments", json={"content": ""}, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Comentário vazio"}

    def test_unrelated_requester_cannot_read_comments(self, client):
        ana = register_and_login(client, "ana@x.com")
        bruno = register_and_login(client, "bruno@x.com")
        ticket = client.post("/api/tickets", json={"title": "VPN", "content": "Caiu"}, headers=ana).json()

        response = client.get(f"/api/tickets/{ticket['id']}/comments", headers=bruno)

        assert response.status_code == 403

    def test_comments_on_missing_ticket(self, client):
        headers = register_and_login(client, "a@x.com")

        response = client.get("/api/tickets/999/comments", headers=headers)

        assert response.status_code == 404
