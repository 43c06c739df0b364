from dataclasses import replace

from fastapi.testclient import TestClient

from storefront.app_setup.factory import create_app


def test_health_root(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_health_ledger_counts_records(client: TestClient, checkout_payload):
    info = client.get("/health/ledger").json()
    assert info["exists"] is False
    assert info["records"] == 0

    client.post("/checkout", json=checkout_payload)
    info = client.get("/health/ledger").json()
    assert info["exists"] is True
    assert info["records"] == 1
    assert info["error"] is None


def test_health_ledger_unreadable_store(client: TestClient, settings):
    settings.ledger_path.write_bytes(b"\xff\xfe\x00garbage")
    response = client.get("/health/ledger")
    assert response.status_code == 503
    assert response.json()["error"]


def test_health_config_never_exposes_secrets(client: TestClient):
    response = client.get("/health/config")
    assert response.status_code == 200
    body = response.json()
    assert body["email_user_loaded"] is True
    assert body["email_pass_loaded"] is True
    assert body["gateway_key_loaded"] is True
    assert body["gateway_currency"] == "ZAR"
    assert body["rate_limit"]["enabled"] is False
    assert "secret" not in response.text
    assert "sk_test_123" not in response.text


def test_health_config_reports_missing_credentials(settings, mailer, ledger, gateway):
    app = create_app(replace(settings, email_pass="", paystack_secret_key=""), mailer=mailer, ledger=ledger, gateway=gateway)
    with TestClient(app) as client:
        body = client.get("/health/config").json()
    assert body["email_pass_loaded"] is False
    assert body["gateway_key_loaded"] is False


def test_public_form_rate_limited_with_local_fallback(client: TestClient, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    payload = {"name": "Ada", "email": "a@b.com", "message": "Hello"}
    for i in range(5):
        assert client.post("/send-email", json=payload).status_code == 200, f"attempt {i + 1}"
    response = client.post("/send-email", json=payload)
    assert response.status_code == 429
    assert response.json() == {"error": "Too Many Requests"}


def test_public_form_limit_not_bypassed_by_spoofed_forwarded_for(client: TestClient, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    payload = {"name": "Ada", "email": "a@b.com", "message": "Hello"}
    codes = [
        client.post("/send-email", json=payload, headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
        for i in range(12)
    ]
    assert codes == [200] * 5 + [429] * 7
