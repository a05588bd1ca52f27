"""Resource CRUD and import through the host runtime adapter."""
import pytest

from smilecdr_provider.core.smilecdr import (
    ConflictError,
    TransportError,
    ValidationError,
)
from smilecdr_provider.provider import (
    IdentityProviderResource,
    OpenIdClientResource,
    OpenIdClientsDataSource,
)
from smilecdr_provider.provider.resources import resource_data_to_openid_client
from tests.conftest import StubResponse


@pytest.fixture
def resource():
    return OpenIdClientResource()


def declared(resource, **raw):
    base = {
        "client_id": "portal",
        "client_name": "Patient Portal",
        "scopes": ["openid", "patient/*.read"],
        "client_secrets": [{"description": "primary"}],
        "permissions": [{"permission": "FHIR_ALL_READ"}],
    }
    base.update(raw)
    return resource.new_data(base)


def test_conversion_to_typed_record(resource):
    record = resource_data_to_openid_client(declared(resource, allowed_grant_types=["AUTHORIZATION_CODE"]))

    assert record.client_id == "portal"
    assert record.pid is None
    assert record.scopes == ["openid", "patient/*.read"]
    assert record.allowed_grant_types == ["AUTHORIZATION_CODE"]
    assert record.permissions[0].permission == "FHIR_ALL_READ"
    assert record.client_secrets[0].description == "primary"
    assert record.public_jwks_uri == ""
    assert record.archived_at is None


def test_create_sets_id_pid_and_generated_values(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)

    assert d.id == "portal"
    assert d.get("pid") == 1
    assert d.get("client_secrets")[0]["secret"] == "generated-1-0"
    assert d.get("enabled") is True


def test_create_rejects_invalid_data_before_calling_api(resource, fake_smilecdr, api_client):
    d = declared(resource, permissions=[{"permission": "NOT_A_PERMISSION"}])
    with pytest.raises(ValidationError):
        resource.create(d, api_client)
    assert fake_smilecdr.calls == []
    assert d.id == ""


def test_create_conflict_leaves_id_empty(resource, fake_smilecdr, api_client):
    resource.create(declared(resource), api_client)
    d = declared(resource)
    with pytest.raises(ConflictError):
        resource.create(d, api_client)
    assert d.id == ""


def test_create_records_identity_when_read_back_fails(resource, fake_smilecdr, api_client, monkeypatch):
    from smilecdr_provider.core.smilecdr import OpenIdClientService

    original_get = OpenIdClientService.get

    def failing_get(self, scope, key):
        fake_smilecdr.fail_next = StubResponse("bad gateway", 502)
        return original_get(self, scope, key)

    monkeypatch.setattr(OpenIdClientService, "get", failing_get)
    d = declared(resource)

    with pytest.raises(TransportError):
        resource.create(d, api_client)
    assert d.id == "portal"
    assert d.get("pid") == 1


def test_read_refreshes_from_remote(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)
    fake_smilecdr.active_client("Master", "smart_auth", "portal")["clientName"] = "Changed remotely"

    resource.read(d, api_client)
    assert d.get("client_name") == "Changed remotely"
    assert d.id == "portal"


def test_read_of_missing_object_clears_id(resource, fake_smilecdr, api_client):
    d = resource.new_data({"client_id": "ghost", "client_name": "Ghost"}, id="ghost")
    resource.read(d, api_client)
    assert d.id == ""


def test_read_of_remotely_archived_object_clears_id(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)
    fake_smilecdr.active_client("Master", "smart_auth", "portal")["archivedAt"] = "2024-01-01T00:00:00Z"

    resource.read(d, api_client)
    assert d.id == ""


def test_read_errors_other_than_not_found_propagate(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)
    fake_smilecdr.fail_next = StubResponse("unavailable", 503)

    with pytest.raises(TransportError):
        resource.read(d, api_client)
    assert d.id == "portal"


def test_update_overwrites_and_reads_back(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)

    changed = resource.new_data({"client_id": "portal", "client_name": "Portal v2"}, id=d.id)
    changed.set("pid", d.get("pid"))
    resource.update(changed, api_client)

    stored = fake_smilecdr.active_client("Master", "smart_auth", "portal")
    assert stored["clientName"] == "Portal v2"
    assert stored["scopes"] == []
    assert changed.get("scopes") == []
    assert changed.id == "portal"


def test_update_refuses_natural_key_change(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)
    d.set("client_id", "portal-renamed")

    with pytest.raises(ValidationError, match="client_id"):
        resource.update(d, api_client)
    assert [m for m, _ in fake_smilecdr.calls].count("PUT") == 0


def test_delete_archives_and_clears_id(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)

    resource.delete(d, api_client)

    assert d.id == ""
    assert d.get("archived_at")
    assert fake_smilecdr.latest_client("Master", "smart_auth", "portal")["archivedAt"] == d.get("archived_at")


def test_delete_failure_keeps_id(resource, fake_smilecdr, api_client):
    d = declared(resource)
    resource.create(d, api_client)
    fake_smilecdr.fail_next = StubResponse("boom", 500)

    with pytest.raises(TransportError):
        resource.delete(d, api_client)
    assert d.id == "portal"


def test_import_then_read_reproduces_remote_state(resource, fake_smilecdr, api_client):
    original = declared(resource, node_id="Node2", module_id="auth2")
    resource.create(original, api_client)

    imported = resource.import_state("Node2/auth2/portal", resource.new_data())
    resource.read(imported, api_client)

    assert imported.id == "portal"
    assert imported.to_dict() == original.to_dict()


def test_import_rejects_empty_id(resource):
    with pytest.raises(ValidationError):
        resource.import_state("", resource.new_data())


def test_identity_provider_resource_lifecycle(fake_smilecdr, api_client):
    resource = IdentityProviderResource()
    d = resource.new_data({"name": "okta", "issuer": "https://okta.example", "response_type": "code"})

    resource.create(d, api_client)
    assert d.id == "okta"
    assert d.get("pid") == 1

    d.set("notes", "primary IdP")
    resource.update(d, api_client)
    assert fake_smilecdr.servers[("Master", "smart_auth")][0]["notes"] == "primary IdP"

    resource.delete(d, api_client)
    assert d.id == ""
    assert fake_smilecdr.servers[("Master", "smart_auth")] == []


def test_data_source_lists_clients(resource, fake_smilecdr, api_client):
    resource.create(declared(resource), api_client)
    resource.create(declared(resource, client_id="backend", client_name="Backend"), api_client)
    resource.create(declared(resource, client_id="elsewhere", client_name="Other", module_id="other"), api_client)

    data_source = OpenIdClientsDataSource()
    d = data_source.new_data()
    data_source.read(d, api_client)

    assert d.id == "Master/smart_auth"
    assert sorted(c["client_id"] for c in d.get("clients")) == ["backend", "portal"]
