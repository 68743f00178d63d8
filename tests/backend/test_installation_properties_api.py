API = "/api/v1"


def create(client, headers, resource, payload):
    resp = client.post(f"{API}/{resource}/", json=payload, headers=headers)
    assert resp.status_code == 201, resp.json()
    return resp.json()


def setup_terminal(client, headers):
    """Terminal type with three schemas and one installation of that type."""
    terminal = create(client, headers, "installation-types", {"name": "Terminal", "code": "TERM"})
    schemas = {
        "platforms": create(
            client,
            headers,
            "installation-schemas",
            {"name": "platforms", "label": "Platforms", "type": "number", "installationTypeId": terminal["id"]},
        ),
        "open24h": create(
            client,
            headers,
            "installation-schemas",
            {"name": "open24h", "type": "boolean", "required": True, "installationTypeId": terminal["id"]},
        ),
        "zone": create(
            client,
            headers,
            "installation-schemas",
            {
                "name": "zone",
                "type": "enum",
                "options": {"enumValues": ["north", "south"]},
                "installationTypeId": terminal["id"],
            },
        ),
    }
    installation = create(
        client, headers, "installations", {"name": "Central Norte", "installationTypeId": terminal["id"]}
    )
    return terminal, schemas, installation


class TestInstallationSchemas:
    def test_create_and_list_for_type(self, authorized_client):
        client, headers, _ = authorized_client
        terminal, schemas, _ = setup_terminal(client, headers)
        assert schemas["zone"]["options"] == {"enumValues": ["north", "south"]}
        assert schemas["platforms"]["options"] == {}

        resp = client.get(f"{API}/installation-types/{terminal['id']}/schemas", headers=headers)
        assert resp.status_code == 200
        assert [s["name"] for s in resp.json()["data"]] == ["platforms", "open24h", "zone"]

        assert client.get(f"{API}/installation-types/999/schemas", headers=headers).status_code == 404

    def test_name_unique_within_type(self, authorized_client):
        client, headers, _ = authorized_client
        terminal, _, _ = setup_terminal(client, headers)
        office = create(client, headers, "installation-types", {"name": "Office", "code": "OFF"})

        resp = client.post(
            f"{API}/installation-schemas/",
            json={"name": "platforms", "type": "number", "installationTypeId": terminal["id"]},
            headers=headers,
        )
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0]["code"] == "DUPLICATE"

        create(
            client,
            headers,
            "installation-schemas",
            {"name": "platforms", "type": "number", "installationTypeId": office["id"]},
        )

    def test_enum_needs_values(self, authorized_client):
        client, headers, _ = authorized_client
        terminal = create(client, headers, "installation-types", {"name": "Terminal", "code": "TERM"})

        resp = client.post(
            f"{API}/installation-schemas/",
            json={"name": "zone", "type": "enum", "options": {"enumValues": []}, "installationTypeId": terminal["id"]},
            headers=headers,
        )
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0]["message"] == "Enum type must have at least one option in enumValues"

    def test_changing_type_clears_options(self, authorized_client):
        client, headers, _ = authorized_client
        _, schemas, _ = setup_terminal(client, headers)

        resp = client.put(f"{API}/installation-schemas/{schemas['zone']['id']}", json={"type": "string"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["type"] == "string"
        assert resp.json()["options"] == {}


class TestInstallationProperties:
    def test_every_schema_listed_before_values_are_set(self, authorized_client):
        client, headers, _ = authorized_client
        _, schemas, installation = setup_terminal(client, headers)

        resp = client.get(f"{API}/installations/{installation['id']}/properties", headers=headers)
        assert resp.status_code == 200
        properties = resp.json()["data"]
        assert [p["name"] for p in properties] == ["platforms", "open24h", "zone"]
        assert properties[0] == {
            "id": None,
            "schemaId": schemas["platforms"]["id"],
            "name": "platforms",
            "label": "Platforms",
            "description": None,
            "type": "number",
            "required": False,
            "options": {},
            "value": None,
        }

    def test_upsert_casts_values(self, authorized_client):
        client, headers, _ = authorized_client
        _, _, installation = setup_terminal(client, headers)
        url = f"{API}/installations/{installation['id']}/properties"

        resp = client.put(
            url,
            json={"properties": [{"name": "platforms", "value": "12"}, {"name": "open24h", "value": "1"}]},
            headers=headers,
        )
        assert resp.status_code == 200
        values = {p["name"]: p["value"] for p in resp.json()["data"]}
        assert values == {"platforms": 12, "open24h": True, "zone": None}

        resp = client.put(
            url,
            json={"properties": [{"name": "open24h", "value": False}, {"name": "zone", "value": "south"}]},
            headers=headers,
        )
        values = {p["name"]: p["value"] for p in resp.json()["data"]}
        assert values == {"platforms": 12, "open24h": False, "zone": "south"}

    def test_invalid_values_are_all_reported(self, authorized_client):
        client, headers, _ = authorized_client
        _, _, installation = setup_terminal(client, headers)

        resp = client.put(
            f"{API}/installations/{installation['id']}/properties",
            json={
                "properties": [
                    {"name": "platforms", "value": "many"},
                    {"name": "open24h", "value": ""},
                    {"name": "zone", "value": "east"},
                ]
            },
            headers=headers,
        )
        assert resp.status_code == 400
        errors = {e["field"]: e["code"] for e in resp.json()["fieldErrors"]}
        assert errors == {"platforms": "INVALID_NUMBER", "open24h": "REQUIRED", "zone": "INVALID_ENUM_VALUE"}

        resp = client.get(f"{API}/installations/{installation['id']}/properties", headers=headers)
        assert all(p["value"] is None for p in resp.json()["data"])

    def test_unknown_property_name(self, authorized_client):
        client, headers, _ = authorized_client
        _, _, installation = setup_terminal(client, headers)

        resp = client.put(
            f"{API}/installations/{installation['id']}/properties",
            json={"properties": [{"name": "gates", "value": "4"}]},
            headers=headers,
        )
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Schema with name gates not found"

    def test_installation_without_type_has_no_properties(self, authorized_client):
        client, headers, _ = authorized_client
        installation = create(client, headers, "installations", {"name": "Depot"})

        resp = client.get(f"{API}/installations/{installation['id']}/properties", headers=headers)
        assert resp.json() == {"data": []}
