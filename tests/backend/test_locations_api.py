from inventory_core.models import Amenity, InstallationType, Node

API = "/api/v1"


def create(client, headers, resource, payload):
    resp = client.post(f"{API}/{resource}/", json=payload, headers=headers)
    assert resp.status_code == 201, resp.json()
    return resp.json()


class TestCountryCrud:
    def test_create_and_get(self, authorized_client):
        client, headers, _ = authorized_client

        created = create(client, headers, "countries", {"name": "Mexico", "code": "MX"})
        assert created["name"] == "Mexico"
        assert created["active"] is True
        assert created["deletedAt"] is None
        assert "createdAt" in created

        resp = client.get(f"{API}/countries/{created['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["code"] == "MX"

    def test_get_missing_returns_404(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.get(f"{API}/countries/999", headers=headers)
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Country with id 999 not found", "status_code": 404}

    def test_partial_update(self, authorized_client):
        client, headers, _ = authorized_client
        country = create(client, headers, "countries", {"name": "Mexico", "code": "MX"})

        resp = client.put(f"{API}/countries/{country['id']}", json={"active": False}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["active"] is False
        assert resp.json()["name"] == "Mexico"

    def test_empty_update_returns_entity(self, authorized_client):
        client, headers, _ = authorized_client
        country = create(client, headers, "countries", {"name": "Mexico", "code": "MX"})

        resp = client.put(f"{API}/countries/{country['id']}", json={}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["code"] == "MX"

    def test_duplicate_reports_field_errors(self, authorized_client):
        client, headers, _ = authorized_client
        create(client, headers, "countries", {"name": "Mexico", "code": "MX"})

        resp = client.post(f"{API}/countries/", json={"name": "Mexico", "code": "MX"}, headers=headers)
        assert resp.status_code == 400
        body = resp.json()
        assert {e["field"] for e in body["fieldErrors"]} == {"name", "code"}
        assert {e["code"] for e in body["fieldErrors"]} == {"DUPLICATE"}

    def test_delete_and_restore(self, authorized_client):
        client, headers, _ = authorized_client
        country = create(client, headers, "countries", {"name": "Mexico", "code": "MX"})

        resp = client.delete(f"{API}/countries/{country['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["deletedAt"] is not None

        assert client.get(f"{API}/countries/{country['id']}", headers=headers).status_code == 404

        # Code is free again while the row is deleted
        create(client, headers, "countries", {"name": "Mexico", "code": "MX"})

        resp = client.post(f"{API}/countries/{country['id']}/restore", headers=headers)
        assert resp.status_code == 409

    def test_restore(self, authorized_client):
        client, headers, _ = authorized_client
        country = create(client, headers, "countries", {"name": "Mexico", "code": "MX"})
        client.delete(f"{API}/countries/{country['id']}", headers=headers)

        resp = client.post(f"{API}/countries/{country['id']}/restore", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["deletedAt"] is None

        resp = client.post(f"{API}/countries/{country['id']}/restore", headers=headers)
        assert resp.status_code == 404

    def test_missing_required_field_is_422(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(f"{API}/countries/", json={"name": "Mexico"}, headers=headers)
        assert resp.status_code == 422
        body = resp.json()
        assert body["detail"] == "Validation error"
        assert any(error["loc"][-1] == "code" for error in body["errors"])


class TestCountryList:
    def seed(self, client, headers):
        for name, code in [("Mexico", "MX"), ("Canada", "CA"), ("Belize", "BZ")]:
            create(client, headers, "countries", {"name": name, "code": code})

    def test_paginated(self, authorized_client):
        client, headers, _ = authorized_client
        self.seed(client, headers)

        resp = client.post(f"{API}/countries/list", json={"page": 1, "pageSize": 2}, headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert [c["code"] for c in body["data"]] == ["MX", "CA"]
        assert body["pagination"] == {
            "currentPage": 1,
            "pageSize": 2,
            "totalCount": 3,
            "totalPages": 2,
            "hasNextPage": True,
            "hasPreviousPage": False,
        }

    def test_default_page_size(self, authorized_client):
        client, headers, _ = authorized_client
        self.seed(client, headers)

        resp = client.post(f"{API}/countries/list", json={}, headers=headers)
        assert resp.json()["pagination"]["pageSize"] == 10

    def test_page_size_above_maximum_is_clamped(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(f"{API}/countries/list", json={"pageSize": 5000}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["pagination"]["pageSize"] == 100

    def test_invalid_page_is_422(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(f"{API}/countries/list", json={"page": 0}, headers=headers)
        assert resp.status_code == 422

    def test_search_filters_and_order(self, authorized_client):
        client, headers, _ = authorized_client
        self.seed(client, headers)

        resp = client.post(f"{API}/countries/list/all", json={"searchTerm": "ca"}, headers=headers)
        assert [c["code"] for c in resp.json()["data"]] == ["CA"]

        resp = client.post(
            f"{API}/countries/list/all",
            json={"filters": {"code": ["MX", "BZ"]}, "orderBy": [{"field": "name", "direction": "asc"}]},
            headers=headers,
        )
        assert [c["code"] for c in resp.json()["data"]] == ["BZ", "MX"]

    def test_unknown_filter_field_is_400(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(f"{API}/countries/list/all", json={"filters": {"size": 1}}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid filter field: size"

    def test_deleted_rows_are_hidden(self, authorized_client):
        client, headers, _ = authorized_client
        self.seed(client, headers)
        client.delete(f"{API}/countries/1", headers=headers)

        resp = client.post(f"{API}/countries/list/all", json={}, headers=headers)
        assert [c["code"] for c in resp.json()["data"]] == ["CA", "BZ"]


def test_city_slug_is_generated(authorized_client, geography):
    client, headers, _ = authorized_client
    city = create(
        client,
        headers,
        "cities",
        {
            "name": "Zapopan",
            "stateId": geography["state"].id,
            "latitude": 20.72,
            "longitude": -103.39,
        },
    )
    assert city["slug"] == "zapopan-jal"
    assert city["timezone"] == "UTC"

    resp = client.put(f"{API}/cities/{city['id']}", json={"name": "Zapopan Centro"}, headers=headers)
    assert resp.json()["slug"] == "zapopan-centro-jal"


def test_state_with_unknown_country(authorized_client):
    client, headers, _ = authorized_client
    resp = client.post(
        f"{API}/states/", json={"name": "Jalisco", "code": "JAL", "countryId": 42}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"] == [
        {"field": "countryId", "code": "NOT_FOUND", "message": "Country with id 42 not found", "value": 42}
    ]


def test_population_city_assignment(authorized_client, geography):
    client, headers, _ = authorized_client
    city_id = geography["city"].id
    metro = create(client, headers, "populations", {"code": "GDL", "name": "Guadalajara Metro"})
    state = create(client, headers, "populations", {"code": "JAL", "name": "Jalisco"})

    resp = client.put(f"{API}/populations/{metro['id']}/cities", json={"cityIds": [city_id]}, headers=headers)
    assert resp.status_code == 200
    assert [c["slug"] for c in resp.json()["cities"]] == ["guadalajara-jal"]

    resp = client.put(f"{API}/populations/{state['id']}/cities", json={"cityIds": [city_id]}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"][0]["code"] == "DUPLICATE"

    resp = client.put(f"{API}/populations/{metro['id']}/cities", json={"cityIds": []}, headers=headers)
    assert resp.json()["cities"] == []

    resp = client.put(f"{API}/populations/{state['id']}/cities", json={"cityIds": [city_id]}, headers=headers)
    assert resp.status_code == 200


def _node(client, headers, city_id, code):
    return create(
        client,
        headers,
        "nodes",
        {
            "code": code,
            "name": f"Terminal {code}",
            "latitude": 20.6,
            "longitude": -103.3,
            "radius": 200,
            "cityId": city_id,
        },
    )


def test_node_slug_and_radius(authorized_client, geography):
    client, headers, _ = authorized_client
    node = _node(client, headers, geography["city"].id, "GDL01")
    assert node["slug"] == "n-terminal-gdl01-gdl01"

    resp = client.put(f"{API}/nodes/{node['id']}", json={"radius": 0.5}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"][0]["field"] == "radius"


def test_labels_node_count_and_metrics(authorized_client, geography):
    client, headers, session_factory = authorized_client
    city_id = geography["city"].id
    tourist = create(client, headers, "labels", {"name": "Tourist", "color": "#FF0000"})
    hub = create(client, headers, "labels", {"name": "Hub", "color": "#00FF00"})
    create(client, headers, "labels", {"name": "Unused", "color": "#0000FF"})
    first = _node(client, headers, city_id, "N1")
    second = _node(client, headers, city_id, "N2")

    resp = client.put(
        f"{API}/nodes/{first['id']}/labels", json={"labelIds": [tourist["id"], hub["id"]]}, headers=headers
    )
    assert resp.status_code == 200
    assert {label["name"] for label in resp.json()["labels"]} == {"Tourist", "Hub"}
    client.put(f"{API}/nodes/{second['id']}/labels", json={"labelIds": [tourist["id"]]}, headers=headers)

    resp = client.post(f"{API}/labels/list/all", json={}, headers=headers)
    counts = {label["name"]: label["nodeCount"] for label in resp.json()["data"]}
    assert counts == {"Tourist": 2, "Hub": 1, "Unused": 0}

    resp = client.get(f"{API}/labels/{tourist['id']}", headers=headers)
    assert resp.json()["nodeCount"] == 2

    resp = client.get(f"{API}/labels/metrics", headers=headers)
    assert resp.status_code == 200
    metrics = resp.json()
    assert metrics["totalLabels"] == 3
    assert metrics["labelsInUse"] == 2
    assert [(m["name"], m["nodeCount"]) for m in metrics["mostUsedLabels"]] == [("Tourist", 2), ("Hub", 1)]

    # Deleted nodes no longer count
    client.delete(f"{API}/nodes/{second['id']}", headers=headers)
    resp = client.get(f"{API}/labels/{tourist['id']}", headers=headers)
    assert resp.json()["nodeCount"] == 1

    session = session_factory()
    node = session.get(Node, first["id"])
    assert len(node.labels) == 2
    session.close()


def test_node_label_assignment_rejects_duplicates(authorized_client, geography):
    client, headers, _ = authorized_client
    label = create(client, headers, "labels", {"name": "Tourist", "color": "#FF0000"})
    node = _node(client, headers, geography["city"].id, "N1")

    resp = client.put(
        f"{API}/nodes/{node['id']}/labels", json={"labelIds": [label["id"], label["id"]]}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"][0]["code"] == "DUPLICATE_INPUT"

    resp = client.put(f"{API}/nodes/{node['id']}/labels", json={"labelIds": [404]}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"][0]["code"] == "NOT_FOUND"


def test_label_color_must_be_hex(authorized_client):
    client, headers, _ = authorized_client
    resp = client.post(f"{API}/labels/", json={"name": "Tourist", "color": "red"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"][0]["code"] == "INVALID_FORMAT"


class TestInstallationTypes:
    def test_system_locked_cannot_be_set_through_api(self, authorized_client):
        client, headers, _ = authorized_client
        created = create(
            client, headers, "installation-types", {"name": "Terminal", "code": "TERM", "systemLocked": True}
        )
        assert created["systemLocked"] is False

    def test_locked_type_cannot_change(self, authorized_client):
        client, headers, session_factory = authorized_client
        session = session_factory()
        locked = InstallationType(name="Terminal", code="TERM", system_locked=True)
        session.add(locked)
        session.commit()
        locked_id = locked.id
        session.close()

        resp = client.put(f"{API}/installation-types/{locked_id}", json={"name": "Station"}, headers=headers)
        assert resp.status_code == 400
        assert "system locked" in resp.json()["detail"]

        resp = client.delete(f"{API}/installation-types/{locked_id}", headers=headers)
        assert resp.status_code == 400

        resp = client.get(f"{API}/installation-types/{locked_id}", headers=headers)
        assert resp.json()["name"] == "Terminal"

    def test_event_type_assignment(self, authorized_client):
        client, headers, _ = authorized_client
        installation_type = create(client, headers, "installation-types", {"name": "Terminal", "code": "TERM"})
        boarding = create(client, headers, "event-types", {"name": "Boarding", "code": "BRD", "baseTime": 15})

        resp = client.put(
            f"{API}/installation-types/{installation_type['id']}/event-types",
            json={"eventTypeIds": [boarding["id"]]},
            headers=headers,
        )
        assert resp.status_code == 200
        assert [e["code"] for e in resp.json()["eventTypes"]] == ["BRD"]


def test_installation_amenities_must_be_installation_type(authorized_client):
    client, headers, session_factory = authorized_client
    session = session_factory()
    wifi = Amenity(name="Wi-Fi", category="technology", amenity_type="bus")
    lounge = Amenity(name="Lounge", category="comfort", amenity_type="installation")
    session.add_all([wifi, lounge])
    session.commit()
    wifi_id, lounge_id = wifi.id, lounge.id
    session.close()

    installation = create(client, headers, "installations", {"name": "Central Nueva"})

    resp = client.put(
        f"{API}/installations/{installation['id']}/amenities",
        json={"amenityIds": [wifi_id, lounge_id]},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["fieldErrors"][0]["value"] == [wifi_id]

    resp = client.put(
        f"{API}/installations/{installation['id']}/amenities",
        json={"amenityIds": [lounge_id]},
        headers=headers,
    )
    assert resp.status_code == 200
    assert [a["name"] for a in resp.json()["amenities"]] == ["Lounge"]


def test_amenity_validation(authorized_client):
    client, headers, _ = authorized_client
    resp = client.post(
        f"{API}/amenities/",
        json={"name": "Wi-Fi", "category": "luxury", "amenityType": "bus", "iconName": "Wifi Icon"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert {e["field"] for e in resp.json()["fieldErrors"]} == {"category", "iconName"}

    amenity = create(
        client, headers, "amenities", {"name": "Wi-Fi", "category": "technology", "iconName": "wifi"}
    )
    assert amenity["amenityType"] == "bus"
