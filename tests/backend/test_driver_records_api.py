from datetime import date, timedelta

API = "/api/v1"


def days(n: int) -> str:
    return (date.today() + timedelta(days=n)).isoformat()


def create_driver(client, headers, key="D-001"):
    resp = client.post(
        f"{API}/drivers/",
        json={"driverKey": key, "payrollKey": f"P-{key}", "firstName": "Juan", "lastName": "Pérez"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.json()
    return resp.json()


def time_off_payload(**overrides):
    payload = {"startDate": days(10), "endDate": days(15), "type": "VACATION", "reason": "Summer"}
    payload.update(overrides)
    return payload


class TestTimeOffs:
    def test_create_and_list(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/time-offs"

        resp = client.post(f"{base}/", json=time_off_payload(), headers=headers)
        assert resp.status_code == 201
        time_off = resp.json()
        assert time_off["driverId"] == driver["id"]
        assert time_off["startDate"] == days(10)

        resp = client.post(f"{base}/list", json={}, headers=headers)
        assert resp.status_code == 200
        assert [t["id"] for t in resp.json()["data"]] == [time_off["id"]]
        assert resp.json()["pagination"]["totalCount"] == 1

        resp = client.get(f"{base}/{time_off['id']}", headers=headers)
        assert resp.json()["reason"] == "Summer"

    def test_list_is_scoped_to_driver(self, authorized_client):
        client, headers, _ = authorized_client
        ana = create_driver(client, headers, "D-001")
        luis = create_driver(client, headers, "D-002")
        client.post(f"{API}/drivers/{ana['id']}/time-offs/", json=time_off_payload(), headers=headers)

        resp = client.post(
            f"{API}/drivers/{luis['id']}/time-offs/list/all",
            json={"filters": {"driverId": ana["id"]}},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {"data": []}

    def test_overlap_rejected(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/time-offs"
        client.post(f"{base}/", json=time_off_payload(), headers=headers)

        resp = client.post(f"{base}/", json=time_off_payload(startDate=days(15), endDate=days(18)), headers=headers)
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0] == {
            "field": "startDate",
            "code": "OVERLAPPING_TIME_OFF",
            "message": "This time-off period overlaps with an existing time-off",
            "value": days(15),
        }

        resp = client.post(f"{base}/", json=time_off_payload(startDate=days(16), endDate=days(18)), headers=headers)
        assert resp.status_code == 201

    def test_date_rules(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/time-offs"

        resp = client.post(f"{base}/", json=time_off_payload(startDate=days(5), endDate=days(1)), headers=headers)
        assert resp.json()["fieldErrors"][0]["message"] == "Start date must be less than or equal to end date"

        resp = client.post(f"{base}/", json=time_off_payload(startDate=days(-2)), headers=headers)
        assert resp.json()["fieldErrors"][0]["message"] == "Start date cannot be in the past"

    def test_update_and_delete(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/time-offs"
        time_off = client.post(f"{base}/", json=time_off_payload(), headers=headers).json()

        resp = client.put(f"{base}/{time_off['id']}", json={"endDate": days(20), "type": "LEAVE"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["endDate"] == days(20)
        assert resp.json()["type"] == "LEAVE"

        resp = client.delete(f"{base}/{time_off['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["deletedAt"] is not None
        assert client.get(f"{base}/{time_off['id']}", headers=headers).status_code == 404

        # The deleted range is free again
        resp = client.post(f"{base}/", json=time_off_payload(), headers=headers)
        assert resp.status_code == 201

    def test_time_off_of_another_driver_is_404(self, authorized_client):
        client, headers, _ = authorized_client
        ana = create_driver(client, headers, "D-001")
        luis = create_driver(client, headers, "D-002")
        time_off = client.post(
            f"{API}/drivers/{ana['id']}/time-offs/", json=time_off_payload(), headers=headers
        ).json()

        other = f"{API}/drivers/{luis['id']}/time-offs/{time_off['id']}"
        assert client.get(other, headers=headers).status_code == 404
        assert client.put(other, json={"reason": "x"}, headers=headers).status_code == 404
        assert client.delete(other, headers=headers).status_code == 404

    def test_missing_driver(self, authorized_client):
        client, headers, _ = authorized_client

        resp = client.post(f"{API}/drivers/999/time-offs/", json=time_off_payload(), headers=headers)
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0]["message"] == "Driver with id 999 not found"

        resp = client.post(f"{API}/drivers/999/time-offs/list", json={}, headers=headers)
        assert resp.status_code == 404

    def test_driver_module_grants_access(self, authorized_client, user_headers):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/time-offs"

        resp = client.post(f"{base}/", json=time_off_payload(), headers=user_headers("inventory_drivers"))
        assert resp.status_code == 201
        resp = client.post(f"{base}/list", json={}, headers=user_headers("inventory_buses"))
        assert resp.status_code == 403


class TestMedicalChecks:
    def test_create_derives_next_check_date(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/medical-checks"

        resp = client.post(
            f"{base}/",
            json={"checkDate": "2025-01-10", "daysUntilNextCheck": 180, "result": "FIT", "notes": "Annual"},
            headers=headers,
        )
        assert resp.status_code == 201
        check = resp.json()
        assert check["nextCheckDate"] == "2025-07-09"
        assert check["source"] == "MANUAL"

        resp = client.post(f"{base}/list/all", json={}, headers=headers)
        assert [c["id"] for c in resp.json()["data"]] == [check["id"]]
        assert client.get(f"{base}/{check['id']}", headers=headers).json()["result"] == "FIT"

    def test_invalid_values(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)

        resp = client.post(
            f"{API}/drivers/{driver['id']}/medical-checks/",
            json={"checkDate": "2025-01-10", "daysUntilNextCheck": 0, "result": "OK"},
            headers=headers,
        )
        assert resp.status_code == 400
        assert {e["field"] for e in resp.json()["fieldErrors"]} == {"result", "daysUntilNextCheck"}

    def test_checks_cannot_be_changed(self, authorized_client):
        client, headers, _ = authorized_client
        driver = create_driver(client, headers)
        base = f"{API}/drivers/{driver['id']}/medical-checks"
        check = client.post(
            f"{base}/",
            json={"checkDate": "2025-01-10", "daysUntilNextCheck": 30, "result": "LIMITED"},
            headers=headers,
        ).json()

        assert client.put(f"{base}/{check['id']}", json={"result": "FIT"}, headers=headers).status_code == 405
        assert client.delete(f"{base}/{check['id']}", headers=headers).status_code == 405
