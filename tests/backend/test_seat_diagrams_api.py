"""
Tests for seat diagram endpoints: grid generation and editing.
"""

API = "/api/v1/seat-diagrams"


def create_diagram(client, headers, **overrides):
    payload = {
        "name": "Executive 2+2",
        "maxCapacity": 60,
        "seatsPerFloor": [{"floorNumber": 1, "numRows": 10, "seatsLeft": 2, "seatsRight": 2}],
    }
    payload.update(overrides)
    resp = client.post(f"{API}/", json=payload, headers=headers)
    assert resp.status_code == 201, resp.json()
    return resp.json()


def get_spaces(client, headers, diagram_id):
    resp = client.get(f"{API}/{diagram_id}/spaces", headers=headers)
    assert resp.status_code == 200
    return resp.json()["data"]


def seats(spaces):
    return [s for s in spaces if s["spaceType"] == "SEAT"]


class TestCreate:
    def test_generates_grid(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        assert diagram["totalSeats"] == 40
        assert diagram["seatsPerFloor"] == [
            {"floorNumber": 1, "numRows": 10, "seatsLeft": 2, "seatsRight": 2}
        ]

        spaces = get_spaces(client, headers, diagram["id"])
        assert len(spaces) == 50
        first_row = [s for s in spaces if s["positionY"] == 1]
        assert [s["seatNumber"] for s in first_row] == ["1", "2", None, "3", "4"]
        assert first_row[2]["spaceType"] == "HALLWAY"
        assert first_row[0]["meta"]["isWindow"] is True
        assert first_row[0]["seatType"] == "REGULAR"

    def test_default_configuration(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers, seatsPerFloor=None, maxCapacity=40)
        assert diagram["totalSeats"] == 40

    def test_two_floors(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(
            client,
            headers,
            numFloors=2,
            seatsPerFloor=[
                {"floorNumber": 1, "numRows": 3, "seatsLeft": 1, "seatsRight": 1},
                {"floorNumber": 2, "numRows": 10, "seatsLeft": 2, "seatsRight": 2},
            ],
        )
        assert diagram["totalSeats"] == 46

        spaces = get_spaces(client, headers, diagram["id"])
        upper = [s["seatNumber"] for s in seats(spaces) if s["floorNumber"] == 2]
        assert upper[0] == "7"

    def test_capacity_exceeded(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(
            f"{API}/",
            json={"name": "Tiny", "maxCapacity": 30},
            headers=headers,
        )
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0]["message"] == (
            "Configured seats (40) exceed the maximum capacity (30)"
        )

    def test_invalid_floor_configuration(self, authorized_client):
        client, headers, _ = authorized_client
        resp = client.post(
            f"{API}/",
            json={
                "name": "Broken",
                "maxCapacity": 100,
                "numFloors": 2,
                "seatsPerFloor": [{"floorNumber": 1, "numRows": 30, "seatsLeft": 4, "seatsRight": 2}],
            },
            headers=headers,
        )
        assert resp.status_code == 400
        messages = [e["message"] for e in resp.json()["fieldErrors"]]
        assert "Seats per floor must configure floors 1 to 2 exactly once" in messages
        assert "Floor 1 must have between 1 and 25 rows" in messages
        assert "Floor 1 must have between 1 and 3 seats on the left side" in messages


class TestUpdate:
    def test_changing_configuration_regenerates(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.put(
            f"{API}/{diagram['id']}",
            json={"seatsPerFloor": [{"floorNumber": 1, "numRows": 5, "seatsLeft": 1, "seatsRight": 2}]},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["totalSeats"] == 15
        assert len(get_spaces(client, headers, diagram["id"])) == 20

    def test_rename_keeps_grid(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)
        client.post(f"{API}/{diagram['id']}/floors/1/rows", headers=headers)

        resp = client.put(f"{API}/{diagram['id']}", json={"name": "Renamed"}, headers=headers)
        assert resp.json()["name"] == "Renamed"
        assert resp.json()["totalSeats"] == 44


class TestGridEditing:
    def test_add_column(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.post(f"{API}/{diagram['id']}/floors/1/columns", json={"afterX": 4}, headers=headers)
        assert resp.status_code == 200
        spaces = resp.json()["data"]
        assert len(seats(spaces)) == 50
        assert [s["seatNumber"] for s in spaces if s["positionX"] == 5][:2] == ["41", "42"]

        resp = client.get(f"{API}/{diagram['id']}", headers=headers)
        assert resp.json()["totalSeats"] == 50

    def test_add_column_beyond_limit(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)
        client.post(f"{API}/{diagram['id']}/floors/1/columns", json={"afterX": 4}, headers=headers)

        resp = client.post(f"{API}/{diagram['id']}/floors/1/columns", json={"afterX": 5}, headers=headers)
        assert resp.status_code == 400
        assert "maximum of 3 columns per side" in resp.json()["detail"]

    def test_remove_column(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.delete(f"{API}/{diagram['id']}/floors/1/columns/0", headers=headers)
        assert resp.status_code == 200
        assert len(seats(resp.json()["data"])) == 30

        resp = client.delete(f"{API}/{diagram['id']}/floors/1/columns/1", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot remove the main hallway of floor 1"

    def test_rows(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.post(f"{API}/{diagram['id']}/floors/1/rows", headers=headers)
        assert resp.status_code == 200
        assert max(s["positionY"] for s in resp.json()["data"]) == 11

        resp = client.delete(f"{API}/{diagram['id']}/floors/1/rows", headers=headers)
        resp = client.delete(f"{API}/{diagram['id']}/floors/1/rows", headers=headers)
        assert max(s["positionY"] for s in resp.json()["data"]) == 9
        assert client.get(f"{API}/{diagram['id']}", headers=headers).json()["totalSeats"] == 36

    def test_floor_out_of_range(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.post(f"{API}/{diagram['id']}/floors/2/rows", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid floor number 2. Must be between 1 and 1"

    def test_missing_diagram(self, authorized_client):
        client, headers, _ = authorized_client
        assert client.post(f"{API}/404/floors/1/rows", headers=headers).status_code == 404
        assert client.get(f"{API}/404/spaces", headers=headers).status_code == 404


class TestReplaceSpaces:
    def test_replace(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        layout = [
            {"positionX": 0, "positionY": 1, "seatNumber": "A1", "seatType": "PREMIUM"},
            {"positionX": 1, "positionY": 1, "spaceType": "HALLWAY"},
            {"positionX": 2, "positionY": 1, "seatNumber": "A2"},
            {"positionX": 0, "positionY": 2, "spaceType": "BATHROOM"},
        ]
        resp = client.put(f"{API}/{diagram['id']}/spaces", json={"spaces": layout}, headers=headers)
        assert resp.status_code == 200
        spaces = resp.json()["data"]
        assert len(spaces) == 4
        assert spaces[0]["seatType"] == "PREMIUM"
        assert spaces[0]["meta"]["isWindow"] is True

        assert client.get(f"{API}/{diagram['id']}", headers=headers).json()["totalSeats"] == 2

    def test_invalid_layout_keeps_old_grid(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        layout = [
            {"positionX": 0, "positionY": 1, "seatNumber": "1"},
            {"positionX": 1, "positionY": 1, "seatNumber": "1"},
            {"positionX": 2, "positionY": 1},
        ]
        resp = client.put(f"{API}/{diagram['id']}/spaces", json={"spaces": layout}, headers=headers)
        assert resp.status_code == 400
        codes = {e["code"] for e in resp.json()["fieldErrors"]}
        assert codes == {"DUPLICATE", "INVALID_VALUE"}

        assert len(get_spaces(client, headers, diagram["id"])) == 50

    def test_negative_position_is_422(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.put(
            f"{API}/{diagram['id']}/spaces",
            json={"spaces": [{"positionX": -1, "positionY": 1, "seatNumber": "1"}]},
            headers=headers,
        )
        assert resp.status_code == 422


class TestCapacity:
    def test_adding_floor_beyond_capacity(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers, seatsPerFloor=None, maxCapacity=40)

        resp = client.put(f"{API}/{diagram['id']}", json={"numFloors": 2}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0]["message"] == (
            "Configured seats (80) exceed the maximum capacity (40)"
        )
        assert client.get(f"{API}/{diagram['id']}", headers=headers).json()["totalSeats"] == 40

    def test_adding_floor_within_capacity(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers, maxCapacity=80)

        resp = client.put(f"{API}/{diagram['id']}", json={"numFloors": 2}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["totalSeats"] == 80
        assert len(resp.json()["seatsPerFloor"]) == 2

    def test_lowering_capacity_below_seats(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers)

        resp = client.put(f"{API}/{diagram['id']}", json={"maxCapacity": 10}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["fieldErrors"][0]["message"] == (
            "Current seats (40) exceed the maximum capacity (10)"
        )

        resp = client.put(f"{API}/{diagram['id']}", json={"maxCapacity": 40}, headers=headers)
        assert resp.status_code == 200

    def test_grid_edit_beyond_capacity(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers, seatsPerFloor=None, maxCapacity=40)

        resp = client.post(f"{API}/{diagram['id']}/floors/1/rows", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Seats (44) would exceed the maximum capacity (40)"

        resp = client.post(f"{API}/{diagram['id']}/floors/1/columns", json={"afterX": 4}, headers=headers)
        assert resp.status_code == 400
        assert len(get_spaces(client, headers, diagram["id"])) == 50

    def test_replacing_spaces_beyond_capacity(self, authorized_client):
        client, headers, _ = authorized_client
        diagram = create_diagram(client, headers, maxCapacity=41)

        layout = [
            {"positionX": x, "positionY": y, "seatNumber": f"{y}-{x}"} for y in range(1, 15) for x in range(3)
        ]
        resp = client.put(f"{API}/{diagram['id']}/spaces", json={"spaces": layout}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Seats (42) would exceed the maximum capacity (41)"
