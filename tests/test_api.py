from datetime import date, timedelta

from timesheets.schemas.employee import EmployeeCreate
from timesheets.services.selector import week_ending


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to the Timesheets API"}


def test_login_does_not_reveal_which_part_was_wrong(client, alice):
    bad_password = client.post("/auth/token", data={"username": "alice", "password": "nope"})
    bad_user = client.post("/auth/token", data={"username": "nobody", "password": "password"})
    assert bad_password.status_code == bad_user.status_code == 401
    assert bad_password.json() == bad_user.json()


def test_me_and_password_change(client, alice, login):
    headers = login("alice", "password")
    me = client.get("/api/v1/users/me", headers=headers)
    assert me.json()["user_name"] == "alice"

    response = client.put("/api/v1/users/me/password", json={"new_password": "x"}, headers=headers)
    assert response.status_code == 204
    login("alice", "x")


def test_admin_manages_employees(client, login):
    headers = login("admin", "admin123")
    created = client.post("/api/v1/admin/employees", json={"user_name": "bob", "name": "Bob"}, headers=headers)
    assert created.status_code == 201
    assert created.json()["number"] == 1

    duplicate = client.post("/api/v1/admin/employees", json={"user_name": "BOB"}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["field"] == "user_name"

    renamed = client.put("/api/v1/admin/employees/bob", json={"name": "Robert"}, headers=headers)
    assert renamed.json()["name"] == "Robert"

    assert client.delete("/api/v1/admin/employees/admin", headers=headers).status_code == 204
    assert client.delete("/api/v1/admin/employees/bob", headers=headers).status_code == 204
    names = [e["user_name"] for e in client.get("/api/v1/admin/employees", headers=headers).json()]
    assert names == ["admin"]


def test_admin_routes_need_admin_role(client, alice, login):
    headers = login("alice", "password")
    assert client.get("/api/v1/admin/employees", headers=headers).status_code == 403


def test_timesheet_lifecycle(client, alice, login):
    headers = login("alice", "password")
    assert client.get("/api/v1/timesheets/current", headers=headers).status_code == 404

    created = client.post("/api/v1/timesheets", json={}, headers=headers)
    assert created.status_code == 201
    sheet = created.json()
    assert sheet["week_ending"] == week_ending(date.today()).isoformat()
    assert sheet["editable"] is True
    assert len(sheet["rows"]) == 5

    grid = {"hours": [["8", "8", "", "", "", "", ""]] + [[""] * 7] * 5, "notes": ["a", "b"], "overtime": 1.5}
    edited = client.put(f"/api/v1/timesheets/{sheet['timesheet_id']}", json=grid, headers=headers)
    assert edited.status_code == 200, edited.text
    body = edited.json()
    assert len(body["rows"]) == 6
    assert body["rows"][0]["hours"][:2] == [8.0, 8.0]
    assert body["rows"][1]["notes"] == "b"
    assert body["overtime"] == 1.5

    current = client.get("/api/v1/timesheets/current", headers=headers).json()
    assert current["timesheet_id"] == sheet["timesheet_id"]
    assert len(client.get("/api/v1/timesheets", headers=headers).json()) == 1


def test_invalid_grid_is_rejected_with_messages(client, alice, login):
    headers = login("alice", "password")
    sheet = client.post("/api/v1/timesheets", json={}, headers=headers).json()
    response = client.put(
        f"/api/v1/timesheets/{sheet['timesheet_id']}",
        json={"hours": [["25", "", "", "", "", "", ""]]},
        headers=headers,
    )
    assert response.status_code == 422
    assert response.json()["detail"] == ["Total for Sat exceeds 24 hours (25.0 h)."]


def test_past_week_is_read_only(client, alice, login):
    headers = login("alice", "password")
    last_week = week_ending(date.today()) - timedelta(days=7)
    sheet = client.post("/api/v1/timesheets", json={"week_ending": last_week.isoformat()}, headers=headers).json()
    assert sheet["editable"] is False
    response = client.put(f"/api/v1/timesheets/{sheet['timesheet_id']}", json={"hours": []}, headers=headers)
    assert response.status_code == 403


def test_unknown_timesheet(client, alice, login):
    headers = login("alice", "password")
    assert client.get("/api/v1/timesheets/404", headers=headers).status_code == 404
    assert client.put("/api/v1/timesheets/404", json={"hours": []}, headers=headers).status_code == 404


def test_admin_sees_every_timesheet(client, alice, login):
    client.post("/api/v1/timesheets", json={}, headers=login("alice", "password"))
    admin_headers = login("admin", "admin123")
    sheets = client.get("/api/v1/admin/timesheets", headers=admin_headers).json()
    assert [ts["owner"]["user_name"] for ts in sheets] == ["alice"]


def test_other_employees_timesheets_are_off_limits(client, directory, alice, login):
    sheet = client.post("/api/v1/timesheets", json={}, headers=login("alice", "password")).json()
    url = f"/api/v1/timesheets/{sheet['timesheet_id']}"
    directory.add(EmployeeCreate(user_name="bob"))
    bob = login("bob", "password")

    assert client.get(url, headers=bob).status_code == 403
    assert client.put(url, json={"hours": [["9"] * 7]}, headers=bob).status_code == 403
    admin = login("admin", "admin123")
    assert client.get(url, headers=admin).json()["rows"][0]["hours"] == [0.0] * 7
