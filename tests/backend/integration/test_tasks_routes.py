import pytest


pytestmark = pytest.mark.asyncio


async def create_project(client, headers, name="Inbox"):
    resp = await client.post("/api/projects", json={"name": name}, headers=headers)
    return resp.json()["project"]


async def create_task(client, headers, project_id, title="Write report", **extra):
    return await client.post("/api/tasks", json={"title": title, "projectId": project_id, **extra}, headers=headers)


async def test_task_crud(client, user_headers):
    user, headers = user_headers
    project = await create_project(client, headers, "Work")

    resp = await create_task(client, headers, project["id"], dueDate="2030-01-15T09:00:00Z", priority="HIGH")
    task = resp.json()["task"]
    assert resp.status_code == 201
    assert task["completed"] is False
    assert task["priority"] == "HIGH"
    assert task["dueDate"] == "2030-01-15T09:00:00Z"
    assert task["project"] == {"id": project["id"], "name": "Work", "color": None}
    assert task["userId"] == str(user.id)

    updated = await client.put(f"/api/tasks/{task['id']}", json={"completed": True}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["task"]["completed"] is True
    assert updated.json()["task"]["title"] == "Write report"

    got = await client.get(f"/api/tasks/{task['id']}", headers=headers)
    assert got.json()["task"]["completed"] is True

    deleted = await client.delete(f"/api/tasks/{task['id']}", headers=headers)
    assert deleted.json() == {"message": "Task deleted successfully"}
    missing = await client.get(f"/api/tasks/{task['id']}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "TASK_NOT_FOUND"


async def test_task_needs_own_project(client, create_user, auth_header_factory):
    alice, alice_pw = await create_user()
    bob, bob_pw = await create_user()
    alice_headers = await auth_header_factory(alice.email, alice_pw)
    bob_headers = await auth_header_factory(bob.email, bob_pw)

    alice_project = await create_project(client, alice_headers, "Alice only")
    bob_project = await create_project(client, bob_headers, "Bob's")

    resp = await create_task(client, bob_headers, alice_project["id"])
    assert resp.status_code == 404
    assert resp.json()["code"] == "PROJECT_NOT_FOUND"

    # Re-pointing an existing task to someone else's project is rejected too
    task = (await create_task(client, bob_headers, bob_project["id"])).json()["task"]
    moved = await client.put(f"/api/tasks/{task['id']}", json={"projectId": alice_project["id"]}, headers=bob_headers)
    assert moved.status_code == 404
    assert moved.json()["code"] == "PROJECT_NOT_FOUND"

    unchanged = await client.get(f"/api/tasks/{task['id']}", headers=bob_headers)
    assert unchanged.json()["task"]["projectId"] == bob_project["id"]

    # And Alice cannot see Bob's task
    hidden = await client.get(f"/api/tasks/{task['id']}", headers=alice_headers)
    assert hidden.status_code == 404


async def test_task_can_move_between_own_projects(client, user_headers):
    _, headers = user_headers
    first = await create_project(client, headers, "First")
    second = await create_project(client, headers, "Second")
    task = (await create_task(client, headers, first["id"])).json()["task"]

    moved = await client.put(f"/api/tasks/{task['id']}", json={"projectId": second["id"]}, headers=headers)
    assert moved.status_code == 200
    assert moved.json()["task"]["project"]["name"] == "Second"


async def test_task_filters(client, user_headers):
    _, headers = user_headers
    home = await create_project(client, headers, "Home")
    work = await create_project(client, headers, "Work")
    await create_task(client, headers, home["id"], "Buy milk", priority="LOW")
    await create_task(client, headers, home["id"], "Fix sink", completed=True)
    await create_task(client, headers, work["id"], "Ship release", priority="HIGH")

    everything = await client.get("/api/tasks", headers=headers)
    assert everything.json()["pagination"]["total"] == 3

    open_tasks = await client.get("/api/tasks?completed=false", headers=headers)
    assert {t["title"] for t in open_tasks.json()["tasks"]} == {"Buy milk", "Ship release"}

    done = await client.get("/api/tasks?completed=true", headers=headers)
    assert [t["title"] for t in done.json()["tasks"]] == ["Fix sink"]

    high = await client.get("/api/tasks?priority=HIGH", headers=headers)
    assert [t["title"] for t in high.json()["tasks"]] == ["Ship release"]

    by_project = await client.get(f"/api/tasks?projectId={home['id']}&sortBy=title&sortOrder=asc", headers=headers)
    assert [t["title"] for t in by_project.json()["tasks"]] == ["Buy milk", "Fix sink"]

    search = await client.get("/api/tasks?search=SINK", headers=headers)
    assert [t["title"] for t in search.json()["tasks"]] == ["Fix sink"]


async def test_task_filter_by_foreign_project(client, create_user, auth_header_factory):
    alice, alice_pw = await create_user()
    bob, bob_pw = await create_user()
    alice_project = await create_project(client, await auth_header_factory(alice.email, alice_pw))
    bob_headers = await auth_header_factory(bob.email, bob_pw)

    resp = await client.get(f"/api/tasks?projectId={alice_project['id']}", headers=bob_headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "PROJECT_NOT_FOUND"


async def test_task_validation(client, user_headers):
    _, headers = user_headers
    project = await create_project(client, headers)
    resp = await client.post(
        "/api/tasks",
        json={"title": "x", "projectId": project["id"], "priority": "URGENT", "dueDate": "someday"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert {d["field"] for d in resp.json()["details"]} == {"title", "priority", "dueDate"}


async def test_sort_by_priority_follows_severity(client, user_headers):
    _, headers = user_headers
    project = await create_project(client, headers)
    for title, priority in (("Later", "LOW"), ("Soon", "MEDIUM"), ("Now", "HIGH")):
        await create_task(client, headers, project["id"], title, priority=priority)

    desc = await client.get("/api/tasks?sortBy=priority&sortOrder=desc", headers=headers)
    assert [t["priority"] for t in desc.json()["tasks"]] == ["HIGH", "MEDIUM", "LOW"]

    asc = await client.get("/api/tasks?sortBy=priority&sortOrder=asc", headers=headers)
    assert [t["priority"] for t in asc.json()["tasks"]] == ["LOW", "MEDIUM", "HIGH"]
    assert asc.json()["pagination"]["total"] == 3
