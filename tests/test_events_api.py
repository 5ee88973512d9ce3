"""
Event endpoint tests — creating events, joining and leaving them, and the
error bodies returned when an event rule is broken.

The fixed clock puts "now" at 2024-05-01 12:00 UTC.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.models import (
    Comment, EventOption, EventParticipant, Post, PostWatcher, Wall, participant_options,
)


async def _setup(client: AsyncClient) -> dict:
    org = (await client.post("/api/v1/organizations", json={"name": "Acme", "short_name": "acme"})).json()
    users = []
    for i, name in enumerate(("Hana", "Gus", "Ida")):
        resp = await client.post("/api/v1/users", json={
            "organization_id": org["id"],
            "first_name": name,
            "last_name": "Tester",
            "email": f"user{i}@acme.example.com",
        })
        users.append(resp.json())
    office = (await client.post(f"/api/v1/organizations/{org['id']}/offices", json={"name": "Vilnius"})).json()
    headers = {"X-Organization-Id": str(org["id"]), "X-User-Id": str(users[0]["id"])}
    event_type = (await client.post("/api/v1/events/types", json={"name": "Sports"}, headers=headers)).json()
    return {"org": org, "users": users, "office": office, "type": event_type, "headers": headers}


def _headers(data: dict, user_index: int) -> dict:
    return {"X-Organization-Id": str(data["org"]["id"]), "X-User-Id": str(data["users"][user_index]["id"])}


def _event_payload(data: dict, **overrides) -> dict:
    payload = {
        "name": "Football",
        "description": "Friendly match",
        "place": "Stadium",
        "type_id": data["type"]["id"],
        "start_date": "2024-06-01T18:00:00Z",
        "end_date": "2024-06-01T20:00:00Z",
        "registration_deadline": "2024-05-30T12:00:00Z",
        "max_participants": 2,
        "max_choices": 1,
        "options": ["Goalkeeper", "Striker"],
    }
    payload.update(overrides)
    return payload


async def _create_event(client: AsyncClient, data: dict, **overrides) -> dict:
    resp = await client.post("/api/v1/events", json=_event_payload(data, **overrides), headers=data["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_event_types(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.get("/api/v1/events/types", headers=data["headers"])
    assert resp.status_code == 200
    assert [t["name"] for t in resp.json()] == ["Sports"]
    assert resp.json()[0]["is_shown_with_main_events"] is True


@pytest.mark.asyncio
async def test_missing_identity_headers(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/events/types")
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_event(async_client: AsyncClient):
    """The creator hosts the event and it gets its own wall and options."""
    data = await _setup(async_client)
    event = await _create_event(async_client, data, office_ids=[data["office"]["id"]])

    assert event["name"] == "Football"
    assert event["location"] == "Stadium"
    assert event["host_user_id"] == data["users"][0]["id"]
    assert event["host_user_full_name"] == "Hana Tester"
    assert event["offices_name"] == ["Vilnius"]
    assert event["is_for_all_offices"] is False
    assert event["wall_id"] is not None
    assert [o["option"] for o in event["options"]] == ["Goalkeeper", "Striker"]
    assert event["participating_status"] == 0
    assert event["going_count"] == 0


@pytest.mark.asyncio
async def test_create_event_deadline_defaults_to_start(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data, registration_deadline=None)
    assert event["registration_deadline"] == event["start_date"]


@pytest.mark.asyncio
async def test_create_event_deadline_after_start(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.post(
        "/api/v1/events",
        json=_event_payload(data, registration_deadline="2024-06-02T12:00:00Z"),
        headers=data["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventRegistrationDeadlineGreaterThanStartDate"


@pytest.mark.asyncio
async def test_create_event_with_expired_deadline(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.post(
        "/api/v1/events",
        json=_event_payload(
            data,
            start_date="2024-05-01T18:00:00Z",
            end_date="2024-05-01T20:00:00Z",
            registration_deadline="2024-04-30T12:00:00Z",
        ),
        headers=data["headers"],
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "detail": "EventRegistrationDeadlineIsExpired",
        "code": "EventRegistrationDeadlineIsExpired",
    }


@pytest.mark.asyncio
async def test_create_event_start_after_end(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.post(
        "/api/v1/events",
        json=_event_payload(data, end_date="2024-06-01T10:00:00Z"),
        headers=data["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventStartDateGreaterThanEndDate"


@pytest.mark.asyncio
async def test_create_event_unknown_type(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.post(
        "/api/v1/events", json=_event_payload(data, type_id=99999), headers=data["headers"]
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventTypeDoesNotExist"


@pytest.mark.asyncio
async def test_create_event_invalid_max_choices(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.post(
        "/api/v1/events", json=_event_payload(data, max_choices=3), headers=data["headers"]
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventInvalidMaxChoices"


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_event_and_options(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data)

    resp = await async_client.get(f"/api/v1/events/{event['id']}", headers=_headers(data, 1))
    assert resp.status_code == 200
    assert resp.json()["id"] == event["id"]

    resp = await async_client.get(f"/api/v1/events/{event['id']}/options", headers=_headers(data, 1))
    assert resp.status_code == 200
    assert resp.json()["max_choices"] == 1
    assert len(resp.json()["options"]) == 2


@pytest.mark.asyncio
async def test_get_missing_event(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.get("/api/v1/events/does-not-exist", headers=data["headers"])
    assert resp.status_code == 404
    assert resp.json()["code"] == "EventDoesNotExist"


@pytest.mark.asyncio
async def test_event_is_invisible_to_other_organization(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data)
    headers = {"X-Organization-Id": "99999", "X-User-Id": str(data["users"][0]["id"])}
    resp = await async_client.get(f"/api/v1/events/{event['id']}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_events_and_my_events(async_client: AsyncClient):
    data = await _setup(async_client)
    football = await _create_event(async_client, data)
    chess = await _create_event(
        async_client, data, name="Chess", place="Library", options=[], max_choices=0,
        start_date="2024-05-20T18:00:00Z", end_date="2024-05-20T20:00:00Z",
        registration_deadline=None,
    )

    resp = await async_client.get("/api/v1/events", headers=data["headers"])
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()] == [chess["id"], football["id"]]
    assert all(e["is_creator"] for e in resp.json())

    resp = await async_client.get(
        "/api/v1/events/mine", params={"filter": "host", "search": "libr"}, headers=data["headers"]
    )
    assert resp.status_code == 200
    assert [e["name"] for e in resp.json()] == ["Chess"]

    resp = await async_client.get("/api/v1/events/mine", headers=data["headers"])
    assert resp.json() == []


# ---------------------------------------------------------------------------
# Join / leave
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_join_event_with_option(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data)
    striker = event["options"][1]["id"]

    resp = await async_client.post(
        f"/api/v1/events/{event['id']}/participants",
        json={"attend_status": 1, "chosen_option_ids": [striker]},
        headers=_headers(data, 1),
    )
    assert resp.status_code == 200
    details = resp.json()
    assert details["participating_status"] == 1
    assert details["going_count"] == 1
    assert details["participants"][0]["full_name"] == "Gus Tester"
    assert {o["id"]: o["participants_count"] for o in details["options"]}[striker] == 1


@pytest.mark.asyncio
async def test_join_event_requires_option(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data)
    resp = await async_client.post(
        f"/api/v1/events/{event['id']}/participants",
        json={"attend_status": 1},
        headers=_headers(data, 1),
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventNeedsOptions"


@pytest.mark.asyncio
async def test_event_capacity(async_client: AsyncClient):
    """Once max_participants attend, further attendees are rejected; re-joining is not."""
    data = await _setup(async_client)
    event = await _create_event(async_client, data, options=[], max_choices=0)
    url = f"/api/v1/events/{event['id']}/participants"

    for index in (0, 1):
        resp = await async_client.post(url, json={"attend_status": 1}, headers=_headers(data, index))
        assert resp.status_code == 200

    resp = await async_client.post(url, json={"attend_status": 1}, headers=_headers(data, 2))
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventIsFull"

    resp = await async_client.post(url, json={"attend_status": 1}, headers=_headers(data, 1))
    assert resp.status_code == 200
    assert resp.json()["going_count"] == 2
    assert resp.json()["is_full"] is True


@pytest.mark.asyncio
async def test_change_attend_status(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data, options=[], max_choices=0)
    url = f"/api/v1/events/{event['id']}/participants"

    await async_client.post(url, json={"attend_status": 1}, headers=_headers(data, 1))
    resp = await async_client.post(url, json={"attend_status": 2}, headers=_headers(data, 1))
    assert resp.status_code == 200
    assert resp.json()["going_count"] == 0
    assert resp.json()["maybe_going_count"] == 1
    assert len(resp.json()["participants"]) == 1


@pytest.mark.asyncio
async def test_not_going_disallowed(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data, options=[], max_choices=0, allow_not_going=False)
    resp = await async_client.post(
        f"/api/v1/events/{event['id']}/participants",
        json={"attend_status": 3},
        headers=_headers(data, 1),
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventAttendStatusNotAllowed"


@pytest.mark.asyncio
async def test_join_after_deadline(async_client: AsyncClient, fixed_clock):
    data = await _setup(async_client)
    event = await _create_event(async_client, data, options=[], max_choices=0)

    fixed_clock.now = fixed_clock.now.replace(month=5, day=31)
    resp = await async_client.post(
        f"/api/v1/events/{event['id']}/participants",
        json={"attend_status": 1},
        headers=_headers(data, 1),
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventRegistrationDeadlineIsExpired"


@pytest.mark.asyncio
async def test_join_missing_event(async_client: AsyncClient):
    data = await _setup(async_client)
    resp = await async_client.post(
        "/api/v1/events/does-not-exist/participants", json={"attend_status": 1}, headers=data["headers"]
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "EventDoesNotExist"


@pytest.mark.asyncio
async def test_leave_event(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data, options=[], max_choices=0)
    url = f"/api/v1/events/{event['id']}/participants"

    await async_client.post(url, json={"attend_status": 1}, headers=_headers(data, 1))
    resp = await async_client.delete(f"{url}/me", headers=_headers(data, 1))
    assert resp.status_code == 204
    resp = await async_client.delete(f"{url}/me", headers=_headers(data, 1))
    assert resp.status_code == 404

    resp = await async_client.get(f"/api/v1/events/{event['id']}", headers=_headers(data, 1))
    assert resp.json()["participants"] == []


@pytest.mark.asyncio
async def test_delete_event(async_client: AsyncClient):
    data = await _setup(async_client)
    event = await _create_event(async_client, data)

    resp = await async_client.delete(f"/api/v1/events/{event['id']}", headers=data["headers"])
    assert resp.status_code == 204
    resp = await async_client.get(f"/api/v1/events/{event['id']}", headers=data["headers"])
    assert resp.status_code == 404
    resp = await async_client.delete(f"/api/v1/events/{event['id']}", headers=data["headers"])
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_event_removes_wall_and_dependent_rows(async_client: AsyncClient, db_session: AsyncSession):
    """Participants, options and the event wall with its posts and comments go with the event."""
    data = await _setup(async_client)
    event = await _create_event(async_client, data)
    await async_client.post(
        f"/api/v1/events/{event['id']}/participants",
        json={"attend_status": 1, "chosen_option_ids": [event["options"][0]["id"]]},
        headers=_headers(data, 1),
    )
    post = (await async_client.post(f"/api/v1/walls/{event['wall_id']}/posts", json={
        "message_body": "Who brings the ball?", "author_id": data["users"][1]["id"],
    })).json()
    resp = await async_client.post(f"/api/v1/posts/{post['id']}/comments", json={
        "message_body": "I will", "author_id": data["users"][2]["id"],
    })
    assert resp.status_code == 201

    resp = await async_client.delete(f"/api/v1/events/{event['id']}", headers=data["headers"])
    assert resp.status_code == 204

    async def count(model, *criteria) -> int:
        return (await db_session.execute(select(func.count()).select_from(model).where(*criteria))).scalar_one()

    assert await count(Wall, Wall.id == event["wall_id"]) == 0
    assert await count(Post, Post.wall_id == event["wall_id"]) == 0
    assert await count(Comment, Comment.post_id == post["id"]) == 0
    assert await count(PostWatcher, PostWatcher.post_id == post["id"]) == 0
    assert await count(EventParticipant, EventParticipant.event_id == event["id"]) == 0
    assert await count(EventOption, EventOption.event_id == event["id"]) == 0
    participant_choices = select(func.count()).select_from(participant_options)
    assert (await db_session.execute(participant_choices)).scalar_one() == 0
