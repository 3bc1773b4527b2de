from __future__ import annotations

import asyncio
import uuid

import pytest
from sqlalchemy import func, select, update

from peerlearn.core import database
from peerlearn.core.exceptions import Forbidden
from peerlearn.models.chat.chat_room import ChatRoom, ChatRoomParticipant
from peerlearn.services.chat.chat_service import ChatRoomService
from peerlearn.services.subject_service import SubjectService
from peerlearn.services.tutoring_service import TutoringRequestService
from tests.conftest import auth


async def open_room(client, user, tutoring_request_id, **extra):
    body = {"tutoring_request_id": str(tutoring_request_id), **extra}
    return await client.post("/api/chat/rooms", json=body, headers=auth(user))


async def test_room_is_created_once_per_request(client, alice, brian, accepted_request):
    from_alice = await open_room(client, alice, accepted_request.id)
    from_brian = await open_room(client, brian, accepted_request.id)

    assert from_alice.status_code == 200
    assert from_brian.status_code == 200
    room = from_alice.json()
    assert from_brian.json()["id"] == room["id"]
    assert room["title"] == "Study Session Chat"
    assert {p["id"] for p in room["participants"]} == {str(alice.id), str(brian.id)}
    assert {p["full_name"] for p in room["participants"]} == {"Alice Johnson", "Brian Lee"}
    assert room["last_activity"] is not None


async def test_custom_title_is_kept(client, alice, accepted_request):
    resp = await open_room(client, alice, accepted_request.id, title="Kinematics revision")
    assert resp.json()["title"] == "Kinematics revision"


async def test_concurrent_get_or_create_yields_a_single_room(session, alice, brian, accepted_request):
    async def open_as(user):
        async with database.AsyncSessionLocal() as own_session:
            return await ChatRoomService(own_session).get_or_create_for_request(accepted_request.id, user.id)

    first, second = await asyncio.gather(open_as(alice), open_as(brian))

    assert first["id"] == second["id"]
    rooms = await session.scalar(
        select(func.count(ChatRoom.id)).where(ChatRoom.tutoring_request_id == accepted_request.id)
    )
    participants = await session.scalar(
        select(func.count(ChatRoomParticipant.id)).where(ChatRoomParticipant.chat_room_id == uuid.UUID(first["id"]))
    )
    assert rooms == 1
    assert participants == 2


async def test_non_participant_cannot_open_room(client, session, chloe, accepted_request):
    resp = await open_room(client, chloe, accepted_request.id)

    assert resp.status_code == 403
    rooms = await session.scalar(select(func.count(ChatRoom.id)))
    assert rooms == 0


async def test_unknown_request_is_not_found(client, alice):
    resp = await open_room(client, alice, uuid.uuid4())
    assert resp.status_code == 404


async def test_request_id_is_required(client, alice):
    resp = await client.post("/api/chat/rooms", json={"title": "No request"}, headers=auth(alice))
    assert resp.status_code == 400


async def test_list_rooms_includes_subject_and_participants(client, alice, brian, chloe, accepted_request):
    room = (await open_room(client, alice, accepted_request.id)).json()

    listed = (await client.get("/api/chat/rooms", headers=auth(brian))).json()
    assert len(listed) == 1
    assert listed[0]["id"] == room["id"]
    assert listed[0]["subject"] == "Physics"
    assert listed[0]["unread_count"] == 0
    assert {p["full_name"] for p in listed[0]["participants"]} == {"Alice Johnson", "Brian Lee"}

    assert (await client.get("/api/chat/rooms", headers=auth(chloe))).json() == []


async def test_list_rooms_sorted_by_latest_activity(client, session, alice, brian, chloe, accepted_request):
    maths = await SubjectService(session).find_or_create_by_name("Mathematics")
    service = TutoringRequestService(session)
    other = await service.create_request(chloe.id, chloe.id, alice.id, maths.id, "Calculus?")

    first = (await open_room(client, alice, accepted_request.id)).json()
    second = (await open_room(client, chloe, other.id)).json()

    listed = (await client.get("/api/chat/rooms", headers=auth(alice))).json()
    assert [r["id"] for r in listed] == [second["id"], first["id"]]

    await client.post(f"/api/chat/rooms/{first['id']}/messages", json={"content": "ping"}, headers=auth(brian))

    listed = (await client.get("/api/chat/rooms", headers=auth(alice))).json()
    assert [r["id"] for r in listed] == [first["id"], second["id"]]
    assert listed[0]["unread_count"] == 1
    assert listed[1]["subject"] == "Mathematics"


async def test_inactive_rooms_are_hidden_from_listing(client, session, alice, accepted_request):
    room = (await open_room(client, alice, accepted_request.id)).json()

    await session.execute(update(ChatRoom).where(ChatRoom.id == uuid.UUID(room["id"])).values(is_active=False))
    await session.commit()

    assert (await client.get("/api/chat/rooms", headers=auth(alice))).json() == []


async def test_require_participant_rejects_outsiders(session, alice, chloe, accepted_request):
    service = ChatRoomService(session)
    room = await service.get_or_create_for_request(accepted_request.id, alice.id)

    with pytest.raises(Forbidden):
        await service.require_participant(uuid.UUID(room["id"]), chloe.id)
