from __future__ import annotations

import uuid

from sqlalchemy import func, insert, select

from peerlearn.models.base import utcnow
from peerlearn.models.chat.chat_message import ChatMessage, MessageReadReceipt, MessageType
from peerlearn.models.chat.chat_room import ChatRoom
from peerlearn.services.chat.chat_service import ChatRoomService
from tests.conftest import auth


async def open_room(client, user, request):
    resp = await client.post(
        "/api/chat/rooms",
        json={"tutoring_request_id": str(request.id)},
        headers=auth(user),
    )
    return resp.json()["id"]


async def send(client, user, room_id, content, **extra):
    return await client.post(
        f"/api/chat/rooms/{room_id}/messages",
        json={"content": content, **extra},
        headers=auth(user),
    )


async def test_message_ownership_depends_on_viewer(client, alice, brian, accepted_request):
    room_id = await open_room(client, alice, accepted_request)

    sent = await send(client, alice, room_id, "Hi!")
    assert sent.status_code == 201
    assert sent.json()["is_own"] is True
    assert sent.json()["sender"]["full_name"] == "Alice Johnson"
    assert sent.json()["message_type"] == "text"

    seen_by_brian = (await client.get(f"/api/chat/rooms/{room_id}/messages", headers=auth(brian))).json()
    seen_by_alice = (await client.get(f"/api/chat/rooms/{room_id}/messages", headers=auth(alice))).json()
    assert [m["content"] for m in seen_by_brian] == ["Hi!"]
    assert seen_by_brian[0]["is_own"] is False
    assert seen_by_alice[0]["is_own"] is True


async def test_content_is_trimmed_and_blank_rejected(client, alice, accepted_request):
    room_id = await open_room(client, alice, accepted_request)

    sent = await send(client, alice, room_id, "  see you at 5  ")
    assert sent.json()["content"] == "see you at 5"

    blank = await send(client, alice, room_id, "   ")
    assert blank.status_code == 400
    assert blank.json()["error"] == "invalid_argument"


async def test_outsider_cannot_post_or_read(client, session, alice, chloe, accepted_request):
    room_id = await open_room(client, alice, accepted_request)

    posted = await send(client, chloe, room_id, "let me in")
    assert posted.status_code == 403
    assert await session.scalar(select(func.count(ChatMessage.id))) == 0

    listed = await client.get(f"/api/chat/rooms/{room_id}/messages", headers=auth(chloe))
    assert listed.status_code == 403

    read = await client.patch(f"/api/chat/rooms/{room_id}/read", headers=auth(chloe))
    assert read.status_code == 403


async def test_unknown_room_is_not_found(client, alice):
    room_id = uuid.uuid4()

    assert (await send(client, alice, room_id, "hello")).status_code == 404
    assert (await client.get(f"/api/chat/rooms/{room_id}/messages", headers=auth(alice))).status_code == 404
    assert (await client.patch(f"/api/chat/rooms/{room_id}/read", headers=auth(alice))).status_code == 404


async def test_unknown_message_type_is_rejected(client, alice, accepted_request):
    room_id = await open_room(client, alice, accepted_request)

    resp = await send(client, alice, room_id, "hello", message_type="video")
    assert resp.status_code == 400


async def test_last_activity_follows_latest_message(client, session, alice, brian, accepted_request):
    room_id = await open_room(client, alice, accepted_request)
    room = await session.get(ChatRoom, uuid.UUID(room_id))
    opened_at = room.last_activity

    await send(client, alice, room_id, "first")
    latest = (await send(client, brian, room_id, "second")).json()

    await session.refresh(room)
    assert room.last_activity > opened_at

    listed = (await client.get("/api/chat/rooms", headers=auth(alice))).json()
    assert listed[0]["last_activity"] == latest["created_at"]


async def test_pages_are_newest_first_in_chronological_order(client, alice, accepted_request):
    room_id = await open_room(client, alice, accepted_request)
    for n in range(5):
        await send(client, alice, room_id, f"m{n}")

    async def fetch(page):
        resp = await client.get(
            f"/api/chat/rooms/{room_id}/messages",
            params={"page": page, "limit": 2},
            headers=auth(alice),
        )
        return [m["content"] for m in resp.json()]

    assert await fetch(1) == ["m3", "m4"]
    assert await fetch(2) == ["m1", "m2"]
    assert await fetch(3) == ["m0"]
    assert await fetch(4) == []


async def test_page_bounds_are_validated(client, alice, accepted_request):
    room_id = await open_room(client, alice, accepted_request)

    for params in ({"page": 0}, {"limit": 0}, {"limit": 1000}):
        resp = await client.get(f"/api/chat/rooms/{room_id}/messages", params=params, headers=auth(alice))
        assert resp.status_code == 400


async def test_mark_read_clears_unread_and_is_idempotent(client, session, alice, brian, accepted_request):
    room_id = await open_room(client, alice, accepted_request)
    await send(client, alice, room_id, "one")
    await send(client, alice, room_id, "two")
    await send(client, brian, room_id, "mine")

    rooms = (await client.get("/api/chat/rooms", headers=auth(brian))).json()
    assert rooms[0]["unread_count"] == 2

    for _ in range(2):
        resp = await client.patch(f"/api/chat/rooms/{room_id}/read", headers=auth(brian))
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

    rooms = (await client.get("/api/chat/rooms", headers=auth(brian))).json()
    assert rooms[0]["unread_count"] == 0

    receipts = await session.scalar(
        select(func.count(MessageReadReceipt.id)).where(MessageReadReceipt.user_id == brian.id)
    )
    assert receipts == 3

    rooms = (await client.get("/api/chat/rooms", headers=auth(alice))).json()
    assert rooms[0]["unread_count"] == 1


async def seed_messages(session, room_id, sender, count, created_at=None):
    created_at = created_at or utcnow()
    rows = [
        {
            "id": uuid.uuid4(),
            "chat_room_id": uuid.UUID(room_id),
            "sender_id": sender.id,
            "content": f"bulk {n}",
            "message_type": MessageType.TEXT,
            "created_at": created_at,
            "updated_at": created_at,
            "is_deleted": False,
        }
        for n in range(count)
    ]
    await session.execute(insert(ChatMessage), rows)
    await session.commit()
    return {row["id"] for row in rows}


async def test_mark_read_on_a_large_room(client, session, alice, brian, accepted_request):
    room_id = await open_room(client, alice, accepted_request)
    await seed_messages(session, room_id, alice, 5000)

    rooms = (await client.get("/api/chat/rooms", headers=auth(brian))).json()
    assert rooms[0]["unread_count"] == 5000

    resp = await client.patch(f"/api/chat/rooms/{room_id}/read", headers=auth(brian))
    assert resp.status_code == 200

    rooms = (await client.get("/api/chat/rooms", headers=auth(brian))).json()
    assert rooms[0]["unread_count"] == 0
    receipts = await session.scalar(
        select(func.count(MessageReadReceipt.id)).where(MessageReadReceipt.user_id == brian.id)
    )
    assert receipts == 5000


async def test_mark_read_reports_only_new_receipts(client, session, alice, brian, accepted_request):
    room_id = await open_room(client, alice, accepted_request)
    await seed_messages(session, room_id, alice, 3)
    service = ChatRoomService(session)

    assert await service.mark_read(uuid.UUID(room_id), brian.id) == 3
    assert await service.mark_read(uuid.UUID(room_id), brian.id) == 0

    await seed_messages(session, room_id, alice, 2)
    assert await service.mark_read(uuid.UUID(room_id), brian.id) == 2


async def test_paging_is_stable_for_messages_with_equal_timestamps(client, session, alice, accepted_request):
    room_id = await open_room(client, alice, accepted_request)
    seeded = await seed_messages(session, room_id, alice, 6, created_at=utcnow())

    seen = []
    for page in range(1, 4):
        resp = await client.get(
            f"/api/chat/rooms/{room_id}/messages",
            params={"page": page, "limit": 2},
            headers=auth(alice),
        )
        seen.extend(uuid.UUID(m["id"]) for m in resp.json())

    assert len(seen) == 6
    assert set(seen) == seeded
