import pytest

from conftest import BrokenSocket, RecordingSocket
from services.realtime.room_hub import RoomHub


async def test_broadcast_reaches_only_room_members():
	hub = RoomHub()
	inside, outside = RecordingSocket(), RecordingSocket()
	hub.connect("a", inside)
	hub.connect("b", outside)
	hub.join("a", "s1")
	hub.join("b", "s2")

	delivered = await hub.broadcast("s1", "audience-update", 7)

	assert delivered == 1
	assert inside.frames == [{"type": "audience-update", "data": 7}]
	assert outside.frames == []


async def test_same_event_keeps_emission_order():
	hub = RoomHub()
	socket = RecordingSocket()
	hub.connect("a", socket)
	hub.join("a", "s1")

	for count in range(5):
		await hub.broadcast("s1", "audience-update", count)

	assert [frame["data"] for frame in socket.frames] == [0, 1, 2, 3, 4]


async def test_disconnect_leaves_every_room():
	hub = RoomHub()
	socket = RecordingSocket()
	hub.connect("a", socket)
	hub.join("a", "s1")
	hub.join("a", "s2")

	hub.disconnect("a")

	assert hub.members("s1") == []
	assert hub.members("s2") == []
	assert await hub.broadcast("s1", "stream-stopped") == 0
	assert socket.frames == []


async def test_failing_socket_is_dropped_without_blocking_the_room():
	hub = RoomHub()
	healthy = RecordingSocket()
	hub.connect("broken", BrokenSocket())
	hub.connect("ok", healthy)
	hub.join("broken", "s1")
	hub.join("ok", "s1")

	delivered = await hub.broadcast("s1", "stream-stopped")

	assert delivered == 1
	assert healthy.frames == [{"type": "stream-stopped", "data": None}]
	assert not hub.is_connected("broken")
	assert hub.members("s1") == ["ok"]


async def test_sender_only_replies():
	hub = RoomHub()
	sender, other = RecordingSocket(), RecordingSocket()
	hub.connect("a", sender)
	hub.connect("b", other)
	hub.join("a", "s1")
	hub.join("b", "s1")

	await hub.send_error("a", "bad frame")

	assert sender.frames == [{"type": "error", "detail": "bad frame"}]
	assert other.frames == []


def test_join_requires_connection():
	with pytest.raises(KeyError):
		RoomHub().join("ghost", "s1")


async def test_non_finite_numbers_are_never_sent():
	hub = RoomHub()
	socket = RecordingSocket()
	hub.connect("a", socket)
	hub.join("a", "s1")

	with pytest.raises(ValueError):
		await hub.broadcast("s1", "face-detected", {"person": "Abi", "confidence": float("inf")})

	assert socket.frames == []
	assert hub.is_connected("a")
