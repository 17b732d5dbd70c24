import pytest

from tablehelper.protocol import (
    Command,
    Frame,
    FrameParser,
    pack_get,
    pack_heartbeat,
    pack_set,
)


def make_reply(cmd, payload=b"", date=(24, 5, 6), msg_id=0):
    body = bytes([0xA5, 0xA5, *date, cmd, 0x00, len(payload) + 1, msg_id]) + bytes(payload)
    return body + bytes([sum(body) & 0xFF])


def checksum_ok(frame):
    return sum(frame[:-1]) & 0xFF == frame[-1]


def test_pack_get_layout():
    ids = bytes(range(1, 17))
    frame = pack_get(ids)
    assert frame[:5] == bytes([0xA5, 0xA5, 0x03, Command.GET, 0x00])
    assert frame[5] == len(ids) + 1
    assert frame[6] == 0x00
    assert frame[7:-1] == ids
    assert checksum_ok(frame)


def test_pack_set_layout():
    values = [2, 5, 30]
    frame = pack_set(values)
    assert frame[:5] == bytes([0xA5, 0xA5, 0x03, Command.SET, 0x00])
    assert frame[5] == len(values) + 1
    assert frame[7:-1] == bytes(values)
    assert checksum_ok(frame)


def test_pack_set_masks_values_to_bytes():
    frame = pack_set([0x1FF, 256])
    assert frame[7:-1] == b"\xff\x00"
    assert checksum_ok(frame)


def test_pack_length_byte_wraps():
    frame = pack_set(bytes(300))
    assert frame[5] == 301 % 256
    assert len(frame) == 7 + 300 + 1


def test_pack_heartbeat_bytes():
    assert pack_heartbeat() == bytes.fromhex("a5a503200000006d")


def test_parse_get_reply():
    payload = bytes([2, 3, 40, 4, 1, 1, 44])
    parser = FrameParser()
    assert parser.feed(make_reply(Command.GET, payload)) == Frame(
        cmd=Command.GET, version="24年5月6日", data=payload
    )


def test_parse_report_keeps_data():
    payload = bytes([2, 7, 9])
    frame = FrameParser().feed(make_reply(Command.REPORT, payload))
    assert frame.cmd == Command.REPORT
    assert frame.data == payload


@pytest.mark.parametrize("cmd", [Command.SET, Command.HEARTBEAT])
def test_parse_other_commands_have_no_data(cmd):
    frame = FrameParser().feed(make_reply(cmd, b"\x05\x06"))
    assert frame == Frame(cmd=cmd, version="24年5月6日", data=b"")


def test_parse_byte_by_byte():
    reply = make_reply(Command.GET, b"\x02\x02\x07")
    parser = FrameParser()
    results = [parser.feed(bytes([b])) for b in reply]
    assert results[:-1] == [None] * (len(reply) - 1)
    assert results[-1].data == b"\x02\x02\x07"


def test_bad_checksum_then_good_frame():
    reply = make_reply(Command.GET, b"\x02\x02\x07")
    corrupt = reply[:-1] + bytes([(reply[-1] + 1) & 0xFF])
    parser = FrameParser()
    assert parser.feed(corrupt) is None
    assert parser.feed(reply).cmd == Command.GET


def test_leading_noise_is_skipped():
    reply = make_reply(Command.GET, b"\x04\x01\x00\x10")
    frame = FrameParser().feed(b"\x00\x11\x22" + reply)
    assert frame.data == b"\x04\x01\x00\x10"


def test_trailing_bytes_are_dropped():
    reply = make_reply(Command.GET, b"\x02\x05\x01")
    parser = FrameParser()
    assert parser.feed(reply + b"\xa5").data == b"\x02\x05\x01"
    assert parser.feed(reply).data == b"\x02\x05\x01"


def test_oversized_length_is_rejected():
    parser = FrameParser()
    assert parser.feed(make_reply(Command.GET, bytes(200))) is None
    assert parser.feed(b"\x00\x00") is None
    assert parser.feed(make_reply(Command.GET, b"\x02\x02\x01")).data == b"\x02\x02\x01"


def test_incomplete_frame_returns_none():
    reply = make_reply(Command.GET, b"\x02\x02\x01")
    parser = FrameParser()
    assert parser.feed(reply[:-1]) is None
    assert parser.feed(reply[-1:]).cmd == Command.GET