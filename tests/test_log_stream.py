from tinynet.fixed_buffer import SMALL_BUFFER, FixedBuffer
from tinynet.log_stream import LogStream


def contents(stream):
    return stream.buffer.to_bytes()


def test_integers():
    stream = LogStream()
    stream << 42 << " " << -42 << " " << 0
    assert contents(stream) == b"42 -42 0"


def test_bool_is_numeric():
    stream = LogStream()
    stream << True << False
    assert contents(stream) == b"10"


def test_float_uses_general_format():
    stream = LogStream()
    stream << 2.5
    assert contents(stream) == b"2.5"
    stream.reset_buffer()
    stream << 1e20
    assert contents(stream) == b"1e+20"


def test_none_prints_null():
    stream = LogStream()
    stream << None
    assert contents(stream) == b"(null)"


def test_strings_bytes_and_buffers():
    other = FixedBuffer(16)
    other.append(b"buf")
    stream = LogStream()
    stream << "text " << b"raw " << other
    assert contents(stream) == b"text raw buf"


def test_append_and_reset():
    stream = LogStream()
    stream.append(b"abc")
    assert contents(stream) == b"abc"
    stream.reset_buffer()
    assert contents(stream) == b""


def test_numbers_dropped_when_nearly_full():
    stream = LogStream()
    stream.append(b"x" * (SMALL_BUFFER - 40))
    stream << 12345 << 1.5
    assert stream.buffer.length() == SMALL_BUFFER - 40


def test_oversized_string_dropped():
    stream = LogStream()
    stream << "y" * SMALL_BUFFER
    assert stream.buffer.length() == 0