"""Tests for line-delimited JSON I/O"""

import io

import pytest

from lnplugin.errors import ParseError
from lnplugin.io import (
    EncodeError,
    LineReader,
    LineWriter,
    ReadError,
    WriteError,
    decode_message,
    encode_message,
)


class BrokenStream(io.StringIO):
    """Stream whose every read and write fails"""

    def readline(self, *args):
        raise OSError("broken pipe")

    def write(self, s):
        raise OSError("broken pipe")


# TEST401: Test encoding is compact and never contains a raw newline
def test_encode_compact_single_line():
    line = encode_message({"id": 1, "result": {"text": "a\nb", "ok": True}})
    assert line == '{"id":1,"result":{"text":"a\\nb","ok":true}}'
    assert "\n" not in line


# TEST402: Test non-ASCII text and lone surrogates are escaped to ASCII
def test_encode_unicode():
    assert encode_message({"m": "ñ"}) == '{"m":"\\u00f1"}'
    line = encode_message({"file": "file\udcff"})
    assert line == '{"file":"file\\udcff"}'
    assert line.isascii()


# TEST403: Test unencodable values raise EncodeError
def test_encode_errors():
    with pytest.raises(EncodeError):
        encode_message({"bad": object()})
    with pytest.raises(EncodeError):
        encode_message({"nan": float("nan")})


# TEST404: Test invalid JSON raises ParseError
def test_decode_error():
    assert decode_message('{"a": 1}') == {"a": 1}
    with pytest.raises(ParseError):
        decode_message("{not json")


# TEST405: Test reader skips blank lines and returns None on EOF
def test_reader_skips_blank_lines():
    reader = LineReader(io.StringIO('{"a":1}\n\n   \n\t\n{"b":2}\n\n'))

    assert reader.read_line() == '{"a":1}'
    assert reader.read_line() == '{"b":2}'
    assert reader.read_line() is None
    assert reader.read_line() is None


# TEST406: Test reader returns an unterminated last line
def test_reader_last_line_without_newline():
    reader = LineReader(io.StringIO('{"a":1}'))
    assert reader.read_line() == '{"a":1}'
    assert reader.read_line() is None


# TEST407: Test read failures become ReadError
def test_read_error():
    with pytest.raises(ReadError):
        LineReader(BrokenStream()).read_line()


# TEST408: Test writer terminates each message with one newline
def test_writer_lines():
    out = io.StringIO()
    writer = LineWriter(out)
    writer.write({"id": 1, "result": {}})
    writer.write({"id": 2, "result": []})

    assert out.getvalue() == '{"id":1,"result":{}}\n{"id":2,"result":[]}\n'


# TEST409: Test writer reports failures and writes nothing for unencodable values
def test_writer_errors():
    with pytest.raises(WriteError):
        LineWriter(BrokenStream()).write({"id": 1})

    out = io.StringIO()
    with pytest.raises(EncodeError):
        LineWriter(out).write({"id": 1, "result": {1, 2}})
    assert out.getvalue() == ""


# TEST410: Test a reader over a binary-backed stream hands back raw bytes
def test_reader_uses_binary_buffer():
    stream = io.TextIOWrapper(io.BytesIO(b'{"a":1}\n\xff\xfe\n'), encoding="utf-8")
    reader = LineReader(stream)

    assert reader.read_line() == b'{"a":1}'
    assert reader.read_line() == b"\xff\xfe"
    assert reader.read_line() is None


# TEST411: Test undecodable bytes raise ParseError, not a stream error
def test_decode_invalid_utf8():
    assert decode_message('{"m":"ñ"}'.encode("utf-8")) == {"m": "ñ"}
    with pytest.raises(ParseError):
        decode_message(b'{"method":"\xff"}')


# TEST412: Test pathologically nested JSON raises ParseError
def test_decode_deep_nesting():
    with pytest.raises(ParseError):
        decode_message("[" * 200000)


# TEST413: Test a lone surrogate can be written to a UTF-8 byte stream
def test_writer_surrogate_to_utf8_stream():
    raw = io.BytesIO()
    out = io.TextIOWrapper(raw, encoding="utf-8")
    LineWriter(out).write({"id": 1, "result": "file\udcff"})

    assert raw.getvalue() == b'{"id":1,"result":"file\\udcff"}\n'
