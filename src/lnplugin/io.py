"""Line-delimited JSON I/O

Every message is one JSON object on one line. The encoder never emits a raw
newline inside a message (json escapes them in strings), so a newline always
terminates a message.

## Wire Format

```
{"method":"getmanifest","params":{},"id":1}\\n
\\n                      <- blank lines are framing noise, skipped by readers
{"id":1,"result":{...}}\\n
```
"""

import json
import threading
from typing import Any, Optional, TextIO, Union

from lnplugin.errors import ParseError


class FramingError(Exception):
    """Base line I/O error"""
    pass


class ReadError(FramingError):
    """Reading from the input stream failed"""
    pass


class EncodeError(FramingError):
    """Value cannot be encoded as JSON"""
    pass


class WriteError(FramingError):
    """Writing to the output stream failed"""
    pass


def encode_message(value: Any) -> str:
    """Encode a value as one compact JSON line, without the terminator.

    Output is pure ASCII (non-ASCII text, lone surrogates included, is
    written as \\u escapes), so writing it can never fail on the stream's
    encoding.

    Raises:
        EncodeError: the value is not JSON-serializable
    """
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=True, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise EncodeError(f"JSON encoding failed: {e}")


def decode_message(line: Union[str, bytes]) -> Any:
    """Decode one line of JSON. Bytes must be UTF-8.

    Raises:
        ParseError: the line is not UTF-8, not valid JSON, or nested too deeply
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Parse error: invalid UTF-8: {e}")
    try:
        return json.loads(line)
    except json.JSONDecodeError as e:
        raise ParseError(f"Parse error: {e}")
    except RecursionError:
        raise ParseError("Parse error: JSON nested too deeply")


class LineReader:
    """Reads newline-terminated messages, skipping blank lines.

    Text streams that expose a binary `buffer` (sys.stdin, TextIOWrapper) are
    read as bytes, so undecodable input surfaces as a ParseError for that
    line rather than a stream failure.
    """

    def __init__(self, reader: TextIO):
        self.reader = getattr(reader, "buffer", reader)

    def read_line(self) -> Optional[Union[str, bytes]]:
        """Read the next non-blank line.

        Returns:
            The line with surrounding whitespace removed, or None on EOF

        Raises:
            ReadError: the underlying stream failed
        """
        while True:
            try:
                line = self.reader.readline()
            except (OSError, ValueError) as e:
                raise ReadError(f"Read failed: {e}")
            if not line:
                return None
            line = line.strip()
            if line:
                return line


class LineWriter:
    """Writes one message per line and flushes immediately.

    Thread-safe: a lock keeps concurrent writers (log lines from other
    threads) from splicing into each other's lines.
    """

    def __init__(self, writer: TextIO, lock: Optional[threading.Lock] = None):
        self.writer = writer
        self.lock = lock if lock is not None else threading.Lock()

    def write(self, value: Any) -> None:
        """Encode and write one message.

        Raises:
            EncodeError: the value is not JSON-serializable; nothing is written
            WriteError: the output stream failed
        """
        line = encode_message(value) + "\n"
        with self.lock:
            try:
                self.writer.write(line)
                self.writer.flush()
            except (OSError, ValueError) as e:
                raise WriteError(f"Write failed: {e}")
