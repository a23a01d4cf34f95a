"""
Record Codec

One capture record per line, five space-separated fields:

    <output_name> <workspace_name> <workspace_id> <window_id> <window_title>

The ids are plain decimal. The three text fields go through a transform that
guarantees they never contain whitespace:

- base64: UTF-8 then base64, fully reversible
- raw: verbatim with whitespace replaced by "_", readable but lossy

An empty text field is written as "-", which is not in the base64 alphabet.
"""

import base64
import binascii
import re
from typing import List, Optional

from .errors import MalformedRecord
from .models import CaptureRecord, EncodingMode

FIELD_COUNT = 5
EMPTY_FIELD = "-"
PLACEHOLDER = "_"

_WHITESPACE = re.compile(r"\s")
_UNSIGNED = re.compile(r"[0-9]+")


class RecordCodec:
    """Encode and decode snapshot lines in one encoding mode."""

    def __init__(self, mode: EncodingMode = EncodingMode.BASE64):
        self.mode = mode

    def encode(self, record: CaptureRecord) -> str:
        """
        Encode a record to a single snapshot line (no trailing newline).

        Args:
            record: Record to encode

        Returns:
            Line with five space-separated fields
        """
        return " ".join([
            self._encode_text(record.output_name),
            self._encode_text(record.workspace_name),
            str(record.workspace_id),
            str(record.window_id),
            self._encode_text(record.window_title),
        ])

    def decode(self, line: str, line_number: Optional[int] = None) -> CaptureRecord:
        """
        Decode one snapshot line.

        Args:
            line: Line as read from the snapshot, with or without newline
            line_number: Position in the input, used in error messages

        Returns:
            The decoded record

        Raises:
            MalformedRecord: Wrong field count, bad ids or undecodable text
        """
        fields = line.split()
        if len(fields) != FIELD_COUNT:
            raise MalformedRecord(
                f"expected {FIELD_COUNT} fields, got {len(fields)}", line, line_number
            )

        output_field, workspace_field, workspace_id, window_id, title_field = fields

        return CaptureRecord(
            output_name=self._decode_text(output_field, line, line_number),
            workspace_name=self._decode_text(workspace_field, line, line_number),
            workspace_id=self._decode_id(workspace_id, "workspace id", line, line_number),
            window_id=self._decode_id(window_id, "window id", line, line_number),
            window_title=self._decode_text(title_field, line, line_number),
        )

    def encode_all(self, records: List[CaptureRecord]) -> List[str]:
        return [self.encode(record) for record in records]

    def _encode_text(self, value: str) -> str:
        if not value:
            return EMPTY_FIELD

        if self.mode == EncodingMode.RAW:
            return _WHITESPACE.sub(PLACEHOLDER, value)

        raw_bytes = value.encode("utf-8", errors="surrogatepass")
        return base64.b64encode(raw_bytes).decode("ascii")

    def _decode_text(self, field: str, line: str, line_number: Optional[int]) -> str:
        if field == EMPTY_FIELD:
            return ""

        if self.mode == EncodingMode.RAW:
            return field

        try:
            raw_bytes = base64.b64decode(field, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedRecord(f"invalid base64 field {field!r}: {e}", line, line_number) from e

        try:
            return raw_bytes.decode("utf-8", errors="surrogatepass")
        except UnicodeDecodeError as e:
            raise MalformedRecord(f"field {field!r} is not UTF-8: {e}", line, line_number) from e

    @staticmethod
    def _decode_id(field: str, label: str, line: str, line_number: Optional[int]) -> int:
        # str.isdigit() would also accept non-ASCII digits
        if not _UNSIGNED.fullmatch(field):
            raise MalformedRecord(f"{label} {field!r} is not an unsigned integer", line, line_number)
        return int(field)
