"""
Op-code helper for interface-description (TL-B style) files.

Each ``<op> ... = InternalMsgBody`` line gets a CRC-32 checksum. The query form
clears the top bit, the response form sets it, so the two tag spaces never
overlap for one operation. Values are reported during build only.
"""
from __future__ import annotations

import re
import zlib
from dataclasses import dataclass
from pathlib import Path

OP_DECLARATION = re.compile(r"^(\w+).*=\s*InternalMsgBody$", re.MULTILINE)

QUERY_MASK = 0x7FFFFFFF
RESPONSE_BIT = 0x80000000


def crc32(text: str) -> int:
    """CRC-32/IEEE of the UTF-8 encoded text, as an unsigned 32-bit int."""
    return zlib.crc32(text.encode("utf-8")) & 0xFFFFFFFF


@dataclass(frozen=True)
class OpCode:
    name: str
    signature: str
    checksum: int

    @property
    def query(self) -> int:
        return self.checksum & QUERY_MASK

    @property
    def response(self) -> int:
        return (self.checksum | RESPONSE_BIT) & 0xFFFFFFFF

    def describe(self) -> str:
        return (
            f"op '{self.name}': '{self.query:#x}' as query (&0x7fffffff), "
            f"'{self.response:#x}' as response (|0x80000000)"
        )


def parse_ops(text: str) -> list[OpCode]:
    ops = []
    # $ only matches before \n
    text = text.replace("\r\n", "\n")
    for match in OP_DECLARATION.finditer(text):
        signature = match.group(0)
        ops.append(OpCode(name=signature.split(" ")[0], signature=signature, checksum=crc32(signature)))
    return ops


def load_ops(path: Path) -> list[OpCode] | None:
    """Parse ``path``; ``None`` when the file does not exist."""
    path = Path(path)
    if not path.is_file():
        return None
    return parse_ops(path.read_text(encoding="utf-8"))
