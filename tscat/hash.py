from __future__ import annotations

from typing import TYPE_CHECKING
import hashlib
import json

if TYPE_CHECKING:
    from tscat.ts_model import Catalog


def sha256_hex_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def sha256_hex_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def canonical_json(obj: object) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def canonical_json_bytes(obj: object) -> bytes:
    return canonical_json(obj).encode("utf-8")


def message_key(context: str, source: str, comment: str) -> str:
    return sha256_hex_text(f"{context}\u0004{source}\u0000{comment}")


def catalog_hash(catalog: "Catalog") -> str:
    """Hash of the translatable content of a catalog, ignoring locations."""
    rows = []
    for context_name, message in catalog.iter_messages():
        rows.append(
            [
                message_key(context_name, message.source, message.comment),
                message.translation_type,
                message.translation,
                list(message.numerus_forms),
            ]
        )
    body = {"language": catalog.language, "messages": rows}
    return sha256_hex_bytes(canonical_json_bytes(body))
