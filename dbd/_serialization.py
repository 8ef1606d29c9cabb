from typing import Any

import msgspec

__all__ = ("encode_json",)

_encoder = msgspec.json.Encoder(enc_hook=str)


def encode_json(data: Any) -> str:
    """Encode ``data`` as a JSON string, stringifying unknown types."""
    return _encoder.encode(data).decode("utf-8")
