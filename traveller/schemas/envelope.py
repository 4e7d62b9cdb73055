import time
from typing import Any

PROVIDER_NAME = "travelpayouts"


def build_meta(request_id: str) -> dict[str, Any]:
    return {
        "provider": PROVIDER_NAME,
        "requestId": request_id,
        "ts": int(time.time() * 1000),
    }


def success_envelope(data: list[dict], request_id: str) -> dict[str, Any]:
    return {"ok": True, "data": data, "meta": build_meta(request_id)}


def error_envelope(error: dict, request_id: str) -> dict[str, Any]:
    return {"ok": False, "error": error, "meta": build_meta(request_id)}


NO_STORE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}
