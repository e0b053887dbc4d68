from __future__ import annotations

from fastapi import Request

UNKNOWN_ADDRESS = "unknown"


def get_client_ip(request: Request) -> str:
    forwarded = str(request.headers.get("x-forwarded-for") or "").strip()
    if forwarded:
        # Left-most entry is the originating client, the rest are proxies.
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = str(request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip
    if request.client is not None and request.client.host:
        return request.client.host
    return UNKNOWN_ADDRESS
