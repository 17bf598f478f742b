"""Shared test helpers"""
import json
from typing import Any

import requests


def make_response(status_code: int, body: Any = None, content_type: str = "application/json") -> requests.Response:
    """Build a real requests.Response with the given JSON body"""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    return response


def sent_headers(call) -> dict:
    """Headers passed to a patched requests.request call"""
    return call.kwargs["headers"]


def sent_json(call) -> Any:
    """JSON payload passed to a patched requests.request call"""
    return call.kwargs["json"]
