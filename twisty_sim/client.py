"""HTTP client for the cube simulator server."""

from __future__ import annotations

import json
from urllib import request

from .state import CubeState
from .state_codec import decode_state


class CubeAPIClient:
    def __init__(self, host: str = "127.0.0.1", port: int = 8000, timeout: float = 10.0):
        self.base = f"http://{host}:{port}"
        self.timeout = timeout

    def _call(self, method: str, path: str, payload: dict | None = None) -> dict:
        data = None
        headers = {}
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = request.Request(url=f"{self.base}{path}", method=method, data=data, headers=headers)
        with request.urlopen(req, timeout=self.timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))

    def health(self) -> dict:
        return self._call("GET", "/health")

    def get_state(self) -> CubeState:
        out = self._call("GET", "/state")
        return decode_state(out["state"])

    def history(self) -> dict:
        return self._call("GET", "/history")

    def move(self, notation: str) -> dict:
        return self._call("POST", "/move", {"moves": notation})

    def scramble(self, count: int | None = None, seed: int | None = None) -> dict:
        return self._call("POST", "/scramble", {"count": count, "seed": seed})

    def solve(self) -> dict:
        return self._call("POST", "/solve", {})

    def undo(self) -> bool:
        return bool(self._call("POST", "/undo", {})["applied"])

    def redo(self) -> bool:
        return bool(self._call("POST", "/redo", {})["applied"])

    def reset(self) -> dict:
        return self._call("POST", "/reset", {})

    def load_state(self, payload: dict) -> dict:
        return self._call("POST", "/state", {"state": payload})

    def solved(self) -> bool:
        out = self._call("GET", "/solved")
        return bool(out["solved"])
