import json
import threading
import time
import unittest
from urllib import error, request

from twisty_sim.client import CubeAPIClient
from twisty_sim.facade import CubeFacade
from twisty_sim.server import CubeHTTPServer
from twisty_sim.state import CubeState
from twisty_sim.state_codec import encode_state


def http_json(method: str, url: str, payload: dict | None = None):
    data = None
    headers = {}
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        headers["Content-Type"] = "application/json"
    req = request.Request(url=url, method=method, data=data, headers=headers)
    with request.urlopen(req, timeout=2.0) as resp:
        body = resp.read().decode("utf-8")
        return resp.status, json.loads(body)


class TestAPI(unittest.TestCase):
    def setUp(self):
        self.facade = CubeFacade()
        self.server = CubeHTTPServer(facade=self.facade, host="127.0.0.1", port=0)
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        time.sleep(0.05)
        self.base = f"http://{self.server.host}:{self.server.port}"

    def tearDown(self):
        self.server.shutdown()
        self.thread.join(timeout=1.0)

    def _expect_error(self, path: str, payload: dict, code: int):
        req = request.Request(
            url=f"{self.base}{path}",
            method="POST",
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        with self.assertRaises(error.HTTPError) as ctx:
            request.urlopen(req, timeout=2.0)
        self.assertEqual(ctx.exception.code, code)
        ctx.exception.close()

    def test_health(self):
        status, out = http_json("GET", f"{self.base}/health")
        self.assertEqual(status, 200)
        self.assertEqual(out["cube_size"], 3)
        self.assertFalse(out["busy"])

    def test_move_applies_and_returns_payload(self):
        status, out = http_json("POST", f"{self.base}/move", {"move": "R"})
        self.assertEqual(status, 200)
        self.assertEqual(out["applied"], "R")
        self.assertEqual(out["move_count"], 1)
        self.assertFalse(out["solved"])
        self.assertEqual(len(out["state"]["faces"]["U"]), 3)

    def test_undo_and_redo(self):
        http_json("POST", f"{self.base}/move", {"moves": "R U"})
        _, out = http_json("POST", f"{self.base}/undo", {})
        self.assertTrue(out["applied"])
        self.assertEqual(out["history"], "R")
        _, out = http_json("POST", f"{self.base}/redo", {})
        self.assertTrue(out["applied"])
        _, out = http_json("POST", f"{self.base}/redo", {})
        self.assertFalse(out["applied"])

        _, out = http_json("GET", f"{self.base}/history")
        self.assertEqual(out["history"], "R U")
        self.assertTrue(out["can_undo"])
        self.assertFalse(out["can_redo"])

    def test_scramble_then_solve(self):
        status, out = http_json("POST", f"{self.base}/scramble", {"count": 12, "seed": 7})
        self.assertEqual(status, 200)
        self.assertEqual(len(out["applied"].split()), 12)
        self.assertEqual(out["move_count"], 12)

        _, out = http_json("POST", f"{self.base}/solve", {})
        self.assertTrue(out["solved"])
        self.assertEqual(out["move_count"], 0)
        _, out = http_json("GET", f"{self.base}/solved")
        self.assertTrue(out["solved"])

    def test_state_roundtrip_set_get(self):
        other = CubeFacade()
        other.apply_sequence("F X1 z")
        target = other.save_state()

        status, _ = http_json("POST", f"{self.base}/state", {"state": target})
        self.assertEqual(status, 200)
        status, out = http_json("GET", f"{self.base}/state")
        self.assertEqual(status, 200)
        self.assertEqual(out["state"], encode_state(other.get_state()))

    def test_reset(self):
        http_json("POST", f"{self.base}/move", {"moves": "R U F"})
        _, out = http_json("POST", f"{self.base}/reset", {})
        self.assertTrue(out["solved"])
        self.assertEqual(out["history"], "")

    def test_invalid_requests_return_400(self):
        self._expect_error("/move", {"move": "Q"}, 400)
        self._expect_error("/move", {"move": "X0"}, 400)
        self._expect_error("/move", {}, 400)
        self._expect_error("/scramble", {"count": -1}, 400)
        bad = encode_state(CubeState.solved(3))
        bad["faces"]["U"][0][0] = 4
        self._expect_error("/state", {"state": bad}, 400)
        huge = encode_state(CubeState.solved(3))
        huge["size"] = 10**10
        self._expect_error("/state", {"state": huge}, 400)
        self._expect_error("/state", {"state": {**huge, "size": 3, "version": True}}, 400)
        self.assertTrue(self.facade.is_solved())

    def test_busy_returns_409(self):
        with self.facade.transition():
            self._expect_error("/move", {"move": "R"}, 409)
        self.assertEqual(self.facade.move_count, 0)

    def test_unknown_path_returns_404(self):
        self._expect_error("/nope", {}, 404)

    def test_client(self):
        client = CubeAPIClient(host=self.server.host, port=self.server.port, timeout=2.0)
        self.assertTrue(client.health()["ready"])
        client.move("R U R' U'")
        self.assertFalse(client.solved())
        self.assertTrue(client.undo())
        self.assertEqual(client.get_state(), self.facade.get_state())
        client.solve()
        self.assertTrue(client.solved())
        self.assertFalse(client.undo())


if __name__ == "__main__":
    unittest.main()
