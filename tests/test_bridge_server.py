"""
Bridge endpoint tests against a live server on an ephemeral port.
"""

import os
import sys
import threading

import pytest
import requests

from conftest import FakeRunner
from metys_bridge.execution.tool_runner import ToolResult, ToolRunner

CORS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def assert_cors(resp):
    for name, value in CORS.items():
        assert resp.headers.get(name) == value, name


def test_successful_run_returns_output_without_error(bridge, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = FakeRunner(output="arch x86\n")
    url = bridge(runner)

    resp = requests.post(url, json={"filepath": "sample.bin", "params": ["-q", "-c", "i"]}, timeout=5)

    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/json"
    assert resp.json() == {"output": "arch x86\n"}
    assert runner.calls == [["-q", "-c", "i", os.path.join(os.getcwd(), "sample.bin")]]
    assert_cors(resp)


@pytest.mark.skipif(os.name == "nt", reason="POSIX path layout")
def test_relative_path_resolves_against_working_directory(bridge):
    runner = FakeRunner(output="arch x86\n")
    url = bridge(runner, base_dir="/work")

    resp = requests.post(url, json={"filepath": "sample.bin", "params": ["-q", "-c", "i"]}, timeout=5)

    assert resp.json() == {"output": "arch x86\n"}
    assert runner.calls == [["-q", "-c", "i", "/work/sample.bin"]]


@pytest.mark.parametrize("body", [
    b"{not json",
    b"",
    b"[1, 2, 3]",
    b'{"filepath": 42, "params": []}',
    b'{"filepath": "a.bin", "params": "-q"}',
    b'{"filepath": "a.bin", "params": ["-q", 1]}',
    b"\xff\xfe",
])
def test_malformed_body_is_rejected_without_running_tool(bridge, body):
    runner = FakeRunner(output="unused")
    url = bridge(runner)

    resp = requests.post(url, data=body, headers={"Content-Type": "application/json"}, timeout=5)

    assert resp.status_code == 400
    assert resp.text == "Invalid request\n"
    assert runner.calls == []
    assert_cors(resp)


def test_unresolvable_path_is_rejected_without_running_tool(bridge):
    runner = FakeRunner()
    url = bridge(runner)

    resp = requests.post(url, json={"filepath": "bad\x00name.bin", "params": []}, timeout=5)

    assert resp.status_code == 400
    assert resp.text.startswith("Invalid file path:")
    assert runner.calls == []
    assert_cors(resp)


def test_missing_params_defaults_to_path_only(bridge, tmp_path):
    runner = FakeRunner()
    url = bridge(runner, base_dir=str(tmp_path))

    resp = requests.post(url, json={"filepath": "x.bin"}, timeout=5)

    assert resp.status_code == 200
    assert runner.calls == [[os.path.join(str(tmp_path), "x.bin")]]


def test_preflight_returns_empty_200(bridge):
    runner = FakeRunner()
    url = bridge(runner)

    resp = requests.options(url, timeout=5)

    assert resp.status_code == 200
    assert resp.content == b""
    assert runner.calls == []
    assert_cors(resp)


def test_tool_failure_is_reported_inside_200(bridge):
    runner = FakeRunner(output="partial\n", error="radare2 error: exit status 1", return_code=1)
    url = bridge(runner)

    resp = requests.post(url, json={"filepath": "a.bin", "params": ["-q"]}, timeout=5)

    assert resp.status_code == 200
    assert resp.json() == {"output": "partial\n", "error": "radare2 error: exit status 1"}
    assert_cors(resp)


def test_runner_exception_becomes_error_field(bridge):
    class ExplodingRunner:
        def run(self, args):
            raise RuntimeError("boom")

    url = bridge(ExplodingRunner())

    resp = requests.post(url, json={"filepath": "a.bin", "params": []}, timeout=5)

    assert resp.status_code == 200
    body = resp.json()
    assert body["output"] == ""
    assert "boom" in body["error"]


def test_unencodable_response_yields_500(bridge):
    class BytesRunner:
        def run(self, args):
            return ToolResult(args=list(args), output=b"\x00raw")

    url = bridge(BytesRunner())

    resp = requests.post(url, json={"filepath": "a.bin", "params": []}, timeout=5)

    assert resp.status_code == 500
    assert resp.text == "Internal server error\n"
    assert_cors(resp)


def test_other_paths_and_methods(bridge):
    runner = FakeRunner()
    url = bridge(runner)
    base = url.rsplit("/", 1)[0]

    not_found = requests.post(base + "/other", json={"filepath": "a.bin"}, timeout=5)
    wrong_method = requests.get(url, timeout=5)

    assert not_found.status_code == 404
    assert wrong_method.status_code == 405
    assert wrong_method.headers["Allow"] == "POST, OPTIONS"
    assert runner.calls == []
    assert_cors(not_found)
    assert_cors(wrong_method)


def test_query_string_is_ignored_for_routing(bridge):
    runner = FakeRunner(output="ok")
    url = bridge(runner)

    resp = requests.post(url + "?v=1", json={"filepath": "a.bin", "params": []}, timeout=5)

    assert resp.json() == {"output": "ok"}


def test_events_are_reported_to_observer(bridge, tmp_path):
    events = []
    runner = FakeRunner(output="done")
    url = bridge(runner, event_observer=lambda name, data: events.append((name, data)), base_dir=str(tmp_path))

    requests.post(url, json={"filepath": "a.bin", "params": ["-A"]}, timeout=5)
    requests.post(url, data=b"{", timeout=5)

    args = ["-A", os.path.join(str(tmp_path), "a.bin")]
    assert events[0] == ("tool.started", {"args": args})
    assert events[1] == ("tool.finished", {"args": args, "output": "done", "error": None, "return_code": 0})
    assert events[2][0] == "request.rejected"
    assert events[2][1]["status"] == 400


def test_failing_observer_does_not_break_request(bridge):
    def observer(name, data):
        raise RuntimeError("observer down")

    url = bridge(FakeRunner(output="fine"), event_observer=observer)

    resp = requests.post(url, json={"filepath": "a.bin", "params": []}, timeout=5)

    assert resp.json() == {"output": "fine"}


def test_slow_tool_does_not_block_other_requests(bridge):
    release = threading.Event()
    entered = threading.Event()

    class GatedRunner:
        def run(self, args):
            if "--slow" in args:
                entered.set()
                release.wait(10)
                return ToolResult(args=list(args), output="slow")
            return ToolResult(args=list(args), output="fast")

    url = bridge(GatedRunner())
    slow_result = {}

    def _slow():
        slow_result["resp"] = requests.post(url, json={"filepath": "a.bin", "params": ["--slow"]}, timeout=15)

    t = threading.Thread(target=_slow)
    t.start()
    try:
        assert entered.wait(5)
        fast = requests.post(url, json={"filepath": "a.bin", "params": []}, timeout=5)
        assert fast.json() == {"output": "fast"}
    finally:
        release.set()
        t.join(15)

    assert slow_result["resp"].json() == {"output": "slow"}


def test_real_tool_receives_absolute_path_last(bridge, tmp_path):
    runner = ToolRunner(sys.executable, timeout=30)
    url = bridge(runner, base_dir=str(tmp_path))

    script = "import sys; print(sys.argv[1]); print(sys.argv[-1])"
    resp = requests.post(url, json={"filepath": "target.bin", "params": ["-c", script, "marker"]}, timeout=30)

    body = resp.json()
    assert "error" not in body
    lines = body["output"].splitlines()
    assert lines == ["marker", os.path.join(str(tmp_path), "target.bin")]


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", "HEAD"])
def test_unsupported_methods_still_carry_cors_headers(bridge, method):
    runner = FakeRunner()
    url = bridge(runner)

    resp = requests.request(method, url, timeout=5)

    assert resp.status_code == 501
    assert runner.calls == []
    assert_cors(resp)
