from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any


def test_stdio_workflow_e2e(tmp_path: Path) -> None:
    (tmp_path / "app.py").write_text("print('ready')\n", encoding="utf-8")

    proc = _start_server(workspace_root=tmp_path)
    try:
        initialized = _call(proc, "e2e-1", "initialize", {})
        assert initialized["ok"] is True
        assert initialized["result"]["serverInfo"]["name"] == "development-assistant"

        tools = _call(proc, "e2e-2", "tools/list", {})
        assert "execute_command" in [tool["name"] for tool in tools["result"]["tools"]]

        written = _call(
            proc,
            "e2e-3",
            "tools/call",
            {
                "name": "environment_manager",
                "arguments": {"action": "write", "key": "MODE", "value": "dev"},
            },
        )
        assert written["ok"] is True
        assert (tmp_path / ".env").read_text(encoding="utf-8") == "MODE=dev"

        read_back = _call(
            proc,
            "e2e-4",
            "tools/call",
            {"name": "environment_manager", "arguments": {"action": "read", "key": "MODE"}},
        )
        assert "Value: dev" in read_back["result"]["content"][0]["text"]

        resource = _call(
            proc, "e2e-5", "resources/read", {"uri": "project://files/app.py"}
        )
        assert resource["result"]["contents"][0]["text"] == "print('ready')\n"

        unknown = _call(proc, "e2e-6", "tools/call", {"name": "delete_all", "arguments": {}})
        assert unknown["error"]["code"] == "UNKNOWN_OPERATION"
    finally:
        _stop_server(proc)

    audit_lines = (tmp_path / ".devassist_mcp" / "audit.jsonl").read_text(encoding="utf-8")
    assert len(audit_lines.splitlines()) == 6
    events = [json.loads(line) for line in audit_lines.splitlines()]
    assert events[2]["metadata"] == {
        "action": "write",
        "key_length": 4,
        "key_present": True,
        "value_length": 3,
        "value_present": True,
    }


def _start_server(workspace_root: Path) -> subprocess.Popen[str]:
    env = os.environ.copy()
    env.pop("MODE", None)
    project_root = Path(__file__).resolve().parents[2]
    src_path = project_root / "src"
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = str(src_path) if not existing else f"{src_path}{os.pathsep}{existing}"
    cmd = [
        sys.executable,
        "-m",
        "devassist_mcp.server",
        "--workspace-root",
        str(workspace_root),
        "--data-dir",
        str(workspace_root / ".devassist_mcp"),
    ]
    return subprocess.Popen(
        cmd,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=env,
    )


def _call(
    proc: subprocess.Popen[str],
    request_id: str,
    method: str,
    params: dict[str, object],
) -> dict[str, Any]:
    assert proc.stdin is not None
    assert proc.stdout is not None
    payload = {"id": request_id, "method": method, "params": params}
    proc.stdin.write(json.dumps(payload) + "\n")
    proc.stdin.flush()
    line = proc.stdout.readline()
    if not line:
        stderr_output = ""
        if proc.stderr is not None:
            stderr_output = proc.stderr.read()
        raise RuntimeError(f"Server produced no response. stderr={stderr_output}")
    return json.loads(line)


def _stop_server(proc: subprocess.Popen[str]) -> None:
    if proc.stdin is not None:
        proc.stdin.close()
    proc.wait(timeout=5)
    if proc.returncode != 0 and proc.stderr is not None:
        stderr_output = proc.stderr.read()
        raise AssertionError(f"Server exited with code {proc.returncode}: {stderr_output}")
