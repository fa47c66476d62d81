from __future__ import annotations

import json
from pathlib import Path

from devassist_mcp.server import create_server


def test_malformed_json_returns_invalid_json_error(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))

    response = server.handle_json_line("{not-json")

    assert response["ok"] is False
    assert response["error"] == {
        "code": "INVALID_JSON",
        "message": "Request must be valid JSON.",
    }
    assert str(response["request_id"]).startswith("req-")


def test_unknown_tool_returns_unknown_operation(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))

    response = server.handle_payload(
        {
            "id": "abc-123",
            "method": "tools/call",
            "params": {"name": "delete_all", "arguments": {}},
        }
    )

    assert response == {
        "request_id": "abc-123",
        "ok": False,
        "result": {},
        "error": {"code": "UNKNOWN_OPERATION", "message": "Unknown tool: delete_all"},
    }


def test_unknown_resource_and_prompt_name_their_category(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))

    resource = server.handle_payload(
        {"id": 1, "method": "resources/read", "params": {"uri": "project://secrets"}}
    )
    prompt = server.handle_payload(
        {"id": 2, "method": "prompts/get", "params": {"name": "jailbreak"}}
    )

    assert resource["error"]["message"] == "Unknown resource: project://secrets"
    assert prompt["error"]["message"] == "Unknown prompt: jailbreak"


def test_invalid_tools_call_params_returns_invalid_params_error(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))
    payload = {
        "id": 7,
        "method": "tools/call",
        "params": {"name": "execute_command", "arguments": []},
    }

    response = server.handle_payload(json.loads(json.dumps(payload)))

    assert response["ok"] is False
    assert response["request_id"] == "7"
    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "tools/call params.arguments must be an object.",
    }


def test_unknown_method_and_bad_request_shapes(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))

    unknown = server.handle_payload({"id": "m", "method": "sampling/create", "params": {}})
    not_object = server.handle_payload(["tools/list"])
    no_method = server.handle_payload({"id": "n"})
    bad_params = server.handle_payload({"id": "p", "method": "tools/list", "params": "x"})

    assert unknown["error"]["code"] == "UNKNOWN_METHOD"
    assert not_object["error"]["code"] == "INVALID_REQUEST"
    assert no_method["error"]["code"] == "INVALID_REQUEST"
    assert no_method["request_id"] == "n"
    assert bad_params["error"]["code"] == "INVALID_PARAMS"


def test_handler_error_is_redacted_by_default(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))

    response = server.handle_payload(
        {
            "id": "r",
            "method": "tools/call",
            "params": {
                "name": "file_operations",
                "arguments": {"operation": "read", "path": "private/missing.txt"},
            },
        }
    )

    assert response["error"] == {"code": "HANDLER_FAILURE", "message": "Operation failed."}
    assert "missing.txt" not in json.dumps(response)


def test_operation_error_message_reaches_client(tmp_path: Path) -> None:
    server = create_server(workspace_root=str(tmp_path))

    response = server.handle_payload(
        {"id": "o", "method": "tools/call", "params": {"name": "execute_command"}}
    )

    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "execute_command command must be a non-empty string.",
    }
