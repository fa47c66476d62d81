from __future__ import annotations

from pathlib import Path

from devassist_mcp.server import create_server


def _result(tmp_path: Path, method: str) -> dict[str, object]:
    server = create_server(workspace_root=str(tmp_path))
    response = server.handle_payload({"id": method, "method": method, "params": {}})
    assert response["ok"] is True
    return response["result"]


def test_tools_list_exposes_input_schemas(tmp_path: Path) -> None:
    tools = _result(tmp_path, "tools/list")["tools"]

    assert [tool["name"] for tool in tools] == [
        "execute_command",
        "file_operations",
        "git_operations",
        "dependency_manager",
        "code_analysis",
        "ai_code_assistant",
        "environment_manager",
        "database_tools",
    ]
    execute = tools[0]
    assert execute["inputSchema"]["required"] == ["command"]
    assert execute["inputSchema"]["properties"]["command"]["type"] == "string"
    file_ops = tools[1]
    assert file_ops["inputSchema"]["properties"]["operation"]["enum"] == [
        "read",
        "write",
        "search",
    ]


def test_resources_list_shape(tmp_path: Path) -> None:
    resources = _result(tmp_path, "resources/list")["resources"]

    assert resources[0] == {
        "uri": "project://files/{path}",
        "name": "Project Files",
        "description": "Access project files",
        "mimeType": "text/plain",
    }
    assert {resource["uri"] for resource in resources} == {
        "project://files/{path}",
        "project://git/status",
        "project://config",
        "project://logs",
    }


def test_prompts_list_shape(tmp_path: Path) -> None:
    prompts = _result(tmp_path, "prompts/list")["prompts"]

    assert [prompt["name"] for prompt in prompts] == [
        "code_review",
        "debug_assistant",
        "deployment_guide",
    ]
    assert prompts[1]["arguments"] == [
        {"name": "error", "description": "Error message", "required": True},
        {"name": "code", "description": "Code context", "required": False},
    ]
