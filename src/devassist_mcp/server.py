"""STDIO MCP server entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import httpx

from devassist_mcp import __version__
from devassist_mcp.config import CliOverrides, ServerConfig, load_effective_config
from devassist_mcp.dispatch import Category, Failure, OperationRegistry, UnknownOperation
from devassist_mcp.errors import ErrorExposure, describe_failure
from devassist_mcp.logging import AuditEvent, RequestAuditLog
from devassist_mcp.prompts import register_builtin_prompts
from devassist_mcp.resources import register_builtin_resources, resolve_resource
from devassist_mcp.tools import register_builtin_tools

SERVER_NAME = "development-assistant"
PROTOCOL_VERSION = "2024-11-05"
HTTP_TIMEOUT_SECONDS = 60.0

LISTING_METHODS = {
    "tools/list": Category.TOOL,
    "resources/list": Category.RESOURCE,
    "prompts/list": Category.PROMPT,
}


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request."""

    request_id: str
    method: str
    params: dict[str, object]


@dataclass(slots=True, frozen=True)
class Call:
    """A request resolved to one registered operation."""

    category: Category
    name: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog="devassist-mcp")
    parser.add_argument("--workspace-root", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument(
        "--error-exposure",
        choices=tuple(item.value for item in ErrorExposure),
        required=False,
        default=None,
    )
    parser.add_argument("--database-path", required=False, default=None)
    parser.add_argument("--assistant-model", required=False, default=None)
    parser.add_argument("--assistant-api-base", required=False, default=None)
    return parser


class StdioServer:
    """JSON-line STDIO server routing MCP methods to registered operations."""

    def __init__(self, config: ServerConfig, http_client: httpx.Client | None = None) -> None:
        self._config = config
        self._http_client = http_client or httpx.Client(timeout=HTTP_TIMEOUT_SECONDS)
        self._audit_logger = RequestAuditLog(path=config.data_dir / "audit.jsonl")
        self._registry = OperationRegistry()
        register_builtin_tools(self._registry, config=config, http_client=self._http_client)
        register_builtin_resources(
            self._registry,
            config=config,
            read_audit_entries=self._audit_logger.tail,
        )
        register_builtin_prompts(self._registry)
        self._fallback_request_counter = 0

    @property
    def registry(self) -> OperationRegistry:
        """Return the registration table."""
        return self._registry

    @property
    def audit_logger(self) -> RequestAuditLog:
        """Return the request audit logger."""
        return self._audit_logger

    def close(self) -> None:
        """Release the HTTP client."""
        self._http_client.close()

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests from stdin and write JSON-line responses."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            out_stream.write(f"{json.dumps(response, sort_keys=True)}\n")
            out_stream.flush()

    def handle_json_line(self, raw_line: str) -> dict[str, object]:
        """Handle a single JSON-line request."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            request_id = self.next_request_id()
            response = self.error_response(
                request_id=request_id,
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
            self.log_request(
                request_id=request_id,
                category="server",
                operation="invalid_json",
                arguments={"raw_line_length": len(raw_line)},
                response=response,
            )
            return response
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object]:
        """Validate, route and dispatch a parsed payload."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            request_id_value = parsed.get("request_id")
            request_id = (
                request_id_value if isinstance(request_id_value, str) else self.next_request_id()
            )
            self.log_request(
                request_id=request_id,
                category="server",
                operation="invalid_request",
                arguments={},
                response=parsed,
            )
            return parsed

        request = parsed
        if request.method == "initialize" or request.method in LISTING_METHODS:
            response = self.success_response(
                request_id=request.request_id,
                result=self.describe_server(request.method),
            )
            self.log_request(
                request_id=request.request_id,
                category="server",
                operation=request.method,
                arguments=request.params,
                response=response,
            )
            return response

        call = self.resolve_call(request)
        if isinstance(call, dict):
            self.log_request(
                request_id=request.request_id,
                category="server",
                operation=request.method,
                arguments=request.params,
                response=call,
            )
            return call

        try:
            outcome = self._registry.dispatch_outcome(call.category, call.name, call.params)
        except UnknownOperation as error:
            response = self.error_response(
                request_id=request.request_id,
                code=error.code,
                message=error.message,
            )
        else:
            if isinstance(outcome, Failure):
                response = self.failure_response(
                    request_id=request.request_id,
                    error=describe_failure(outcome.error, self._config.error_exposure),
                )
            else:
                response = self.success_response(
                    request_id=request.request_id,
                    result=outcome.value,
                )
        self.log_request(
            request_id=request.request_id,
            category=call.category.value,
            operation=call.name,
            arguments=call.params,
            response=response,
        )
        return response

    def resolve_call(self, request: Request) -> Call | dict[str, object]:
        """Map an MCP method to (category, name, params) or an error envelope."""
        if request.method == "tools/call" or request.method == "prompts/get":
            category = Category.TOOL if request.method == "tools/call" else Category.PROMPT
            name_value = request.params.get("name")
            arguments_value = request.params.get("arguments", {})
            if not isinstance(name_value, str) or not name_value:
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message=f"{request.method} params.name must be a non-empty string.",
                )
            if arguments_value is None:
                arguments_value = {}
            if not isinstance(arguments_value, dict):
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message=f"{request.method} params.arguments must be an object.",
                )
            return Call(category=category, name=name_value, params=arguments_value)

        if request.method == "resources/read":
            uri_value = request.params.get("uri")
            if not isinstance(uri_value, str) or not uri_value:
                return self.error_response(
                    request_id=request.request_id,
                    code="INVALID_PARAMS",
                    message="resources/read params.uri must be a non-empty string.",
                )
            resolved = resolve_resource(uri_value, self._registry.names(Category.RESOURCE))
            if resolved is None:
                return Call(category=Category.RESOURCE, name=uri_value, params={"uri": uri_value})
            name, bound = resolved
            return Call(
                category=Category.RESOURCE,
                name=name,
                params={"uri": uri_value, **bound},
            )

        return self.error_response(
            request_id=request.request_id,
            code="UNKNOWN_METHOD",
            message=f"Unknown method: {request.method}",
        )

    def describe_server(self, method: str) -> dict[str, object]:
        """Build the result for initialize and the list methods."""
        if method == "initialize":
            return {
                "protocolVersion": PROTOCOL_VERSION,
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
                "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
            }
        category = LISTING_METHODS[method]
        entries: list[dict[str, object]] = []
        for registration in self._registry.registrations(category):
            metadata = registration.metadata
            if category is Category.TOOL:
                entries.append(
                    {
                        "name": registration.name,
                        "description": registration.description,
                        "inputSchema": metadata.get("inputSchema", {"type": "object"}),
                    }
                )
            elif category is Category.RESOURCE:
                entries.append(
                    {
                        "uri": registration.name,
                        "name": metadata.get("name", registration.name),
                        "description": registration.description,
                        "mimeType": metadata.get("mimeType", "text/plain"),
                    }
                )
            else:
                entries.append(
                    {
                        "name": registration.name,
                        "description": registration.description,
                        "arguments": metadata.get("arguments", []),
                    }
                )
        key = {"tool": "tools", "resource": "resources", "prompt": "prompts"}[category.value]
        return {key: entries}

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )

        request_id = self.extract_request_id(payload.get("id"))
        method = payload.get("method")
        params = payload.get("params", {})

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id,
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id,
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )

        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, request_id: object) -> str:
        """Extract request ID from payload or synthesize deterministic fallback."""
        if isinstance(request_id, str) and request_id:
            return request_id
        if isinstance(request_id, int) and not isinstance(request_id, bool):
            return str(request_id)
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate deterministic fallback request IDs for invalid/missing IDs."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(request_id: str, result: dict[str, object]) -> dict[str, object]:
        """Build success envelope."""
        return {"request_id": request_id, "ok": True, "result": result}

    @staticmethod
    def error_response(request_id: str, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return StdioServer.failure_response(
            request_id=request_id, error={"code": code, "message": message}
        )

    @staticmethod
    def failure_response(request_id: str, error: dict[str, object]) -> dict[str, object]:
        """Build error envelope from an already-exposed error payload."""
        return {"request_id": request_id, "ok": False, "result": {}, "error": error}

    def log_request(
        self,
        request_id: str,
        category: str,
        operation: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        """Log one sanitized request event."""
        self._audit_logger.append(
            AuditEvent.for_response(
                request_id=request_id,
                category=category,
                operation=operation,
                arguments=arguments,
                response=response,
            )
        )


def create_server(
    workspace_root: str = ".",
    cli_overrides: CliOverrides | None = None,
    http_client: httpx.Client | None = None,
) -> StdioServer:
    """Create a server from the effective workspace configuration."""
    config = load_effective_config(
        workspace_root=Path(workspace_root).resolve(), overrides=cli_overrides
    )
    return StdioServer(config=config, http_client=http_client)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the development assistant server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        error_exposure=args.error_exposure,
        database_path=Path(args.database_path) if args.database_path is not None else None,
        assistant_model=args.assistant_model,
        assistant_api_base=args.assistant_api_base,
    )
    server = create_server(workspace_root=args.workspace_root, cli_overrides=overrides)
    try:
        server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
