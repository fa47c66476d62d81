"""Chat-completions backed code assistant."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from devassist_mcp.config import AssistantConfig
from devassist_mcp.dispatch import OperationError
from devassist_mcp.tools.content import optional_string, require_string, text_content


@dataclass(slots=True, frozen=True)
class TaskTemplate:
    """System prompt default, user prompt prefix and result heading for one task."""

    system_prompt: str
    user_prefix: str
    heading: str


TASKS: dict[str, TaskTemplate] = {
    "complete": TaskTemplate(
        system_prompt="You are a code completion assistant. Complete the following code.",
        user_prefix="Complete this code",
        heading="Code Completion",
    ),
    "refactor": TaskTemplate(
        system_prompt="Suggest refactorings for the following code.",
        user_prefix="Refactor this code",
        heading="Refactoring Suggestions",
    ),
    "explain": TaskTemplate(
        system_prompt="Explain the following code in detail.",
        user_prefix="Explain this code",
        heading="Code Explanation",
    ),
    "debug": TaskTemplate(
        system_prompt="Help debug the following code and identify issues.",
        user_prefix="Debug this code",
        heading="Debug Assistance",
    ),
}


class CodeAssistant:
    """Builds prompts for a task and sends them to a chat-completions endpoint."""

    def __init__(
        self,
        config: AssistantConfig,
        client: httpx.Client,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._environ = os.environ if environ is None else environ

    def build_messages(
        self, task: str, code: str, custom_prompt: str | None
    ) -> tuple[str, list[dict[str, str]]]:
        """Return the result heading and chat messages for a task.

        A custom prompt replaces the system prompt, and code is concatenated
        into the user message as-is.
        """
        template = TASKS.get(task.lower())
        if template is None:
            system_prompt = custom_prompt or f"You are a helpful coding assistant. Task: {task}"
            user_prompt = f"{task}\n\nCode:\n{code}"
            heading = f"AI Assistance ({task})"
        else:
            system_prompt = custom_prompt or template.system_prompt
            user_prompt = f"{template.user_prefix}:\n\n{code}"
            heading = template.heading
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return heading, messages

    def complete(self, messages: list[dict[str, str]]) -> str:
        """POST the messages and return the first choice's content."""
        api_key = self._environ.get(self._config.api_key_env, "")
        if not api_key:
            raise OperationError(
                code="ASSISTANT_UNAVAILABLE",
                message=f"Set {self._config.api_key_env} to use ai_code_assistant.",
            )
        response = self._client.post(
            f"{self._config.api_base.rstrip('/')}/chat/completions",
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "model": self._config.model,
                "messages": messages,
                "temperature": self._config.temperature,
                "max_tokens": self._config.max_tokens,
            },
        )
        response.raise_for_status()
        payload = response.json()
        return str(payload["choices"][0]["message"]["content"])

    def __call__(self, arguments: dict[str, object]) -> dict[str, object]:
        task = require_string(arguments, "task", "ai_code_assistant")
        code = require_string(arguments, "code", "ai_code_assistant")
        custom_prompt = optional_string(arguments, "prompt", "ai_code_assistant")
        heading, messages = self.build_messages(task, code, custom_prompt)
        return text_content(f"{heading}:\n\n{self.complete(messages)}")
