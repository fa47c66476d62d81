"""Built-in prompt templates.

Arguments are interpolated into the template text unchanged.
"""

from __future__ import annotations

from devassist_mcp.dispatch import Category, Handler, OperationRegistry
from devassist_mcp.tools.content import optional_string, require_string

CODE_REVIEW_TEMPLATE = """You are a senior software engineer performing a code review.

Please analyze the following code and provide:
1. Code quality assessment
2. Potential bugs or issues
3. Security vulnerabilities
4. Performance improvements
5. Best practices recommendations

Code to review:

{code}

Provide detailed feedback with specific line references where applicable."""

DEBUG_ASSISTANT_TEMPLATE = """You are a debugging expert helping to resolve an error.

Error Message:
{error}
{code_section}
Please:
1. Explain what the error means
2. Identify the root cause
3. Provide step-by-step debugging approach
4. Suggest fixes with code examples
5. Recommend preventive measures

Be thorough and practical in your analysis."""

DEPLOYMENT_GUIDE_TEMPLATE = """You are a DevOps expert creating a deployment guide.

Target Environment: {environment}

Please provide a comprehensive deployment plan including:

1. **Pre-deployment Checklist**
   - Environment verification
   - Dependencies check
   - Database migrations needed
   - Configuration validation

2. **Deployment Steps**
   - Detailed step-by-step commands
   - Rollback procedures
   - Health checks

3. **Post-deployment Validation**
   - Smoke tests
   - Monitoring setup
   - Performance verification

4. **Security Considerations**
   - Secrets management
   - Access controls
   - Network security

5. **Rollback Plan**
   - Rollback triggers
   - Rollback steps
   - Data recovery procedures

Provide specific commands and configurations for the {environment} environment."""


def user_message(text: str) -> dict[str, object]:
    """Wrap prompt text as a single user message."""
    return {"messages": [{"role": "user", "content": {"type": "text", "text": text}}]}


def register_builtin_prompts(registry: OperationRegistry) -> None:
    """Register the prompt templates."""
    registry.register(
        Category.PROMPT,
        "code_review",
        _code_review_handler(),
        description="Analyze code and suggest improvements",
        metadata={
            "arguments": [{"name": "code", "description": "Code to review", "required": True}]
        },
    )
    registry.register(
        Category.PROMPT,
        "debug_assistant",
        _debug_assistant_handler(),
        description="Help debug errors",
        metadata={
            "arguments": [
                {"name": "error", "description": "Error message", "required": True},
                {"name": "code", "description": "Code context", "required": False},
            ]
        },
    )
    registry.register(
        Category.PROMPT,
        "deployment_guide",
        _deployment_guide_handler(),
        description="Generate deployment plan",
        metadata={
            "arguments": [
                {"name": "environment", "description": "Target environment", "required": True}
            ]
        },
    )


def _code_review_handler() -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        code = require_string(arguments, "code", "code_review")
        return user_message(CODE_REVIEW_TEMPLATE.format(code=code))

    return handler


def _debug_assistant_handler() -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        error = require_string(arguments, "error", "debug_assistant")
        code = optional_string(arguments, "code", "debug_assistant")
        code_section = f"\nRelated Code:\n{code}\n" if code else ""
        return user_message(DEBUG_ASSISTANT_TEMPLATE.format(error=error, code_section=code_section))

    return handler


def _deployment_guide_handler() -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        environment = require_string(arguments, "environment", "deployment_guide")
        return user_message(DEPLOYMENT_GUIDE_TEMPLATE.format(environment=environment))

    return handler
