"""Typed records parsed from bundle files, and the aggregate content view.

Records serialize to camelCase dictionaries; optional fields that are not
set are left out.
"""

from dataclasses import dataclass, field
from typing import Any

from arenapack.core.files import PackageFile
from arenapack.core.tree import TreeNode


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {key: value for key, value in data.items() if value is not None}


# ---------------------------------------------------------------------------
# Prompt configs
# ---------------------------------------------------------------------------


@dataclass
class PromptVariable:
    name: str | None
    type: str = "string"
    required: bool | None = None
    default: Any = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "type": self.type,
                "required": self.required,
                "default": self.default,
                "description": self.description,
            }
        )


@dataclass
class PromptValidator:
    type: str | None
    config: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"type": self.type, "config": self.config})


@dataclass
class PromptConfig:
    """A parsed PromptConfig file."""

    id: str
    name: str
    file: str
    version: str | None = None
    description: str | None = None
    task_type: str | None = None
    system_template: str | None = None  # truncated for display
    variables: list[PromptVariable] | None = None
    allowed_tools: list[str] | None = None
    validators: list[PromptValidator] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "version": self.version,
                "description": self.description,
                "taskType": self.task_type,
                "systemTemplate": self.system_template,
                "variables": (
                    [v.to_dict() for v in self.variables] if self.variables is not None else None
                ),
                "allowedTools": self.allowed_tools,
                "validators": (
                    [v.to_dict() for v in self.validators] if self.validators is not None else None
                ),
                "file": self.file,
            }
        )


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


@dataclass
class ProviderPricing:
    input_per_1k_tokens: float | None = None
    output_per_1k_tokens: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "inputPer1kTokens": self.input_per_1k_tokens,
                "outputPer1kTokens": self.output_per_1k_tokens,
            }
        )


@dataclass
class ProviderDefaults:
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"temperature": self.temperature, "maxTokens": self.max_tokens, "topP": self.top_p}
        )


@dataclass
class ProviderConfig:
    """A parsed Provider file."""

    id: str
    name: str
    file: str
    type: str = "unknown"
    model: str = "unknown"
    group: str | None = None
    pricing: ProviderPricing | None = None
    defaults: ProviderDefaults | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "type": self.type,
                "model": self.model,
                "group": self.group,
                "pricing": self.pricing.to_dict() if self.pricing else None,
                "defaults": self.defaults.to_dict() if self.defaults else None,
                "file": self.file,
            }
        )


# ---------------------------------------------------------------------------
# Scenarios and tools
# ---------------------------------------------------------------------------


@dataclass
class ScenarioTurn:
    role: str | None
    content: str | None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"role": self.role, "content": self.content})


@dataclass
class Scenario:
    """A parsed Scenario file."""

    id: str
    name: str
    file: str
    description: str | None = None
    task_type: str | None = None
    turns: list[ScenarioTurn] | None = None
    tags: list[str] | None = None

    @property
    def turn_count(self) -> int | None:
        return len(self.turns) if self.turns is not None else None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "description": self.description,
                "taskType": self.task_type,
                "turns": [t.to_dict() for t in self.turns] if self.turns is not None else None,
                "turnCount": self.turn_count,
                "tags": self.tags,
                "file": self.file,
            }
        )


@dataclass
class Tool:
    """A parsed Tool file."""

    name: str
    file: str
    description: str = ""
    mode: str | None = None
    timeout: Any = None
    input_schema: Any = None
    output_schema: Any = None
    has_mock_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "description": self.description,
                "mode": self.mode,
                "timeout": self.timeout,
                "inputSchema": self.input_schema,
                "outputSchema": self.output_schema,
                "hasMockData": self.has_mock_data,
                "file": self.file,
            }
        )


# ---------------------------------------------------------------------------
# Arena (entry point) file
# ---------------------------------------------------------------------------


@dataclass
class McpServer:
    command: str | None
    args: list[str] | None = None
    env: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"command": self.command, "args": self.args, "env": self.env})


@dataclass
class Judge:
    provider: str | None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"provider": self.provider})


@dataclass
class JudgeDefaults:
    prompt: str | None = None
    registry_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"prompt": self.prompt, "registryPath": self.registry_path})


@dataclass
class SelfPlayConfig:
    enabled: bool = False
    persona: str | None = None
    provider: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"enabled": self.enabled, "persona": self.persona, "provider": self.provider}
        )


@dataclass
class OutputDefaults:
    dir: str | None = None
    formats: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"dir": self.dir, "formats": self.formats})


@dataclass
class SessionDefaults:
    enabled: bool | None = None
    dir: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"enabled": self.enabled, "dir": self.dir})


@dataclass
class StateDefaults:
    enabled: bool | None = None
    max_history_turns: int | None = None
    persistence: str | None = None
    redis_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "enabled": self.enabled,
                "maxHistoryTurns": self.max_history_turns,
                "persistence": self.persistence,
                "redisUrl": self.redis_url,
            }
        )


@dataclass
class ArenaDefaults:
    """Run-wide defaults declared by the arena file."""

    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None
    seed: int | None = None
    concurrency: int | None = None
    timeout: str | None = None
    max_retries: int | None = None
    output: OutputDefaults | None = None
    session: SessionDefaults | None = None
    fail_on: list[str] | None = None
    state: StateDefaults | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "temperature": self.temperature,
                "topP": self.top_p,
                "maxTokens": self.max_tokens,
                "seed": self.seed,
                "concurrency": self.concurrency,
                "timeout": self.timeout,
                "maxRetries": self.max_retries,
                "output": self.output.to_dict() if self.output else None,
                "session": self.session.to_dict() if self.session else None,
                "failOn": self.fail_on,
                "state": self.state.to_dict() if self.state else None,
            }
        )


@dataclass
class ArenaFile:
    """Everything the arena file contributes to the content view."""

    name: str | None = None
    namespace: str | None = None
    mcp_servers: dict[str, McpServer] = field(default_factory=dict)
    judges: dict[str, Judge] = field(default_factory=dict)
    judge_defaults: JudgeDefaults | None = None
    self_play: SelfPlayConfig | None = None
    defaults: ArenaDefaults | None = None
    # Referenced file -> runtime variable overrides / provider group
    prompt_vars: dict[str, dict[str, Any]] = field(default_factory=dict)
    provider_groups: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


@dataclass
class ContentMetadata:
    name: str
    namespace: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"name": self.name, "namespace": self.namespace})


@dataclass
class ArenaConfigContent:
    """The full content view of an arena config's bundle."""

    metadata: ContentMetadata
    files: list[PackageFile] = field(default_factory=list)
    file_tree: list[TreeNode] = field(default_factory=list)
    entry_point: str | None = None
    prompt_configs: list[PromptConfig] = field(default_factory=list)
    providers: list[ProviderConfig] = field(default_factory=list)
    scenarios: list[Scenario] = field(default_factory=list)
    tools: list[Tool] = field(default_factory=list)
    mcp_servers: dict[str, McpServer] = field(default_factory=dict)
    judges: dict[str, Judge] = field(default_factory=dict)
    judge_defaults: JudgeDefaults | None = None
    self_play: SelfPlayConfig | None = None
    defaults: ArenaDefaults | None = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls, reason: str) -> "ArenaConfigContent":
        """Return an empty view whose name explains why there is no content."""
        return cls(metadata=ContentMetadata(name=reason))

    @property
    def is_empty(self) -> bool:
        return not self.files

    def summary(self) -> dict[str, int]:
        """Return record counts for display and logging."""
        return {
            "fileCount": len(self.files),
            "promptCount": len(self.prompt_configs),
            "providerCount": len(self.providers),
            "scenarioCount": len(self.scenarios),
            "toolCount": len(self.tools),
        }

    def to_dict(self) -> dict[str, Any]:
        result = _compact(
            {
                "metadata": self.metadata.to_dict(),
                "files": [f.to_dict() for f in self.files],
                "fileTree": [n.to_dict() for n in self.file_tree],
                "entryPoint": self.entry_point,
                "promptConfigs": [p.to_dict() for p in self.prompt_configs],
                "providers": [p.to_dict() for p in self.providers],
                "scenarios": [s.to_dict() for s in self.scenarios],
                "tools": [t.to_dict() for t in self.tools],
                "mcpServers": {k: v.to_dict() for k, v in self.mcp_servers.items()},
                "judges": {k: v.to_dict() for k, v in self.judges.items()},
                "judgeDefaults": self.judge_defaults.to_dict() if self.judge_defaults else None,
                "selfPlay": self.self_play.to_dict() if self.self_play else None,
                "defaults": self.defaults.to_dict() if self.defaults else None,
            }
        )
        if self.warnings:
            result["warnings"] = list(self.warnings)
        return result


@dataclass(frozen=True)
class BundleFile:
    """A single bundle file with its content."""

    path: str
    content: str

    @property
    def size(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "content": self.content, "size": self.size}
