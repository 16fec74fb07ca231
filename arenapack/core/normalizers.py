"""Normalization of raw YAML documents into typed records.

Each file type with a record shape has one normalizer, registered in
NORMALIZERS. Normalizers never raise on missing or oddly-typed fields:
anything absent simply stays unset.
"""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from arenapack.constants import SYSTEM_TEMPLATE_MAX_LENGTH, TRUNCATION_MARKER
from arenapack.core.files import PackageFile
from arenapack.core.kinds import FileType, parse_yaml
from arenapack.core.models import (
    ArenaDefaults,
    ArenaFile,
    Judge,
    JudgeDefaults,
    McpServer,
    OutputDefaults,
    PromptConfig,
    PromptValidator,
    PromptVariable,
    ProviderConfig,
    ProviderDefaults,
    ProviderPricing,
    Scenario,
    ScenarioTurn,
    SelfPlayConfig,
    SessionDefaults,
    StateDefaults,
    Tool,
)

logger = logging.getLogger(__name__)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _optional_mapping(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _list(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def _first(*values: Any) -> Any:
    """Return the first truthy value, or None."""
    for value in values:
        if value:
            return value
    return None


def truncate_text(text: Any, max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH) -> str | None:
    """Cut text to max_length characters, marking the cut with an ellipsis."""
    if not text:
        return None
    text = str(text)
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER


def _identity(raw: dict[str, Any], file: str) -> tuple[str, str]:
    """Resolve (id, name) for a record.

    id prefers spec.id over metadata.name; name prefers metadata.name over
    spec.id. Both fall back to the file path.
    """
    spec_id = _mapping(raw.get("spec")).get("id")
    metadata_name = _mapping(raw.get("metadata")).get("name")
    return (
        str(_first(spec_id, metadata_name, file)),
        str(_first(metadata_name, spec_id, file)),
    )


# ---------------------------------------------------------------------------
# Per-type normalizers
# ---------------------------------------------------------------------------


def parse_prompt_config(
    raw: dict[str, Any],
    file: str,
    variables: Mapping[str, Any] | None = None,
    *,
    template_max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH,
) -> PromptConfig:
    """Normalize a PromptConfig document.

    Args:
        raw: Parsed YAML document
        file: Bundle path of the document
        variables: Runtime variable values; these win over each variable's
            declared default
        template_max_length: Display cap for the system template

    Returns:
        The parsed PromptConfig
    """
    spec = _mapping(raw.get("spec"))
    record_id, name = _identity(raw, file)
    overrides = variables or {}

    declared = _list(spec.get("variables"))
    parsed_variables = None
    if declared is not None:
        parsed_variables = []
        for item in declared:
            var = _mapping(item)
            var_name = var.get("name")
            override = overrides.get(var_name) if isinstance(var_name, str) else None
            parsed_variables.append(
                PromptVariable(
                    name=var_name,
                    type=var.get("type") or "string",
                    required=var.get("required"),
                    default=_first(override, var.get("default")),
                    description=var.get("description"),
                )
            )

    validators = _list(spec.get("validators"))
    parsed_validators = None
    if validators is not None:
        parsed_validators = [
            PromptValidator(
                type=_mapping(v).get("type"),
                config=_optional_mapping(_mapping(v).get("config")),
            )
            for v in validators
        ]

    return PromptConfig(
        id=record_id,
        name=name,
        file=file,
        version=spec.get("version"),
        description=spec.get("description"),
        task_type=spec.get("task_type"),
        system_template=truncate_text(spec.get("system_template"), template_max_length),
        variables=parsed_variables,
        allowed_tools=_list(spec.get("allowed_tools")),
        validators=parsed_validators,
    )


def parse_provider_config(
    raw: dict[str, Any], file: str, group: str | None = None
) -> ProviderConfig:
    """Normalize a Provider document.

    Pricing and sampling defaults are passed through as declared.
    """
    spec = _mapping(raw.get("spec"))
    record_id, name = _identity(raw, file)

    pricing = _optional_mapping(spec.get("pricing"))
    defaults = _optional_mapping(spec.get("defaults"))

    return ProviderConfig(
        id=record_id,
        name=name,
        file=file,
        type=spec.get("type") or "unknown",
        model=spec.get("model") or "unknown",
        group=group,
        pricing=(
            ProviderPricing(
                input_per_1k_tokens=pricing.get("input_per_1k_tokens"),
                output_per_1k_tokens=pricing.get("output_per_1k_tokens"),
            )
            if pricing is not None
            else None
        ),
        defaults=(
            ProviderDefaults(
                temperature=defaults.get("temperature"),
                max_tokens=defaults.get("max_tokens"),
                top_p=defaults.get("top_p"),
            )
            if defaults is not None
            else None
        ),
    )


def parse_scenario(raw: dict[str, Any], file: str) -> Scenario:
    """Normalize a Scenario document."""
    spec = _mapping(raw.get("spec"))
    record_id, name = _identity(raw, file)

    turns = _list(spec.get("turns"))
    return Scenario(
        id=record_id,
        name=name,
        file=file,
        description=spec.get("description"),
        task_type=spec.get("task_type"),
        turns=(
            [
                ScenarioTurn(role=_mapping(t).get("role"), content=_mapping(t).get("content"))
                for t in turns
            ]
            if turns is not None
            else None
        ),
        tags=_list(spec.get("tags")),
    )


def parse_tool(raw: dict[str, Any], file: str) -> Tool:
    """Normalize a Tool document.

    Tools have no spec-level id; the name comes from metadata or the path.
    """
    spec = _mapping(raw.get("spec"))
    config = _mapping(spec.get("config"))
    name = _mapping(raw.get("metadata")).get("name")

    return Tool(
        name=str(name or file),
        file=file,
        description=spec.get("description") or "",
        mode=config.get("mode"),
        timeout=config.get("timeout"),
        input_schema=spec.get("input_schema"),
        output_schema=spec.get("output_schema"),
        has_mock_data="mock_result" in config,
    )


def _parse_arena_defaults(spec: dict[str, Any]) -> ArenaDefaults | None:
    defaults = _optional_mapping(spec.get("defaults"))
    if defaults is None:
        return None

    output = _optional_mapping(defaults.get("output"))
    session = _optional_mapping(defaults.get("session"))
    state = _optional_mapping(defaults.get("state"))

    return ArenaDefaults(
        temperature=defaults.get("temperature"),
        top_p=defaults.get("top_p"),
        max_tokens=defaults.get("max_tokens"),
        seed=defaults.get("seed"),
        concurrency=defaults.get("concurrency"),
        timeout=defaults.get("timeout"),
        max_retries=defaults.get("max_retries"),
        output=(
            OutputDefaults(dir=output.get("dir"), formats=_list(output.get("formats")))
            if output is not None
            else None
        ),
        session=(
            SessionDefaults(enabled=session.get("enabled"), dir=session.get("dir"))
            if session is not None
            else None
        ),
        fail_on=_list(defaults.get("fail_on")),
        state=(
            StateDefaults(
                enabled=state.get("enabled"),
                max_history_turns=state.get("max_history_turns"),
                persistence=state.get("persistence"),
                redis_url=state.get("redis_url"),
            )
            if state is not None
            else None
        ),
    )


def resolve_reference(entry_point: str, reference: str) -> str:
    """Resolve a file referenced by the arena file to its bundle path.

    References are relative to the directory holding the arena file.
    """
    base = posixpath.dirname(entry_point)
    return posixpath.normpath(posixpath.join(base, reference.lstrip("/")))


def parse_arena(raw: dict[str, Any], file: str) -> ArenaFile | None:
    """Normalize the arena (entry point) document.

    Returns None if the document has no spec; its metadata is then not used
    either.
    """
    spec = _optional_mapping(raw.get("spec"))
    if spec is None:
        return None

    metadata = _mapping(raw.get("metadata"))
    arena = ArenaFile(
        name=metadata.get("name"),
        namespace=metadata.get("namespace"),
        defaults=_parse_arena_defaults(spec),
    )

    for server_name, server in _mapping(spec.get("mcp_servers")).items():
        server = _mapping(server)
        arena.mcp_servers[server_name] = McpServer(
            command=server.get("command"),
            args=_list(server.get("args")),
            env=_optional_mapping(server.get("env")),
        )

    for judge_name, judge in _mapping(spec.get("judges")).items():
        arena.judges[judge_name] = Judge(provider=_mapping(judge).get("provider"))

    judge_defaults = _optional_mapping(spec.get("judge_defaults"))
    if judge_defaults is not None:
        arena.judge_defaults = JudgeDefaults(
            prompt=judge_defaults.get("prompt"),
            registry_path=judge_defaults.get("registry_path"),
        )

    self_play = _optional_mapping(spec.get("self_play"))
    if self_play is not None:
        arena.self_play = SelfPlayConfig(
            enabled=bool(self_play.get("enabled") or False),
            persona=self_play.get("persona"),
            provider=self_play.get("provider"),
        )

    for ref in _list(spec.get("prompt_configs")) or []:
        ref = _mapping(ref)
        ref_vars = _optional_mapping(ref.get("vars"))
        if isinstance(ref.get("file"), str) and ref_vars:
            arena.prompt_vars[resolve_reference(file, ref["file"])] = ref_vars

    for ref in _list(spec.get("providers")) or []:
        ref = _mapping(ref)
        if isinstance(ref.get("file"), str) and ref.get("group"):
            arena.provider_groups[resolve_reference(file, ref["file"])] = str(ref["group"])

    return arena


# ---------------------------------------------------------------------------
# Registry and dispatch
# ---------------------------------------------------------------------------

# Normalizer signature: (document, path, arena file or None, template cap)
Normalizer = Callable[[dict[str, Any], str, ArenaFile | None, int], Any]

NORMALIZERS: dict[FileType, Normalizer] = {
    FileType.ARENA: lambda raw, file, arena, cap: parse_arena(raw, file),
    FileType.PROMPT: lambda raw, file, arena, cap: parse_prompt_config(
        raw,
        file,
        arena.prompt_vars.get(file) if arena else None,
        template_max_length=cap,
    ),
    FileType.PROVIDER: lambda raw, file, arena, cap: parse_provider_config(
        raw, file, arena.provider_groups.get(file) if arena else None
    ),
    FileType.SCENARIO: lambda raw, file, arena, cap: parse_scenario(raw, file),
    FileType.TOOL: lambda raw, file, arena, cap: parse_tool(raw, file),
}


@dataclass
class NormalizedBundle:
    """Typed records of a bundle, grouped by file type."""

    arena: ArenaFile | None = None
    prompt_configs: list[PromptConfig] = field(default_factory=list)
    providers: list[ProviderConfig] = field(default_factory=list)
    scenarios: list[Scenario] = field(default_factory=list)
    tools: list[Tool] = field(default_factory=list)


def normalize_document(
    file_type: FileType,
    content: str,
    path: str,
    arena: ArenaFile | None = None,
    template_max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH,
) -> Any | None:
    """Parse one file's content and run its type's normalizer.

    Returns None for types without a normalizer (persona, other) and for
    content that is not a YAML mapping.
    """
    normalizer = NORMALIZERS.get(file_type)
    if normalizer is None:
        return None

    raw = parse_yaml(content)
    if not isinstance(raw, dict):
        return None
    return normalizer(raw, path, arena, template_max_length)


def normalize_files(
    files: list[PackageFile],
    contents: Mapping[str, str],
    entry_point: str | None = None,
    *,
    template_max_length: int = SYSTEM_TEMPLATE_MAX_LENGTH,
) -> NormalizedBundle:
    """Normalize every typed file of a bundle.

    The entry point is normalized first so that the variable overrides and
    provider groups it declares can be applied to the files it references.

    Args:
        files: Classified files, in path order
        contents: Mapping of path to file content
        entry_point: Path of the arena file, if any
        template_max_length: Display cap for prompt system templates

    Returns:
        NormalizedBundle with one record per typed file
    """
    bundle = NormalizedBundle()

    if entry_point and contents.get(entry_point):
        bundle.arena = normalize_document(
            FileType.ARENA, contents[entry_point], entry_point,
            template_max_length=template_max_length,
        )

    collections: dict[FileType, list[Any]] = {
        FileType.PROMPT: bundle.prompt_configs,
        FileType.PROVIDER: bundle.providers,
        FileType.SCENARIO: bundle.scenarios,
        FileType.TOOL: bundle.tools,
    }

    for package_file in files:
        target = collections.get(package_file.type)
        if target is None:
            continue

        content = contents.get(package_file.path)
        if not content:
            continue

        record = normalize_document(
            package_file.type, content, package_file.path, bundle.arena, template_max_length
        )
        if record is None:
            logger.debug("Skipping %s: not a YAML mapping", package_file.path)
            continue
        target.append(record)

    return bundle
