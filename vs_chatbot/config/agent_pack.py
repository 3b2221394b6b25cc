"""
Agent pack loader.

An agent pack is a YAML (or JSON) manifest that carries the localized
strings, prompts, menu definition and flow switches of a deployed agent.
It is read once at startup; the parsed models are frozen.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger(__name__)

MANIFEST_FILENAMES = ("agent-pack.yaml", "agent-pack.yml", "agent-pack.json")

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")


class PackModel(BaseModel):
    """Base for agent pack sections: camelCase keys, unknown keys kept."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)


class PackMetadata(PackModel):
    id: str
    display_name: str = Field(alias="displayName")
    description: str | None = None
    default_language: str = Field(default="en", alias="defaultLanguage")
    tags: list[str] | None = None


class LanguageBlock(PackModel):
    """Localized content for one language."""

    greeting_message: str | None = Field(default=None, alias="greetingMessage")
    welcome_message: str | None = Field(default=None, alias="welcomeMessage")
    system_prompt: str | None = Field(default=None, alias="systemPrompt")
    strings: dict[str, str] | None = None

    def template(self, key: str) -> str | None:
        """Look up a message template by its manifest key."""
        if key in ("welcomeMessage", "greetingMessage"):
            return self.greeting_message or self.welcome_message
        value = (self.model_extra or {}).get(key)
        return value if isinstance(value, str) else None


class LLMPackConfig(PackModel):
    provider: str | None = None
    model: str | None = None
    temperature: float | str | None = None
    max_tokens: int | str | None = Field(default=None, alias="maxTokens")
    agent_prompt: str | None = Field(default=None, alias="agentPrompt")
    verbose: bool | str | None = None


class MemoryPackConfig(PackModel):
    backend: str | None = None
    window: int | str | None = None
    redis_url: str | None = Field(default=None, alias="redisUrl")


class WelcomeFlow(PackModel):
    enabled: bool | str | None = None
    send_on_profile: bool | str | None = Field(default=None, alias="sendOnProfile")
    template_key: str | None = Field(default=None, alias="templateKey")


class AuthenticationFlow(PackModel):
    enabled: bool | str | None = None
    credential_definition_id: str | None = Field(default=None, alias="credentialDefinitionId")


class MenuItemConfig(PackModel):
    id: str
    label_key: str | None = Field(default=None, alias="labelKey")
    label: str | None = None
    action: str | None = None
    visible_when: Literal["always", "authenticated", "unauthenticated"] | None = Field(
        default=None, alias="visibleWhen"
    )


class MenuFlow(PackModel):
    items: list[MenuItemConfig] | None = None


class Flows(PackModel):
    welcome: WelcomeFlow | None = None
    authentication: AuthenticationFlow | None = None
    menu: MenuFlow | None = None


class AgentPack(PackModel):
    """Parsed agent pack manifest."""

    metadata: PackMetadata | None = None
    languages: dict[str, LanguageBlock] | None = None
    llm: LLMPackConfig | None = None
    memory: MemoryPackConfig | None = None
    flows: Flows | None = None


@dataclass
class AgentPackLoadResult:
    """Outcome of loading an agent pack. Loading never raises."""

    pack: AgentPack | None
    manifest_path: Path | None
    warnings: list[str] = field(default_factory=list)
    error_message: str | None = None


def resolve_placeholders(value: Any) -> Any:
    """Replace ``${VAR}`` placeholders with environment values, recursively.

    Unknown variables are left untouched.
    """
    if isinstance(value, str):
        return _PLACEHOLDER.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    if isinstance(value, list):
        return [resolve_placeholders(item) for item in value]
    if isinstance(value, dict):
        return {key: resolve_placeholders(val) for key, val in value.items()}
    return value


def find_manifest_path(base_path: Path) -> Path | None:
    """Return the manifest file for a file or directory path, if any."""
    if base_path.is_file():
        return base_path
    if not base_path.is_dir():
        return None
    for name in MANIFEST_FILENAMES:
        candidate = base_path / name
        if candidate.exists():
            return candidate
    return None


def load_agent_pack(pack_path: str | Path) -> AgentPackLoadResult:
    """Load, resolve and validate the agent pack found at ``pack_path``."""
    base_path = Path(pack_path).resolve()
    manifest_path = find_manifest_path(base_path)

    if manifest_path is None:
        warning = f'No agent pack found at "{base_path}"'
        logger.warning("agent_pack_not_found", path=str(base_path))
        return AgentPackLoadResult(pack=None, manifest_path=None, warnings=[warning])

    try:
        # yaml.safe_load also reads JSON manifests
        raw = yaml.safe_load(manifest_path.read_text(encoding="utf-8")) or {}
        pack = AgentPack.model_validate(resolve_placeholders(raw))
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error("agent_pack_load_failed", path=str(manifest_path), error=str(e))
        return AgentPackLoadResult(
            pack=None,
            manifest_path=manifest_path,
            warnings=[f"Error loading agent pack: {e}"],
            error_message=str(e),
        )

    logger.info(
        "agent_pack_loaded",
        path=str(manifest_path),
        languages=sorted((pack.languages or {}).keys()),
    )
    return AgentPackLoadResult(pack=pack, manifest_path=manifest_path)
