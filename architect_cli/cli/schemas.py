"""
Response Schemas.

Pydantic models for every payload the Architect server returns. Responses
are validated at the HTTP boundary (APIClient.get/post/delete with
``schema=``), so a malformed payload fails fast with InvalidResponseError
instead of surfacing later as a missing attribute.

Field names are snake_case in Python and camelCase on the wire. Unknown
fields are kept (``extra="allow"``) so that ``--json`` output reproduces
what the server sent, with two deliberate exceptions: Secret drops every
field except its name and timestamps, and Webhook never dumps its secret.
Measurements the server may send as either integers or floats are typed
``int | float`` so they are dumped back unchanged (``42`` stays ``42``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for server payloads: camelCase aliases, unknown fields kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


def dump(data: Any) -> Any:
    """
    Convert validated payloads back to plain JSON-compatible data.

    Only fields the server actually sent are included, under their wire names.
    """
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(data, dict):
        return {key: dump(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [dump(item) for item in data]
    return data


# =============================================================================
# Tools
# =============================================================================


class Capability(WireModel):
    type: str


class RateLimit(WireModel):
    max_calls_per_minute: int
    max_calls_per_hour: int


class Tool(WireModel):
    """A registered server-side tool."""

    name: str
    description: str = ""
    version: int
    active: bool
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    capabilities: list[Capability] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
    code: str | None = None
    tool_schema: Any = Field(default=None, alias="schema")
    rate_limit: RateLimit | None = None
    dependencies: list[str] = Field(default_factory=list)
    author: str | None = None


class ToolStats(WireModel):
    """Execution statistics for one tool."""

    total_calls: int
    successful_calls: int
    failed_calls: int
    average_duration_ms: int | float
    last_executed_at: str | None = None

    @property
    def success_rate(self) -> str:
        """Successful calls as a percentage of all calls; 0% when never called."""
        if self.total_calls <= 0:
            return "0%"
        return f"{self.successful_calls / self.total_calls * 100:.1f}%"


class ReloadResult(WireModel):
    loaded: int
    skipped: int
    failed: int


# =============================================================================
# Marketplace
# =============================================================================


class MarketplaceEntry(WireModel):
    """A tool listed in the local or remote marketplace."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    description: str = ""
    author: str = ""
    version: str
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    exported_at: str | None = None
    owner_login: str | None = Field(default=None, alias="owner_login")

    @property
    def publisher(self) -> str:
        """GitHub owner for remote entries, declared author otherwise."""
        return self.owner_login or self.author


class InstallResult(WireModel):
    success: bool
    message: str | None = None


# =============================================================================
# Server
# =============================================================================


class Overview(WireModel):
    """Server-wide counters."""

    total_tools: int
    active_tools: int
    total_calls: int
    total_success: int
    total_failed: int
    cache_hit_rate: int | float
    schedules_count: int
    webhooks_count: int
    pipelines_count: int
    aliases_count: int

    @property
    def success_rate(self) -> str:
        if self.total_calls <= 0:
            return "0.0%"
        return f"{self.total_success / self.total_calls * 100:.1f}%"


class AuditEntry(WireModel):
    timestamp: str
    action: str
    tool_name: str
    duration: int | float | None = None
    details: dict[str, Any] | None = None


class CacheStats(WireModel):
    total_entries: int
    hits: int
    misses: int
    hit_rate: int | float
    entries_by_tool: dict[str, int] = Field(default_factory=dict)


class CacheClearResult(WireModel):
    cleared: int


class Permission(WireModel):
    tool_name: str
    tool_version: int
    approved_capabilities: list[Capability] = Field(default_factory=list)
    approved_at: str


class Schedule(WireModel):
    id: str
    tool_name: str
    cron: str
    enabled: bool
    last_run: str | None = None
    next_run: str | None = None


class Webhook(WireModel):
    id: str
    tool_name: str
    path: str
    method: str
    enabled: bool
    secret: str | None = Field(default=None, exclude=True, repr=False)

    @property
    def has_secret(self) -> bool:
        return bool(self.secret)


class PipelineStep(WireModel):
    tool: str


class Pipeline(WireModel):
    name: str
    description: str = ""
    steps: list[PipelineStep] = Field(default_factory=list)


class Secret(WireModel):
    """A stored secret's metadata. Values are never kept, whatever the server sends."""

    model_config = ConfigDict(extra="ignore")

    name: str
    created_at: str
    updated_at: str
