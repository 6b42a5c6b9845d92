"""
Inbound application record.

The caller sends the stored application as-is (camelCase keys, as persisted by
the portfolio backend). The service is stateless: it never fetches the
application itself.

Fields accept any JSON value. Malformed values (e.g. a numeric description or an
integration level of "abc") reach the scoring engine, which degrades them to
conservative defaults.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApplicationRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Any = None
    name: Any = None
    company_id: Any = None

    # ── Knowledge fields ──
    description: Any = None
    owner: Any = None
    repo_url: Any = None
    language: Any = None
    framework: Any = None
    server_environment: Any = None
    auth_profiles: Any = None
    data_types: Any = Field(None, description="Free text, e.g. 'PII, PCI'")
    metadata_last_reviewed: Any = None

    # ── Exposure ──
    facing: Any = Field(None, description="Internal | External")

    # ── Security tools ──
    sast_tool: Any = None
    sast_integration_level: Any = None
    dast_tool: Any = None
    dast_integration_level: Any = None
    app_firewall_tool: Any = None
    app_firewall_integration_level: Any = None
    api_security_tool: Any = None
    api_security_integration_level: Any = None
    api_security_na: Any = Field(None, alias="apiSecurityNA")

    def as_record(self) -> dict[str, Any]:
        """Plain mapping with the stored (camelCase) field names."""
        return self.model_dump(by_alias=True)
