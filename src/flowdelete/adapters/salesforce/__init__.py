"""Public interface for the Salesforce CLI adapter."""

from __future__ import annotations

from .query import SalesforceFlowVersionQuery, build_flow_version_query, parse_query_output
from .retrieve import SalesforceFlowDefinitionRetriever
from .runner import CommandOutput, CommandRunner, require_executable, run_command
from .schema import FlowVersionRecord, QueryResponse

__all__ = [
    "CommandOutput",
    "CommandRunner",
    "FlowVersionRecord",
    "QueryResponse",
    "SalesforceFlowDefinitionRetriever",
    "SalesforceFlowVersionQuery",
    "build_flow_version_query",
    "parse_query_output",
    "require_executable",
    "run_command",
]
