"""Flow version lookup through the Salesforce Tooling API."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from flowdelete.config.salesforce import SalesforceCliConfig, get_salesforce_cli_config
from flowdelete.domain.errors import ResolutionError
from flowdelete.domain.versions import RemoteVersionRecord

from .runner import CommandOutput, CommandRunner, run_command
from .schema import FlowVersionRecord, QueryResponse, QueryResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from flowdelete.domain.ports.querying import VersionQueryService

log = getLogger(__name__)

FLOW_VERSION_QUERY = (
    "SELECT Id, Definition.DeveloperName, VersionNumber, Status "
    "FROM Flow WHERE Definition.DeveloperName IN ({names})"
)

_DECODER = json.JSONDecoder()


def soql_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def build_flow_version_query(artifact_names: Iterable[str]) -> str:
    names = ",".join(soql_literal(name) for name in artifact_names if name)
    return FLOW_VERSION_QUERY.format(names=names)


def iter_json_documents(text: str) -> Iterator[object]:
    """Yield every JSON object embedded in ``text``.

    The CLI may print several documents, or banners and warnings around them.
    Text that does not decode is skipped.
    """

    index = 0
    skipped = False
    while True:
        start = text.find("{", index)
        if start == -1:
            break
        try:
            document, end = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            skipped = True
            index = start + 1
            continue
        yield document
        index = end
    if skipped:
        log.warning("Skipped unparsable output from the Salesforce CLI")


def parse_query_output(output: CommandOutput, *, request: str) -> list[RemoteVersionRecord]:
    """Collect version records from every usable response document.

    Raises ``ResolutionError`` when neither stdout nor stderr holds a successful
    response.
    """

    records: list[RemoteVersionRecord] = []
    usable = 0
    errors: list[str] = []

    for stream in (output.stdout, output.stderr):
        for document in iter_json_documents(stream):
            try:
                response = QueryResponse.model_validate(document)
            except ValidationError:
                log.warning("Skipping malformed query response chunk")
                continue
            if not response.succeeded or response.result is None:
                errors.append(response.error_detail())
                log.warning("Flow version query reported an error: %s", errors[-1])
                continue
            usable += 1
            records.extend(_records_from(response.result))

    if usable == 0:
        detail = errors[0] if errors else "no JSON response"
        raise ResolutionError(
            f"flow version query failed (exit code {output.returncode}): {detail}",
            request=request,
        )
    return records


def _records_from(result: QueryResult) -> Iterator[RemoteVersionRecord]:
    if not result.done:
        log.warning("Flow version query returned a partial result set")
    for raw in result.records:
        try:
            record = FlowVersionRecord.model_validate(raw)
        except ValidationError as exc:
            log.warning("Skipping malformed flow version record: %s", exc.errors()[0]["msg"])
            continue
        yield RemoteVersionRecord(
            artifact_name=record.definition.developer_name,
            version_number=record.version_number,
            status=record.status,
        )


@dataclass(slots=True)
class SalesforceFlowVersionQuery:
    """Query every version of the given flows with one ``sf data query`` call."""

    config: SalesforceCliConfig = field(default_factory=get_salesforce_cli_config)
    runner: CommandRunner = field(default=run_command)

    def __call__(self, artifact_names: Sequence[str]) -> list[RemoteVersionRecord]:
        query = build_flow_version_query(artifact_names)
        args = [
            self.config.executable,
            "data",
            "query",
            "--use-tooling-api",
            "--json",
            "--query",
            query,
            *self.config.target_org_args(),
        ]
        try:
            output = self.runner(args, self.config.query_timeout_seconds)
        except subprocess.TimeoutExpired as exc:
            raise ResolutionError(
                f"flow version query timed out after {self.config.query_timeout_seconds:g}s",
                request=query,
            ) from exc
        except OSError as exc:
            raise ResolutionError(
                f"cannot run {self.config.executable}: {exc}", request=query
            ) from exc

        records = parse_query_output(output, request=query)
        log.info("Found %d remote flow version(s)", len(records))
        return records


if TYPE_CHECKING:
    _query_check: VersionQueryService = SalesforceFlowVersionQuery()
