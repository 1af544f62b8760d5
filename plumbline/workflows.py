"""Parse CI workflow files (GitHub Actions) into a CI-agnostic structure.

Signal detectors consume :class:`WorkflowFile` rather than re-reading raw
YAML themselves. The ``on:`` block may be written as a string, a list or
a mapping; all three shapes are normalised into :class:`Triggers`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Pattern

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

_NULL_TAG = "tag:yaml.org,2002:null"


class WorkflowParseError(ValueError):
    """Raised when a workflow file is not valid YAML of the expected shape."""


@dataclass
class PushPullTrigger:
    """The shared shape of push and pull_request triggers."""

    branches: list[str] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)


@dataclass
class ScheduleTrigger:
    """One entry of ``on.schedule``."""

    cron: str


@dataclass
class EventTrigger:
    """A trigger filtered only by event types (issues, pull_request_review)."""

    types: list[str] = field(default_factory=list)


@dataclass
class WorkflowRunTrigger:
    """The ``on.workflow_run`` trigger."""

    workflows: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)


@dataclass
class Triggers:
    """The normalised ``on:`` block."""

    push: PushPullTrigger | None = None
    pull_request: PushPullTrigger | None = None
    pull_request_target: PushPullTrigger | None = None
    schedule: list[ScheduleTrigger] = field(default_factory=list)
    issues: EventTrigger | None = None
    workflow_dispatch: bool = False
    workflow_run: WorkflowRunTrigger | None = None
    pull_request_review: EventTrigger | None = None


@dataclass
class Step:
    """One entry of a job's ``steps:``."""

    name: str = ""
    uses: str = ""
    run: str = ""
    with_: dict[str, str] = field(default_factory=dict)
    if_: str = ""


@dataclass
class Job:
    """One entry under ``jobs:``."""

    id: str = ""
    name: str = ""
    runs_on: str = ""
    if_: str = ""
    steps: list[Step] = field(default_factory=list)
    permissions: dict[str, str] = field(default_factory=dict)


@dataclass
class WorkflowFile:
    """The parsed view of one workflow YAML file."""

    path: str
    name: str = ""
    on: Triggers = field(default_factory=Triggers)
    jobs: list[Job] = field(default_factory=list)
    raw: bytes = b""

    def has_scheduled_trigger(self) -> bool:
        """Report whether the workflow has any cron entry."""
        return bool(self.on.schedule)

    def has_push_trigger(self) -> bool:
        """Report whether the workflow runs on push."""
        return self.on.push is not None

    def has_pull_request_trigger(self) -> bool:
        """Report whether the workflow runs on pull_request."""
        return self.on.pull_request is not None

    def has_issues_trigger(self) -> bool:
        """Report whether the workflow runs on issues events."""
        return self.on.issues is not None

    def issues_trigger_has_type(self, event_type: str) -> bool:
        """Report whether the issues trigger fires for ``event_type``.

        An issues trigger without a ``types:`` filter fires for every type.
        """
        if self.on.issues is None:
            return False
        return event_type in self.on.issues.types or not self.on.issues.types

    def pull_request_closed(self) -> bool:
        """Report whether the pull_request trigger includes "closed"."""
        if self.on.pull_request is None:
            return False
        return "closed" in self.on.pull_request.types

    def cron_entries(self) -> list[str]:
        """Return every cron expression of the workflow."""
        return [entry.cron for entry in self.on.schedule]

    def _steps(self):
        for job in self.jobs:
            yield from job.steps

    def uses_action(self, prefix: str) -> bool:
        """Report whether any step uses an action starting with ``prefix``."""
        return any(step.uses.startswith(prefix) for step in self._steps())

    def any_run_matches(self, pattern: str | Pattern[str]) -> bool:
        """Report whether any step's ``run:`` body matches ``pattern``."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return any(step.run and regex.search(step.run) for step in self._steps())

    def raw_contains(self, substr: str | bytes) -> bool:
        """Report whether the raw YAML contains ``substr``."""
        needle = substr.encode("utf-8") if isinstance(substr, str) else bytes(substr)
        return needle in self.raw


def parse(path: str, data: bytes | str) -> WorkflowFile:
    """Parse one workflow YAML file; ``path`` is kept for evidence citations."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        root = yaml.compose(raw, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise WorkflowParseError(f"{path}: {exc}") from exc

    workflow = WorkflowFile(path=path, raw=raw)
    if root is None or _is_null(root):
        return workflow
    if not isinstance(root, MappingNode):
        raise WorkflowParseError(f"{path}: top level of a workflow must be a mapping")

    for key, value in _pairs(root):
        if key == "name":
            workflow.name = _string(value, "name")
        elif key == "on":
            workflow.on = _parse_on(value)
        elif key == "jobs":
            workflow.jobs = _parse_jobs(value)
    return workflow


def _is_null(node: Node) -> bool:
    return isinstance(node, ScalarNode) and node.tag == _NULL_TAG


def _pairs(node: MappingNode):
    for key_node, value_node in node.value:
        key = key_node.value if isinstance(key_node, ScalarNode) else ""
        yield key, value_node


def _string(node: Node, what: str) -> str:
    if isinstance(node, ScalarNode):
        return "" if node.tag == _NULL_TAG else node.value
    raise WorkflowParseError(f"{what}: expected a scalar value")


def _string_map(node: Node, what: str) -> dict[str, str]:
    if _is_null(node):
        return {}
    if not isinstance(node, MappingNode):
        raise WorkflowParseError(f"{what}: expected a mapping")
    return {key: _string(value, f"{what}.{key}") for key, value in _pairs(node)}


def _parse_on(node: Node) -> Triggers:
    triggers = Triggers()
    if isinstance(node, ScalarNode):
        _set_simple_trigger(triggers, node.value)
    elif isinstance(node, SequenceNode):
        for child in node.value:
            if isinstance(child, ScalarNode):
                _set_simple_trigger(triggers, child.value)
    elif isinstance(node, MappingNode):
        for key, value in _pairs(node):
            _parse_trigger_node(triggers, key, value)
    return triggers


def _set_simple_trigger(triggers: Triggers, name: str) -> None:
    if name == "push":
        triggers.push = PushPullTrigger()
    elif name == "pull_request":
        triggers.pull_request = PushPullTrigger()
    elif name == "pull_request_target":
        triggers.pull_request_target = PushPullTrigger()
    elif name == "issues":
        triggers.issues = EventTrigger()
    elif name == "workflow_dispatch":
        triggers.workflow_dispatch = True
    elif name == "pull_request_review":
        triggers.pull_request_review = EventTrigger()


def _parse_trigger_node(triggers: Triggers, key: str, value: Node) -> None:
    if key == "push":
        triggers.push = _parse_push_pull(value)
    elif key == "pull_request":
        triggers.pull_request = _parse_push_pull(value)
    elif key == "pull_request_target":
        triggers.pull_request_target = _parse_push_pull(value)
    elif key == "issues":
        triggers.issues = _parse_event_trigger(value)
    elif key == "pull_request_review":
        triggers.pull_request_review = _parse_event_trigger(value)
    elif key == "schedule":
        triggers.schedule = _parse_schedule(value)
    elif key == "workflow_dispatch":
        triggers.workflow_dispatch = True
    elif key == "workflow_run":
        triggers.workflow_run = _parse_workflow_run(value)


def _parse_push_pull(node: Node) -> PushPullTrigger:
    trigger = PushPullTrigger()
    if not isinstance(node, MappingNode):
        return trigger
    for key, value in _pairs(node):
        if key == "branches":
            trigger.branches = _scalar_list(value)
        elif key == "tags":
            trigger.tags = _scalar_list(value)
        elif key == "paths":
            trigger.paths = _scalar_list(value)
        elif key == "types":
            trigger.types = _scalar_list(value)
    return trigger


def _parse_event_trigger(node: Node) -> EventTrigger:
    trigger = EventTrigger()
    if isinstance(node, MappingNode):
        for key, value in _pairs(node):
            if key == "types":
                trigger.types = _scalar_list(value)
    return trigger


def _parse_schedule(node: Node) -> list[ScheduleTrigger]:
    if not isinstance(node, SequenceNode):
        return []
    entries = []
    for child in node.value:
        if not isinstance(child, MappingNode):
            continue
        entries.extend(
            ScheduleTrigger(cron=value.value)
            for key, value in _pairs(child)
            if key == "cron"
        )
    return entries


def _parse_workflow_run(node: Node) -> WorkflowRunTrigger:
    trigger = WorkflowRunTrigger()
    if not isinstance(node, MappingNode):
        return trigger
    for key, value in _pairs(node):
        if key == "workflows":
            trigger.workflows = _scalar_list(value)
        elif key == "types":
            trigger.types = _scalar_list(value)
    return trigger


def _scalar_list(node: Node) -> list[str]:
    if isinstance(node, ScalarNode):
        return [node.value]
    if isinstance(node, SequenceNode):
        return [child.value for child in node.value if isinstance(child, ScalarNode)]
    return []


def _parse_jobs(node: Node) -> list[Job]:
    if _is_null(node):
        return []
    if not isinstance(node, MappingNode):
        raise WorkflowParseError("jobs: expected a mapping")
    return [_parse_job(job_id, value) for job_id, value in _pairs(node)]


def _parse_job(job_id: str, node: Node) -> Job:
    job = Job(id=job_id)
    if _is_null(node):
        return job
    if not isinstance(node, MappingNode):
        raise WorkflowParseError(f"jobs.{job_id}: expected a mapping")
    for key, value in _pairs(node):
        where = f"jobs.{job_id}.{key}"
        if key == "name":
            job.name = _string(value, where)
        elif key == "runs-on":
            job.runs_on = _runs_on(value)
        elif key == "if":
            job.if_ = _string(value, where)
        elif key == "steps":
            job.steps = _parse_steps(value, where)
        elif key == "permissions":
            job.permissions = _string_map(value, where)
    return job


def _runs_on(node: Node) -> str:
    if isinstance(node, ScalarNode):
        return node.value
    if isinstance(node, SequenceNode) and node.value:
        first = node.value[0]
        return first.value if isinstance(first, ScalarNode) else ""
    return ""


def _parse_steps(node: Node, where: str) -> list[Step]:
    if _is_null(node):
        return []
    if not isinstance(node, SequenceNode):
        raise WorkflowParseError(f"{where}: expected a sequence")
    return [_parse_step(child, f"{where}[{i}]") for i, child in enumerate(node.value)]


def _parse_step(node: Node, where: str) -> Step:
    step = Step()
    if _is_null(node):
        return step
    if not isinstance(node, MappingNode):
        raise WorkflowParseError(f"{where}: expected a mapping")
    for key, value in _pairs(node):
        field_where = f"{where}.{key}"
        if key == "name":
            step.name = _string(value, field_where)
        elif key == "uses":
            step.uses = _string(value, field_where)
        elif key == "run":
            step.run = _string(value, field_where)
        elif key == "with":
            step.with_ = _string_map(value, field_where)
        elif key == "if":
            step.if_ = _string(value, field_where)
    return step