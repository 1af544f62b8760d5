import re

import pytest

from plumbline.workflows import WorkflowParseError, parse

BASIC = """
name: CI
on:
  push:
    branches: [main]
  pull_request:
  schedule:
    - cron: "0 0 * * *"
jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - run: go test -race ./...
"""


def test_parse_basic_triggers():
    f = parse(".github/workflows/ci.yml", BASIC.encode())
    assert f.has_push_trigger()
    assert f.has_pull_request_trigger()
    assert f.has_scheduled_trigger()
    assert f.cron_entries() == ["0 0 * * *"]
    assert f.uses_action("actions/checkout")
    assert f.any_run_matches(re.compile(r"go test"))
    assert f.any_run_matches("go test")


def test_parse_basic_structure():
    f = parse(".github/workflows/ci.yml", BASIC)
    assert f.path == ".github/workflows/ci.yml"
    assert f.name == "CI"
    assert f.on.push.branches == ["main"]
    assert len(f.jobs) == 1
    job = f.jobs[0]
    assert job.id == "test"
    assert job.runs_on == "ubuntu-latest"
    assert [s.uses for s in job.steps] == ["actions/checkout@v4", ""]
    assert job.steps[1].run == "go test -race ./..."


def test_parse_on_as_string():
    f = parse("a.yml", b"name: x\non: push")
    assert f.has_push_trigger()
    assert not f.has_pull_request_trigger()


def test_parse_on_as_list():
    f = parse("a.yml", b"name: x\non: [push, pull_request]")
    assert f.has_push_trigger()
    assert f.has_pull_request_trigger()


def test_parse_issues_trigger_types():
    src = """
name: triage
on:
  issues:
    types: [opened, labeled]
jobs:
  t: { runs-on: ubuntu-latest, steps: [{ run: "echo" }] }
"""
    f = parse("a.yml", src.encode())
    assert f.has_issues_trigger()
    assert f.issues_trigger_has_type("opened")
    assert not f.issues_trigger_has_type("closed")


def test_issues_trigger_without_types_matches_any():
    f = parse("a.yml", b"on: [issues]")
    assert f.issues_trigger_has_type("closed")


def test_issues_trigger_absent():
    f = parse("a.yml", b"on: push")
    assert not f.has_issues_trigger()
    assert not f.issues_trigger_has_type("opened")


def test_parse_pull_request_closed():
    src = """
on:
  pull_request:
    types: [closed]
jobs: {}
"""
    f = parse("a.yml", src.encode())
    assert f.pull_request_closed()


def test_pull_request_without_closed():
    f = parse("a.yml", b"on: pull_request")
    assert not f.pull_request_closed()


def test_parse_raw_accessors():
    src = b"name: x\non: push\njobs: {}"
    f = parse("a.yml", src)
    assert f.raw_contains("on: push")
    assert b"name: x" in f.raw
    assert not f.raw_contains("schedule")


def test_parse_bad_yaml_raises():
    with pytest.raises(WorkflowParseError):
        parse("a.yml", b"this isn't yaml: ][")


def test_non_mapping_job_field_raises():
    src = b"jobs:\n  t:\n    name: [a, b]\n"
    with pytest.raises(WorkflowParseError):
        parse("a.yml", src)


def test_top_level_sequence_raises():
    with pytest.raises(WorkflowParseError):
        parse("a.yml", b"- a\n- b\n")


def test_empty_document_gives_empty_workflow():
    f = parse("a.yml", b"")
    assert f.jobs == []
    assert not f.has_push_trigger()
    assert f.cron_entries() == []


def test_workflow_run_and_dispatch():
    src = """
on:
  workflow_dispatch:
  workflow_run:
    workflows: [CI]
    types: completed
  pull_request_review:
    types: [submitted]
"""
    f = parse("a.yml", src)
    assert f.on.workflow_dispatch is True
    assert f.on.workflow_run.workflows == ["CI"]
    assert f.on.workflow_run.types == ["completed"]
    assert f.on.pull_request_review.types == ["submitted"]


def test_job_details():
    src = """
jobs:
  build:
    name: Build
    runs-on: [self-hosted, linux]
    if: github.event_name == 'push'
    permissions:
      contents: write
    steps:
      - name: Open PR
        uses: peter-evans/create-pull-request@v6
        with:
          branch: auto
          draft: true
        if: always()
"""
    f = parse("a.yml", src)
    job = f.jobs[0]
    assert job.name == "Build"
    assert job.runs_on == "self-hosted"
    assert job.if_ == "github.event_name == 'push'"
    assert job.permissions == {"contents": "write"}
    step = job.steps[0]
    assert step.name == "Open PR"
    assert step.with_ == {"branch": "auto", "draft": "true"}
    assert step.if_ == "always()"
    assert f.uses_action("peter-evans/create-pull-request")
    assert not f.uses_action("actions/setup-go")


def test_any_run_matches_false_without_runs():
    f = parse("a.yml", b"jobs:\n  t:\n    steps:\n      - uses: actions/checkout@v4\n")
    assert not f.any_run_matches(r".*")


def test_multiple_cron_entries_in_order():
    src = """
on:
  schedule:
    - cron: "0 1 * * *"
    - cron: "30 2 * * 1"
"""
    f = parse("a.yml", src)
    assert f.cron_entries() == ["0 1 * * *", "30 2 * * 1"]