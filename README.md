# plumbline

Building blocks for judging how far a repository has come in its use of
coding agents. The package has two modules:

- `plumbline.acmm` holds the data types for an assessment: maturity
  levels (`Level`), statuses (`Status`), confidence (`Confidence`),
  detection methods (`Method`), evidence (`Evidence`, `LineSpan`,
  `DiagEntry`), per-signal results (`Result`, `SignalResult`), verdicts
  (`Verdict`), reports (`Report`) and fix plans (`FixPlan`, `FixOp`,
  `FixOpKind`, `FixInput`, `FixInputKind`). `to_dict` turns any of them
  into plain JSON-ready data.
- `plumbline.workflows` parses GitHub Actions workflow YAML into a small
  structure (`WorkflowFile`, `Triggers`, `Job`, `Step` and the trigger
  classes) that detectors can query.

## Install

```
pip install plumbline
```

## Assessment types

```python
from plumbline.acmm import Confidence, Level, level_name, status_from_score

level_name(Level.MEASURED)                   # "Measured"
level_name(99)                               # "Unknown"
status_from_score(0.33)                      # Status.PARTIAL
status_from_score(1.0)                       # Status.FOUND
Confidence.HIGH.at_least(Confidence.MEDIUM)  # True
```

Scores follow a four-step rubric: 0.0 (missing), 0.33 (stubbed),
0.67 (incomplete) and 1.0 (found), available as `SCORE_MISSING`,
`SCORE_STUBBED`, `SCORE_INCOMPLETE` and `SCORE_FOUND`. Any score other
than 0.0 or 1.0 counts as partial.

`to_dict` uses the published field names. Optional fields such as
`evidence`, `notes`, `fix_hint` and `diag` are left out when empty, enums
become their values, the keys of `level_scores` become strings, and the
bytes of a `FixOp` body become base64 text.

```python
from plumbline.acmm import Evidence, to_dict

to_dict(Evidence(path="README.md"))  # {"path": "README.md"}
```

## Workflow parsing

```python
import re
from plumbline.workflows import parse

src = b"""
name: CI
on:
  push:
    branches: [main]
  schedule:
    - cron: "0 0 * * *"
jobs:
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - run: go test ./...
"""
wf = parse(".github/workflows/ci.yml", src)
wf.has_push_trigger()                      # True
wf.cron_entries()                          # ["0 0 * * *"]
wf.uses_action("actions/checkout")         # True
wf.any_run_matches(re.compile("go test"))  # True
wf.raw_contains("branches: [main]")        # True
```

`parse` takes the data as bytes or text. The `on:` block can be a string,
a list or a mapping, and all three forms give the same result. Other
queries are `has_scheduled_trigger`, `has_pull_request_trigger`,
`has_issues_trigger`, `issues_trigger_has_type` (true for every type when
the issues trigger has no `types:` filter) and `pull_request_closed`.
`any_run_matches` takes a compiled pattern or a pattern string.

If the YAML is malformed, or a field has the wrong shape (for instance
`jobs:` that is not a mapping), `parse` raises `WorkflowParseError`, a
subclass of `ValueError`.

## What it does not do

The package has no command line and no interactive screen. It does not
scan repositories, run signals or compute verdicts; it only provides the
types those results are recorded in. A `FixPlan` describes file
operations, but nothing in the package applies them.

## Tests

```
pip install -e ".[test]"
pytest
```