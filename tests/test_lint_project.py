# -*- coding: utf-8 -*-
from core.keys import IssueCodes as C
from core.types import Severity
from powertree import lint_project


def test_empty_project_is_informational():
    issues = lint_project({"nodes": [{"id": "n", "type": "Note", "text": "todo"}], "edges": []})
    assert [(i.code, i.severity) for i in issues] == [(C.LINT_NO_NODES, Severity.INFO)]


def test_missing_reference_and_unconnected_node():
    issues = lint_project(
        {
            "nodes": [
                {"id": "src", "type": "Source", "Vout": 5},
                {"id": "lonely", "type": "Load", "Vreq": 5},
            ],
            "edges": [{"id": "e", "from": "src", "to": "ghost"}],
        }
    )
    by_code = {i.code: i for i in issues}
    assert by_code[C.LINT_MISSING_REF].context == "e"
    assert by_code[C.LINT_MISSING_REF].severity == Severity.ERROR
    assert by_code[C.LINT_UNCONNECTED].context == "lonely"
    assert all(i.context != "src" for i in issues)


def test_lint_recurses_into_subsystems():
    inner = {"nodes": [{"id": "in", "type": "SubsystemInput", "Vout": 5}], "edges": []}
    issues = lint_project(
        {
            "nodes": [
                {"id": "src", "type": "Source", "Vout": 5},
                {"id": "sub", "type": "Subsystem", "project": inner},
            ],
            "edges": [{"id": "e", "from": "src", "to": "sub"}],
        }
    )
    assert [(i.code, i.context) for i in issues] == [(C.LINT_UNCONNECTED, "sub/in")]


def test_issue_to_dict_uses_badge_levels():
    from core.types import issue_to_dict

    issues = lint_project({"nodes": [{"id": "l", "type": "Load", "Vreq": 5}], "edges": []})
    assert [issue_to_dict(i) for i in issues] == [
        {"code": C.LINT_UNCONNECTED, "msg": "Node is not connected.", "level": "warn", "context": "l"}
    ]
