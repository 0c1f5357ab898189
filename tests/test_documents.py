"""Tests for the analyzer document writers."""

from __future__ import annotations

from pathlib import Path

import pytest
from lxml import etree

from fsauditor.core.models.parsers import Issue
from fsauditor.infra.documents import (
    ActiveRule,
    build_analysis_input,
    issues_to_xml,
    parse_rule_spec,
    write_analysis_input,
    write_analysis_output,
)


def test_parse_rule_spec_key_only() -> None:
    assert parse_rule_spec("SEC001") == ActiveRule(key="SEC001")


def test_parse_rule_spec_with_parameters() -> None:
    rule = parse_rule_spec(" SEC002 : maxDepth=3, pattern=a=b ")
    assert rule.key == "SEC002"
    assert rule.parameters == {"maxDepth": "3", "pattern": "a=b"}


@pytest.mark.parametrize("spec", ["", ":x=1", "SEC001:novalue", "SEC001:=1"])
def test_parse_rule_spec_rejects_bad_input(spec: str) -> None:
    with pytest.raises(ValueError):
        parse_rule_spec(spec)


def test_analysis_input_layout(tmp_path: Path) -> None:
    rules = [
        ActiveRule(key="SEC001"),
        ActiveRule(key="SEC002", parameters={"maxDepth": "3", "RuleKey": "ignored", "re": "<a&b>"}),
    ]
    source = tmp_path / "Program.fs"
    root = etree.fromstring(build_analysis_input(rules, [source]))

    assert root.tag == "AnalysisInput"
    assert [child.tag for child in root] == ["Settings", "Rules", "Files"]
    assert root.xpath("Rules/Rule/Key/text()") == ["SEC001", "SEC002"]
    # the first rule has no parameters element at all
    assert root.xpath("Rules/Rule[1]/Parameters") == []
    assert root.xpath("Rules/Rule[2]/Parameters/Parameter/Key/text()") == ["maxDepth", "re"]
    assert root.xpath("Rules/Rule[2]/Parameters/Parameter/Value/text()") == ["3", "<a&b>"]
    assert root.xpath("Files/File/text()") == [str(source.absolute())]


def test_write_analysis_input_creates_parent_dirs(tmp_path: Path) -> None:
    target = write_analysis_input([ActiveRule(key="R")], [], tmp_path / "work" / "config.xml")
    assert target.read_bytes().startswith(b"<?xml")
    assert etree.parse(str(target)).getroot().xpath("count(Files/File)") == 0


def test_issues_to_xml_writes_empty_leaves_for_missing_positions() -> None:
    data = issues_to_xml([Issue(rule_key="R", message="m", absolute_file_path="/a.fs", end_line=4)])
    issue = etree.fromstring(data).find("Issues/Issue")

    assert [child.tag for child in issue] == [
        "RuleKey", "Message", "AbsoluteFilePath", "StartLine", "StartColumn", "EndLine", "EndColumn",
    ]
    assert issue.findtext("StartLine") == ""
    assert issue.findtext("EndLine") == "4"


def test_write_analysis_output(tmp_path: Path) -> None:
    target = write_analysis_output([], tmp_path / "out" / "sonarDiagnostics.xml")
    root = etree.parse(str(target)).getroot()
    assert root.tag == "AnalysisOutput"
    assert len(root.find("Issues")) == 0
