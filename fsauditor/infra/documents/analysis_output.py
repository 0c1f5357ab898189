"""Writer for ``AnalysisOutput`` documents.

Serializes ``Issue`` records into the same schema the analyzer produces, so
fixtures and exported runs can be read back by
``fsauditor.core.models.parsers.parse_analysis_output``. Absent positions
are written as empty leaves.

Functions
---------
issues_to_xml : Serialize issues to UTF-8 XML bytes
write_analysis_output : Serialize issues to a file
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from lxml import etree

from fsauditor.core.models.parsers.common import Issue


def _leaf(parent: etree._Element, name: str, value: Optional[object]) -> None:
    child = etree.SubElement(parent, name)
    if value is not None:
        child.text = str(value)


def issues_to_xml(issues: Iterable[Issue], *, pretty_print: bool = True) -> bytes:
    root = etree.Element("AnalysisOutput")
    container = etree.SubElement(root, "Issues")
    for issue in issues:
        node = etree.SubElement(container, "Issue")
        _leaf(node, "RuleKey", issue.rule_key)
        _leaf(node, "Message", issue.message)
        _leaf(node, "AbsoluteFilePath", issue.absolute_file_path)
        _leaf(node, "StartLine", issue.start_line)
        _leaf(node, "StartColumn", issue.start_column)
        _leaf(node, "EndLine", issue.end_line)
        _leaf(node, "EndColumn", issue.end_column)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=pretty_print)


def write_analysis_output(issues: Iterable[Issue], path: Union[str, Path]) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(issues_to_xml(issues))
    return target


__all__ = ["issues_to_xml", "write_analysis_output"]
