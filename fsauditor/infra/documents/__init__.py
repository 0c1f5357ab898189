"""Writers for the XML documents exchanged with the F# analyzer.

Modules
-------
analysis_input : Analyzer configuration (rules and files)
analysis_output : Analyzer findings, same schema the parser reads
"""
from __future__ import annotations

from .analysis_input import (
    ActiveRule,
    build_analysis_input,
    parse_rule_spec,
    write_analysis_input,
)
from .analysis_output import issues_to_xml, write_analysis_output

__all__ = [
    "ActiveRule",
    "build_analysis_input",
    "issues_to_xml",
    "parse_rule_spec",
    "write_analysis_input",
    "write_analysis_output",
]
