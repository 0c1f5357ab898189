"""Writer for the analyzer's ``AnalysisInput`` configuration document.

The external F# analyzer is started with a configuration document listing
the active rules (with their parameters) and the files to analyze::

    <AnalysisInput>
      <Settings>
      </Settings>
      <Rules>
        <Rule>
          <Key>SEC001</Key>
          <Parameters>
            <Parameter>
              <Key>maxDepth</Key>
              <Value>3</Value>
            </Parameter>
          </Parameters>
        </Rule>
      </Rules>
      <Files>
        <File>/abs/path/Program.fs</File>
      </Files>
    </AnalysisInput>

Classes
-------
ActiveRule : One activated rule and its parameters

Functions
---------
build_analysis_input : Serialize rules and files to UTF-8 XML bytes
write_analysis_input : Serialize rules and files to a file
parse_rule_spec : Parse a ``KEY[:name=value,...]`` command-line rule spec
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Union

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field

# reserved parameter name carrying the rule key for template rules
RULE_KEY_PARAMETER = "RuleKey"


class ActiveRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    parameters: Dict[str, str] = Field(default_factory=dict)


def parse_rule_spec(spec: str) -> ActiveRule:
    """
    Parse ``KEY`` or ``KEY:name=value,name2=value2`` into an ActiveRule.

    Raises:
        ValueError: If the key is empty or a parameter lacks '='
    """
    key, _, raw_params = spec.partition(":")
    key = key.strip()
    if not key:
        raise ValueError(f"Rule spec has no key: {spec!r}")
    params: Dict[str, str] = {}
    for item in filter(None, (p.strip() for p in raw_params.split(","))):
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid rule parameter {item!r} in {spec!r}")
        params[name.strip()] = value
    return ActiveRule(key=key, parameters=params)


def build_analysis_input(
    rules: Iterable[ActiveRule],
    files: Iterable[Union[str, Path]],
    *,
    pretty_print: bool = True,
) -> bytes:
    root = etree.Element("AnalysisInput")
    etree.SubElement(root, "Settings")

    rules_node = etree.SubElement(root, "Rules")
    for rule in rules:
        rule_node = etree.SubElement(rules_node, "Rule")
        etree.SubElement(rule_node, "Key").text = rule.key
        params = {k: v for k, v in rule.parameters.items() if k != RULE_KEY_PARAMETER}
        if params:
            params_node = etree.SubElement(rule_node, "Parameters")
            for name, value in params.items():
                param_node = etree.SubElement(params_node, "Parameter")
                etree.SubElement(param_node, "Key").text = name
                # lxml escapes markup characters on serialization
                etree.SubElement(param_node, "Value").text = value

    files_node = etree.SubElement(root, "Files")
    for file in files:
        etree.SubElement(files_node, "File").text = str(Path(file).absolute())

    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=pretty_print)


def write_analysis_input(
    rules: Iterable[ActiveRule],
    files: Iterable[Union[str, Path]],
    path: Union[str, Path],
) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(build_analysis_input(rules, files))
    return target


__all__ = [
    "ActiveRule",
    "RULE_KEY_PARAMETER",
    "build_analysis_input",
    "parse_rule_spec",
    "write_analysis_input",
]
