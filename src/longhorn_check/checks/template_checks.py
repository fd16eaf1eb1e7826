from __future__ import annotations
from pathlib import Path
from typing import List, Optional

import yaml

from ..models import Outcome
from ..templates import iter_patch_refs, resolve_patch


class TemplateCheck:
    """Lints one YAML template and verifies its config-patch references."""

    description = "template lint"

    def __init__(self, path: Path, root: Optional[Path] = None, max_line_length: int = 160) -> None:
        self.path = path
        self.root = root
        self.max_line_length = max_line_length
        self.name = self._display_name()

    def _display_name(self) -> str:
        if self.root is not None:
            try:
                return str(self.path.relative_to(self.root))
            except ValueError:
                pass
        return str(self.path)

    def _lint(self, text: str) -> tuple[List[str], List[str]]:
        errors: List[str] = []
        warnings: List[str] = []
        for no, line in enumerate(text.splitlines(), start=1):
            indent = line[: len(line) - len(line.lstrip())]
            if "\t" in indent:
                errors.append(f"line {no}: tab in indentation")
            if line != line.rstrip():
                warnings.append(f"line {no}: trailing whitespace")
            if len(line) > self.max_line_length:
                warnings.append(f"line {no}: line too long ({len(line)} > {self.max_line_length})")
        if text and not text.endswith("\n"):
            warnings.append("no newline at end of file")
        return errors, warnings

    def _check_patches(self, docs: list) -> List[str]:
        errors: List[str] = []
        for doc in docs:
            for ref in iter_patch_refs(doc):
                target = resolve_patch(ref, self.path, self.root)
                if target is None:
                    errors.append(f"patch reference {ref} not found")
                    continue
                try:
                    list(yaml.safe_load_all(target.read_text(encoding="utf-8")))
                except yaml.YAMLError as e:
                    errors.append(f"patch {ref} is not valid YAML: {_yaml_error(e)}")
        return errors

    def run(self) -> Outcome:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            return Outcome.fail(f"cannot read: {e}")
        errors, warnings = self._lint(text)
        if errors:
            return Outcome.fail("; ".join(errors))
        try:
            docs = list(yaml.safe_load_all(text))
        except yaml.YAMLError as e:
            return Outcome.fail(f"YAML syntax error: {_yaml_error(e)}")
        for i, doc in enumerate(docs, start=1):
            if doc is not None and not isinstance(doc, dict):
                return Outcome.fail(f"document {i} is a {type(doc).__name__}, expected a mapping")
        errors = self._check_patches(docs)
        if errors:
            return Outcome.fail("; ".join(errors))
        if warnings:
            return Outcome.warn("; ".join(warnings))
        return Outcome.passed(f"{len(docs)} document(s) ok")


def _yaml_error(e: yaml.YAMLError) -> str:
    mark = getattr(e, "problem_mark", None)
    problem = getattr(e, "problem", None) or str(e)
    if mark is not None:
        return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"
    return problem
