"""Discovery of cluster-configuration templates and their config-patch references."""
from __future__ import annotations
import re
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

YAML_SUFFIXES = (".yaml", ".yml")
PATCH_REF_RE = re.compile(r"^@(?P<path>[^\s@]+\.ya?ml)$")


def discover_templates(paths: Iterable[Path]) -> List[Path]:
    """Expand files and directories into a sorted, de-duplicated list of YAML files."""
    found = set()
    for p in paths:
        if p.is_dir():
            for suffix in YAML_SUFFIXES:
                found.update(x for x in p.rglob(f"*{suffix}") if x.is_file())
        elif p.suffix in YAML_SUFFIXES:
            found.add(p)
    return sorted(found)


def iter_patch_refs(node: Any) -> Iterator[str]:
    """Yield every patch file a loaded document refers to.

    Two forms are recognised: '@file.yaml' strings anywhere (talosctl
    --config-patch style) and `file:` entries of a `patches` list (Omni
    cluster templates).
    """
    if isinstance(node, str):
        m = PATCH_REF_RE.match(node.strip())
        if m:
            yield m.group("path")
    elif isinstance(node, dict):
        for key, value in node.items():
            if key == "patches" and isinstance(value, list):
                for item in value:
                    if isinstance(item, dict) and isinstance(item.get("file"), str):
                        yield item["file"]
            yield from iter_patch_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from iter_patch_refs(item)


def resolve_patch(ref: str, template: Path, root: Optional[Path]) -> Optional[Path]:
    """Resolve relative to the template's directory first, then to root."""
    candidates = [template.parent / ref]
    if root is not None:
        candidates.append(root / ref)
    for c in candidates:
        if c.is_file():
            return c
    return None
