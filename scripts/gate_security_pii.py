#!/usr/bin/env python3
"""Gate G2: Security & PII check for source files.

Fails if:
- print( found in runtime code (src/**)
- A logger call touches a sensitive name (creator email, phone, message
  text, share slug, credentials) without going through redaction
- A logger call reveals a share slug in clear (.reveal())

Usage:
    python scripts/gate_security_pii.py
"""

import ast
import sys
from pathlib import Path

# Names that must not reach a logger call without redaction
SENSITIVE_NAMES = frozenset(
    {
        "creator_email",
        "phone",
        "text",
        "slug",
        "share_slug",
        "api_key",
        "_api_key",
    }
)

# Never allowed inside a logger call, redacted or not
FORBIDDEN_ATTRS = frozenset({"reveal"})

LOG_METHODS = frozenset({"debug", "info", "warning", "error", "critical", "exception"})

# Calls that indicate proper redaction usage
REDACTION_CALLS = frozenset({"safe_log_context", "redact_value", "redact_string", "mask_token"})


def _is_logger_call(node: ast.Call) -> bool:
    func = node.func
    return (
        isinstance(func, ast.Attribute)
        and func.attr in LOG_METHODS
        and isinstance(func.value, ast.Name)
        and func.value.id == "logger"
    )


def _names_in(node: ast.AST) -> tuple[set[str], set[str], set[str]]:
    """Return (names, attribute names, called function names) under node."""
    names: set[str] = set()
    attrs: set[str] = set()
    calls: set[str] = set()
    for child in ast.walk(node):
        if isinstance(child, ast.Name):
            names.add(child.id)
        elif isinstance(child, ast.Attribute):
            attrs.add(child.attr)
        if isinstance(child, ast.Call):
            if isinstance(child.func, ast.Name):
                calls.add(child.func.id)
            elif isinstance(child.func, ast.Attribute):
                calls.add(child.func.attr)
    return names, attrs, calls


def check_file(filepath: Path) -> list[str]:
    """Check a single file for violations. Returns list of error messages."""
    try:
        tree = ast.parse(filepath.read_text(encoding="utf-8"), filename=str(filepath))
    except (UnicodeDecodeError, SyntaxError):
        return []

    errors = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue

        if isinstance(node.func, ast.Name) and node.func.id == "print":
            errors.append(f"{filepath}:{node.lineno}: print() not allowed in runtime code")
            continue

        if not _is_logger_call(node):
            continue

        names, attrs, calls = _names_in(node)
        for forbidden in sorted(FORBIDDEN_ATTRS & attrs):
            errors.append(
                f"{filepath}:{node.lineno}: logger call must not use .{forbidden}()"
            )

        leaked = (names | attrs) & SENSITIVE_NAMES
        if leaked and not (calls & REDACTION_CALLS):
            for name in sorted(leaked):
                errors.append(
                    f"{filepath}:{node.lineno}: logger call with '{name}' "
                    "must use redaction (safe_log_context/redact_value)"
                )

    return errors


def check_tree(src_dir: Path) -> list[str]:
    all_errors: list[str] = []
    for pyfile in sorted(src_dir.rglob("*.py")):
        all_errors.extend(check_file(pyfile))
    return all_errors


def main() -> int:
    """Run gate check on src directory."""
    src_dir = Path("src")

    if not src_dir.exists():
        # Try from project root
        src_dir = Path(__file__).parent.parent / "src"

    if not src_dir.exists():
        sys.stderr.write("Error: src directory not found\n")
        return 1

    all_errors = check_tree(src_dir)

    if all_errors:
        sys.stderr.write("Gate G2 FAILED - Security/PII violations found:\n")
        for err in all_errors:
            sys.stderr.write(f"  {err}\n")
        return 1

    sys.stdout.write("Gate G2 PASSED - No security/PII violations found\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
