"""
Template Renderer
=================
Builds generated source from the text templates in ``templates/<Kind>/``.

Templates mark slots as ``{{name}}``.  Slots are filled in a single pass,
so text inserted into a slot (a column name, a type token) is never itself
scanned for slots.
"""

import os
import re

from .errors import TemplateError

DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

_SLOT_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def fill(template: str, **slots) -> str:
    """Replace every ``{{slot}}`` in *template* with ``slots[slot]``."""
    def replace(match):
        key = match.group(1)
        if key not in slots:
            raise TemplateError(f"Template slot '{key}' has no value")
        return str(slots[key])

    return _SLOT_RE.sub(replace, template)


def read_templates(template_dir, kind, names):
    """Read ``<template_dir>/<kind>/<name>.txt`` for each of *names*."""
    templates = {}
    for name in names:
        path = os.path.join(template_dir, kind, f"{name}.txt")
        with open(path, "r", encoding="utf-8") as f:
            templates[name] = f.read()
    return templates


# ------------------------------------------------------------------
# Convert tables
# ------------------------------------------------------------------

CONVERT_TEMPLATES = (
    "Table", "GeneralCol", "GeneralArrayCol", "ConvertCol", "ConvertArrayCol",
)


def column_template(templates, column) -> str:
    """Pick the snippet for (reference vs local) x (array vs scalar)."""
    prefix = "Convert" if column.is_reference else "General"
    suffix = "ArrayCol" if column.is_array else "Col"
    return templates[prefix + suffix]


def render_convert(templates, table_name, columns) -> str:
    snippets = [
        fill(column_template(templates, col), type=col.type, name=col.name)
        for col in columns
    ]
    return fill(templates["Table"], table=table_name, columns="".join(snippets))


# ------------------------------------------------------------------
# Enum tables
# ------------------------------------------------------------------

ENUM_TEMPLATES = ("Table", "Enum", "Member")


def render_enum(templates, table_name, enums) -> str:
    """*enums* is a list of ``(enum_name, [member, ...])``."""
    blocks = []
    for enum_name, members in enums:
        body = "".join(fill(templates["Member"], name=m) for m in members)
        blocks.append(fill(templates["Enum"], name=enum_name, members=body))
    return fill(templates["Table"], table=table_name, enums="".join(blocks))


# ------------------------------------------------------------------
# Variable tables
# ------------------------------------------------------------------

VARIABLE_TEMPLATES = ("Table", "Variable")


def render_variable(templates, table_name, variables) -> str:
    """*variables* is a list of ``(name, annotation, literal)``."""
    body = "".join(
        fill(templates["Variable"], name=name, type=annotation, value=literal)
        for name, annotation, literal in variables
    )
    return fill(templates["Table"], table=table_name, variables=body)
