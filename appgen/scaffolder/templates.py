"""Jinja2 rendering of source units.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``appgen/scaffolder/templates/`` directory, and the PhpFormatter that the
templates call to print types, signatures and docblocks.  The renderer is
the only place where a :class:`SourceUnit` becomes text; the generators do
not know about it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from appgen.scaffolder.source import ClassType, Method, Parameter, Property, SourceUnit
from appgen.utils import first_lower, first_upper, namespace_of, short_name


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

CLASS_TEMPLATE = "php/class.php.j2"

INDENT = "\t"

BUILTIN_TYPES = frozenset({
    "array", "bool", "callable", "false", "float", "int", "iterable", "mixed",
    "never", "null", "object", "self", "static", "string", "void",
})


# ---------------------------------------------------------------------------
# PhpFormatter
# ---------------------------------------------------------------------------


class PhpFormatter:
    """Prints the pieces of one :class:`SourceUnit` as PHP.

    Class names are shortened when imported (or aliased) by the unit or when
    they live in the unit's own namespace; any other class is written with a
    leading backslash.
    """

    def __init__(self, unit: SourceUnit) -> None:
        self.unit = unit
        self.imports: dict[str, str] = {}
        for use in unit.uses:
            fqcn, _, alias = use.partition(" as ")
            fqcn = fqcn.strip().strip("\\")
            self.imports[fqcn] = alias.strip() or short_name(fqcn)

    # -- Imports -----------------------------------------------------------

    def uses(self) -> list[str]:
        """Sorted ``use`` targets, skipping classes of the unit's own namespace."""
        result: list[str] = []
        for use in self.unit.uses:
            fqcn = use.partition(" as ")[0].strip().strip("\\")
            aliased = " as " in use
            if not aliased and namespace_of(fqcn) == self.unit.namespace:
                continue
            entry = use.strip().lstrip("\\")
            if entry not in result:
                result.append(entry)
        return sorted(result, key=str.lower)

    # -- Types -------------------------------------------------------------

    def type(self, type_name: Optional[str], nullable: bool = False) -> str:
        if not type_name:
            return ""
        if type_name.lower() in BUILTIN_TYPES:
            printed = type_name.lower()
        else:
            fqcn = type_name.strip("\\")
            if fqcn in self.imports:
                printed = self.imports[fqcn]
            elif namespace_of(fqcn) == self.unit.namespace:
                printed = short_name(fqcn)
            else:
                printed = "\\" + fqcn
        if nullable and printed not in ("mixed", "null", "void"):
            return "?" + printed
        return printed

    # -- Members -----------------------------------------------------------

    def docblock(self, comments: tuple[str, ...], indent: str = "") -> str:
        lines = [f"{indent}/**"]
        lines.extend(f"{indent} * {line}".rstrip() for line in comments)
        lines.append(f"{indent} */")
        return "\n".join(lines)

    def class_header(self, cls: ClassType) -> str:
        header = "class " + cls.name
        if cls.abstract:
            header = "abstract " + header
        elif cls.final:
            header = "final " + header
        if cls.extends:
            header += " extends " + self.type(cls.extends)
        if cls.implements:
            header += " implements " + ", ".join(self.type(i) for i in cls.implements)
        return header

    def parameter(self, param: Parameter) -> str:
        text = f"${param.name}"
        if param.type:
            text = f"{self.type(param.type, param.nullable)} {text}"
        if param.promoted is not None:
            text = f"{param.promoted.value} {text}"
        if param.default is not None:
            text += f" = {param.default}"
        return text

    def property(self, prop: Property) -> str:
        lines: list[str] = []
        if prop.comments:
            lines.append(self.docblock(prop.comments, INDENT))
        text = f"{INDENT}{prop.visibility.value} "
        if prop.type:
            text += self.type(prop.type, prop.nullable) + " "
        text += f"${prop.name}"
        if prop.default is not None:
            text += f" = {prop.default}"
        lines.append(text + ";")
        return "\n".join(lines)

    def method(self, method: Method) -> str:
        lines: list[str] = []
        if method.comments:
            lines.append(self.docblock(method.comments, INDENT))

        modifiers = method.visibility.value + (" static" if method.static else "")
        returns = ""
        if method.return_type:
            returns = ": " + self.type(method.return_type, method.return_nullable)

        if any(p.promoted is not None for p in method.parameters):
            lines.append(f"{INDENT}{modifiers} function {method.name}(")
            lines.extend(f"{INDENT * 2}{self.parameter(p)}," for p in method.parameters)
            lines.append(f"{INDENT}){returns} {{")
        else:
            params = ", ".join(self.parameter(p) for p in method.parameters)
            lines.append(f"{INDENT}{modifiers} function {method.name}({params}){returns}")
            lines.append(f"{INDENT}{{")

        for statement in method.body:
            lines.append(f"{INDENT * 2}{statement}" if statement.strip() else "")
        lines.append(f"{INDENT}}}")
        return "\n".join(lines)

    def member_blocks(self, cls: ClassType) -> list[str]:
        """Class members as text blocks, separated by one blank line when printed."""
        blocks: list[str] = []
        if cls.traits:
            blocks.append("\n".join(f"{INDENT}use {self.type(t)};" for t in cls.traits))
        blocks.extend(self.property(prop) for prop in cls.properties)
        blocks.extend(self.method(method) for method in cls.methods)
        return blocks


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated source files.

    Templates are looked up under a configurable template directory and
    rendered with a context dictionary.  :meth:`render_unit` is the entry
    point used by the scaffolder: it renders one :class:`SourceUnit` with
    the PHP class template.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["first_upper"] = first_upper
        self.env.filters["first_lower"] = first_lower

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"php/class.php.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_unit(self, unit: SourceUnit, template_path: str = CLASS_TEMPLATE) -> str:
        """Render *unit* to source text."""
        php = PhpFormatter(unit)
        return self.render(
            template_path,
            {"unit": unit, "cls": unit.class_type, "php": php, "uses": php.uses()},
        )

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*."""
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            str(p.relative_to(self.template_dir))
            for p in search_dir.rglob("*.j2")
        )
