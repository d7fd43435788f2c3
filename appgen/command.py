"""appgen command line entry point.

Collects one entity description, either interactively or from a definition
file, and scaffolds its model classes::

    appgen
    appgen --definition user.yml
    appgen --config appgen.yml --definition user.yml --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError
from rich.prompt import Confirm, Prompt

from appgen.config import AppGenConfig
from appgen.errors import AppGenError, InvalidEvent, UnknownProperty
from appgen.parser.definition import load_definition
from appgen.parser.models import Features, SpecificationRecord
from appgen.parser.spec import assemble_specification, parse_events, parse_field_list
from appgen.parser.types import TypeExpressionParser
from appgen.scaffolder.generator import ModelGenerator
from appgen.utils import (
    console,
    first_upper,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    qualify,
)
from appgen.wizard import PropertyWizard


# ---------------------------------------------------------------------------
# Interactive questions
# ---------------------------------------------------------------------------

def _ask_required(question: str, default: Optional[str] = None) -> str:
    while True:
        answer = Prompt.ask(question, default=default) or ""
        if answer.strip():
            return answer.strip()
        print_error("A value is required.")


def _ask_fields(question: str, names: Sequence[str], lookup: str) -> list[str]:
    """Ask for a comma-separated list of declared property names."""
    while True:
        fields = parse_field_list(Prompt.ask(question, default=""))
        unknown = [field for field in fields if field not in names]
        if not unknown:
            return fields
        print_error(str(UnknownProperty(unknown[0], lookup)))


def _ask_events() -> list[str]:
    while True:
        answer = Prompt.ask(
            "Define events (comma separated, 'all' for created, updated, deleted)", default=""
        )
        try:
            return parse_events(answer)
        except InvalidEvent as exc:
            print_error(str(exc))


def ask_properties(wizard: PropertyWizard) -> None:
    """Drive *wizard* until the operator leaves the property name empty."""
    while not wizard.done:
        if wizard.is_confirmation:
            answer = "yes" if Confirm.ask(wizard.question, default=False) else "no"
        else:
            answer = Prompt.ask(wizard.question, default=wizard.default)
        try:
            wizard.answer(answer)
        except AppGenError as exc:
            print_error(str(exc))


def ask_specification(config: AppGenConfig) -> SpecificationRecord:
    """Run the interactive question sequence and assemble the record."""
    entity = first_upper(_ask_required("Entity Name"))
    base_namespace = config.model.entity.namespaces[0] if config.model.entity.namespaces else ""
    namespace = _ask_required("Namespace", default=qualify(base_namespace, entity)).strip("\\")

    wizard = PropertyWizard(
        TypeExpressionParser.from_config(config, [qualify(namespace, entity)])
    )
    ask_properties(wizard)
    names = [prop.name for prop in wizard.properties]

    features = Features(
        data_factory=Confirm.ask("Generate DataFactory?", default=True),
        edit=Confirm.ask("Generate edit method?", default=True),
        get_all=Confirm.ask("Generate getAll method?", default=True),
        delete=Confirm.ask("Generate delete method?", default=True),
    )
    single = _ask_fields("Define getBy fields (comma separated)", names, "getBy")
    multi = _ask_fields("Define getAllBy fields (comma separated)", names, "getAllBy")
    events = _ask_events()
    traits = [
        name
        for name in config.offered_traits()
        if Confirm.ask(f"Use {name} trait?", default=True)
    ]

    return assemble_specification(
        namespace,
        entity,
        wizard.properties,
        features=features,
        single_lookup_fields=single,
        multi_lookup_fields=multi,
        events=events,
        traits=traits,
        config=config,
    )


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _load_config(path: Optional[str]) -> AppGenConfig:
    if not path:
        return AppGenConfig.from_env()
    config_path = Path(path)
    if not config_path.exists():
        print_error(f"Config file not found: {config_path}")
        sys.exit(1)
    try:
        return AppGenConfig.load(config_path)
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        print_error(f"Invalid config {config_path}: {exc}")
        sys.exit(1)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``appgen`` / ``python -m appgen.command``."""
    parser = argparse.ArgumentParser(
        description="appgen -- scaffold Doctrine model classes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  appgen\n"
            "  appgen --definition user.yml\n"
            "  appgen --config appgen.yml --definition user.yml --dry-run\n"
        ),
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="JSON or YAML config file (default: APPGEN_* environment variables)",
    )
    parser.add_argument(
        "--definition", "-d",
        default=None,
        help="YAML or JSON model definition; skips the interactive questions",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render every file and print the target paths without writing",
    )
    args = parser.parse_args(argv)

    config = _load_config(args.config)

    if args.definition and not Path(args.definition).exists():
        print_error(f"Definition file not found: {args.definition}")
        sys.exit(1)

    try:
        if args.definition:
            spec = load_definition(Path(args.definition), config)
        else:
            spec = ask_specification(config)
        if not spec.properties:
            print_warning(f"{spec.entity_name} has no properties besides its id.")

        generator = ModelGenerator(config)
        if args.dry_run:
            paths = [file.path for file in generator.render(spec)]
        else:
            paths = generator.generate(spec)
    except AppGenError as exc:
        print_error(str(exc))
        sys.exit(1)

    console.print()
    console.print("Files that would be created:" if args.dry_run else "Files created:")
    for path in paths:
        console.print(f"  {path}", markup=False, highlight=False, soft_wrap=True)
    console.print()

    print_summary_table(
        {
            "Entity": spec.entity_class(qualified=True),
            "Properties": ", ".join(spec.property_names()) or "-",
            "Events": ", ".join(spec.events) or "-",
            "Traits": ", ".join(spec.trait_names()) or "-",
            "Artifacts": str(len(paths)),
        },
        title="appgen",
    )
    if args.dry_run:
        print_success("Dry run complete, nothing written.")
    else:
        print_success(f"Scaffolded {spec.entity_name} ({len(paths)} files).")


if __name__ == "__main__":
    main()
