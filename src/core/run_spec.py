"""Maintenance plan parsing.

A plan is a YAML document that optionally names a store file and lists
maintenance steps to run in order. Every step is checked against the
fields its command reads, so execution only ever sees known, typed values.

Example::

    version: 1
    defaults:
      data_file: ./.quill/storage.json
    steps:
      - reclaim
      - command: stats
        optimized: true
      - command: export
        args:
          output: ./exports/project.json
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, cast

import yaml

from core.errors import QuillRunSpecError

RUN_SPEC_VERSION = 1
_ROOT_FIELDS = ("version", "defaults", "steps")

RunSpecCommand = Literal[
    "analyze",
    "stats",
    "compact",
    "reclaim",
    "optimize",
    "backup",
    "restore",
    "export",
    "import",
    "export-txt",
]


@dataclass(frozen=True)
class StepField:
    """One field a step command reads.

    Attributes:
        name: Field name in the plan.
        kind: Expected value type, ``str`` or ``bool``.
        required: Whether the step fails without it.
    """

    name: str
    kind: type
    required: bool = False


STEP_FIELDS: dict[str, tuple[StepField, ...]] = {
    "analyze": (),
    "stats": (StepField("optimized", bool),),
    "compact": (),
    "reclaim": (),
    "optimize": (),
    "backup": (),
    "restore": (),
    "export": (StepField("output", str, required=True),),
    "import": (StepField("input", str, required=True),),
    "export-txt": (StepField("output", str, required=True),),
}


@dataclass(frozen=True)
class RunSpecDefaults:
    """Plan-wide settings."""

    data_file: str | None = None


@dataclass(frozen=True)
class RunSpecStep:
    """One validated maintenance step."""

    command: RunSpecCommand
    args: Mapping[str, object]

    def text(self, field_name: str) -> str:
        """Return a required string field."""
        return cast(str, self.args[field_name])

    def flag(self, field_name: str) -> bool:
        """Return an optional boolean field, false when omitted."""
        return bool(self.args.get(field_name, False))


@dataclass(frozen=True)
class RunSpec:
    """Validated maintenance plan."""

    version: int
    defaults: RunSpecDefaults
    steps: tuple[RunSpecStep, ...]


def load_run_spec(spec_path: str) -> RunSpec:
    """Read and validate a plan file.

    Args:
        spec_path: YAML plan path.

    Returns:
        Validated plan.

    Raises:
        QuillRunSpecError: If the file is unreadable or the plan is invalid.
    """
    spec_file = Path(spec_path).expanduser().resolve()
    try:
        document = yaml.safe_load(spec_file.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise QuillRunSpecError(
            f"Run spec file does not exist at {spec_file}. Provide a valid YAML file path."
        ) from error
    except OSError as error:
        raise QuillRunSpecError(
            f"Failed to read run spec at {spec_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise QuillRunSpecError(
            f"Failed to parse YAML run spec at {spec_file}: {error}. Fix YAML syntax and retry."
        ) from error
    return parse_run_spec(document)


def parse_run_spec(document: object) -> RunSpec:
    """Validate a decoded plan document.

    Args:
        document: Result of YAML decoding.

    Returns:
        Validated plan.

    Raises:
        QuillRunSpecError: If the document does not describe a valid plan.
    """
    if not isinstance(document, dict):
        raise QuillRunSpecError(
            "Run spec must be a mapping with 'version' and 'steps'. "
            f"Got {type(document).__name__}."
        )
    unknown_keys = sorted(str(key) for key in document if key not in _ROOT_FIELDS)
    if unknown_keys:
        raise QuillRunSpecError(
            f"Run spec contains unknown root fields: {', '.join(unknown_keys)}."
        )
    version = document.get("version")
    if type(version) is not int or version != RUN_SPEC_VERSION:
        raise QuillRunSpecError(
            f"Unsupported run spec version {version!r}. Set version: {RUN_SPEC_VERSION}."
        )
    steps = document.get("steps")
    if not isinstance(steps, list) or not steps:
        raise QuillRunSpecError("Run spec field 'steps' must be a non-empty list of commands.")
    return RunSpec(
        version=version,
        defaults=_parse_defaults(document.get("defaults")),
        steps=tuple(_parse_step(entry, position) for position, entry in enumerate(steps, 1)),
    )


def _parse_defaults(raw_defaults: object) -> RunSpecDefaults:
    if raw_defaults is None:
        return RunSpecDefaults()
    if not isinstance(raw_defaults, dict):
        raise QuillRunSpecError("Run spec field 'defaults' must be a mapping.")
    unknown_keys = sorted(str(key) for key in raw_defaults if key != "data_file")
    if unknown_keys:
        raise QuillRunSpecError(
            f"Run spec defaults contain unknown fields: {', '.join(unknown_keys)}. "
            "Only 'data_file' is supported."
        )
    data_file = raw_defaults.get("data_file")
    if data_file is not None and not isinstance(data_file, str):
        raise QuillRunSpecError("Run spec default 'data_file' must be a string path.")
    return RunSpecDefaults(data_file=(data_file.strip() or None) if data_file else None)


def _parse_step(entry: object, position: int) -> RunSpecStep:
    """Validate one step written as a bare command or a mapping."""
    label = f"step #{position}"
    if isinstance(entry, str):
        command, fields = entry, {}
    elif isinstance(entry, dict):
        command = entry.get("command")
        fields = _step_fields(entry, label)
    else:
        raise QuillRunSpecError(f"Invalid {label}: expected a command name or mapping.")
    if not isinstance(command, str) or command not in STEP_FIELDS:
        supported = ", ".join(STEP_FIELDS)
        raise QuillRunSpecError(
            f"Unsupported command {command!r} in {label}. Use one of: {supported}."
        )
    return RunSpecStep(
        command=cast(RunSpecCommand, command),
        args=_check_fields(command, fields, label),
    )


def _step_fields(entry: dict, label: str) -> dict[str, object]:
    """Collect step fields from an ``args`` mapping or inline keys."""
    inline = {key: value for key, value in entry.items() if key not in ("command", "args")}
    if "args" not in entry:
        return inline
    if inline:
        raise QuillRunSpecError(
            f"Invalid {label}: put fields either under 'args' or inline, not both."
        )
    nested = entry["args"]
    if not isinstance(nested, dict):
        raise QuillRunSpecError(f"Invalid {label}: 'args' must be a mapping.")
    return dict(nested)


def _check_fields(command: str, fields: Mapping[object, object], label: str) -> dict[str, object]:
    """Match step fields against what the command reads."""
    expected = {field.name: field for field in STEP_FIELDS[command]}
    unknown = sorted(str(name) for name in fields if name not in expected)
    if unknown:
        raise QuillRunSpecError(
            f"Run-spec command '{command}' in {label} does not accept fields: "
            f"{', '.join(unknown)}."
        )
    checked: dict[str, object] = {}
    for name, field in expected.items():
        value = fields.get(name)
        if value is None:
            if field.required:
                raise QuillRunSpecError(
                    f"Run-spec command '{command}' in {label} requires field '{name}'."
                )
            continue
        if field.kind is str:
            if not isinstance(value, str) or not value.strip():
                raise QuillRunSpecError(
                    f"Run-spec field '{name}' in {label} must be a non-empty string."
                )
            value = value.strip()
        elif type(value) is not field.kind:
            raise QuillRunSpecError(f"Run-spec field '{name}' in {label} must be true/false.")
        checked[name] = value
    return checked
