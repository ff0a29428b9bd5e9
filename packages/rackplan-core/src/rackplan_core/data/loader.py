from pathlib import Path
from typing import Any, TypeVar, overload

import yaml
from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")


def read_document(path: Path | str) -> Any:
    """Parse a YAML (or JSON) site document into plain Python data."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Unable to decode UTF-8 in {p}: {e}") from e

    # JSON exports from the reporting app are valid YAML too
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        raise ValueError(f"Empty YAML file: {p}")
    return data


def validate_typed(
    data: Any,
    path: Path | str,
    *,
    adapter: TypeAdapter[T] | None = None,
    model: type[T] | None = None,
) -> T:
    """Validate already-parsed data, naming `path` in any error."""
    adapter = adapter if adapter is not None else TypeAdapter(model)
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid structure in {path}: {e}") from e


@overload
def load_yaml_typed[T](path: Path | str, *, adapter: TypeAdapter[T]) -> T: ...


@overload
def load_yaml_typed[T](path: Path | str, *, model: type[T]) -> T: ...


def load_yaml_typed(
    path: Path | str,
    *,
    adapter: TypeAdapter[T] | None = None,
    model: type[T] | None = None,
) -> T:
    """Read a site document and parse it into a typed object.

    Pass either a model (`model=RackPolicy`) or an adapter for container
    shapes (`adapter=TypeAdapter(list[Rack])`), not both.
    """
    if (adapter is None) == (model is None):
        raise ValueError("Provide exactly one of 'adapter' or 'model'.")
    return validate_typed(read_document(path), path, adapter=adapter, model=model)


def load_yaml_list[U](path: Path | str, item_model: type[U]) -> list[U]:
    return load_yaml_typed(path, adapter=TypeAdapter(list[item_model]))  # type: ignore[index]
