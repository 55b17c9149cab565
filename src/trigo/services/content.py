from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from trigo.engine.types import GameConfig


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class Variant:
    id: str
    title: str
    description: str
    config: GameConfig


@dataclass(frozen=True)
class VariantCatalog:
    variants: dict[str, Variant]
    default_id: str

    def get(self, variant_id: str | None = None) -> Variant:
        key = variant_id or self.default_id
        try:
            return self.variants[key]
        except KeyError as e:
            known = ", ".join(sorted(self.variants))
            raise ContentError(f"Unknown variant {key!r} (known: {known})") from e

    @property
    def default(self) -> Variant:
        return self.variants[self.default_id]


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_variants(self) -> VariantCatalog:
        path = self._data_dir / "variants.json"
        schema = _load_schema(self._schema_dir / "variants.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))

        if not isinstance(raw, dict):
            raise ContentError("variants.json must be an object")
        raw_variants = raw.get("variants")
        if not isinstance(raw_variants, list):
            raise ContentError("variants.json.variants must be a list")

        variants: dict[str, Variant] = {}
        for item in raw_variants:
            if not isinstance(item, dict):
                continue
            vid = _require_str(item, "id")
            if vid in variants:
                raise ContentError(f"Duplicate variant id: {vid}")
            config = GameConfig(
                num_attrs=_require_int(item, "num_attrs"),
                num_attr_vals=_require_int(item, "num_attr_vals"),
                field_size=_require_int(item, "field_size"),
                field_expand=_require_int(item, "field_expand"),
            )
            variants[vid] = Variant(
                id=vid,
                title=_require_str(item, "title"),
                description=str(item.get("description", "")),
                config=config,
            )

        default_id = _require_str(raw, "default_variant")
        if default_id not in variants:
            raise ContentError(f"default_variant {default_id!r} is not a defined variant")
        return VariantCatalog(variants=variants, default_id=default_id)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_variants()
