"""Rule configuration loader — builds fields, RuleSets, and policy from JSON or a dict.

Config shape:
    {
        "fields": [{"name": "email", "type": "text", "required": true}, ...],
        "rules": {
            "email": [{"kind": "NotEmpty"}, {"kind": "Pattern", "pattern": "...", "reason": "BadEmail"}],
            "nickname": [{"kind": "MinLength", "min": 3}, {"kind": "MaxLength", "max": 30}],
            "age": [{"kind": "Range", "min": 13, "max": 120, "short_circuit": true}]
        },
        "password_fields": ["password"],
        "policy": {"min_length": 10, "required_classes": ["digit"], "minimum_tier": 3}
    }

Length and Range rules take "min" / "max"; the constructor names (min_length,
max_length, minimum, maximum) are accepted as well.
"password_fields" defaults to every field declared with type "password".
CustomPredicate rules name their predicate ("predicate": "is_company_domain"),
resolved against the registry passed by the caller.
"""

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, NamedTuple, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from validation_worker.validators.base import BaseRule
from validation_worker.validators.engine import ValidationEngine
from validation_worker.validators.exceptions import ConfigurationError
from validation_worker.validators.models import CheckKind, FieldSpec, FieldType, PasswordPolicy
from validation_worker.validators.protocols import PasswordStrengthProtocol
from validation_worker.validators.rule_set import RuleSet
from validation_worker.validators.rules import build_rule

ConfigSource = Union[Mapping[str, Any], str, Path]

# Short keys accepted in rule entries, per kind
_PARAM_ALIASES: dict[str, dict[str, str]] = {
    CheckKind.MIN_LENGTH.value: {"min": "min_length"},
    CheckKind.MAX_LENGTH.value: {"max": "max_length"},
    CheckKind.RANGE.value: {"min": "minimum", "max": "maximum"},
}


class EngineConfig(NamedTuple):
    """Everything a ValidationEngine is built from."""

    fields: list[FieldSpec]
    rule_sets: dict[str, RuleSet]
    password_fields: set[str]
    policy: Optional[PasswordPolicy]


def _read_source(source: ConfigSource) -> Mapping[str, Any]:
    """Return the config mapping, reading and parsing JSON when given a path."""
    if isinstance(source, Mapping):
        return source
    path = Path(source)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read rule config '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Rule config '{path}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Rule config '{path}' must be a JSON object")
    return data


def _parse_fields(raw_fields: Any) -> list[FieldSpec]:
    if not isinstance(raw_fields, list):
        raise ConfigurationError("'fields' must be a list of field objects")
    fields = []
    for i, raw in enumerate(raw_fields):
        try:
            fields.append(FieldSpec.model_validate(raw))
        except PydanticValidationError as e:
            raise ConfigurationError(f"Field #{i + 1} is invalid: {e}") from e
    return fields


def _parse_rule(
    field: str,
    raw: Any,
    predicates: Mapping[str, Callable[..., Any]],
) -> BaseRule:
    if not isinstance(raw, Mapping) or "kind" not in raw:
        raise ConfigurationError(f"Rule entry {raw!r} needs a 'kind'", field=field)

    params = dict(raw)
    kind = params.pop("kind")
    if not isinstance(kind, str):
        raise ConfigurationError(f"Rule kind must be a string, got {kind!r}", field=field)
    params.pop("field", None)
    if "reason" in params:
        params["reason_code"] = params.pop("reason")
    if "short_circuit" in params and not isinstance(params["short_circuit"], bool):
        raise ConfigurationError(f"'short_circuit' must be true or false in {raw!r}", field=field)
    for alias, name in _PARAM_ALIASES.get(kind, {}).items():
        if alias in params:
            if name in params:
                raise ConfigurationError(f"Rule entry {raw!r} gives both '{alias}' and '{name}'", field=field)
            params[name] = params.pop(alias)

    if kind == CheckKind.CUSTOM_PREDICATE.value:
        predicate_name = params.get("predicate")
        if not isinstance(predicate_name, str):
            raise ConfigurationError(f"CustomPredicate needs a predicate name, got {predicate_name!r}", field=field)
        if predicate_name not in predicates:
            raise ConfigurationError(f"Unknown predicate {predicate_name!r}", field=field)
        params["predicate"] = predicates[predicate_name]

    return build_rule(kind, field=field, **params)


def load_engine_config(
    source: ConfigSource,
    predicates: Optional[Mapping[str, Callable[..., Any]]] = None,
) -> EngineConfig:
    """Parse a rule configuration without building an engine.

    Args:
        source: Config mapping, or path to a JSON file
        predicates: Name → callable registry for CustomPredicate rules

    Returns:
        EngineConfig ready to pass to ValidationEngine

    Raises:
        ConfigurationError: unreadable file, malformed entries, unknown kinds or predicates
    """
    data = _read_source(source)
    predicates = predicates or {}

    fields = _parse_fields(data.get("fields", []))

    raw_rules = data.get("rules", {})
    if not isinstance(raw_rules, Mapping):
        raise ConfigurationError("'rules' must map field names to rule lists")
    rule_sets: dict[str, RuleSet] = {}
    for field, entries in raw_rules.items():
        if not isinstance(entries, list):
            raise ConfigurationError("Rules must be a list", field=field)
        rule_sets[field] = RuleSet(field, [_parse_rule(field, entry, predicates) for entry in entries])

    if "password_fields" in data:
        if not isinstance(data["password_fields"], list):
            raise ConfigurationError("'password_fields' must be a list of field names")
        password_fields = set(data["password_fields"])
    else:
        password_fields = {f.name for f in fields if f.type == FieldType.PASSWORD}

    policy = None
    if data.get("policy") is not None:
        try:
            policy = PasswordPolicy.model_validate(data["policy"])
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid password policy: {e}") from e

    return EngineConfig(fields, rule_sets, password_fields, policy)


def build_engine(
    source: ConfigSource,
    predicates: Optional[Mapping[str, Callable[..., Any]]] = None,
    scorer: Optional[PasswordStrengthProtocol] = None,
    policy: Optional[PasswordPolicy] = None,
) -> ValidationEngine:
    """Load a rule configuration and build an engine from it.

    An explicit `policy` wins over the config's own "policy" section.
    """
    config = load_engine_config(source, predicates)
    return ValidationEngine(
        fields=config.fields,
        rule_sets=config.rule_sets,
        password_fields=config.password_fields,
        policy=policy if policy is not None else config.policy,
        scorer=scorer,
    )
