"""
SimpleValidator Rule Parser
===========================

Turns rule chains such as ``"required|min:3|between:3,20"`` into
ordered, typed rule invocations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from simplevalidator.exceptions import ConfigurationError
from simplevalidator.utils.logger import get_logger
from simplevalidator.validation.rules import RuleDefinition, RuleRegistry

logger = get_logger("simplevalidator.parser")

RULE_SEPARATOR = "|"
PARAM_MARKER = ":"
PARAM_SEPARATOR = ","

RuleChain = Union[str, Sequence[str]]


@dataclass(frozen=True)
class ParsedRule:
    """
    One rule invocation from a chain.

    Attributes:
        name: Rule name
        params: Parameters converted to the rule's declared types
        token: Token as written in the chain
        definition: Registered rule, None when the name is unknown
    """

    name: str
    params: Tuple[Any, ...] = ()
    token: str = ""
    definition: Optional[RuleDefinition] = field(
        default=None, compare=False, repr=False
    )

    @property
    def known(self) -> bool:
        return self.definition is not None


def split_input(value: str, separator: str) -> List[str]:
    """Split on ``separator`` and trim every part."""
    return [part.strip() for part in value.split(separator)]


class RuleParser:
    """
    Rule chain parser.

    Example:
        parser = RuleParser()
        parser.parse("required|between:3,20")
        # [ParsedRule(name="required", params=()),
        #  ParsedRule(name="between", params=(3, 20))]
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        strict: bool = False,
    ) -> None:
        """
        Initialize parser.

        Args:
            registry: Rules to resolve names against
            strict: Raise on unknown rule names instead of keeping them unresolved
        """
        self.registry = registry if registry is not None else RuleRegistry()
        self.strict = strict

    def parse_fields(self, fields: Mapping[str, RuleChain]) -> Dict[str, List[ParsedRule]]:
        """Parse the chain of every field."""
        return {name: self.parse(chain, name) for name, chain in fields.items()}

    def parse(self, chain: RuleChain, field: Optional[str] = None) -> List[ParsedRule]:
        """
        Parse one rule chain.

        Empty tokens (``"min:3||max:5"``) are ignored.

        Raises:
            ConfigurationError: On a malformed token
        """
        if isinstance(chain, str):
            tokens = split_input(chain, RULE_SEPARATOR)
        elif isinstance(chain, (list, tuple)):
            tokens = [str(token).strip() for token in chain]
        else:
            raise ConfigurationError(
                f"Rule chain must be a string, got {type(chain).__name__}",
                field=field,
            )

        return [self.parse_token(token, field) for token in tokens if token]

    def parse_token(self, token: str, field: Optional[str] = None) -> ParsedRule:
        """Parse ``name`` or ``name:p1,p2`` into a ParsedRule."""
        if PARAM_MARKER in token:
            name, param_str = token.split(PARAM_MARKER, 1)
            name = name.strip()
            raw_params = split_input(param_str, PARAM_SEPARATOR)
        else:
            name = token.strip()
            raw_params = []

        if not name:
            raise ConfigurationError(
                f"Cannot read a rule name from '{token}'",
                field=field,
            )

        definition = self.registry.get(name)

        if definition is None:
            if self.strict:
                raise ConfigurationError(
                    f"Unknown rule '{name}'", field=field, rule=name
                )
            logger.debug("Unknown rule will be skipped", field=field, rule=name)
            return ParsedRule(name=name, params=tuple(raw_params), token=token)

        return ParsedRule(
            name=name,
            params=definition.coerce(raw_params, field),
            token=token,
            definition=definition,
        )
