"""Rule evaluation for a single item.

Applies the configured rules, in registration order, to one item and
reduces their results to a Directive for the traversal engine.
"""

import logging
import os
from pathlib import Path

from rebackup.walker.config import WalkerConfig, WalkerRule
from rebackup.walker.errors import (
    RuleDomainFailure,
    RuleFailedToRunError,
    RuleIOFailure,
    RuleMappedFileAsDirError,
    RuleMappingContainsExternalItemError,
    RuleMappingContainsNonExistingItemError,
)
from rebackup.walker.models import (
    Directive,
    DirectiveType,
    ItemType,
    RuleResult,
    RuleResultType,
)

logger = logging.getLogger(__name__)

_NOTHING = Directive(directive_type=DirectiveType.NOTHING)


def evaluate_rules(
    item_path: Path,
    item_type: ItemType,
    config: WalkerConfig,
    source: Path,
) -> Directive:
    """Run all applicable, matching rules on an item.

    Every rule whose type filter accepts the item and whose predicate
    matches it is run. Rules returning SKIP_RULE or INCLUDE_ITEM let
    evaluation continue; the first rule returning INCLUDE_ITEM_ABSOLUTE,
    EXCLUDE_ITEM or MAP_AS_LIST ends it.

    Args:
        item_path: Absolute path of the item.
        item_type: Link-aware type of the item.
        config: Walker configuration holding the rules.
        source: Canonicalized source directory of the walk.

    Returns:
        Directive for the traversal engine. NOTHING if no rule
        short-circuited evaluation.

    Raises:
        RuleFailedToRunError: If a rule's action failed.
        RuleMappedFileAsDirError: If a rule mapped a file item.
        RuleMappingContainsExternalItemError: If a mapped path is outside the item.
        RuleMappingContainsNonExistingItemError: If a mapped path does not exist.
    """
    for rule in config.rules:
        if not rule.applies_to(item_type):
            continue
        try:
            matched = rule.matches(item_path, config, source)
        except OSError as e:
            raise RuleFailedToRunError(
                rule.name, rule.display_description, item_path, RuleIOFailure(e)
            ) from e
        if not matched:
            continue

        directive = run_rule(rule, item_path, item_type, config, source)
        if directive.directive_type != DirectiveType.NOTHING:
            return directive

    return _NOTHING


def run_rule(
    rule: WalkerRule,
    item_path: Path,
    item_type: ItemType,
    config: WalkerConfig,
    source: Path,
) -> Directive:
    """Run one rule's action on an item and translate its result.

    Args:
        rule: Rule to run (already known to apply and match).
        item_path: Absolute path of the item.
        item_type: Link-aware type of the item.
        config: Walker configuration.
        source: Canonicalized source directory of the walk.

    Returns:
        Directive corresponding to the rule's result.

    Raises:
        RuleFailedToRunError: If the action raised OSError or returned STR_ERROR.
        RuleMappedFileAsDirError: If the action mapped a file item.
        RuleMappingContainsExternalItemError: If a mapped path is outside the item.
        RuleMappingContainsNonExistingItemError: If a mapped path does not exist.
    """
    logger.debug(
        ">> Running walker rule '%s' (%s) on item path: %s",
        rule.name,
        rule.display_description,
        item_path,
    )

    try:
        result = rule.action(item_path, config, source)
    except OSError as e:
        raise RuleFailedToRunError(
            rule.name, rule.display_description, item_path, RuleIOFailure(e)
        ) from e

    logger.debug(">> Rule returned response: %s", result.result_type.value)

    if result.result_type == RuleResultType.STR_ERROR:
        raise RuleFailedToRunError(
            rule.name,
            rule.display_description,
            item_path,
            RuleDomainFailure(result.message or ""),
        )

    if result.result_type in (RuleResultType.SKIP_RULE, RuleResultType.INCLUDE_ITEM):
        return _NOTHING

    if result.result_type == RuleResultType.INCLUDE_ITEM_ABSOLUTE:
        return Directive(directive_type=DirectiveType.SKIP_FOLLOWING_RULES)

    if result.result_type == RuleResultType.EXCLUDE_ITEM:
        return Directive(directive_type=DirectiveType.SKIP_ITEM)

    return _resolve_mapping(rule, item_path, item_type, result)


def _resolve_mapping(
    rule: WalkerRule,
    item_path: Path,
    item_type: ItemType,
    result: RuleResult,
) -> Directive:
    """Validate a MAP_AS_LIST result and turn it into a MAP_ITEM directive.

    Relative paths are joined to the item path, then every path is
    normalized and checked to be the item itself or one of its
    descendants, and to exist.
    """
    if item_type == ItemType.FILE:
        raise RuleMappedFileAsDirError(rule.name, rule.display_description, item_path)

    mapped: list[Path] = []
    for path in result.paths:
        mapped_path = path if path.is_absolute() else item_path / path
        mapped_path = Path(os.path.normpath(mapped_path))

        if mapped_path != item_path and item_path not in mapped_path.parents:
            raise RuleMappingContainsExternalItemError(
                rule.name, rule.display_description, item_path, mapped_path
            )

        if not mapped_path.exists():
            raise RuleMappingContainsNonExistingItemError(
                rule.name, rule.display_description, item_path, mapped_path
            )

        mapped.append(mapped_path)

    logger.debug(
        ">>> Rule mapped to items (items = %d, absolute = %s)", len(mapped), result.absolute
    )
    return Directive(
        directive_type=DirectiveType.MAP_ITEM,
        paths=tuple(mapped),
        absolute=result.absolute,
    )
