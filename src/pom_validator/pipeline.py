"""Validation pipeline: parses POMs, links them and runs the configured rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from pom_validator.config import ValidatorConfig
from pom_validator.exceptions import PomValidatorError
from pom_validator.graph import ProjectGraph, build_project_graph
from pom_validator.models import ProjectDescriptor, ValidationResult
from pom_validator.parser import parse_pom
from pom_validator.profiles import filter_results, rules_for_profile
from pom_validator.rules import Rule
from pom_validator.scanner import find_pom_files, sort_parent_first


logger = logging.getLogger(__name__)

PARSE_FAILURE = "internal.parse-failure"
RULE_FAILURE = "internal.rule-failure"


def run_rule(rule: Rule, descriptor: ProjectDescriptor, graph: ProjectGraph) -> ValidationResult:
    """Evaluate one rule; an unexpected fault becomes a single ERROR issue."""
    try:
        return rule.evaluate(descriptor, graph)
    except Exception as exc:  # noqa: BLE001 - one faulty rule must not drop the others
        logger.exception("Rule '%s' failed on %s", rule.name, descriptor.path)
        return ValidationResult.failure(
            f"Rule '{rule.name}' failed: {exc}",
            "This is a bug in the validator; the remaining rules still ran",
            rule_id=RULE_FAILURE,
        )


class ValidationService:
    """Runs the profile's rules over one or many POMs.

    Every call builds fresh results; nothing is cached between runs.
    """

    def __init__(self, config: ValidatorConfig | None = None) -> None:
        self.config = config or ValidatorConfig()
        self.config.validate()
        self.rules: list[Rule] = rules_for_profile(self.config.profile, self.config.custom_rules)

    def validate_descriptor(
        self, descriptor: ProjectDescriptor, graph: ProjectGraph | None = None
    ) -> ValidationResult:
        """Run every configured rule and concatenate their results in rule order."""
        graph = graph or build_project_graph([descriptor])
        result = ValidationResult()
        for rule in self.rules:
            result.extend(run_rule(rule, descriptor, graph))
        return result

    def load(self, path: Path) -> ProjectDescriptor | ValidationResult:
        """Parse a POM, or return the single-error result describing why it could not be parsed."""
        try:
            return parse_pom(path)
        except PomValidatorError as exc:
            logger.info("Skipping rules for %s: %s", path, exc)
            return ValidationResult.failure(
                str(exc),
                "Check that the XML is well-formed and follows the Maven POM schema",
                rule_id=PARSE_FAILURE,
            )

    def validate_pom(self, path: Path) -> ValidationResult:
        loaded = self.load(path)
        if isinstance(loaded, ValidationResult):
            return loaded
        return self.validate_descriptor(loaded)

    def order(self, paths: Sequence[Path], graph: ProjectGraph) -> list[Path]:
        if self.config.parent_order == "topological":
            ordered = graph.parent_first_order()
            # POMs that failed to parse are not in the graph; keep them at the end.
            return ordered + [p for p in paths if p not in ordered]
        return sort_parent_first(paths)

    def validate_paths(self, paths: Iterable[Path]) -> dict[Path, ValidationResult]:
        """Validate a set of POMs against each other, parent first.

        Results are keyed by path in presentation order. With `fail_fast`
        the run stops after the first POM that has errors.
        """
        paths = list(paths)
        loaded = {p: self.load(p) for p in paths}
        descriptors = [d for d in loaded.values() if isinstance(d, ProjectDescriptor)]
        graph = build_project_graph(descriptors)

        results: dict[Path, ValidationResult] = {}
        for path in self.order(paths, graph):
            item = loaded[path]
            result = item if isinstance(item, ValidationResult) else self.validate_descriptor(item, graph)
            results[path] = result
            if self.config.fail_fast and not result.is_valid:
                logger.info("Stopping after %s (fail-fast)", path)
                break
        return results

    def validate_tree(
        self,
        root: Path,
        *,
        recursive: bool = False,
        exclude: Sequence[str] = (),
        include: Sequence[str] = (),
    ) -> dict[Path, ValidationResult]:
        """Discover POMs under root, validate them and apply the severity filter."""
        poms = find_pom_files(root, recursive=recursive, exclude=exclude, include=include)
        logger.debug("Validating %d POM(s) under %s", len(poms), root)
        return filter_results(self.validate_paths(poms), self.config.severity)


def has_errors(results: Mapping[Path, ValidationResult]) -> bool:
    return any(not r.is_valid for r in results.values())
