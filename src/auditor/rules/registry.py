# src/auditor/rules/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List

from auditor.model import ViolationType
from .core import AuditRule, RuleDefinition

logger = logging.getLogger(__name__)

RULES_PACKAGE = "auditor.rules.modules"


class RuleRegistry:
    """
    Central registry for copy audit rules.

    Dynamically discovers and loads RuleDefinition modules from the
    'auditor.rules.modules' package. Modules are loaded in name order, which
    fixes the order rules run in and therefore the discovery order of violations.
    The registry is filled once and only read afterwards.
    """

    _definitions: Dict[str, RuleDefinition] = {}
    _audit_rules: List[AuditRule] = []
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Registers every module in `auditor.rules.modules` that exposes a
        `DEFINITION` attribute (instance of `RuleDefinition`).
        """
        if cls._loaded:
            return

        try:
            modules_pkg = importlib.import_module(RULES_PACKAGE)
        except ImportError as e:
            logger.error(f"Could not find rules package: {e}")
            return

        names = sorted(name for _, name, _ in pkgutil.iter_modules(modules_pkg.__path__))
        for name in names:
            full_name = f"{RULES_PACKAGE}.{name}"
            try:
                module = importlib.import_module(full_name)
            except Exception as e:
                logger.error(f"Error loading rule module {name}: {e}", exc_info=True)
                continue

            definition = getattr(module, "DEFINITION", None)
            if isinstance(definition, RuleDefinition):
                cls.register(definition)

        cls._loaded = True

    @classmethod
    def register(cls, definition: RuleDefinition) -> None:
        if definition.name in cls._definitions:
            logger.debug(f"Rule set already registered: {definition.name}")
            return
        cls._definitions[definition.name] = definition
        cls._audit_rules.extend(definition.audit_rules)
        logger.debug(f"Rule set loaded: {definition.name} -> {[t.value for t in definition.types]}")

    @classmethod
    def get_all_rules(cls) -> List[AuditRule]:
        """Returns all registered audit rule functions in execution order."""
        return list(cls._audit_rules)

    @classmethod
    def get_definitions(cls) -> List[RuleDefinition]:
        return list(cls._definitions.values())

    @classmethod
    def get_produced_types(cls) -> List[ViolationType]:
        """Violation types at least one registered rule can emit."""
        produced = {t for d in cls._definitions.values() for t in d.types}
        return [t for t in ViolationType if t in produced]
