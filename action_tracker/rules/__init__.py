from action_tracker.rules.loader import DEFAULT_RULES_PATH, load_rules, parse_rules
from action_tracker.rules.models import TrackerRules

__all__ = ["DEFAULT_RULES_PATH", "TrackerRules", "load_rules", "parse_rules"]
