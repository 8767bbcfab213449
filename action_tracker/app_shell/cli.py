import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from action_tracker.adapters import LoggingAnalytics, RecordingAnalytics
from action_tracker.components.tracker import ValidationError, create_tracker
from action_tracker.rules import DEFAULT_RULES_PATH, TrackerRules, load_rules
from action_tracker.shell.store import apply_middleware, create_store

logger = logging.getLogger("cli")


def get_rules(path: Path) -> TrackerRules:
    if not path.exists():
        logger.error(f"Rules file {path} not found.")
        sys.exit(1)

    try:
        return load_rules(path)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)


def read_actions(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of actions (or a single action object)."""
    with open(path) as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(a, dict) for a in data):
        raise ValueError(f"{path} must contain a JSON object or an array of objects")
    for index, action in enumerate(data):
        if "type" not in action:
            raise ValueError(f"action {index} has no 'type'")
    return data


def _identity(state: Any, action: Any) -> Any:
    return state


def handle_replay(rules: TrackerRules, args: argparse.Namespace) -> int:
    try:
        actions = read_actions(Path(args.actions))
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read actions: {e}")
        return 1

    backend: Any = RecordingAnalytics() if args.dry_run else LoggingAnalytics()
    tracker = create_tracker(rules, analytics=backend)
    store = create_store(_identity, None, apply_middleware(tracker))

    for index, action in enumerate(actions):
        try:
            store.dispatch(action)
        except ValidationError as e:
            print(f"action {index} ({action.get('type')!r}): {e}", file=sys.stderr)
            return 1

    if args.dry_run:
        for call in backend:
            print(json.dumps(call, default=str))
    print(f"Replayed {len(actions)} actions.", file=sys.stderr)
    return 0


def handle_check_rules(rules: TrackerRules, args: argparse.Namespace) -> int:
    custom = ", ".join(sorted(rules.custom_events)) or "none"
    print(f"Rules OK (enabled={rules.tracker.enabled}, custom events: {custom}).")
    return 0


def main(argv: list[str] | None = None) -> int:
    # Accepted before or after the subcommand; SUPPRESS keeps the subparser
    # from overwriting a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--rules", default=argparse.SUPPRESS, help="Path to rules YAML")
    common.add_argument(
        "--log-level", default=argparse.SUPPRESS, help="Override the rules logging level"
    )

    parser = argparse.ArgumentParser(description="Analytics action tracker CLI")
    parser.add_argument("--rules", default=str(DEFAULT_RULES_PATH), help="Path to rules YAML")
    parser.add_argument("--log-level", help="Override the rules logging level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # replay
    replay_parser = subparsers.add_parser(
        "replay", parents=[common], help="Dispatch actions from a JSON file"
    )
    replay_parser.add_argument("actions", help="Path to a JSON array of actions")
    replay_parser.add_argument(
        "--dry-run", action="store_true", help="Print backend calls instead of logging them"
    )

    # check-rules
    subparsers.add_parser("check-rules", parents=[common], help="Validate the rules file")

    args = parser.parse_args(argv)

    rules = get_rules(Path(args.rules))
    logging.basicConfig(level=(args.log_level or rules.logging.level).upper())

    if args.command == "replay":
        return handle_replay(rules, args)
    elif args.command == "check-rules":
        return handle_check_rules(rules, args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
