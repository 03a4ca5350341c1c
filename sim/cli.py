"""
BAR Unit AutoReplace - CLI Entry Point
========================================
Usage:
    python cli.py replay <file> [--strategy adopt_sibling] [--export-json out.json]
    python cli.py check-config <file>
    python cli.py interactive [<file>]
    python cli.py web [--port 8080]
"""

import argparse
import sys

import yaml

from bar_autoreplace.io import load_scenario
from bar_autoreplace.format import print_full_report
from bar_autoreplace.replay import ScenarioRunner


def cmd_replay(args):
    try:
        scenario = load_scenario(args.file)
        if args.strategy:
            scenario.config.strategies = list(args.strategy)
            print(f"[strategy] {', '.join(scenario.config.strategies)}")
        result = ScenarioRunner(scenario).run()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading {args.file}: {e}", file=sys.stderr)
        return 1

    if args.quiet:
        print(f"[replay] {result.scenario_name}: {result.events_applied} events, "
              f"{len(result.issued)} orders issued")
    else:
        print_full_report(result)

    if args.export_json:
        from bar_autoreplace.io import export_result_json
        export_result_json(result, args.export_json)
        print(f"\nExported JSON to {args.export_json}")
    return 0


def cmd_check_config(args):
    from bar_autoreplace.config import load_config
    from bar_autoreplace.strategies import make_strategies
    try:
        config = load_config(args.file)
        make_strategies(config.strategies)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"[config] Invalid: {e}", file=sys.stderr)
        return 1
    print(f"[config] OK: tag={config.tag_binding}, untag={config.untag_binding}, "
          f"lookahead={config.command_lookahead}, "
          f"strategies={','.join(config.strategies)}")
    return 0


def cmd_interactive(args):
    from bar_autoreplace.repl import ReplayREPL
    repl = ReplayREPL()
    if args.file:
        repl.do_load(args.file)
    repl.cmdloop()
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="BAR Unit AutoReplace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", help="Command to run")

    # replay
    p_rep = sub.add_parser("replay", aliases=["run"],
                           help="Replay a scenario from YAML")
    p_rep.add_argument("file", help="Path to scenario YAML file")
    p_rep.add_argument("--strategy", "-s", action="append", default=None,
                       help="Replacement strategy, repeatable, tried in order "
                            "(adopt_sibling, factory_build)")
    p_rep.add_argument("--export-json", default=None,
                       help="Export the replay result as JSON")
    p_rep.add_argument("--quiet", "-q", action="store_true",
                       help="One-line summary instead of the full report")

    # check-config
    p_chk = sub.add_parser("check-config", help="Validate a tracker config YAML")
    p_chk.add_argument("file", help="Path to config YAML file")

    # interactive
    p_int = sub.add_parser("interactive", aliases=["repl", "i"],
                           help="Interactive replay mode")
    p_int.add_argument("file", nargs="?", default=None,
                       help="Scenario to load on start")

    # web
    p_web = sub.add_parser("web", aliases=["serve"],
                           help="Start the web API")
    p_web.add_argument("--port", type=int, default=8080,
                       help="Port to serve on (default: 8080)")

    args = parser.parse_args()

    if args.command in ("replay", "run"):
        return cmd_replay(args)
    elif args.command == "check-config":
        return cmd_check_config(args)
    elif args.command in ("interactive", "repl", "i"):
        return cmd_interactive(args)
    elif args.command in ("web", "serve"):
        from bar_autoreplace.web import start_server
        start_server(port=args.port)
        return 0
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
