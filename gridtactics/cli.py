"""
Grid Tactics CLI - Command-line interface for the engine.

Usage:
    gridtactics validate <scenario>            Validate a scenario file
    gridtactics inspect <scenario> <unit_id>   Show a unit and where it can act
    gridtactics simulate [--scenario NAME]     Play a bots-only game
    gridtactics serve [--port PORT]            Run the HTTP API

<scenario> is a JSON file path or a built-in scenario name.
"""

import argparse
import logging
import sys

PRESETS = ("default", "legacy", "fast")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Grid Tactics - turn-based tactics engine",
        prog="gridtactics",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a scenario")
    validate_parser.add_argument("scenario", help="Scenario JSON file or built-in name")

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show a unit's stats and options")
    inspect_parser.add_argument("scenario", help="Scenario JSON file or built-in name")
    inspect_parser.add_argument("unit_id", help="Unit to inspect")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a game between bots")
    simulate_parser.add_argument("--scenario", default="skirmish", help="Scenario JSON file or built-in name")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Seed for combat rolls")
    simulate_parser.add_argument("--max-turns", type=int, default=50, help="Stop after this many turns")
    simulate_parser.add_argument("--policy", default="tactician", help="Bot policy for every player")
    simulate_parser.add_argument("--rules", default="default", choices=PRESETS, help="Rules preset")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API (needs the server extra)")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate":
        cmd_validate(args)
    elif args.command == "inspect":
        cmd_inspect(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _read_scenario(source: str):
    """Load a built-in scenario by name or a scenario file by path."""
    from .catalog import SCENARIOS
    from .scenario import load_scenario, load_scenario_file

    if source in SCENARIOS:
        return load_scenario(SCENARIOS[source]())
    try:
        return load_scenario_file(source)
    except FileNotFoundError:
        print(f"Error: File not found: {source}")
        sys.exit(1)


def _rules(preset: str):
    from .config import get_default_config, get_fast_config, get_legacy_config

    return {
        "default": get_default_config,
        "legacy": get_legacy_config,
        "fast": get_fast_config,
    }[preset]()


def cmd_validate(args):
    """Validate a scenario and report every problem."""
    from .scenario import ScenarioError, validate_scenario

    print(f"Validating: {args.scenario}")
    try:
        spec = _read_scenario(args.scenario)
    except ScenarioError as e:
        print("\nErrors:")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    result = validate_scenario(spec)
    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    print(
        f"\nOK: '{spec.name}' {spec.columns}x{spec.rows}, "
        f"{len(spec.players)} players, {len(spec.units)} units"
    )


def cmd_inspect(args):
    """Print a unit's stats and its move, attack and skill locations."""
    from .scenario import ScenarioError, build_game

    try:
        model = build_game(_read_scenario(args.scenario))
    except ScenarioError as e:
        print(str(e))
        sys.exit(1)

    unit = model.get_unit(args.unit_id)
    if unit is None:
        known = ", ".join(u.unit_id for p in model.players for u in p.units)
        print(f"Error: No unit '{args.unit_id}'. Units: {known}")
        sys.exit(1)

    print(unit.unit_information)
    if unit.weapon:
        print(f"Weapon: {unit.weapon.name} (range {unit.weapon.range})")
    if unit.skills:
        print(f"Skills: {', '.join(s.name for s in unit.skills)}")

    print(f"\nPosition: {unit.position}")
    print(f"Move: {_format_coords(model.query_move_locations(unit))}")
    print(f"Attack: {_format_coords(model.query_attack_locations(unit))}")
    for skill, coords in model.query_skill_locations(unit).items():
        print(f"{skill.name}: {_format_coords(coords)}")


def _format_coords(coords) -> str:
    if not coords:
        return "-"
    return " ".join(str(c) for c in sorted(coords))


def cmd_simulate(args):
    """Play a bots-only game and print the move log."""
    from .scenario import ScenarioError
    from .session import GameLoop, SessionManager

    manager = SessionManager(config=_rules(args.rules))
    try:
        session = manager.create_session(
            _read_scenario(args.scenario),
            human_player_id=None,
            bot_policy=args.policy,
            seed=args.seed,
        )
    except ScenarioError as e:
        print(str(e))
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    model = session.model
    loop = GameLoop(session, move_limit=args.max_turns * sum(len(p.units) for p in model.players) * 2)
    result = loop.run_bot_turns(turn_limit=args.max_turns)

    print(f"Simulating '{session.scenario_name}' (seed={args.seed}, policy={args.policy})")
    for entry in session.move_log:
        print(f"  {entry}")

    print(f"\nTurns played: {model.turn}")
    if result.winner:
        winner = model.get_player(result.winner)
        print(f"Winner: {winner.name}")
    else:
        print(f"No winner after {args.max_turns} turns")
    for player in model.players:
        alive = ", ".join(f"{u.name} {u.hp}/{u.max_hp}" for u in player.living_units) or "none"
        print(f"  {player.name}: {alive}")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
