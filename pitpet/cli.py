"""
Pitpet CLI - Command-line interface for the duel engine.

Usage:
    pitpet play --seed 42 --bet 10        Autoplay a full match
    pitpet trace --seed 42 --bet 10       Print the canonical spin/row trace
    pitpet validate <config_file>         Validate a duel config
    pitpet serve --port 8000              Run the HTTP/WebSocket API
"""

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

MAX_AUTOPLAY_COMMANDS = 500


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pitpet - Seeded Reel Duel Engine",
        prog="pitpet",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Autoplay a full match")
    play_parser.add_argument("--seed", type=int, default=42, help="RNG seed")
    play_parser.add_argument("--bet", type=int, default=10, help="Bet tier")
    play_parser.add_argument("--json", action="store_true", help="Print the final snapshot as JSON")

    # Trace command
    trace_parser = subparsers.add_parser("trace", help="setBet, spin, chooseRow and print the snapshot")
    trace_parser.add_argument("--seed", type=int, default=42, help="RNG seed")
    trace_parser.add_argument("--bet", type=int, default=10, help="Bet tier")
    trace_parser.add_argument("--row", type=int, default=0, help="Row to choose")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a duel config")
    validate_parser.add_argument("config_file", help="Path to a JSON config")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        return cmd_play(args)
    elif args.command == "trace":
        return cmd_trace(args)
    elif args.command == "validate":
        return cmd_validate(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def autoplay(session, evaluator=None):
    """
    Drive a session to the end of the match.

    The player side takes the row the evaluator scores highest, stands on
    every PetJack hand and takes the crit buff on a win. Stops early when
    the bet can no longer be paid.
    """
    from .bots import ComboEvaluator
    from .engine_core import Phase, PetJackStage, PetJackBuff

    evaluator = evaluator or ComboEvaluator(session.reducer.elements)

    for _ in range(MAX_AUTOPLAY_COMMANDS):
        state = session.state
        if state.phase is Phase.FINISHED:
            return
        if state.phase is Phase.IDLE:
            result = session.spin()
            if not result.success:
                logger.info("Autoplay stopped: %s", result.error)
                return
        elif state.phase is Phase.SPUN:
            row = evaluator.best_row(state.player_spin, state.player, state.ai)
            session.choose_row(row)
        elif state.phase is Phase.PETJACK:
            if state.petjack.stage is PetJackStage.BUFF:
                session.apply_petjack_buff(PetJackBuff.CRIT.value)
            else:
                session.petjack_stand()
        else:
            raise RuntimeError(f"Autoplay stuck in phase {state.phase.value}")

    logger.warning("Autoplay gave up after %d commands", MAX_AUTOPLAY_COMMANDS)


def cmd_play(args):
    """Autoplay a match and print the battle log."""
    from .session import DuelSession

    session = DuelSession(seed=args.seed)
    bet = session.set_bet(args.bet)
    if not bet.success:
        print(f"Error: {bet.error}")
        return 1

    autoplay(session)
    snapshot = session.snapshot()

    if args.json:
        print(snapshot.model_dump_json(indent=2))
        return 0

    for entry in session.state.logs:
        print(f"[R{entry.round:>2}] {entry.text}")
    print()
    winner = snapshot.winner.value if snapshot.winner else "none"
    print(f"Winner: {winner}")
    print(f"{snapshot.player.name}: {snapshot.player.hp:.2f} HP   {snapshot.ai.name}: {snapshot.ai.hp:.2f} HP")
    print(f"Coins: {snapshot.coins}")
    return 0


def cmd_trace(args):
    """The seeded spin/row fixture, printed as snapshot JSON."""
    from .session import DuelSession

    session = DuelSession(seed=args.seed)
    for result in (session.set_bet(args.bet), session.spin(), session.choose_row(args.row)):
        if not result.success:
            print(f"Error: {result.error}", file=sys.stderr)
            return 1
    print(session.snapshot().model_dump_json(indent=2))
    return 0


def cmd_validate(args):
    """Validate a config file."""
    from pydantic import ValidationError
    from .config import ConfigValidationError, load_config

    print(f"Validating: {args.config_file}")
    try:
        load_config(args.config_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.config_file}")
        return 1
    except (ConfigValidationError, ValidationError, ValueError) as e:
        print("Invalid config:")
        print(f"  {e}")
        return 1
    print("Config is valid.")
    return 0


def cmd_serve(args):
    """Run the API under uvicorn."""
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
