"""
pairup CLI - Command-line tools for the engine.

Usage:
    pairup simulate [--players N] [--winning-score N] [--seed N] [--cards FILE]
    pairup validate-cards <cards_file>
"""

import argparse
import logging
import random
import sys

from .config import Settings, configure_logging
from .engine_core.errors import GameError, ResourceExhausted

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="pairup - party card game rules engine",
        prog="pairup",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from PAIRUP_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a full game with random choices")
    simulate_parser.add_argument("--players", type=int, default=4, help="Number of players (4-8)")
    simulate_parser.add_argument("--winning-score", type=int, default=None, help="Points to win")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--cards", default=None, help="Catalog JSON file")

    # Validate command
    validate_parser = subparsers.add_parser("validate-cards", help="Validate a catalog file")
    validate_parser.add_argument("cards_file", help="Path to catalog JSON file")

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "simulate":
        return cmd_simulate(args, settings)
    elif args.command == "validate-cards":
        return cmd_validate_cards(args)
    else:
        parser.print_help()
        return 1


def cmd_simulate(args, settings: Settings) -> int:
    """Play one game to the end and print the leaderboard."""
    from .catalog import JsonCardCatalog, placeholder_catalog
    from .service import GameService
    from .session import SessionManager

    rng = random.Random(args.seed)
    logger.info("simulating a %d-player game (seed %s)", args.players, args.seed)
    cards_file = args.cards or settings.cards_file
    try:
        catalog = JsonCardCatalog(cards_file) if cards_file else placeholder_catalog(prompts=150, responses=1000)
    except FileNotFoundError:
        print(f"Error: File not found: {cards_file}")
        return 1
    except GameError as e:
        print(f"Invalid: {e.message}")
        return 1
    service = GameService(
        session_manager=SessionManager(settings.build_store()),
        catalog=catalog,
        default_winning_score=settings.default_winning_score,
        rng=rng,
    )

    try:
        view = service.create_game("Player 1", winning_score=args.winning_score)
        for i in range(2, args.players + 1):
            service.join_game(view.code, f"Player {i}")
        view = service.start_game(view.game_id)

        while view.winner_id is None:
            view = _play_round(service, view, rng)
    except GameError as e:
        print(f"Error [{e.code.value}]: {e.message}")
        return 1

    print(f"Game {view.code} finished after {view.rounds_played} round(s)")
    for entry in service.leaderboard(view.game_id):
        print(f"  {entry.rank}. {entry.nickname:<20} {entry.score}")
    return 0


def _play_round(service, view, rng: random.Random):
    game_id = view.game_id
    round_view = view.current_round
    print(f"Round {round_view.number}: {round_view.prompt.text}")

    for player in view.players:
        if player.player_id == view.judge_id:
            continue
        hand = service.get_hand(game_id, player.player_id)
        if not hand.cards:
            raise ResourceExhausted(f"{player.nickname} has no cards left to play.")
        card = rng.choice(hand.cards)
        view = service.play_card(game_id, player.player_id, card.card_id)

    submitters = [p.player_id for p in view.players if p.has_submitted]
    winner_id = rng.choice(submitters)
    view = service.select_winner(game_id, view.judge_id, winner_id)
    if view.winner_id is None:
        view = service.start_new_round(game_id)
    return view


def cmd_validate_cards(args) -> int:
    """Validate a catalog file."""
    from .catalog import JsonCardCatalog

    try:
        catalog = JsonCardCatalog(args.cards_file)
        catalog.prompt_cards()
        catalog.response_cards()
    except FileNotFoundError:
        print(f"Error: File not found: {args.cards_file}")
        return 1
    except GameError as e:
        print(f"Invalid: {e.message}")
        return 1

    print(f"OK: {catalog.prompt_count} prompt card(s), {catalog.response_count} response card(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
