import argparse
import logging
import random

from holdem.models import Phase, TableConfig

from .console import ConsolePrompt, render_table
from .session import FRIEND_NAMES, TrainerSession


def main() -> None:
    parser = argparse.ArgumentParser(description="Texas Hold'em trainer")
    parser.add_argument("--opponents", type=int, default=len(FRIEND_NAMES), help="Bot opponents (1-7)")
    parser.add_argument("--starting-stack", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=10)
    parser.add_argument("--bb", type=int, default=20)
    parser.add_argument("--hands", type=int, default=None, help="Stop after this many hands")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and bot rolls")
    parser.add_argument("--auto", action="store_true", help="Let the bot policy play your seat")
    parser.add_argument("--bot-delay-ms", type=int, default=0, help="Pause before each bot decision")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    if not 1 <= args.opponents <= len(FRIEND_NAMES):
        parser.error(f"--opponents must be between 1 and {len(FRIEND_NAMES)}")
    if args.hands is not None and args.hands < 1:
        parser.error("--hands must be at least 1")

    config = TableConfig(
        seats=args.opponents + 1,
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
        bot_delay_ms=args.bot_delay_ms,
    )
    rng = random.Random(args.seed)
    session = TrainerSession(config, rng=rng)
    if not args.auto:
        session.prompt = ConsolePrompt(session.engine)

    def show_result(state):
        if state.phase == Phase.SHOWDOWN:
            for line in render_table(state, viewer=session.human_index()):
                print(line)
            print()

    session.on_update = show_result
    try:
        final = session.run(max_hands=args.hands)
    except (KeyboardInterrupt, EOFError):
        print("\nLeaving the table.")
        return

    if final.phase == Phase.GAME_OVER:
        print("Game over.")
    for entry in session.history[-5:]:
        print(f"#{entry.hand_number}: {', '.join(entry.winner_names)} won {entry.win_amount} ({entry.winning_hand})")


if __name__ == "__main__":
    main()
