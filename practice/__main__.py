import argparse
import logging

from holdem.models import TableConfig

from .session import PracticeSession


def main() -> None:
    parser = argparse.ArgumentParser(description="Run baseline bots through practice hands")
    parser.add_argument("--players", type=int, default=8)
    parser.add_argument("--starting-stack", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=5)
    parser.add_argument("--bb", type=int, default=10)
    parser.add_argument("--hands", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true", help="Log every engine event")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = TableConfig(
        seats=args.players,
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
    )

    session = PracticeSession(config, seed=args.seed)
    summary = session.run(args.hands)
    for player_id, stack in sorted(summary.final_stacks.items(), key=lambda item: -item[1]):
        print(f"{player_id:>10} {stack:>8}")


if __name__ == "__main__":
    main()
