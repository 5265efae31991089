"""Entry point for gavel package."""

import argparse
import logging


def _print_results(session) -> None:
    stats = session.manager.stats
    print()
    print(f"Players auctioned: {stats.players_auctioned}")
    print(f"Sold: {stats.players_sold}  Unsold: {stats.players_unsold}  Skipped: {stats.players_skipped}")
    print(f"Total revenue: {stats.total_revenue:.2f} Cr")
    print()
    print(f"{'Team':<30} {'Purse':>8} {'Squad':>6} {'Overseas':>9}")
    print("-" * 56)
    for team in sorted(session.teams, key=lambda t: t.purse):
        print(f"{team.name:<30} {team.purse:>8.2f} {team.squad_size:>6} {team.overseas_count:>9}")

    top = sorted(
        (e for e in session.log.entries if e.winning_team),
        key=lambda e: e.final_price,
        reverse=True,
    )[:5]
    if top:
        print()
        print("Top buys:")
        for entry in top:
            print(
                f"  {entry.player_name} ({entry.player_role}, {entry.player_rating}) -> "
                f"{entry.winning_team} for {entry.final_price:.2f} Cr "
                f"after {entry.number_of_bids} bids"
            )


def main() -> None:
    """Main entry point for the Gavel application."""
    parser = argparse.ArgumentParser(
        description="Gavel - Cricket Player Auction Simulator",
        prog="gavel",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Run a full auction on a virtual clock and print results",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the API server",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="API host (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="API port (default: 8000)",
    )
    parser.add_argument(
        "--players",
        type=int,
        default=60,
        help="Size of the generated player pool (default: 60)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the pool and AI decisions",
    )
    parser.add_argument(
        "--team",
        type=str,
        default=None,
        help="Franchise ID held out of AI bidding (e.g. mi, csk)",
    )
    parser.add_argument(
        "--export-json",
        type=str,
        default=None,
        help="Write the auction log as JSON to this path",
    )
    parser.add_argument(
        "--export-csv",
        type=str,
        default=None,
        help="Write the auction log as CSV to this path",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log AI decisions and round events",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        from gavel.api.main import run_api

        run_api(host=args.host, port=args.port)
        return

    if not args.simulate:
        parser.print_help()
        return

    # Simulate a full auction on a virtual clock
    from gavel.core.auction import AuctionSession, TeamNotFoundError, VirtualScheduler

    print("Gavel - Cricket Player Auction Simulator (Simulation Mode)")
    print("=" * 58)

    scheduler = VirtualScheduler()
    try:
        session = AuctionSession.create(
            user_team_id=args.team,
            scheduler=scheduler,
            auto_advance=True,
            seed=args.seed,
            num_players=args.players,
        )
    except TeamNotFoundError as e:
        parser.error(str(e))

    session.manager.start()
    scheduler.run_until_idle()
    print(f"Simulated {scheduler.now:.1f}s of auction time")

    _print_results(session)

    if args.export_json:
        session.log.export_json(args.export_json)
        print(f"\nLog written to {args.export_json}")
    if args.export_csv:
        session.log.export_csv(args.export_csv)
        print(f"\nLog written to {args.export_csv}")

    session.close()


if __name__ == "__main__":
    main()
