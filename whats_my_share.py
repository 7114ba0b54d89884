"""
What's My Share command line
- Split an amount among people (equal, exact, percentage or shares).
- Settle a group ledger JSON file or a balances CSV with as few payments as possible.
- Export an Excel report: expenses, per-member summary, transfers and explanation.

Run:
  python whats_my_share.py settle group.json --explain --excel report.xlsx
  python whats_my_share.py balances balances.csv
  python whats_my_share.py split 1000.00 alice bob carol --shares 2 1 1
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import Dict, List, Optional

from computations import compute_summary
from config import Settings, configure_logging, load_group, load_settings
from csv_handler import export_transfers_to_csv, import_balances_from_csv
from debt_simplifier import generate_explanation, requires_confirmation, settle
from errors import InvalidInputError, WhatsMyShareError
from excel_export import export_excel
from models import EqualSplit, ExactSplit, PercentageSplit, SharesSplit
from split_calculator import calculate_split
from utils import format_amount, parse_amount, parse_date

logger = logging.getLogger(__name__)


def _print_settlement(
    balances: Dict[str, int],
    names: Dict[str, str],
    settings: Settings,
    explain: bool,
    csv_path: Optional[str] = None,
) -> None:
    def fmt(v: int) -> str:
        return format_amount(v, settings.currency_symbol, settings.decimal_places)

    if not any(balances.values()):
        print("Everyone is settled up.")
        return

    result = settle(balances)
    if explain:
        for step in generate_explanation(balances, names, settings.currency_symbol, settings.decimal_places):
            print(f"== {step.title}")
            print(step.description)
            print()

    for t in result.transfers:
        line = f"{names.get(t.debtor, t.debtor)} pays {names.get(t.creditor, t.creditor)} {fmt(t.amount)}"
        if requires_confirmation(t.amount, settings.confirmation_threshold):
            line += " (needs confirmation)"
        print(line)

    if not result.is_balanced:
        print(
            "Warning: balances do not add up; left unsettled: "
            + ", ".join(f"{names.get(p, p)} {fmt(v)}" for p, v in result.residual.items()),
            file=sys.stderr,
        )

    if csv_path:
        export_transfers_to_csv(list(result.transfers), csv_path)
        print(f"Exported transfers: {csv_path}")


def cmd_settle(args, settings: Settings) -> int:
    """Settle a group ledger file"""
    group = load_group(args.ledger)
    start = parse_date(args.start) if args.start else None
    end = parse_date(args.end) if args.end else None
    summary = compute_summary(group, start, end)
    net = {p: s["net"] for p, s in summary.items()}
    logger.info("Loaded group %s with %d expenses", group.name, len(group.expenses))

    _print_settlement(net, group.display_names, settings, args.explain, args.csv)
    if args.excel:
        export_excel(group, args.excel, start, end, settings.currency_symbol, settings.decimal_places)
        print(f"Exported: {args.excel}")
    return 0


def cmd_balances(args, settings: Settings) -> int:
    """Settle a balances CSV"""
    balances = import_balances_from_csv(args.balances)
    if not balances:
        raise InvalidInputError(f"No balances found in {args.balances}")
    _print_settlement(balances, {}, settings, args.explain, args.csv)
    return 0


def _weights(participants: List[str], values: List[str], kind: str) -> Dict[str, str]:
    if len(values) != len(participants):
        raise InvalidInputError(
            f"Got {len(values)} {kind} for {len(participants)} participants"
        )
    return dict(zip(participants, values))


def cmd_split(args, settings: Settings) -> int:
    """Split an amount and print each share"""
    total = parse_amount(args.amount, settings.decimal_places)
    people = args.participants
    if args.percentages:
        strategy = PercentageSplit({p: float(v) for p, v in _weights(people, args.percentages, "percentages").items()})
    elif args.shares:
        strategy = SharesSplit({p: int(v) for p, v in _weights(people, args.shares, "shares").items()})
    elif args.exact:
        strategy = ExactSplit({
            p: parse_amount(v, settings.decimal_places)
            for p, v in _weights(people, args.exact, "amounts").items()
        })
    else:
        strategy = EqualSplit(people)

    for s in calculate_split(total, strategy):
        print(f"{s.participant}: {format_amount(s.amount, settings.currency_symbol, settings.decimal_places)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="whats-my-share",
        description="Split shared expenses and settle group debts with minimal payments",
    )
    p.add_argument("--settings", help="Path to settings JSON (default: app directory)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("settle", help="Settle a group ledger JSON file")
    s.add_argument("ledger", help="Group ledger JSON")
    s.add_argument("--explain", action="store_true", help="Show the simplification step by step")
    s.add_argument("--excel", help="Write an Excel report to this path")
    s.add_argument("--csv", help="Write the transfers to this CSV path")
    s.add_argument("--start", help="Only expenses on or after YYYY-MM-DD")
    s.add_argument("--end", help="Only expenses on or before YYYY-MM-DD")
    s.set_defaults(func=cmd_settle)

    b = sub.add_parser("balances", help="Settle a participant,balance CSV")
    b.add_argument("balances", help="CSV with participant and balance (minor units) columns")
    b.add_argument("--explain", action="store_true", help="Show the simplification step by step")
    b.add_argument("--csv", help="Write the transfers to this CSV path")
    b.set_defaults(func=cmd_balances)

    sp = sub.add_parser("split", help="Split an amount among participants")
    sp.add_argument("amount", help='Total, e.g. "1000.50"')
    sp.add_argument("participants", nargs="+")
    group = sp.add_mutually_exclusive_group()
    group.add_argument("--percentages", nargs="+", help="One percentage per participant")
    group.add_argument("--shares", nargs="+", help="One share count per participant")
    group.add_argument("--exact", nargs="+", help="One amount per participant")
    sp.set_defaults(func=cmd_split)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line"""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.settings)
        configure_logging("DEBUG" if args.verbose else settings.log_level)
        return args.func(args, settings)
    except (WhatsMyShareError, OSError, ValueError) as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
