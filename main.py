import argparse
from datetime import date

from perkcycle.agents.orchestrator import ExpiryOrchestrator
from perkcycle.api.app import run as run_api
from perkcycle.config import configure_logging, settings
from perkcycle.repository.benefit_store import BenefitStore
from perkcycle.schemas.requests import TimelineRequest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PerkCycle unified entrypoint")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["api", "report"],
        default="api",
        help="Run mode: api (default), report",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Reference date for report mode (YYYY-MM-DD, default today)",
    )
    return parser


def run_report(reference_date: date | None) -> None:
    configure_logging()
    orchestrator = ExpiryOrchestrator(BenefitStore(settings.benefit_store_file), settings.action_window_days)
    result = orchestrator.action_items(TimelineRequest(reference_date=reference_date))

    if not result.items:
        print(f"Nothing expiring within {settings.action_window_days} days of {result.reference_date}")
        return

    for item in result.items:
        line = f"{item.expiry.days_until_expiry:>4}d  {item.card_name}: {item.benefit_name}"
        if item.value_at_risk:
            line += f" (${item.value_at_risk.remaining_value:.2f} at risk)"
        print(line)

    if result.skipped:
        print(f"Skipped misconfigured benefits: {', '.join(result.skipped)}")


def main() -> None:
    args = build_parser().parse_args()

    if args.mode == "api":
        run_api()
        return

    run_report(args.date)


if __name__ == "__main__":
    main()
