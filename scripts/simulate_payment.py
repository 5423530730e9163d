"""Simulate the payment event for an existing proposal and print its link.

Usage:
    APP_ENV=development DATABASE_URL=... python scripts/simulate_payment.py <proposal_id> [base_url] [--remint]

Requires:
    - DATABASE_URL pointing to a database with the proposal
    - APP_ENV=development (or PAYMENT_SIMULATION=1); refused otherwise

--remint replaces the slug of an already-paid proposal; the old link stops
working. This script is for local/staging validation only. No money moves.
"""

from __future__ import annotations

import sys


def main() -> None:
    args = [a for a in sys.argv[1:] if a != "--remint"]
    remint = len(args) != len(sys.argv) - 1
    if not args:
        print("Usage: python scripts/simulate_payment.py <proposal_id> [base_url] [--remint]")
        sys.exit(2)

    proposal_id = args[0]
    base_url = args[1].rstrip("/") if len(args) > 1 else "http://localhost:3000"

    # Import after argument validation so a usage error never touches config
    from proposely.config import Settings
    from proposely.domain.errors import ProposelyError
    from proposely.domain.payments import PaymentGate
    from proposely.infra.repositories.proposals_repository import PgProposalStore
    from proposely.observability.correlation import correlation_scope

    settings = Settings.from_env()
    if not settings.database_url:
        print("ERROR: DATABASE_URL not set")
        sys.exit(1)

    gate = PaymentGate(PgProposalStore(settings), simulation_enabled=settings.simulation_enabled)

    action = "Re-minting share link" if remint else "Confirming payment"
    print(f"{action} for proposal_id={proposal_id} ...")

    with correlation_scope("script:simulate_payment"):
        try:
            slug = gate.remint(proposal_id) if remint else gate.confirm(proposal_id)
        except ProposelyError as e:
            print(f"ERROR: {e.public_message}")
            sys.exit(1)

    print(f"Share link: {base_url}/v/{slug.reveal()}")


if __name__ == "__main__":
    main()
