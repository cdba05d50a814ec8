"""Worker: assign invited clients to their inviting partner.

Usage:
    python -m worker.auto_assign
"""

import argparse

import structlog

from db.connection import get_session
from partnerledger.services.auto_assign import AutoAssignmentService
from partnerledger.services.schemas.results import AutoAssignResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Assign invited clients to partners",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every client outcome",
    )
    args: argparse.Namespace = parser.parse_args(argv)

    with get_session() as session:
        result: AutoAssignResult = AutoAssignmentService(session).check_and_assign()

    if args.verbose:
        for outcome in result.outcomes:
            logger.info(
                "client_outcome",
                client=outcome.client_name,
                partner=outcome.partner_name,
                assigned=outcome.assigned,
            )
    logger.info(result.message, run_id=result.run_id)


if __name__ == "__main__":
    main()
