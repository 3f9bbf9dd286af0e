#!/usr/bin/env python3
"""Manage loan installment plans from the command line.

Plans are persisted with the backend chosen by PLAN_STORAGE_BACKEND
(default here: json files under PLAN_DATA_DIR).

Examples:
    python scripts/plan_cli.py create --name "Car" --total 182
    python scripts/plan_cli.py init
    python scripts/plan_cli.py insert 1 91 2025-03-01 --title "Payment 1"
    python scripts/plan_cli.py pay <installment-id>
    python scripts/plan_cli.py show
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from installment_plan.config import PlanConfig
from installment_plan.exceptions import EntityNotFoundError, InstallmentPlanError
from installment_plan.formatting import format_currency, format_date, format_percentage
from installment_plan.logging import setup_logging
from installment_plan.models import InstallmentDraft, Loan, MutationResult
from installment_plan.orchestrator import SequenceOrchestrator, create_loan
from installment_plan.prompt import AutoConfirm, ConsolePrompt, confirm_and_delete
from installment_plan.store import LoanRepository, build_store
from installment_plan.validation import REASON_MESSAGES

logger = logging.getLogger(__name__)


def print_loan(loan: Loan, currency: str) -> None:
    """Print a loan and its installments as a table."""
    plan = SequenceOrchestrator(loan)
    summary = plan.summary()

    print(f"\n{loan.name} ({loan.loan_id})")
    print(f"Total: {format_currency(loan.total_amount, currency)}")
    print("=" * 78)
    if not loan.installments:
        print("No installments yet. Run 'init' to create the advance payment.")
        return

    for index, item in enumerate(loan.installments):
        print(
            f"{index:>3}  {item.title[:18]:<18} {format_currency(item.amount, currency):>14} "
            f"{format_percentage(item.percentage):>7}  {format_date(item.due_date)}  "
            f"{item.status.value:<8} {item.installment_id}"
        )
    print("=" * 78)
    print(
        f"Paid: {summary.count_paid} ({format_currency(summary.paid_amount, currency)})  "
        f"Pending: {summary.count_pending} ({format_currency(summary.pending_amount, currency)})"
    )


def report(result: MutationResult | None, repository: LoanRepository, currency: str) -> int:
    """Persist an accepted mutation and print the outcome; returns an exit code."""
    if result is None:
        print("Cancelled.")
        return 1
    if not result.ok:
        print(f"Rejected: {REASON_MESSAGES.get(result.reason, result.reason)} [{result.reason.value}]")
        return 1
    if not repository.save(result.loan):
        print("Warning: the change could not be saved.")
    print_loan(result.loan, currency)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage loan installment plans")
    parser.add_argument("--data-dir", type=Path, help="Directory for the json store")
    parser.add_argument("--loan", help="Loan id (defaults to the selected loan)")
    parser.add_argument("--log-level", default=None, help="Log level (default from LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create an empty loan and select it")
    create.add_argument("--name", required=True)
    create.add_argument("--total", help="Loan total (default from PLAN_DEFAULT_TOTAL)")
    create.add_argument("--notes")

    sub.add_parser("list", help="List stored loans")
    select = sub.add_parser("select", help="Select the loan later commands act on")
    select.add_argument("loan_id")
    sub.add_parser("show", help="Show the selected loan")
    sub.add_parser("init", help="Create the advance installment (100%%)")

    insert = sub.add_parser("insert", help="Insert an installment at a position")
    insert.add_argument("index", type=int)
    insert.add_argument("amount")
    insert.add_argument("due_date", help="YYYY-MM-DD")
    insert.add_argument("--title", default="")
    insert.add_argument("--percentage")

    edit = sub.add_parser("edit", help="Edit a pending installment")
    edit.add_argument("installment_id")
    edit.add_argument("amount")
    edit.add_argument("due_date", help="YYYY-MM-DD")
    edit.add_argument("--title", default="")
    edit.add_argument("--percentage")

    pay = sub.add_parser("pay", help="Mark an installment paid")
    pay.add_argument("installment_id")

    delete = sub.add_parser("delete", help="Delete an installment and redistribute it")
    delete.add_argument("installment_id")
    delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    date_cmd = sub.add_parser("date", help="Change an installment's due date")
    date_cmd.add_argument("installment_id")
    date_cmd.add_argument("due_date", help="YYYY-MM-DD")

    return parser


def main() -> int:
    args = build_parser().parse_args()

    if args.data_dir:
        os.environ["PLAN_DATA_DIR"] = str(args.data_dir)
    os.environ.setdefault("PLAN_STORAGE_BACKEND", "json")

    try:
        config = PlanConfig.from_env()
    except InstallmentPlanError as e:
        print(f"Configuration error: {e}")
        return 2

    setup_logging(level=args.log_level or config.log_level, format_type=config.log_format)
    repository = LoanRepository(build_store(config.storage))
    currency = config.currency

    if args.command == "create":
        try:
            loan = create_loan(args.name, args.total or config.default_total, notes=args.notes)
        except InstallmentPlanError as e:
            print(f"Cannot create loan: {e}")
            return 1
        repository.save(loan)
        repository.save_selected(loan.loan_id)
        print_loan(loan, currency)
        return 0

    if args.command == "list":
        selected = repository.load_selected()
        for loan in repository.load_all():
            marker = "*" if loan.loan_id == selected else " "
            print(f"{marker} {loan.loan_id}  {loan.name}  {format_currency(loan.total_amount, currency)}")
        return 0

    if args.command == "select":
        try:
            repository.require(args.loan_id)
        except EntityNotFoundError as e:
            print(e)
            return 1
        repository.save_selected(args.loan_id)
        return 0

    loan_id = args.loan or repository.load_selected()
    if not loan_id:
        print("No loan selected. Use 'create' or 'select' first.")
        return 1
    try:
        loan = repository.require(loan_id)
    except EntityNotFoundError as e:
        print(e)
        return 1

    plan = SequenceOrchestrator(loan, config=config)

    if args.command == "show":
        print_loan(loan, currency)
        return 0
    if args.command == "init":
        return report(plan.create_initial(), repository, currency)
    if args.command == "insert":
        draft = InstallmentDraft(args.title, args.amount, args.due_date, args.percentage)
        return report(plan.insert(args.index, draft), repository, currency)
    if args.command == "edit":
        draft = InstallmentDraft(args.title, args.amount, args.due_date, args.percentage)
        return report(plan.edit(args.installment_id, draft), repository, currency)
    if args.command == "pay":
        return report(plan.mark_paid(args.installment_id), repository, currency)
    if args.command == "delete":
        prompt = AutoConfirm() if args.yes else ConsolePrompt()
        return report(confirm_and_delete(plan, args.installment_id, prompt), repository, currency)
    if args.command == "date":
        return report(plan.update_date(args.installment_id, args.due_date), repository, currency)

    logger.error("Unknown command %s", args.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
