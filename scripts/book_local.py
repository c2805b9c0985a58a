#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py [provider_id]

Drives one BookingWorkflow through the same wiring the API uses and prints
the state after every command. Commands:
  service <id> | date <YYYY-MM-DD> | time <HH:MM> | name <text> | phone <text>
  email <text> | notes <text> | provider <id> | retry | submit | show | quit
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking.application.exceptions import InvalidSelectionError, WorkflowStateError
from booking.application.use_cases.workflow import BookingWorkflow
from booking.infrastructure.availability.mock_service import DEMO_PROVIDER
from booking.application.utils.calendar_dates import today_in
from booking.wiring.dependencies import create_workflow, get_confirmation_presenter, get_timezone


def _print_state(workflow: BookingWorkflow) -> None:
    draft = workflow.draft
    print("\n--- State ---")
    print(f"status: {workflow.status.value}" + (f" ({workflow.failure})" if workflow.failure else ""))
    if workflow.provider:
        services = ", ".join(f"{s.id}={s.name} {s.duration_minutes}min {s.price}" for s in workflow.provider.services)
        print(f"provider: {workflow.provider.name} [{services}]")
    print(f"service: {draft.service_id}  date: {draft.date}  time: {draft.time}")
    print(f"patient: {draft.patient_name!r}  phone: {draft.patient_phone!r}  email: {draft.patient_email!r}")
    slot_set = workflow.slot_set
    print("slots: " + ("(unknown)" if slot_set is None else (" ".join(slot_set.times) or "(none)")))
    print(f"can_submit: {workflow.can_submit}")
    for notice in workflow.drain_notices():
        print(f"[{notice.level}] {notice.message}")
    if workflow.confirmation:
        print()
        print(get_confirmation_presenter().render(workflow.confirmation).as_text())


async def _handle(workflow: BookingWorkflow, command: str, arg: str) -> None:
    if command == "service":
        workflow.select_service(arg)
    elif command == "date":
        await workflow.select_date(date.fromisoformat(arg))
    elif command == "time":
        workflow.select_time(arg)
    elif command == "name":
        workflow.update_contact(patient_name=arg)
    elif command == "phone":
        workflow.update_contact(patient_phone=arg)
    elif command == "email":
        workflow.update_contact(patient_email=arg)
    elif command == "notes":
        workflow.update_contact(notes=arg)
    elif command == "provider":
        await workflow.change_provider(arg)
    elif command == "retry":
        await workflow.retry_slots()
    elif command == "submit":
        await workflow.submit()
    elif command != "show":
        print(f"Unknown command: {command}")


async def main() -> None:
    provider_id = sys.argv[1] if len(sys.argv) > 1 else DEMO_PROVIDER.id
    workflow = create_workflow(provider_id, session_id="local")
    await workflow.load(initial_date=today_in(get_timezone()))
    _print_state(workflow)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break
        if not line:
            continue
        command, _, arg = line.partition(" ")
        if command in ("quit", "exit"):
            print("Bye!")
            break
        try:
            await _handle(workflow, command.lower(), arg.strip())
        except (InvalidSelectionError, WorkflowStateError, ValueError) as e:
            print(f"ERROR: {e}")
        _print_state(workflow)

    workflow.close()


if __name__ == "__main__":
    asyncio.run(main())
