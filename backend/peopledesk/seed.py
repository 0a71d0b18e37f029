"""Seed script for development data.

Run with:  uv run python -m peopledesk.seed
Inside Docker:  docker compose exec api uv run python -m peopledesk.seed
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"
BOOTSTRAP_MANAGER_ID = "00000000-0000-0000-0000-000000000001"

MANAGER_HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": BOOTSTRAP_MANAGER_ID,
    "X-Role": "Manager",
}

EMPLOYEES = [
    {
        "employee_number": "MGR-001",
        "first_name": "Alice",
        "last_name": "Johnson",
        "email": "alice.johnson@example.com",
        "job_title": "Engineering Manager",
        "department": "Engineering",
        "role": "Manager",
        "date_of_joining": "2021-02-01",
    },
    {
        "employee_number": "EMP-001",
        "first_name": "Bob",
        "last_name": "Smith",
        "email": "bob.smith@example.com",
        "job_title": "Backend Engineer",
        "department": "Engineering",
        "reports_to": "MGR-001",
        "date_of_joining": "2023-06-01",
    },
    {
        "employee_number": "EMP-002",
        "first_name": "Carol",
        "last_name": "Williams",
        "email": "carol.williams@example.com",
        "job_title": "Frontend Engineer",
        "department": "Engineering",
        "reports_to": "MGR-001",
        "contract_type": "PartTime",
        "date_of_joining": "2024-03-01",
        "leave_balance": {"annual": 15},
    },
    {
        "employee_number": "EMP-003",
        "first_name": "Dave",
        "last_name": "Brown",
        "email": "dave.brown@example.com",
        "job_title": "Support Specialist",
        "department": "Support",
        "work_location": "Remote",
        "reports_to": "MGR-001",
        "date_of_joining": "2024-09-15",
    },
]


def _employee_headers(employee_number: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-User-Id": employee_number,
        "X-Role": "Employee",
    }


def _next_monday(today: date, weeks_ahead: int = 1) -> date:
    """Monday at least weeks_ahead weeks out."""
    return today + timedelta(days=7 * weeks_ahead - today.weekday())


async def _safe_post(
    client: httpx.AsyncClient,
    url: str,
    json: dict,
    label: str,
    headers: dict[str, str] = MANAGER_HEADERS,
) -> dict | None:
    """POST that reports existing records and conflicts as skips."""
    resp = await client.post(url, json=json, headers=headers)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 400 and resp.json().get("code") in ("INVALID_INPUT", "OVERLAP_CONFLICT"):
        print(f"  [SKIP] {label} ({resp.json().get('detail')})")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> None:
    """Onboard the sample organization, manager first."""
    print("\n--- Seeding employees ---")
    for emp in EMPLOYEES:
        await _safe_post(
            client,
            f"{BASE_URL}/employees",
            emp,
            f"{emp['first_name']} {emp['last_name']} ({emp['employee_number']})",
        )


async def seed_time_offs(client: httpx.AsyncClient) -> None:
    """File a few requests and review some of them."""
    print("\n--- Seeding time-off requests ---")
    monday = _next_monday(date.today())

    # Bob: a work week of annual leave, approved by Alice
    bob = await _safe_post(
        client,
        f"{BASE_URL}/time-offs",
        {
            "time_off_type": "Annual",
            "starts_at": monday.isoformat(),
            "ends_at": (monday + timedelta(days=4)).isoformat(),
            "reason": "Family vacation",
        },
        "Request: Bob 5-day annual leave",
        headers=_employee_headers("EMP-001"),
    )
    if bob:
        resp = await client.patch(
            f"{BASE_URL}/time-offs/{bob['id']}/review",
            json={"status": "Approved", "review_note": "Enjoy the trip"},
            headers={**_employee_headers("MGR-001"), "X-Role": "Manager"},
        )
        if resp.status_code == 200:
            print("  [OK] Approved Bob's annual leave")
        else:
            print(f"  [ERROR] Approving Bob's request: {resp.status_code} {resp.text[:200]}")

    # Carol: one sick day, left pending
    await _safe_post(
        client,
        f"{BASE_URL}/time-offs",
        {
            "time_off_type": "Sick",
            "starts_at": (monday + timedelta(days=9)).isoformat(),
            "ends_at": (monday + timedelta(days=9)).isoformat(),
            "reason": "Doctor appointment",
        },
        "Request: Carol 1-day sick leave (Pending)",
        headers=_employee_headers("EMP-002"),
    )

    # Dave: two casual days, rejected
    dave = await _safe_post(
        client,
        f"{BASE_URL}/time-offs",
        {
            "time_off_type": "Casual",
            "starts_at": (monday + timedelta(days=14)).isoformat(),
            "ends_at": (monday + timedelta(days=15)).isoformat(),
        },
        "Request: Dave 2-day casual leave",
        headers=_employee_headers("EMP-003"),
    )
    if dave:
        resp = await client.patch(
            f"{BASE_URL}/time-offs/{dave['id']}/review",
            json={"status": "Rejected", "review_note": "Support rota is short that week"},
            headers={**_employee_headers("MGR-001"), "X-Role": "Manager"},
        )
        if resp.status_code == 200:
            print("  [OK] Rejected Dave's casual leave")
        else:
            print(f"  [ERROR] Rejecting Dave's request: {resp.status_code} {resp.text[:200]}")


async def main() -> None:
    print("=" * 60)
    print("  PeopleDesk - Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running (make up)")
            sys.exit(1)

        await seed_employees(client)
        await seed_time_offs(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
