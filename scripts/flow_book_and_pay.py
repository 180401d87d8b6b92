#!/usr/bin/env python3
"""
Complete booking and payment flow test script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_book_and_pay.py --customer-token <JWT> --staff-token <JWT> --staff-uid <UID>
    python scripts/flow_book_and_pay.py --customer-token "$CUSTOMER" --staff-token "$STAFF" --staff-uid s1 --service-id hair

Flow:
    1. Register customer and staff profiles
    2. List service catalog
    3. Create booking (as customer)
    4. Accept booking (as staff)
    5. Start job (in_progress)
    6. Complete job
    7. Create payment intent (as customer)
    8. Check payment status
"""

import argparse
import json
import sys
from datetime import UTC, datetime, timedelta

import httpx

BASE_URL = "http://localhost:5000"


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    elif method == "PATCH":
        response = httpx.patch(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


def advance(token: str, booking_id: str, status: str) -> None:
    result = api_request(token, "PATCH", f"/api/bookings/{booking_id}/status", {"status": status})
    if not print_result(result):
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(description="Complete booking and payment flow")
    parser.add_argument("--customer-token", required=True, help="Customer identity token")
    parser.add_argument("--staff-token", required=True, help="Staff identity token")
    parser.add_argument("--staff-uid", required=True, help="Staff uid (subject of --staff-token)")
    parser.add_argument("--service-id", default="hair", help="Catalog service id")
    parser.add_argument("--skip-payment", action="store_true", help="Skip the payment intent step")
    args = parser.parse_args()

    # Step 1: Register profiles
    print_step(1, "Register customer and staff profiles")
    customer = api_request(args.customer_token, "POST", "/api/auth/register", {"name": "Flow Customer"})
    staff = api_request(args.staff_token, "POST", "/api/auth/register", {"name": "Flow Stylist", "role": "staff"})
    if not print_result(customer) or not print_result(staff):
        sys.exit(1)

    # Step 2: Service catalog
    print_step(2, "List service catalog")
    catalog = api_request(args.customer_token, "GET", "/api/services")
    if not print_result(catalog):
        sys.exit(1)

    # Step 3: Create booking
    print_step(3, "Create booking")
    appointment = (datetime.now(UTC) + timedelta(days=1)).replace(microsecond=0)
    booking_result = api_request(args.customer_token, "POST", "/api/bookings", {
        "stylistUid": args.staff_uid,
        "serviceId": args.service_id,
        "dateTime": appointment.isoformat(),
        "clientNotes": "Created by flow_book_and_pay.py",
    })
    if not print_result(booking_result):
        sys.exit(1)

    booking = booking_result["data"]["booking"]
    booking_id = booking["id"]
    print(f"\nBooking created: {booking_id} ({booking['serviceName']}, {booking['price']})")

    # Step 4: Accept booking
    print_step(4, "Accept booking (as staff)")
    accept_result = api_request(args.staff_token, "POST", f"/api/bookings/{booking_id}/accept")
    if not print_result(accept_result):
        sys.exit(1)
    print("\nBooking ACCEPTED")

    # Step 5-6: Run the job
    print_step(5, "Start job")
    advance(args.staff_token, booking_id, "in_progress")
    print_step(6, "Complete job")
    advance(args.staff_token, booking_id, "completed")
    print("\nBooking COMPLETED")

    if args.skip_payment:
        print("\n" + "="*60)
        print("FLOW COMPLETE (skipped payment)")
        print("="*60)
        return

    # Step 7: Payment intent
    print_step(7, "Create payment intent")
    intent_result = api_request(args.customer_token, "POST", "/api/payments/create-intent", {
        "bookingId": booking_id,
    })
    if not print_result(intent_result):
        sys.exit(1)

    # Step 8: Payment status
    print_step(8, "Check payment status")
    status_result = api_request(args.customer_token, "GET", f"/api/payments/status/{booking_id}")
    if not print_result(status_result, ["paymentStatus", "price", "paymentIntentId"]):
        sys.exit(1)

    # Final summary
    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
