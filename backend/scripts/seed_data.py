#!/usr/bin/env python3
"""Seed an environment with payment gateway config and sample orders.

Webhook calls are rejected until the `ikhode-bakong` gateway has a
webhook secret, so every new environment needs at least the gateway row.

Usage:
    python backend/scripts/seed_data.py --env dev --webhook-secret s3cret
    IKHODE_WEBHOOK_SECRET=s3cret python backend/scripts/seed_data.py --env dev
    python backend/scripts/seed_data.py --env dev --sample-orders 5
    python backend/scripts/seed_data.py --env dev --clear-first
"""

import argparse
import os
import sys
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import boto3

from shared.models import IKHODE_GATEWAY_SLUG, OrderStatus

# Global region setting (set by main() from args)
_AWS_REGION: str | None = None

SAMPLE_PACKAGES = [
    ("Mobile Legends", "86 Diamonds", Decimal("1.50")),
    ("Free Fire", "100 Diamonds", Decimal("1.00")),
    ("PUBG Mobile", "60 UC", Decimal("0.99")),
    ("Genshin Impact", "Welkin Moon", Decimal("4.99")),
]


def get_dynamodb_resource():
    """Get DynamoDB resource with configured region."""
    if _AWS_REGION:
        return boto3.resource("dynamodb", region_name=_AWS_REGION)
    return boto3.resource("dynamodb")


def get_table_name(env: str, table: str) -> str:
    """Get full table name with environment prefix."""
    prefix = os.environ.get("DYNAMODB_TABLE_PREFIX", f"topup-{env}")
    return f"{prefix}-{table}"


def seed_gateway(env: str, webhook_secret: str) -> dict:
    """Write the Ikhode gateway row with its webhook secret."""
    table = get_dynamodb_resource().Table(get_table_name(env, "payment-gateways"))
    item = {
        "slug": IKHODE_GATEWAY_SLUG,
        "name": "Ikhode Bakong KHQR",
        "config": {"webhook_secret": webhook_secret},
    }
    table.put_item(Item=item)
    print(f"  ✓ Gateway {IKHODE_GATEWAY_SLUG} configured in {table.name}")
    return item


def seed_orders(env: str, count: int) -> list[dict]:
    """Create pending sample orders for webhook testing."""
    table = get_dynamodb_resource().Table(get_table_name(env, "orders"))
    now = datetime.now(timezone.utc).isoformat()
    orders = []

    for i in range(count):
        game, package, amount = SAMPLE_PACKAGES[i % len(SAMPLE_PACKAGES)]
        order = {
            "id": str(uuid.uuid4()),
            "status": OrderStatus.PENDING.value,
            "amount": amount,
            "currency": "USD",
            "game_name": game,
            "package_name": package,
            "player_id": f"{100000000 + i}",
            "status_message": "Awaiting payment.",
            "created_at": now,
            "updated_at": now,
        }
        table.put_item(Item=order)
        orders.append(order)
        print(f"  ○ {order['id']} {game} / {package} ({amount} USD)")

    return orders


def clear_table(env: str, table_name: str) -> int:
    """Clear all items from a table.

    Returns:
        Number of items deleted
    """
    table = get_dynamodb_resource().Table(get_table_name(env, table_name))
    key_attrs = [k["AttributeName"] for k in table.key_schema]

    deleted = 0
    scan_kwargs: dict = {}
    while True:
        response = table.scan(**scan_kwargs)
        with table.batch_writer() as batch:
            for item in response.get("Items", []):
                batch.delete_item(Key={k: item[k] for k in key_attrs})
                deleted += 1
        if not response.get("LastEvaluatedKey"):
            return deleted
        scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]


def main(argv: list[str] | None = None) -> int:
    """Run the seed script."""
    global _AWS_REGION

    parser = argparse.ArgumentParser(description="Seed gateway config and sample orders")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "ap-southeast-1"),
        help="AWS region (default: ap-southeast-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--webhook-secret",
        default=os.environ.get("IKHODE_WEBHOOK_SECRET", ""),
        help="Ikhode webhook secret (default: IKHODE_WEBHOOK_SECRET env var)",
    )
    parser.add_argument(
        "--sample-orders",
        type=int,
        default=0,
        help="Number of pending sample orders to create (default: 0)",
    )
    parser.add_argument(
        "--clear-first",
        action="store_true",
        help="Delete existing orders before seeding",
    )

    args = parser.parse_args(argv)
    _AWS_REGION = args.region

    if not args.webhook_secret:
        print("❌ A webhook secret is required (--webhook-secret or IKHODE_WEBHOOK_SECRET)")
        return 1

    # Safety check for production
    if args.env == "prod":
        confirm = input("⚠️  WARNING: You are about to modify PRODUCTION data. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    print(f"\n🌱 Seeding {args.env} environment (region: {args.region})\n")

    if args.clear_first:
        count = clear_table(args.env, "orders")
        print(f"  Cleared {count} orders\n")

    try:
        seed_gateway(args.env, args.webhook_secret)
    except Exception as e:
        print(f"  ❌ Failed to seed gateway: {e}")
        return 1

    if args.sample_orders > 0:
        print()
        seed_orders(args.env, args.sample_orders)

    print("\n✅ Seed completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
