#!/usr/bin/env python
import argparse

from rich import print

from invclient.client import DEFAULT_BASE_URL, InventoryClient
from invclient import viewstate as vs


def main():
    parser = argparse.ArgumentParser(description="Walk through the product lifecycle against a running API")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    args = parser.parse_args()

    c = InventoryClient(base_url=args.base_url)

    # -----------------------------
    # Create
    # -----------------------------
    print("\nCreating product...")
    rice = c.create_product("Rice 1kg", 60, 10, "Grocery")
    print(rice)

    # -----------------------------
    # List, grouped by category
    # -----------------------------
    print("\nListing products by category...")
    products = c.list_products()
    for category, items in vs.group_by_category(products).items():
        print(f"[bold]{category}[/bold]", [p["name"] for p in items])

    # -----------------------------
    # Update quantity
    # -----------------------------
    print("\nDropping stock to 3...")
    rice = c.update_product(rice["id"], rice["name"], rice["price"], 3, rice["category"])
    print(rice, "[red]low stock[/red]" if vs.is_low_stock(rice) else "")

    # -----------------------------
    # Delete (twice: the second one is a no-op)
    # -----------------------------
    print("\nDeleting product...")
    print(c.delete_product(rice["id"]))
    print(c.delete_product(rice["id"]))

    remaining = [p["id"] for p in c.list_products()]
    print("\nStill listed:", rice["id"] in remaining)


if __name__ == "__main__":
    main()
