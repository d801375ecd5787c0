#!/usr/bin/env python3
"""
Seed script: creates characters, catalog items, item instances and auctions via the API (no direct DB).
Ensures: PostgreSQL has a populated marketplace; the sweeper has listings to expire.
Run: API must be running; httpx comes with the `scripts` extra (pip install -e ".[scripts]").
  python scripts/seed_data.py
  python scripts/seed_data.py --characters 50 --items-per-character 10 --auction-ratio 0.5
"""

import argparse
import random

import httpx

API_BASE = "http://localhost:8000/api/v1"

CLASSES = ["warrior", "mage", "ranger"]

NAME_PARTS = [
    "Ar", "Bel", "Cor", "Dra", "El", "Fen", "Gal", "Hal", "Ith", "Kor",
    "Lyr", "Mor", "Nym", "Or", "Pel", "Quin", "Ryn", "Syl", "Tor", "Vex",
]

ITEM_NAMES = [
    "Iron Sword", "Steel Longsword", "Oak Staff", "Ashwood Bow", "Leather Cap",
    "Chainmail Vest", "Tower Shield", "Healing Potion", "Mana Potion", "Silver Ring",
    "Amulet of Embers", "Boots of Haste", "Frost Wand", "Elven Cloak", "Dwarven Axe",
    "Runed Dagger", "Crystal Orb", "Dragon Scale", "Phoenix Feather", "Wolf Pelt",
]


def random_character_name(i: int) -> str:
    return "".join(random.sample(NAME_PARTS, 2)) + str(i + 1)


def random_gold() -> int:
    return random.choice([0, 50, 100, 250, 500, 1000, 2500, 5000])


def random_price() -> int:
    return random.choice([1, 5, 10, 25, 50, 100, 250, 500, 1000])


def main():
    ap = argparse.ArgumentParser(description="Seed characters, items and auctions via API")
    ap.add_argument("--characters", type=int, default=30, help="Number of characters to create")
    ap.add_argument("--items-per-character", type=int, default=5, help="Item instances per character")
    ap.add_argument("--auction-ratio", type=float, default=0.3, help="Share of instances put up for auction")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    characters = []
    instances = 0
    auctions = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        # 1) Catalog
        print(f"Creating {len(ITEM_NAMES)} catalog items...")
        catalog = []
        for name in ITEM_NAMES:
            r = client.post("/items", json={"name": name})
            if r.status_code == 201:
                catalog.append(r.json()["id"])
            elif r.status_code != 409:
                errors.append(f"Item {name}: {r.status_code} {r.text[:80]}")
        if not catalog:
            catalog = [i["id"] for i in client.get("/items", params={"limit": 100}).json()]

        # 2) Characters
        print(f"Creating {args.characters} characters...")
        for i in range(args.characters):
            name = random_character_name(i)
            r = client.post(
                "/characters",
                json={"name": name, "class": random.choice(CLASSES), "gold": random_gold()},
            )
            if r.status_code == 201:
                characters.append(name)
            else:
                errors.append(f"Character {name}: {r.status_code} {r.text[:80]}")
            if (i + 1) % 10 == 0:
                print(f"  ... {i+1} characters")

        # 3) Inventories and listings
        print(f"Acquiring ~{len(characters) * args.items_per_character} item instances...")
        for name in characters:
            for _ in range(args.items_per_character):
                r = client.post(f"/characters/{name}/items", json={"item_id": random.choice(catalog)})
                if r.status_code != 201:
                    errors.append(f"Instance for {name}: {r.status_code}")
                    continue
                instances += 1
                if random.random() >= args.auction_ratio:
                    continue
                instance_id = r.json()["id"]
                r2 = client.post(
                    f"/characters/{name}/items/{instance_id}/auctions",
                    json={"price": random_price()},
                )
                if r2.status_code == 201:
                    auctions += 1
                else:
                    errors.append(f"Auction for {name}: {r2.status_code}")

    print(f"\nDone. Characters: {len(characters)}, Instances: {instances}, Auctions: {auctions}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")
    print("\nTip: Listings close after AUCTION_DURATION_SECONDS; GET /auctions?status=expired shows swept ones.")


if __name__ == "__main__":
    main()
