"""
Example 02: Flattened Records

This example maps one joined row into a record that embeds another derived
record, and shows prefixed conversion through ModelMapper.
"""

import sqlite3
from dataclasses import dataclass, field
from typing import Annotated

from pg_mapper import Collection, Flatten, ModelMapper, postgres_mapper


@postgres_mapper(table="addresses")
@dataclass
class Address:
    street: str
    city: str


@postgres_mapper(table="customers")
@dataclass
class Customer:
    id: int
    name: str
    address: Annotated[Address, Flatten]
    order_ids: Annotated[list[int], Collection] = field(default_factory=list)


def main():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("CREATE TABLE customers (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    conn.execute(
        "CREATE TABLE addresses "
        "(customer_id INTEGER NOT NULL, street TEXT NOT NULL, city TEXT NOT NULL)"
    )
    conn.execute("INSERT INTO customers (id, name) VALUES (1, 'Alice')")
    conn.execute("INSERT INTO addresses (customer_id, street, city) VALUES (1, 'Main St', 'Oslo')")

    print("=== Flattened Records ===\n")

    # The nested record reads its columns from the same row, same prefix
    print("1. Joined row:")
    row = conn.execute("""
        SELECT customers.id, customers.name, addresses.street, addresses.city
        FROM customers JOIN addresses ON addresses.customer_id = customers.id
    """).fetchone()
    customer = Customer.from_row(row)
    print(f"   {customer}\n")

    # Collections are excluded from the column list and filled by the caller
    print("2. Column list:")
    print(f"   {Customer.sql_fields()!r}\n")

    print("3. Prefixed columns via ModelMapper:")
    rows = conn.execute("""
        SELECT customers.id AS c__id, customers.name AS c__name,
               addresses.street AS c__street, addresses.city AS c__city
        FROM customers JOIN addresses ON addresses.customer_id = customers.id
    """).fetchall()
    for c in ModelMapper(Customer, prefix="c__").map_many(rows):
        print(f"   - {c.name} lives on {c.address.street}, {c.address.city}")
    print()

    conn.close()


if __name__ == "__main__":
    main()
