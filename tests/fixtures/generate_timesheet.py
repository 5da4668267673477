#!/usr/bin/env python3
"""
Generate a fake timesheet for one month and write it as CSV or XLSX.

The output can be fed to the invoicing CLI with --test <file>.

Usage:
    uv run python tests/fixtures/generate_timesheet.py --month 2024-01 --out /tmp/timesheet.xlsx
"""

import argparse
import calendar
import csv
import random
from datetime import date
from pathlib import Path

from faker import Faker
from openpyxl import Workbook

fake = Faker()

HEADERS = ["Date", "Hours", "Description", "Invoice no.", "Rate", "Customer"]

CUSTOMERS = ["Acme", "Globex", "Initech", ""]

WORK_DESCRIPTIONS = [
    "Implementation work",
    "Code review",
    "Bug fixing",
    "Standup meeting",
    "Frontend development",
    "Testing forms",
    "Deployment",
    "Client call",
]

HOUR_VALUES = ["0,25", "0.5", "1", "1,5", "2", "3", "4", "4.5", "8"]
RATE_VALUES = ["€35,00", "€ 40.00", "€45,50", "€50", "60", ""]


def format_date(d: date) -> str:
    """Mix the two accepted date notations."""
    if random.random() < 0.7:
        return d.isoformat()
    return d.strftime("%d-%m-%Y")


def generate_rows(year: int, month: int, invoiced_ratio: float = 0.2) -> list[list[str]]:
    """One or two entries per working day, some already invoiced, some without hours."""
    rows = []
    days_in_month = calendar.monthrange(year, month)[1]
    invoice_number = f"{year}-{fake.random_int(100, 999)}"

    for day in range(1, days_in_month + 1):
        d = date(year, month, day)
        if d.weekday() >= 5:
            continue
        for _ in range(random.randint(1, 2)):
            hours = random.choice(HOUR_VALUES) if random.random() > 0.1 else ""
            description = random.choice(WORK_DESCRIPTIONS)
            if random.random() < 0.3:
                description = f"{description} - {fake.bs()}"
            rows.append(
                [
                    format_date(d),
                    hours,
                    description,
                    invoice_number if random.random() < invoiced_ratio else "",
                    random.choice(RATE_VALUES),
                    random.choice(CUSTOMERS),
                ]
            )
    return rows


def write_csv(path: Path, rows: list[list[str]]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter=";")
        writer.writerow(HEADERS)
        writer.writerows(rows)


def write_xlsx(path: Path, rows: list[list[str]]) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "Timesheet"
    ws.append(HEADERS)
    for row in rows:
        ws.append(row)
    wb.save(str(path))


def main():
    parser = argparse.ArgumentParser(description="Generate a fake timesheet")
    parser.add_argument("--month", default=date.today().strftime("%Y-%m"), help="YYYY-MM")
    parser.add_argument("--out", type=Path, required=True, help="Output .csv or .xlsx file")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)
        Faker.seed(args.seed)

    year, month = (int(part) for part in args.month.split("-"))
    rows = generate_rows(year, month)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    if args.out.suffix.lower() == ".xlsx":
        write_xlsx(args.out, rows)
    else:
        write_csv(args.out, rows)
    print(f"Wrote {len(rows)} rows to {args.out}")


if __name__ == "__main__":
    main()
