"""Shared fixtures: a small platform snapshot with hand-checked answers."""

from datetime import date, time
from pathlib import Path

import pytest

from delivery_analytics.data.store import DataStore

REFERENCE_DATE = date(2024, 6, 15)


CUSTOMERS = [
    {"customer_id": 1, "customer_name": "Alice", "reg_date": date(2023, 1, 5)},
    {"customer_id": 2, "customer_name": "Bob", "reg_date": date(2023, 3, 9)},
    {"customer_id": 3, "customer_name": "Cara", "reg_date": date(2023, 7, 21)},
    {"customer_id": 4, "customer_name": "Dan", "reg_date": date(2024, 2, 2)},
]

RESTAURANTS = [
    {"restaurant_id": 1, "restaurant_name": "Pasta Place", "city": "Metro", "opening_hours": "9:00 AM - 11:00 PM"},
    {"restaurant_id": 2, "restaurant_name": "Sushi Spot", "city": "Metro", "opening_hours": "11:00 AM - 10:00 PM"},
    {"restaurant_id": 3, "restaurant_name": "Taco Town", "city": "Harbor", "opening_hours": "10:00 AM - 9:00 PM"},
]

RIDERS = [
    {"rider_id": 1, "rider_name": "Ravi", "signup_date": date(2023, 2, 1)},
    {"rider_id": 2, "rider_name": "Sam", "signup_date": date(2023, 4, 1)},
    {"rider_id": 3, "rider_name": "Tia", "signup_date": date(2023, 6, 1)},
]

ORDERS = [
    {"order_id": 1, "customer_id": 1, "restaurant_id": 1, "order_item": "Pizza",
     "order_date": date(2024, 6, 14), "order_time": time(12, 10), "order_status": "Completed", "total_amount": 20.0},
    {"order_id": 2, "customer_id": 1, "restaurant_id": 1, "order_item": "Pizza",
     "order_date": date(2024, 6, 10), "order_time": time(12, 45), "order_status": "Completed", "total_amount": 30.0},
    {"order_id": 3, "customer_id": 2, "restaurant_id": 2, "order_item": "Sushi",
     "order_date": date(2024, 6, 1), "order_time": time(19, 5), "order_status": "Completed", "total_amount": 50.0},
    {"order_id": 4, "customer_id": 2, "restaurant_id": 1, "order_item": "Pasta",
     "order_date": date(2024, 5, 20), "order_time": time(19, 30), "order_status": "Cancelled", "total_amount": 15.0},
    {"order_id": 5, "customer_id": 3, "restaurant_id": 3, "order_item": "Tacos",
     "order_date": date(2024, 4, 1), "order_time": time(13, 0), "order_status": "Completed", "total_amount": 12.5},
    {"order_id": 6, "customer_id": 3, "restaurant_id": 3, "order_item": "Tacos",
     "order_date": date(2024, 5, 16), "order_time": time(20, 15), "order_status": "Pending", "total_amount": 10.0},
    {"order_id": 7, "customer_id": 1, "restaurant_id": 2, "order_item": "Sushi",
     "order_date": date(2024, 5, 15), "order_time": time(12, 0), "order_status": "Cancelled", "total_amount": 40.0},
]


def build_deliveries() -> list[dict]:
    """
    Ravi: 10 completed "30 minutes" (ids 1-10) + 1 completed "N/A" (id 11)
    Sam:  9 completed "20 minutes" (ids 12-20) + 1 completed "25 mins" (id 21)
    Tia:  9 completed "10 minutes" (ids 22-30) + 1 pending "15 minutes" (id 31)
    """
    deliveries = []

    def add(rider_id: int, status: str, delivery_time: str) -> None:
        deliveries.append(
            {
                "delivery_id": len(deliveries) + 1,
                "delivery_status": status,
                "delivery_time": delivery_time,
                "rider_id": rider_id,
            }
        )

    for _ in range(10):
        add(1, "Completed", "30 minutes")
    add(1, "Completed", "N/A")
    for _ in range(9):
        add(2, "Completed", "20 minutes")
    add(2, "Completed", "25 mins")
    for _ in range(9):
        add(3, "Completed", "10 minutes")
    add(3, "Pending", "15 minutes")

    return deliveries


@pytest.fixture
def reference_date() -> date:
    return REFERENCE_DATE


@pytest.fixture
def store() -> DataStore:
    return DataStore.from_records(
        customers=CUSTOMERS,
        restaurants=RESTAURANTS,
        riders=RIDERS,
        deliveries=build_deliveries(),
        orders=ORDERS,
    )


def write_csv_dir(store: DataStore, path: Path) -> Path:
    """Write every table of a store as <table>.csv under path."""
    path.mkdir(parents=True, exist_ok=True)
    for name in ("customers", "restaurants", "riders", "deliveries", "orders"):
        store.table(name).write_csv(
            path / f"{name}.csv",
            date_format="%Y-%m-%d",
            time_format="%H:%M:%S",
        )
    return path


@pytest.fixture
def csv_dir(store: DataStore, tmp_path: Path) -> Path:
    return write_csv_dir(store, tmp_path / "data")
