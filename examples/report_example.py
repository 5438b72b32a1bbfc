"""
Example: Running the Business Reports

This script demonstrates how to:
1. Build a store from records (no files needed)
2. Run all reports as of a fixed date
3. Print one report and export everything to CSV
"""

from datetime import date, time

from delivery_analytics.data.store import DataStore
from delivery_analytics.reporting.runner import ReportRunner, export_csv, render


def main():
    print("=== Business Report Example ===\n")

    # Build a tiny snapshot
    print("1. Building store...")
    store = DataStore.from_records(
        customers=[
            {"customer_id": 1, "customer_name": "Alice", "reg_date": date(2024, 1, 5)},
            {"customer_id": 2, "customer_name": "Bob", "reg_date": date(2024, 2, 9)},
        ],
        restaurants=[
            {"restaurant_id": 1, "restaurant_name": "Pasta Place", "city": "Metro"},
            {"restaurant_id": 2, "restaurant_name": "Taco Town", "city": "Harbor"},
        ],
        riders=[{"rider_id": 1, "rider_name": "Ravi", "signup_date": date(2024, 1, 1)}],
        deliveries=[
            {"delivery_id": 1, "delivery_status": "Completed", "delivery_time": "32 minutes", "rider_id": 1},
            {"delivery_id": 2, "delivery_status": "Completed", "delivery_time": "N/A", "rider_id": 1},
        ],
        orders=[
            {"order_id": 1, "customer_id": 1, "restaurant_id": 1, "order_item": "Pizza",
             "order_date": date(2024, 6, 10), "order_time": time(12, 30),
             "order_status": "Completed", "total_amount": 24.0},
            {"order_id": 2, "customer_id": 2, "restaurant_id": 2, "order_item": "Tacos",
             "order_date": date(2024, 6, 12), "order_time": time(19, 5),
             "order_status": "Cancelled", "total_amount": 11.5},
        ],
    )
    print(f"   {store!r}\n")

    # Run everything as of a fixed date
    print("2. Running reports as of 2024-06-15...")
    runner = ReportRunner(store, now=date(2024, 6, 15))
    results = runner.run_all()
    print(f"   {len(results)} reports\n")

    # Show one report
    print("3. Cancellation rate per city:")
    print(render([runner.run_query("cancellation_rate_by_city")]))
    print()

    # Export all of them
    print("4. Exporting to exports/ ...")
    paths = export_csv(results, "exports")
    for path in paths[:3]:
        print(f"   {path}")
    print(f"   ... {len(paths)} files total")


if __name__ == "__main__":
    main()
