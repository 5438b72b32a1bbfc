#!/usr/bin/env python
"""
Business Reports CLI

Run the fifteen food-delivery business reports.

Usage:
    # All reports over CSV files in ./data
    python run_reports.py

    # Reports over a SQLite database, as of a fixed date
    python run_reports.py --db food_delivery.db --as-of 2024-06-30

    # Only Q9 and Q15, exported to CSV
    python run_reports.py --query 9 --query average_delivery_time --export-dir exports
"""

from delivery_analytics.reporting.runner import main

if __name__ == "__main__":
    main()
