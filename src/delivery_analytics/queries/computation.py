"""Report query logic.

This module implements HOW each business question is answered from the
store. Every query:
- takes the store and a reference time ("now") plus keyword parameters
- reads only, never mutates the store
- returns a polars DataFrame with a fixed set of columns

Rankings break ties on the grouping key (ascending) so results are
deterministic. Joins are inner joins, so rows with dangling foreign keys
drop out of joined aggregations.
"""

from datetime import date, datetime, timedelta

import polars as pl

from delivery_analytics.data.store import DataStore
from delivery_analytics.delivery_time import labelled_minutes, leading_minutes
from delivery_analytics.schemas import DeliveryStatus, OrderStatus

COMPLETED_ORDER = OrderStatus.COMPLETED.value
CANCELLED_ORDER = OrderStatus.CANCELLED.value
COMPLETED_DELIVERY = DeliveryStatus.COMPLETED.value


def as_date(now: date | datetime) -> date:
    """The calendar date of the reference time."""
    if isinstance(now, datetime):
        return now.date()
    return now


def start_of_previous_month(now: date | datetime) -> date:
    """First day of the calendar month before the reference date."""
    first_of_month = as_date(now).replace(day=1)
    return (first_of_month - timedelta(days=1)).replace(day=1)


def _rank(df: pl.DataFrame, metric: str, key: str, descending: bool = True) -> pl.DataFrame:
    return df.sort([metric, key], descending=[descending, False], nulls_last=True)


def _customers(store: DataStore) -> pl.DataFrame:
    return store.customers.select("customer_id", "customer_name")


def _restaurants(store: DataStore) -> pl.DataFrame:
    return store.restaurants.select("restaurant_id", "restaurant_name")


def _riders(store: DataStore) -> pl.DataFrame:
    return store.riders.select("rider_id", "rider_name")


def _completed_orders(store: DataStore) -> pl.DataFrame:
    return store.orders.filter(pl.col("order_status") == COMPLETED_ORDER)


def _sum_or_null(column: str) -> pl.Expr:
    """Sum of a column, null when every value is null (SQL SUM)."""
    return pl.when(pl.col(column).count() > 0).then(pl.col(column).sum())


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------


def active_customers(
    store: DataStore,
    now: date | datetime,
    window_days: int = 30,
) -> pl.DataFrame:
    """
    Q1. Distinct customers with an order in the last window_days days.

    The lower bound is inclusive (order_date >= today - window_days). Always
    returns a single row; the count is 0 when nobody ordered.
    """
    since = as_date(now) - timedelta(days=window_days)

    count = (
        store.orders.filter(pl.col("order_date") >= since)
        .select(pl.col("customer_id").drop_nulls().n_unique())
        .item()
    )

    return pl.DataFrame({"active_customers": [int(count)]}, schema={"active_customers": pl.Int64})


def top_spenders(
    store: DataStore,
    now: date | datetime,
    limit: int = 10,
) -> pl.DataFrame:
    """Q3. Customers ranked by total spent on completed orders."""
    spent = (
        _completed_orders(store)
        .join(_customers(store), on="customer_id", how="inner")
        .group_by("customer_id", "customer_name")
        .agg(_sum_or_null("total_amount").alias("total_spent"))
    )
    return _rank(spent, "total_spent", "customer_id").head(limit)


def frequent_customers(
    store: DataStore,
    now: date | datetime,
    min_orders: int = 5,
) -> pl.DataFrame:
    """Q11. Customers with more than min_orders orders of any status."""
    counts = (
        store.orders.join(_customers(store), on="customer_id", how="inner")
        .group_by("customer_id", "customer_name")
        .agg(pl.len().alias("total_orders"))
        .filter(pl.col("total_orders") > min_orders)
    )
    return _rank(counts, "total_orders", "customer_id")


# -----------------------------------------------------------------------------
# Restaurants
# -----------------------------------------------------------------------------


def restaurant_density(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """Q2. Number of restaurants per city, densest first."""
    density = store.restaurants.group_by("city").agg(pl.len().alias("total_restaurants"))
    return _rank(density, "total_restaurants", "city")


def top_restaurants(
    store: DataStore,
    now: date | datetime,
    limit: int = 5,
) -> pl.DataFrame:
    """Q4. Restaurants ranked by number of completed orders."""
    completed = (
        _completed_orders(store)
        .join(_restaurants(store), on="restaurant_id", how="inner")
        .group_by("restaurant_id", "restaurant_name")
        .agg(pl.len().alias("completed_orders"))
    )
    return _rank(completed, "completed_orders", "restaurant_id").head(limit)


def unique_customers_per_restaurant(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """Q8. Distinct customers per restaurant across orders of any status."""
    unique = (
        store.orders.join(_restaurants(store), on="restaurant_id", how="inner")
        .group_by("restaurant_id", "restaurant_name")
        .agg(pl.col("customer_id").drop_nulls().n_unique().alias("unique_customers"))
    )
    return _rank(unique, "unique_customers", "restaurant_id")


def cancellation_rate_by_city(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """
    Q10. Percentage of cancelled orders per restaurant city.

    Every emitted city has at least one order, so the rate is always
    defined and lies in [0, 100].
    """
    rates = (
        store.orders.join(
            store.restaurants.select("restaurant_id", "city"), on="restaurant_id", how="inner"
        )
        .group_by("city")
        .agg(
            ((pl.col("order_status") == CANCELLED_ORDER).sum() / pl.len() * 100)
            .round(2)
            .alias("cancellation_rate")
        )
    )
    return _rank(rates, "cancellation_rate", "city")


def average_order_value(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """Q12. Mean completed order amount per restaurant."""
    values = (
        _completed_orders(store)
        .join(_restaurants(store), on="restaurant_id", how="inner")
        .group_by("restaurant_id", "restaurant_name")
        .agg(pl.col("total_amount").mean().round(2).alias("avg_order_value"))
    )
    return _rank(values, "avg_order_value", "restaurant_id")


# -----------------------------------------------------------------------------
# Orders
# -----------------------------------------------------------------------------


def popular_items(
    store: DataStore,
    now: date | datetime,
    limit: int = 10,
) -> pl.DataFrame:
    """Q5. Most frequently ordered items, regardless of order status."""
    items = store.orders.group_by("order_item").agg(pl.len().alias("times_ordered"))
    return _rank(items, "times_ordered", "order_item").head(limit)


def daily_revenue(
    store: DataStore,
    now: date | datetime,
    window_days: int = 30,
) -> pl.DataFrame:
    """Q6. Completed revenue per day over the trailing window, oldest first."""
    since = as_date(now) - timedelta(days=window_days)

    return (
        _completed_orders(store)
        .filter(pl.col("order_date") >= since)
        .group_by("order_date")
        .agg(_sum_or_null("total_amount").alias("daily_revenue"))
        .sort("order_date")
    )


def orders_by_hour(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """Q7. Orders per hour of day (0-23), busiest first."""
    hours = (
        store.orders.group_by(pl.col("order_time").dt.hour().cast(pl.Int32).alias("hour_of_day"))
        .agg(pl.len().alias("total_orders"))
    )
    return _rank(hours, "total_orders", "hour_of_day")


def order_status_distribution(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """Q13. Share of all orders per order status, in percent."""
    return (
        store.orders.group_by("order_status")
        .agg(pl.len().alias("order_count"))
        .with_columns(
            (pl.col("order_count").cast(pl.Float64) * 100 / pl.col("order_count").sum())
            .round(2)
            .alias("percentage")
        )
        .select("order_status", "percentage")
        .sort(["percentage", "order_status"], descending=[True, False], nulls_last=True)
    )


# -----------------------------------------------------------------------------
# Riders
# -----------------------------------------------------------------------------


def fastest_riders(
    store: DataStore,
    now: date | datetime,
    min_deliveries: int = 10,
    limit: int = 10,
) -> pl.DataFrame:
    """
    Q9. Riders with the lowest mean completed delivery time.

    Only completed deliveries whose time has a leading integer count, both
    toward the mean and toward the min_deliveries threshold.
    """
    timed = (
        store.deliveries.filter(pl.col("delivery_status") == COMPLETED_DELIVERY)
        .with_columns(leading_minutes("delivery_time").alias("minutes"))
        .filter(pl.col("minutes").is_not_null())
        .join(_riders(store), on="rider_id", how="inner")
        .group_by("rider_id", "rider_name")
        .agg(
            pl.len().alias("deliveries"),
            pl.col("minutes").mean().round(2).alias("avg_minutes"),
        )
        .filter(pl.col("deliveries") >= min_deliveries)
        .select("rider_id", "rider_name", "avg_minutes")
    )
    return _rank(timed, "avg_minutes", "rider_id", descending=False).head(limit)


def top_riders_last_month(
    store: DataStore,
    now: date | datetime,
    limit: int = 10,
) -> pl.DataFrame:
    """
    Q14. Riders with the most completed deliveries tied to recent orders.

    A delivery counts when its delivery_id equals the order_id of a
    completed order dated on or after the first day of the previous month.
    Delivery ids and order ids are separate sequences in this data model;
    the match is kept exactly as the report defines it.
    """
    since = start_of_previous_month(now)

    order_ids = (
        _completed_orders(store)
        .filter(pl.col("order_date") >= since)
        .select(pl.col("order_id").alias("delivery_id"))
    )

    counts = (
        store.deliveries.filter(pl.col("delivery_status") == COMPLETED_DELIVERY)
        .join(order_ids, on="delivery_id", how="semi")
        .join(_riders(store), on="rider_id", how="inner")
        .group_by("rider_id", "rider_name")
        .agg(pl.len().alias("deliveries_completed"))
    )
    return _rank(counts, "deliveries_completed", "rider_id").head(limit)


def average_delivery_time(store: DataStore, now: date | datetime) -> pl.DataFrame:
    """
    Q15. Mean delivery time per rider over deliveries of any status.

    Times not ending in "minutes" count as 0.
    """
    averages = (
        store.deliveries.with_columns(labelled_minutes("delivery_time").alias("minutes"))
        .join(_riders(store), on="rider_id", how="inner")
        .group_by("rider_id", "rider_name")
        .agg(pl.col("minutes").mean().round(2).alias("avg_delivery_time"))
    )
    return _rank(averages, "avg_delivery_time", "rider_id", descending=False)
