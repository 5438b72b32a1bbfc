"""Report query definitions.

This module defines WHAT business questions the reports answer, not HOW.
Each query definition includes:
- number: position in the report (1-15)
- name: unique identifier, also used for export file names
- title: the business question
- columns: output columns, in order
- function: the computation in delivery_analytics.queries.computation
- parameters: (function keyword, Settings attribute supplying its value) pairs
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

import polars as pl

from delivery_analytics.data.store import DataStore
from delivery_analytics.queries import computation

QueryFunction = Callable[..., pl.DataFrame]


@dataclass(frozen=True)
class QueryDefinition:
    """Definition of a report query."""

    number: int
    name: str
    title: str
    columns: tuple[str, ...]
    function: QueryFunction
    parameters: tuple[tuple[str, str], ...] = ()

    @property
    def label(self) -> str:
        return f"Q{self.number}. {self.title}"

    def __call__(self, store: DataStore, now: date | datetime, **kwargs) -> pl.DataFrame:
        return self.function(store, now, **kwargs)


# -----------------------------------------------------------------------------
# Query Registry
# -----------------------------------------------------------------------------

QUERY_DEFINITIONS: dict[str, QueryDefinition] = {}


def register_query(query: QueryDefinition) -> QueryDefinition:
    """Register a query definition."""
    if query.name in QUERY_DEFINITIONS:
        raise ValueError(f"Query already registered: {query.name}")
    QUERY_DEFINITIONS[query.name] = query
    return query


def get_query(key: str | int) -> QueryDefinition:
    """Look a query up by name or number."""
    if isinstance(key, int) or (isinstance(key, str) and key.isdigit()):
        number = int(key)
        for query in QUERY_DEFINITIONS.values():
            if query.number == number:
                return query
        raise KeyError(f"Unknown query number: {number}")

    if key not in QUERY_DEFINITIONS:
        raise KeyError(f"Unknown query: {key}")
    return QUERY_DEFINITIONS[key]


active_customers = register_query(
    QueryDefinition(
        number=1,
        name="active_customers",
        title="How many active customers are there on the platform?",
        columns=("active_customers",),
        function=computation.active_customers,
        parameters=(("window_days", "active_window_days"),),
    )
)

restaurant_density = register_query(
    QueryDefinition(
        number=2,
        name="restaurant_density",
        title="Which cities have the highest restaurant density on the platform?",
        columns=("city", "total_restaurants"),
        function=computation.restaurant_density,
    )
)

top_spenders = register_query(
    QueryDefinition(
        number=3,
        name="top_spenders",
        title="Who are the top high-value customers based on total spending?",
        columns=("customer_id", "customer_name", "total_spent"),
        function=computation.top_spenders,
        parameters=(("limit", "top_spenders_limit"),),
    )
)

top_restaurants = register_query(
    QueryDefinition(
        number=4,
        name="top_restaurants",
        title="Which restaurants perform best by number of completed orders?",
        columns=("restaurant_id", "restaurant_name", "completed_orders"),
        function=computation.top_restaurants,
        parameters=(("limit", "top_restaurants_limit"),),
    )
)

popular_items = register_query(
    QueryDefinition(
        number=5,
        name="popular_items",
        title="What are the most frequently ordered food items?",
        columns=("order_item", "times_ordered"),
        function=computation.popular_items,
        parameters=(("limit", "top_items_limit"),),
    )
)

daily_revenue = register_query(
    QueryDefinition(
        number=6,
        name="daily_revenue",
        title="What was the daily revenue over the last month?",
        columns=("order_date", "daily_revenue"),
        function=computation.daily_revenue,
        parameters=(("window_days", "revenue_window_days"),),
    )
)

orders_by_hour = register_query(
    QueryDefinition(
        number=7,
        name="orders_by_hour",
        title="What time of day sees the most orders?",
        columns=("hour_of_day", "total_orders"),
        function=computation.orders_by_hour,
    )
)

unique_customers_per_restaurant = register_query(
    QueryDefinition(
        number=8,
        name="unique_customers_per_restaurant",
        title="How many unique customers ordered from each restaurant?",
        columns=("restaurant_id", "restaurant_name", "unique_customers"),
        function=computation.unique_customers_per_restaurant,
    )
)

fastest_riders = register_query(
    QueryDefinition(
        number=9,
        name="fastest_riders",
        title="Which riders have the fastest average delivery times?",
        columns=("rider_id", "rider_name", "avg_minutes"),
        function=computation.fastest_riders,
        parameters=(
            ("min_deliveries", "min_completed_deliveries"),
            ("limit", "fastest_riders_limit"),
        ),
    )
)

cancellation_rate_by_city = register_query(
    QueryDefinition(
        number=10,
        name="cancellation_rate_by_city",
        title="What is the cancellation rate per city?",
        columns=("city", "cancellation_rate"),
        function=computation.cancellation_rate_by_city,
    )
)

frequent_customers = register_query(
    QueryDefinition(
        number=11,
        name="frequent_customers",
        title="Which customers placed more than 5 orders overall?",
        columns=("customer_id", "customer_name", "total_orders"),
        function=computation.frequent_customers,
        parameters=(("min_orders", "frequent_customer_min_orders"),),
    )
)

average_order_value = register_query(
    QueryDefinition(
        number=12,
        name="average_order_value",
        title="What is the average order value per restaurant?",
        columns=("restaurant_id", "restaurant_name", "avg_order_value"),
        function=computation.average_order_value,
    )
)

order_status_distribution = register_query(
    QueryDefinition(
        number=13,
        name="order_status_distribution",
        title="What percentage of orders are completed, pending, or cancelled?",
        columns=("order_status", "percentage"),
        function=computation.order_status_distribution,
    )
)

top_riders_last_month = register_query(
    QueryDefinition(
        number=14,
        name="top_riders_last_month",
        title="Which riders completed the most deliveries last month?",
        columns=("rider_id", "rider_name", "deliveries_completed"),
        function=computation.top_riders_last_month,
        parameters=(("limit", "top_riders_limit"),),
    )
)

average_delivery_time = register_query(
    QueryDefinition(
        number=15,
        name="average_delivery_time",
        title="What is the average delivery time for each rider (in minutes)?",
        columns=("rider_id", "rider_name", "avg_delivery_time"),
        function=computation.average_delivery_time,
    )
)


# Report order
ALL_QUERIES = sorted(QUERY_DEFINITIONS.values(), key=lambda query: query.number)
