"""Data schemas and validation for the food-delivery tables."""

from datetime import date, time
from enum import Enum

import pandera.polars as pa
import polars as pl
from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """Known order statuses."""

    COMPLETED = "Completed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


class DeliveryStatus(str, Enum):
    """Known delivery statuses."""

    COMPLETED = "Completed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


# -----------------------------------------------------------------------------
# Record Schemas (Pydantic) - for record-oriented ingestion
# -----------------------------------------------------------------------------


class Customer(BaseModel):
    """A registered customer."""

    customer_id: int
    customer_name: str | None = None
    reg_date: date | None = None


class Restaurant(BaseModel):
    """A restaurant listed on the platform."""

    restaurant_id: int
    restaurant_name: str | None = None
    city: str | None = None
    opening_hours: str | None = None  # free text, e.g. "9:00 AM - 11:00 PM"


class Rider(BaseModel):
    """A delivery rider."""

    rider_id: int
    rider_name: str | None = None
    signup_date: date | None = None


class Delivery(BaseModel):
    """A delivery handled by a rider."""

    delivery_id: int
    delivery_status: str | None = None
    delivery_time: str | None = None  # free text, e.g. "32 minutes"
    rider_id: int | None = None


class Order(BaseModel):
    """An order placed by a customer at a restaurant."""

    order_id: int
    customer_id: int | None = None
    restaurant_id: int | None = None
    order_item: str | None = None
    order_date: date | None = None
    order_time: time | None = None
    order_status: str | None = None
    total_amount: float | None = Field(default=None, ge=0)


# -----------------------------------------------------------------------------
# Column Schemas (Polars) - dtypes of the in-memory tables
# -----------------------------------------------------------------------------

CUSTOMERS_SCHEMA: dict[str, pl.DataType] = {
    "customer_id": pl.Int64,
    "customer_name": pl.String,
    "reg_date": pl.Date,
}

RESTAURANTS_SCHEMA: dict[str, pl.DataType] = {
    "restaurant_id": pl.Int64,
    "restaurant_name": pl.String,
    "city": pl.String,
    "opening_hours": pl.String,
}

RIDERS_SCHEMA: dict[str, pl.DataType] = {
    "rider_id": pl.Int64,
    "rider_name": pl.String,
    "signup_date": pl.Date,
}

DELIVERIES_SCHEMA: dict[str, pl.DataType] = {
    "delivery_id": pl.Int64,
    "delivery_status": pl.String,
    "delivery_time": pl.String,
    "rider_id": pl.Int64,
}

ORDERS_SCHEMA: dict[str, pl.DataType] = {
    "order_id": pl.Int64,
    "customer_id": pl.Int64,
    "restaurant_id": pl.Int64,
    "order_item": pl.String,
    "order_date": pl.Date,
    "order_time": pl.Time,
    "order_status": pl.String,
    "total_amount": pl.Float64,
}

TABLE_SCHEMAS: dict[str, dict[str, pl.DataType]] = {
    "customers": CUSTOMERS_SCHEMA,
    "restaurants": RESTAURANTS_SCHEMA,
    "riders": RIDERS_SCHEMA,
    "deliveries": DELIVERIES_SCHEMA,
    "orders": ORDERS_SCHEMA,
}

RECORD_MODELS: dict[str, type[BaseModel]] = {
    "customers": Customer,
    "restaurants": Restaurant,
    "riders": Rider,
    "deliveries": Delivery,
    "orders": Order,
}


# -----------------------------------------------------------------------------
# Table Schemas (Pandera) - for DataFrame validation
# -----------------------------------------------------------------------------


class CustomersSchema(pa.DataFrameModel):
    """Schema for the customers table."""

    customer_id: int = pa.Field(unique=True)
    customer_name: str = pa.Field(nullable=True)
    reg_date: pl.Date = pa.Field(nullable=True)


class RestaurantsSchema(pa.DataFrameModel):
    """Schema for the restaurants table."""

    restaurant_id: int = pa.Field(unique=True)
    restaurant_name: str = pa.Field(nullable=True)
    city: str = pa.Field(nullable=True)
    opening_hours: str = pa.Field(nullable=True)


class RidersSchema(pa.DataFrameModel):
    """Schema for the riders table."""

    rider_id: int = pa.Field(unique=True)
    rider_name: str = pa.Field(nullable=True)
    signup_date: pl.Date = pa.Field(nullable=True)


class DeliveriesSchema(pa.DataFrameModel):
    """Schema for the deliveries table."""

    delivery_id: int = pa.Field(unique=True)
    delivery_status: str = pa.Field(nullable=True)
    delivery_time: str = pa.Field(nullable=True)
    rider_id: int = pa.Field(nullable=True)


class OrdersSchema(pa.DataFrameModel):
    """Schema for the orders table."""

    order_id: int = pa.Field(unique=True)
    customer_id: int = pa.Field(nullable=True)
    restaurant_id: int = pa.Field(nullable=True)
    order_item: str = pa.Field(nullable=True)
    order_date: pl.Date = pa.Field(nullable=True)
    order_time: pl.Time = pa.Field(nullable=True)
    order_status: str = pa.Field(nullable=True)
    total_amount: float = pa.Field(ge=0, nullable=True)


TABLE_MODELS: dict[str, type[pa.DataFrameModel]] = {
    "customers": CustomersSchema,
    "restaurants": RestaurantsSchema,
    "riders": RidersSchema,
    "deliveries": DeliveriesSchema,
    "orders": OrdersSchema,
}
