"""Retail model: vendors, products and sales orders."""

import datetime
import decimal
import uuid


class Vendor:
    id: int
    name: str
    billing_entity: str


class Product:
    id: int
    sku: uuid.UUID
    name: str
    unit_price: decimal.Decimal
    vendor: Vendor


class LineItem:
    id: int
    product: Product
    quantity: int
    subtotal: decimal.Decimal


class SalesOrder:
    id: int
    placed_at: datetime.datetime
    line_items: list[LineItem]
    total: decimal.Decimal
