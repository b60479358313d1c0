# Overview: Service-layer operations for customers.

from __future__ import annotations

from ..models import Customer
from ..validation import ResourcePolicy
from . import resource_service

CUSTOMER_POLICY = ResourcePolicy(
    required_on_create=("user_id", "customer_id", "name", "delivery", "email", "contact"),
    editable_fields=("customer_id", "name", "delivery", "email", "contact", "status"),
    required_on_update=("customer_id", "name", "delivery", "email", "contact"),
)


def list_customers(user_id=None) -> list[dict]:
    return resource_service.list_records(Customer, user_id, label="Customer")


def create_customer(payload) -> Customer:
    return resource_service.create_record(Customer, payload, policy=CUSTOMER_POLICY)


def update_customer(payload) -> Customer:
    return resource_service.update_record(Customer, payload, policy=CUSTOMER_POLICY, label="Customer")


def delete_customer(payload) -> None:
    resource_service.delete_record(Customer, payload, label="Customer")
