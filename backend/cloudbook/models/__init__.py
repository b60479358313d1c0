from .auth import Admin, Employee
from .customers import Customer
from .inventory import Product
from .sales import Invoice
from .settings import Currency, General, Terms, PermissionSet

__all__ = [
    'Admin', 'Employee',
    'Customer',
    'Product',
    'Invoice',
    'Currency', 'General', 'Terms', 'PermissionSet',
]
