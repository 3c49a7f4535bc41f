from .catalog import GameItem, GameInventory
from .customers import CustomerAddress, Customer, Invoice
from .staff import Employee, EmployeePayRate
from .audit import AuditLog

__all__ = [
    'GameItem', 'GameInventory',
    'CustomerAddress', 'Customer', 'Invoice',
    'Employee', 'EmployeePayRate',
    'AuditLog',
]
