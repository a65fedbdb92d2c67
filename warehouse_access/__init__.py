# Warehouse Access
# Credential store and role-based authorization for the warehouse management system

__version__ = "1.0.0"
