"""Back-office package.

Organized by feature modules (products, inventory, sales, orders, deliveries,
finance, attendance, payroll, ...) with a thin Flask controller layer on top of
service and repository layers.
"""
