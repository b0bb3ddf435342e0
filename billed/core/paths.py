"""Navigation targets understood by the front-end router."""
from __future__ import annotations

ROUTES_PATH: dict[str, str] = {
    "Login": "/",
    "Bills": "#employee/bills",
    "NewBill": "#employee/bill/new",
    "Dashboard": "#admin/dashboard",
}

BILLS_PATH = ROUTES_PATH["Bills"]
