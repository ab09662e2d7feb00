# 📄 File: farmx/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python that the 'farmx' folder holds our farm operations backend
# and records the basic version and package information.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version metadata for the FarmX
# FastAPI service (storefront checkout, subscriptions, scan analytics).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - farmx.main (application entry point)
# - farmx.api.v1.health (version reporting)

"""
FarmX Backend - Farm Operations API

Backend API for farms and ponds: a storefront with cart checkout,
plan subscriptions with a payment ledger, and health-scan analytics.
"""

__version__ = "1.0.0"
__title__ = "FarmX Backend API"
__description__ = "Farm operations backend"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
]
