# 📄 File: farmx/modules/storefront/infrastructure/__init__.py
