# 📄 File: farmx/modules/storefront/infrastructure/database/__init__.py
