# 📄 File: farmx/modules/storefront/domain/repositories/__init__.py
