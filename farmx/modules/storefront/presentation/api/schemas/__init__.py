# 📄 File: farmx/modules/storefront/presentation/api/schemas/__init__.py
