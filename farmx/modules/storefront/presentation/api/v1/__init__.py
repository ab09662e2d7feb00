# 📄 File: farmx/modules/storefront/presentation/api/v1/__init__.py
