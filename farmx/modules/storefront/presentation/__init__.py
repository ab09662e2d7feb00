# 📄 File: farmx/modules/storefront/presentation/__init__.py
