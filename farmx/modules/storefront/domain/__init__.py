# 📄 File: farmx/modules/storefront/domain/__init__.py
