# 📄 File: farmx/modules/storefront/__init__.py
