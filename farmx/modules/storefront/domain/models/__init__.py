# 📄 File: farmx/modules/storefront/domain/models/__init__.py
