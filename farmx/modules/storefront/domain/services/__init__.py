# 📄 File: farmx/modules/storefront/domain/services/__init__.py
