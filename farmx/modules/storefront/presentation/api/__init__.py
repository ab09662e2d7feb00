# 📄 File: farmx/modules/storefront/presentation/api/__init__.py
