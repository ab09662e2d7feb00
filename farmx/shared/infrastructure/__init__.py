# 📄 File: farmx/shared/infrastructure/__init__.py
