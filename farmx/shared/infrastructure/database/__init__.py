# 📄 File: farmx/shared/infrastructure/database/__init__.py
