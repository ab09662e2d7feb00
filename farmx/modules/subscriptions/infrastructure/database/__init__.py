# 📄 File: farmx/modules/subscriptions/infrastructure/database/__init__.py
