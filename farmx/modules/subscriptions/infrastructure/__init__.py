# 📄 File: farmx/modules/subscriptions/infrastructure/__init__.py
