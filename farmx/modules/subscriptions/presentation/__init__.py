# 📄 File: farmx/modules/subscriptions/presentation/__init__.py
