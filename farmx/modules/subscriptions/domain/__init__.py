# 📄 File: farmx/modules/subscriptions/domain/__init__.py
