# 📄 File: farmx/modules/subscriptions/domain/repositories/__init__.py
