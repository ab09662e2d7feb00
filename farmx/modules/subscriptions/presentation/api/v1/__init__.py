# 📄 File: farmx/modules/subscriptions/presentation/api/v1/__init__.py
